"""Open Sound Control messages, bundles, and UDP sending, publishing and subscribing."""

__version__ = "0.1.0"
__all__ = [
    "client",
    "debuglog",
    "decoder",
    "encoder",
    "manager",
    "message",
    "server",
    "types",
    "udpmap",
]