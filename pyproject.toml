[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "oscwire"
version = "0.1.0"
description = "Open Sound Control messages, bundles, publishing and subscribing over UDP"
requires-python = ">=3.10"
dependencies = []
keywords = ["osc", "open sound control", "udp", "music", "networking"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Sound/Audio",
    "Topic :: System :: Networking",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["oscwire"]

[tool.pytest.ini_options]
addopts = "-ra"
