# oscwire

oscwire is a small Open Sound Control (OSC) toolkit. It builds and parses OSC
messages and bundles, and it sends and receives them over UDP. It also
publishes values at a fixed rate and calls handlers for subscribed address
patterns.

It uses only the standard library and supports Python 3.10 and later.

## Messages

```python
from oscwire.message import Message

msg = Message("/synth/freq")
msg.push_int32(440)
msg.push_float(0.5)
msg.push_string("sine")
packet = msg.encode()

decoded = Message.from_bytes(packet)
decoded.arg_as_int32(0)     # 440
decoded.arg_as_string(2)    # "sine"
decoded.type_tags           # "ifs"
len(decoded)                # 3
decoded.match("/synth/*")   # True
```

`Message.push` picks the OSC type from the Python value:

- `bool` becomes `T` or `F`.
- `int` becomes `i`, or `h` when the value does not fit in 32 bits.
- `float` becomes `f`.
- `str` becomes `s`.
- `bytes`, `bytearray` and `memoryview` become `b`.

Other types raise `TypeError`. Use the typed methods to pick a type yourself:
`push_bool`, `push_int32`, `push_int64`, `push_float`, `push_double`,
`push_string` and `push_blob`.

To read an argument, call `Message.arg(index)`. It returns the value that the
argument's type tag names. The typed readers are `arg_as_int32`,
`arg_as_int64`, `arg_as_float`, `arg_as_double`, `arg_as_string`, `arg_as_blob`
and `arg_as_bool`. An index out of range raises `IndexError`.

`Message.from_bytes` raises `MessageError`, a subclass of `ValueError`, when the
bytes do not form a well-formed message.

`match(pattern)` understands the OSC wildcards `?`, `*`, `[...]`, `[!...]` and
`{a,b}`. With `full=False` the pattern needs to match only the leading parts of
the path.

## Bundles

```python
from oscwire.encoder import Encoder
from oscwire.decoder import Decoder
from oscwire.message import Message
from oscwire.types import TimeTag

enc = Encoder()
enc.begin_bundle(TimeTag.immediate())
enc.encode(Message("/a"))
enc.encode(Message("/b"))
enc.end_bundle()

for message in Decoder(enc.data()):
    print(message.address, int(message.time_tag))
```

Bundles can nest: call `begin_bundle` again before you close the open one.

`Decoder` reads a packet's messages in order. Call `decode()` once per message,
or iterate over the decoder. It raises `DecodeError` in two cases:

- the packet is not a multiple of four bytes, or its bundle structure is
  corrupted;
- no messages are left to decode.

A malformed message inside a packet is logged. The decoder returns it as an
empty `Message` whose `valid` attribute is `False`.

`oscwire.types` provides `TimeTag`, `TypeTag`, `ceil4` and `pad4`.

## Sending, publishing and subscribing

`OscManager` holds a `UdpMap`, which keeps one non-blocking UDP socket per local
port. The manager also holds a client for sending and a server for each port it
listens on.

```python
from oscwire.manager import OscManager
from oscwire.message import Message

with OscManager() as osc:
    # receive: handlers are called with the decoded arguments
    osc.subscribe(54321, "/lambda/msg", lambda i, f, s: print(i, f, s))

    # a handler whose only parameter is annotated as Message gets the whole message
    def on_reply(message: Message) -> None:
        print(message.address, message.remote_ip, message.remote_port)

    osc.subscribe(54321, "/need/reply", on_reply)

    # send once
    osc.send("127.0.0.1", 55555, "/reply", 1, 2.5, "text")

    # publish at the element's rate (every 33333 microseconds by default)
    element = osc.publish("127.0.0.1", 54445, "/publish/value", lambda: 42, "label")
    element.set_frame_rate(10)

    while True:
        osc.update()   # handle incoming packets, then send due publications
```

### Subscribing

A handler that is not a whole-message handler gets the message's arguments as
positional values. It is called only when it can accept that many arguments;
otherwise the mismatch is logged.

Each address pattern keeps the first handler subscribed to it. Port 9 cannot be
used for a server, and trying it raises `ValueError`.

`Server.dispatch(data, remote_ip, remote_port)` handles a packet you already
hold, without going through a socket. `Server.message()` returns the last
message handled.

### Publishing

A published value can be a constant, a callable that is read each time the
element is sent, or another `PublishElement` whose values are included in
place.

`set_frame_rate`, `set_interval_usec`, `set_interval_msec` and
`set_interval_sec` change how often an element is sent.

A destination that is already published keeps its first element. Use
`get_publish_element` to get the element registered for a destination.

### Sockets and cleanup

Sending from the client uses an ephemeral local port until a socket for a real
port is opened. `close()`, or leaving the `with` block, closes every socket.

## Logging

Decoding and dispatch problems are reported through
`oscwire.debuglog.get_manager()`. It returns a shared `LogManager` that writes
to standard output unless its `stream` is set.

- Set its `level` to a `LogLevel` (`NONE`, `ERRORS`, `WARNINGS`, `VERBOSE`).
- Set `enabled = False` to silence the `error`, `warning` and `verbose` calls.
- Use `option` and `delimiter` to choose the header fields and the separator.

## What it does not do

- Time tags are read and kept on each message, but messages are handled when
  they arrive. Nothing is scheduled by time tag.
- When a server receives a bundle, it dispatches only the first message in it.
  Use `Decoder` directly to read every message of a bundle.
- There is no command-line tool. The package is a library to be used from your
  own program's loop.