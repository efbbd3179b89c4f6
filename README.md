# minnow

Small command-line networking tools built on the Python standard library.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Commands

### webget

Connects to `HOST` on the HTTP port, sends an HTTP/1.1 `GET` request for
`PATH` with `Connection: close`, and writes the raw reply, headers
included, to standard output until the server closes the connection.

```
webget HOST PATH
```

Example:

```
webget example.com /index.html
```

With the wrong number of arguments it prints a usage message to standard
error and exits with status 1. Any failure while fetching is printed to
standard error and also gives status 1.

### tcp_native

Relays standard input to a TCP connection and the connection's data to
standard output, in both directions at once, until both directions have
finished.

Client mode connects to `<host>:<port>`:

```
tcp_native <host> <port>
```

Server mode (`-l`) binds to `<host>:<port>` with address reuse enabled,
accepts exactly one connection, and then relays it:

```
tcp_native -l <host> <port>
```

Progress messages are written to standard error with a `DEBUG:` prefix.
Missing arguments print a usage message and give exit status 1; any other
failure is reported as `Exception: ...` with status 1.

## Library use

The same pieces can be used from Python:

- `minnow.webget.get_url(host, path, output=None, port="http")` sends the
  request and copies the whole reply into the binary stream `output`
  (standard output by default).
- `minnow.stream_copy.bidirectional_stream_copy(sock, peer_name, input_fd=None, output_fd=None)`
  relays between a connected socket and two file descriptors (standard
  input and output by default). It makes the socket and both descriptors
  non-blocking, shuts down the socket's sending side once the input reaches
  end of file and everything has been sent, and closes `output_fd` once the
  socket's data has all been written out.
- `minnow.tcp_native.parse_args(argv)` turns `[program, (-l), host, port]`
  into a `NativeOptions` (`server_mode`, `host`, `port`), raising
  `minnow.tcp_native.UsageError` when arguments are missing.
  `minnow.tcp_native.open_socket(options)` returns the connected socket.
- `main(argv=None)` in `minnow.webget` and `minnow.tcp_native` runs the
  commands and returns the exit status.

## What it does not do

The TCP connections use the operating system's own TCP; the package has no
TCP implementation of its own and cannot run TCP over a tun device or send
raw IP datagrams. `webget` speaks plain HTTP only: no HTTPS, no redirects,
and no parsing of the reply.