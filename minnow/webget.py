"""Fetch a web page over a plain TCP connection and write the response."""

from __future__ import annotations

import socket
import sys
from typing import BinaryIO


def _connect(host: str, port: str | int) -> socket.socket:
    family, kind, proto, _, address = socket.getaddrinfo(
        host, port, type=socket.SOCK_STREAM
    )[0]
    sock = socket.socket(family, kind, proto)
    try:
        sock.connect(address)
    except OSError:
        sock.close()
        raise
    return sock


def get_url(
    host: str,
    path: str,
    output: BinaryIO | None = None,
    port: str | int = "http",
) -> None:
    """Send an HTTP GET for path to host and copy the whole reply to output."""
    output = sys.stdout.buffer if output is None else output
    with _connect(host, port) as sock:
        sock.sendall(f"GET {path} HTTP/1.1\r\n".encode())
        sock.sendall(f"HOST: {host}\r\n".encode())
        sock.sendall(b"Connection: close\r\n")
        sock.sendall(b"\r\n")
        while chunk := sock.recv(65536):
            output.write(chunk)
    output.flush()


def main(argv: list[str] | None = None) -> int:
    """Run the command: webget HOST PATH."""
    args = sys.argv if argv is None else argv
    program = args[0] if args else "webget"
    if len(args) != 3:
        print(f"Usage: {program} HOST PATH", file=sys.stderr)
        print(f"\tExample: {program} stanford.edu /class/cs144", file=sys.stderr)
        return 1
    try:
        get_url(args[1], args[2])
    except Exception as exc:  # noqa: BLE001 - report any failure and exit
        print(exc, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())