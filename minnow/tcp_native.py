"""Connect to or accept one TCP connection and copy it to stdin/stdout."""

from __future__ import annotations

import socket
import sys
from dataclasses import dataclass

from minnow.stream_copy import bidirectional_stream_copy


class UsageError(ValueError):
    """The command-line arguments are incomplete."""


@dataclass(frozen=True)
class NativeOptions:
    """Parsed command-line options."""

    server_mode: bool
    host: str
    port: str


def parse_args(argv: list[str]) -> NativeOptions:
    """Parse [program, (-l), host, port] into options."""
    if len(argv) < 3:
        raise UsageError("required arguments are missing")
    server_mode = argv[1] == "-l"
    if server_mode:
        if len(argv) < 4:
            raise UsageError("required arguments are missing")
        return NativeOptions(True, argv[2], argv[3])
    return NativeOptions(False, argv[1], argv[2])


def _resolve(host: str, port: str) -> tuple[int, tuple]:
    family, _, _, _, address = socket.getaddrinfo(host, port, type=socket.SOCK_STREAM)[0]
    return family, address


def _address_string(address: tuple) -> str:
    return f"{address[0]}:{address[1]}"


def open_socket(options: NativeOptions) -> socket.socket:
    """Connect in client mode; in server mode accept exactly one connection."""
    family, address = _resolve(options.host, options.port)
    if options.server_mode:
        with socket.socket(family, socket.SOCK_STREAM) as listener:
            listener.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            listener.bind(address)
            listener.listen()
            print("DEBUG: Listening for incoming connection...", file=sys.stderr)
            connected, peer = listener.accept()
        print(f"DEBUG: New connection from {_address_string(peer)}.", file=sys.stderr)
        return connected

    sock = socket.socket(family, socket.SOCK_STREAM)
    print(f"DEBUG: Connecting to {_address_string(address)}... ", end="", file=sys.stderr)
    try:
        sock.connect(address)
    except OSError:
        sock.close()
        raise
    print(
        f"DEBUG: Successfully connected to {_address_string(sock.getpeername())}.",
        file=sys.stderr,
    )
    return sock


def _show_usage(program: str) -> None:
    print(f"Usage: {program} [-l] <host> <port>\n", file=sys.stderr)
    print("  -l specifies listen mode; <host>:<port> is the listening address.", file=sys.stderr)


def main(argv: list[str] | None = None) -> int:
    """Run the command: tcp_native [-l] HOST PORT."""
    args = sys.argv if argv is None else argv
    program = args[0] if args else "tcp_native"
    try:
        options = parse_args(args)
    except UsageError:
        _show_usage(program)
        return 1
    try:
        with open_socket(options) as sock:
            bidirectional_stream_copy(sock, _address_string(sock.getpeername()))
    except Exception as exc:  # noqa: BLE001 - report any failure and exit
        print(f"Exception: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())