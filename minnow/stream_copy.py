"""Copy data between a connected socket and a pair of file descriptors."""

from __future__ import annotations

import os
import selectors
import socket
import sys
from dataclasses import dataclass
from typing import Callable

BUFFER_SIZE = 1048576

STDIN_FILENO = 0
STDOUT_FILENO = 1


class _Buffer:
    """A bounded in-memory byte queue with close and error flags."""

    def __init__(self, capacity: int) -> None:
        self.capacity = capacity
        self.data = bytearray()
        self.closed = False
        self.error = False

    @property
    def available_capacity(self) -> int:
        return self.capacity - len(self.data)

    @property
    def finished(self) -> bool:
        return self.closed and not self.data

    def push(self, chunk: bytes) -> None:
        if self.closed or self.error:
            return
        self.data += chunk[: self.available_capacity]

    def pop(self, count: int) -> None:
        del self.data[:count]


@dataclass
class _Rule:
    name: str
    fd: int
    events: int
    callback: Callable[[], None]
    interest: Callable[[], bool]
    on_error: Callable[[], None]
    cancelled: bool = False


def _debug(message: str) -> None:
    print(message, end="", file=sys.stderr, flush=True)


def bidirectional_stream_copy(
    sock: socket.socket,
    peer_name: str,
    input_fd: int | None = None,
    output_fd: int | None = None,
) -> None:
    """Copy input to the socket and the socket to output until both directions finish.

    The output descriptor is closed once the inbound direction has finished.
    """
    input_fd = STDIN_FILENO if input_fd is None else input_fd
    output_fd = STDOUT_FILENO if output_fd is None else output_fd

    outbound = _Buffer(BUFFER_SIZE)
    inbound = _Buffer(BUFFER_SIZE)
    outbound_shutdown = False
    inbound_shutdown = False

    sock.setblocking(False)
    os.set_blocking(input_fd, False)
    os.set_blocking(output_fd, False)

    def fail(message: str) -> Callable[[], None]:
        def handler() -> None:
            _debug(message)
            outbound.error = True
            inbound.error = True

        return handler

    def read_stdin() -> None:
        try:
            data = os.read(input_fd, outbound.available_capacity)
        except BlockingIOError:
            return
        outbound.push(data)
        if not data:
            outbound.closed = True

    def stdin_interest() -> bool:
        return (
            not outbound.error
            and not inbound.error
            and outbound.available_capacity > 0
            and not outbound.closed
        )

    def write_socket() -> None:
        nonlocal outbound_shutdown
        if outbound.data:
            try:
                sent = sock.send(outbound.data)
            except BlockingIOError:
                sent = 0
            outbound.pop(sent)
        if outbound.finished:
            sock.shutdown(socket.SHUT_WR)
            outbound_shutdown = True
            _debug(f"DEBUG: Outbound stream to {peer_name} finished.\n")

    def socket_out_interest() -> bool:
        return bool(outbound.data) or (outbound.finished and not outbound_shutdown)

    def read_socket() -> None:
        try:
            data = sock.recv(inbound.available_capacity)
        except BlockingIOError:
            return
        inbound.push(data)
        if not data:
            inbound.closed = True

    def socket_in_interest() -> bool:
        return (
            not inbound.error
            and not outbound.error
            and inbound.available_capacity > 0
            and not inbound.closed
        )

    def write_stdout() -> None:
        nonlocal inbound_shutdown
        if inbound.data:
            try:
                written = os.write(output_fd, inbound.data)
            except BlockingIOError:
                written = 0
            inbound.pop(written)
        if inbound.finished:
            os.close(output_fd)
            inbound_shutdown = True
            ending = " uncleanly.\n" if inbound.error else ".\n"
            _debug(f"DEBUG: Inbound stream from {peer_name} finished{ending}")

    def stdout_interest() -> bool:
        return bool(inbound.data) or (inbound.finished and not inbound_shutdown)

    rules = [
        _Rule(
            "read from stdin into outbound byte stream",
            input_fd,
            selectors.EVENT_READ,
            read_stdin,
            stdin_interest,
            fail("DEBUG: Outbound stream had error from source.\n"),
        ),
        _Rule(
            "read from outbound byte stream into socket",
            sock.fileno(),
            selectors.EVENT_WRITE,
            write_socket,
            socket_out_interest,
            fail("DEBUG: Outbound stream had error from destination.\n"),
        ),
        _Rule(
            "read from socket into inbound byte stream",
            sock.fileno(),
            selectors.EVENT_READ,
            read_socket,
            socket_in_interest,
            fail("DEBUG: Inbound stream had error from source.\n"),
        ),
        _Rule(
            "read from inbound byte stream into stdout",
            output_fd,
            selectors.EVENT_WRITE,
            write_stdout,
            stdout_interest,
            fail("DEBUG: Inbound stream had error from destination.\n"),
        ),
    ]

    with selectors.DefaultSelector() as selector:
        while True:
            active = [rule for rule in rules if not rule.cancelled and rule.interest()]
            if not active:
                return

            masks: dict[int, int] = {}
            for rule in active:
                masks[rule.fd] = masks.get(rule.fd, 0) | rule.events
            for fd, mask in masks.items():
                selector.register(fd, mask)
            try:
                ready = {key.fd: mask for key, mask in selector.select()}
            finally:
                for fd in masks:
                    selector.unregister(fd)

            for rule in active:
                if rule.cancelled or not ready.get(rule.fd, 0) & rule.events:
                    continue
                if not rule.interest():
                    continue
                try:
                    rule.callback()
                except OSError:
                    rule.on_error()
                    rule.cancelled = True