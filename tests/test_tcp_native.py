import socket
import threading
import time

import pytest

from minnow.tcp_native import NativeOptions, UsageError, main, open_socket, parse_args


def _free_port():
    probe = socket.socket()
    probe.bind(("127.0.0.1", 0))
    port = probe.getsockname()[1]
    probe.close()
    return port


def test_parse_client_mode():
    assert parse_args(["prog", "example.com", "80"]) == NativeOptions(False, "example.com", "80")


def test_parse_server_mode():
    assert parse_args(["prog", "-l", "0.0.0.0", "9000"]) == NativeOptions(True, "0.0.0.0", "9000")


@pytest.mark.parametrize("argv", [["prog"], ["prog", "host"], ["prog", "-l", "host"]])
def test_parse_missing_arguments(argv):
    with pytest.raises(UsageError):
        parse_args(argv)


def test_open_socket_client_connects():
    listener = socket.socket()
    listener.bind(("127.0.0.1", 0))
    listener.listen(1)
    port = listener.getsockname()[1]
    try:
        sock = open_socket(NativeOptions(False, "127.0.0.1", str(port)))
        with sock:
            accepted, peer = listener.accept()
            with accepted:
                assert sock.getpeername() == ("127.0.0.1", port)
                assert peer == sock.getsockname()
    finally:
        listener.close()


def test_open_socket_server_accepts_one():
    port = _free_port()
    result = {}

    def connect():
        for _ in range(500):
            try:
                client = socket.create_connection(("127.0.0.1", port))
            except ConnectionRefusedError:
                time.sleep(0.01)
                continue
            client.sendall(b"ping")
            result["client"] = client
            return

    thread = threading.Thread(target=connect)
    thread.start()
    accepted = open_socket(NativeOptions(True, "127.0.0.1", str(port)))
    thread.join(timeout=10)

    client = result["client"]
    with client, accepted:
        assert accepted.getpeername() == client.getsockname()
        assert accepted.recv(4) == b"ping"


def test_main_usage(capsys):
    assert main(["tcp_native", "-l", "host"]) == 1
    assert "Usage: tcp_native [-l] <host> <port>" in capsys.readouterr().err


def test_main_connection_refused(capsys):
    port = _free_port()
    assert main(["tcp_native", "127.0.0.1", str(port)]) == 1
    assert "Exception:" in capsys.readouterr().err