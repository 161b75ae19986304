import os
import socket
import tempfile
import threading

import pytest

from livebgconf.cmd import Client, DaemonError


class FakeDaemon:
    def __init__(self, path):
        self.path = path
        self.replies = {}
        self.received = []
        self._sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        self._sock.bind(path)
        self._sock.listen(8)
        self._thread = threading.Thread(target=self._serve, daemon=True)
        self._thread.start()

    def _serve(self):
        while True:
            try:
                conn, _ = self._sock.accept()
            except OSError:
                return
            with conn:
                data = b""
                while not data.endswith(b"\n"):
                    chunk = conn.recv(4096)
                    if not chunk:
                        break
                    data += chunk
                self.received.append(data)
                reply = self.replies.get(data.decode(), b"")
                try:
                    conn.sendall(reply)
                except OSError:
                    pass

    def close(self):
        try:
            self._sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            pass
        self._sock.close()


@pytest.fixture
def daemon():
    with tempfile.TemporaryDirectory() as directory:
        server = FakeDaemon(os.path.join(directory, "d.sock"))
        yield server
        server.close()


@pytest.fixture
def client(daemon):
    return Client(daemon.path)


def test_ping_sends_command(daemon, client):
    daemon.replies["ping\n"] = b"OK!\n"
    assert client.ping() is None
    assert daemon.received == [b"ping\n"]


def test_ping_without_answer_fails(daemon, client):
    with pytest.raises(DaemonError):
        client.ping()


def test_ping_accepts_any_status_line(daemon, client):
    daemon.replies["ping\n"] = b"ERR\n"
    assert client.ping() is None
    assert daemon.received == [b"ping\n"]


def test_missing_socket_fails():
    with tempfile.TemporaryDirectory() as directory:
        missing = Client(os.path.join(directory, "none.sock"))
        with pytest.raises(DaemonError):
            missing.ping()


def test_save_ok(daemon, client):
    daemon.replies["save\n"] = b"OK!\n"
    assert client.save() is None
    assert daemon.received == [b"save\n"]


def test_save_rejected(daemon, client):
    daemon.replies["save\n"] = b"ERR\n"
    with pytest.raises(DaemonError):
        client.save()


def test_list_concatenates_lines(daemon, client):
    daemon.replies["list\n"] = b"OK!\n2\nfoo:Foo wallpaper\nbar:Bar\n"
    assert client.list() == "foo:Foo wallpaper\nbar:Bar\n"


@pytest.mark.parametrize("count", [b"0", b"-3"])
def test_list_empty(daemon, client, count):
    daemon.replies["list\n"] = b"OK!\n" + count + b"\n"
    assert client.list() == ""


def test_list_truncated_response(daemon, client):
    daemon.replies["list\n"] = b"OK!\n3\nfoo:Foo\n"
    with pytest.raises(DaemonError):
        client.list()


def test_list_rejected(daemon, client):
    daemon.replies["list\n"] = b"ERR\n1\nfoo:Foo\n"
    with pytest.raises(DaemonError):
        client.list()


def test_proplist_named(daemon, client):
    daemon.replies["lsprop foo\n"] = b"OK!\n1\nproplist {}\n"
    assert client.proplist("foo") == "proplist {}\n"
    assert daemon.received == [b"lsprop foo\n"]


def test_proplist_active(daemon, client):
    daemon.replies["lsprop\n"] = b"OK!\n1\nproplist {}\n"
    assert client.proplist() == "proplist {}\n"
    assert daemon.received == [b"lsprop\n"]


@pytest.mark.parametrize("ending", [b"\n", b"\r\n"])
def test_cfgpath_strips_line_ending(daemon, client, ending):
    daemon.replies["cfgpath\n"] = b"OK!\n1\n/home/user/.xlivebg/config" + ending
    assert client.cfgpath() == "/home/user/.xlivebg/config"


def test_getprop_str(daemon, client):
    daemon.replies["getpropstr xlivebg.active\n"] = b"OK!\n1\nminimal\n"
    assert client.getprop_str("xlivebg.active") == "minimal\n"


@pytest.mark.parametrize(
    "line, expected", [(b"42\n", 42), (b"  -7xyz\n", -7), (b"abc\n", 0)]
)
def test_getprop_int(daemon, client, line, expected):
    daemon.replies["getpropint xlivebg.fps\n"] = b"OK!\n1\n" + line
    assert client.getprop_int("xlivebg.fps") == expected


def test_getprop_int_without_value(daemon, client):
    daemon.replies["getpropint xlivebg.fps\n"] = b"OK!\n0\n"
    with pytest.raises(DaemonError):
        client.getprop_int("xlivebg.fps")


def test_getprop_num(daemon, client):
    daemon.replies["getpropnum xlivebg.crop_zoom\n"] = b"OK!\n1\n0.25\n"
    assert client.getprop_num("xlivebg.crop_zoom") == pytest.approx(0.25)


def test_getprop_vec_pads_with_zeros(daemon, client):
    daemon.replies["getpropvec xlivebg.color\n"] = b"OK!\n1\n1 0.5 0.25\n"
    assert client.getprop_vec("xlivebg.color") == pytest.approx((1.0, 0.5, 0.25, 0.0))


def test_getprop_vec_stops_at_garbage(daemon, client):
    daemon.replies["getpropvec xlivebg.color\n"] = b"OK!\n1\n0.1 x 3\n"
    assert client.getprop_vec("xlivebg.color") == pytest.approx((0.1, 0.0, 0.0, 0.0))


def test_setprop_str_wire(daemon, client):
    daemon.replies["propstr xlivebg.fit crop\n"] = b"OK!\n"
    assert client.setprop_str("xlivebg.fit", "crop") is None
    assert daemon.received == [b"propstr xlivebg.fit crop\n"]


def test_setprop_int_wire(daemon, client):
    daemon.replies["propint xlivebg.fps -1\n"] = b"OK!\n"
    assert client.setprop_int("xlivebg.fps", -1) is None
    assert daemon.received == [b"propint xlivebg.fps -1\n"]


@pytest.mark.parametrize("value, text", [(0.5, b"0.5"), (1.0, b"1")])
def test_setprop_num_wire(daemon, client, value, text):
    command = b"propnum xlivebg.crop_zoom " + text + b"\n"
    daemon.replies[command.decode()] = b"OK!\n"
    assert client.setprop_num("xlivebg.crop_zoom", value) is None
    assert daemon.received == [command]


def test_setprop_vec_wire(daemon, client):
    daemon.replies["propvec xlivebg.color 1 0.5 0 1\n"] = b"OK!\n"
    assert client.setprop_vec("xlivebg.color", (1.0, 0.5, 0.0, 1.0)) is None
    assert daemon.received == [b"propvec xlivebg.color 1 0.5 0 1\n"]


def test_setprop_vec_too_long(client):
    with pytest.raises(ValueError):
        client.setprop_vec("xlivebg.color", (1, 2, 3, 4, 5))


def test_setprop_rejected(daemon, client):
    daemon.replies["propint xlivebg.fps 30\n"] = b"ERR\n"
    with pytest.raises(DaemonError):
        client.setprop_int("xlivebg.fps", 30)


def test_rmprop_wire(daemon, client):
    daemon.replies["rmprop xlivebg.fps\n"] = b"OK!\n"
    assert client.rmprop("xlivebg.fps") is None
    assert daemon.received == [b"rmprop xlivebg.fps\n"]


def test_getupd(daemon, client):
    daemon.replies["getupd\n"] = b"OK!\n1\n33333\n"
    assert client.getupd() == 33333


def test_getupd_invalid(daemon, client):
    daemon.replies["getupd\n"] = b"OK!\n1\nnone\n"
    with pytest.raises(DaemonError):
        client.getupd()