"""Client for the wallpaper daemon's line-based command socket."""

from __future__ import annotations

import os
import re
import socket
from contextlib import contextmanager
from typing import BinaryIO, Iterator, Sequence

DEFAULT_SOCKET_PATH = "/tmp/xlivebg.sock"

_STATUS_OK = "OK!\n"
_ENCODING = "utf-8"

_INT_RE = re.compile(r"\s*([+-]?\d+)")
_FLOAT_RE = re.compile(
    r"\s*([+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan))",
    re.IGNORECASE,
)


class DaemonError(Exception):
    """Raised when the daemon cannot be reached or rejects a command."""


def _atoi(text: str) -> int:
    match = _INT_RE.match(text)
    return int(match.group(1)) if match else 0


def _atof(text: str) -> float:
    match = _FLOAT_RE.match(text)
    return float(match.group(1)) if match else 0.0


def _scan_floats(text: str, count: int) -> tuple[float, ...]:
    """Read up to ``count`` leading floats, padding the rest with zeros."""
    values = []
    pos = 0
    while len(values) < count:
        match = _FLOAT_RE.match(text, pos)
        if not match:
            break
        values.append(float(match.group(1)))
        pos = match.end()
    values.extend([0.0] * (count - len(values)))
    return tuple(values)


class _Reply:
    """Reads the daemon's response lines from one connection."""

    def __init__(self, stream: BinaryIO):
        self._stream = stream

    def _raw_line(self) -> str | None:
        line = self._stream.readline()
        if not line.endswith(b"\n"):
            return None
        return line.decode(_ENCODING, "surrogateescape")

    def line(self) -> str:
        text = self._raw_line()
        if text is None:
            raise DaemonError("connection closed by the daemon")
        return text

    def status(self) -> bool:
        return self.line() == _STATUS_OK

    def count(self) -> int:
        text = self._raw_line()
        if text is None:
            return 0
        return max(_atoi(text), 0)

    def block(self) -> str:
        return "".join(self.line() for _ in range(self.count()))


class Client:
    """Sends commands to the daemon, one connection per command."""

    def __init__(self, socket_path=DEFAULT_SOCKET_PATH):
        self.socket_path = os.fspath(socket_path)

    @contextmanager
    def _session(self, command: str) -> Iterator[_Reply]:
        try:
            sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        except OSError as exc:
            raise DaemonError(f"failed to create UNIX domain socket: {exc}") from exc
        with sock:
            try:
                sock.connect(self.socket_path)
                sock.sendall(command.encode(_ENCODING, "surrogateescape"))
            except OSError as exc:
                raise DaemonError(
                    f"failed to connect to UNIX domain socket: {self.socket_path}: "
                    f"{exc.strerror or exc}"
                ) from exc
            with sock.makefile("rb") as stream:
                yield _Reply(stream)

    def _command(self, command: str) -> None:
        with self._session(command) as reply:
            if not reply.status():
                raise DaemonError(f"command rejected: {command.strip()}")

    def _multiline(self, command: str) -> str:
        with self._session(command) as reply:
            if not reply.status():
                raise DaemonError(f"command rejected: {command.strip()}")
            return reply.block()

    def _value(self, command: str) -> str:
        with self._session(command) as reply:
            if not reply.status():
                raise DaemonError(f"command rejected: {command.strip()}")
            if reply.count() <= 0:
                raise DaemonError(f"no value returned for: {command.strip()}")
            return reply.line()

    def ping(self) -> None:
        """Check that the daemon answers at all."""
        with self._session("ping\n") as reply:
            reply.status()

    def save(self) -> None:
        """Ask the daemon to write its configuration file."""
        self._command("save\n")

    def cfgpath(self) -> str:
        """Return the path of the daemon's configuration file."""
        text = self._multiline("cfgpath\n")
        return re.split(r"[\r\n]", text, maxsplit=1)[0]

    def list(self) -> str:
        """Return the raw wallpaper list: ``name:description`` lines."""
        return self._multiline("list\n")

    def proplist(self, bgname=None) -> str:
        """Return the property list text of a wallpaper, or of the active one."""
        if bgname:
            return self._multiline(f"lsprop {bgname}\n")
        return self._multiline("lsprop\n")

    def getprop_str(self, name: str) -> str:
        return self._multiline(f"getpropstr {name}\n")

    def getprop_int(self, name: str) -> int:
        return _atoi(self._value(f"getpropint {name}\n"))

    def getprop_num(self, name: str) -> float:
        return _atof(self._value(f"getpropnum {name}\n"))

    def getprop_vec(self, name: str) -> tuple[float, float, float, float]:
        return _scan_floats(self._value(f"getpropvec {name}\n"), 4)

    def setprop_str(self, name: str, value: str) -> None:
        self._command(f"propstr {name} {value}\n")

    def setprop_int(self, name: str, value: int) -> None:
        self._command(f"propint {name} {int(value)}\n")

    def setprop_num(self, name: str, value: float) -> None:
        self._command(f"propnum {name} {float(value):g}\n")

    def setprop_vec(self, name: str, value: Sequence[float]) -> None:
        values = [float(v) for v in value]
        if len(values) > 4:
            raise ValueError("a vector property holds at most 4 values")
        values.extend([0.0] * (4 - len(values)))
        text = " ".join(f"{v:g}" for v in values)
        self._command(f"propvec {name} {text}\n")

    def rmprop(self, name: str) -> None:
        self._command(f"rmprop {name}\n")

    def getupd(self) -> int:
        """Return the daemon's update interval in microseconds."""
        text = self._value("getupd\n")
        match = _INT_RE.match(text)
        if not match:
            raise DaemonError(f"invalid update rate: {text.strip()!r}")
        return int(match.group(1))