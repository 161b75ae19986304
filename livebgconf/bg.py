"""Wallpaper list and wallpaper property descriptions from the daemon."""

from __future__ import annotations

import enum
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Iterator

from livebgconf.cmd import DaemonError

log = logging.getLogger(__name__)

ACTIVE_PROPERTY = "xlivebg.active"


class PropType(enum.IntEnum):
    """Kinds of wallpaper properties."""

    BOOL = 0
    TEXT = 1
    NUMBER = 2
    INTEGER = 3
    COLOR = 4
    FILENAME = 0x100
    DIRNAME = 0x200
    PATHNAME = 0x300


_TYPE_NAMES = {
    "boolean": PropType.BOOL,
    "text": PropType.TEXT,
    "number": PropType.NUMBER,
    "integer": PropType.INTEGER,
    "color": PropType.COLOR,
    "filename": PropType.FILENAME,
    "dirname": PropType.DIRNAME,
    "pathname": PropType.PATHNAME,
}


def prop_type(name: str) -> PropType:
    """Map a property type name from a property list to its PropType."""
    try:
        return _TYPE_NAMES[name]
    except KeyError:
        raise ValueError(f"invalid property type: {name}") from None


@dataclass
class BgProp:
    """One tweakable property of a wallpaper."""

    type: PropType
    name: str
    fullname: str
    desc: str | None = None
    multiline: bool = False
    start: float = 0
    end: float = 0
    value: Any = None


@dataclass
class BgInfo:
    """A wallpaper known to the daemon, with its properties."""

    name: str
    desc: str | None = None
    props: list[BgProp] = field(default_factory=list)


def parse_wallpaper_list(text: str) -> list[BgInfo]:
    """Parse ``name:description`` lines as returned by the ``list`` command."""
    wallpapers = []
    pos = 0
    while True:
        colon = text.find(":", pos)
        if colon < 0:
            break
        bg = BgInfo(name=text[pos:colon])
        wallpapers.append(bg)
        pos = colon + 1
        newline = text.find("\n", pos)
        if newline < 0:
            break
        bg.desc = text[pos:newline]
        pos = newline + 1
    return wallpapers


# --- property list tree format -------------------------------------------

_TOKEN_RE = re.compile(
    r"""
     (?P<ws>[ \t\r\n]+)
    |(?P<comment>\#[^\n]*)
    |(?P<string>"(?:[^"\\\n]|\\.)*")
    |(?P<number>[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)
    |(?P<word>[A-Za-z_][A-Za-z0-9_.\-]*)
    |(?P<punct>[{}\[\]=,])
    """,
    re.VERBOSE,
)

_ESCAPES = {"n": "\n", "t": "\t", "r": "\r"}


@dataclass
class _Value:
    text: str
    number: float | None = None
    vector: tuple[float, ...] | None = None


@dataclass
class _Node:
    name: str
    attrs: dict[str, _Value] = field(default_factory=dict)
    children: list[_Node] = field(default_factory=list)

    def get_str(self, name: str) -> str | None:
        value = self.attrs.get(name)
        return value.text if value is not None else None

    def get_int(self, name: str, default: int = 0) -> int:
        value = self.attrs.get(name)
        if value is None or value.number is None:
            return default
        return int(value.number)

    def get_vec(self, name: str) -> tuple[float, ...] | None:
        value = self.attrs.get(name)
        if value is None:
            return None
        if value.vector is not None:
            return value.vector
        if value.number is not None:
            return (value.number,)
        return None


def _maybe_number(text: str) -> float | None:
    try:
        return float(text)
    except ValueError:
        return None


def _tokenize(text: str) -> Iterator[tuple[str, str, int]]:
    pos = 0
    while pos < len(text):
        match = _TOKEN_RE.match(text, pos)
        if not match:
            raise ValueError(f"unexpected character {text[pos]!r} at offset {pos}")
        kind = match.lastgroup
        if kind not in ("ws", "comment"):
            yield kind, match.group(), pos
        pos = match.end()


class _Parser:
    def __init__(self, text: str):
        self._tokens = list(_tokenize(text))
        self._pos = 0

    def _peek(self) -> tuple[str, str, int] | None:
        return self._tokens[self._pos] if self._pos < len(self._tokens) else None

    def _next(self) -> tuple[str, str, int]:
        token = self._peek()
        if token is None:
            raise ValueError("unexpected end of property list")
        self._pos += 1
        return token

    def _expect(self, text: str) -> None:
        kind, tok, offset = self._next()
        if kind != "punct" or tok != text:
            raise ValueError(f"expected {text!r}, found {tok!r} at offset {offset}")

    def node(self) -> _Node:
        kind, name, offset = self._next()
        if kind != "word":
            raise ValueError(f"expected a node name, found {name!r} at offset {offset}")
        self._expect("{")
        node = _Node(name)
        while True:
            kind, tok, offset = self._next()
            if kind == "punct" and tok == "}":
                return node
            if kind != "word":
                raise ValueError(f"unexpected {tok!r} at offset {offset}")
            following = self._peek()
            if following is not None and following[1] == "{":
                self._pos -= 1
                node.children.append(self.node())
            else:
                self._expect("=")
                node.attrs[tok] = self._value()

    def _value(self) -> _Value:
        kind, tok, offset = self._next()
        if kind == "string":
            text = re.sub(r"\\(.)", lambda m: _ESCAPES.get(m[1], m[1]), tok[1:-1])
            return _Value(text, _maybe_number(text))
        if kind == "number":
            return _Value(tok, float(tok))
        if kind == "word":
            return _Value(tok)
        if tok == "[":
            return self._vector()
        raise ValueError(f"expected a value, found {tok!r} at offset {offset}")

    def _vector(self) -> _Value:
        items: list[float] = []
        while True:
            kind, tok, offset = self._next()
            if kind == "punct" and tok == "]":
                break
            if kind == "punct" and tok == "," and items:
                continue
            if kind != "number":
                raise ValueError(f"expected a number, found {tok!r} at offset {offset}")
            items.append(float(tok))
        text = " ".join(f"{v:g}" for v in items)
        return _Value(text, items[0] if items else None, tuple(items))


def parse_proplist(bgname: str, text: str) -> list[BgProp]:
    """Parse a wallpaper's property list; invalid properties are skipped."""
    root = _Parser(text).node()
    if root.name != "proplist":
        raise ValueError(
            f"parse_proplist({bgname}): unexpected root node {root.name!r} "
            "(expected: proplist)"
        )

    props = []
    for node in root.children:
        idstr = node.get_str("id")
        typestr = node.get_str("type")
        if idstr is None or typestr is None:
            log.warning("parse_proplist(%s): invalid property %d", bgname, len(props))
            continue
        try:
            ptype = prop_type(typestr)
        except ValueError:
            log.warning("parse_proplist(%s): invalid property type: %s", bgname, typestr)
            continue

        prop = BgProp(
            type=ptype,
            name=idstr,
            fullname=f"xlivebg.{bgname}.{idstr}",
            desc=node.get_str("desc"),
        )
        if ptype is PropType.TEXT:
            prop.multiline = bool(node.get_int("multiline", 0))
        elif ptype in (PropType.NUMBER, PropType.INTEGER):
            vec = node.get_vec("range")
            if vec is not None:
                start, end = (tuple(vec) + (0.0, 0.0))[:2]
                if ptype is PropType.INTEGER:
                    start, end = int(start), int(end)
                prop.start, prop.end = start, end
        props.append(prop)
    return props


class WallpaperList:
    """The wallpapers the daemon offers, with their property descriptions."""

    def __init__(self, client):
        self._client = client
        self._items: list[BgInfo] = []

    def refresh(self) -> None:
        """Fetch the wallpaper list and each wallpaper's properties."""
        items = parse_wallpaper_list(self._client.list())
        for bg in items:
            try:
                text = self._client.proplist(bg.name)
            except DaemonError as exc:
                log.warning("Failed to retrieve property list for wallpaper: %s: %s",
                            bg.name, exc)
                continue
            if not text:
                log.warning("Failed to retrieve property list for wallpaper: %s", bg.name)
                continue
            try:
                bg.props = parse_proplist(bg.name, text)
            except ValueError as exc:
                log.warning("failed to parse property list of %s: %s", bg.name, exc)
        self._items = items

    def __len__(self) -> int:
        return len(self._items)

    def __getitem__(self, index: int) -> BgInfo:
        if index < 0 or index >= len(self._items):
            raise IndexError(f"wallpaper index out of range: {index}")
        return self._items[index]

    def __iter__(self) -> Iterator[BgInfo]:
        return iter(self._items)

    def active(self) -> BgInfo | None:
        """Return the wallpaper the daemon is showing, if it is in the list."""
        try:
            name = self._client.getprop_str(ACTIVE_PROPERTY)
        except DaemonError:
            return None
        end = name.rfind("\n")
        if end >= 0:
            name = name[:end]
        return next((bg for bg in self._items if bg.name == name), None)

    def switch(self, name: str) -> None:
        """Make the daemon show the named wallpaper."""
        if not name:
            raise ValueError("no wallpaper name given")
        self._client.setprop_str(ACTIVE_PROPERTY, name)