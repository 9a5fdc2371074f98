"""Parsing and building of tagged "SP" lines such as ``*[name] Tux [id] 3``.

A value follows its ``[tag]`` and runs up to the next ``[`` or ``#``.
"""

from __future__ import annotations

import os
import re
import struct
import sys
from dataclasses import dataclass
from typing import Optional, Union

from slopekit.vectors import Vector2, Vector3, Vector4

PathLike = Union[str, "os.PathLike[str]"]

INT_MIN = -(2**31)
INT_MAX = 2**31 - 1
FLOAT_MAX = 3.4028234663852886e38
DOUBLE_MAX = sys.float_info.max

_ENCODING = "utf-8"

_WS = r"[ \t\n\v\f\r]*"
_INT_RE = re.compile(_WS + r"([+-]?[0-9]+)")
_FLOAT_RE = re.compile(
    _WS + r"([+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)"
)
_ITEM_END = re.compile(r"[\[#]")


@dataclass
class Color:
    """An 8-bit RGBA colour."""

    r: int = 0
    g: int = 0
    b: int = 0
    a: int = 255


class _Scanner:
    """Reads whitespace-separated numbers in sequence; one failure spoils the rest."""

    def __init__(self, text: str) -> None:
        self._text = text
        self._pos = 0
        self.failed = False

    def _take(self, pattern: re.Pattern) -> Optional[str]:
        if self.failed:
            return None
        match = pattern.match(self._text, self._pos)
        if match is None:
            self.failed = True
            return None
        self._pos = match.end()
        return match.group(1)

    def read_int(self) -> Optional[int]:
        token = self._take(_INT_RE)
        if token is None:
            return None
        value = int(token)
        if not INT_MIN <= value <= INT_MAX:
            self.failed = True
            return None
        return value

    def read_float(self, limit: float = DOUBLE_MAX) -> Optional[float]:
        token = self._take(_FLOAT_RE)
        if token is None:
            return None
        value = float(token)
        if abs(value) > limit:
            self.failed = True
            return None
        return value


def _f32(value: float) -> float:
    """Round a number to single precision where it fits."""
    try:
        return struct.unpack("f", struct.pack("f", value))[0]
    except OverflowError:
        return float(value)


# ----- elementary string functions ----------------------------------------


def make_path_str(src: str, add: str) -> str:
    """Join a directory and a file name with the platform separator."""
    return f"{src}{os.sep}{add}"


def trim(s: str) -> str:
    """Strip spaces and tabs from both ends."""
    return s.strip(" \t")


# ----- conversion functions -----------------------------------------------


def int_str(val: int, width: Optional[int] = None) -> str:
    """Format an integer, zero-filled to ``width`` characters if given."""
    text = str(int(val))
    if width:
        return text.rjust(width, "0")
    return text


def float_str(val: float, precision: int) -> str:
    """Format a single-precision value with a fixed number of decimals."""
    return f"{_f32(val):.{precision}f}"


def vector_str(v: Vector3, precision: int) -> str:
    """Format the three components of a vector, space separated."""
    return " ".join(float_str(c, precision) for c in (v.x, v.y, v.z))


def bool_str(val: bool) -> str:
    """Spell a truth value as ``true`` or ``false``."""
    return str(bool(val)).lower()


def str_int(s: str, default: int) -> int:
    """Read a leading integer, or return ``default``."""
    value = _Scanner(s).read_int()
    return default if value is None else value


def str_bool(s: str, default: bool) -> bool:
    """Read ``true``/``false``/``1``/``0`` or any integer (non-zero is true)."""
    if s in ("0", "false"):
        return False
    if s in ("1", "true"):
        return True
    return str_int(s, int(default)) != 0


def str_float(s: str, default: float) -> float:
    """Read a leading single-precision number, or return ``default``."""
    value = _Scanner(s).read_float(FLOAT_MAX)
    return default if value is None else value


def _is_int_vector(vec) -> bool:
    return all(isinstance(c, int) and not isinstance(c, bool) for c in vec)


def _parse_vector(s: str, default):
    cls = type(default)
    components = list(default)
    scanner = _Scanner(s)
    if _is_int_vector(components):
        values = [scanner.read_int() for _ in components]
    else:
        values = [scanner.read_float(DOUBLE_MAX) for _ in components]
    if scanner.failed:
        return cls(*components)
    return cls(*values)


def str_vector2(s: str, default: Optional[Vector2] = None) -> Vector2:
    """Read two numbers; integer components in ``default`` select integers."""
    return _parse_vector(s, Vector2(0.0, 0.0) if default is None else default)


def str_vector3(s: str, default: Optional[Vector3] = None) -> Vector3:
    """Read three numbers; integer components in ``default`` select integers."""
    return _parse_vector(s, Vector3(0.0, 0.0, 0.0) if default is None else default)


def str_vector4(s: str, default: Optional[Vector4] = None) -> Vector4:
    """Read four numbers; integer components in ``default`` select integers."""
    return _parse_vector(
        s, Vector4(0.0, 0.0, 0.0, 0.0) if default is None else default
    )


def _unit_to_byte(value: float) -> int:
    return max(0, min(255, int(value * 255)))


def str_color(s: str, default: Color) -> Color:
    """Read four components in the range 0..1 as an RGBA colour."""
    scanner = _Scanner(s)
    values = [scanner.read_float(FLOAT_MAX) for _ in range(4)]
    if scanner.failed:
        return Color(default.r, default.g, default.b, default.a)
    return Color(*(_unit_to_byte(v) for v in values))


def str_color3(s: str, default: Color) -> Color:
    """Read three integer components as an opaque RGB colour."""
    scanner = _Scanner(s)
    values = [scanner.read_int() for _ in range(3)]
    if scanner.failed:
        return Color(default.r, default.g, default.b, default.a)
    return Color(*(v % 256 for v in values), 255)


def str_array(s: str, count: int, default: float) -> list[float]:
    """Read ``count`` numbers; if any is missing every entry is ``default``."""
    scanner = _Scanner(s)
    values = [scanner.read_float(FLOAT_MAX) for _ in range(count)]
    if scanner.failed:
        return [default] * count
    return values


# ----- reading SP lines ---------------------------------------------------


def _sp_item(s: str, tag: str) -> str:
    if not s or not tag:
        return ""
    marker = f"[{tag}]"
    found = s.find(marker)
    if found < 0:
        return ""
    start = found + len(marker)
    end_match = _ITEM_END.search(s, start)
    end = end_match.start() if end_match else len(s)
    return s[start:end]


def sp_pos(s: str, tag: str) -> Optional[int]:
    """Index of ``[tag]`` in the line, or None if it is absent."""
    found = s.find(f"[{tag}]")
    return None if found < 0 else found


def sp_str(s: str, tag: str, default: str = "") -> str:
    item = _sp_item(s, tag)
    if not item:
        return default
    return trim(item)


def sp_int(s: str, tag: str, default: int) -> int:
    return str_int(_sp_item(s, tag), default)


def sp_bool(s: str, tag: str, default: bool) -> bool:
    return str_bool(trim(_sp_item(s, tag)), default)


def sp_float(s: str, tag: str, default: float) -> float:
    return str_float(_sp_item(s, tag), default)


def sp_vector2(s: str, tag: str, default: Optional[Vector2] = None) -> Vector2:
    return str_vector2(_sp_item(s, tag), default)


def sp_vector3(s: str, tag: str, default: Optional[Vector3] = None) -> Vector3:
    return str_vector3(_sp_item(s, tag), default)


def sp_vector4(s: str, tag: str, default: Optional[Vector4] = None) -> Vector4:
    return str_vector4(_sp_item(s, tag), default)


def sp_color(s: str, tag: str, default: Color) -> Color:
    return str_color(_sp_item(s, tag), default)


def sp_color3(s: str, tag: str, default: Color) -> Color:
    return str_color3(_sp_item(s, tag), default)


def sp_array(s: str, tag: str, count: int, default: float) -> list[float]:
    return str_array(_sp_item(s, tag), count, default)


# ----- building SP lines ----------------------------------------------------


def sp_add_int(s: str, tag: str, val: int) -> str:
    return f"{s}[{tag}]{int_str(val)}"


def sp_add_float(s: str, tag: str, val: float, precision: int) -> str:
    return f"{s}[{tag}]{float_str(val, precision)}"


def sp_add_str(s: str, tag: str, val: str) -> str:
    return f"{s}[{tag}]{val}"


def sp_add_vec2(s: str, tag: str, val: Vector2, precision: int) -> str:
    return (
        f"{s}[{tag}] {float_str(val.x, precision)} {float_str(val.y, precision)}"
    )


def sp_add_vec3(s: str, tag: str, val: Vector3, precision: int) -> str:
    return f"{s}[{tag}] {vector_str(val, precision)}"


def sp_add_bool(s: str, tag: str, val: bool) -> str:
    return f"{s}[{tag}]{bool_str(val)}"


def _sp_set(s: str, tag: str, text: str) -> str:
    pos = sp_pos(s, tag)
    if pos is None:
        return sp_add_str(s, tag, text)
    start = pos + len(tag) + 2
    item = _sp_item(s, tag)
    return s[:start] + text + s[start + len(item):]


def sp_set_int(s: str, tag: str, val: int) -> str:
    """Replace the value of ``tag``, or append it if absent."""
    return _sp_set(s, tag, int_str(val))


def sp_set_float(s: str, tag: str, val: float, precision: int) -> str:
    """Replace the value of ``tag``, or append it if absent."""
    return _sp_set(s, tag, float_str(val, precision))


def sp_set_str(s: str, tag: str, val: str) -> str:
    """Replace the value of ``tag``, or append it if absent."""
    return _sp_set(s, tag, val)


# ----- line lists -------------------------------------------------------------


class SPList(list):
    """A list of SP lines, loadable from and savable to a text file.

    Without ``newline_flag`` a line not starting with ``*`` continues the
    previous one; with it, a trailing backslash joins the next line instead.
    """

    def __init__(self, lines=(), newline_flag: bool = False) -> None:
        super().__init__(lines)
        self.newline_flag = newline_flag

    def add(self, line: str = "") -> None:
        self.append(line)

    def load(self, path: PathLike) -> None:
        """Append the lines of a file, skipping blanks and ``#`` comments.

        Raises OSError if the file cannot be read.
        """
        with open(path, encoding=_ENCODING, errors="surrogateescape", newline="") as f:
            text = f.read()
        joining = False
        for line in text.split("\n"):
            if not line or line[0] == "#":
                continue
            if not self.newline_flag:
                if line[0] == "*" or not self:
                    self.append(line)
                else:
                    self[-1] += line
                continue
            continues = line.endswith("\\")
            if continues:
                line = line[:-1]
            if joining:
                self[-1] += line
            else:
                self.append(line)
            joining = continues

    def save(self, path: PathLike) -> None:
        """Write every line followed by a newline. Raises OSError on failure."""
        with open(
            path, "w", encoding=_ENCODING, errors="surrogateescape", newline=""
        ) as f:
            f.writelines(f"{line}\n" for line in self)

    def make_index(self, tag: str) -> dict[str, int]:
        """Map each non-empty value of ``tag`` to its position among such lines."""
        index: dict[str, int] = {}
        position = 0
        for line in self:
            item = trim(_sp_item(line, tag))
            if item:
                index[item] = position
                position += 1
        return index