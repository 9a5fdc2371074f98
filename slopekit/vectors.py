"""Small 2-, 3- and 4-component vectors with the usual arithmetic."""

from __future__ import annotations

import math
from dataclasses import dataclass, fields
from typing import Callable, Iterator, Union

Number = Union[int, float]


class _VectorOps:
    """Component-wise arithmetic shared by the vector types."""

    __slots__ = ()

    def __iter__(self) -> Iterator[Number]:
        return (getattr(self, f.name) for f in fields(self))

    def _assign(self, values) -> None:
        for f, value in zip(fields(self), values):
            setattr(self, f.name, value)

    def _combine(self, other, op: Callable[[Number, Number], Number]):
        if type(other) is not type(self):
            return NotImplemented
        return type(self)(*(op(a, b) for a, b in zip(self, other)))

    def __add__(self, other):
        return self._combine(other, lambda a, b: a + b)

    def __sub__(self, other):
        return self._combine(other, lambda a, b: a - b)

    def __neg__(self):
        return type(self)(*(-c for c in self))

    def __mul__(self, factor):
        if not isinstance(factor, (int, float)):
            return NotImplemented
        return type(self)(*(c * factor for c in self))

    __rmul__ = __mul__

    def __iadd__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        self._assign(a + b for a, b in zip(self, other))
        return self

    def __isub__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        self._assign(a - b for a, b in zip(self, other))
        return self

    def __imul__(self, factor):
        if not isinstance(factor, (int, float)):
            return NotImplemented
        self._assign(c * factor for c in list(self))
        return self

    def length(self) -> float:
        """Euclidean length."""
        return math.sqrt(float(sum(c * c for c in self)))

    def norm(self) -> float:
        """Scale to unit length in place and return the previous length.

        A zero vector is left untouched and 0.0 is returned.
        """
        square = float(sum(c * c for c in self))
        if square == 0.0:
            return 0.0
        denom = math.sqrt(square)
        self *= 1.0 / denom
        return denom


@dataclass
class Vector2(_VectorOps):
    x: Number = 0
    y: Number = 0

    def length(self) -> float:
        """Euclidean length."""
        return math.hypot(self.x, self.y)

    def norm(self) -> float:
        """Scale to unit length in place and return the previous length."""
        return super().norm()


@dataclass
class Vector3(_VectorOps):
    x: Number = 0
    y: Number = 0
    z: Number = 0

    def length(self) -> float:
        """Euclidean length."""
        return super().length()

    def norm(self) -> float:
        """Scale to unit length in place and return the previous length."""
        return super().norm()


@dataclass
class Vector4(_VectorOps):
    x: Number = 0
    y: Number = 0
    z: Number = 0
    w: Number = 0

    def length(self) -> float:
        """Euclidean length."""
        return super().length()

    def norm(self) -> float:
        """Scale to unit length in place and return the previous length."""
        return super().norm()


def dot_product(a, b) -> float:
    """Dot product of two vectors of the same kind."""
    if type(a) is not type(b) or not isinstance(a, _VectorOps):
        raise TypeError("dot_product needs two vectors of the same kind")
    return float(sum(p * q for p, q in zip(a, b)))


def cross_product(u: Vector3, v: Vector3) -> Vector3:
    """Cross product of two 3-vectors."""
    if not (isinstance(u, Vector3) and isinstance(v, Vector3)):
        raise TypeError("cross_product needs two Vector3 values")
    return Vector3(
        u.y * v.z - u.z * v.y,
        u.z * v.x - u.x * v.z,
        u.x * v.y - u.y * v.x,
    )