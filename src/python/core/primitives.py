"""Kind-aware 4-component tuples for points, vectors and colors.

This module provides the Tuple value type that every geometric stage of the
raytracer builds on. A Tuple carries a Kind tag alongside four float64
components, and the arithmetic methods enforce the point/vector algebra:

    vector + vector = vector
    point  + vector = point
    point  + point  = (undefined, returns None)
    point  - point  = vector
    point  - vector = point
    vector - point  = (undefined, returns None)

Equality is approximate: two tuples are equal when their kinds match and
every component differs by less than EPSILON.

Example:
    >>> from src.python.core.primitives import Tuple
    >>> p = Tuple.new_point(3.0, 2.0, 1.0)
    >>> v = Tuple.new_vector(1.0, 0.0, 0.0)
    >>> p.add(v)
    Tuple(kind=POINT, components=(4.0, 2.0, 1.0, 0.0))
    >>> p.add(p) is None
    True
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from enum import IntEnum
from typing import Any

import numpy as np
import numpy.typing as npt

logger = logging.getLogger(__name__)

# Tolerance for component comparison. Every equality check downstream
# (deduplication, test assertions) goes through this value.
EPSILON = 0.00001


class Kind(IntEnum):
    """Semantic tag of a Tuple.

    The integer values are shared with the Taichi kernels, where the kind
    travels as a ti.i32.
    """

    NONE = 0
    POINT = 1
    VECTOR = 2
    COLOR = 3


def float_equal(a: float, b: float) -> bool:
    """Check whether two floats differ by less than EPSILON.

    Args:
        a: First value.
        b: Second value.

    Returns:
        True if |a - b| < EPSILON.
    """
    return abs(a - b) < EPSILON


class Tuple:
    """A four-component value tagged with a geometric kind.

    Instances are immutable: arithmetic always returns a new Tuple and the
    attributes cannot be reassigned.

    Attributes:
        kind: The Kind tag.
        components: The four float components (x, y, z, w).
    """

    __slots__ = ("kind", "components")

    kind: Kind
    components: tuple[float, float, float, float]

    def __init__(
        self,
        kind: Kind,
        components: tuple[float, float, float, float],
    ) -> None:
        if len(components) != 4:
            raise ValueError(f"Expected 4 components, got {len(components)}: {components}")
        object.__setattr__(self, "kind", Kind(kind))
        object.__setattr__(
            self,
            "components",
            (
                float(components[0]),
                float(components[1]),
                float(components[2]),
                float(components[3]),
            ),
        )

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"Tuple is immutable, cannot set '{name}'")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"Tuple is immutable, cannot delete '{name}'")

    # =========================================================================
    # Construction
    # =========================================================================

    @classmethod
    def new(cls, e0: float, e1: float, e2: float, e3: float) -> Tuple:
        """Create an untyped tuple storing all four components verbatim.

        Args:
            e0: First component (x).
            e1: Second component (y).
            e2: Third component (z).
            e3: Fourth component (w).

        Returns:
            A Tuple of kind NONE.
        """
        return cls(Kind.NONE, (e0, e1, e2, e3))

    @classmethod
    def new_point(cls, e0: float, e1: float, e2: float) -> Tuple:
        """Create a point. The fourth component is always 0.0.

        Args:
            e0: x coordinate.
            e1: y coordinate.
            e2: z coordinate.

        Returns:
            A Tuple of kind POINT.
        """
        return cls(Kind.POINT, (e0, e1, e2, 0.0))

    @classmethod
    def new_vector(cls, e0: float, e1: float, e2: float) -> Tuple:
        """Create a vector. The fourth component is always 0.0.

        Args:
            e0: x component.
            e1: y component.
            e2: z component.

        Returns:
            A Tuple of kind VECTOR.
        """
        return cls(Kind.VECTOR, (e0, e1, e2, 0.0))

    @classmethod
    def new_color(cls, e0: float, e1: float, e2: float) -> Tuple:
        """Create a color from red, green and blue channels.

        Colors reuse the four-slot layout; the fourth slot is fixed at 0.0
        and carries no meaning.

        Args:
            e0: Red channel.
            e1: Green channel.
            e2: Blue channel.

        Returns:
            A Tuple of kind COLOR.
        """
        return cls(Kind.COLOR, (e0, e1, e2, 0.0))

    # =========================================================================
    # Accessors
    # =========================================================================

    @property
    def x(self) -> float:
        return self.components[0]

    @property
    def y(self) -> float:
        return self.components[1]

    @property
    def z(self) -> float:
        return self.components[2]

    @property
    def w(self) -> float:
        return self.components[3]

    def __getitem__(self, index: int) -> float:
        return self.components[index]

    def __iter__(self) -> Iterator[float]:
        return iter(self.components)

    def __len__(self) -> int:
        return 4

    def __repr__(self) -> str:
        return f"Tuple(kind={self.kind.name}, components={self.components})"

    # =========================================================================
    # Equality
    # =========================================================================

    def is_equal(self, other: Tuple) -> bool:
        """Check approximate equality with another tuple.

        Two tuples are equal when their kinds match and each pair of
        components differs by less than EPSILON. Because of the tolerance
        window this relation is not transitive.

        Args:
            other: The tuple to compare with.

        Returns:
            True if both tuples are equal within EPSILON.
        """
        if self.kind != other.kind:
            return False
        for a, b in zip(self.components, other.components):
            if not float_equal(a, b):
                return False
        return True

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Tuple):
            return NotImplemented
        return self.is_equal(other)

    # Epsilon equality cannot be made consistent with a hash
    __hash__ = None  # type: ignore[assignment]

    # =========================================================================
    # Arithmetic
    # =========================================================================

    def add(self, other: Tuple) -> Tuple | None:
        """Add another tuple to this one.

        The result is a VECTOR when both operands are vectors and a POINT in
        every other valid case. Adding two points is undefined.

        Args:
            other: The tuple to add.

        Returns:
            The element-wise sum, or None if both operands are points.
        """
        if self.kind == Kind.POINT and other.kind == Kind.POINT:
            logger.debug("Rejected point + point: %r + %r", self, other)
            return None

        if self.kind == Kind.VECTOR and other.kind == Kind.VECTOR:
            kind = Kind.VECTOR
        else:
            kind = Kind.POINT

        a = self.components
        b = other.components
        return Tuple(kind, (a[0] + b[0], a[1] + b[1], a[2] + b[2], a[3] + b[3]))

    def sub(self, other: Tuple) -> Tuple | None:
        """Subtract another tuple from this one.

        The result is a POINT for point - vector and a VECTOR in every other
        valid case. Subtracting a point from a vector is undefined.

        Args:
            other: The tuple to subtract.

        Returns:
            The element-wise difference, or None if self is a vector and
            other is a point.
        """
        if self.kind == Kind.VECTOR and other.kind == Kind.POINT:
            logger.debug("Rejected vector - point: %r - %r", self, other)
            return None

        if self.kind == Kind.POINT and other.kind == Kind.VECTOR:
            kind = Kind.POINT
        else:
            kind = Kind.VECTOR

        a = self.components
        b = other.components
        return Tuple(kind, (a[0] - b[0], a[1] - b[1], a[2] - b[2], a[3] - b[3]))

    def neg(self) -> Tuple:
        """Return the opposite tuple, keeping the kind."""
        a = self.components
        return Tuple(self.kind, (-a[0], -a[1], -a[2], -a[3]))

    def __neg__(self) -> Tuple:
        return self.neg()

    # =========================================================================
    # Conversion
    # =========================================================================

    def to_numpy(self) -> npt.NDArray[np.float64]:
        """Copy the components into a float64 array of shape (4,)."""
        return np.array(self.components, dtype=np.float64)

    def to_dict(self) -> dict[str, Any]:
        """Export the tuple to a dictionary (for JSON serialization).

        Returns:
            A dictionary with the lowercase kind name and the component list.
        """
        return {
            "kind": self.kind.name.lower(),
            "components": list(self.components),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Tuple:
        """Create a tuple from a dictionary produced by to_dict().

        Args:
            data: Dictionary with "kind" and "components" keys. A missing
                kind is read as "none".

        Returns:
            The reconstructed Tuple.

        Raises:
            ValueError: If the kind is unknown or there are not exactly
                four components.
        """
        kind_name = str(data.get("kind", "none")).upper()
        if kind_name not in Kind.__members__:
            raise ValueError(f"Unknown tuple kind: {data.get('kind')}")

        components = list(data.get("components", []))
        if len(components) != 4:
            raise ValueError(f"Expected 4 components, got {len(components)}: {components}")

        return cls(Kind[kind_name], (components[0], components[1], components[2], components[3]))


def is_equal(a: Tuple, b: Tuple) -> bool:
    """Check approximate equality of two tuples. See Tuple.is_equal."""
    return a.is_equal(b)


def point(x: float, y: float, z: float) -> Tuple:
    """Shorthand for Tuple.new_point."""
    return Tuple.new_point(x, y, z)


def vector(x: float, y: float, z: float) -> Tuple:
    """Shorthand for Tuple.new_vector."""
    return Tuple.new_vector(x, y, z)


def color(r: float, g: float, b: float) -> Tuple:
    """Shorthand for Tuple.new_color."""
    return Tuple.new_color(r, g, b)
