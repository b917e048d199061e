"""Core primitives module.

This module contains the foundational value type of the raytracer:

Components:
    primitives: Kind-tagged 4-component Tuple (points, vectors, colors)
        with kind-aware add/sub/neg and epsilon equality
    kernels: The same tuple algebra as Taichi functions for use in kernels
    batch: Batched tuple arithmetic over numpy arrays

Point/vector validity rules live in the operators themselves: adding two
points or subtracting a point from a vector yields no result (None on the
host, valid == 0 in kernels) instead of raising.
"""

from .primitives import (
    EPSILON,
    Kind,
    Tuple,
    color,
    float_equal,
    is_equal,
    point,
    vector,
)

# Note: kernels and batch are NOT imported here so that the scalar Tuple
# API stays usable without importing Taichi.
#
# For batched arithmetic, use:
#   from src.python.core.batch import batch_add, batch_sub, batch_neg

__all__ = [
    "EPSILON",
    "Kind",
    "Tuple",
    "float_equal",
    "is_equal",
    "point",
    "vector",
    "color",
]
