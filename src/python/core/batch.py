"""Batched tuple arithmetic over numpy arrays.

Packs many Tuples into Structure of Arrays form (an int32 kind array and a
float64 (N, 4) component array), runs the Taichi tuple algebra over every
element in a single kernel launch, and unpacks the results.

Taichi must be initialized before any batch call (see
src.python.config.init_backend).

Example:
    >>> from src.python.config import init_backend
    >>> init_backend()
    >>> from src.python.core.batch import batch_add
    >>> from src.python.core.primitives import point, vector
    >>> result = batch_add([point(0, 0, 0), point(1, 1, 1)], [vector(1, 0, 0), point(1, 1, 1)])
    >>> result.to_tuples()
    [Tuple(kind=POINT, components=(1.0, 0.0, 0.0, 0.0)), None]
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Optional, Union

import numpy as np
import numpy.typing as npt
import taichi as ti

from src.python.core.kernels import (
    make_record,
    tuple_add,
    tuple_is_equal,
    tuple_neg,
    tuple_sub,
    vec4d,
)
from src.python.core.primitives import Kind, Tuple

logger = logging.getLogger(__name__)

# Kinds as int32 (N,) and components as float64 (N, 4)
PackedTuples = tuple[npt.NDArray[np.int32], npt.NDArray[np.float64]]
TupleBatch = Union[Sequence[Tuple], PackedTuples]

_MIN_KIND = min(int(k) for k in Kind)
_MAX_KIND = max(int(k) for k in Kind)


@dataclass
class BatchResult:
    """Result of a batched add, sub or neg.

    Attributes:
        kinds: Kind tag per element, int32 array of shape (N,).
        components: Components per element, float64 array of shape (N, 4).
        valid: 1 where the operation was defined, 0 where it was not.
    """

    kinds: npt.NDArray[np.int32]
    components: npt.NDArray[np.float64]
    valid: npt.NDArray[np.int32]

    def __len__(self) -> int:
        return int(self.kinds.shape[0])

    def to_tuples(self) -> list[Optional[Tuple]]:
        """Unpack into Tuples, with None for undefined elements."""
        result: list[Optional[Tuple]] = []
        for i in range(len(self)):
            if self.valid[i] == 0:
                result.append(None)
            else:
                c = self.components[i]
                result.append(Tuple(Kind(int(self.kinds[i])), (c[0], c[1], c[2], c[3])))
        return result


def pack_tuples(tuples: Sequence[Tuple]) -> PackedTuples:
    """Pack tuples into kind and component arrays.

    Args:
        tuples: The tuples to pack.

    Returns:
        A (kinds, components) pair: int32 array of shape (N,) and float64
        array of shape (N, 4).
    """
    kinds = np.array([int(t.kind) for t in tuples], dtype=np.int32)
    components = np.array([t.components for t in tuples], dtype=np.float64).reshape(-1, 4)
    return kinds, components


def _as_packed(batch: TupleBatch, name: str) -> PackedTuples:
    """Normalize a batch argument to contiguous packed arrays.

    Raises:
        ValueError: If the arrays have inconsistent shapes or unknown kinds.
    """
    if isinstance(batch, tuple) and len(batch) == 2 and isinstance(batch[0], np.ndarray):
        kinds = np.ascontiguousarray(batch[0], dtype=np.int32)
        components = np.ascontiguousarray(batch[1], dtype=np.float64)
    else:
        kinds, components = pack_tuples(batch)

    if kinds.ndim != 1:
        raise ValueError(f"{name}: kinds must have shape (N,), got {kinds.shape}")
    if components.shape != (kinds.shape[0], 4):
        raise ValueError(
            f"{name}: components must have shape ({kinds.shape[0]}, 4), got {components.shape}"
        )
    if kinds.size and (kinds.min() < _MIN_KIND or kinds.max() > _MAX_KIND):
        raise ValueError(f"{name}: kinds must be in [{_MIN_KIND}, {_MAX_KIND}]")
    return kinds, components


def _check_same_length(a: PackedTuples, b: PackedTuples) -> int:
    n = a[0].shape[0]
    if b[0].shape[0] != n:
        raise ValueError(f"Batch length mismatch: {n} != {b[0].shape[0]}")
    return n


def _empty_result() -> BatchResult:
    return BatchResult(
        kinds=np.zeros(0, dtype=np.int32),
        components=np.zeros((0, 4), dtype=np.float64),
        valid=np.zeros(0, dtype=np.int32),
    )


def _alloc_result(n: int) -> BatchResult:
    return BatchResult(
        kinds=np.zeros(n, dtype=np.int32),
        components=np.zeros((n, 4), dtype=np.float64),
        valid=np.zeros(n, dtype=np.int32),
    )


# =============================================================================
# Kernels
# =============================================================================


@ti.kernel
def _add_kernel(
    kinds_a: ti.types.ndarray(dtype=ti.i32, ndim=1),
    comps_a: ti.types.ndarray(dtype=ti.f64, ndim=2),
    kinds_b: ti.types.ndarray(dtype=ti.i32, ndim=1),
    comps_b: ti.types.ndarray(dtype=ti.f64, ndim=2),
    out_kinds: ti.types.ndarray(dtype=ti.i32, ndim=1),
    out_comps: ti.types.ndarray(dtype=ti.f64, ndim=2),
    out_valid: ti.types.ndarray(dtype=ti.i32, ndim=1),
):
    for i in range(kinds_a.shape[0]):
        a = make_record(kinds_a[i], vec4d(comps_a[i, 0], comps_a[i, 1], comps_a[i, 2], comps_a[i, 3]))
        b = make_record(kinds_b[i], vec4d(comps_b[i, 0], comps_b[i, 1], comps_b[i, 2], comps_b[i, 3]))
        rec = tuple_add(a, b)
        out_kinds[i] = rec.kind
        out_valid[i] = rec.valid
        for j in ti.static(range(4)):
            out_comps[i, j] = rec.e[j]


@ti.kernel
def _sub_kernel(
    kinds_a: ti.types.ndarray(dtype=ti.i32, ndim=1),
    comps_a: ti.types.ndarray(dtype=ti.f64, ndim=2),
    kinds_b: ti.types.ndarray(dtype=ti.i32, ndim=1),
    comps_b: ti.types.ndarray(dtype=ti.f64, ndim=2),
    out_kinds: ti.types.ndarray(dtype=ti.i32, ndim=1),
    out_comps: ti.types.ndarray(dtype=ti.f64, ndim=2),
    out_valid: ti.types.ndarray(dtype=ti.i32, ndim=1),
):
    for i in range(kinds_a.shape[0]):
        a = make_record(kinds_a[i], vec4d(comps_a[i, 0], comps_a[i, 1], comps_a[i, 2], comps_a[i, 3]))
        b = make_record(kinds_b[i], vec4d(comps_b[i, 0], comps_b[i, 1], comps_b[i, 2], comps_b[i, 3]))
        rec = tuple_sub(a, b)
        out_kinds[i] = rec.kind
        out_valid[i] = rec.valid
        for j in ti.static(range(4)):
            out_comps[i, j] = rec.e[j]


@ti.kernel
def _neg_kernel(
    kinds_a: ti.types.ndarray(dtype=ti.i32, ndim=1),
    comps_a: ti.types.ndarray(dtype=ti.f64, ndim=2),
    out_kinds: ti.types.ndarray(dtype=ti.i32, ndim=1),
    out_comps: ti.types.ndarray(dtype=ti.f64, ndim=2),
    out_valid: ti.types.ndarray(dtype=ti.i32, ndim=1),
):
    for i in range(kinds_a.shape[0]):
        a = make_record(kinds_a[i], vec4d(comps_a[i, 0], comps_a[i, 1], comps_a[i, 2], comps_a[i, 3]))
        rec = tuple_neg(a)
        out_kinds[i] = rec.kind
        out_valid[i] = rec.valid
        for j in ti.static(range(4)):
            out_comps[i, j] = rec.e[j]


@ti.kernel
def _is_equal_kernel(
    kinds_a: ti.types.ndarray(dtype=ti.i32, ndim=1),
    comps_a: ti.types.ndarray(dtype=ti.f64, ndim=2),
    kinds_b: ti.types.ndarray(dtype=ti.i32, ndim=1),
    comps_b: ti.types.ndarray(dtype=ti.f64, ndim=2),
    out_equal: ti.types.ndarray(dtype=ti.i32, ndim=1),
):
    for i in range(kinds_a.shape[0]):
        a = make_record(kinds_a[i], vec4d(comps_a[i, 0], comps_a[i, 1], comps_a[i, 2], comps_a[i, 3]))
        b = make_record(kinds_b[i], vec4d(comps_b[i, 0], comps_b[i, 1], comps_b[i, 2], comps_b[i, 3]))
        out_equal[i] = tuple_is_equal(a, b)


# =============================================================================
# Public API
# =============================================================================


def batch_add(a: TupleBatch, b: TupleBatch) -> BatchResult:
    """Add two batches element-wise following the point/vector algebra.

    Args:
        a: Left operands, as Tuples or packed (kinds, components) arrays.
        b: Right operands, same length as a.

    Returns:
        A BatchResult with valid == 0 where both operands were points.

    Raises:
        ValueError: If the batches are malformed or differ in length.
    """
    pa = _as_packed(a, "a")
    pb = _as_packed(b, "b")
    n = _check_same_length(pa, pb)
    if n == 0:
        return _empty_result()

    out = _alloc_result(n)
    logger.debug("Launching batch add over %d tuples", n)
    _add_kernel(pa[0], pa[1], pb[0], pb[1], out.kinds, out.components, out.valid)
    return out


def batch_sub(a: TupleBatch, b: TupleBatch) -> BatchResult:
    """Subtract batch b from batch a element-wise.

    Args:
        a: Left operands, as Tuples or packed (kinds, components) arrays.
        b: Right operands, same length as a.

    Returns:
        A BatchResult with valid == 0 where a vector minus a point was
        requested.

    Raises:
        ValueError: If the batches are malformed or differ in length.
    """
    pa = _as_packed(a, "a")
    pb = _as_packed(b, "b")
    n = _check_same_length(pa, pb)
    if n == 0:
        return _empty_result()

    out = _alloc_result(n)
    logger.debug("Launching batch sub over %d tuples", n)
    _sub_kernel(pa[0], pa[1], pb[0], pb[1], out.kinds, out.components, out.valid)
    return out


def batch_neg(a: TupleBatch) -> BatchResult:
    """Negate every tuple in a batch. Always valid."""
    pa = _as_packed(a, "a")
    n = pa[0].shape[0]
    if n == 0:
        return _empty_result()

    out = _alloc_result(n)
    logger.debug("Launching batch neg over %d tuples", n)
    _neg_kernel(pa[0], pa[1], out.kinds, out.components, out.valid)
    return out


def batch_is_equal(a: TupleBatch, b: TupleBatch) -> npt.NDArray[np.bool_]:
    """Compare two batches element-wise with epsilon equality.

    Args:
        a: First batch.
        b: Second batch, same length as a.

    Returns:
        Boolean array of shape (N,).

    Raises:
        ValueError: If the batches are malformed or differ in length.
    """
    pa = _as_packed(a, "a")
    pb = _as_packed(b, "b")
    n = _check_same_length(pa, pb)
    if n == 0:
        return np.zeros(0, dtype=bool)

    out_equal = np.zeros(n, dtype=np.int32)
    logger.debug("Launching batch is_equal over %d tuples", n)
    _is_equal_kernel(pa[0], pa[1], pb[0], pb[1], out_equal)
    return out_equal.astype(bool)
