"""Taichi-side tuple algebra for use inside GPU kernels.

This module mirrors the kind rules of src.python.core.primitives as Taichi
functions (@ti.func) over a TupleRecord dataclass, so kernels can combine
points, vectors and colors with exactly the same semantics as host code.

Because Taichi functions cannot return None, an undefined combination
(point + point, vector - point) is signalled by valid == 0 on the returned
record, the same way HitRecord uses hit == 0 for a miss.

Components are float64 to match the host-side Tuple. Taichi should be
initialized with default_fp=ti.f64 (see src.python.config.init_backend).

Example:
    >>> import taichi as ti
    >>> from src.python.config import init_backend
    >>> init_backend()
    >>> from src.python.core.kernels import make_record, tuple_add, vec4d
    >>> @ti.kernel
    ... def translate() -> ti.f64:
    ...     p = make_record(1, vec4d(1.0, 2.0, 3.0, 0.0))
    ...     v = make_record(2, vec4d(1.0, 0.0, 0.0, 0.0))
    ...     return tuple_add(p, v).e[0]
"""

import taichi as ti

from src.python.core.primitives import EPSILON, Kind

# Four-component float64 vector matching Tuple.components
vec4d = ti.types.vector(4, ti.f64)

# Kind tags as plain ints so Taichi folds them into compile-time constants
KIND_NONE = int(Kind.NONE)
KIND_POINT = int(Kind.POINT)
KIND_VECTOR = int(Kind.VECTOR)
KIND_COLOR = int(Kind.COLOR)


@ti.dataclass
class TupleRecord:
    """Kernel-side representation of a Tuple.

    Attributes:
        valid: 1 if the record holds a result, 0 if the operation that
            produced it was undefined for the operand kinds.
        kind: The Kind tag as an integer.
        e: The four components.
    """

    valid: ti.i32
    kind: ti.i32
    e: vec4d


@ti.func
def make_record(kind: ti.i32, e: vec4d) -> TupleRecord:
    """Create a valid record from a kind tag and components.

    Args:
        kind: The Kind tag as an integer.
        e: The four components.

    Returns:
        A TupleRecord with valid == 1.
    """
    return TupleRecord(valid=1, kind=kind, e=e)


@ti.func
def _make_invalid_record() -> TupleRecord:
    """Create the record returned for undefined operations."""
    return TupleRecord(valid=0, kind=KIND_NONE, e=vec4d(0.0, 0.0, 0.0, 0.0))


@ti.func
def tuple_add(a: TupleRecord, b: TupleRecord) -> TupleRecord:
    """Add two records following the point/vector algebra.

    vector + vector gives a vector, point + point is undefined, and every
    other combination gives a point.

    Args:
        a: Left operand.
        b: Right operand.

    Returns:
        The element-wise sum, or an invalid record for point + point.
    """
    result = _make_invalid_record()
    if a.kind != KIND_POINT or b.kind != KIND_POINT:
        kind = KIND_POINT
        if a.kind == KIND_VECTOR and b.kind == KIND_VECTOR:
            kind = KIND_VECTOR
        result = TupleRecord(valid=1, kind=kind, e=a.e + b.e)
    return result


@ti.func
def tuple_sub(a: TupleRecord, b: TupleRecord) -> TupleRecord:
    """Subtract b from a following the point/vector algebra.

    point - vector gives a point, vector - point is undefined, and every
    other combination gives a vector.

    Args:
        a: Left operand.
        b: Right operand.

    Returns:
        The element-wise difference, or an invalid record for vector - point.
    """
    result = _make_invalid_record()
    if a.kind != KIND_VECTOR or b.kind != KIND_POINT:
        kind = KIND_VECTOR
        if a.kind == KIND_POINT and b.kind == KIND_VECTOR:
            kind = KIND_POINT
        result = TupleRecord(valid=1, kind=kind, e=a.e - b.e)
    return result


@ti.func
def tuple_neg(a: TupleRecord) -> TupleRecord:
    """Negate every component, keeping kind and validity."""
    return TupleRecord(valid=a.valid, kind=a.kind, e=-a.e)


@ti.func
def tuple_is_equal(a: TupleRecord, b: TupleRecord) -> ti.i32:
    """Check approximate equality of two records.

    Args:
        a: First record.
        b: Second record.

    Returns:
        1 if the kinds match and every component differs by less than
        EPSILON, 0 otherwise.
    """
    equal = 1
    if a.kind != b.kind:
        equal = 0
    # Same predicate as the host; NaN differences compare false and clear equal
    for j in ti.static(range(4)):
        if ti.abs(a.e[j] - b.e[j]) < EPSILON:
            pass
        else:
            equal = 0
    return equal
