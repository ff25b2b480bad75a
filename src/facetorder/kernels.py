"""Geometric predicate kernels.

Every ordering decision in :mod:`facetorder` is the sign of a small
polynomial in the input coordinates.  A kernel decides how that sign is
evaluated:

- :class:`ExactKernel` (``"exact"``) — ``fractions.Fraction`` arithmetic.
  Floats convert exactly, so the answer is always the true sign.
- :class:`FilteredKernel` (``"filtered"``) — evaluates the orientation
  determinant in floating point, certifies the sign with a static forward
  error bound and falls back to exact arithmetic when it cannot.  Same
  answers as ``"exact"``, usually at float speed.
- :class:`FloatKernel` (``"float"``) — plain floating point.  Not robust on
  near-degenerate input; only for data known to be well separated.

Usage
-----
>>> from facetorder.kernels import get_kernel
>>> kernel = get_kernel("filtered")
>>> p = kernel.point((0.0, 0.0, 0.0))
"""

from __future__ import annotations

import logging
import math
import numbers
import sys
from decimal import Decimal
from fractions import Fraction
from typing import Any, Dict, Optional, Protocol, Sequence, Tuple, Type, Union, runtime_checkable

from .models import InvalidArgumentError

logger = logging.getLogger(__name__)

Point = Tuple[Any, Any, Any]

# Unit roundoff of IEEE binary64 and the orient3d bound derived from it.
_EPSILON = 2.0 ** -53
_O3D_ERRBOUND = (7.0 + 56.0 * _EPSILON) * _EPSILON
_MIN_NORMAL = sys.float_info.min
# Below this the bound itself is no longer a normal float.
_SAFE_PERMANENT = _MIN_NORMAL / _O3D_ERRBOUND


@runtime_checkable
class GeometricKernel(Protocol):
    """Capability needed by the predicate evaluator.

    Points passed to the predicates must come from :meth:`point` of the
    same kernel.
    """

    name: str

    def coerce(self, value: Any) -> Any:
        """Convert one coordinate into the scalar the predicates compute with."""
        ...

    def point(self, xyz: Sequence[Any]) -> Point:
        """Convert a 3-sequence into the kernel's point representation."""
        ...

    def orientation(self, p: Point, q: Point, r: Point, t: Point) -> int:
        """Sign of ``det(q - p, r - p, t - p)``."""
        ...

    def coplanar_orientation(self, p: Point, q: Point, r: Point, t: Point) -> int:
        """For coplanar points: +1 if *r* and *t* are on the same side of line pq."""
        ...

    def collinear(self, p: Point, q: Point, r: Point) -> bool:
        ...

    def coincident(self, p: Point, q: Point) -> bool:
        ...


# ── Shared vector helpers ───────────────────────────────────────────


def _sub(a: Point, b: Point) -> Point:
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])


def _cross(a: Point, b: Point) -> Point:
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )


def _dot(a: Point, b: Point) -> Any:
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def _sign(value: Any) -> int:
    return (value > 0) - (value < 0)


class _CartesianKernel:
    """Predicates written once over whatever scalar :meth:`coerce` yields."""

    name = ""

    def coerce(self, value: Any) -> Any:
        raise NotImplementedError

    def point(self, xyz: Sequence[Any]) -> Point:
        if len(xyz) != 3:
            raise InvalidArgumentError(f"Expected a 3D point, got {len(xyz)} coordinates")
        return (self.coerce(xyz[0]), self.coerce(xyz[1]), self.coerce(xyz[2]))

    def orientation(self, p: Point, q: Point, r: Point, t: Point) -> int:
        return _sign(_dot(_sub(q, p), _cross(_sub(r, p), _sub(t, p))))

    def coplanar_orientation(self, p: Point, q: Point, r: Point, t: Point) -> int:
        pq = _sub(q, p)
        return _sign(_dot(_cross(pq, _sub(r, p)), _cross(pq, _sub(t, p))))

    def collinear(self, p: Point, q: Point, r: Point) -> bool:
        return not any(_cross(_sub(q, p), _sub(r, p)))

    def coincident(self, p: Point, q: Point) -> bool:
        return p[0] == q[0] and p[1] == q[1] and p[2] == q[2]

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


def _finite_float(value: Any) -> float:
    try:
        f = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidArgumentError(f"Coordinate {value!r} is not a number") from exc
    if not math.isfinite(f):
        raise InvalidArgumentError(f"Coordinate {value!r} is not finite")
    return f


class ExactKernel(_CartesianKernel):
    name = "exact"

    def coerce(self, value: Any) -> Fraction:
        if isinstance(value, Fraction):
            return value
        if isinstance(value, numbers.Integral):
            return Fraction(int(value))
        if isinstance(value, numbers.Rational):
            return Fraction(value.numerator, value.denominator)
        if isinstance(value, Decimal):
            if not value.is_finite():
                raise InvalidArgumentError(f"Coordinate {value!r} is not finite")
            return Fraction(value)
        return Fraction(_finite_float(value))


class FloatKernel(_CartesianKernel):
    name = "float"

    def coerce(self, value: Any) -> float:
        return _finite_float(value)


def _underflows(a: float, b: float) -> bool:
    """True if ``a * b`` lands below the normal range and loses precision."""
    return a != 0.0 and b != 0.0 and abs(a * b) < _MIN_NORMAL


def _filtered_orientation(p: Point, q: Point, r: Point, t: Point) -> Optional[int]:
    """Float orientation sign, or ``None`` when the error bound cannot certify it.

    The static bound assumes no product underflows, so inputs that push any
    product (or the bound itself) below the normal range are not certified.
    """
    ax, ay, az = q[0] - p[0], q[1] - p[1], q[2] - p[2]
    bx, by, bz = r[0] - p[0], r[1] - p[1], r[2] - p[2]
    cx, cy, cz = t[0] - p[0], t[1] - p[1], t[2] - p[2]
    pairs = ((by, cz), (bz, cy), (bz, cx), (bx, cz), (bx, cy), (by, cx))
    if any(_underflows(a, b) for a, b in pairs):
        return None
    bycz, bzcy = by * cz, bz * cy
    bzcx, bxcz = bz * cx, bx * cz
    bxcy, bycx = bx * cy, by * cx
    mx, my, mz = bycz - bzcy, bzcx - bxcz, bxcy - bycx
    px, py, pz = abs(bycz) + abs(bzcy), abs(bzcx) + abs(bxcz), abs(bxcy) + abs(bycx)
    outer = ((ax, mx), (ay, my), (az, mz), (ax, px), (ay, py), (az, pz))
    if any(_underflows(a, b) for a, b in outer):
        return None
    det = ax * mx + ay * my + az * mz
    permanent = px * abs(ax) + py * abs(ay) + pz * abs(az)
    if permanent < _SAFE_PERMANENT:
        return None
    if abs(det) > _O3D_ERRBOUND * permanent:
        return _sign(det)
    return None


class FilteredKernel(_CartesianKernel):
    """Floating-point orientation with an exact fallback.

    Float coordinates are kept as floats; anything else (ints, fractions)
    goes straight to exact arithmetic.  The error bound is the orient3d
    bound from Shewchuk's adaptive predicates, which also covers the
    rounding of the initial coordinate differences.
    """

    name = "filtered"

    def __init__(self) -> None:
        self.exact = ExactKernel()

    def coerce(self, value: Any) -> Any:
        if isinstance(value, float):
            return _finite_float(value)
        return self.exact.coerce(value)

    def _exact_point(self, p: Point) -> Point:
        return self.exact.point(p)

    def orientation(self, p: Point, q: Point, r: Point, t: Point) -> int:
        if all(isinstance(c, float) for pt in (p, q, r, t) for c in pt):
            sign = _filtered_orientation(p, q, r, t)
            if sign is not None:
                return sign
            logger.debug("orientation not certified in floating point, using exact arithmetic")
        return self.exact.orientation(*map(self._exact_point, (p, q, r, t)))

    def coplanar_orientation(self, p: Point, q: Point, r: Point, t: Point) -> int:
        return self.exact.coplanar_orientation(*map(self._exact_point, (p, q, r, t)))

    def collinear(self, p: Point, q: Point, r: Point) -> bool:
        return self.exact.collinear(*map(self._exact_point, (p, q, r)))

    def coincident(self, p: Point, q: Point) -> bool:
        return self.exact.coincident(self._exact_point(p), self._exact_point(q))


# ── Registry ────────────────────────────────────────────────────────

KERNELS: Dict[str, Type[_CartesianKernel]] = {
    ExactKernel.name: ExactKernel,
    FilteredKernel.name: FilteredKernel,
    FloatKernel.name: FloatKernel,
}

DEFAULT_KERNEL = ExactKernel.name

KernelLike = Union[str, GeometricKernel, None]


def get_kernel(kernel: KernelLike = None) -> GeometricKernel:
    """Resolve a kernel name (or pass an instance through)."""
    if kernel is None:
        kernel = DEFAULT_KERNEL
    if isinstance(kernel, str):
        try:
            return KERNELS[kernel]()
        except KeyError:
            raise ValueError(
                f"Unknown kernel: {kernel!r}. Available: {sorted(KERNELS)}"
            ) from None
    if isinstance(kernel, GeometricKernel):
        return kernel
    raise ValueError(f"Not a geometric kernel: {kernel!r}")
