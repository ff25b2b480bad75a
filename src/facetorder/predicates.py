"""Angular comparison of faces around an edge axis.

Looking along the axis ``d - s`` with the left-hand rule (thumb along the
axis, fingers curl in the sweep direction), apexes are visited starting at
a reference half-plane.  The sweep is split into four sectors so that every
comparison reduces to the sign of an orientation determinant:

====== ===========================================================
sector meaning
====== ===========================================================
0      on the reference half-plane (angle 0)
1      strictly between 0 and 180 degrees
2      on the half-plane opposite the reference (180 degrees)
3      strictly between 180 and 360 degrees
====== ===========================================================

Within sector 1 or 3 two apexes compare by ``orientation(s, d, p, q)``:
negative means *p* is reached first.  Sectors 0 and 2 are single angles.
"""

from __future__ import annotations

from typing import Any, Sequence

from .kernels import KernelLike, Point, get_kernel
from .models import AFTER, BEFORE, SAME_ANGLE, InvalidArgumentError


class AngularFrame:
    """Clockwise sweep around ``d - s`` that starts at *reference_point*.

    All three points are converted with the kernel on construction.  The
    point arguments of :meth:`sector` and :meth:`compare` must already be
    in the kernel's representation (see :meth:`point`).
    """

    def __init__(
        self,
        s_point: Sequence[Any],
        d_point: Sequence[Any],
        reference_point: Sequence[Any],
        kernel: KernelLike = None,
    ) -> None:
        self.kernel = get_kernel(kernel)
        self.s = self.kernel.point(s_point)
        self.d = self.kernel.point(d_point)
        self.reference = self.kernel.point(reference_point)
        if self.kernel.coincident(self.s, self.d):
            raise InvalidArgumentError("Edge endpoints coincide; the axis is undefined")
        if self.kernel.collinear(self.s, self.d, self.reference):
            raise InvalidArgumentError("Reference point lies on the edge axis")

    def point(self, xyz: Sequence[Any]) -> Point:
        return self.kernel.point(xyz)

    def sector(self, p: Point) -> int:
        side = self.kernel.orientation(self.s, self.d, self.reference, p)
        if side < 0:
            return 1
        if side > 0:
            return 3
        in_plane = self.kernel.coplanar_orientation(self.s, self.d, self.reference, p)
        if in_plane > 0:
            return 0
        if in_plane < 0:
            return 2
        raise InvalidArgumentError(f"Point {p} lies on the edge axis")

    def compare(self, p: Point, q: Point) -> int:
        """Return ``BEFORE``, ``SAME_ANGLE`` or ``AFTER`` for *p* relative to *q*."""
        sector_p = self.sector(p)
        sector_q = self.sector(q)
        if sector_p != sector_q:
            return BEFORE if sector_p < sector_q else AFTER
        if sector_p in (0, 2):
            return SAME_ANGLE
        turn = self.kernel.orientation(self.s, self.d, p, q)
        if turn < 0:
            return BEFORE
        if turn > 0:
            return AFTER
        return SAME_ANGLE


def compare_apexes(
    s_point: Sequence[Any],
    d_point: Sequence[Any],
    reference_point: Sequence[Any],
    p: Sequence[Any],
    q: Sequence[Any],
    kernel: KernelLike = None,
) -> int:
    """One-shot :meth:`AngularFrame.compare` on raw coordinates."""
    frame = AngularFrame(s_point, d_point, reference_point, kernel)
    return frame.compare(frame.point(p), frame.point(q))
