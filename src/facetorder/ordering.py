"""Circular ordering of the faces around a directed edge.

Given a directed edge ``(s, d)`` the adjacent faces are sorted clockwise
around the axis ``d - s`` (left-hand rule).  Each adjacent face is passed as
a signed index ``(consistent ? 1 : -1) * (face_index + 1)``; a face is
consistent when it contains ``(d, s)`` as a directed edge.  Faces sharing an
angular slot (duplicated or overlapping faces) are ordered by ascending
signed index.

Usage
-----
>>> order = order_facets_around_edge(V, F, s, d, adj_faces)
>>> order = order_facets_around_edge(V, F, s, d, adj_faces, pivot_point=(0, 1, 0))
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import cmp_to_key
from typing import Any, List, Optional, Sequence

import numpy as np

from .kernels import KernelLike, Point, get_kernel
from .models import BEFORE, SAME_ANGLE, InvalidArgumentError, decode_signed_index
from .predicates import AngularFrame

logger = logging.getLogger(__name__)


# ── Input preparation ───────────────────────────────────────────────


@dataclass(frozen=True)
class FanGeometry:
    """Validated view of one edge and its adjacent faces.

    ``apex_ids[i]`` / ``apex_points[i]`` belong to ``adj_faces[i]``; points
    are in the kernel's representation.
    """

    kernel: Any
    s: int
    d: int
    s_point: Point
    d_point: Point
    adj_faces: tuple[int, ...]
    apex_ids: tuple[int, ...]
    apex_points: tuple[Point, ...]

    def frame(self, reference: Optional[Point] = None) -> AngularFrame:
        """Sweep frame anchored at *reference* (default: first apex)."""
        if reference is None:
            reference = self.apex_points[0]
        return AngularFrame(self.s_point, self.d_point, reference, self.kernel)


def _vertex_table(vertices: Any) -> np.ndarray:
    table = np.asarray(vertices)
    if table.ndim != 2 or table.shape[1] != 3:
        raise InvalidArgumentError(f"Vertex table must be N x 3, got shape {table.shape}")
    return table


def _face_table(faces: Any) -> np.ndarray:
    table = np.asarray(faces)
    if table.size == 0:
        return table.reshape(0, 3).astype(np.int64)
    if table.ndim != 2 or table.shape[1] != 3:
        raise InvalidArgumentError(f"Face table must be M x 3, got shape {table.shape}")
    if not np.issubdtype(table.dtype, np.integer):
        raise InvalidArgumentError(f"Face table must hold integers, got {table.dtype}")
    return table


def opposite_vertex(face: Sequence[int], s: int, d: int) -> int:
    """Return the vertex of a triangle that is not on the edge ``{s, d}``."""
    corners = [int(v) for v in face]
    if s not in corners or d not in corners:
        raise InvalidArgumentError(f"Face {tuple(corners)} does not contain edge ({s}, {d})")
    others = [v for v in corners if v != s and v != d]
    if len(others) != 1:
        raise InvalidArgumentError(f"Face {tuple(corners)} is degenerate at edge ({s}, {d})")
    return others[0]


def prepare_fan(
    vertices: Any,
    faces: Any,
    s: int,
    d: int,
    adj_faces: Sequence[int],
    kernel: KernelLike = None,
) -> FanGeometry:
    """Check every precondition and convert the involved points.

    Raises :class:`InvalidArgumentError` before anything is ordered, so a
    failing call never produces a partial result.
    """
    kernel = get_kernel(kernel)
    V = _vertex_table(vertices)
    F = _face_table(faces)
    s, d = int(s), int(d)
    if s == d:
        raise InvalidArgumentError(f"Edge ({s}, {d}) has identical endpoints")
    for vid in (s, d):
        if not 0 <= vid < len(V):
            raise InvalidArgumentError(f"Vertex index {vid} out of range [0, {len(V)})")

    s_point = kernel.point(V[s])
    d_point = kernel.point(V[d])
    if kernel.coincident(s_point, d_point):
        raise InvalidArgumentError(f"Edge ({s}, {d}) has zero length")

    records = tuple(int(f) for f in adj_faces)
    apex_ids: List[int] = []
    apex_points: List[Point] = []
    for signed in records:
        face_index, _ = decode_signed_index(signed)
        if face_index >= len(F):
            raise InvalidArgumentError(
                f"Signed face index {signed} refers to face {face_index}, "
                f"but there are only {len(F)} faces"
            )
        apex = opposite_vertex(F[face_index], s, d)
        if not 0 <= apex < len(V):
            raise InvalidArgumentError(f"Vertex index {apex} of face {face_index} out of range")
        point = kernel.point(V[apex])
        if kernel.collinear(s_point, d_point, point):
            raise InvalidArgumentError(
                f"Face {face_index} is degenerate: apex {apex} lies on the edge axis"
            )
        apex_ids.append(apex)
        apex_points.append(point)

    return FanGeometry(
        kernel=kernel,
        s=s,
        d=d,
        s_point=s_point,
        d_point=d_point,
        adj_faces=records,
        apex_ids=tuple(apex_ids),
        apex_points=tuple(apex_points),
    )


# ── Circular sorter ─────────────────────────────────────────────────


def canonical_order(fan: FanGeometry, *, debug: bool = False) -> List[int]:
    """Sort a prepared fan clockwise, starting at the first record's apex."""
    k = len(fan.adj_faces)
    if k == 0:
        return []
    if k == 1:
        return [0]

    frame = fan.frame()

    def compare(i: int, j: int) -> int:
        result = frame.compare(fan.apex_points[i], fan.apex_points[j])
        if result != SAME_ANGLE:
            return result
        a, b = fan.adj_faces[i], fan.adj_faces[j]
        if a != b:
            return -1 if a < b else 1
        return (i > j) - (i < j)

    order = sorted(range(k), key=cmp_to_key(compare))

    if debug:
        for i in order:
            logger.debug(
                "edge (%d, %d): record %d signed=%d apex=%d sector=%d",
                fan.s, fan.d, i, fan.adj_faces[i], fan.apex_ids[i],
                frame.sector(fan.apex_points[i]),
            )
        logger.debug("edge (%d, %d): order %s", fan.s, fan.d, order)
    return order


def order_facets_around_edge(
    vertices: Any,
    faces: Any,
    s: int,
    d: int,
    adj_faces: Sequence[int],
    pivot_point: Optional[Sequence[Any]] = None,
    *,
    kernel: KernelLike = None,
    debug: bool = False,
) -> List[int]:
    """Order the faces adjacent to ``(s, d)`` clockwise around ``d - s``.

    Parameters
    ----------
    vertices : array-like, N x 3
        Vertex positions (floats, ints or ``Fraction``).
    faces : array-like, M x 3
        Triangle vertex indices.
    s, d : int
        Source and destination vertex of the directed edge.
    adj_faces : sequence of int
        Signed indices of the faces containing ``{s, d}``.
    pivot_point : 3-sequence, optional
        When given, ``order[0]`` is the first face clockwise after the
        face ``(s, d, pivot_point)``.
    kernel : str or GeometricKernel, optional
        Predicate kernel (default ``"exact"``).
    debug : bool
        Log the classification of every record at DEBUG level.

    Returns
    -------
    list[int]
        Indices into *adj_faces*, a permutation of ``range(len(adj_faces))``.
    """
    fan = prepare_fan(vertices, faces, s, d, adj_faces, kernel)
    pivot = None
    if pivot_point is not None:
        pivot = resolve_pivot(fan, pivot_point)
    order = canonical_order(fan, debug=debug)
    if pivot is None:
        return order
    rotated = rotate_after_pivot(fan, order, pivot)
    if debug:
        logger.debug("edge (%d, %d): rebased on pivot %s -> %s", fan.s, fan.d, pivot_point, rotated)
    return rotated


# ── Pivot rebase ────────────────────────────────────────────────────


def resolve_pivot(fan: FanGeometry, pivot_point: Sequence[Any]) -> Point:
    """Convert *pivot_point* with the fan's kernel, rejecting points on the axis."""
    pivot = fan.kernel.point(pivot_point)
    if fan.kernel.collinear(fan.s_point, fan.d_point, pivot):
        raise InvalidArgumentError("Pivot point is collinear with the edge")
    return pivot


def rotate_after_pivot(fan: FanGeometry, order: List[int], pivot: Point) -> List[int]:
    """Rotate *order* to start at the first face strictly after *pivot*."""
    if not order:
        return []
    # Anchor at order[0]: it shares the reference slot of the canonical sort.
    frame = fan.frame(fan.apex_points[order[0]])
    start = 0
    for position, i in enumerate(order):
        if frame.compare(pivot, fan.apex_points[i]) == BEFORE:
            start = position
            break
    return order[start:] + order[:start]


def rebase_on_pivot(
    vertices: Any,
    faces: Any,
    s: int,
    d: int,
    adj_faces: Sequence[int],
    order: Sequence[int],
    pivot_point: Sequence[Any],
    *,
    kernel: KernelLike = None,
) -> List[int]:
    """Rotate a canonical *order* so it starts right after the pivot face.

    The pivot face ``(s, d, pivot_point)`` need not exist in the mesh.
    Faces sharing the pivot's angular slot count as its predecessors.  If
    no face lies strictly after the pivot the sequence wraps to its start.
    """
    fan = prepare_fan(vertices, faces, s, d, adj_faces, kernel)
    order = [int(i) for i in order]
    if sorted(order) != list(range(len(fan.adj_faces))):
        raise InvalidArgumentError(
            f"order must be a permutation of range({len(fan.adj_faces)}), got {order}"
        )
    return rotate_after_pivot(fan, order, resolve_pivot(fan, pivot_point))
