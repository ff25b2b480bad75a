from __future__ import annotations

import math
from typing import Any, Dict, List, Optional, Sequence

import numpy as np

from .kernels import KernelLike
from .models import SAME_ANGLE, decode_signed_index
from .ordering import canonical_order, opposite_vertex, prepare_fan, resolve_pivot, rotate_after_pivot


def is_permutation(order: Sequence[int], k: int) -> bool:
    return sorted(int(i) for i in order) == list(range(k))


def is_cyclic_rotation(a: Sequence[int], b: Sequence[int]) -> bool:
    """True if *b* is *a* rotated by some offset."""
    a, b = list(a), list(b)
    if len(a) != len(b):
        return False
    if not a:
        return True
    return any(a[i:] + a[:i] == b for i in range(len(a)))


def apex_vertex(faces: Any, signed_index: int, s: int, d: int) -> int:
    face_index, _ = decode_signed_index(signed_index)
    return opposite_vertex(np.asarray(faces)[face_index], s, d)


def sweep_angles(
    vertices: Any,
    faces: Any,
    s: int,
    d: int,
    adj_faces: Sequence[int],
) -> List[float]:
    """Approximate clockwise angle (degrees) of each apex from the first one.

    Floating-point and for reports only; the sorter never looks at angles.
    """
    if len(adj_faces) == 0:
        return []
    V = np.asarray(vertices, dtype=float)
    axis = V[d] - V[s]
    axis = axis / np.linalg.norm(axis)
    apexes = [V[apex_vertex(faces, f, s, d)] - V[s] for f in adj_faces]

    ref = apexes[0] - np.dot(apexes[0], axis) * axis
    e1 = ref / np.linalg.norm(ref)
    e2 = np.cross(e1, axis)  # left-hand rule: first quarter turn lands here

    angles: List[float] = []
    for u in apexes:
        theta = math.degrees(math.atan2(float(np.dot(u, e2)), float(np.dot(u, e1))))
        # roundoff can leave the reference half-plane a hair below zero
        angles.append(theta % 360.0 if abs(theta) > 1e-9 else 0.0)
    return angles


def coincident_groups(
    vertices: Any,
    faces: Any,
    s: int,
    d: int,
    adj_faces: Sequence[int],
    kernel: KernelLike = None,
) -> List[List[int]]:
    """Record positions that share one angular slot, in sweep order.

    Only slots holding two or more faces are returned.
    """
    fan = prepare_fan(vertices, faces, s, d, adj_faces, kernel)
    order = canonical_order(fan)
    if len(order) < 2:
        return []
    frame = fan.frame()
    groups: List[List[int]] = [[order[0]]]
    for i in order[1:]:
        if frame.compare(fan.apex_points[groups[-1][-1]], fan.apex_points[i]) == SAME_ANGLE:
            groups[-1].append(i)
        else:
            groups.append([i])
    return [g for g in groups if len(g) > 1]


def ordering_report(
    vertices: Any,
    faces: Any,
    s: int,
    d: int,
    adj_faces: Sequence[int],
    pivot_point: Optional[Sequence[Any]] = None,
    kernel: KernelLike = None,
) -> Dict[str, Any]:
    """JSON-ready summary of how the faces around ``(s, d)`` were ordered."""
    fan = prepare_fan(vertices, faces, s, d, adj_faces, kernel)
    order = canonical_order(fan)
    if pivot_point is not None:
        order = rotate_after_pivot(fan, order, resolve_pivot(fan, pivot_point))
    angles = sweep_angles(vertices, faces, s, d, adj_faces)
    frame = fan.frame() if fan.adj_faces else None

    rows = []
    for i in order:
        face_index, consistent = decode_signed_index(fan.adj_faces[i])
        rows.append({
            "position": i,
            "signed_index": fan.adj_faces[i],
            "face": face_index,
            "consistent": consistent,
            "apex": fan.apex_ids[i],
            "sector": frame.sector(fan.apex_points[i]),
            "angle_deg": round(angles[i], 6),
        })

    return {
        "edge": [fan.s, fan.d],
        "kernel": fan.kernel.name,
        "pivot": [float(c) for c in pivot_point] if pivot_point is not None else None,
        "order": order,
        "faces": rows,
        "coincident_groups": coincident_groups(vertices, faces, s, d, adj_faces, fan.kernel),
    }
