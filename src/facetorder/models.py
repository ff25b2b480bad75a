from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

# Three-way result of comparing two apexes in a clockwise sweep.
BEFORE = -1
SAME_ANGLE = 0
AFTER = 1


class InvalidArgumentError(ValueError):
    """Raised when an edge, face record or pivot violates a precondition."""


def encode_signed_index(face_index: int, consistent: bool) -> int:
    """Return ``(1 if consistent else -1) * (face_index + 1)``."""
    if face_index < 0:
        raise InvalidArgumentError(f"face_index must be >= 0, got {face_index}")
    return (face_index + 1) if consistent else -(face_index + 1)


def decode_signed_index(signed_index: int) -> tuple[int, bool]:
    """Split a signed face index into ``(face_index, consistent)``."""
    if signed_index == 0:
        raise InvalidArgumentError("signed face index 0 is not valid")
    return abs(signed_index) - 1, signed_index > 0


def face_contains_directed_edge(face: Sequence[int], a: int, b: int) -> bool:
    """True if the face cycle walks from *a* straight to *b*."""
    n = len(face)
    return any(face[i] == a and face[(i + 1) % n] == b for i in range(n))


def signed_index_for_edge(faces: Any, face_index: int, s: int, d: int) -> int:
    """Signed index of *face_index* relative to the directed edge ``(s, d)``.

    The face is consistent when it contains ``(d, s)`` as a directed edge.
    """
    face = [int(v) for v in faces[face_index]]
    if s not in face or d not in face:
        raise InvalidArgumentError(
            f"Face {face_index} {tuple(face)} does not contain edge ({s}, {d})"
        )
    return encode_signed_index(face_index, face_contains_directed_edge(face, d, s))


@dataclass(frozen=True)
class EdgeFan:
    """All faces around one directed edge, as handed to the sorter.

    *vertices* and *faces* are plain nested lists so the record can be
    written back to JSON unchanged.
    """

    vertices: tuple[tuple[Any, Any, Any], ...]
    faces: tuple[tuple[int, int, int], ...]
    s: int
    d: int
    adj_faces: tuple[int, ...] = field(default_factory=tuple)
    pivot_point: Optional[tuple[Any, Any, Any]] = None

    def face_count(self) -> int:
        return len(self.adj_faces)

    def validate(self) -> list[str]:
        """Return every problem the sorter would reject, as readable strings."""
        from .kernels import ExactKernel

        errors: list[str] = []
        edge_ok = self.s != self.d
        if not edge_ok:
            errors.append(f"Edge ({self.s}, {self.d}) is degenerate")
        for vid in (self.s, self.d):
            if not 0 <= vid < len(self.vertices):
                errors.append(f"Edge vertex {vid} out of range")
                edge_ok = False

        kernel = ExactKernel()
        s_point = d_point = None
        if edge_ok:
            try:
                s_point = kernel.point(self.vertices[self.s])
                d_point = kernel.point(self.vertices[self.d])
            except InvalidArgumentError as exc:
                errors.append(str(exc))
                edge_ok = False
        if edge_ok and kernel.coincident(s_point, d_point):
            errors.append(f"Edge ({self.s}, {self.d}) has zero length")
            edge_ok = False

        for signed in self.adj_faces:
            if signed == 0 or abs(signed) > len(self.faces):
                errors.append(f"Signed face index {signed} out of range")
                continue
            face_index = abs(signed) - 1
            face = self.faces[face_index]
            if self.s not in face or self.d not in face:
                errors.append(f"Face {face_index} does not contain edge ({self.s}, {self.d})")
                continue
            others = [v for v in face if v != self.s and v != self.d]
            if len(others) != 1:
                errors.append(f"Face {face_index} is degenerate at edge ({self.s}, {self.d})")
                continue
            apex = others[0]
            if not 0 <= apex < len(self.vertices):
                errors.append(f"Vertex index {apex} of face {face_index} out of range")
                continue
            if not edge_ok:
                continue
            try:
                apex_point = kernel.point(self.vertices[apex])
            except InvalidArgumentError as exc:
                errors.append(str(exc))
                continue
            if kernel.collinear(s_point, d_point, apex_point):
                errors.append(
                    f"Face {face_index} is degenerate: apex {apex} lies on the edge axis"
                )
        return errors

    def to_dict(self) -> dict:
        data: dict = {
            "vertices": [list(v) for v in self.vertices],
            "faces": [list(f) for f in self.faces],
            "edge": [self.s, self.d],
            "adj_faces": list(self.adj_faces),
        }
        if self.pivot_point is not None:
            data["pivot"] = list(self.pivot_point)
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "EdgeFan":
        s, d = data["edge"]
        pivot = data.get("pivot")
        return cls(
            vertices=tuple(tuple(v) for v in data["vertices"]),
            faces=tuple(tuple(int(i) for i in f) for f in data["faces"]),
            s=int(s),
            d=int(d),
            adj_faces=tuple(int(i) for i in data["adj_faces"]),
            pivot_point=tuple(pivot) if pivot is not None else None,
        )
