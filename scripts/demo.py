import json
import math
import sys
from pathlib import Path

ROOT = Path(__file__).parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from facetorder import (
    order_facets_around_edge,
    ordering_report,
    signed_index_for_edge,
)


def build_book(pages: int = 5):
    """A "book" of triangles hinged on edge (0, 1), plus one duplicated page."""
    vertices = [(0.0, 0.0, 0.0), (0.0, 0.0, 1.0)]
    faces = []
    for i in range(pages):
        theta = 2.0 * math.pi * i / pages
        vertices.append((math.cos(theta), -math.sin(theta), 0.5))
        faces.append((1, 0, i + 2) if i % 2 == 0 else (0, 1, i + 2))
    faces.append((0, 1, 3))
    return vertices, faces


def main() -> None:
    vertices, faces = build_book()
    adj_faces = [signed_index_for_edge(faces, i, 0, 1) for i in range(len(faces))]

    print("Signed faces:", adj_faces)
    print("Order:", order_facets_around_edge(vertices, faces, 0, 1, adj_faces))
    print("Order after pivot (0, 1, 0):",
          order_facets_around_edge(vertices, faces, 0, 1, adj_faces, pivot_point=(0.0, 1.0, 0.0)))
    report = ordering_report(vertices, faces, 0, 1, adj_faces, kernel="filtered")
    print(json.dumps(report, indent=2))


if __name__ == "__main__":
    main()
