"""facetorder — circular ordering of the faces around a mesh edge.

Public API is organised into layers:

- **Core** — signed face indices, comparison constants, errors, kernels
- **Ordering** — predicate evaluator, circular sorter, pivot rebase
- **Collaborators** — shortest paths over a vertex adjacency list
- **Diagnostics** — order checks and ordering reports
"""

# ── Core ────────────────────────────────────────────────────────────
from .models import (
    AFTER,
    BEFORE,
    SAME_ANGLE,
    EdgeFan,
    InvalidArgumentError,
    decode_signed_index,
    encode_signed_index,
    signed_index_for_edge,
)
from .kernels import (
    DEFAULT_KERNEL,
    KERNELS,
    ExactKernel,
    FilteredKernel,
    FloatKernel,
    GeometricKernel,
    get_kernel,
)
from .io import load_edge_fan, save_edge_fan

# ── Ordering ────────────────────────────────────────────────────────
from .predicates import AngularFrame, compare_apexes
from .ordering import order_facets_around_edge, rebase_on_pivot

# ── Collaborators ───────────────────────────────────────────────────
from .dijkstra import dijkstra, dijkstra_euclidean, dijkstra_path

# ── Diagnostics ─────────────────────────────────────────────────────
from .diagnostics import (
    coincident_groups,
    is_cyclic_rotation,
    is_permutation,
    ordering_report,
    sweep_angles,
)

__all__ = [
    # Core
    "AFTER",
    "BEFORE",
    "SAME_ANGLE",
    "EdgeFan",
    "InvalidArgumentError",
    "decode_signed_index",
    "encode_signed_index",
    "signed_index_for_edge",
    "DEFAULT_KERNEL",
    "KERNELS",
    "ExactKernel",
    "FilteredKernel",
    "FloatKernel",
    "GeometricKernel",
    "get_kernel",
    "load_edge_fan",
    "save_edge_fan",
    # Ordering
    "AngularFrame",
    "compare_apexes",
    "order_facets_around_edge",
    "rebase_on_pivot",
    # Collaborators
    "dijkstra",
    "dijkstra_euclidean",
    "dijkstra_path",
    # Diagnostics
    "coincident_groups",
    "is_cyclic_rotation",
    "is_permutation",
    "ordering_report",
    "sweep_angles",
]
