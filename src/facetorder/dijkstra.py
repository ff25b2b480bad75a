"""Single-source shortest paths over a vertex adjacency list.

Three weightings are supported: unit weights, a per-vertex weight paid
when leaving a vertex, and Euclidean edge lengths from vertex positions.
The search stops at the first target vertex taken off the queue.
"""

from __future__ import annotations

import heapq
import logging
from typing import Any, Callable, Iterable, List, Optional, Sequence, Tuple

import numpy as np

logger = logging.getLogger(__name__)

ShortestPaths = Tuple[int, np.ndarray, np.ndarray]
"""``(reached_target, min_distance, previous)``; ``reached_target`` is -1 if none."""


def _search(
    source: int,
    targets: Iterable[int],
    adjacency: Sequence[Sequence[int]],
    weight: Callable[[int, int], float],
) -> ShortestPaths:
    n = len(adjacency)
    if not 0 <= source < n:
        raise ValueError(f"source {source} out of range [0, {n})")
    target_set = {int(t) for t in targets}

    min_distance = np.full(n, np.inf)
    previous = np.full(n, -1, dtype=np.int64)
    min_distance[source] = 0.0
    heap: List[Tuple[float, int]] = [(0.0, source)]

    while heap:
        dist, u = heapq.heappop(heap)
        if dist > min_distance[u]:
            continue  # stale entry
        if u in target_set:
            logger.debug("dijkstra: reached target %d from %d at distance %g", u, source, dist)
            return u, min_distance, previous
        for v in adjacency[u]:
            v = int(v)
            if not 0 <= v < n:
                raise ValueError(f"neighbor {v} of vertex {u} out of range [0, {n})")
            through_u = dist + weight(u, v)
            if through_u < min_distance[v]:
                min_distance[v] = through_u
                previous[v] = u
                heapq.heappush(heap, (through_u, v))

    logger.debug("dijkstra: no target reachable from %d", source)
    return -1, min_distance, previous


def dijkstra(
    source: int,
    targets: Iterable[int],
    adjacency: Sequence[Sequence[int]],
    weights: Optional[Sequence[float]] = None,
) -> ShortestPaths:
    """Shortest paths where leaving vertex ``u`` costs ``weights[u]``.

    With no *weights* every step costs 1.
    """
    n = len(adjacency)
    if weights is None:
        w = np.ones(n)
    else:
        w = np.asarray(weights, dtype=float)
        if w.shape != (n,):
            raise ValueError(f"weights must have one entry per vertex ({n}), got shape {w.shape}")
        if np.any(w < 0) or not np.all(np.isfinite(w)):
            raise ValueError("weights must be finite and non-negative")
    return _search(int(source), targets, adjacency, lambda u, v: float(w[u]))


def dijkstra_euclidean(
    vertices: Any,
    adjacency: Sequence[Sequence[int]],
    source: int,
    targets: Iterable[int],
) -> ShortestPaths:
    """Shortest paths weighted by the Euclidean length of each edge."""
    V = np.asarray(vertices, dtype=float)
    if V.ndim != 2 or len(V) < len(adjacency):
        raise ValueError(
            f"vertices must be a table with at least {len(adjacency)} rows, got shape {V.shape}"
        )
    return _search(
        int(source), targets, adjacency, lambda u, v: float(np.linalg.norm(V[u] - V[v]))
    )


def dijkstra_path(vertex: int, previous: Sequence[int]) -> List[int]:
    """Walk predecessors from *vertex* back to the source.

    The returned list starts at *vertex* and ends at the source.
    """
    path: List[int] = []
    current = int(vertex)
    while current != -1:
        path.append(current)
        if len(path) > len(previous):
            raise ValueError("predecessor vector contains a cycle")
        current = int(previous[current])
    return path
