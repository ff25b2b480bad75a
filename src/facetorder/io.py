from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Union

from .models import EdgeFan


PathLike = Union[str, Path]


def load_edge_fan(path: PathLike) -> EdgeFan:
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return EdgeFan.from_dict(data)


def save_edge_fan(fan: EdgeFan, path: PathLike) -> None:
    save_json(fan.to_dict(), path)


def load_graph(path: PathLike) -> Dict[str, Any]:
    """Read a shortest-path request: ``adjacency`` plus optional ``weights``/``vertices``."""
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if "adjacency" not in data:
        raise ValueError(f"{path}: missing 'adjacency'")
    return {
        "adjacency": [[int(v) for v in nbrs] for nbrs in data["adjacency"]],
        "weights": data.get("weights"),
        "vertices": data.get("vertices"),
    }


def save_json(data: Dict[str, Any], path: PathLike) -> None:
    Path(path).write_text(json.dumps(data, indent=2), encoding="utf-8")
