import json
import math

import pytest

from facetorder.diagnostics import (
    apex_vertex,
    coincident_groups,
    is_cyclic_rotation,
    is_permutation,
    ordering_report,
    sweep_angles,
)
from facetorder.ordering import order_facets_around_edge


@pytest.fixture
def fan():
    """Apexes at 0, 90, 180, 180 (duplicate) and 270 degrees around +z."""
    V = [
        (0, 0, 0), (0, 0, 1),
        (1, 0, 0), (0, -1, 0), (-1, 0, 0), (0, 1, 0),
    ]
    F = [(1, 0, 2), (1, 0, 3), (1, 0, 4), (1, 0, 5), (0, 1, 4)]
    return V, F, [1, 2, 3, -5, 4]


def test_is_permutation():
    assert is_permutation([2, 0, 1], 3)
    assert not is_permutation([0, 0, 1], 3)
    assert not is_permutation([0, 1], 3)
    assert is_permutation([], 0)


def test_is_cyclic_rotation():
    assert is_cyclic_rotation([1, 2, 3], [3, 1, 2])
    assert not is_cyclic_rotation([1, 2, 3], [1, 3, 2])
    assert not is_cyclic_rotation([1, 2], [1, 2, 3])
    assert is_cyclic_rotation([], [])


def test_apex_vertex(fan):
    V, F, adj = fan
    assert [apex_vertex(F, f, 0, 1) for f in adj] == [2, 3, 4, 4, 5]


def test_sweep_angles(fan):
    V, F, adj = fan
    assert sweep_angles(V, F, 0, 1, adj) == pytest.approx([0.0, 90.0, 180.0, 180.0, 270.0])


def test_sweep_angles_from_other_reference(fan):
    V, F, _ = fan
    angles = sweep_angles(V, F, 0, 1, [2, 1])
    assert angles == pytest.approx([0.0, 270.0])


def test_coincident_groups(fan):
    V, F, adj = fan
    assert coincident_groups(V, F, 0, 1, adj) == [[3, 2]]
    assert coincident_groups(V, F, 0, 1, [1, 2]) == []


def test_ordering_report(fan):
    V, F, adj = fan
    report = ordering_report(V, F, 0, 1, adj)
    assert report["edge"] == [0, 1]
    assert report["kernel"] == "exact"
    assert report["order"] == [0, 1, 3, 2, 4]
    assert [row["signed_index"] for row in report["faces"]] == [1, 2, -5, 3, 4]
    assert [row["sector"] for row in report["faces"]] == [0, 1, 2, 2, 3]
    assert report["faces"][2]["consistent"] is False
    assert report["coincident_groups"] == [[3, 2]]
    json.dumps(report)


def test_ordering_report_with_pivot(fan):
    V, F, adj = fan
    report = ordering_report(V, F, 0, 1, adj, pivot_point=(-1, -1, 0), kernel="filtered")
    assert report["order"] == [3, 2, 4, 0, 1]
    assert report["pivot"] == [-1.0, -1.0, 0.0]
    assert report["kernel"] == "filtered"
    assert math.isclose(report["faces"][0]["angle_deg"], 180.0)


@pytest.mark.parametrize("pivot", [(1, 1, 0), (-1, -1, 0), (0, -1, 0)])
def test_ordering_report_pivot_matches_sorter(fan, pivot):
    V, F, adj = fan
    report = ordering_report(V, F, 0, 1, adj, pivot_point=pivot)
    assert report["order"] == order_facets_around_edge(V, F, 0, 1, adj, pivot_point=pivot)


def test_ordering_report_empty(fan):
    V, F, _ = fan
    report = ordering_report(V, F, 0, 1, [])
    assert report["order"] == []
    assert report["faces"] == []
    assert report["coincident_groups"] == []
