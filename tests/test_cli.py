import json

import pytest

from facetorder.cli import main
from facetorder.io import load_edge_fan, save_edge_fan
from facetorder.models import EdgeFan


@pytest.fixture
def fan_path(tmp_path):
    fan = EdgeFan.from_dict({
        "vertices": [[0, 0, 0], [0, 0, 1], [1, 0, 0], [0, -1, 0], [-1, 0, 0], [0, 1, 0]],
        "faces": [[1, 0, 2], [1, 0, 3], [1, 0, 4], [1, 0, 5]],
        "edge": [0, 1],
        "adj_faces": [4, 3, 2, 1],
    })
    path = tmp_path / "fan.json"
    save_edge_fan(fan, path)
    return path


def _stdout_json(capsys):
    return json.loads(capsys.readouterr().out.strip().splitlines()[-1])


def test_io_round_trip(fan_path):
    fan = load_edge_fan(fan_path)
    assert fan.adj_faces == (4, 3, 2, 1)


def test_validate_ok(fan_path, capsys):
    main(["validate", "--in", str(fan_path)])
    assert capsys.readouterr().out.strip() == "OK"


def test_validate_reports_errors(tmp_path, capsys):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({
        "vertices": [[0, 0, 0], [0, 0, 1], [1, 0, 0]],
        "faces": [[1, 0, 2]],
        "edge": [0, 1],
        "adj_faces": [1, 2],
    }), encoding="utf-8")
    with pytest.raises(SystemExit) as exc:
        main(["validate", "--in", str(path)])
    assert exc.value.code == 1
    assert "out of range" in capsys.readouterr().out


def test_order(fan_path, capsys):
    main(["order", "--in", str(fan_path)])
    # records at 270, 180, 90, 0 degrees; the sweep starts at 270
    assert _stdout_json(capsys) == [0, 3, 2, 1]


def test_order_with_pivot_and_report(fan_path, tmp_path, capsys):
    report_path = tmp_path / "report.json"
    main([
        "order", "--in", str(fan_path),
        "--pivot", "1", "-1", "0",
        "--kernel", "filtered",
        "--report", str(report_path),
    ])
    assert _stdout_json(capsys) == [2, 1, 0, 3]
    report = json.loads(report_path.read_text(encoding="utf-8"))
    assert report["order"] == [2, 1, 0, 3]
    assert report["kernel"] == "filtered"


def test_order_invalid_input_exits(tmp_path, capsys):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({
        "vertices": [[0, 0, 0], [0, 0, 1], [1, 0, 0], [0, 1, 0]],
        "faces": [[1, 0, 2], [2, 3, 0]],
        "edge": [0, 1],
        "adj_faces": [1, 2],
    }), encoding="utf-8")
    with pytest.raises(SystemExit) as exc:
        main(["order", "--in", str(path)])
    assert exc.value.code == 1
    assert "does not contain edge" in capsys.readouterr().out


def test_debug_flag(fan_path, capsys):
    main(["--debug", "order", "--in", str(fan_path)])
    assert _stdout_json(capsys) == [0, 3, 2, 1]


def test_path(tmp_path, capsys):
    path = tmp_path / "graph.json"
    path.write_text(json.dumps({
        "adjacency": [[1], [0, 2], [1, 3], [2]],
        "vertices": [[0, 0, 0], [3, 0, 0], [3, 4, 0], [3, 4, 1]],
    }), encoding="utf-8")

    main(["path", "--in", str(path), "--source", "0", "--target", "3"])
    assert _stdout_json(capsys) == {"reached": 3, "distance": 3.0, "path": [0, 1, 2, 3]}

    main(["path", "--in", str(path), "--source", "0", "--target", "3", "--euclidean"])
    assert _stdout_json(capsys) == {"reached": 3, "distance": 8.0, "path": [0, 1, 2, 3]}


def test_path_unreachable(tmp_path, capsys):
    path = tmp_path / "graph.json"
    path.write_text(json.dumps({"adjacency": [[1], [0], []]}), encoding="utf-8")
    main(["path", "--in", str(path), "--source", "0", "--target", "2"])
    assert _stdout_json(capsys)["reached"] == -1


def test_path_euclidean_needs_vertices(tmp_path, capsys):
    path = tmp_path / "graph.json"
    path.write_text(json.dumps({"adjacency": [[1], [0]]}), encoding="utf-8")
    with pytest.raises(SystemExit):
        main(["path", "--in", str(path), "--source", "0", "--target", "1", "--euclidean"])


@pytest.mark.parametrize("command", ["validate", "order"])
@pytest.mark.parametrize("missing", ["edge", "faces", "adj_faces"])
def test_payload_missing_key_exits(tmp_path, capsys, command, missing):
    data = {
        "vertices": [[0, 0, 0], [0, 0, 1], [1, 0, 0]],
        "faces": [[1, 0, 2]],
        "edge": [0, 1],
        "adj_faces": [1],
    }
    del data[missing]
    path = tmp_path / "partial.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    with pytest.raises(SystemExit) as exc:
        main([command, "--in", str(path)])
    assert exc.value.code == 1
    out = capsys.readouterr().out
    assert out.startswith("error:")
    assert missing in out


def test_validate_agrees_with_order_on_axis_apex(tmp_path, capsys):
    path = tmp_path / "axis.json"
    path.write_text(json.dumps({
        "vertices": [[0, 0, 0], [0, 0, 1], [1, 0, 0], [0, 0, 2]],
        "faces": [[1, 0, 2], [1, 0, 3]],
        "edge": [0, 1],
        "adj_faces": [1, 2],
    }), encoding="utf-8")
    with pytest.raises(SystemExit):
        main(["validate", "--in", str(path)])
    assert "lies on the edge axis" in capsys.readouterr().out
    with pytest.raises(SystemExit):
        main(["order", "--in", str(path)])
    assert "lies on the edge axis" in capsys.readouterr().out
