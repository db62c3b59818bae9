import json

import pytest

import touch_draw.__main__ as cli


def _write_geojson(path, geometries):
    path.write_text(
        json.dumps(
            {
                "type": "FeatureCollection",
                "features": [{"type": "Feature", "geometry": g, "properties": {}} for g in geometries],
            }
        ),
        encoding="utf-8",
    )


SPINE = {"type": "LineString", "coordinates": [[0.0, -40.0], [0.0, 40.0]]}


def test_main_writes_drafted_polygon(tmp_path, capsys):
    source_path = tmp_path / "reference.geojson"
    _write_geojson(source_path, [SPINE])
    output_path = tmp_path / "out" / "drawn.geojson"

    cli.main([str(source_path), "--width", "4", "--output-path", str(output_path)])

    stdout = capsys.readouterr().out
    assert "Proposed handles: 1" in stdout
    assert "scale: 4.0000 m" in stdout

    written = json.loads(output_path.read_text(encoding="utf-8"))
    (feature,) = written["features"]
    assert feature["geometry"]["type"] == "Polygon"
    ring = feature["geometry"]["coordinates"][0]
    assert len(ring) == 5
    assert sorted({round(x, 9) for x, _y in ring}) == [-4.0, 0.0]
    assert sorted({round(y, 9) for _x, y in ring}) == [-40.0, 40.0]


def test_main_drag_and_offsets(tmp_path, capsys):
    source_path = tmp_path / "reference.geojson"
    _write_geojson(source_path, [SPINE])

    cli.main([str(source_path), "--drag", "3,0", "--offset-along", "2"])

    stdout = capsys.readouterr().out
    assert "scale: 3.0000 m" in stdout
    assert "y-move: 2.0000 m" in stdout
    assert "x-move" not in stdout


def test_main_reports_invalid_width(tmp_path, caplog):
    source_path = tmp_path / "reference.geojson"
    _write_geojson(source_path, [SPINE])

    cli.main([str(source_path), "--width", "abc"])

    assert any("Ignoring invalid dimension" in record.getMessage() for record in caplog.records)


def test_main_without_features_exits(tmp_path):
    source_path = tmp_path / "empty.geojson"
    _write_geojson(source_path, [])

    with pytest.raises(SystemExit) as excinfo:
        cli.main([str(source_path)])

    assert excinfo.value.code == 1


def test_main_rejects_out_of_range_handle(tmp_path):
    source_path = tmp_path / "reference.geojson"
    _write_geojson(source_path, [SPINE])

    with pytest.raises(SystemExit):
        cli.main([str(source_path), "--handle-index", "5"])


def test_load_features_accepts_bare_geometry(tmp_path):
    path = tmp_path / "geometry.json"
    path.write_text(json.dumps(SPINE), encoding="utf-8")

    (feature,) = cli.load_features(path)

    assert feature.geometry.geom_type == "LineString"
    assert feature.properties == {}
