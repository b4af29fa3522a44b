import json

from panoptes.geojson_io import features_to_geojson, to_geojson_string
from panoptes.polygonize import VectorFeature


def _triangle() -> VectorFeature:
    return VectorFeature(
        class_id=1,
        geometry=[(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 0.0)],
        area_px=100.0,
        confidence=0.95,
    )


def test_to_geojson():
    geojson_str = to_geojson_string([_triangle()])
    assert "Polygon" in geojson_str
    assert "class_id" in geojson_str
    assert "confidence" in geojson_str


def test_string_parses_to_feature_collection():
    parsed = json.loads(to_geojson_string([_triangle()]))
    assert parsed["type"] == "FeatureCollection"
    assert len(parsed["features"]) == 1
    feature = parsed["features"][0]
    assert feature["type"] == "Feature"
    assert feature["geometry"]["type"] == "Polygon"
    assert feature["geometry"]["coordinates"] == [[[0, 0], [1, 0], [1, 1], [0, 0]]]
    assert feature["properties"] == {"class_id": 1, "area_px": 100.0, "confidence": 0.95}


def test_empty_collection():
    assert features_to_geojson([]) == {"type": "FeatureCollection", "features": []}
    assert json.loads(to_geojson_string([])) == {"type": "FeatureCollection", "features": []}


def test_feature_order_preserved():
    second = VectorFeature(
        class_id=2,
        geometry=[(5.0, 5.0), (6.0, 5.0), (6.0, 6.0), (5.0, 5.0)],
        area_px=1.0,
        confidence=1.0,
    )
    collection = features_to_geojson([_triangle(), second])
    ids = [f["properties"]["class_id"] for f in collection["features"]]
    assert ids == [1, 2]