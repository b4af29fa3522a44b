"""GeoJSON output for vector features."""

from __future__ import annotations

import json
from collections.abc import Iterable
from typing import Any

from panoptes.polygonize import VectorFeature


def _feature(feature: VectorFeature) -> dict[str, Any]:
    return {
        "type": "Feature",
        "geometry": {
            "type": "Polygon",
            "coordinates": [[[float(x), float(y)] for x, y in feature.geometry]],
        },
        "properties": {
            "class_id": feature.class_id,
            "area_px": feature.area_px,
            "confidence": feature.confidence,
        },
    }


def features_to_geojson(features: Iterable[VectorFeature]) -> dict[str, Any]:
    """Build a GeoJSON FeatureCollection mapping from vector features."""
    return {
        "type": "FeatureCollection",
        "features": [_feature(feature) for feature in features],
    }


def to_geojson_string(features: Iterable[VectorFeature]) -> str:
    """Serialize features to a compact GeoJSON FeatureCollection string."""
    return json.dumps(features_to_geojson(features), separators=(",", ":"))