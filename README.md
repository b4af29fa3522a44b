# panoptes

Tools for geospatial imagery: pixel-difference change detection between
two dates, sliding-window tiling, image pyramids, vectorisation of class
masks into polygons with GeoJSON output, polygon simplification,
Cloud-Optimized GeoTIFF tile indexing, and satellite image processing
(TOA reflectance, DOS1 correction, Brovey pan-sharpening, spectral
indices, mosaicking). It also carries a catalog of model configurations.

Images are NumPy arrays in CHW layout (channels, height, width) with
values in the range 0-255.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Change detection to GeoJSON

```python
from panoptes.tile import load_image
from panoptes.change import detect_change, band_change_stats
from panoptes.polygonize import polygonize_class
from panoptes.geojson_io import to_geojson_string

before = load_image("2020.png")   # float32 RGB, CHW
after = load_image("2024.png")

result = detect_change(before, after, 0.3)
print(f"{result.change_ratio:.1%} of pixels changed")
print(band_change_stats(before, after))   # mean absolute difference per band

features = polygonize_class(result.change_mask, 1, 10.0)
with open("changes.geojson", "w") as out:
    out.write(to_geojson_string(features))
```

- `detect_change` averages the absolute difference over channels, divides
  by 255 and caps at 1.0; pixels at or above the threshold are marked 1 in
  `change_mask`.
- `polygonize_class(mask, class_id, min_area)` finds 4-connected regions of
  one class and returns a `VectorFeature` per region of at least
  `min_area` pixels. The geometry is the region's bounding rectangle as a
  closed ring of `(x, y)` points. `polygonize_all(mask, num_classes,
  min_area)` does this for classes `0..num_classes-1`. An empty mask
  raises `EmptyMaskError`.
- `features_to_geojson` returns a FeatureCollection mapping;
  `to_geojson_string` serialises it compactly. Each feature carries
  `class_id`, `area_px` and `confidence` properties.
- `simplify_polygon(points, tolerance)` applies Ramer-Douglas-Peucker to a
  ring; `simplify_features(features, tolerance)` does so in place for a
  list of features.

## Images and tiles

```python
from panoptes.tile import create_test_tile, tensor_to_image, image_to_tensor
from panoptes.window import WindowConfig, extract_tiles, tile_count
from panoptes.pyramid import build_pyramid

image = create_test_tile(1024, 1024, (100.0, 150.0, 200.0))
config = WindowConfig.square(512, 128)          # stride 384
tiles = extract_tiles(image, config)            # Tile objects with origin_x/origin_y
assert len(tiles) == tile_count(1024, 1024, config)

levels = build_pyramid(image, 4)                # 1024, 512, 256, 128 pixels wide
png = tensor_to_image(image)                    # Pillow RGB image
```

`load_image` raises `TileError` when a file cannot be read or decoded.
`WindowConfig` raises `ValueError` when the overlap is not smaller than
the tile size.

## Cloud-Optimized GeoTIFF

```python
from panoptes.cog import parse_cog_metadata, tiles_for_bounds, read_raw_tile

with open("scene.tif", "rb") as f:
    meta = parse_cog_metadata(f)
    full = meta.levels[0]
    for index in tiles_for_bounds(full, 0, 0, 512, 512):
        raw = read_raw_tile(f, meta, 0, index)   # undecoded tile bytes
```

`parse_cog_metadata` walks the IFD chain of a little- or big-endian TIFF
and records, per level, the image and tile sizes and the tile offsets and
byte counts. Errors raise `CogError`; a bad header raises
`InvalidHeaderError` and a missing level or tile raises
`TileNotFoundError`. Tiles are returned as stored; they are not
decompressed.

## Satellite imagery

```python
from panoptes.satellite import ndvi, composite, CompositeMethod, dos1_correction

ndvi([0.5, 0.8, 0.3], [0.1, 0.2, 0.3])            # about [0.667, 0.6, 0.0]
composite([[1.0, 2.0, float("nan")], [3.0, float("nan"), 4.0]],
          CompositeMethod.AVERAGE)                # [2.0, 2.0, 4.0]
dos1_correction([100.0, 200.0, 50.0], 1.0)        # [50.0, 150.0, 0.0]
```

Also available: `ndwi`, `evi`, `nbr`, `savi`, `dn_to_toa_reflectance`
(takes a `SatelliteImage` and `CalibrationCoeffs`, raises `KeyError` for
an unknown band) and `pansharpen_brovey`, which takes a `PansharpenInput`
and returns a `PansharpenedImage` at panchromatic resolution, raising
`ValueError` on mismatched dimensions.

## Model configurations

`panoptes.catalog` provides `building_segmentation`, `road_segmentation`,
`land_cover_classification`, `vegetation_detection`, `change_detection`
and `list_models`. Each returns a `ModelConfig` (from `panoptes.model`)
with its input specification, classes and confidence threshold;
`ModelConfig.to_json` and `ModelConfig.from_json` convert it to and from
JSON.

## What the package does not do

The package has no command-line program and no inference: it does not run
models, segment images with the catalog configurations, or compute
accuracy metrics against ground truth. The model configurations describe
models; nothing in the package executes them.