"""Satellite image processing: calibration, atmospheric correction,
pan-sharpening, spectral indices and mosaic compositing."""

from __future__ import annotations

import math
import sys
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum, auto

_EPSILON = sys.float_info.epsilon


class Sensor(Enum):
    """Supported satellite sensors."""

    SENTINEL2A = auto()
    SENTINEL2B = auto()
    LANDSAT8 = auto()
    LANDSAT9 = auto()
    PLANETSCOPE = auto()
    WORLDVIEW3 = auto()
    GENERIC = auto()


@dataclass
class ImageMetadata:
    """Acquisition metadata for a satellite image."""

    sensor: Sensor
    acquisition_date: str
    sun_elevation: float
    sun_azimuth: float
    cloud_cover_percent: float | None
    earth_sun_distance: float
    bbox: tuple[float, float, float, float]


@dataclass
class SatelliteImage:
    """A multi-band raster keyed by band name."""

    bands: dict[str, list[float]]
    width: int
    height: int
    metadata: ImageMetadata


@dataclass
class CalibrationCoeffs:
    """Radiometric calibration coefficients for one band."""

    gain: float
    offset: float
    solar_irradiance: float


@dataclass
class PansharpenInput:
    """Inputs for Brovey pan-sharpening."""

    pan: Sequence[float]
    red: Sequence[float]
    green: Sequence[float]
    blue: Sequence[float]
    pan_width: int
    pan_height: int
    ms_width: int
    ms_height: int


@dataclass
class PansharpenedImage:
    """Result of pan-sharpening at panchromatic resolution."""

    red: list[float] = field(default_factory=list)
    green: list[float] = field(default_factory=list)
    blue: list[float] = field(default_factory=list)
    width: int = 0
    height: int = 0


class CompositeMethod(Enum):
    """How overlapping pixels are combined in a mosaic."""

    LAST = auto()
    AVERAGE = auto()
    MEDIAN = auto()
    MIN = auto()
    MAX = auto()


def dn_to_toa_reflectance(
    image: SatelliteImage, band: str, coeffs: CalibrationCoeffs
) -> list[float]:
    """Convert raw digital numbers of a band to top-of-atmosphere reflectance."""
    try:
        data = image.bands[band]
    except KeyError:
        raise KeyError(f"band '{band}' not found") from None

    cos_zenith = math.cos(math.radians(90.0 - image.metadata.sun_elevation))
    d_sq = image.metadata.earth_sun_distance**2
    denominator = coeffs.solar_irradiance * cos_zenith
    return [
        _divide(math.pi * (coeffs.gain * dn + coeffs.offset) * d_sq, denominator)
        for dn in data
    ]


def _divide(numerator: float, denominator: float) -> float:
    if denominator == 0.0:
        if numerator == 0.0 or math.isnan(numerator):
            return float("nan")
        return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)
    return numerator / denominator


def dos1_correction(band_data: Sequence[float], dark_object_percentile: float) -> list[float]:
    """Dark Object Subtraction: subtract the dark-object value, clamping at zero."""
    finite = sorted(v for v in band_data if math.isfinite(v))
    if finite:
        raw_index = len(finite) * dark_object_percentile / 100.0
        index = int(raw_index) if math.isfinite(raw_index) and raw_index > 0 else 0
        if raw_index == math.inf:
            index = len(finite) - 1
        path_radiance = finite[min(index, len(finite) - 1)]
    else:
        path_radiance = 0.0

    corrected = []
    for value in band_data:
        difference = value - path_radiance
        corrected.append(difference if difference > 0.0 else 0.0)
    return corrected


def pansharpen_brovey(params: PansharpenInput) -> PansharpenedImage:
    """Fuse a panchromatic band with RGB bands using the Brovey transform."""
    pan_width, pan_height = params.pan_width, params.pan_height
    ms_width, ms_height = params.ms_width, params.ms_height
    if len(params.pan) != pan_width * pan_height:
        raise ValueError("pan dimensions mismatch")
    if len(params.red) != ms_width * ms_height:
        raise ValueError("multispectral dimensions mismatch")

    result = PansharpenedImage(width=pan_width, height=pan_height)
    if pan_width * pan_height == 0:
        return result
    if ms_width == 0 or ms_height == 0:
        raise ValueError("multispectral dimensions must be non-zero")

    scale_x = ms_width / pan_width
    scale_y = ms_height / pan_height

    def sample(band: Sequence[float], index: int) -> float:
        return band[index] if index < len(band) else 0.0

    for y in range(pan_height):
        ms_row = min(int(y * scale_y), ms_height - 1) * ms_width
        for x in range(pan_width):
            ms_idx = ms_row + min(int(x * scale_x), ms_width - 1)
            r = sample(params.red, ms_idx)
            g = sample(params.green, ms_idx)
            b = sample(params.blue, ms_idx)
            p = params.pan[y * pan_width + x]
            total = r + g + b
            if total > 0.0:
                result.red.append(r / total * p)
                result.green.append(g / total * p)
                result.blue.append(b / total * p)
            else:
                result.red.append(0.0)
                result.green.append(0.0)
                result.blue.append(0.0)
    return result


def _normalized_difference(a: Sequence[float], b: Sequence[float]) -> list[float]:
    out = []
    for x, y in zip(a, b):
        total = x + y
        out.append(0.0 if abs(total) < _EPSILON else _divide(x - y, total))
    return out


def ndvi(nir: Sequence[float], red: Sequence[float]) -> list[float]:
    """Normalized Difference Vegetation Index: (NIR - Red) / (NIR + Red)."""
    return _normalized_difference(nir, red)


def ndwi(green: Sequence[float], nir: Sequence[float]) -> list[float]:
    """Normalized Difference Water Index: (Green - NIR) / (Green + NIR)."""
    return _normalized_difference(green, nir)


def nbr(nir: Sequence[float], swir: Sequence[float]) -> list[float]:
    """Normalized Burn Ratio: (NIR - SWIR) / (NIR + SWIR)."""
    return _normalized_difference(nir, swir)


def evi(nir: Sequence[float], red: Sequence[float], blue: Sequence[float]) -> list[float]:
    """Enhanced Vegetation Index: 2.5 * (NIR - Red) / (NIR + 6*Red - 7.5*Blue + 1)."""
    out = []
    for n, r, b in zip(nir, red, blue):
        denom = n + 6.0 * r - 7.5 * b + 1.0
        out.append(0.0 if abs(denom) < _EPSILON else _divide(2.5 * (n - r), denom))
    return out


def savi(nir: Sequence[float], red: Sequence[float], l: float) -> list[float]:  # noqa: E741
    """Soil Adjusted Vegetation Index: (NIR - Red) / (NIR + Red + L) * (1 + L)."""
    out = []
    for n, r in zip(nir, red):
        denom = n + r + l
        out.append(0.0 if abs(denom) < _EPSILON else _divide(n - r, denom) * (1.0 + l))
    return out


def composite(layers: Sequence[Sequence[float]], method: CompositeMethod) -> list[float]:
    """Combine overlapping layers pixel by pixel, ignoring non-finite values.

    The output has the length of the first layer; a pixel with no finite value is NaN.
    """
    if not layers:
        return []

    out = []
    for i in range(len(layers[0])):
        values = [
            layer[i] for layer in layers if i < len(layer) and math.isfinite(layer[i])
        ]
        if not values:
            out.append(float("nan"))
        elif method is CompositeMethod.LAST:
            out.append(values[-1])
        elif method is CompositeMethod.AVERAGE:
            out.append(sum(values) / len(values))
        elif method is CompositeMethod.MEDIAN:
            out.append(sorted(values)[len(values) // 2])
        elif method is CompositeMethod.MIN:
            out.append(min(values))
        else:
            out.append(max(values))
    return out