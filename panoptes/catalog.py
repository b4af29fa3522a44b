"""Pre-defined model configurations for common geospatial tasks."""

from __future__ import annotations

from panoptes.model import ClassDef, InputSpec, ModelConfig, TaskType


def _config(
    name: str,
    task: TaskType,
    size: int,
    channels: int,
    classes: list[tuple[str, tuple[int, int, int]]],
    threshold: float,
) -> ModelConfig:
    return ModelConfig(
        name=name,
        version="1.0.0",
        task=task,
        input=InputSpec(channels=channels, height=size, width=size, imagenet_normalize=True),
        classes=[ClassDef(id=i, name=n, color=c) for i, (n, c) in enumerate(classes)],
        confidence_threshold=threshold,
        model_path=None,
    )


def building_segmentation() -> ModelConfig:
    """Building footprint segmentation."""
    return _config(
        "panoptes-buildings-v1",
        TaskType.SEGMENTATION,
        512,
        3,
        [("background", (0, 0, 0)), ("building", (255, 0, 0))],
        0.5,
    )


def road_segmentation() -> ModelConfig:
    """Road network segmentation."""
    return _config(
        "panoptes-roads-v1",
        TaskType.SEGMENTATION,
        512,
        3,
        [("background", (0, 0, 0)), ("road", (255, 255, 0))],
        0.4,
    )


def land_cover_classification() -> ModelConfig:
    """Five-class land cover segmentation."""
    return _config(
        "panoptes-landcover-v1",
        TaskType.SEGMENTATION,
        256,
        3,
        [
            ("water", (0, 0, 255)),
            ("vegetation", (0, 255, 0)),
            ("bare_soil", (139, 69, 19)),
            ("built_up", (128, 128, 128)),
            ("agriculture", (255, 255, 0)),
        ],
        0.3,
    )


def vegetation_detection() -> ModelConfig:
    """Vegetation type segmentation."""
    return _config(
        "panoptes-vegetation-v1",
        TaskType.SEGMENTATION,
        512,
        3,
        [
            ("non_vegetation", (128, 128, 128)),
            ("trees", (0, 128, 0)),
            ("shrubs", (0, 255, 0)),
            ("grass", (144, 238, 144)),
        ],
        0.4,
    )


def change_detection() -> ModelConfig:
    """Change detection over a stacked before/after RGB pair (six channels)."""
    return _config(
        "panoptes-change-v1",
        TaskType.CHANGE_DETECTION,
        256,
        6,
        [("no_change", (0, 0, 0)), ("change", (255, 0, 255))],
        0.5,
    )


def list_models() -> list[ModelConfig]:
    """All catalog models, in a fixed order."""
    return [
        building_segmentation(),
        road_segmentation(),
        land_cover_classification(),
        vegetation_detection(),
        change_detection(),
    ]