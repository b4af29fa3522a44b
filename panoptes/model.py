"""Model metadata: task types, input specification and class labels."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class TaskType(Enum):
    """Kinds of task a model performs."""

    SEGMENTATION = "Segmentation"
    DETECTION = "Detection"
    CLASSIFICATION = "Classification"
    CHANGE_DETECTION = "ChangeDetection"


@dataclass
class InputSpec:
    """Shape and normalisation the model expects for its input."""

    channels: int
    height: int
    width: int
    imagenet_normalize: bool


@dataclass
class ClassDef:
    """One output class with its display colour."""

    id: int
    name: str
    color: tuple[int, int, int]


@dataclass
class ModelConfig:
    """Complete model metadata."""

    name: str
    version: str
    task: TaskType
    input: InputSpec
    classes: list[ClassDef] = field(default_factory=list)
    confidence_threshold: float = 0.5
    model_path: str | None = None

    def num_classes(self) -> int:
        return len(self.classes)

    def class_name(self, class_id: int) -> str | None:
        """Name of the class with the given id, or None if there is none."""
        return next((c.name for c in self.classes if c.id == class_id), None)

    def to_json(self) -> str:
        return json.dumps(
            {
                "name": self.name,
                "version": self.version,
                "task": self.task.value,
                "input": {
                    "channels": self.input.channels,
                    "height": self.input.height,
                    "width": self.input.width,
                    "imagenet_normalize": self.input.imagenet_normalize,
                },
                "classes": [
                    {"id": c.id, "name": c.name, "color": list(c.color)}
                    for c in self.classes
                ],
                "confidence_threshold": self.confidence_threshold,
                "model_path": self.model_path,
            }
        )

    @classmethod
    def from_json(cls, text: str) -> ModelConfig:
        """Parse a configuration; raises ValueError if it is malformed."""
        try:
            data = json.loads(text)
            return cls._from_dict(data)
        except (KeyError, TypeError, AttributeError) as exc:
            raise ValueError(f"invalid model configuration: {exc}") from exc

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> ModelConfig:
        spec = data["input"]
        classes = []
        for entry in data["classes"]:
            color = tuple(int(v) for v in entry["color"])
            if len(color) != 3:
                raise ValueError("class color must have three components")
            classes.append(ClassDef(int(entry["id"]), str(entry["name"]), color))
        model_path = data["model_path"]
        return cls(
            name=str(data["name"]),
            version=str(data["version"]),
            task=TaskType(data["task"]),
            input=InputSpec(
                channels=int(spec["channels"]),
                height=int(spec["height"]),
                width=int(spec["width"]),
                imagenet_normalize=bool(spec["imagenet_normalize"]),
            ),
            classes=classes,
            confidence_threshold=float(data["confidence_threshold"]),
            model_path=None if model_path is None else str(model_path),
        )