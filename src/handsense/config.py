"""Configuration classes for gesture recognition.

Settings are owned by the caller and read-only to the arbiter; a new
settings object is passed with every frame.

Example:
    >>> from handsense.config import GestureSettings, load_settings
    >>> settings = GestureSettings(detection_method="frame-diff", motion_threshold=40)
    >>> settings.detection_method
    <DetectionMethod.FRAME_DIFF: 'frame-diff'>
    >>>
    >>> settings, backend = load_settings("gestures.yaml")
"""

import dataclasses
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Tuple, Union

import yaml

from handsense.classifiers.dynamic import DEFAULT_MOTION_THRESHOLD, clamp_motion_threshold
from handsense.errors import SettingsError
from handsense.types import DetectionMethod


def _parse_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("on", "true", "yes", "1"):
            return True
        if lowered in ("off", "false", "no", "0"):
            return False
    if isinstance(value, int):
        return bool(value)
    raise SettingsError(f"{name} must be a boolean or on/off, got {value!r}")


@dataclass(frozen=True)
class GestureSettings:
    """Per-frame recognition settings.

    Attributes:
        detection_method: Which secondary classifier runs besides the
            static one. Strings like "frame-diff" are parsed.
        motion_threshold: Per-pixel luminance change that counts as motion.
            Clamped to [10, 100].
        learning_mode: Record novel high-confidence labels as custom gestures.
        background_subtraction: Accepted for compatibility with the UI
            settings panel. No classifier reads it.
    """

    detection_method: DetectionMethod = DetectionMethod.MANUAL
    motion_threshold: float = DEFAULT_MOTION_THRESHOLD
    learning_mode: bool = False
    background_subtraction: bool = True

    def __post_init__(self) -> None:
        method = self.detection_method
        if not isinstance(method, DetectionMethod):
            try:
                method = DetectionMethod.from_string(str(method))
            except ValueError as e:
                raise SettingsError(str(e)) from e
        try:
            threshold = float(self.motion_threshold)
        except (TypeError, ValueError) as e:
            raise SettingsError(
                f"motion_threshold must be a number, got {self.motion_threshold!r}"
            ) from e

        # frozen dataclass: normalize through object.__setattr__
        object.__setattr__(self, "detection_method", method)
        object.__setattr__(self, "motion_threshold", clamp_motion_threshold(threshold))
        object.__setattr__(
            self, "learning_mode", _parse_bool("learning_mode", self.learning_mode)
        )
        object.__setattr__(
            self,
            "background_subtraction",
            _parse_bool("background_subtraction", self.background_subtraction),
        )

    def replace(self, **changes: Any) -> "GestureSettings":
        """Return a validated copy with ``changes`` applied."""
        return dataclasses.replace(self, **changes)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GestureSettings":
        """Create GestureSettings from a dictionary (e.g., loaded from YAML).

        Keys may use dashes or underscores ("detection-method" or
        "detection_method"). Unknown keys are ignored.
        """
        normalized = {str(k).replace("-", "_"): v for k, v in (data or {}).items()}
        names = {f.name for f in dataclasses.fields(cls)}
        return cls(**{k: v for k, v in normalized.items() if k in names})

    def to_dict(self) -> Dict[str, Any]:
        return {
            "detection_method": self.detection_method.value,
            "motion_threshold": self.motion_threshold,
            "learning_mode": self.learning_mode,
            "background_subtraction": self.background_subtraction,
        }


@dataclass
class BackendSettings:
    """Options for the MediaPipe hand landmark backend.

    Attributes:
        max_num_hands: Maximum number of hands to detect.
        min_detection_confidence: Minimum confidence for detection.
        min_tracking_confidence: Minimum confidence for tracking.
        device: Device passed to ``initialize()``.
    """

    max_num_hands: int = 2
    min_detection_confidence: float = 0.5
    min_tracking_confidence: float = 0.5
    device: str = "cpu"
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BackendSettings":
        normalized = {str(k).replace("-", "_"): v for k, v in (data or {}).items()}
        names = {f.name for f in dataclasses.fields(cls)} - {"extra"}
        known = {k: v for k, v in normalized.items() if k in names}
        extra = {k: v for k, v in normalized.items() if k not in names}
        return cls(**known, extra=extra)


def load_settings(
    path: Union[str, Path],
) -> Tuple[GestureSettings, BackendSettings]:
    """Load settings from a YAML file.

    The file holds the gesture settings at top level and backend options
    under a ``backend:`` key::

        detection-method: frame-diff
        motion-threshold: 40
        learning-mode: on
        backend:
          max-num-hands: 1

    Raises:
        SettingsError: If the file cannot be read or parsed, or holds
            invalid values.
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except OSError as e:
        raise SettingsError(f"Cannot read settings file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise SettingsError(f"Cannot parse settings file {path}: {e}") from e

    if not isinstance(data, dict):
        raise SettingsError(f"Settings file {path} must contain a mapping")

    backend_data = data.pop("backend", None) or {}
    if not isinstance(backend_data, dict):
        raise SettingsError("backend settings must be a mapping")

    return GestureSettings.from_dict(data), BackendSettings.from_dict(backend_data)


__all__ = ["GestureSettings", "BackendSettings", "load_settings"]
