import json
import os
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from ..logging_utils import get_logger

logger = get_logger("ExerciseConfig")

THRESHOLD_KEYS = ("depth", "valgus_limit", "lean_limit", "rom_min", "rom_max", "symmetry_limit")


@dataclass(frozen=True)
class Thresholds:
    """Form thresholds. Each exercise only fills the ones it uses."""
    depth: Optional[float] = None
    valgus_limit: Optional[float] = None
    lean_limit: Optional[float] = None
    rom_min: Optional[float] = None
    rom_max: Optional[float] = None
    symmetry_limit: Optional[float] = None


@dataclass(frozen=True)
class ExerciseConfig:
    """Immutable per-session exercise configuration."""
    exercise_id: str
    name: str
    target_reps: int
    thresholds: Thresholds = field(default_factory=Thresholds)
    phase_thresholds: Mapping[str, float] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        # Registry entries are shared; keep the hysteresis angles read-only
        object.__setattr__(self, "phase_thresholds", MappingProxyType(dict(self.phase_thresholds)))

    @classmethod
    def from_dict(cls, exercise_id: str, data: Dict[str, Any]) -> "ExerciseConfig":
        for key in ("name", "target_reps"):
            if key not in data:
                raise ValueError(f"Exercise '{exercise_id}' config is missing '{key}'")
        raw_thresholds = data.get("thresholds", {})
        unknown = set(raw_thresholds) - set(THRESHOLD_KEYS)
        if unknown:
            logger.warning(f"Ignoring unknown thresholds for {exercise_id}: {', '.join(sorted(unknown))}")
        thresholds = Thresholds(**{
            k: float(v) for k, v in raw_thresholds.items() if k in THRESHOLD_KEYS
        })
        phase_thresholds = {k: float(v) for k, v in data.get("phase_thresholds", {}).items()}
        return cls(
            exercise_id=exercise_id,
            name=data["name"],
            target_reps=int(data["target_reps"]),
            thresholds=thresholds,
            phase_thresholds=phase_thresholds,
        )


@dataclass(frozen=True)
class AnalysisSettings:
    """Engine-wide settings shared by every exercise."""
    feedback_limit: int = 2  # Messages kept per frame after ranking
    info_interval_frames: int = 30  # Frame cadence of the "keep it controlled" cue
    min_landmark_visibility: float = 0.0  # 0.0 keeps every reported point

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AnalysisSettings":
        defaults = cls()
        return cls(
            feedback_limit=int(data.get("feedback_limit", defaults.feedback_limit)),
            info_interval_frames=int(data.get("info_interval_frames", defaults.info_interval_frames)),
            min_landmark_visibility=float(data.get("min_landmark_visibility", defaults.min_landmark_visibility)),
        )


def load_raw_config(config_path: str = None) -> Dict[str, Any]:
    """Load the exercise config JSON as a plain dict."""
    if config_path is None:
        config_path = os.path.join(os.path.dirname(__file__), "exercise_config.json")
    with open(config_path, "r") as f:
        return json.load(f)


def load_exercise_configs(config_path: str = None) -> Dict[str, ExerciseConfig]:
    """Load the exercise registry, keyed by exercise id."""
    raw = load_raw_config(config_path)
    return {
        exercise_id: ExerciseConfig.from_dict(exercise_id, data)
        for exercise_id, data in raw.get("exercises", {}).items()
    }


def load_analysis_settings(config_path: str = None) -> AnalysisSettings:
    raw = load_raw_config(config_path)
    if "analysis" not in raw:
        logger.warning("No 'analysis' section in config, using defaults")
    return AnalysisSettings.from_dict(raw.get("analysis", {}))


EXERCISE_CONFIGS: Dict[str, ExerciseConfig] = load_exercise_configs()
ANALYSIS_SETTINGS: AnalysisSettings = load_analysis_settings()


def get_exercise_config(exercise_id: str) -> ExerciseConfig:
    """
    Look up a registered exercise config.

    Args:
        exercise_id: Registry key, e.g. "squat" or "shoulderAbduction"

    Returns:
        The ExerciseConfig

    Raises:
        ValueError: If the exercise is not registered
    """
    try:
        return EXERCISE_CONFIGS[exercise_id]
    except KeyError:
        raise ValueError(f"Unsupported exercise type: {exercise_id}") from None
