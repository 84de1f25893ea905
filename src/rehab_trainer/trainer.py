import time
from typing import Any, Callable, Dict, Optional, Sequence, Tuple, Union

from .exercise_analysis.base_analyzer import (
    EXERCISE_POLICY_REGISTRY,
    AnalyzerState,
    ExerciseMetrics,
    ExercisePolicy,
    ExerciseResult,
    Phase,
    RepData,
)
from .exercise_analysis.config_utils import (
    ANALYSIS_SETTINGS,
    AnalysisSettings,
    ExerciseConfig,
    get_exercise_config,
)
from .logging_utils import get_logger
from .pose_detection.landmarks import map_keypoints

logger = get_logger("ExerciseAnalyzer")


class ExerciseAnalyzer:
    """
    Per-session analysis entry point.

    Holds one AnalyzerState shared by every exercise policy, so switching
    exercise without calling reset() carries the counters over. Calls must
    be sequential: one frame at a time, reset() only between frames.
    """

    def __init__(
        self,
        settings: AnalysisSettings = ANALYSIS_SETTINGS,
        state: Optional[AnalyzerState] = None,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize the analyzer.

        Args:
            settings: Engine-wide analysis settings
            state: Session state to take ownership of (fresh if None)
            clock: Time source used to stamp completed reps
        """
        self.settings = settings
        self.state = state if state is not None else AnalyzerState()
        self._clock = clock
        self._policies: Dict[str, ExercisePolicy] = {
            exercise_id: policy_cls(settings)
            for exercise_id, policy_cls in EXERCISE_POLICY_REGISTRY.items()
        }

    @property
    def rep_count(self) -> int:
        return self.state.rep_count

    @property
    def current_score(self) -> int:
        return self.state.current_score

    @property
    def phase(self) -> Phase:
        return self.state.last_position

    @staticmethod
    def _resolve_config(config: Union[ExerciseConfig, str]) -> ExerciseConfig:
        if isinstance(config, str):
            return get_exercise_config(config)
        return config

    def _run(self, exercise_id: str, landmarks: Sequence[Any], config: ExerciseConfig) -> ExerciseResult:
        policy = self._policies.get(exercise_id)
        if policy is None:
            raise ValueError(f"Unsupported exercise type: {exercise_id}")
        keypoints = map_keypoints(landmarks, self.settings.min_landmark_visibility)
        return policy.analyze(keypoints, config, self.state, self._clock())

    def analyze(self, landmarks: Sequence[Any], config: Union[ExerciseConfig, str]) -> ExerciseResult:
        """
        Analyze one frame with the policy selected by the config.

        Args:
            landmarks: Ordered 33-slot landmark list for one skeleton
            config: ExerciseConfig, or a registered exercise id

        Returns:
            ExerciseResult with ranked FeedbackMessage objects

        Raises:
            ValueError: If the exercise is not supported
        """
        config = self._resolve_config(config)
        return self._run(config.exercise_id, landmarks, config)

    def analyze_frame(self, landmarks: Sequence[Any], config: Union[ExerciseConfig, str]) -> ExerciseMetrics:
        """Analyze one frame and return the snapshot for the UI/voice layer."""
        return self.analyze(landmarks, config).to_metrics()

    def analyze_squat(self, landmarks: Sequence[Any], config: Union[ExerciseConfig, str] = "squat") -> ExerciseResult:
        return self._run("squat", landmarks, self._resolve_config(config))

    def analyze_shoulder_abduction(
        self, landmarks: Sequence[Any], config: Union[ExerciseConfig, str] = "shoulderAbduction"
    ) -> ExerciseResult:
        return self._run("shoulderAbduction", landmarks, self._resolve_config(config))

    def target_progress(self, config: Union[ExerciseConfig, str]) -> float:
        """Fraction of the configured target reps done so far, capped at 1.0."""
        config = self._resolve_config(config)
        if config.target_reps <= 0:
            return 1.0
        return min(self.state.rep_count / config.target_reps, 1.0)

    def reset(self) -> None:
        """Zero all counters and clear the rep log."""
        self.state.reset()
        logger.info("Analyzer state reset")

    def get_rep_data(self) -> Tuple[RepData, ...]:
        """Completed reps so far, oldest first."""
        return tuple(self.state.rep_log)
