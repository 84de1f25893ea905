from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple, Type

from ..feedback.prioritizer import (
    FEEDBACK_MESSAGES,
    PERFECT_SCORE,
    FeedbackMessage,
    apply_deductions,
    rank_feedback,
)
from ..logging_utils import get_logger
from ..pose_detection.landmarks import Keypoints
from .config_utils import ANALYSIS_SETTINGS, AnalysisSettings, ExerciseConfig

logger = get_logger("ExerciseAnalyzer")


class Phase(Enum):
    """Binary movement phase used for rep counting."""
    UP = "up"
    DOWN = "down"


@dataclass(frozen=True)
class JointAngles:
    """Reported joint angles in degrees; 0.0 when not measured this frame."""
    knee: float = 0.0
    hip: float = 0.0
    shoulder: float = 0.0


@dataclass(frozen=True)
class RepData:
    """Snapshot of one completed repetition. Never mutated once logged."""
    rep_index: int
    angles: JointAngles
    flags: Tuple[str, ...]
    score: int
    timestamp: float


@dataclass
class AnalyzerState:
    """Mutable session state. Owned by exactly one analyzer at a time."""
    rep_count: int = 0
    current_score: int = 0
    last_position: Phase = Phase.UP
    frame_count: int = 0  # Only drives the squat info-cue cadence
    rep_log: List[RepData] = field(default_factory=list)
    rep_extreme_angle: Optional[float] = None  # Deepest knee / highest shoulder in the rep in progress

    def reset(self) -> None:
        self.rep_count = 0
        self.current_score = 0
        self.last_position = Phase.UP
        self.frame_count = 0
        self.rep_log = []
        self.rep_extreme_angle = None


@dataclass
class FrameSignals:
    """Geometric/boolean signals a policy derives from one frame."""
    angles: JointAngles
    is_in_position: bool


@dataclass
class ExerciseMetrics:
    """Per-frame snapshot handed to the UI/voice layer."""
    rep_count: int
    current_score: int
    feedback: List[str]
    angles: JointAngles
    is_in_position: bool


@dataclass
class ExerciseResult:
    """Full result of analyzing one frame with one exercise policy."""
    score: int
    feedback: List[FeedbackMessage]
    rep_count: int
    is_in_position: bool
    angles: JointAngles
    phase: Phase = Phase.UP
    rep_completed: bool = False

    def to_metrics(self) -> ExerciseMetrics:
        return ExerciseMetrics(
            rep_count=self.rep_count,
            current_score=self.score,
            feedback=[f.message for f in self.feedback],
            angles=self.angles,
            is_in_position=self.is_in_position,
        )


class FormReport:
    """Collects cues and score deductions while a frame is evaluated."""

    def __init__(self):
        self.feedback: List[FeedbackMessage] = []
        self.deductions: List[int] = []

    def add(self, cue_id: str, deduction: int = 0) -> None:
        self.feedback.append(FEEDBACK_MESSAGES[cue_id])
        if deduction:
            self.deductions.append(deduction)

    @property
    def score(self) -> int:
        return apply_deductions(self.deductions, PERFECT_SCORE)


# --- Policy Registry ---
EXERCISE_POLICY_REGISTRY: Dict[str, Type["ExercisePolicy"]] = {}


def register_exercise_policy(exercise_id):
    def decorator(cls):
        cls.exercise_id = exercise_id
        EXERCISE_POLICY_REGISTRY[exercise_id] = cls
        return cls
    return decorator


class ExercisePolicy(ABC):
    """
    Base class for per-exercise form analysis.

    Subclasses turn one frame's keypoints into signals, score them, and
    drive the up/down phase. Rep logging, ranking and score bookkeeping are
    shared here.
    """

    exercise_id: str = ""

    def __init__(self, settings: AnalysisSettings = ANALYSIS_SETTINGS):
        self.settings = settings

    @abstractmethod
    def get_required_landmarks(self) -> List[str]:
        """
        Get the keypoints this exercise reads.

        Returns:
            List of Keypoints field names
        """
        pass

    @abstractmethod
    def compute_signals(self, keypoints: Keypoints, config: ExerciseConfig, state: AnalyzerState) -> FrameSignals:
        """
        Derive angles and form signals from one frame.

        Checks whose keypoints are missing must leave their signal unset
        (None/False) instead of raising.
        """
        pass

    @abstractmethod
    def evaluate_form(self, signals: FrameSignals, config: ExerciseConfig, state: AnalyzerState) -> FormReport:
        """Turn signals into feedback cues and score deductions."""
        pass

    @abstractmethod
    def update_phase(self, signals: FrameSignals, config: ExerciseConfig, state: AnalyzerState) -> bool:
        """
        Advance the up/down state machine.

        Returns:
            True if this frame completes a repetition
        """
        pass

    @abstractmethod
    def rep_flags(self, signals: FrameSignals, config: ExerciseConfig, state: AnalyzerState) -> List[str]:
        """Quality flags for the rep completed on this frame."""
        pass

    def begin_frame(self, state: AnalyzerState) -> None:
        """Hook run before any analysis of a frame."""
        pass

    def analyze(
        self,
        keypoints: Keypoints,
        config: ExerciseConfig,
        state: AnalyzerState,
        timestamp: float,
    ) -> ExerciseResult:
        """
        Analyze one frame and update `state` in place.

        Args:
            keypoints: Mapped keypoints for the frame
            config: Active exercise configuration
            state: Session state, mutated by this call
            timestamp: Time stamped on a rep completed by this frame

        Returns:
            ExerciseResult for the frame
        """
        self.begin_frame(state)

        missing = keypoints.missing(self.get_required_landmarks())
        if missing:
            logger.debug(f"{self.exercise_id}: skipping checks that need {', '.join(missing)}")

        signals = self.compute_signals(keypoints, config, state)
        report = self.evaluate_form(signals, config, state)
        state.current_score = report.score

        rep_completed = self.update_phase(signals, config, state)
        if rep_completed:
            self._record_rep(signals, config, state, timestamp)

        return ExerciseResult(
            score=state.current_score,
            feedback=rank_feedback(report.feedback, self.settings.feedback_limit),
            rep_count=state.rep_count,
            is_in_position=signals.is_in_position,
            angles=signals.angles,
            phase=state.last_position,
            rep_completed=rep_completed,
        )

    def _record_rep(self, signals: FrameSignals, config: ExerciseConfig, state: AnalyzerState, timestamp: float) -> None:
        state.rep_count += 1
        rep = RepData(
            rep_index=state.rep_count,
            angles=signals.angles,
            flags=tuple(self.rep_flags(signals, config, state)),
            score=state.current_score,
            timestamp=timestamp,
        )
        state.rep_log.append(rep)
        state.rep_extreme_angle = None
        logger.info(
            f"{config.name} rep {rep.rep_index} completed "
            f"(score {rep.score}, flags: {', '.join(rep.flags) or 'none'})"
        )
