from dataclasses import dataclass
from typing import List, Optional

from ..pose_detection.landmarks import Keypoints
from .base_analyzer import (
    AnalyzerState,
    ExercisePolicy,
    FormReport,
    FrameSignals,
    JointAngles,
    Phase,
    register_exercise_policy,
)
from .config_utils import ExerciseConfig
from .pose_utils import angle_if_present, mean_of_available

DEFAULT_ROM_MIN = 80.0
DEFAULT_ROM_MAX = 100.0
DEFAULT_SYMMETRY_LIMIT = 15.0
DEFAULT_IN_POSITION = 45.0
DEFAULT_RAISED = 75.0
DEFAULT_LOWERED = 30.0

LARGE_DEVIATION = 15.0  # Degrees off target before ROM is penalized
PERFECT_SYMMETRY = 10.0

UNDER_TARGET_DEDUCTION = 15
OVER_TARGET_DEDUCTION = 10
ASYMMETRY_DEDUCTION = 20
HIKING_DEDUCTION = 10


@dataclass
class AbductionSignals(FrameSignals):
    shoulder_angle: Optional[float] = None  # Mean of the measurable sides
    symmetry: Optional[float] = None  # Only when both sides are measurable
    target_angle: float = 90.0
    in_target_range: bool = False
    hiking: bool = False


@register_exercise_policy("shoulderAbduction")
class ShoulderAbductionAnalyzer(ExercisePolicy):
    """
    Lateral arm raise to shoulder height.

    A rep counts when the arms come back down to the sides after being
    raised, so the phase runs DOWN -> UP -> DOWN.
    """

    def get_required_landmarks(self) -> List[str]:
        return [
            "left_shoulder", "right_shoulder",
            "left_elbow", "right_elbow",
            "left_hip", "right_hip"
        ]

    def _rom_range(self, config: ExerciseConfig):
        thresholds = config.thresholds
        rom_min = thresholds.rom_min if thresholds.rom_min is not None else DEFAULT_ROM_MIN
        rom_max = thresholds.rom_max if thresholds.rom_max is not None else DEFAULT_ROM_MAX
        return rom_min, rom_max

    def compute_signals(self, keypoints: Keypoints, config: ExerciseConfig, state: AnalyzerState) -> AbductionSignals:
        kp = keypoints
        rom_min, rom_max = self._rom_range(config)
        target_angle = (rom_min + rom_max) / 2
        in_position_angle = config.phase_thresholds.get("in_position", DEFAULT_IN_POSITION)

        left = angle_if_present(kp.left_elbow, kp.left_shoulder, kp.left_hip)
        right = angle_if_present(kp.right_elbow, kp.right_shoulder, kp.right_hip)
        shoulder_angle = mean_of_available([left, right])
        symmetry = abs(left - right) if left is not None and right is not None else None

        in_target_range = shoulder_angle is not None and rom_min <= shoulder_angle <= rom_max
        in_position = shoulder_angle is not None and shoulder_angle > in_position_angle

        # y grows downward, so an elbow above its shoulder has the smaller y
        left_hiking = (
            kp.left_elbow is not None and kp.left_shoulder is not None
            and kp.left_elbow.y < kp.left_shoulder.y
        )
        right_hiking = (
            kp.right_elbow is not None and kp.right_shoulder is not None
            and kp.right_elbow.y < kp.right_shoulder.y
        )

        return AbductionSignals(
            angles=JointAngles(
                knee=0.0,
                hip=0.0,
                shoulder=shoulder_angle if shoulder_angle is not None else 0.0,
            ),
            is_in_position=in_position,
            shoulder_angle=shoulder_angle,
            symmetry=symmetry,
            target_angle=target_angle,
            in_target_range=in_target_range,
            hiking=left_hiking or right_hiking,
        )

    def evaluate_form(self, signals: AbductionSignals, config: ExerciseConfig, state: AnalyzerState) -> FormReport:
        report = FormReport()
        symmetry_limit = (
            config.thresholds.symmetry_limit
            if config.thresholds.symmetry_limit is not None else DEFAULT_SYMMETRY_LIMIT
        )

        angle = signals.shoulder_angle
        if angle is not None and abs(angle - signals.target_angle) > LARGE_DEVIATION:
            # Falling short costs more than overshooting
            if angle < signals.target_angle - LARGE_DEVIATION:
                report.add("abduction_too_low", UNDER_TARGET_DEDUCTION)
            elif angle > signals.target_angle + LARGE_DEVIATION:
                report.add("abduction_too_high", OVER_TARGET_DEDUCTION)

        if signals.symmetry is not None and signals.symmetry > symmetry_limit:
            report.add("abduction_asymmetry", ASYMMETRY_DEDUCTION)

        if signals.hiking:
            report.add("abduction_hiking", HIKING_DEDUCTION)

        if (
            signals.in_target_range
            and signals.symmetry is not None
            and signals.symmetry <= PERFECT_SYMMETRY
        ):
            report.add("abduction_perfect")

        return report

    def update_phase(self, signals: AbductionSignals, config: ExerciseConfig, state: AnalyzerState) -> bool:
        angle = signals.shoulder_angle
        if angle is None:
            return False
        raised = config.phase_thresholds.get("raised", DEFAULT_RAISED)
        lowered = config.phase_thresholds.get("lowered", DEFAULT_LOWERED)

        rep_completed = False
        if signals.is_in_position and angle > raised and state.last_position == Phase.DOWN:
            state.last_position = Phase.UP
        elif not signals.is_in_position and angle < lowered and state.last_position == Phase.UP:
            state.last_position = Phase.DOWN
            peak = state.rep_extreme_angle
            # A fresh session starts in UP; arms at the sides there is not a rep
            rep_completed = peak is not None and peak > raised
            if not rep_completed:
                state.rep_extreme_angle = None

        if state.last_position == Phase.UP:
            if state.rep_extreme_angle is None or angle > state.rep_extreme_angle:
                state.rep_extreme_angle = angle
        return rep_completed

    def rep_flags(self, signals: AbductionSignals, config: ExerciseConfig, state: AnalyzerState) -> List[str]:
        rom_min, rom_max = self._rom_range(config)
        symmetry_limit = (
            config.thresholds.symmetry_limit
            if config.thresholds.symmetry_limit is not None else DEFAULT_SYMMETRY_LIMIT
        )
        flags = []
        peak = state.rep_extreme_angle
        if peak is not None and peak < rom_min:
            flags.append("limited_rom")
        if peak is not None and peak > rom_max:
            flags.append("excessive_rom")
        if signals.symmetry is not None and signals.symmetry > symmetry_limit:
            flags.append("arm_asymmetry")
        if signals.hiking:
            flags.append("shoulder_hiking")
        return flags
