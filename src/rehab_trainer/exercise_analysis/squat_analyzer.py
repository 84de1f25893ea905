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
from .pose_utils import angle_if_present, midpoint_x

# Fallbacks used when a config omits a value
DEFAULT_DEPTH = 90.0
DEFAULT_VALGUS_LIMIT = 0.02
DEFAULT_LEAN_LIMIT = 0.05
DEFAULT_BOTTOM_POSITION = 120.0

SHALLOW_DEDUCTION = 15
VALGUS_DEDUCTION = 20
LEAN_DEDUCTION = 10


@dataclass
class SquatSignals(FrameSignals):
    knee_angle: Optional[float] = None  # Deeper of the two knees
    hip_angle: Optional[float] = None
    in_bottom: bool = False  # Gates rep counting
    good_depth: bool = False  # Gates depth feedback/scoring
    knee_valgus: bool = False
    excessive_lean: bool = False


@register_exercise_policy("squat")
class SquatAnalyzer(ExercisePolicy):
    """Squat depth, knee tracking and torso lean; counts a rep on the way back up."""

    def get_required_landmarks(self) -> List[str]:
        return [
            "left_shoulder", "right_shoulder",
            "left_hip", "right_hip",
            "left_knee", "right_knee",
            "left_ankle", "right_ankle"
        ]

    def begin_frame(self, state: AnalyzerState) -> None:
        state.frame_count += 1

    def compute_signals(self, keypoints: Keypoints, config: ExerciseConfig, state: AnalyzerState) -> SquatSignals:
        kp = keypoints
        thresholds = config.thresholds
        depth = thresholds.depth if thresholds.depth is not None else DEFAULT_DEPTH
        valgus_limit = thresholds.valgus_limit if thresholds.valgus_limit is not None else DEFAULT_VALGUS_LIMIT
        lean_limit = thresholds.lean_limit if thresholds.lean_limit is not None else DEFAULT_LEAN_LIMIT
        bottom_position = config.phase_thresholds.get("bottom_position", DEFAULT_BOTTOM_POSITION)

        knee_angles = [
            a for a in (
                angle_if_present(kp.left_hip, kp.left_knee, kp.left_ankle),
                angle_if_present(kp.right_hip, kp.right_knee, kp.right_ankle),
            ) if a is not None
        ]
        knee_angle = min(knee_angles) if knee_angles else None
        hip_angle = angle_if_present(kp.left_shoulder, kp.left_hip, kp.left_knee)

        in_bottom = knee_angle is not None and knee_angle < bottom_position
        good_depth = knee_angle is not None and knee_angle < depth

        # Knees caving in past the ankles (image x, camera-facing athlete)
        left_valgus = (
            kp.left_knee is not None and kp.left_ankle is not None
            and kp.left_knee.x < kp.left_ankle.x - valgus_limit
        )
        right_valgus = (
            kp.right_knee is not None and kp.right_ankle is not None
            and kp.right_knee.x > kp.right_ankle.x + valgus_limit
        )

        shoulder_mid = midpoint_x(kp.left_shoulder, kp.right_shoulder)
        hip_mid = midpoint_x(kp.left_hip, kp.right_hip)
        excessive_lean = (
            shoulder_mid is not None and hip_mid is not None
            and abs(shoulder_mid - hip_mid) > lean_limit
        )

        return SquatSignals(
            angles=JointAngles(
                knee=knee_angle if knee_angle is not None else 0.0,
                hip=hip_angle if hip_angle is not None else 0.0,
                shoulder=0.0,
            ),
            is_in_position=in_bottom,
            knee_angle=knee_angle,
            hip_angle=hip_angle,
            in_bottom=in_bottom,
            good_depth=good_depth,
            knee_valgus=left_valgus or right_valgus,
            excessive_lean=excessive_lean,
        )

    def evaluate_form(self, signals: SquatSignals, config: ExerciseConfig, state: AnalyzerState) -> FormReport:
        report = FormReport()

        if signals.in_bottom:
            if not signals.good_depth:
                report.add("squat_shallow", SHALLOW_DEDUCTION)
            else:
                report.add("squat_good_depth")

        if signals.knee_valgus:
            report.add("squat_knee_valgus", VALGUS_DEDUCTION)

        if signals.excessive_lean:
            report.add("squat_excessive_lean", LEAN_DEDUCTION)

        # Frame-count cadence, so the real interval depends on the input frame rate
        interval = self.settings.info_interval_frames
        if interval > 0 and state.frame_count % interval == 0:
            if not report.feedback and signals.in_bottom:
                report.add("squat_keep_controlled")

        return report

    def update_phase(self, signals: SquatSignals, config: ExerciseConfig, state: AnalyzerState) -> bool:
        if signals.knee_angle is None:
            return False

        rep_completed = False
        if signals.in_bottom and state.last_position == Phase.UP:
            state.last_position = Phase.DOWN
            state.rep_extreme_angle = signals.knee_angle
        elif not signals.in_bottom and state.last_position == Phase.DOWN:
            state.last_position = Phase.UP
            rep_completed = True

        if state.last_position == Phase.DOWN:
            if state.rep_extreme_angle is None or signals.knee_angle < state.rep_extreme_angle:
                state.rep_extreme_angle = signals.knee_angle
        return rep_completed

    def rep_flags(self, signals: SquatSignals, config: ExerciseConfig, state: AnalyzerState) -> List[str]:
        depth = config.thresholds.depth if config.thresholds.depth is not None else DEFAULT_DEPTH
        flags = []
        deepest = state.rep_extreme_angle
        if deepest is None or deepest >= depth:
            flags.append("shallow_squat")
        if signals.knee_valgus:
            flags.append("knee_valgus")
        if signals.excessive_lean:
            flags.append("excessive_lean")
        return flags
