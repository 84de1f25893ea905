import pytest

from conftest import make_frame, squat_frame, squat_points
from rehab_trainer.exercise_analysis.base_analyzer import AnalyzerState, Phase
from rehab_trainer.exercise_analysis.squat_analyzer import SquatAnalyzer
from rehab_trainer.feedback.prioritizer import FeedbackType
from rehab_trainer.pose_detection.landmarks import map_keypoints

VALGUS_LEFT_LEG = {"left_knee": (0.55, 0.7), "left_ankle": (0.6, 0.9)}  # ~152 deg, knee inside ankle
LEANING_SHOULDERS = {"left_shoulder": (0.7, 0.3), "right_shoulder": (0.5, 0.3)}


def run(analyzer, config, *knee_angles):
    return [analyzer.analyze(squat_frame(a), config) for a in knee_angles]


def test_knee_angle_is_the_deeper_side(analyzer, squat_config):
    points = squat_points(150)
    points.update({k: v for k, v in squat_points(100).items() if k.startswith("right")})
    result = analyzer.analyze(make_frame(points), squat_config)
    assert result.angles.knee == pytest.approx(100.0)
    assert result.angles.hip == pytest.approx(180.0)
    assert result.angles.shoulder == 0.0


def test_end_to_end_rep(analyzer, squat_config):
    first, second, third = run(analyzer, squat_config, 100, 70, 150)

    assert first.phase == Phase.DOWN
    assert first.rep_count == 0
    assert first.is_in_position

    assert second.phase == Phase.DOWN
    assert second.rep_count == 0

    assert third.phase == Phase.UP
    assert third.rep_completed
    assert third.rep_count == 1
    reps = analyzer.get_rep_data()
    assert len(reps) == 1
    assert reps[0].rep_index == 1
    assert reps[0].flags == ()
    assert reps[0].score == 100
    assert reps[0].angles.knee == pytest.approx(150.0)
    assert reps[0].timestamp == 1234.5


def test_rep_counted_once_per_cycle(analyzer, squat_config):
    run(analyzer, squat_config, 170, 115, 100, 115, 125, 170, 170)
    assert analyzer.rep_count == 1
    assert [r.rep_index for r in analyzer.get_rep_data()] == [1]


def test_repeated_cycles(analyzer, squat_config):
    run(analyzer, squat_config, 170, 80, 170, 80, 170, 80)
    assert analyzer.rep_count == 2
    assert analyzer.phase == Phase.DOWN
    assert [r.rep_index for r in analyzer.get_rep_data()] == [1, 2]


def test_shallow_rep_is_flagged(analyzer, squat_config):
    run(analyzer, squat_config, 100, 110, 150)
    assert analyzer.get_rep_data()[0].flags == ("shallow_squat",)


def test_depth_reached_anywhere_in_the_rep_counts(analyzer, squat_config):
    run(analyzer, squat_config, 110, 85, 100, 150)
    assert analyzer.get_rep_data()[0].flags == ()


def test_form_flags_come_from_the_completing_frame(analyzer, squat_config):
    analyzer.analyze(squat_frame(70), squat_config)
    result = analyzer.analyze(squat_frame(180, **VALGUS_LEFT_LEG, **LEANING_SHOULDERS), squat_config)
    rep = analyzer.get_rep_data()[0]
    assert rep.flags == ("knee_valgus", "excessive_lean")
    assert rep.score == 70
    assert result.score == 70


def test_shallow_bottom_scoring(analyzer, squat_config):
    result = analyzer.analyze(squat_frame(100), squat_config)
    assert result.score == 85
    assert [f.message for f in result.feedback] == ["Go a bit deeper - aim for thighs parallel to floor"]
    assert result.feedback[0].type == FeedbackType.WARNING


def test_good_depth_scoring(analyzer, squat_config):
    result = analyzer.analyze(squat_frame(70), squat_config)
    assert result.score == 100
    assert [f.message for f in result.feedback] == ["Great depth!"]


def test_standing_frame_has_no_depth_feedback(analyzer, squat_config):
    result = analyzer.analyze(squat_frame(160), squat_config)
    assert result.score == 100
    assert result.feedback == []
    assert not result.is_in_position


def test_valgus_checked_outside_the_bottom(analyzer, squat_config):
    result = analyzer.analyze(squat_frame(180, **VALGUS_LEFT_LEG), squat_config)
    assert not result.is_in_position
    assert result.score == 80
    assert [f.message for f in result.feedback] == ["Push your knees out - don't let them cave in"]


def test_right_knee_valgus(analyzer, squat_config):
    result = analyzer.analyze(
        squat_frame(180, right_knee=(0.45, 0.7), right_ankle=(0.4, 0.9)), squat_config
    )
    assert result.score == 80


def test_lean_warning(analyzer, squat_config):
    result = analyzer.analyze(squat_frame(170, **LEANING_SHOULDERS), squat_config)
    assert result.score == 90
    assert [f.message for f in result.feedback] == ["Keep your chest up and back straight"]


def test_all_faults_ranked_and_truncated(analyzer, squat_config):
    result = analyzer.analyze(squat_frame(100, **VALGUS_LEFT_LEG, **LEANING_SHOULDERS), squat_config)
    assert result.angles.knee == pytest.approx(100.0)
    assert result.score == 55
    assert [f.priority for f in result.feedback] == [4, 3]
    assert analyzer.current_score == 55


def test_missing_knees_skip_depth_and_transition(analyzer, squat_config):
    analyzer.analyze(squat_frame(100), squat_config)
    torso_only = squat_frame(100, left_knee=None, right_knee=None)
    torso_only[25] = None
    torso_only[26] = None
    result = analyzer.analyze(torso_only, squat_config)
    assert result.rep_count == 0
    assert result.phase == Phase.DOWN
    assert result.score == 100
    assert result.feedback == []
    assert result.angles.knee == 0.0
    assert result.angles.hip == 0.0
    assert not result.is_in_position

    analyzer.analyze(squat_frame(150), squat_config)
    assert analyzer.rep_count == 1


def test_one_leg_is_enough_for_depth(analyzer, squat_config):
    frame = squat_frame(100)
    frame[26] = None  # right knee dropped
    result = analyzer.analyze(frame, squat_config)
    assert result.angles.knee == pytest.approx(100.0)
    assert result.phase == Phase.DOWN


def test_lean_needs_both_shoulders(analyzer, squat_config):
    frame = squat_frame(170, right_shoulder=(0.9, 0.3))
    frame[11] = None
    result = analyzer.analyze(frame, squat_config)
    assert result.score == 100


def test_frame_counter_advances_per_squat_frame(analyzer, squat_config):
    run(analyzer, squat_config, 170, 170, 170)
    assert analyzer.state.frame_count == 3


def test_depth_cue_fills_the_periodic_info_slot(analyzer, squat_config):
    results = run(analyzer, squat_config, *([70] * 30))
    messages = [f.message for f in results[-1].feedback]
    assert analyzer.state.frame_count == 30
    assert messages == ["Great depth!"]


def test_policy_runs_on_a_standalone_state(squat_config):
    state = AnalyzerState()
    policy = SquatAnalyzer()
    for angle in (100, 150):
        policy.analyze(map_keypoints(squat_frame(angle)), squat_config, state, 0.0)
    assert state.rep_count == 1
    assert state.rep_log[0].timestamp == 0.0
    assert state.rep_extreme_angle is None
