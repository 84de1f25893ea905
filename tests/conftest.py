import math

import pytest

from rehab_trainer.exercise_analysis.config_utils import EXERCISE_CONFIGS
from rehab_trainer.pose_detection.landmarks import KEYPOINT_INDICES, NUM_LANDMARKS, Landmark
from rehab_trainer.trainer import ExerciseAnalyzer

LEFT_X = 0.6  # Athlete faces the camera, so their left side is on the image right
RIGHT_X = 0.4
SEGMENT = 0.2


def make_frame(points):
    """Build a 33-slot frame from {keypoint name: (x, y) or Landmark}."""
    frame = [None] * NUM_LANDMARKS
    for name, point in points.items():
        if point is None:
            continue
        if not isinstance(point, Landmark):
            point = Landmark(point[0], point[1], 0.0, 0.99)
        frame[KEYPOINT_INDICES[name]] = point
    return frame


def squat_points(knee_angle):
    """Upright torso, both knees bent to `knee_angle`, ankles splayed outward."""
    theta = math.radians(knee_angle)
    points = {}
    for side, x, outward in (("left", LEFT_X, -1), ("right", RIGHT_X, 1)):
        points[f"{side}_shoulder"] = (x, 0.3)
        points[f"{side}_hip"] = (x, 0.5)
        points[f"{side}_knee"] = (x, 0.7)
        points[f"{side}_ankle"] = (
            x + outward * SEGMENT * math.sin(theta),
            0.7 - SEGMENT * math.cos(theta),
        )
    return points


def squat_frame(knee_angle, **overrides):
    points = squat_points(knee_angle)
    points.update(overrides)
    return make_frame(points)


def abduction_points(left_angle, right_angle=None):
    """Arms raised sideways; each angle is measured elbow-shoulder-hip."""
    if right_angle is None:
        right_angle = left_angle
    points = {}
    for side, x, outward, angle in (
        ("left", LEFT_X, 1, left_angle),
        ("right", RIGHT_X, -1, right_angle),
    ):
        phi = math.radians(angle)
        points[f"{side}_shoulder"] = (x, 0.3)
        points[f"{side}_hip"] = (x, 0.6)
        points[f"{side}_elbow"] = (
            x + outward * SEGMENT * math.sin(phi),
            0.3 + SEGMENT * math.cos(phi),
        )
    return points


def abduction_frame(left_angle, right_angle=None, **overrides):
    points = abduction_points(left_angle, right_angle)
    points.update(overrides)
    return make_frame(points)


@pytest.fixture
def analyzer():
    return ExerciseAnalyzer(clock=lambda: 1234.5)


@pytest.fixture
def squat_config():
    return EXERCISE_CONFIGS["squat"]


@pytest.fixture
def abduction_config():
    return EXERCISE_CONFIGS["shoulderAbduction"]
