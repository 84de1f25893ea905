"""
Pose landmark input: estimator output format and the keypoint mapper.
"""

from .landmarks import (
    KEYPOINT_INDICES,
    LANDMARK_NAMES,
    NUM_LANDMARKS,
    Keypoints,
    Landmark,
    map_keypoints,
    to_landmark,
)

__all__ = [
    'KEYPOINT_INDICES',
    'LANDMARK_NAMES',
    'NUM_LANDMARKS',
    'Keypoints',
    'Landmark',
    'map_keypoints',
    'to_landmark',
]
