from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

# MediaPipe Pose landmark order (33 points per skeleton)
LANDMARK_NAMES = [
    "nose", "left_eye_inner", "left_eye", "left_eye_outer",
    "right_eye_inner", "right_eye", "right_eye_outer", "left_ear",
    "right_ear", "mouth_left", "mouth_right", "left_shoulder",
    "right_shoulder", "left_elbow", "right_elbow", "left_wrist",
    "right_wrist", "left_pinky", "right_pinky", "left_index",
    "right_index", "left_thumb", "right_thumb", "left_hip",
    "right_hip", "left_knee", "right_knee", "left_ankle",
    "right_ankle", "left_heel", "right_heel", "left_foot_index",
    "right_foot_index"
]

NUM_LANDMARKS = len(LANDMARK_NAMES)

# Subset of the skeleton used by the exercise analyzers.
# The eyes are read from slots 1/2, matching the estimator's web build.
KEYPOINT_INDICES: Dict[str, int] = {
    "nose": 0,
    "left_eye": 1,
    "right_eye": 2,
    "left_shoulder": 11,
    "right_shoulder": 12,
    "left_elbow": 13,
    "right_elbow": 14,
    "left_wrist": 15,
    "right_wrist": 16,
    "left_hip": 23,
    "right_hip": 24,
    "left_knee": 25,
    "right_knee": 26,
    "left_ankle": 27,
    "right_ankle": 28,
}


@dataclass(frozen=True)
class Landmark:
    """A single normalized body keypoint."""
    x: float
    y: float
    z: float = 0.0
    visibility: Optional[float] = None  # Estimator confidence, if reported


@dataclass(frozen=True)
class Keypoints:
    """Named view over one frame. Any field may be None if the estimator dropped it."""
    nose: Optional[Landmark] = None
    left_eye: Optional[Landmark] = None
    right_eye: Optional[Landmark] = None
    left_shoulder: Optional[Landmark] = None
    right_shoulder: Optional[Landmark] = None
    left_elbow: Optional[Landmark] = None
    right_elbow: Optional[Landmark] = None
    left_wrist: Optional[Landmark] = None
    right_wrist: Optional[Landmark] = None
    left_hip: Optional[Landmark] = None
    right_hip: Optional[Landmark] = None
    left_knee: Optional[Landmark] = None
    right_knee: Optional[Landmark] = None
    left_ankle: Optional[Landmark] = None
    right_ankle: Optional[Landmark] = None

    def missing(self, names: Sequence[str]) -> List[str]:
        """Return the subset of `names` that is absent in this frame."""
        return [name for name in names if getattr(self, name) is None]


def to_landmark(raw: Any) -> Optional[Landmark]:
    """
    Normalize one raw estimator point into a Landmark.

    Accepts a Landmark, a sequence [x, y, z, visibility] (z and visibility
    optional), a mapping with those keys, or any object exposing x/y/z
    attributes such as a MediaPipe NormalizedLandmark.

    Args:
        raw: Raw point, or None

    Returns:
        Landmark, or None if the point is absent or malformed
    """
    if raw is None:
        return None
    if isinstance(raw, Landmark):
        return raw
    if isinstance(raw, dict):
        if "x" not in raw or "y" not in raw:
            return None
        values = (raw["x"], raw["y"], raw.get("z", 0.0), raw.get("visibility"))
    elif isinstance(raw, (list, tuple)):
        if len(raw) < 2:
            return None
        values = (
            raw[0],
            raw[1],
            raw[2] if len(raw) > 2 else 0.0,
            raw[3] if len(raw) > 3 else None,
        )
    elif hasattr(raw, "x") and hasattr(raw, "y"):
        values = (raw.x, raw.y, getattr(raw, "z", 0.0), getattr(raw, "visibility", None))
    else:
        return None

    x, y, z, visibility = values
    try:
        return Landmark(
            float(x),
            float(y),
            0.0 if z is None else float(z),
            None if visibility is None else float(visibility),
        )
    except (TypeError, ValueError):
        return None


def map_keypoints(frame: Sequence[Any], min_visibility: float = 0.0) -> Keypoints:
    """
    Pick the named keypoints out of an ordered landmark list.

    No validation beyond presence: slots that are missing, out of range,
    or below `min_visibility` (when visibility is reported) come back as None.
    A frame that is not an ordered list at all maps to an empty skeleton.

    Args:
        frame: Ordered landmark list, normally 33 entries
        min_visibility: Visibility below which a point counts as absent

    Returns:
        Keypoints for this frame
    """
    if isinstance(frame, (str, bytes, dict)) or not (hasattr(frame, "__len__") and hasattr(frame, "__getitem__")):
        frame = ()
    points = {}
    for name, idx in KEYPOINT_INDICES.items():
        landmark = to_landmark(frame[idx]) if idx < len(frame) else None
        if (
            landmark is not None
            and landmark.visibility is not None
            and landmark.visibility < min_visibility
        ):
            landmark = None
        points[name] = landmark
    return Keypoints(**points)
