from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List

PERFECT_SCORE = 100
MIN_SCORE = 0


class FeedbackType(Enum):
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"
    INFO = "info"


@dataclass(frozen=True)
class FeedbackMessage:
    """One coaching cue produced for a single frame."""
    type: FeedbackType
    message: str
    priority: int  # Higher wins when the list is truncated


# --- Feedback Templates ---
# Keyed by cue id; each exercise policy picks from here.
FEEDBACK_MESSAGES = {
    # Squat
    "squat_shallow": FeedbackMessage(
        FeedbackType.WARNING, "Go a bit deeper - aim for thighs parallel to floor", 3),
    "squat_good_depth": FeedbackMessage(
        FeedbackType.SUCCESS, "Great depth!", 1),
    "squat_knee_valgus": FeedbackMessage(
        FeedbackType.ERROR, "Push your knees out - don't let them cave in", 4),
    "squat_excessive_lean": FeedbackMessage(
        FeedbackType.WARNING, "Keep your chest up and back straight", 2),
    "squat_keep_controlled": FeedbackMessage(
        FeedbackType.INFO, "Looking good! Keep it controlled", 0),

    # Shoulder abduction
    "abduction_too_low": FeedbackMessage(
        FeedbackType.WARNING, "Raise your arms higher - aim for 90 degrees", 3),
    "abduction_too_high": FeedbackMessage(
        FeedbackType.WARNING, "Lower your arms slightly - aim for 90 degrees", 3),
    "abduction_asymmetry": FeedbackMessage(
        FeedbackType.ERROR, "Keep both arms at the same level for symmetry", 4),
    "abduction_hiking": FeedbackMessage(
        FeedbackType.WARNING, "Relax your shoulders - don't shrug them up", 2),
    "abduction_perfect": FeedbackMessage(
        FeedbackType.SUCCESS, "Perfect form! Great ROM and symmetry", 1),
}


def rank_feedback(messages: Iterable[FeedbackMessage], limit: int = 2) -> List[FeedbackMessage]:
    """
    Order messages by descending priority and keep the top `limit`.

    The sort is stable, so equal priorities keep the order they were raised in.

    Args:
        messages: Messages in the order they were generated
        limit: Maximum number of messages to return

    Returns:
        Ranked, truncated list
    """
    ranked = sorted(messages, key=lambda m: m.priority, reverse=True)
    return ranked[:max(limit, 0)]


def apply_deductions(deductions: Iterable[int], base: int = PERFECT_SCORE) -> int:
    """Subtract each deduction from `base`, never going below MIN_SCORE."""
    return max(MIN_SCORE, base - sum(deductions))
