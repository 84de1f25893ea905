"""
Feedback ranking, scoring helpers and spoken-cue selection.
"""

from .prioritizer import (
    FEEDBACK_MESSAGES,
    MIN_SCORE,
    PERFECT_SCORE,
    FeedbackMessage,
    FeedbackType,
    apply_deductions,
    rank_feedback,
)
from .voice_feedback import VoiceFeedback

__all__ = [
    'FEEDBACK_MESSAGES',
    'MIN_SCORE',
    'PERFECT_SCORE',
    'FeedbackMessage',
    'FeedbackType',
    'apply_deductions',
    'rank_feedback',
    'VoiceFeedback',
]
