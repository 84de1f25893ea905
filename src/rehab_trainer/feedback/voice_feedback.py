import time
from typing import Optional

from .prioritizer import FeedbackType


class VoiceFeedback:
    """
    Decides which coaching cue, if any, should be spoken for a frame.

    Only the top-ranked message is considered, and only when it is an error.
    Delivery (TTS engine, volume mixing) belongs to the caller.
    """

    def __init__(self, enabled: bool = True, volume: float = 0.7, cooldown: float = 4.0):
        """
        Initialize the voice cue selector.

        Args:
            enabled: Whether spoken feedback is switched on
            volume: Speech volume (0.0 to 1.0); 0.0 mutes
            cooldown: Minimum seconds between two spoken cues
        """
        self.enabled = enabled
        self.volume = volume
        self.cooldown = cooldown
        self.last_message: Optional[str] = None
        self.last_time: Optional[float] = None

    @property
    def is_active(self) -> bool:
        return self.enabled and self.volume > 0

    def toggle(self) -> None:
        self.enabled = not self.enabled

    def set_volume(self, volume: float) -> None:
        self.volume = min(max(volume, 0.0), 1.0)

    def generate_feedback(self, exercise_result, now: Optional[float] = None) -> Optional[str]:
        """
        Pick the message to speak for this frame.

        Args:
            exercise_result: ExerciseResult whose feedback is already ranked
            now: Current time in seconds (defaults to time.time())

        Returns:
            Message text to speak, or None
        """
        if not self.is_active or not exercise_result.feedback:
            return None

        top = exercise_result.feedback[0]
        if top.type != FeedbackType.ERROR:
            return None

        current_time = time.time() if now is None else now

        # Avoid feedback spam
        if self.last_time is not None and current_time - self.last_time < self.cooldown:
            return None
        # Don't repeat the same correction back to back
        if top.message == self.last_message:
            return None

        self.last_message = top.message
        self.last_time = current_time
        return top.message

    def reset(self) -> None:
        self.last_message = None
        self.last_time = None
