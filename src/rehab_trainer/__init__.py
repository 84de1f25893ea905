"""
Rehab Trainer - real-time exercise form analysis from pose landmarks.
"""

from .exercise_analysis import EXERCISE_CONFIGS, ExerciseConfig, ExerciseMetrics, RepData
from .trainer import ExerciseAnalyzer

__all__ = [
    'EXERCISE_CONFIGS',
    'ExerciseAnalyzer',
    'ExerciseConfig',
    'ExerciseMetrics',
    'RepData',
]
