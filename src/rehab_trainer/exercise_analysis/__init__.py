"""
Exercise analysis package for form scoring and rep counting.
"""

from .base_analyzer import (
    EXERCISE_POLICY_REGISTRY,
    AnalyzerState,
    ExerciseMetrics,
    ExercisePolicy,
    ExerciseResult,
    JointAngles,
    Phase,
    RepData,
)
from .config_utils import (
    ANALYSIS_SETTINGS,
    EXERCISE_CONFIGS,
    AnalysisSettings,
    ExerciseConfig,
    Thresholds,
    get_exercise_config,
)
from .pose_utils import calculate_angle
from .shoulder_abduction_analyzer import ShoulderAbductionAnalyzer
from .squat_analyzer import SquatAnalyzer

__all__ = [
    'EXERCISE_POLICY_REGISTRY',
    'AnalyzerState',
    'ExerciseMetrics',
    'ExercisePolicy',
    'ExerciseResult',
    'JointAngles',
    'Phase',
    'RepData',
    'ANALYSIS_SETTINGS',
    'EXERCISE_CONFIGS',
    'AnalysisSettings',
    'ExerciseConfig',
    'Thresholds',
    'get_exercise_config',
    'calculate_angle',
    'ShoulderAbductionAnalyzer',
    'SquatAnalyzer',
]
