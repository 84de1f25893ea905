import argparse
import json
import os
import sys

from .exercise_analysis.config_utils import EXERCISE_CONFIGS
from .feedback.voice_feedback import VoiceFeedback
from .trainer import ExerciseAnalyzer


def load_frames(path: str) -> list:
    """
    Load recorded estimator output.

    The file holds a JSON list of frames; each frame is a list of 33 entries
    ([x, y, z, visibility], {"x": .., "y": ..}, or null), or an object with a
    "landmarks" key holding that list.
    """
    with open(path, "r") as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise ValueError(f"Expected a JSON list of frames in {path}")
    return [frame["landmarks"] if isinstance(frame, dict) else frame for frame in data]


def main(argv=None) -> int:
    """Replay recorded landmark frames through the exercise analyzer."""
    parser = argparse.ArgumentParser(description="Rehab Trainer - Landmark Replay")
    parser.add_argument('--frames', type=str, required=True, help='Path to a JSON file of landmark frames')
    parser.add_argument('--exercise', type=str, default='squat', choices=sorted(EXERCISE_CONFIGS), help='Exercise type (default: squat)')
    parser.add_argument('--fps', type=float, default=30.0, help='Frame rate the frames were recorded at (default: 30)')
    parser.add_argument('--quiet', action='store_true', help='Only print the rep summary')
    args = parser.parse_args(argv)

    if not os.path.isfile(args.frames):
        print(f"Frames file not found: {args.frames}")
        return 1

    config = EXERCISE_CONFIGS[args.exercise]
    analyzer = ExerciseAnalyzer()
    voice = VoiceFeedback()

    try:
        frames = load_frames(args.frames)
    except (ValueError, KeyError, TypeError) as e:
        print(f"Could not read frames: {e}")
        return 1

    print(f"Replaying {len(frames)} frames for {config.name}...")
    for idx, frame in enumerate(frames):
        result = analyzer.analyze(frame, config)
        cue = voice.generate_feedback(result, now=idx / args.fps)
        if args.quiet:
            continue
        metrics = result.to_metrics()
        line = (
            f"[{idx:05d}] reps={metrics.rep_count} score={metrics.current_score} "
            f"knee={metrics.angles.knee:.1f} hip={metrics.angles.hip:.1f} "
            f"shoulder={metrics.angles.shoulder:.1f} in_position={metrics.is_in_position}"
        )
        if metrics.feedback:
            line += " | " + " / ".join(metrics.feedback)
        if cue:
            line += f" | SAY: {cue}"
        print(line)

    reps = analyzer.get_rep_data()
    print(f"Completed {len(reps)}/{config.target_reps} reps ({analyzer.target_progress(config):.0%})")
    for rep in reps:
        flags = ", ".join(rep.flags) or "clean"
        print(f"  rep {rep.rep_index}: score={rep.score} flags={flags}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
