import json

from conftest import squat_frame
from rehab_trainer.main import load_frames, main


def to_json_frame(frame):
    return [None if p is None else [p.x, p.y, p.z, p.visibility] for p in frame]


def test_replay_counts_reps(tmp_path, capsys):
    frames = [to_json_frame(squat_frame(a)) for a in (170, 100, 70, 150, 100, 150)]
    path = tmp_path / "frames.json"
    path.write_text(json.dumps(frames))

    assert main(["--frames", str(path), "--exercise", "squat"]) == 0
    out = capsys.readouterr().out
    assert "Completed 2/10 reps (20%)" in out
    assert "rep 1: score=100 flags=clean" in out
    assert "rep 2: score=100 flags=shallow_squat" in out
    assert "Great depth!" in out


def test_load_frames_accepts_wrapped_frames(tmp_path):
    path = tmp_path / "frames.json"
    path.write_text(json.dumps([{"landmarks": [None] * 33}, [None] * 33]))
    assert load_frames(str(path)) == [[None] * 33, [None] * 33]


def test_missing_file(tmp_path, capsys):
    assert main(["--frames", str(tmp_path / "missing.json")]) == 1
    assert "not found" in capsys.readouterr().out


def test_bad_payload(tmp_path, capsys):
    path = tmp_path / "frames.json"
    path.write_text(json.dumps({"frames": []}))
    assert main(["--frames", str(path), "--quiet"]) == 1
    assert "Could not read frames" in capsys.readouterr().out


def test_malformed_frames_are_replayed_without_a_skeleton(tmp_path, capsys):
    broken_point = [None] * 33
    broken_point[25] = [None, 0.5]
    frames = [broken_point, 5, to_json_frame(squat_frame(100))]
    path = tmp_path / "frames.json"
    path.write_text(json.dumps(frames))

    assert main(["--frames", str(path), "--quiet"]) == 0
    assert "Completed 0/10 reps (0%)" in capsys.readouterr().out
