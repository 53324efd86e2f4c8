"""
Runner: status machine, receipts, export and CLI.
"""

import dataclasses
import json
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from orbitcount import runner as runner_module
from orbitcount.config import Config, ConfigError
from orbitcount.core import DeterminismError, Receipts
from orbitcount.kernel import Grid, Ring, SymmetryFamily as F
from orbitcount.runner import (
    Status,
    compute,
    compute_with_determinism_check,
    export_filename,
    export_json,
    main,
    summarize,
)


def test_small_config_is_enumerated():
    result = compute(Config(Ring(4), 2, F.ROTATE_AND_FLIP))

    assert result.status is Status.DONE
    assert not result.too_large
    assert result.result_count == 6
    assert len(result.colorings) == 6
    assert result.report is not None and result.report.ok
    assert set(result.receipts) == {"config", "orbits", "enumerate", "consistency"}

    orbits = result.receipts["orbits"]
    assert orbits["section"] == "orbits"
    assert orbits["payload"]["result_count"] == 6
    assert orbits["payload"]["exact_division"] is True


def test_large_config_is_counted_only():
    result = compute(Config(Ring(10), 8, F.ROTATE))

    assert result.status is Status.TOO_LARGE
    assert result.too_large
    assert result.result_count > 10000
    assert result.colorings == ()
    assert result.report is None
    assert set(result.receipts) == {"config", "orbits", "enumerate"}
    assert result.receipts["enumerate"]["payload"]["status"] == "too_large"


def test_mid_size_ring_is_enumerated():
    result = compute(Config(Ring(9), 3, F.ROTATE_AND_FLIP))
    assert result.status is Status.DONE
    assert len(result.colorings) == result.result_count


def test_invalid_config_raises():
    with pytest.raises(ConfigError):
        compute(Config(Ring(11), 2, F.ROTATE))
    with pytest.raises(ConfigError):
        compute(Config(Ring(4), 2, F.ROTATE, quota=1))


def test_determinism_check_passes():
    result = compute_with_determinism_check(Config(Grid(2, 3), 3, F.ROTATE_AND_FLIP))
    assert result.status is Status.DONE

    again = compute(Config(Grid(2, 3), 3, F.ROTATE_AND_FLIP))
    for section in result.receipts:
        assert result.receipts[section]["section_hash"] == again.receipts[section]["section_hash"]


def test_receipts_change_with_request():
    a = compute(Config(Ring(5), 2, F.ROTATE))
    b = compute(Config(Ring(5), 2, F.ROTATE_AND_FLIP))
    assert a.receipts["config"]["section_hash"] != b.receipts["config"]["section_hash"]


def test_export_filenames():
    assert export_filename(Config(Ring(5), 3, F.ROTATE)) == "5 beads 3 col Rotate.json"
    assert export_filename(Config(Grid(3, 2), 4, F.ROTATE_AND_FLIP)) == "3x2 4 col RotateAndFlip.json"
    assert export_filename(Config(Ring(6), 2, F.NONE)) == "6 beads 2 col NoTransforms.json"


def test_export_json_content():
    name, data = export_json(compute(Config(Ring(2), 2, F.ROTATE)))
    assert name == "2 beads 2 col Rotate.json"
    assert json.loads(data) == [[0, 0], [0, 1], [1, 1]]

    _, data = export_json(compute(Config(Grid(2, 1), 2, F.ROTATE)))
    assert json.loads(data) == [[[0, 0]], [[0, 1]], [[1, 1]]]


def test_export_refused_when_too_large():
    with pytest.raises(ValueError):
        export_json(compute(Config(Ring(10), 8, F.ROTATE)))


def test_summary_shapes():
    done = summarize(compute(Config(Ring(3), 2, F.ROTATE)))
    assert done["status"] == "done"
    assert done["colorings"] == [[0, 0, 0], [0, 0, 1], [0, 1, 1], [1, 1, 1]]
    assert "message" not in done

    large = summarize(compute(Config(Ring(10), 8, F.ROTATE)))
    assert large["status"] == "too_large"
    assert "colorings" not in large
    assert large["message"] == "Too many (> 10,000) variants to display"


# ============================================================================
# CLI
# ============================================================================

def test_cli_prints_summary(capsys):
    assert main(["ring", "4", "--colours", "2", "--family", "dihedral"]) == 0
    summary = json.loads(capsys.readouterr().out)
    assert summary["result_count"] == 6
    assert summary["exact_division"] is True


def test_cli_grid_with_quota(capsys):
    assert main(["grid", "2", "2", "--colors", "2", "--family", "rotate+flip", "--quota", "2"]) == 0
    summary = json.loads(capsys.readouterr().out)
    assert summary["colorings"] == [[[0, 0], [1, 1]], [[0, 1], [1, 0]]]


def test_cli_writes_export_and_output(tmp_path, capsys):
    export_path = tmp_path / "set.json"
    output_path = tmp_path / "summary.json"
    code = main([
        "ring", "3", "--colours", "2",
        "--export", str(export_path),
        "--output", str(output_path),
    ])
    assert code == 0
    assert json.loads(export_path.read_bytes()) == [[0, 0, 0], [0, 0, 1], [0, 1, 1], [1, 1, 1]]
    assert json.loads(output_path.read_text())["result_count"] == 4
    assert "written to" in capsys.readouterr().err


def test_cli_too_large_is_not_an_error(capsys):
    assert main(["ring", "10", "--colours", "8"]) == 0
    summary = json.loads(capsys.readouterr().out)
    assert summary["status"] == "too_large"


def test_cli_too_large_export_fails(tmp_path, capsys):
    code = main(["ring", "10", "--colours", "8", "--export", str(tmp_path / "x.json")])
    assert code == 1
    assert not (tmp_path / "x.json").exists()


def test_cli_rejects_bad_input(capsys):
    assert main(["ring", "12", "--colours", "2"]) == 1
    assert "Error" in capsys.readouterr().err

    assert main(["ring", "4", "--family", "mirror"]) == 1
    assert "Invalid family" in capsys.readouterr().err


def test_cli_determinism_check(capsys):
    assert main(["grid", "2", "2", "--colours", "3", "--determinism-check"]) == 0
    assert json.loads(capsys.readouterr().out)["result_count"] == 24


def _drifting_compute(mutate):
    """compute() whose second call returns receipts altered by `mutate`."""
    real_compute = runner_module.compute
    calls = []

    def fake(config, strict=False, debug=False):
        result = real_compute(config, strict=strict)
        calls.append(1)
        if len(calls) == 2:
            receipts = dict(result.receipts)
            mutate(receipts)
            result = dataclasses.replace(result, receipts=receipts)
        return result

    return fake


def _tampered_enumerate(receipts):
    r = Receipts("enumerate")
    r.put("status", "done")
    r.put("canonical_count", -1)
    receipts["enumerate"] = r.digest()


def test_determinism_check_detects_drift(monkeypatch):
    monkeypatch.setattr(runner_module, "compute", _drifting_compute(_tampered_enumerate))
    with pytest.raises(DeterminismError) as exc_info:
        compute_with_determinism_check(Config(Ring(4), 2, F.ROTATE))
    assert exc_info.value.section == "enumerate"


def test_determinism_check_detects_missing_section(monkeypatch):
    monkeypatch.setattr(
        runner_module, "compute",
        _drifting_compute(lambda receipts: receipts.pop("consistency"))
    )
    with pytest.raises(DeterminismError) as exc_info:
        compute_with_determinism_check(Config(Ring(4), 2, F.ROTATE))
    assert exc_info.value.section == "consistency"


def test_cli_reports_determinism_failure(monkeypatch, capsys):
    monkeypatch.setattr(runner_module, "compute", _drifting_compute(_tampered_enumerate))
    assert main(["ring", "4", "--colours", "2", "--determinism-check"]) == 1
    assert "Double-run hash mismatch" in capsys.readouterr().err
