import json
import subprocess
import sys
from pathlib import Path

import pandas as pd
import pytest


def test_project_population_smoke(tmp_path: Path):
    repo_root = Path(__file__).resolve().parents[1]

    cmd = [
        sys.executable,
        str(repo_root / "scripts" / "01_project_population.py"),
        "--tmax",
        "60",
        "--outdir",
        str(tmp_path),
    ]
    subprocess.run(cmd, cwd=repo_root, check=True)

    required_paths = [
        "figures/plot1.png",
        "figures/plot2.png",
        "tables/population_projection.csv",
        "tables/growth_coefficients.csv",
        "logs/projection_run_metadata.json",
    ]
    for rel in required_paths:
        assert (tmp_path / rel).exists(), f"Missing expected projection artifact: {rel}"

    projection = pd.read_csv(tmp_path / "tables" / "population_projection.csv")
    assert projection.columns.tolist() == ["V1", "V2", "V3", "total", "t"]
    assert len(projection) == 60

    coefs = pd.read_csv(tmp_path / "tables" / "growth_coefficients.csv")
    assert coefs["start"].tolist() == ["single_class", "stable"]
    stable = coefs.set_index("start").loc["stable"]
    assert stable["r"] == pytest.approx(stable["eigen_r"], rel=0.05)

    payload = json.loads((tmp_path / "logs" / "projection_run_metadata.json").read_text(encoding="utf-8"))
    assert payload["params"]["tmax"] == 60


def test_life_table_smoke(tmp_path: Path):
    repo_root = Path(__file__).resolve().parents[1]

    cmd = [
        sys.executable,
        str(repo_root / "scripts" / "02_life_table.py"),
        "--outdir",
        str(tmp_path),
    ]
    result = subprocess.run(cmd, cwd=repo_root, check=True, capture_output=True, text=True)

    assert "illustrative stand-in values" in result.stdout

    for rel in ["figures/plot3.png", "tables/life_table.csv", "tables/life_table_summary.csv"]:
        assert (tmp_path / rel).exists(), f"Missing expected life-table artifact: {rel}"

    table = pd.read_csv(tmp_path / "tables" / "life_table.csv")
    assert table.columns.tolist() == ["x", "P(x)", "m(x)", "P(x).m(x)"]

    summary = pd.read_csv(tmp_path / "tables" / "life_table_summary.csv")
    assert summary.loc[0, "net_reproductive_rate"] > 1

    payload = json.loads((tmp_path / "logs" / "life_table_run_metadata.json").read_text(encoding="utf-8"))
    assert payload["params"]["illustrative_data"] is True


def test_life_table_missing_input_exits(tmp_path: Path):
    repo_root = Path(__file__).resolve().parents[1]

    cmd = [
        sys.executable,
        str(repo_root / "scripts" / "02_life_table.py"),
        "--input",
        str(tmp_path / "missing.csv"),
        "--outdir",
        str(tmp_path),
    ]
    result = subprocess.run(cmd, cwd=repo_root, capture_output=True, text=True)

    assert result.returncode != 0
    assert "Life table not found" in result.stderr


def test_validate_environment_smoke():
    repo_root = Path(__file__).resolve().parents[1]

    cmd = [sys.executable, str(repo_root / "scripts" / "00_validate_environment.py")]
    subprocess.run(cmd, cwd=repo_root, check=True)

    payload = json.loads((repo_root / "outputs" / "logs" / "environment_check.json").read_text(encoding="utf-8"))
    assert payload["mite_file_exists"] is True
    assert "numpy" in payload["packages"]


def test_life_table_custom_input_has_no_bundled_data_note(tmp_path: Path):
    repo_root = Path(__file__).resolve().parents[1]
    life_csv = tmp_path / "cohort.csv"
    pd.DataFrame({"x": [0, 1, 2], "P(x)": [1.0, 0.8, 0.5], "m(x)": [0.0, 1.0, 2.0]}).to_csv(life_csv, index=False)

    cmd = [
        sys.executable,
        str(repo_root / "scripts" / "02_life_table.py"),
        "--input",
        str(life_csv),
        "--outdir",
        str(tmp_path / "out"),
    ]
    result = subprocess.run(cmd, cwd=repo_root, check=True, capture_output=True, text=True)

    assert "illustrative stand-in values" not in result.stdout
    summary = pd.read_csv(tmp_path / "out" / "tables" / "life_table_summary.csv")
    assert summary.loc[0, "net_reproductive_rate"] == pytest.approx(1.8)


@pytest.mark.parametrize(
    "extra_args, message",
    [
        (["--tmax", "2"], "--tmax must be at least 3"),
        (["--initial", "0"], "--initial must be positive"),
    ],
)
def test_project_population_rejects_invalid_arguments(tmp_path: Path, extra_args, message):
    repo_root = Path(__file__).resolve().parents[1]

    cmd = [
        sys.executable,
        str(repo_root / "scripts" / "01_project_population.py"),
        *extra_args,
        "--outdir",
        str(tmp_path),
    ]
    result = subprocess.run(cmd, cwd=repo_root, capture_output=True, text=True)

    assert result.returncode != 0
    assert message in result.stderr
    assert not (tmp_path / "tables").exists()
