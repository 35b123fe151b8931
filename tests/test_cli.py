from __future__ import annotations

import json
import logging
from pathlib import Path

from typer.testing import CliRunner

from province_race.cli import app

CONFIG_PATH = Path(__file__).resolve().parents[1] / "configs" / "default.yaml"


def _write_csv(tmp_path: Path) -> Path:
    csv_path = tmp_path / "provinces.csv"
    csv_path.write_text(
        "\n".join(
            [
                "Date,Province,New Cases,New Deaths,Total Cases,Total Deaths,Total Recovered",
                "01/01/2021,Jakarta,10,1,100,1,50",
                "01/01/2021,Bali,20,0,80,0,40",
                "01/02/2021,Jakarta,30,2,130,3,60",
                "01/02/2021,Bali,5,1,85,1,45",
                "01/03/2021,Jakarta,5,0,135,3,70",
                "01/03/2021,Bali,40,2,125,3,50",
            ]
        ),
        encoding="utf-8",
    )
    return csv_path


def test_cli_help() -> None:
    runner = CliRunner()
    result = runner.invoke(app, ["--help"])

    assert result.exit_code == 0
    assert "render" in result.stdout
    assert "frame" in result.stdout
    assert "rankings" in result.stdout
    assert "overview" in result.stdout


def test_render_without_animation_writes_outputs(tmp_path: Path) -> None:
    csv_path = _write_csv(tmp_path)
    out_dir = tmp_path / "out"
    runner = CliRunner()

    result = runner.invoke(
        app,
        [
            "render",
            "--csv",
            str(csv_path),
            "--out",
            str(out_dir),
            "--config",
            str(CONFIG_PATH),
            "--no-animate",
        ],
    )

    assert result.exit_code == 0, result.output
    assert "Render complete" in result.stdout
    assert (out_dir / "tables" / "rankings_new_cases.csv").exists()
    assert (out_dir / "figures" / "overview.png").exists()
    assert not (out_dir / "figures" / "race_new_cases.gif").exists()
    summary = json.loads((out_dir / "summary" / "run_summary.json").read_text(encoding="utf-8"))
    assert summary["dates_total"] == 3
    assert summary["metric"] == "New Cases"


def test_rankings_command_respects_metric_and_top_n(tmp_path: Path) -> None:
    csv_path = _write_csv(tmp_path)
    out_dir = tmp_path / "out"
    runner = CliRunner()

    result = runner.invoke(
        app,
        [
            "rankings",
            "--csv",
            str(csv_path),
            "--out",
            str(out_dir),
            "--config",
            str(CONFIG_PATH),
            "--metric",
            "total_cases",
            "--top-n",
            "1",
        ],
    )

    assert result.exit_code == 0, result.output
    table = (out_dir / "tables" / "rankings_total_cases.csv").read_text(encoding="utf-8")
    rows = table.strip().splitlines()
    assert rows[0] == "date,metric,rank,category,value"
    assert [row.split(",")[3] for row in rows[1:]] == ["Jakarta", "Jakarta", "Jakarta"]


def test_frame_command_writes_one_png(tmp_path: Path) -> None:
    csv_path = _write_csv(tmp_path)
    out_dir = tmp_path / "out"
    runner = CliRunner()

    result = runner.invoke(
        app,
        [
            "frame",
            "--csv",
            str(csv_path),
            "--out",
            str(out_dir),
            "--config",
            str(CONFIG_PATH),
            "--index",
            "1",
        ],
    )

    assert result.exit_code == 0, result.output
    assert (out_dir / "figures" / "frame_2021-01-02.png").exists()


def test_unknown_metric_is_a_usage_error(tmp_path: Path) -> None:
    csv_path = _write_csv(tmp_path)
    runner = CliRunner()

    result = runner.invoke(
        app,
        ["overview", "--csv", str(csv_path), "--out", str(tmp_path / "out"), "--metric", "Nope"],
    )

    assert result.exit_code == 2


def test_load_error_exits_with_code_one(tmp_path: Path) -> None:
    csv_path = tmp_path / "broken.csv"
    csv_path.write_text("Date,Region\n01/01/2021,Jakarta\n", encoding="utf-8")
    out_dir = tmp_path / "out"
    runner = CliRunner()

    result = runner.invoke(
        app,
        ["render", "--csv", str(csv_path), "--out", str(out_dir), "--no-animate"],
    )

    assert result.exit_code == 1
    assert "Error loading data" in result.output
    assert not (out_dir / "figures" / "overview.png").exists()


def test_log_level_option_keeps_plotting_libraries_quiet(tmp_path: Path) -> None:
    csv_path = _write_csv(tmp_path)
    runner = CliRunner()

    result = runner.invoke(
        app,
        [
            "--log-level",
            "DEBUG",
            "overview",
            "--csv",
            str(csv_path),
            "--out",
            str(tmp_path / "out"),
            "--config",
            str(CONFIG_PATH),
        ],
    )

    assert result.exit_code == 0, result.output
    assert (tmp_path / "out" / "figures" / "overview.png").exists()
    assert logging.getLogger("matplotlib").level >= logging.WARNING
