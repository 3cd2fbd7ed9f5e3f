from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from csv_tally.cli import app


def _write_cases_csv(path: Path) -> Path:
    path.write_text(
        "\n".join(
            [
                "Case Number,Reason",
                "C-1,Late",
                "C-2,Late",
                "C-3,Lost",
                "C-4,Late",
                "C-5,Damaged",
                "C-6,Lost",
                "C-7,Late",
                "C-8,Late",
            ]
        ),
        encoding="utf-8",
    )
    return path


def _combined_output(result) -> str:
    return result.output


def test_cli_help() -> None:
    runner = CliRunner()
    result = runner.invoke(app, ["--help"])

    assert result.exit_code == 0
    for command in ("columns", "tabulate", "copy", "report"):
        assert command in result.stdout


def test_columns_lists_header(tmp_path: Path) -> None:
    csv_path = _write_cases_csv(tmp_path / "cases.csv")

    result = CliRunner().invoke(app, ["columns", "--csv", str(csv_path)])

    assert result.exit_code == 0, result.stdout
    assert "0: Case Number" in result.stdout
    assert "1: Reason" in result.stdout
    assert "8 data rows" in result.stdout


def test_tabulate_prints_breakdown(tmp_path: Path) -> None:
    csv_path = _write_cases_csv(tmp_path / "cases.csv")

    result = CliRunner().invoke(app, ["tabulate", "--csv", str(csv_path), "--column", "Reason"])

    assert result.exit_code == 0, result.stdout
    assert "Reason Analysis (8 entries)" in result.stdout
    assert "- Late: 62.50% (5)" in result.stdout
    assert "- Damaged: 12.50% (1)" in result.stdout


def test_tabulate_json_and_figure(tmp_path: Path) -> None:
    csv_path = _write_cases_csv(tmp_path / "cases.csv")
    figure_path = tmp_path / "reason.png"

    result = CliRunner().invoke(
        app,
        [
            "tabulate",
            "--csv",
            str(csv_path),
            "--column",
            "Reason",
            "--format",
            "json",
            "--chart",
            "pie",
            "--figure",
            str(figure_path),
        ],
    )

    assert result.exit_code == 0, _combined_output(result)
    assert figure_path.exists()
    start = result.stdout.index("{")
    end = result.stdout.rindex("}") + 1
    payload = json.loads(result.stdout[start:end])
    assert [item["name"] for item in payload["all_categories"]] == ["Late", "Lost", "Damaged"]


def test_tabulate_rejects_unknown_column(tmp_path: Path) -> None:
    csv_path = _write_cases_csv(tmp_path / "cases.csv")

    result = CliRunner().invoke(app, ["tabulate", "--csv", str(csv_path), "--column", "Status"])

    assert result.exit_code != 0
    assert "Status" in _combined_output(result) or "Status" in str(result.exception)


def test_copy_writes_to_clipboard(monkeypatch, tmp_path: Path) -> None:
    csv_path = _write_cases_csv(tmp_path / "cases.csv")
    copied: list[str] = []
    monkeypatch.setattr("csv_tally.cli._write_clipboard", copied.append)

    result = CliRunner().invoke(
        app,
        ["copy", "--csv", str(csv_path), "--column", "Reason", "--count", "9"],
    )

    assert result.exit_code == 0, _combined_output(result)
    assert copied == ["\n".join(["Late"] * 4 + ["Lost"] * 2 + ["Damaged"])]
    assert "7 entries copied to clipboard" in result.stdout


def test_copy_with_case_numbers_to_stdout(tmp_path: Path) -> None:
    csv_path = _write_cases_csv(tmp_path / "cases.csv")

    result = CliRunner().invoke(
        app,
        [
            "copy",
            "--csv",
            str(csv_path),
            "--column",
            "Reason",
            "--count",
            "9",
            "--include-case-number",
            "--stdout",
        ],
    )

    assert result.exit_code == 0, _combined_output(result)
    lines = result.stdout.strip().splitlines()
    assert lines == [
        "Late\tC-1",
        "Late\tC-2",
        "Late\tC-4",
        "Late\tC-7",
        "Lost\tC-3",
        "Lost\tC-6",
        "Damaged\tC-5",
    ]


def test_copy_to_output_file(tmp_path: Path) -> None:
    csv_path = _write_cases_csv(tmp_path / "cases.csv")
    output_path = tmp_path / "exports" / "sample.txt"

    result = CliRunner().invoke(
        app,
        ["copy", "--csv", str(csv_path), "--column", "Reason", "--output", str(output_path)],
    )

    assert result.exit_code == 0, _combined_output(result)
    assert output_path.read_text(encoding="utf-8").splitlines()[0] == "Late"
    assert "entries written to" in result.stdout


def test_copy_reports_missing_case_number_column(tmp_path: Path) -> None:
    csv_path = tmp_path / "plain.csv"
    csv_path.write_text("Reason\nLate\nLost\n", encoding="utf-8")

    result = CliRunner().invoke(
        app,
        ["copy", "--csv", str(csv_path), "--column", "Reason", "--include-case-number"],
    )

    assert result.exit_code == 1
    assert "Case Number column not found" in _combined_output(result)


def test_copy_reports_clipboard_failure(monkeypatch, tmp_path: Path) -> None:
    csv_path = _write_cases_csv(tmp_path / "cases.csv")

    def _broken(_text: str) -> None:
        raise RuntimeError("clipboard unavailable")

    monkeypatch.setattr("csv_tally.cli._write_clipboard", _broken)

    result = CliRunner().invoke(app, ["copy", "--csv", str(csv_path), "--column", "Reason"])

    assert result.exit_code == 1
    assert "clipboard unavailable" in _combined_output(result)


def test_report_command_writes_html(tmp_path: Path) -> None:
    csv_path = _write_cases_csv(tmp_path / "cases.csv")
    out_dir = tmp_path / "out"

    result = CliRunner().invoke(
        app,
        ["report", "--csv", str(csv_path), "--column", "Reason", "--out", str(out_dir)],
    )

    assert result.exit_code == 0, _combined_output(result)
    assert (out_dir / "report.html").exists()
    assert (out_dir / "tables" / "category_frequency.csv").exists()
    assert "Report written to" in result.stdout


def test_config_file_overrides_case_number_column(tmp_path: Path) -> None:
    csv_path = tmp_path / "tickets.csv"
    csv_path.write_text("Ticket,Reason\nT-1,Late\nT-2,Lost\n", encoding="utf-8")
    config_path = tmp_path / "config.yaml"
    config_path.write_text("columns:\n  case_number: Ticket\n", encoding="utf-8")

    result = CliRunner().invoke(
        app,
        [
            "copy",
            "--csv",
            str(csv_path),
            "--column",
            "Reason",
            "--config",
            str(config_path),
            "--include-case-number",
            "--stdout",
        ],
    )

    assert result.exit_code == 0, _combined_output(result)
    assert result.stdout.strip().splitlines() == ["Late\tT-1", "Lost\tT-2"]
