from pathlib import Path

import pytest

from structgantt.__main__ import main

SAMPLE = Path(__file__).resolve().parent.parent / "samples" / "release_plan.yaml"


def _write(tmp_path, text):
    path = tmp_path / "table.yaml"
    path.write_text(text, encoding="utf-8")
    return path


def test_cli_renders_sample_as_html(tmp_path):
    out_file = tmp_path / "chart.html"

    assert main([str(SAMPLE), "--out", str(out_file), "--no-view"]) == 0

    text = out_file.read_text(encoding="utf-8")
    assert "<h1>Release plan</h1>" in text
    assert '<th colspan="24">January</th>' in text
    assert "Wireframes and API draft" in text


def test_cli_renders_svg(tmp_path):
    out_file = tmp_path / "chart.svg"

    assert main([str(SAMPLE), "--format", "svg", "--out", str(out_file)]) == 0
    assert out_file.stat().st_size > 0


def test_cli_skip_weekends(tmp_path):
    out_file = tmp_path / "chart.html"

    assert main([str(SAMPLE), "--skip-weekends", "--out", str(out_file)]) == 0
    text = out_file.read_text(encoding="utf-8")
    assert '<th colspan="5">02</th>' in text
    assert "January" not in text


def test_cli_missing_file_returns_1(tmp_path, capsys):
    assert main([str(tmp_path / "missing.yaml"), "--out", str(tmp_path / "x.html")]) == 1
    assert "table file not found" in capsys.readouterr().err


@pytest.mark.parametrize(
    "text, message",
    [
        ("columns: [", "Error:"),
        ("columns:\n  - {name: Task, type: number}\n", "unknown column type"),
        (
            "columns:\n  - {name: Task, type: text}\n  - {name: Start, type: date}\n",
            "Not enough Date columns selected",
        ),
        (
            "columns:\n  - {name: Task, type: text}\n  - {name: Start, type: date}\n  - {name: End, type: date}\n"
            "rows:\n  - values: {Task: A, Start: 2024-01-01, End: 2024-01-02}\n",
            "Not enough variation in dates",
        ),
    ],
)
def test_cli_reports_input_errors_with_exit_code_2(tmp_path, capsys, text, message):
    path = _write(tmp_path, text)
    out_file = tmp_path / "chart.html"

    assert main([str(path), "--out", str(out_file)]) == 2
    assert message in capsys.readouterr().err
    assert not out_file.exists()
