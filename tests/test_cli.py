# File: tests/test_cli.py
"""Тесты для CLI (`favicon_stats.cli`) с использованием click.testing.CliRunner.
Проверяют команды `process`, `stats`, `config`, `--version`, а также обработку ошибок.
"""
import json

import pytest
from click.testing import CliRunner

from favicon_stats.cli import cli


@pytest.fixture()
def runner():
    return CliRunner()


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
    """Без configs/default.yaml в рабочей папке берутся значения по умолчанию."""
    monkeypatch.chdir(tmp_path)


def test_version_option(runner):
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "favicon_stats" in result.output


def test_show_config(runner, tmp_path):
    cfg_file = tmp_path / "cfg.json"
    cfg_file.write_text(json.dumps({"icons_dir": "my-icons"}), encoding="utf-8")
    result = runner.invoke(cli, ["--log-level", "ERROR", "--config", str(cfg_file), "config"])
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["icons_dir"] == "my-icons"
    assert data["input_file"] == "favicons.json"


def test_bad_config_exits_with_error(runner, tmp_path):
    cfg_file = tmp_path / "cfg.yaml"
    cfg_file.write_text("unknown: 1", encoding="utf-8")
    result = runner.invoke(cli, ["--config", str(cfg_file), "config"])
    assert result.exit_code == 1
    assert "Ошибка загрузки конфигурации" in result.output


def test_process_command(runner, records_file, tmp_path):
    out = tmp_path / "processed.json"
    result = runner.invoke(
        cli, ["--log-level", "ERROR", "process", "--input", str(records_file), "--output", str(out)]
    )
    assert result.exit_code == 0, result.output
    assert "removed 1 duplicates" in result.output
    saved = json.loads(out.read_text(encoding="utf-8"))
    assert len(saved) == 4


def test_process_missing_input(runner, tmp_path):
    result = runner.invoke(cli, ["process", "--input", str(tmp_path / "missing.json")])
    assert result.exit_code == 1
    assert "Input file not found" in result.output


def test_stats_stdout(runner, records_file, icons_dir):
    result = runner.invoke(
        cli,
        [
            "--log-level", "ERROR",
            "stats", "--input", str(records_file), "--icons-dir", str(icons_dir), "--stdout",
        ],
    )
    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["total"] == 5
    assert data["downloadedCount"] == 3
    assert sum(data["byStatus"].values()) == data["total"]


def test_stats_normalize_flag(runner, tmp_path):
    source = tmp_path / "downloaded.json"
    source.write_text(
        json.dumps([{"url": "http://ex.com/", "favicon": None, "status": "failed", "error": "HTTP 404 Not Found"}]),
        encoding="utf-8",
    )
    for extra in ([], ["--normalize"]):
        result = runner.invoke(
            cli,
            ["--log-level", "ERROR", "stats", "--input", str(source), "--icons-dir", str(tmp_path), "--stdout", *extra],
        )
        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["byError"] == {"HTTP 404 Not Found": 1}


def test_stats_writes_reports(runner, records_file, icons_dir, tmp_path):
    html = tmp_path / "out" / "stats.html"
    js = tmp_path / "out" / "stats.json"
    result = runner.invoke(
        cli,
        [
            "--log-level", "ERROR",
            "stats", "--input", str(records_file), "--icons-dir", str(icons_dir),
            "--html", str(html), "--json", str(js), "--dedupe",
        ],
    )
    assert result.exit_code == 0, result.output
    assert html.exists()
    assert json.loads(js.read_text(encoding="utf-8"))["total"] == 4


def test_stats_default_paths_from_config(runner, records_file, icons_dir, tmp_path):
    (tmp_path / "configs").mkdir()
    (tmp_path / "configs" / "default.yaml").write_text(
        f"stats_input_file: {records_file}\nicons_dir: {icons_dir}\nstats_html: report/stats.html\n",
        encoding="utf-8",
    )
    result = runner.invoke(cli, ["--log-level", "ERROR", "stats"])
    assert result.exit_code == 0, result.output
    assert (tmp_path / "report" / "stats.html").exists()
