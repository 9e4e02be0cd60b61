# File: tests/test_cli.py
"""CLI tests (`bank_scraper.cli`) using click.testing.CliRunner.
Cover the `crawl` and `config` commands, `--version` and error handling.
"""
import json

import pytest
from click.testing import CliRunner

import bank_scraper.cli as cli_module
import bank_scraper.engine as engine_module
from bank_scraper.aggregator import aggregate_results
from bank_scraper.cli import cli
from bank_scraper.crawler.models import ContentType, ContentRecord
from bank_scraper.exceptions import RenderingUnavailableError


@pytest.fixture()
def config_file(tmp_path):
    cfg_file = tmp_path / "config.json"
    cfg_file.write_text(
        json.dumps(
            {
                "base_url": "https://example.com",
                "target_domain": "example.com",
                "max_pages": 10,
                "output_file": str(tmp_path / "out.json"),
                "pdfs_dir": str(tmp_path / "pdfs"),
            }
        ),
        encoding="utf-8",
    )
    return cfg_file


@pytest.fixture()
def captured(monkeypatch):
    """Patch the engine coroutine behind run_crawl to record the config and return a one-record report."""
    seen = {}

    async def fake_crawl(cfg):
        seen["config"] = cfg
        record = ContentRecord("https://example.com/", ContentType.HTML, "pt", "conteúdo")
        return aggregate_results([record], cfg.target_domain)

    monkeypatch.setattr(engine_module, "start_crawl", fake_crawl)
    return seen


def test_version_option():
    runner = CliRunner()
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "BankScraper" in result.output


def test_show_config(config_file):
    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(config_file), "config"])
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["base_url"] == "https://example.com/"
    assert data["target_domain"] == "example.com"


def test_crawl_applies_overrides(config_file, captured, tmp_path):
    out = tmp_path / "custom.json"
    runner = CliRunner()
    result = runner.invoke(
        cli,
        ["--config", str(config_file), "--limit", "3", "crawl", "--output", str(out), "--concurrency", "2"],
    )
    assert result.exit_code == 0, result.output
    cfg = captured["config"]
    assert cfg.max_pages == 3
    assert cfg.max_concurrent_pages == 2
    assert cfg.output_file == out
    assert "Collected 1 items (1 html, 0 pdf)" in result.output


def test_crawl_fatal_error(config_file, monkeypatch):
    async def broken(cfg):
        raise RenderingUnavailableError("Browser initialization failed: no chromium")

    monkeypatch.setattr(engine_module, "start_crawl", broken)
    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(config_file), "crawl"])
    assert result.exit_code == 1
    assert "no chromium" in result.output


def test_crawl_interrupted(config_file, monkeypatch):
    async def interrupted(cfg):
        raise KeyboardInterrupt

    monkeypatch.setattr(engine_module, "start_crawl", interrupted)
    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(config_file), "crawl"])
    assert result.exit_code == cli_module.INTERRUPTED_EXIT_CODE
    assert "interrupted" in result.output


def test_bad_config_file(tmp_path):
    bad = tmp_path / "bad.yaml"
    bad.write_text("max_pages: -1", encoding="utf-8")
    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(bad), "config"])
    assert result.exit_code == 1
    assert "Failed to load configuration" in result.output


def test_limit_must_be_positive(config_file):
    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(config_file), "--limit", "0", "config"])
    assert result.exit_code != 0
