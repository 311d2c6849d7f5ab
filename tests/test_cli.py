# File: tests/test_cli.py
"""Tests for the click CLI (`doc_mirror.cli`) using click.testing.CliRunner.
They cover `crawl`, `config`, `--version` and error handling.
"""
import importlib
import json
import logging

import pytest
from click.testing import CliRunner

cli_module = importlib.import_module("doc_mirror.cli")
from doc_mirror.cli import cli
from doc_mirror.logger import get_logger
from doc_mirror.report import CrawlReport


@pytest.fixture(autouse=True)
def patch_start_crawl(monkeypatch):
    """Replace start_crawl so no network crawl is started; record the configs."""
    seen = []

    async def fake_crawl(cfg):
        seen.append(cfg)
        return CrawlReport(
            base_url=str(cfg.base_url),
            name=cfg.name,
            visited=3,
            fetched=2,
            converted=1,
            saved=["docs/example/index.md"],
        )

    monkeypatch.setattr(cli_module, "start_crawl", fake_crawl)
    return seen


def test_version_option():
    runner = CliRunner()
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "DocMirror" in result.output


def test_crawl_from_arguments(patch_start_crawl, tmp_path):
    runner = CliRunner()
    result = runner.invoke(
        cli,
        ["crawl", "-u", "https://example.com/docs", "-n", "example", "-d", "3", "-o", str(tmp_path)],
    )
    assert result.exit_code == 0, result.output
    assert "3 pages visited" in result.output

    cfg = patch_start_crawl[0]
    assert str(cfg.base_url) == "https://example.com/docs"
    assert cfg.max_depth == 3
    assert cfg.output_dir == tmp_path


def test_crawl_token_from_environment(patch_start_crawl, monkeypatch):
    monkeypatch.setenv("JINA_READER_TOKEN", "from-env")
    runner = CliRunner()
    result = runner.invoke(cli, ["crawl", "-u", "https://example.com", "-n", "site"])
    assert result.exit_code == 0, result.output
    assert patch_start_crawl[0].token == "from-env"


def test_crawl_config_file_with_override(patch_start_crawl, tmp_path):
    cfg_file = tmp_path / "mirror.yaml"
    cfg_file.write_text(
        "base_url: https://example.com/docs\nname: example\nmax_depth: 4\nrequest_interval: 1\n",
        encoding="utf-8",
    )
    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(cfg_file), "crawl", "--max-depth", "1"])
    assert result.exit_code == 0, result.output

    cfg = patch_start_crawl[0]
    assert cfg.max_depth == 1
    assert cfg.request_interval == 1.0


def test_crawl_json_report(tmp_path):
    out = tmp_path / "report.json"
    runner = CliRunner()
    result = runner.invoke(
        cli, ["crawl", "-u", "https://example.com/docs", "-n", "example", "--json", str(out), "--pretty"]
    )
    assert result.exit_code == 0, result.output
    data = json.loads(out.read_text(encoding="utf-8"))
    assert data["name"] == "example"
    assert data["visited"] == 3
    assert data["saved"] == ["docs/example/index.md"]


def test_crawl_missing_base_url(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    runner = CliRunner()
    result = runner.invoke(cli, ["crawl", "-n", "example"])
    assert result.exit_code == 1
    assert "Invalid configuration" in result.output


def test_crawl_failure_exits_nonzero(monkeypatch):
    async def broken(cfg):
        raise RuntimeError("network down")

    monkeypatch.setattr(cli_module, "start_crawl", broken)
    runner = CliRunner()
    result = runner.invoke(cli, ["crawl", "-u", "https://example.com", "-n", "site"])
    assert result.exit_code == 1
    assert "network down" in result.output


def test_show_config_masks_token():
    runner = CliRunner()
    result = runner.invoke(cli, ["config", "-u", "https://example.com/docs", "-n", "example", "-t", "secret"])
    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["base_url"] == "https://example.com/docs"
    assert data["name"] == "example"
    assert data["token"] == "***"
    assert data["max_depth"] == 2


def test_component_level_option(patch_start_crawl):
    runner = CliRunner()
    result = runner.invoke(
        cli,
        ["--component-level", "storage=warning", "crawl", "-u", "https://example.com/docs", "-n", "example"],
    )
    assert result.exit_code == 0, result.output
    assert get_logger("storage").level == logging.WARNING
    assert get_logger("fetcher").level == logging.NOTSET


@pytest.mark.parametrize("value", ["storage", "disk=DEBUG", "storage=LOUD"])
def test_component_level_option_rejects_bad_values(patch_start_crawl, value):
    runner = CliRunner()
    result = runner.invoke(cli, ["--component-level", value, "crawl", "-u", "https://example.com/docs", "-n", "x"])
    assert result.exit_code == 2
    assert "--component-level" in result.output
    assert patch_start_crawl == []
