"""
Tests for the rank.py command line entry point.
"""

import json

import pytest

import rank
from tests.fakes import ScriptedFetcher, filler_page, make_page


@pytest.fixture
def fetcher(monkeypatch):
    fetcher = ScriptedFetcher(
        pages={
            "found": [make_page(["https://other.com/", "https://megagong.net/x"])],
            "missing": [filler_page(10)],
        },
        always_fail={"broken"},
    )
    monkeypatch.setattr(rank, "GooglePageFetcher", lambda config: fetcher)
    return fetcher


@pytest.fixture
def config_path(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"max_pages": 1, "courtesy_delay": 0}), encoding="utf-8")
    return path


def test_parse_run_args():
    args = rank.parse_args(
        ["run", "--keywords", "a", "b", "--site", "gong", "--retry-budget", "0"]
    )

    assert args.command == "run"
    assert args.keywords == ["a", "b"]
    assert args.site == "gong"
    assert args.retry_budget == 0
    assert args.delay is None


def test_read_keywords(tmp_path):
    path = tmp_path / "keywords.txt"
    path.write_text("alpha\n\n beta \nalpha\n", encoding="utf-8")

    assert rank.read_keywords(path) == ["alpha", "beta"]


@pytest.mark.asyncio
async def test_check_command(fetcher, config_path):
    code = await rank.main(["--config", str(config_path), "check", "found"])

    assert code == 0
    assert fetcher.calls == [("found", 1)]


@pytest.mark.asyncio
async def test_run_command_exports_results(fetcher, config_path, tmp_path):
    out = tmp_path / "out"

    code = await rank.main(
        [
            "--config", str(config_path),
            "run", "--keywords", "found", "missing", "broken",
            "--retry-budget", "1",
            "--output-dir", str(out),
        ]
    )

    assert code == 1
    lines = (out / "results.jsonl").read_text(encoding="utf-8").splitlines()
    ranks = {r["keyword"]: r["rank"] for r in map(json.loads, lines)}
    assert ranks == {"found": 2, "missing": "not found", "broken": "error"}


@pytest.mark.asyncio
async def test_unknown_site_is_reported(fetcher, config_path):
    code = await rank.main(
        ["--config", str(config_path), "check", "found", "--site", "nowhere"]
    )

    assert code == 2
    assert fetcher.calls == []
