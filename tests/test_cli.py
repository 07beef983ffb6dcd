from __future__ import annotations

from pathlib import Path

import pytest

from migraplan import cli

SAMPLE_MIGRATIONS = Path(__file__).resolve().parents[1] / "migrations"


def test_target_arguments_are_exclusive():
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args(["up", "--to", "x", "--steps", "1"])


@pytest.mark.asyncio
async def test_plan_up_and_status(engine, monkeypatch, capsys):
    monkeypatch.setattr(cli, "get_engine", lambda: engine)
    parser = cli.build_parser()
    base = ["--dir", str(SAMPLE_MIGRATIONS), "--app", "cli"]

    assert await cli.run(parser.parse_args(base + ["plan", "--steps", "1"])) == 0
    lines = capsys.readouterr().out.splitlines()
    assert [l for l in lines if l.startswith(("up ", "down "))] == ["up 202601190000-create-accounts"]

    assert await cli.run(parser.parse_args(base + ["up"])) == 0
    assert await cli.run(parser.parse_args(base + ["status"])) == 0
    out = capsys.readouterr().out
    assert "current: 202601290000-index-sessions" in out
    assert "requires migration: False" in out
