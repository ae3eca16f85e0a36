"""Tests for the command-line entry point"""
import pytest

from src.main import run


@pytest.mark.asyncio
async def test_award_command_prints_feedback_and_status(temp_data_dir, capsys):
    code = await run(["--user", "u1", "--data-path", str(temp_data_dir), "award", "510"])

    out = capsys.readouterr().out
    assert code == 0
    assert "+510 XP" in out
    assert "LEVEL UP!" in out
    assert "Level 2 - 10/650 XP" in out


@pytest.mark.asyncio
async def test_progress_persists_between_runs(temp_data_dir, capsys):
    await run(["--user", "u1", "--data-path", str(temp_data_dir), "habit", "hydration"])
    await run(["--user", "u1", "--data-path", str(temp_data_dir), "consult"])
    capsys.readouterr()

    await run(["--user", "u1", "--data-path", str(temp_data_dir), "status"])

    assert "Level 1 - 230/500 XP (46%)" in capsys.readouterr().out


@pytest.mark.asyncio
async def test_negative_award_reports_error(temp_data_dir, capsys):
    code = await run(["--user", "u1", "--data-path", str(temp_data_dir), "award", "-5"])

    assert code == 1
    assert "amount" in capsys.readouterr().out


@pytest.mark.asyncio
async def test_status_reports_lifetime_total(temp_data_dir, capsys):
    await run(["--user", "u1", "--data-path", str(temp_data_dir), "award", "1200"])
    capsys.readouterr()

    await run(["--user", "u1", "--data-path", str(temp_data_dir), "status"])

    out = capsys.readouterr().out
    assert "Level 3 - 50/845 XP" in out
    assert "Total earned: 1200 XP" in out


@pytest.mark.asyncio
async def test_fractional_award(temp_data_dir, capsys):
    code = await run(["--user", "u1", "--data-path", str(temp_data_dir), "award", "2.5"])

    out = capsys.readouterr().out
    assert code == 0
    assert "+2.5 XP" in out
    assert "Level 1 - 2.5/500 XP" in out


@pytest.mark.asyncio
async def test_unsafe_user_id_reports_error(temp_data_dir, capsys):
    code = await run(["--user", "../other", "--data-path", str(temp_data_dir), "status"])

    assert code == 1
    assert "user_id" in capsys.readouterr().out
    assert list(temp_data_dir.iterdir()) == []
