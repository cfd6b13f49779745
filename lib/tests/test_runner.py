"""Tests for ShellCommandRunner — asyncio subprocess command execution."""

from __future__ import annotations

import sys

import pytest

from kozen_env.errors import CommandExecutionError
from kozen_env.models import CommandResult
from kozen_env.runner import CommandRunner, ShellCommandRunner

pytestmark = pytest.mark.skipif(
    sys.platform.startswith("win"), reason="uses POSIX shell syntax"
)


@pytest.fixture
def runner():
    return ShellCommandRunner()


# ---------------------------------------------------------------------------
# Protocol conformance
# ---------------------------------------------------------------------------


class TestProtocolConformance:
    def test_isinstance_check(self, runner):
        assert isinstance(runner, CommandRunner)


# ---------------------------------------------------------------------------
# run
# ---------------------------------------------------------------------------


class TestRun:
    """run wraps asyncio.create_subprocess_shell."""

    @pytest.mark.asyncio
    async def test_echo_returns_stdout(self, runner):
        result = await runner.run("echo hello")
        assert isinstance(result, CommandResult)
        assert result.stdout.strip() == "hello"
        assert result.exit_code == 0

    @pytest.mark.asyncio
    async def test_nonzero_exit_raises(self, runner):
        with pytest.raises(CommandExecutionError) as info:
            await runner.run("exit 42")
        assert info.value.exit_code == 42
        assert info.value.command == "exit 42"

    @pytest.mark.asyncio
    async def test_stderr_carried_in_error(self, runner):
        with pytest.raises(CommandExecutionError, match="oops") as info:
            await runner.run("echo oops >&2; exit 3")
        assert "oops" in info.value.stderr

    @pytest.mark.asyncio
    async def test_has_duration_ms(self, runner):
        result = await runner.run("sleep 0.05")
        assert result.duration_ms > 0

    @pytest.mark.asyncio
    async def test_no_timeout_by_default(self, runner):
        result = await runner.run("sleep 0.2; echo done")
        assert result.stdout.strip() == "done"

    @pytest.mark.asyncio
    async def test_timeout_raises_timed_out(self):
        runner = ShellCommandRunner(timeout=0.1)
        with pytest.raises(CommandExecutionError) as info:
            await runner.run("sleep 10")
        assert info.value.timed_out is True

    @pytest.mark.asyncio
    async def test_export_is_a_valid_command(self, runner):
        result = await runner.run('export KOZEN_TEST_VAR="value"')
        assert result.exit_code == 0
