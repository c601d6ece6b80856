"""Tests for the xhair command line interface."""

from unittest.mock import MagicMock, patch

import pytest
from typer.testing import CliRunner

from xhair import __version__
from xhair.cli import app
from xhair.core.config import XhairConfig
from xhair.core.models import CrosshairResult, PipelineOutcome, PipelineStage

runner = CliRunner()

STEAM_ID = "76561198000000001"


@pytest.fixture
def orchestrator():
    """Patch config loading and the orchestrator used by the CLI."""
    mock = MagicMock()
    mock.__enter__.return_value = mock
    with (
        patch("xhair.cli.load_config", return_value=XhairConfig()),
        patch("xhair.cli.CrosshairOrchestrator", return_value=mock),
    ):
        yield mock


class TestVersion:
    def test_version_flag(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestCrosshairCommand:
    """Tests for `xhair crosshair`."""

    def test_prints_code(self, orchestrator):
        orchestrator.run.return_value = PipelineOutcome(
            steam_id=STEAM_ID,
            stage=PipelineStage.DONE,
            result=CrosshairResult(found=True, code="5;1;1;1;0"),
            match_id="m-1",
        )

        result = runner.invoke(app, ["crosshair", STEAM_ID])

        assert result.exit_code == 0
        assert "5;1;1;1;0" in result.output
        assert "m-1" in result.output
        assert orchestrator.run.call_args[0][0] == STEAM_ID

    def test_no_code(self, orchestrator):
        orchestrator.run.return_value = PipelineOutcome(
            steam_id=STEAM_ID, stage=PipelineStage.DONE, result=CrosshairResult(), match_id="m-1"
        )

        result = runner.invoke(app, ["crosshair", STEAM_ID])

        assert result.exit_code == 0
        assert "No crosshair code" in result.output

    def test_failure_exits_nonzero(self, orchestrator):
        orchestrator.run.return_value = PipelineOutcome(
            steam_id=STEAM_ID,
            stage=PipelineStage.FAILED,
            message=f"Could not find user with steam id: {STEAM_ID}",
            status_code=404,
        )

        result = runner.invoke(app, ["crosshair", STEAM_ID])

        assert result.exit_code == 1
        assert "Could not find user" in result.output

    def test_invalid_steam_id(self, orchestrator):
        result = runner.invoke(app, ["crosshair", "not-a-number"])

        assert result.exit_code == 2
        orchestrator.run.assert_not_called()

    def test_ctrl_c_cancels(self, orchestrator):
        tokens = []

        def interrupted(steam_id, cancel):
            tokens.append(cancel)
            raise KeyboardInterrupt

        orchestrator.run.side_effect = interrupted

        result = runner.invoke(app, ["crosshair", STEAM_ID])

        assert result.exit_code == 130
        assert tokens[0].cancelled


class TestInfoCommand:
    """Tests for `xhair info`."""

    def test_shows_redacted_config(self):
        config = XhairConfig()
        config.faceit.api_key = "secret-key"
        with patch("xhair.cli.load_config", return_value=config):
            result = runner.invoke(app, ["info"])

        assert result.exit_code == 0
        assert "faceit.game" in result.output
        assert "secret-key" not in result.output
