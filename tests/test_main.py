"""
Tests for the pearl command line.
"""

from unittest.mock import MagicMock, patch

import pytest
from typer.testing import CliRunner

from pearl.bigquery_client import BigQueryClientError
from pearl.config import BigQueryConfig, Config, ServerConfig
from pearl.main import app

runner = CliRunner()


@pytest.fixture
def config():
    return Config(
        server=ServerConfig(port=9090),
        bigquery=BigQueryConfig(project_id="my-project", dataset="my_dataset"),
    )


@pytest.fixture
def mock_journey_client():
    with patch("pearl.main.JourneyClient") as mock_cls:
        instance = MagicMock()
        mock_cls.return_value.__enter__.return_value = instance
        instance.fetch_activity.return_value = {}
        yield mock_cls, instance


class TestShowCommand:
    """Tests for `pearl show`."""

    def test_renders_heatmap(self, config, mock_journey_client):
        _, instance = mock_journey_client
        instance.fetch_activity.return_value = {
            "2024-01-15": 3,
            "2024-01-16": 5,
            "2024-01-22": 1,
        }

        with patch("pearl.main.load_config", return_value=config):
            result = runner.invoke(app, ["show", "--plain"])

        assert result.exit_code == 0
        assert "Pearl – London Oyster Analytics Dashboard" in result.output
        assert "Legend" in result.output
        assert "Total journeys: 9 across 3 days" in result.output
        assert "\033[" not in result.output

    def test_uses_config_path(self, config, mock_journey_client, tmp_path):
        path = tmp_path / "custom.yaml"
        with patch("pearl.main.load_config", return_value=config) as mock_load:
            runner.invoke(app, ["show", "--config", str(path)])

        mock_load.assert_called_once_with(path)
        mock_cls, _ = mock_journey_client
        mock_cls.assert_called_once_with("my-project", "my_dataset")

    def test_empty_activity(self, config, mock_journey_client):
        with patch("pearl.main.load_config", return_value=config):
            result = runner.invoke(app, ["show"])

        assert result.exit_code == 0
        assert "No journey data found." in result.output

    def test_config_error_exits_non_zero(self, tmp_path):
        result = runner.invoke(app, ["show", "--config", str(tmp_path / "missing.yaml")])

        assert result.exit_code == 1
        assert "loading config" in result.output

    def test_fetch_error_exits_non_zero(self, config, mock_journey_client):
        _, instance = mock_journey_client
        instance.fetch_activity.side_effect = BigQueryClientError("Executing query: boom")

        with patch("pearl.main.load_config", return_value=config):
            result = runner.invoke(app, ["show"])

        assert result.exit_code == 1
        assert "fetching activity data: Executing query: boom" in result.output

    def test_bad_date_exits_non_zero(self, config, mock_journey_client):
        _, instance = mock_journey_client
        instance.fetch_activity.return_value = {"not-a-date": 1}

        with patch("pearl.main.load_config", return_value=config):
            result = runner.invoke(app, ["show"])

        assert result.exit_code == 1
        assert "not-a-date" in result.output


class TestServeCommand:
    """Tests for `pearl serve`."""

    def test_runs_uvicorn_on_configured_port(self, config):
        from pearl.app import app as web_app

        with patch("pearl.main.load_config", return_value=config), patch(
            "uvicorn.run"
        ) as mock_run:
            result = runner.invoke(app, ["serve", "--host", "127.0.0.1"])

        try:
            assert result.exit_code == 0
            mock_run.assert_called_once()
            args, kwargs = mock_run.call_args
            assert args[0] is web_app
            assert kwargs["host"] == "127.0.0.1"
            assert kwargs["port"] == 9090
            assert web_app.state.config is config
        finally:
            del web_app.state.config

    def test_config_error_exits_non_zero(self, tmp_path):
        result = runner.invoke(app, ["serve", "--config", str(tmp_path / "missing.yaml")])
        assert result.exit_code == 1
