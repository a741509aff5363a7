"""Tests for the userapi CLI — uvicorn is mocked, nothing is served."""

from __future__ import annotations

import os
from unittest.mock import patch

from click.testing import CliRunner

from userapi.__main__ import main


class TestMain:
    def test_defaults(self, tmp_path):
        runner = CliRunner()
        with patch("userapi.__main__.uvicorn.run") as run:
            result = runner.invoke(
                main,
                ["--env-file", str(tmp_path / "missing.env")],
                env={"USERAPI_HOST": None, "USERAPI_PORT": None},
            )

        assert result.exit_code == 0, result.output
        run.assert_called_once()
        args, kwargs = run.call_args
        assert args == ("userapi.api:create_app",)
        assert kwargs["factory"] is True
        assert kwargs["host"] == "0.0.0.0"
        assert kwargs["port"] == 8000
        assert kwargs["reload"] is False

    def test_options(self, tmp_path):
        runner = CliRunner()
        with patch("userapi.__main__.uvicorn.run") as run:
            result = runner.invoke(
                main,
                ["--host", "127.0.0.1", "--port", "9000", "--reload",
                 "--env-file", str(tmp_path / "missing.env")],
            )

        assert result.exit_code == 0, result.output
        assert run.call_args.kwargs["host"] == "127.0.0.1"
        assert run.call_args.kwargs["port"] == 9000
        assert run.call_args.kwargs["reload"] is True

    def test_port_from_env(self, tmp_path):
        runner = CliRunner()
        with patch("userapi.__main__.uvicorn.run") as run:
            result = runner.invoke(
                main,
                ["--env-file", str(tmp_path / "missing.env")],
                env={"USERAPI_PORT": "8123"},
            )

        assert result.exit_code == 0, result.output
        assert run.call_args.kwargs["port"] == 8123

    def test_env_file_is_loaded(self, tmp_path):
        env_file = tmp_path / "app.env"
        env_file.write_text("USERAPI_DATABASE_URL=sqlite+aiosqlite:///from-env-file.db\n")
        runner = CliRunner()
        with patch("userapi.__main__.uvicorn.run"), patch.dict(os.environ, {}, clear=False):
            os.environ.pop("USERAPI_DATABASE_URL", None)
            result = runner.invoke(main, ["--env-file", str(env_file)])
            loaded = os.environ.get("USERAPI_DATABASE_URL")

        assert result.exit_code == 0, result.output
        assert loaded == "sqlite+aiosqlite:///from-env-file.db"

    def test_log_options_exported_for_factory(self, tmp_path):
        runner = CliRunner()
        with patch("userapi.__main__.uvicorn.run"), patch.dict(os.environ, {}, clear=False):
            result = runner.invoke(
                main,
                ["--log-level", "debug", "--log-format", "JSON",
                 "--env-file", str(tmp_path / "missing.env")],
            )
            level = os.environ.get("USERAPI_LOG_LEVEL")
            fmt = os.environ.get("USERAPI_LOG_FORMAT")

        assert result.exit_code == 0, result.output
        assert level == "DEBUG"
        assert fmt == "json"

    def test_unknown_log_format_rejected(self, tmp_path):
        runner = CliRunner()
        with patch("userapi.__main__.uvicorn.run") as run:
            result = runner.invoke(
                main,
                ["--log-format", "xml", "--env-file", str(tmp_path / "missing.env")],
            )

        assert result.exit_code == 2
        run.assert_not_called()
