"""Tests for CLI startup and error handling in the run() entry point."""

import argparse
import sys
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest
import yaml

from fsgate.cli import build_parser, main, resolve_config, run
from fsgate.core.errors import ConfigError


class TestCliErrorHandling:
    """Tests for clean error reporting in the CLI entry point."""

    def test_keyboard_interrupt_exits_cleanly(self):
        """KeyboardInterrupt exits without traceback."""
        with patch("fsgate.cli.asyncio.run", side_effect=KeyboardInterrupt):
            run()

    def test_config_error_prints_message(self, capsys):
        with patch("fsgate.cli.asyncio.run", side_effect=ConfigError("/srv/x is not a directory")):
            with pytest.raises(SystemExit) as exc_info:
                run()
            assert exc_info.value.code == 1
        captured = capsys.readouterr()
        assert "Error: /srv/x is not a directory" in captured.err

    def test_file_not_found_prints_error(self, capsys):
        with patch("fsgate.cli.asyncio.run", side_effect=FileNotFoundError("Config file not found: fsgate.yaml")):
            with pytest.raises(SystemExit) as exc_info:
                run()
            assert exc_info.value.code == 1
        captured = capsys.readouterr()
        assert "Config file not found" in captured.err

    def test_yaml_error_prints_message(self, capsys):
        with patch("fsgate.cli.asyncio.run", side_effect=yaml.YAMLError("bad yaml")):
            with pytest.raises(SystemExit) as exc_info:
                run()
            assert exc_info.value.code == 1
        captured = capsys.readouterr()
        assert "Invalid YAML" in captured.err

    def test_value_error_prints_config_error(self, capsys):
        with patch(
            "fsgate.cli.asyncio.run",
            side_effect=ValueError("Unresolved environment variable(s) in fsgate.yaml: ${MISSING_DIR}"),
        ):
            with pytest.raises(SystemExit) as exc_info:
                run()
            assert exc_info.value.code == 1
        captured = capsys.readouterr()
        assert "Configuration error" in captured.err
        assert "MISSING_DIR" in captured.err

    def test_generic_exception_prints_startup_failed(self, capsys):
        with patch("fsgate.cli.asyncio.run", side_effect=RuntimeError("something broke")):
            with pytest.raises(SystemExit) as exc_info:
                run()
            assert exc_info.value.code == 1
        captured = capsys.readouterr()
        assert "Startup failed" in captured.err
        assert "-v" in captured.err


class TestStartup:
    """Startup refuses to serve with an invalid root."""

    def test_regular_file_root_aborts(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys):
        not_a_dir = tmp_path / "file.txt"
        not_a_dir.write_text("x")
        monkeypatch.setattr(sys, "argv", ["fsgate", str(not_a_dir)])

        with patch("fsgate.cli.setup_logging"), patch("fsgate.cli.run_stdio", new_callable=AsyncMock) as serve:
            with pytest.raises(SystemExit) as exc_info:
                run()

        assert exc_info.value.code == 1
        serve.assert_not_called()
        assert f"{not_a_dir} is not a directory" in capsys.readouterr().err

    @pytest.mark.asyncio
    async def test_no_directories(self):
        with patch("fsgate.cli.setup_logging"):
            with pytest.raises(ConfigError, match="Usage"):
                await main([])

    @pytest.mark.asyncio
    async def test_valid_root_starts_server(self, tmp_path: Path):
        with patch("fsgate.cli.setup_logging"), patch("fsgate.cli.run_stdio", new_callable=AsyncMock) as serve:
            await main([str(tmp_path)])

        serve.assert_awaited_once()
        tools = serve.await_args.args[1]
        assert tools.roots.paths == (tmp_path,)


class TestResolveConfig:
    def test_cli_directories_only(self):
        args = build_parser().parse_args(["/a", "/b"])
        assert resolve_config(args).allowed_directories == ["/a", "/b"]

    def test_cli_directories_appended_to_file(self, tmp_path: Path):
        config_file = tmp_path / "fsgate.yaml"
        config_file.write_text("allowed_directories:\n  - /from-file\n")
        args = argparse.Namespace(config=config_file, directories=["/from-cli"], verbose=False)

        assert resolve_config(args).allowed_directories == ["/from-file", "/from-cli"]
