"""
Integration tests for the command line entry point.
"""

import socket
from pathlib import Path

import pytest

from tinyhttpd import __version__
from tinyhttpd.__main__ import build_parser, main
from tinyhttpd.config import ServerConfig


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("HOST", "PORT", "DIRECTORY", "LOG_LEVEL", "LOG_FORMAT"):
        monkeypatch.delenv(f"TINYHTTPD_{name}", raising=False)


class TestArguments:
    """Tests for argument parsing."""

    def test_defaults(self):
        args = build_parser(ServerConfig()).parse_args([])

        assert args.directory == "."
        assert args.host == "0.0.0.0"
        assert args.port == 4221
        assert args.log_level == "INFO"

    def test_flags(self):
        args = build_parser(ServerConfig()).parse_args(
            ["--directory", "/tmp/x", "-p", "8080", "-l", "debug", "--log-format", "json"]
        )

        assert args.directory == "/tmp/x"
        assert args.port == 8080
        assert args.log_level == "DEBUG"
        assert args.log_format == "json"

    def test_env_supplies_defaults(self, monkeypatch):
        monkeypatch.setenv("TINYHTTPD_PORT", "9999")
        args = build_parser(ServerConfig.from_env()).parse_args([])
        assert args.port == 9999

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])

        assert exc_info.value.code == 0
        assert __version__ in capsys.readouterr().out


class TestExitStatus:
    """Tests for main() exit codes."""

    def test_directory_cannot_be_created(self, tmp_path: Path):
        blocker = tmp_path / "file"
        blocker.write_text("x")

        assert main(["--directory", str(blocker), "--port", "0"]) == 1

    def test_port_in_use(self, tmp_path: Path):
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as busy:
            busy.bind(("127.0.0.1", 0))
            busy.listen(1)
            port = busy.getsockname()[1]

            status = main([
                "--directory", str(tmp_path),
                "--host", "127.0.0.1",
                "--port", str(port),
            ])

        assert status == 1

    def test_invalid_port(self, tmp_path: Path):
        with pytest.raises(SystemExit) as exc_info:
            main(["--directory", str(tmp_path), "--port", "70000"])
        assert exc_info.value.code == 2

    def test_invalid_env(self, monkeypatch):
        monkeypatch.setenv("TINYHTTPD_PORT", "not-a-number")
        assert main([]) == 2
