"""
Unit tests for server configuration.
"""

from pathlib import Path

import pytest

from tinyhttpd.config import ServerConfig
from tinyhttpd.errors import SetupError


class TestServerConfig:
    """Tests for ServerConfig class."""

    def test_defaults(self):
        config = ServerConfig()
        assert config.host == "0.0.0.0"
        assert config.port == 4221
        assert config.directory == "."
        assert config.log_format == "text"

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("TINYHTTPD_HOST", "127.0.0.1")
        monkeypatch.setenv("TINYHTTPD_PORT", "8080")
        monkeypatch.setenv("TINYHTTPD_DIRECTORY", "/tmp/files")
        monkeypatch.setenv("TINYHTTPD_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("TINYHTTPD_LOG_FORMAT", "json")

        config = ServerConfig.from_env()

        assert config.host == "127.0.0.1"
        assert config.port == 8080
        assert config.directory == "/tmp/files"
        assert config.log_level == "DEBUG"
        assert config.log_format == "json"

    def test_from_env_defaults(self, monkeypatch):
        for name in ("HOST", "PORT", "DIRECTORY", "LOG_LEVEL", "LOG_FORMAT"):
            monkeypatch.delenv(f"TINYHTTPD_{name}", raising=False)
        assert ServerConfig.from_env() == ServerConfig()

    def test_validate_ok(self):
        ServerConfig().validate()
        ServerConfig(port=0).validate()

    @pytest.mark.parametrize("kwargs", [
        {"port": -1},
        {"port": 65536},
        {"backlog": 0},
        {"buffer_size": 512},
        {"log_format": "xml"},
        {"log_level": "LOUD"},
    ])
    def test_validate_rejects(self, kwargs):
        with pytest.raises(ValueError):
            ServerConfig(**kwargs).validate()

    def test_prepare_directory_creates(self, tmp_path: Path):
        target = tmp_path / "a" / "b"
        path = ServerConfig(directory=str(target)).prepare_directory()

        assert path == target
        assert target.is_dir()

    def test_prepare_directory_existing(self, tmp_path: Path):
        ServerConfig(directory=str(tmp_path)).prepare_directory()
        assert tmp_path.is_dir()

    def test_prepare_directory_file_in_the_way(self, tmp_path: Path):
        blocker = tmp_path / "file"
        blocker.write_text("x")

        with pytest.raises(SetupError):
            ServerConfig(directory=str(blocker)).prepare_directory()
