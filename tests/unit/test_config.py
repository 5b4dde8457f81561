"""
Unit tests for server configuration.
"""

import pytest

from fileserver.config import ServerConfig


ENV_VARS = (
    "FILESERVER_HOST",
    "FILESERVER_PORT",
    "FILESERVER_BACKLOG",
    "FILESERVER_ROOT",
    "FILESERVER_LOG_LEVEL",
    "FILESERVER_LOG_FORMAT",
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestServerConfig:
    """Tests for ServerConfig defaults and validation."""

    def test_defaults(self):
        config = ServerConfig()

        assert config.host == "127.0.0.1"
        assert config.port == 8080
        assert config.backlog == 128
        assert config.max_line_length == 8192
        assert config.index_file == "index.html"
        assert config.log_format == "text"
        config.validate()

    def test_port_zero_allowed(self):
        ServerConfig(port=0).validate()

    def test_blocking_accept_allowed(self):
        ServerConfig(accept_poll_interval=None).validate()

    @pytest.mark.parametrize("kwargs", [
        {"port": -1},
        {"port": 65536},
        {"backlog": 0},
        {"max_line_length": 8},
        {"accept_poll_interval": 0},
        {"linger_timeout": -0.1},
        {"log_level": "VERBOSE"},
        {"log_format": "xml"},
    ])
    def test_invalid_values(self, kwargs):
        with pytest.raises(ValueError):
            ServerConfig(**kwargs).validate()

    def test_log_level_case_insensitive(self):
        ServerConfig(log_level="debug").validate()


class TestFromEnv:
    """Tests for ServerConfig.from_env()."""

    def test_defaults_without_env(self, clean_env):
        assert ServerConfig.from_env() == ServerConfig()

    def test_reads_env(self, clean_env):
        clean_env.setenv("FILESERVER_HOST", "0.0.0.0")
        clean_env.setenv("FILESERVER_PORT", "3000")
        clean_env.setenv("FILESERVER_BACKLOG", "16")
        clean_env.setenv("FILESERVER_ROOT", "/srv/www")
        clean_env.setenv("FILESERVER_LOG_LEVEL", "debug")
        clean_env.setenv("FILESERVER_LOG_FORMAT", "JSON")

        config = ServerConfig.from_env()

        assert config.host == "0.0.0.0"
        assert config.port == 3000
        assert config.backlog == 16
        assert config.root_dir == "/srv/www"
        assert config.log_level == "DEBUG"
        assert config.log_format == "json"
        config.validate()

    def test_non_numeric_port(self, clean_env):
        clean_env.setenv("FILESERVER_PORT", "http")
        with pytest.raises(ValueError):
            ServerConfig.from_env()
