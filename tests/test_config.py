"""
Unit tests for config.py
"""

import os
import tempfile
from unittest import mock

import pytest
import yaml

from loaddumper.config import ConfigLoader
from loaddumper.models import StorageKind


def write_config(config):
    with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
        yaml.dump(config, f)
        return f.name


class TestConfigLoader:
    """Tests for ConfigLoader class."""

    @pytest.fixture
    def sample_config(self):
        """Sample configuration dictionary."""
        return {
            "instances": {
                "primary": {
                    "host": "localhost",
                    "port": 3306,
                    "user": "root",
                    "password": "secret",
                    "database": "blog"
                }
            },
            "schema": {
                "Users": {"type": "patricia_trie", "key_type": "text", "columns": {"name": "text"}},
                "Posts": {"columns": {"title": "text"}}
            },
            "dumps": [
                "Users",
                {"table": "Posts", "columns": ["title"], "instance": "primary"}
            ],
            "output": {
                "directory": "./dumps",
                "compress": False
            },
            "logging": {
                "level": "INFO",
                "file": "./dumps/dump.log"
            },
            "rroonga": {"key": "value"}
        }

    @pytest.fixture
    def config_file(self, sample_config):
        """Create a temporary config file."""
        path = write_config(sample_config)
        yield path
        os.unlink(path)

    def test_load_config(self, config_file):
        """Test loading a valid config file."""
        loader = ConfigLoader(config_file)
        assert loader.config is not None

    def test_file_not_found(self):
        """Test that FileNotFoundError is raised for missing file."""
        with pytest.raises(FileNotFoundError):
            ConfigLoader("/nonexistent/path/config.yaml")

    def test_get_instance(self, config_file):
        loader = ConfigLoader(config_file)
        instance = loader.get_instance("primary")
        assert instance["host"] == "localhost"
        assert instance["database"] == "blog"

    def test_get_instance_not_found(self, config_file):
        loader = ConfigLoader(config_file)
        with pytest.raises(ValueError) as exc_info:
            loader.get_instance("nonexistent")
        assert "not found in configuration" in str(exc_info.value)

    def test_get_schema(self, config_file):
        schema = ConfigLoader(config_file).get_schema()
        assert schema.get_table("Users").storage == StorageKind.KEY_ORDERED
        assert schema.get_table("Posts").storage == StorageKind.IDENTITY_ORDERED

    def test_get_dumps_normalizes_names(self, config_file):
        dumps = ConfigLoader(config_file).get_dumps()
        assert dumps == [
            {"table": "Users"},
            {"table": "Posts", "columns": ["title"], "instance": "primary"}
        ]

    def test_get_output_settings(self, config_file):
        output = ConfigLoader(config_file).get_output_settings()
        assert output["directory"] == "./dumps"
        assert output["compress"] is False

    def test_get_logging_settings(self, config_file):
        logging = ConfigLoader(config_file).get_logging_settings()
        assert logging["level"] == "INFO"

    def test_dotted_lookup_existent(self, config_file):
        loader = ConfigLoader(config_file)
        assert loader["rroonga.key"] == "value"
        assert loader["output.directory"] == "./dumps"

    def test_dotted_set_and_get(self):
        path = write_config({})
        loader = ConfigLoader(path)
        os.unlink(path)

        loader["rroonga.key"] = "value"
        assert loader["rroonga.key"] == "value"
        assert loader.config == {"rroonga": {"key": "value"}}

    def test_dotted_set_overwrites(self, config_file):
        loader = ConfigLoader(config_file)
        loader["output.directory"] = "/srv/dumps"
        loader["output.compress.level"] = 9
        assert loader.get_output_settings()["directory"] == "/srv/dumps"
        assert loader["output.compress.level"] == 9

    def test_dotted_lookup_nonexistent(self, config_file):
        loader = ConfigLoader(config_file)
        assert loader["nonexistent"] is None
        assert loader["output.directory.deeper"] is None

    def test_empty_sections(self):
        """Test handling of missing config sections."""
        path = write_config({"schema": {"Users": {"key_type": "text"}}})
        loader = ConfigLoader(path)
        os.unlink(path)

        assert loader.get_dumps() == [{"table": "Users"}]
        assert loader.get_output_settings() == {}
        assert loader.get_logging_settings() == {}

    def test_empty_file(self):
        path = write_config(None)
        loader = ConfigLoader(path)
        os.unlink(path)

        assert loader.config == {}
        assert loader.get_dumps() == []


class TestEnvironmentVariables:
    """Tests for environment variable resolution."""

    @pytest.fixture
    def env_config_file(self):
        """Create a temporary config file with env vars."""
        path = write_config({
            "instances": {
                "primary": {
                    "host": "${DB_HOST}",
                    "port": 3306,
                    "user": "${DB_USER}",
                    "password": "${DB_PASSWORD}"
                }
            },
            "output": {
                "directory": "${OUTPUT_DIR}/dumps"
            }
        })
        yield path
        os.unlink(path)

    def test_resolve_env_vars(self, env_config_file):
        """Test environment variables are resolved."""
        with mock.patch.dict(os.environ, {
            "DB_HOST": "db.example.com",
            "DB_USER": "myuser",
            "DB_PASSWORD": "mypassword",
            "OUTPUT_DIR": "/var/backups"
        }):
            loader = ConfigLoader(env_config_file)
            instance = loader.get_instance("primary")
            assert instance["host"] == "db.example.com"
            assert instance["user"] == "myuser"
            assert instance["password"] == "mypassword"
            assert loader["output.directory"] == "/var/backups/dumps"

    def test_missing_env_var_becomes_empty(self, env_config_file):
        """Test missing environment variables become empty strings."""
        with mock.patch.dict(os.environ, {}, clear=True):
            loader = ConfigLoader(env_config_file)
            instance = loader.get_instance("primary")
            assert instance["host"] == ""
            assert instance["password"] == ""

    def test_non_string_values_unchanged(self, env_config_file):
        loader = ConfigLoader(env_config_file)
        assert loader.get_instance("primary")["port"] == 3306
