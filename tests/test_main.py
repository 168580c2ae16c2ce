"""
Unit tests for main.py
"""

import os
import tempfile
from unittest import mock

import pytest
import yaml

from loaddumper.main import main
from loaddumper.models import DumpStats


@pytest.fixture
def config_file():
    config = {
        "schema": {"Users": {"key_type": "text", "columns": {"name": "text"}}},
        "logging": {"level": "INFO"},
    }
    with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
        yaml.dump(config, f)
    yield f.name
    os.unlink(f.name)


class TestMain:
    """Tests for the CLI entry point."""

    def test_missing_config(self, capsys):
        with mock.patch('sys.argv', ['loaddumper', '-c', '/nonexistent/config.yaml']):
            with pytest.raises(SystemExit) as exc_info:
                main()
        assert exc_info.value.code == 1
        assert "not found" in capsys.readouterr().out

    def test_dry_run(self, config_file):
        with mock.patch('sys.argv', ['loaddumper', '-c', config_file, '--dry-run', '--columns', 'name']), \
                mock.patch('loaddumper.main.print_dry_run_info') as dry_run:
            with pytest.raises(SystemExit) as exc_info:
                main()
        assert exc_info.value.code == 0
        dumps, schema = dry_run.call_args[0]
        assert dumps == [{"table": "Users", "columns": ["name"]}]
        assert "Users" in schema

    def test_errors_exit_nonzero(self, config_file):
        stats = DumpStats(errors=[{"instance": "primary", "table": None, "error": "refused"}])
        with mock.patch('sys.argv', ['loaddumper', '-c', config_file, '-t', 'Users']), \
                mock.patch('loaddumper.main.DatabaseDumper') as dumper_cls:
            dumper_cls.return_value.run.return_value = stats
            with pytest.raises(SystemExit) as exc_info:
                main()

        assert exc_info.value.code == 1
        dumper_cls.return_value.run.assert_called_once_with(
            table_filter='Users',
            instance_filter=None,
            columns=None
        )

    def test_success(self, config_file):
        with mock.patch('sys.argv', ['loaddumper', '-c', config_file]), \
                mock.patch('loaddumper.main.DatabaseDumper') as dumper_cls:
            dumper_cls.return_value.run.return_value = DumpStats(total_tables=1, total_rows=2)
            main()
