"""
Configuration loading and validation for the load script dumper.
"""

import os
import re
from typing import Any, Optional

import yaml

from .storage import Schema


class ConfigLoader:
    """Loads and validates configuration from YAML file."""

    ENV_VAR_PATTERN = re.compile(r'\$\{([^}]+)\}')
    DEFAULT_INSTANCE = 'primary'

    def __init__(self, config_path: str):
        self.config_path = config_path
        self.config = self._load_config()

    def _load_config(self) -> dict[str, Any]:
        """Load configuration from YAML file."""
        with open(self.config_path, 'r') as f:
            config = yaml.safe_load(f)

        return self._resolve_env_vars(config or {})

    def _resolve_env_vars(self, obj: Any) -> Any:
        """Recursively resolve environment variables in config."""
        if isinstance(obj, str):
            matches = self.ENV_VAR_PATTERN.findall(obj)
            for match in matches:
                env_value = os.environ.get(match, '')
                obj = obj.replace(f'${{{match}}}', env_value)
            return obj
        elif isinstance(obj, dict):
            return {k: self._resolve_env_vars(v) for k, v in obj.items()}
        elif isinstance(obj, list):
            return [self._resolve_env_vars(item) for item in obj]
        return obj

    def __getitem__(self, dotted_key: str) -> Optional[Any]:
        """Look up a value by dotted path, e.g. ``output.directory``.

        Returns None for nonexistent keys.
        """
        node: Any = self.config
        for part in dotted_key.split('.'):
            if not isinstance(node, dict) or part not in node:
                return None
            node = node[part]
        return node

    def __setitem__(self, dotted_key: str, value: Any) -> None:
        """Set a value by dotted path, creating intermediate sections.

        Non-dict values along the path are replaced by sections.
        """
        *parents, leaf = dotted_key.split('.')
        node = self.config
        for part in parents:
            if not isinstance(node.get(part), dict):
                node[part] = {}
            node = node[part]
        node[leaf] = value

    def get_instance(self, instance_name: str) -> dict[str, Any]:
        """Get database instance configuration."""
        instances = self.config.get('instances', {})
        if instance_name not in instances:
            raise ValueError(f"Instance '{instance_name}' not found in configuration")
        return instances[instance_name]

    def get_schema(self) -> Schema:
        """Build the table schema."""
        return Schema.from_config(self.config.get('schema', {}))

    def get_dumps(self) -> list[dict[str, Any]]:
        """Get list of table dumps; defaults to every schema table."""
        dumps = self.config.get('dumps')
        if dumps is None:
            return [{'table': name} for name in (self.config.get('schema') or {})]
        return [{'table': d} if isinstance(d, str) else d for d in dumps]

    def get_output_settings(self) -> dict[str, Any]:
        """Get output settings."""
        return self.config.get('output', {})

    def get_logging_settings(self) -> dict[str, Any]:
        """Get logging settings."""
        return self.config.get('logging', {})
