"""Persistence of the configuration tree"""

import logging
import os
import shutil
from pathlib import Path
from typing import Any, Dict, Optional

import jsonschema
import yaml

from ..api.exceptions import ConfigError
from ..constants import (
    CONFIG_BACKUP_SUFFIX,
    DEFAULT_CONFIG_DIR,
    DEFAULT_CONFIG_FILE,
    ENV_CONFIG_PATH,
)
from ..models.config_tree import ConfigTree
from ..utils.file_utils import atomic_write

logger = logging.getLogger(__name__)

# YAML may load unquoted ISO timestamps as datetime objects
_TIMESTAMP: Dict[str, Any] = {}

PROJECT_SCHEMA = {
    "type": "object",
    "required": ["name"],
    "properties": {
        "id": {"type": "string"},
        "name": {"type": "string", "minLength": 1},
        "publish_folder": {"type": ["string", "null"]},
        "last_used": _TIMESTAMP,
    },
}

BRANCH_SCHEMA = {
    "type": "object",
    "required": ["name"],
    "properties": {
        "id": {"type": "string"},
        "name": {"type": "string", "minLength": 1},
        "last_used": _TIMESTAMP,
        "latest_commit": {"type": ["string", "null"]},
        "projects": {"type": "array", "items": PROJECT_SCHEMA},
    },
}

REPOSITORY_SCHEMA = {
    "type": "object",
    "required": ["name"],
    "properties": {
        "id": {"type": "string"},
        "name": {"type": "string", "pattern": r"^[^\s/]+/[^\s/]+$"},
        "token": {"type": ["string", "null"]},
        "last_used": _TIMESTAMP,
        "branches": {"type": "array", "items": BRANCH_SCHEMA},
    },
}

CONFIG_SCHEMA = {
    "type": "object",
    "properties": {
        "version": {"type": ["string", "number"]},
        "settings": {
            "type": "object",
            "properties": {
                "workspace": {"type": "string"},
                "build_tool": {"type": "string"},
                "configuration": {"type": "string"},
                "framework": {"type": "string"},
                "descriptor_extension": {"type": "string"},
                "output_subdir": {"type": "string"},
                "use_publish": {"type": "boolean"},
                "github_api_url": {"type": "string"},
                "github_host": {"type": "string"},
                "max_remote_commits": {"type": "integer", "minimum": 1},
            },
        },
        "repositories": {"type": "array", "items": REPOSITORY_SCHEMA},
    },
}


def default_config_path(explicit: Optional[str] = None) -> Path:
    """Config file location: explicit value, then environment, then default"""
    path = explicit or os.environ.get(ENV_CONFIG_PATH)
    if path:
        return Path(path).expanduser()
    return Path(DEFAULT_CONFIG_DIR).expanduser() / DEFAULT_CONFIG_FILE


class ConfigStore:
    """Load and save the ConfigTree as a YAML file"""

    def load(self, path: Path) -> ConfigTree:
        """Load configuration from file

        A missing file yields an empty tree. A malformed file is reported
        and also yields an empty tree; the broken file is kept as backup by
        the next save.

        Args:
            path: Configuration file

        Returns:
            Loaded configuration tree
        """
        path = Path(path)
        if not path.exists():
            logger.info(f"No configuration at {path}, starting with an empty tree")
            return ConfigTree()

        try:
            return self.parse(path.read_text(encoding="utf-8"))
        except (ConfigError, OSError, UnicodeDecodeError) as e:
            logger.warning(f"Ignoring unreadable configuration {path}: {e}")
            return ConfigTree()

    def parse(self, content: str) -> ConfigTree:
        """Parse and validate YAML content

        Raises:
            ConfigError: If the content is not valid YAML or violates the schema
        """
        # Simple environment variable expansion
        content = os.path.expandvars(content)

        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML: {e}")

        if data is None:
            return ConfigTree()
        self.validate(data)

        try:
            return ConfigTree.from_dict(data)
        except (KeyError, TypeError, ValueError, OverflowError) as e:
            raise ConfigError(f"Invalid configuration content: {e}")

    def validate(self, data: Any) -> None:
        """Validate raw configuration data against the schema"""
        try:
            jsonschema.validate(data, CONFIG_SCHEMA)
        except jsonschema.ValidationError as e:
            location = "/".join(str(p) for p in e.absolute_path) or "<root>"
            raise ConfigError(f"Schema validation failed at {location}: {e.message}")

    def save(self, path: Path, tree: ConfigTree) -> None:
        """Save configuration to file (full overwrite)

        Args:
            path: Configuration file
            tree: Tree to write
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        # Create backup
        if path.exists():
            backup_path = path.with_name(path.name + CONFIG_BACKUP_SUFFIX)
            shutil.copy2(path, backup_path)

        data: Dict[str, Any] = tree.to_dict()
        content = yaml.safe_dump(data, default_flow_style=False, sort_keys=False)
        atomic_write(path, content)
