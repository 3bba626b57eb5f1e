"""
Configuration Manager
======================

Manages saved defaults for the output file, scope directory and document
separator.
"""

import json
import os
from pathlib import Path
from typing import Dict

CONFIG_ENV_VAR = "CATMD_CONFIG"


class ConfigManager:
    """Manages saved configuration for catmd."""

    DEFAULT_CONFIG: Dict[str, str] = {
        "output": "",
        "scope": "",
        "separator": "\n",
    }

    @classmethod
    def get_config_file(cls) -> Path:
        """Get the configuration file path (``$CATMD_CONFIG`` or ``~/.catmd.json``)."""
        override = os.environ.get(CONFIG_ENV_VAR)
        if override:
            return Path(override)
        return Path.home() / ".catmd.json"

    @classmethod
    def load(cls) -> Dict[str, str]:
        """Load saved configuration.

        Returns:
            Dictionary containing configuration values, with defaults for missing keys
        """
        config_file = cls.get_config_file()
        config = cls.DEFAULT_CONFIG.copy()

        if config_file.exists():
            try:
                saved = json.loads(config_file.read_text(encoding="utf-8"))
            except (json.JSONDecodeError, OSError):
                saved = {}
            if isinstance(saved, dict):
                config.update({k: v for k, v in saved.items() if k in cls.DEFAULT_CONFIG})

        return config

    @classmethod
    def save(
        cls,
        output: str = "",
        scope: str = "",
        separator: str = ""
    ) -> Path:
        """Save configuration to file.

        Only non-empty values replace what is already saved.

        Args:
            output: Default output file
            scope: Default scope directory
            separator: Text written between documents

        Returns:
            Path of the configuration file
        """
        config_file = cls.get_config_file()
        config = cls.load()

        if output:
            config["output"] = output
        if scope:
            config["scope"] = scope
        if separator:
            config["separator"] = separator

        config_file.parent.mkdir(parents=True, exist_ok=True)
        config_file.write_text(json.dumps(config, indent=2), encoding="utf-8")
        return config_file

    @classmethod
    def get_prefilled(cls, key: str) -> str:
        """Get saved value for a key.

        Args:
            key: Configuration key to retrieve

        Returns:
            Value for the key, or empty string if not found
        """
        config = cls.load()
        return config.get(key, "")
