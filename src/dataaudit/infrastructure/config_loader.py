"""
Configuration loader module.

Handles loading and validation of JSON configuration files:
- audits.json: Audit definitions and their tests
- settings.json: Provider timeouts and SMTP transport settings
"""

import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from dataaudit.domain.config import AppSettings, AuditFile
from dataaudit.domain.models import AuditCollection


logger = logging.getLogger(__name__)


class ConfigLoader:
    """
    Load and validate configuration files.

    Implements schema validation and provides typed access to configuration data.
    """

    def __init__(self, config_dir: str | Path = "config"):
        """
        Initialize config loader.

        Args:
            config_dir: Directory containing configuration files.
                        If relative and running frozen, resolved next to the executable.
        """
        if getattr(sys, "frozen", False) and not Path(config_dir).is_absolute():
            self.config_dir = Path(sys.executable).parent / config_dir
        else:
            self.config_dir = Path(config_dir)

        logger.debug("ConfigLoader initialized with directory: %s", self.config_dir)

    def _resolve(self, filename: str | Path) -> Path:
        path = Path(filename)
        if path.is_absolute() or path.exists():
            return path
        return self.config_dir / path

    def _load_json_file(self, filepath: Path, required: bool = True) -> dict | None:
        """
        Load and parse a JSON file with robust error handling.

        Args:
            filepath: Absolute or relative path to JSON file
            required: If True, raises exception on error. If False, returns None.

        Returns:
            Parsed JSON as dict, or None if optional file not found

        Raises:
            FileNotFoundError: If required file doesn't exist
            ValueError: If JSON is malformed or empty
            PermissionError: If file cannot be read
        """
        if not filepath.exists():
            if required:
                raise FileNotFoundError(
                    f"Configuration file not found: {filepath}\n"
                    f"Hint: Copy the .example.json file and customize it."
                )
            logger.debug("Optional config not found: %s", filepath)
            return None

        try:
            content = filepath.read_text(encoding="utf-8")
        except PermissionError as e:
            raise PermissionError(
                f"Cannot read config file (permission denied): {filepath}\n"
                f"Hint: Check file permissions or if another process has it locked."
            ) from e

        if not content.strip():
            raise ValueError(
                f"Configuration file is empty: {filepath}\n"
                f"Hint: Add valid JSON content or copy from .example.json"
            )

        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise ValueError(
                f"Invalid JSON in config file: {filepath}\n"
                f"Error at line {e.lineno}, column {e.colno}: {e.msg}\n"
                f"Hint: Validate JSON syntax. Note: .json files cannot have comments."
            ) from e

        if not isinstance(data, dict):
            raise ValueError(f"Configuration root must be a JSON object: {filepath}")
        return data

    def load_audits(self, filename: str | Path = "audits.json") -> AuditCollection:
        """
        Load audit definitions.

        Args:
            filename: Config file name (or path)

        Returns:
            AuditCollection in file order

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        filepath = self._resolve(filename)
        logger.info("Loading audits from: %s", filepath)

        data = self._load_json_file(filepath, required=True)
        try:
            audit_file = AuditFile.model_validate(data)
        except ValidationError as e:
            raise ValueError(f"Invalid audit definitions in {filepath}:\n{e}") from e

        collection = audit_file.to_collection()
        for audit in collection:
            logger.debug("Loaded audit: %s (%d tests, provider=%s)", audit.name, len(audit.tests), audit.provider)

        logger.info("Loaded %d audits", len(collection))
        return collection

    def load_settings(self, filename: str | Path = "settings.json") -> AppSettings:
        """
        Load application settings.

        A missing settings file yields the defaults.

        Raises:
            ValueError: If the file is invalid
        """
        filepath = self._resolve(filename)
        data = self._load_json_file(filepath, required=False)
        if data is None:
            logger.info("No settings file at %s - using defaults", filepath)
            return AppSettings()

        try:
            settings = AppSettings.model_validate(data)
        except ValidationError as e:
            raise ValueError(f"Invalid settings in {filepath}:\n{e}") from e

        logger.info(
            "Loaded settings (connection timeout=%ds, command timeout=%ds, smtp=%s)",
            settings.runner.connection_timeout,
            settings.runner.command_timeout,
            settings.smtp.host if settings.smtp else "disabled",
        )
        return settings
