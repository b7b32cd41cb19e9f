"""
Configuration module for genome-diff.
Holds the tunable parameters of the comparison and the ways to load them.
"""

import os
import json
import logging
from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Any, Dict

from genome_diff.exceptions import ConfigurationError, FileError

# Configure logging
log = logging.getLogger("genome-diff")

# Default alignment parameters
DEFAULT_BLOCK_SIZE = 4096      # bases checked per block-wise equality test
DEFAULT_ANCHOR_LENGTH = 16     # identical bases needed to re-synchronize
DEFAULT_BAND_WIDTH = 32        # minimum half-width of the DP band
DEFAULT_SEARCH_WINDOW = 1024   # bases and diagonals scanned for an anchor
DEFAULT_MAX_WORKERS = 1


@dataclass
class ComparisonSettings:
    """Tunable parameters for a person-to-person comparison."""

    block_size: int = DEFAULT_BLOCK_SIZE
    anchor_length: int = DEFAULT_ANCHOR_LENGTH
    band_width: int = DEFAULT_BAND_WIDTH
    search_window: int = DEFAULT_SEARCH_WINDOW
    max_workers: int = DEFAULT_MAX_WORKERS
    show_progress: bool = False

    def validate(self) -> "ComparisonSettings":
        """
        Check that all settings are usable.

        Returns:
            self, to allow chaining

        Raises:
            ConfigurationError: If any setting is out of range
        """
        for name in ("block_size", "anchor_length", "band_width", "search_window", "max_workers"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                error_msg = f"Setting '{name}' must be a positive integer"
                log.error(error_msg)
                raise ConfigurationError(error_msg, details=repr(value))

        if self.anchor_length > self.search_window:
            error_msg = "anchor_length cannot exceed search_window"
            log.error(error_msg)
            raise ConfigurationError(error_msg, details=f"{self.anchor_length} > {self.search_window}")

        return self

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ComparisonSettings":
        """
        Build settings from a mapping, rejecting unknown keys.

        Args:
            data: Mapping of setting name to value

        Returns:
            Validated ComparisonSettings
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            error_msg = "Unknown settings"
            log.error(f"{error_msg}: {', '.join(unknown)}")
            raise ConfigurationError(error_msg, details=", ".join(unknown))
        return cls(**data).validate()

    @classmethod
    def from_json(cls, path) -> "ComparisonSettings":
        """
        Load settings from a JSON file.

        Args:
            path: Path to a JSON object of settings

        Returns:
            Validated ComparisonSettings
        """
        path = Path(path)
        if not path.exists():
            error_msg = f"Settings file not found: {path}"
            log.error(error_msg)
            raise FileError(error_msg)

        try:
            with open(path, "r") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            error_msg = f"Error reading settings file {path}"
            log.error(f"{error_msg}: {e}")
            raise FileError(error_msg, details=str(e))

        if not isinstance(data, dict):
            error_msg = "Settings file must contain a JSON object"
            log.error(f"{error_msg}: {path}")
            raise ConfigurationError(error_msg, details=str(path))

        log.info(f"Loaded settings from {path}")
        return cls.from_dict(data)

    @classmethod
    def from_env(cls, prefix: str = "GENOME_DIFF_", environ=None) -> "ComparisonSettings":
        """
        Load settings from environment variables, e.g. GENOME_DIFF_BAND_WIDTH=64.
        Unset variables keep their defaults.
        """
        environ = os.environ if environ is None else environ
        data: Dict[str, Any] = {}

        for f in fields(cls):
            raw = environ.get(prefix + f.name.upper())
            if raw is None:
                continue
            if f.type in (bool, "bool"):
                data[f.name] = raw.strip().lower() in ("1", "true", "yes", "on")
                continue
            try:
                data[f.name] = int(raw)
            except ValueError:
                error_msg = f"Environment variable {prefix + f.name.upper()} must be an integer"
                log.error(error_msg)
                raise ConfigurationError(error_msg, details=raw)

        return cls.from_dict(data)
