"""Configuration management for the module sequencer."""

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from .utils.exceptions import ConfigurationError

_TRUE_VALUES = ("true", "1", "yes", "on")


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    format: str = "console"  # Options: "console", "json"
    file: Path | None = None

    @property
    def json_logs(self) -> bool:
        """Whether log events are rendered as JSON."""
        return self.format.lower() == "json"


@dataclass
class SequencingConfig:
    """
    Sequencing behaviour.

    Controls how manifests are linked and how much the dependency-aware
    sequence reports about its resolution steps.
    """

    strict_dependencies: bool = False  # Unknown dependency keys are errors
    trace_resolution: bool = False  # Log every resolution step


@dataclass
class SequencerConfig:
    """
    Complete configuration for the module sequencer.

    This combines all configuration sections.
    """

    logging: LoggingConfig = field(default_factory=LoggingConfig)
    sequencing: SequencingConfig = field(default_factory=SequencingConfig)

    @classmethod
    def from_file(cls, config_path: Path) -> "SequencerConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to YAML config file

        Returns:
            SequencerConfig instance

        Raises:
            ConfigurationError: If the file is not valid YAML, has a malformed section
                or has unknown keys
        """
        try:
            with open(config_path) as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Invalid YAML in configuration file {config_path}: {e}", path=config_path
            ) from e

        if data is None:
            data = {}

        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Invalid configuration file structure in {config_path}: "
                f"expected dictionary, got {type(data).__name__}",
                path=config_path,
            )

        for section in ("logging", "sequencing"):
            if not isinstance(data.get(section) or {}, dict):
                raise ConfigurationError(
                    f"Invalid '{section}' section in configuration file {config_path}: "
                    f"expected dictionary, got {type(data[section]).__name__}",
                    path=config_path,
                )

        logging_data = dict(data.get("logging") or {})
        if logging_data.get("file"):
            logging_data["file"] = Path(logging_data["file"])

        sequencing_data = data.get("sequencing") or {}

        try:
            return cls(
                logging=LoggingConfig(**logging_data),
                sequencing=SequencingConfig(**sequencing_data),
            )
        except TypeError as e:
            raise ConfigurationError(
                f"Unknown setting in configuration file {config_path}: {e}", path=config_path
            ) from e

    def to_file(self, config_path: Path) -> None:
        """
        Save configuration to YAML file.

        Args:
            config_path: Path to save config file
        """
        data = {
            "logging": {
                k: str(v) if isinstance(v, Path) else v
                for k, v in self.logging.__dict__.items()
                if v is not None
            },
            "sequencing": dict(self.sequencing.__dict__),
        }

        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)

    @classmethod
    def from_env(cls) -> "SequencerConfig":
        """
        Create configuration from environment variables.

        Environment variables:
            SEQUENCER_LOG_LEVEL: Logging level (default: INFO)
            SEQUENCER_LOG_FORMAT: "console" or "json" (default: console)
            SEQUENCER_LOG_FILE: Optional log file path
            SEQUENCER_STRICT: Treat unknown dependency keys as errors
            SEQUENCER_TRACE: Log every resolution step

        Returns:
            SequencerConfig instance
        """
        log_file = os.environ.get("SEQUENCER_LOG_FILE")

        logging_config = LoggingConfig(
            level=os.environ.get("SEQUENCER_LOG_LEVEL", "INFO"),
            format=os.environ.get("SEQUENCER_LOG_FORMAT", "console"),
            file=Path(log_file) if log_file else None,
        )

        sequencing_config = SequencingConfig(
            strict_dependencies=os.environ.get("SEQUENCER_STRICT", "false").lower()
            in _TRUE_VALUES,
            trace_resolution=os.environ.get("SEQUENCER_TRACE", "false").lower() in _TRUE_VALUES,
        )

        return cls(logging=logging_config, sequencing=sequencing_config)


def load_config(config_file: Path | None = None) -> SequencerConfig:
    """
    Load configuration from file or environment variables.

    Args:
        config_file: Optional path to YAML config file

    Returns:
        SequencerConfig instance

    Raises:
        FileNotFoundError: If config_file is specified but doesn't exist
    """
    if config_file:
        if not config_file.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_file}")
        return SequencerConfig.from_file(config_file)
    return SequencerConfig.from_env()
