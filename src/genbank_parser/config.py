"""Configuration management for the GenBank parser."""

import json
import os
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Optional

ON_ERROR_CHOICES = ('abort', 'log', 'skip')
FORMAT_CHOICES = ('json', 'tsv', 'csv', 'fasta')


@dataclass
class ProcessingConfig:
    """Record processing settings."""
    max_workers: int = 1
    on_error: str = "abort"
    encoding: Optional[str] = None  # auto-detect


@dataclass
class OutputConfig:
    """Output configuration settings."""
    format: str = "json"
    include_origin_raw: bool = True
    indent: int = 2


@dataclass
class LoggingConfig:
    """Logging configuration settings."""
    level: str = "INFO"
    log_dir: Optional[str] = None
    colors: bool = True


@dataclass
class Config:
    """Main configuration container."""
    processing: ProcessingConfig
    output: OutputConfig
    logging: LoggingConfig

    @classmethod
    def default(cls) -> 'Config':
        """Create default configuration."""
        return cls(
            processing=ProcessingConfig(),
            output=OutputConfig(),
            logging=LoggingConfig()
        )

    @classmethod
    def from_file(cls, path: Path) -> 'Config':
        """Load configuration from JSON file."""
        path = Path(path)
        if not path.exists():
            return cls.default()

        with open(path, 'r') as f:
            data = json.load(f)

        return cls(
            processing=ProcessingConfig(**data.get('processing', {})),
            output=OutputConfig(**data.get('output', {})),
            logging=LoggingConfig(**data.get('logging', {}))
        )

    def to_file(self, path: Path) -> None:
        """Save configuration to JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            'processing': asdict(self.processing),
            'output': asdict(self.output),
            'logging': asdict(self.logging)
        }

        with open(path, 'w') as f:
            json.dump(data, f, indent=2)

    def merge_env_vars(self) -> None:
        """Merge environment variables into configuration."""
        if os.getenv('GENBANK_PARSER_WORKERS'):
            self.processing.max_workers = int(os.getenv('GENBANK_PARSER_WORKERS'))
        if os.getenv('GENBANK_PARSER_ON_ERROR'):
            self.processing.on_error = os.getenv('GENBANK_PARSER_ON_ERROR').lower()

        if os.getenv('GENBANK_PARSER_FORMAT'):
            self.output.format = os.getenv('GENBANK_PARSER_FORMAT').lower()

        if os.getenv('GENBANK_PARSER_LOG_LEVEL'):
            self.logging.level = os.getenv('GENBANK_PARSER_LOG_LEVEL').upper()
        if os.getenv('GENBANK_PARSER_LOG_DIR'):
            self.logging.log_dir = os.getenv('GENBANK_PARSER_LOG_DIR')

    def merge_cli_args(self, **kwargs) -> None:
        """Merge CLI arguments into configuration."""
        # Processing settings
        if kwargs.get('workers'):
            self.processing.max_workers = kwargs['workers']
        if kwargs.get('on_error'):
            self.processing.on_error = kwargs['on_error']
        if kwargs.get('encoding'):
            self.processing.encoding = kwargs['encoding']

        # Output settings
        if kwargs.get('output_format'):
            self.output.format = kwargs['output_format']
        if kwargs.get('no_raw'):
            self.output.include_origin_raw = False

        # Logging settings
        if kwargs.get('verbose'):
            self.logging.level = "DEBUG"
        if kwargs.get('log_dir'):
            self.logging.log_dir = kwargs['log_dir']

    def validate(self) -> None:
        """Check values that can't be expressed by the dataclass types alone."""
        if self.processing.on_error not in ON_ERROR_CHOICES:
            raise ValueError(f"on_error must be one of {', '.join(ON_ERROR_CHOICES)}, "
                             f"got {self.processing.on_error!r}")
        if self.output.format not in FORMAT_CHOICES:
            raise ValueError(f"format must be one of {', '.join(FORMAT_CHOICES)}, "
                             f"got {self.output.format!r}")
        if self.processing.max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {self.processing.max_workers}")


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Check common locations
    locations = [
        Path.home() / '.genbank_parser' / 'config.json',
        Path.home() / '.config' / 'genbank_parser' / 'config.json',
        Path('.genbank_parser.json'),
        Path('genbank_parser.config.json')
    ]

    # Return first existing file
    for path in locations:
        if path.exists():
            return path

    # Default to user home directory
    return Path.home() / '.genbank_parser' / 'config.json'


def create_example_config(path: Optional[Path] = None) -> Path:
    """Create an example configuration file."""
    if path is None:
        path = Path('genbank_parser.config.example.json')

    config = Config.default()

    # Example values
    config.processing.max_workers = 4
    config.processing.on_error = "log"
    config.logging.log_dir = "logs"

    config.to_file(path)
    return Path(path)
