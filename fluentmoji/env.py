"""
Build Configuration Module

Uses python-dotenv for environment variable management and PyYAML for
optional build configuration files.

Usage:
    from fluentmoji.env import BuildConfig

    config = BuildConfig.load(config_file='build.yaml', batch_size=100)
    print(config.assets_dir)
    print(config.trimmed_dir)
"""

from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from dotenv import load_dotenv

from . import __version__
from .common.utils import get_env_var


# Global constants
FLUENTMOJI_VERSION = __version__
DEFAULT_REPO_URL = 'https://github.com/microsoft/fluentui-emoji.git'
DEFAULT_CLONE_DIR = './fluentui-emoji'
DEFAULT_OUTPUT_DIR = './generated'
DEFAULT_BATCH_SIZE = 200
DEFAULT_QUALITY = 90

MAP_FILENAME = 'emoji-map.json'
SCRATCH_DIRNAME = 'temp_batches'

# Load .env from the directory the build is started in
env_file = Path.cwd() / '.env'
if env_file.exists():
    load_dotenv(env_file)


class ConfigurationError(Exception):
    """Configuration-related errors"""
    pass


@dataclass(frozen=True)
class BuildConfig:
    """Configuration record constructed once per run and handed to every component"""

    repo_url: str = DEFAULT_REPO_URL
    clone_dir: Path = field(default_factory=lambda: Path(DEFAULT_CLONE_DIR))
    output_dir: Path = field(default_factory=lambda: Path(DEFAULT_OUTPUT_DIR))
    batch_size: int = DEFAULT_BATCH_SIZE
    quality: int = DEFAULT_QUALITY
    parallel_batches: int = 1
    skip_download: bool = False
    keep_source: bool = False

    def __post_init__(self):
        # Accept plain strings from YAML / CLI
        object.__setattr__(self, 'clone_dir', Path(self.clone_dir))
        object.__setattr__(self, 'output_dir', Path(self.output_dir))

    @property
    def assets_dir(self) -> Path:
        return self.clone_dir / 'assets'

    @property
    def trimmed_dir(self) -> Path:
        return self.output_dir / '3d' / 'trimmed'

    @property
    def original_dir(self) -> Path:
        return self.output_dir / '3d' / 'original'

    @property
    def flat_dir(self) -> Path:
        return self.output_dir / 'flat'

    @property
    def scratch_dir(self) -> Path:
        return self.output_dir / SCRATCH_DIRNAME

    @property
    def map_path(self) -> Path:
        return self.output_dir / MAP_FILENAME

    def validate(self) -> 'BuildConfig':
        """Raise ConfigurationError on out-of-range values, return self otherwise"""
        for name in ('batch_size', 'quality', 'parallel_batches'):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigurationError(f"{name} must be an integer, got {value!r}")
        if self.batch_size < 1:
            raise ConfigurationError(f"batch_size must be positive, got {self.batch_size}")
        if self.parallel_batches < 1:
            raise ConfigurationError(f"parallel_batches must be positive, got {self.parallel_batches}")
        if not 1 <= self.quality <= 100:
            raise ConfigurationError(f"quality must be between 1 and 100, got {self.quality}")
        if not self.repo_url:
            raise ConfigurationError("repo_url must not be empty")
        return self

    def worker_args(self) -> List[str]:
        """CLI options that reproduce this configuration inside a worker process"""
        args = [
            '--repo-url', self.repo_url,
            '--clone-dir', str(self.clone_dir),
            '--output-dir', str(self.output_dir),
            '--batch-size', str(self.batch_size),
            '--quality', str(self.quality),
            '--parallel', str(self.parallel_batches),
        ]
        if self.skip_download:
            args.append('--skip-download')
        if self.keep_source:
            args.append('--keep-source')
        return args

    @classmethod
    def from_env(cls) -> Dict[str, Any]:
        """Collect FLUENTMOJI_* overrides from the environment"""
        overrides = {
            'repo_url': get_env_var('FLUENTMOJI_REPO_URL'),
            'clone_dir': get_env_var('FLUENTMOJI_CLONE_DIR'),
            'output_dir': get_env_var('FLUENTMOJI_OUTPUT_DIR'),
            'batch_size': get_env_var('FLUENTMOJI_BATCH_SIZE', None, int),
            'quality': get_env_var('FLUENTMOJI_QUALITY', None, int),
            'parallel_batches': get_env_var('FLUENTMOJI_PARALLEL_BATCHES', None, int),
        }
        return {k: v for k, v in overrides.items() if v is not None}

    @classmethod
    def from_yaml(cls, file_path: Path) -> Dict[str, Any]:
        """Load overrides from a YAML build file"""
        file_path = Path(file_path)
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML syntax in {file_path}: {e}")
        except OSError as e:
            raise ConfigurationError(f"Error reading config file {file_path}: {e}")

        if not isinstance(data, dict):
            raise ConfigurationError(f"Config file {file_path} must contain a mapping")

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(f"Unknown config keys in {file_path}: {', '.join(unknown)}")
        return data

    @classmethod
    def load(cls, config_file: Optional[str] = None,
             env_file: Optional[str] = None, **overrides: Any) -> 'BuildConfig':
        """
        Build the run configuration

        Layering, lowest to highest: defaults, environment (an explicit
        env_file is loaded on top of the working directory .env), YAML config
        file, explicit keyword overrides. Keyword overrides set to None are
        ignored.
        """
        if env_file:
            load_dotenv(env_file, override=True)

        values: Dict[str, Any] = {}
        values.update(cls.from_env())
        if config_file:
            values.update(cls.from_yaml(Path(config_file)))
        values.update({k: v for k, v in overrides.items() if v is not None})

        try:
            config = cls(**values)
        except TypeError as e:
            raise ConfigurationError(f"Invalid configuration: {e}")
        return config.validate()

    def with_overrides(self, **changes: Any) -> 'BuildConfig':
        """Copy of this configuration with some fields replaced"""
        return replace(self, **changes).validate()
