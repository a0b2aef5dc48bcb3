"""
Shared helpers for the build: logging and small filesystem/process utilities.
"""

from .logger import get_logger, setup_logging, set_log_level
from .utils import get_env_var, run_command, ensure_directory, format_duration

__all__ = [
    'get_logger',
    'setup_logging',
    'set_log_level',
    'get_env_var',
    'run_command',
    'ensure_directory',
    'format_duration',
]
