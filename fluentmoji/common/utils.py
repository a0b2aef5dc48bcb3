"""
Common Utility Functions

Provides helpers shared by the orchestrator and batch workers:
- Environment variable access with type coercion
- System command execution
- Directory and duration helpers
"""

import os
import subprocess
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union


def get_env_var(name: str, default: Any = None, var_type: type = str) -> Any:
    """
    Read an environment variable, converting it to the requested type

    Args:
        name: Variable name
        default: Value returned when the variable is unset or unparsable
        var_type: str, int or bool

    Returns:
        Converted value or default
    """
    value = os.environ.get(name)
    if value is None:
        return default

    if var_type is bool:
        return value.strip().lower() in ('true', '1', 'yes', 'on')
    if var_type is int:
        try:
            return int(value)
        except ValueError:
            return default
    return value


def run_command(command: List[str], cwd: Optional[str] = None,
                env: Optional[Dict[str, str]] = None,
                timeout: Optional[int] = 30) -> Tuple[bool, str, str]:
    """
    Run a system command and return result

    Args:
        command: Command and arguments as list
        cwd: Working directory
        env: Environment variables
        timeout: Timeout in seconds, None to wait indefinitely

    Returns:
        Tuple of (success, stdout, stderr)
    """
    try:
        result = subprocess.run(
            command,
            cwd=cwd,
            env=env,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False
        )

        return (
            result.returncode == 0,
            result.stdout,
            result.stderr
        )

    except subprocess.TimeoutExpired:
        return (False, "", f"Command timed out after {timeout} seconds")
    except FileNotFoundError:
        return (False, "", f"Command not found: {command[0]}")
    except OSError as e:
        return (False, "", str(e))


def ensure_directory(path: Union[str, Path]) -> Path:
    """
    Ensure a directory exists, creating it if necessary

    Args:
        path: Directory path

    Returns:
        Path object for the directory
    """
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def format_duration(seconds: float) -> str:
    """
    Format duration in human-readable format

    Args:
        seconds: Duration in seconds

    Returns:
        Formatted duration string (e.g., "2h 30m 15s")
    """
    if seconds < 0:
        return "0s"

    parts = []

    if seconds >= 3600:
        hours = int(seconds // 3600)
        parts.append(f"{hours}h")
        seconds %= 3600

    if seconds >= 60:
        minutes = int(seconds // 60)
        parts.append(f"{minutes}m")
        seconds %= 60

    if seconds >= 1 or not parts:
        if parts:
            parts.append(f"{int(seconds)}s")
        else:
            parts.append(f"{seconds:.1f}s")

    return " ".join(parts)
