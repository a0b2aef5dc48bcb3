"""
Upstream source acquisition: shallow clone of the emoji repository, or reuse
of a clone left by a previous run.
"""

import shutil
from pathlib import Path

from .common.logger import get_logger
from .common.utils import run_command
from .env import BuildConfig

logger = get_logger(__name__)

CLONE_TIMEOUT = 1800


class SourceFetchError(Exception):
    """git clone of the upstream repository failed"""
    pass


class SourceUnavailableError(Exception):
    """Download was skipped but no previous clone exists"""
    pass


def fetch_source(repo_url: str, clone_dir: Path) -> None:
    """Replace clone_dir with a fresh depth-1 clone of repo_url"""
    clone_dir = Path(clone_dir)
    if clone_dir.exists():
        logger.info("cleaning up previous clone...")
        shutil.rmtree(clone_dir)

    logger.info(f"cloning {repo_url}...")
    success, _, stderr = run_command(
        ['git', 'clone', '--depth', '1', repo_url, str(clone_dir)],
        timeout=CLONE_TIMEOUT
    )
    if not success:
        raise SourceFetchError(f"git clone failed: {stderr.strip()}")


def acquire_source(config: BuildConfig) -> bool:
    """
    Make config.assets_dir available

    Returns:
        True when the tree was freshly cloned and should be removed after the build
    """
    if config.skip_download:
        if not config.assets_dir.is_dir():
            raise SourceUnavailableError(f"No assets found at {config.assets_dir}")
        logger.info("skipping download")
        return False

    fetch_source(config.repo_url, config.clone_dir)
    if not config.assets_dir.is_dir():
        raise SourceFetchError(f"Clone of {config.repo_url} has no assets directory")
    return True
