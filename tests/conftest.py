"""Test configuration and fixtures for the fluentmoji build test suite"""

import os
import sys
from pathlib import Path

import pytest

# Add project root and test helpers to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))
sys.path.insert(0, str(Path(__file__).parent))

from fluentmoji.env import BuildConfig
from utils import make_icon


@pytest.fixture
def project_root():
    """Fixture providing path to project root directory"""
    return PROJECT_ROOT


@pytest.fixture
def upstream_tree(tmp_path):
    """A small clone of the upstream layout with a mix of valid and broken icons"""
    clone_dir = tmp_path / 'fluentui-emoji'
    assets_dir = clone_dir / 'assets'

    make_icon(assets_dir, 'Thumbs up', {
        'cldr': 'thumbs up',
        'unicode': '1F44D',
        'keywords': ['thumbs up', '+1'],
        'unicodeSkintones': ['1f44d 1f3fb'],
    }, tones=['Default', 'Light'])

    make_icon(assets_dir, 'Grinning face', {
        'cldr': 'grinning face',
        'unicode': '1f600',
        'keywords': ['face', 'grin'],
    }, single_png=True, svg_in_default=False)

    make_icon(assets_dir, 'Keycap 1', {
        'cldr': 'keycap: 1',
        'unicode': '0031 FE0F 20E3',
        'keywords': ['keycap'],
    }, single_png=True)

    make_icon(assets_dir, 'No metadata', None, single_png=True)

    # Stray files next to the icon folders are ignored
    (assets_dir / 'README.md').write_text('not an icon')

    return clone_dir


@pytest.fixture
def build_config(tmp_path, upstream_tree):
    """Configuration pointing at the temporary upstream tree, download skipped"""
    return BuildConfig(
        clone_dir=upstream_tree,
        output_dir=tmp_path / 'generated',
        batch_size=2,
        skip_download=True,
    )


@pytest.fixture
def output_tree(build_config):
    """Empty output directories as prepared by the orchestrator"""
    for directory in (build_config.trimmed_dir, build_config.original_dir,
                      build_config.flat_dir, build_config.scratch_dir):
        directory.mkdir(parents=True, exist_ok=True)
    return build_config


@pytest.fixture
def clean_env(monkeypatch):
    """Remove FLUENTMOJI_* variables so defaults apply"""
    for key in list(os.environ):
        if key.startswith('FLUENTMOJI_'):
            monkeypatch.delenv(key, raising=False)
    return monkeypatch


# Pytest hooks for better test organization
def pytest_configure(config):
    """Configure pytest with custom markers and settings"""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "core: Build pipeline module tests")
    config.addinivalue_line("markers", "common: Common library tests")


def pytest_collection_modifyitems(config, items):
    """Add markers automatically based on test file location"""
    for item in items:
        path = str(item.fspath)
        if "unit" in path:
            item.add_marker(pytest.mark.unit)
        elif "integration" in path:
            item.add_marker(pytest.mark.integration)
        if "core" in path:
            item.add_marker(pytest.mark.core)
        elif "common" in path:
            item.add_marker(pytest.mark.common)
