"""
Metadata Reader

Reads one upstream icon folder (metadata.json plus its 3D/ and Color/ asset
sub-paths) and returns either a normalized IconSource or a skip reason.
"""

import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple


METADATA_FILENAME = 'metadata.json'
RASTER_DIRNAME = '3D'
VECTOR_DIRNAME = 'Color'
DEFAULT_TONE = 'Default'

# Ordered: variants are converted and reported in this order
SKIN_TONE_FOLDERS: Dict[str, str] = {
    'Default': '',
    'Light': '1f3fb',
    'Medium-Light': '1f3fc',
    'Medium': '1f3fd',
    'Medium-Dark': '1f3fe',
    'Dark': '1f3ff',
}

SKIN_TONE_SUFFIXES = frozenset(s for s in SKIN_TONE_FOLDERS.values() if s)

_WHITESPACE = re.compile(r'\s+')


@dataclass
class IconSource:
    """One upstream icon, normalized and ready for conversion"""
    folder: Path
    unicode: str
    cldr: str
    keywords: List[str]
    # (skin-tone suffix, png path); suffix '' is the default rendering
    raster_variants: List[Tuple[str, Path]] = field(default_factory=list)
    vector_file: Optional[Path] = None
    unicode_skintones: List[str] = field(default_factory=list)

    @property
    def declared_skin_tones(self) -> List[str]:
        """Skin-tone suffixes named by unicodeSkintones, in table order"""
        declared = set()
        for value in self.unicode_skintones:
            for part in normalize_unicode(value).split('-'):
                if part in SKIN_TONE_SUFFIXES:
                    declared.add(part)
        return [s for s in SKIN_TONE_FOLDERS.values() if s in declared]


@dataclass
class ReadResult:
    """Outcome of reading one icon folder: a source, or the reason it was skipped"""
    source: Optional[IconSource] = None
    skip_reason: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.source is not None

    @classmethod
    def skip(cls, reason: str) -> 'ReadResult':
        return cls(skip_reason=reason)


def normalize_unicode(value: str) -> str:
    """'1F44D 1F3FB' -> '1f44d-1f3fb'"""
    return _WHITESPACE.sub('-', value.strip().lower())


def find_file_by_ext(directory: Path, ext: str) -> Optional[Path]:
    """First file in directory (by name) whose name ends with ext, case-insensitive"""
    if not directory.is_dir():
        return None
    ext = ext.lower()
    for candidate in sorted(directory.iterdir()):
        if candidate.is_file() and candidate.name.lower().endswith(ext):
            return candidate
    return None


def detect_raster_variants(folder: Path) -> List[Tuple[str, Path]]:
    """
    Find the PNG renderings of an icon

    When 3D/ holds skin-tone sub-folders every present tone is returned in
    SKIN_TONE_FOLDERS order; otherwise the first PNG directly in 3D/ is the
    single default variant.
    """
    raster_dir = folder / RASTER_DIRNAME
    if not raster_dir.is_dir():
        return []

    child_names = {child.name for child in raster_dir.iterdir()}
    variants = []

    if child_names & set(SKIN_TONE_FOLDERS):
        for tone_folder, suffix in SKIN_TONE_FOLDERS.items():
            png_file = find_file_by_ext(raster_dir / tone_folder, '.png')
            if png_file:
                variants.append((suffix, png_file))
    else:
        png_file = find_file_by_ext(raster_dir, '.png')
        if png_file:
            variants.append(('', png_file))

    return variants


def detect_vector_file(folder: Path) -> Optional[Path]:
    """The flat SVG rendering, preferring Color/Default/ over Color/"""
    vector_dir = folder / VECTOR_DIRNAME
    if not vector_dir.is_dir():
        return None
    default_dir = vector_dir / DEFAULT_TONE
    target_dir = default_dir if default_dir.is_dir() else vector_dir
    return find_file_by_ext(target_dir, '.svg')


def _string_list(value) -> Optional[List[str]]:
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        return None
    return list(value)


def read_icon(folder: Path) -> ReadResult:
    """Read and normalize one icon folder; never raises for bad metadata"""
    folder = Path(folder)
    metadata_path = folder / METADATA_FILENAME

    try:
        with open(metadata_path, 'r', encoding='utf-8') as f:
            metadata = json.load(f)
    except FileNotFoundError:
        return ReadResult.skip(f"missing {METADATA_FILENAME}")
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        return ReadResult.skip(f"unreadable {METADATA_FILENAME}: {e}")

    if not isinstance(metadata, dict):
        return ReadResult.skip(f"{METADATA_FILENAME} is not an object")

    unicode_value = metadata.get('unicode')
    if not isinstance(unicode_value, str) or not unicode_value.strip():
        return ReadResult.skip("no unicode codepoint")

    cldr = metadata.get('cldr')
    if not isinstance(cldr, str):
        return ReadResult.skip("no cldr name")

    keywords = _string_list(metadata.get('keywords', []))
    if keywords is None:
        return ReadResult.skip("keywords is not a list of strings")

    return ReadResult(source=IconSource(
        folder=folder,
        unicode=normalize_unicode(unicode_value),
        cldr=cldr,
        keywords=keywords,
        raster_variants=detect_raster_variants(folder),
        vector_file=detect_vector_file(folder),
        unicode_skintones=_string_list(metadata.get('unicodeSkintones')) or [],
    ))
