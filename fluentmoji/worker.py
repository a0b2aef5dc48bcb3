"""
Batch Worker

Processes one contiguous slice of the icon list inside its own process and
persists the resulting partial emoji map as a fragment file.
"""

import json
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from .common.logger import get_logger
from .converter import ImageConverter, output_name
from .env import BuildConfig
from .metadata import read_icon

logger = get_logger(__name__)

EmojiMap = Dict[str, dict]


class FragmentWriteError(Exception):
    """The batch result could not be persisted"""
    pass


@dataclass
class EmojiEntry:
    unicode: str
    cldr: str
    keywords: List[str]
    skin_tones: List[str] = field(default_factory=list)

    @property
    def has_skin_tones(self) -> bool:
        return bool(self.skin_tones)

    def to_dict(self) -> dict:
        """Public emoji-map.json record; skinTones only when non-empty"""
        data = {
            'unicode': self.unicode,
            'cldr': self.cldr,
            'keywords': list(self.keywords),
            'hasSkinTones': self.has_skin_tones,
        }
        if self.skin_tones:
            data['skinTones'] = list(self.skin_tones)
        return data


@dataclass
class IconResult:
    """Per-icon outcome: an entry, or why none was produced"""
    folder: str
    entry: Optional[EmojiEntry] = None
    skip_reason: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.entry is not None


def discover_icon_folders(assets_dir: Path) -> List[str]:
    """Names of the direct child directories of assets_dir, sorted"""
    return sorted(child.name for child in Path(assets_dir).iterdir() if child.is_dir())


def fragment_path(scratch_dir: Path, batch_index: int) -> Path:
    return Path(scratch_dir) / f"batch_{batch_index}.json"


class BatchWorker:
    """Runs icons [start, end) of the discovered folder list"""

    def __init__(self, config: BuildConfig, batch_index: int, start: int, end: int):
        if start < 0 or end < start:
            raise ValueError(f"Invalid batch range {start}-{end}")
        self.config = config
        self.batch_index = batch_index
        self.start = start
        self.end = end
        self.converter = ImageConverter(config.trimmed_dir, config.original_dir, config.quality)
        self.prefix = f"[Worker {batch_index}]"

    def process_icon(self, folder: Path) -> IconResult:
        """Convert every asset of one icon folder and build its map entry"""
        read = read_icon(folder)
        if not read.ok:
            return IconResult(folder.name, skip_reason=read.skip_reason)

        source = read.source
        skin_tones = []
        for suffix, png_path in source.raster_variants:
            self.converter.convert(png_path, output_name(source.unicode, suffix))
            if suffix:
                skin_tones.append(suffix)

        missing = [s for s in source.declared_skin_tones if s not in skin_tones]
        if missing:
            logger.warning(
                f"{self.prefix} {folder.name}: no 3D rendering for skin tones {', '.join(missing)}"
            )

        if source.vector_file:
            shutil.copyfile(source.vector_file, self.config.flat_dir / f"{source.unicode}.svg")

        entry = EmojiEntry(
            unicode=source.unicode,
            cldr=source.cldr,
            keywords=source.keywords,
            skin_tones=skin_tones,
        )
        return IconResult(folder.name, entry=entry)

    def run(self) -> EmojiMap:
        """Process the slice; per-icon failures are logged and skipped"""
        logger.info(f"{self.prefix} Processing items {self.start} to {self.end}...")

        folders = discover_icon_folders(self.config.assets_dir)[self.start:self.end]
        emoji_map: EmojiMap = {}

        for folder_name in folders:
            try:
                result = self.process_icon(self.config.assets_dir / folder_name)
            except Exception as e:
                logger.error(f"{self.prefix} Failed on {folder_name}: {e}")
                continue

            if result.ok:
                emoji_map[result.entry.unicode] = result.entry.to_dict()
            else:
                logger.warning(f"{self.prefix} Skipped {folder_name}: {result.skip_reason}")

        logger.info(f"{self.prefix} Done. Processed: {len(emoji_map)}")
        return emoji_map

    def write_fragment(self, emoji_map: EmojiMap) -> Path:
        path = fragment_path(self.config.scratch_dir, self.batch_index)
        try:
            with open(path, 'w', encoding='utf-8') as f:
                json.dump(emoji_map, f, ensure_ascii=False)
        except OSError as e:
            raise FragmentWriteError(f"Cannot write fragment {path}: {e}")
        return path

    def execute(self) -> Path:
        """Run the slice and persist it"""
        return self.write_fragment(self.run())
