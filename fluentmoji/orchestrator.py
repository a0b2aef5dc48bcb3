"""
Build Orchestrator

Drives one complete build:
- Acquires the upstream source tree
- Recreates the output tree
- Partitions the icon list and runs each slice in an isolated worker process
- Merges the per-batch fragment files into emoji-map.json
"""

import json
import math
import shutil
import subprocess
import sys
import time
import concurrent.futures
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from .common.logger import get_logger
from .common.utils import ensure_directory, format_duration
from .env import BuildConfig
from .source import acquire_source
from .worker import EmojiMap, discover_icon_folders

logger = get_logger(__name__)


@dataclass(frozen=True)
class BatchSlice:
    index: int
    start: int
    end: int

    def __len__(self) -> int:
        return self.end - self.start


@dataclass
class BuildReport:
    """Summary of a finished build"""
    total_icons: int = 0
    total_batches: int = 0
    failed_batches: List[int] = field(default_factory=list)
    skipped_fragments: List[str] = field(default_factory=list)
    entry_count: int = 0
    elapsed_seconds: float = 0.0
    map_path: Optional[Path] = None


def partition(total: int, batch_size: int) -> List[BatchSlice]:
    """Split range(total) into ceil(total / batch_size) contiguous slices"""
    if batch_size < 1:
        raise ValueError(f"batch_size must be positive, got {batch_size}")
    slice_count = math.ceil(total / batch_size)
    return [
        BatchSlice(i, i * batch_size, min((i + 1) * batch_size, total))
        for i in range(slice_count)
    ]


def worker_command(config: BuildConfig, batch: BatchSlice) -> List[str]:
    """Command line that re-invokes this package in worker mode for one slice"""
    return [
        sys.executable, '-m', 'fluentmoji',
        *config.worker_args(),
        '--worker', str(batch.index), str(batch.start), str(batch.end),
    ]


class BuildOrchestrator:
    """Runs the fetch / convert / merge pipeline for one configuration"""

    def __init__(self, config: BuildConfig):
        self.config = config
        self.report = BuildReport()

    def prepare_output(self) -> None:
        """Discard any previous output and recreate the directory tree"""
        logger.info("preparing output...")
        if self.config.output_dir.exists():
            shutil.rmtree(self.config.output_dir)
        for directory in (self.config.trimmed_dir, self.config.original_dir,
                          self.config.flat_dir, self.config.scratch_dir):
            ensure_directory(directory)

    def launch_worker(self, batch: BatchSlice) -> int:
        """Run one slice in a child process and return its exit code"""
        try:
            completed = subprocess.run(worker_command(self.config, batch), check=False)
        except OSError as e:
            logger.error(f"Batch {batch.index + 1} could not be started: {e}")
            return -1
        return completed.returncode

    def _finish_batch(self, batch: BatchSlice, exit_code: int) -> None:
        if exit_code != 0:
            logger.warning(
                f"Batch {batch.index + 1} crashed with code {exit_code}. Continuing next batch..."
            )
            self.report.failed_batches.append(batch.index)

    def run_batches(self, batches: List[BatchSlice]) -> None:
        """Run every slice; a failed slice never stops the others"""
        total = len(batches)

        if self.config.parallel_batches <= 1:
            for batch in batches:
                logger.info(f"Starting Batch {batch.index + 1}/{total} (Files {batch.start}-{batch.end})")
                self._finish_batch(batch, self.launch_worker(batch))
            return

        logger.info(f"Running up to {self.config.parallel_batches} batches at a time")
        with concurrent.futures.ThreadPoolExecutor(max_workers=self.config.parallel_batches) as executor:
            futures = {}
            for batch in batches:
                logger.info(f"Starting Batch {batch.index + 1}/{total} (Files {batch.start}-{batch.end})")
                futures[executor.submit(self.launch_worker, batch)] = batch
            for future in concurrent.futures.as_completed(futures):
                self._finish_batch(futures[future], future.result())
        self.report.failed_batches.sort()

    def merge_fragments(self) -> EmojiMap:
        """
        Union all fragment files in directory-listing order

        Later files win on key collisions. A fragment that cannot be read or
        parsed is logged and skipped.
        """
        logger.info("Merging results...")
        final_map: EmojiMap = {}

        for fragment in self.config.scratch_dir.iterdir():
            if fragment.suffix != '.json':
                continue
            try:
                with open(fragment, 'r', encoding='utf-8') as f:
                    data = json.load(f)
            except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
                logger.warning(f"Skipping unreadable fragment {fragment.name}: {e}")
                self.report.skipped_fragments.append(fragment.name)
                continue

            if not isinstance(data, dict):
                logger.warning(f"Skipping malformed fragment {fragment.name}")
                self.report.skipped_fragments.append(fragment.name)
                continue

            final_map.update(data)

        return final_map

    def write_map(self, emoji_map: EmojiMap) -> Path:
        """Persist the final map pretty-printed and drop the scratch directory"""
        map_path = self.config.map_path
        with open(map_path, 'w', encoding='utf-8') as f:
            json.dump(emoji_map, f, indent=2, ensure_ascii=False)
        shutil.rmtree(self.config.scratch_dir, ignore_errors=True)
        return map_path

    def run(self) -> BuildReport:
        """
        Execute the whole build

        Raises:
            SourceFetchError: the upstream clone failed
            SourceUnavailableError: skip_download without a previous clone
        """
        start_time = time.perf_counter()

        fresh_clone = acquire_source(self.config)
        self.prepare_output()

        logger.info("scanning folders...")
        folders = discover_icon_folders(self.config.assets_dir)
        batches = partition(len(folders), self.config.batch_size)
        self.report.total_icons = len(folders)
        self.report.total_batches = len(batches)
        logger.info(f"Total folders: {len(folders)}. Batch size: {self.config.batch_size}")

        self.run_batches(batches)

        emoji_map = self.merge_fragments()
        self.report.map_path = self.write_map(emoji_map)
        self.report.entry_count = len(emoji_map)

        if fresh_clone and not self.config.keep_source:
            shutil.rmtree(self.config.clone_dir, ignore_errors=True)

        self.report.elapsed_seconds = time.perf_counter() - start_time
        logger.info(
            f"Build Complete! Time: {format_duration(self.report.elapsed_seconds)}. "
            f"Total emojis: {self.report.entry_count}"
        )
        return self.report
