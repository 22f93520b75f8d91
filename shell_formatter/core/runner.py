"""
File Runner Module

Reads collected files, formats them through the kind dispatch table and
writes the results back in place or under a mirror directory. Files are
processed on a thread pool; each file gets its own format call.
"""

import concurrent.futures
import logging
import os
from pathlib import Path
from typing import Callable, List, Optional

from .aggregator import FileOutcome, FileReport, RunAggregator
from .dispatch import detect_kind, format_dispatch
from .scanner import FileJob

logger = logging.getLogger(__name__)


class FileProcessor:
    """
    Formats files on disk.

    Args:
        output_root: Mirror directory; files are written there instead of in place
        write: When False (check / dry-run) nothing is written
    """

    def __init__(self, output_root: Optional[Path] = None, write: bool = True):
        self.output_root = output_root.resolve() if output_root else None
        self.write = write

    def _read_file(self, path: Path) -> str:
        with open(path, 'r', encoding='utf-8', newline='') as f:
            return f.read()

    def _write_file(self, path: Path, content: str):
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding='utf-8', newline='') as f:
            f.write(content)

    def target_path(self, job: FileJob) -> Path:
        if self.output_root is None:
            return job.path
        return self.output_root / job.relative_path

    def process(self, job: FileJob) -> FileReport:
        """
        Format one file.

        Args:
            job: File to format

        Returns:
            FileReport with the outcome
        """
        kind = detect_kind(job.path)
        if kind is None:
            logger.debug(f"Skip unsupported: {job.path}")
            return FileReport(job.path, None, FileOutcome.SKIPPED)

        try:
            content = self._read_file(job.path)
        except (OSError, UnicodeDecodeError) as e:
            return FileReport(job.path, kind, FileOutcome.ERROR, f"read failed: {e}")

        result = format_dispatch(kind, job.path, content)
        if not result.success:
            return FileReport(job.path, kind, FileOutcome.ERROR, result.message)

        target = self.target_path(job)
        if not result.changed:
            if self.output_root is not None and self.write:
                logger.debug(f"Copy unchanged {job.path}")
                try:
                    self._write_file(target, content)
                except OSError as e:
                    return FileReport(job.path, kind, FileOutcome.ERROR, f"write failed: {e}")
            return FileReport(job.path, kind, FileOutcome.UNCHANGED)

        if not self.write:
            logger.debug(f"Would format {job.path}")
            return FileReport(job.path, kind, FileOutcome.FORMATTED)

        try:
            self._write_file(target, result.text)
        except OSError as e:
            return FileReport(job.path, kind, FileOutcome.ERROR, f"write failed: {e}")

        logger.debug(f"Formatted {job.path} -> {target}")
        return FileReport(job.path, kind, FileOutcome.FORMATTED)


def run_jobs(jobs: List[FileJob],
             processor: FileProcessor,
             workers: Optional[int] = None,
             on_done: Optional[Callable[[FileReport], None]] = None) -> RunAggregator:
    """
    Process files concurrently and aggregate their outcomes.

    Args:
        jobs: Files to process
        processor: FileProcessor doing the per-file work
        workers: Number of worker threads (default: CPU count)
        on_done: Called on the calling thread after each file completes

    Returns:
        RunAggregator with one report per job
    """
    aggregator = RunAggregator()
    workers = workers or os.cpu_count() or 1

    with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as pool:
        futures = {pool.submit(processor.process, job): job for job in jobs}
        for future in concurrent.futures.as_completed(futures):
            job = futures[future]
            try:
                report = future.result()
            except Exception as e:
                report = FileReport(job.path, detect_kind(job.path), FileOutcome.ERROR, str(e))
            aggregator.add_report(report)
            if on_done:
                on_done(report)

    aggregator.sort_reports()
    return aggregator
