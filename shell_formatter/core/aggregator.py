"""
Run Aggregator Module

This module collects the per-file outcomes of a formatting run and
produces the summary shown at the end of the run.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional
import logging

from .dispatch import FormatKind

logger = logging.getLogger(__name__)


class FileOutcome(Enum):
    """What happened to a single file."""
    FORMATTED = "Formatted"
    UNCHANGED = "Unchanged"
    SKIPPED = "Skipped"
    ERROR = "Error"


@dataclass
class FileReport:
    """Outcome of formatting a single file."""
    path: Path
    kind: Optional[FormatKind]
    outcome: FileOutcome
    message: str = ""

    @property
    def filename(self) -> str:
        return self.path.name


@dataclass
class RunSummary:
    """Summary statistics for a formatting run."""
    total_files: int
    formatted: int
    unchanged: int
    skipped: int
    errors: int

    def describe(self) -> str:
        return (f"Processed {self.total_files} file(s): formatted {self.formatted}, "
                f"unchanged {self.unchanged}, skipped {self.skipped}, errors {self.errors}")


class RunAggregator:
    """
    Aggregator for the outcomes of a formatting run.

    This class provides:
    - Outcome bookkeeping per file
    - Grouping by outcome
    - Summary and JSON-ready report generation
    """

    def __init__(self):
        self._reports: Dict[Path, FileReport] = {}

    @property
    def reports(self) -> List[FileReport]:
        return list(self._reports.values())

    def add_report(self, report: FileReport):
        """
        Add a file report, replacing any earlier report for the same path.

        Args:
            report: FileReport for one file
        """
        if report.outcome == FileOutcome.ERROR:
            logger.error(f"Failed to format {report.path}: {report.message}")
        self._reports[report.path] = report

    def sort_reports(self):
        """Order the reports by path."""
        self._reports = dict(sorted(self._reports.items(), key=lambda item: str(item[0])))

    def get_files_by_outcome(self) -> Dict[FileOutcome, List[FileReport]]:
        """Group reports by their outcome."""
        groups = {outcome: [] for outcome in FileOutcome}
        for report in self.reports:
            groups[report.outcome].append(report)
        return groups

    def generate_summary(self) -> RunSummary:
        """Generate the run summary."""
        groups = self.get_files_by_outcome()
        return RunSummary(
            total_files=len(self.reports),
            formatted=len(groups[FileOutcome.FORMATTED]),
            unchanged=len(groups[FileOutcome.UNCHANGED]),
            skipped=len(groups[FileOutcome.SKIPPED]),
            errors=len(groups[FileOutcome.ERROR]),
        )

    def export_report(self) -> Dict[str, Any]:
        """Export the run as a JSON-serializable dictionary."""
        summary = self.generate_summary()
        return {
            'summary': {
                'total_files': summary.total_files,
                'formatted': summary.formatted,
                'unchanged': summary.unchanged,
                'skipped': summary.skipped,
                'errors': summary.errors,
            },
            'files': [
                {
                    'path': str(report.path),
                    'kind': report.kind.value if report.kind else None,
                    'outcome': report.outcome.value,
                    'message': report.message,
                }
                for report in self.reports
            ],
        }
