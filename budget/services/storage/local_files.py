"""
Local File Storage Implementation

Reports live as row files in one directory (`BUDGET_REPORTS_DIR`).

DESIGN DECISION: Saves are atomic. Rows go to a temporary file in the
target directory, which is fsynced and then renamed over the target.
A failed save leaves the previous file (or no file) in place, never a
half-written one.
"""

import os
import tempfile
from pathlib import Path
from typing import Optional

import structlog

from budget.config import get_settings
from budget.reports import BaseReport, load_report
from budget.services.storage.interface import (
    NotFoundError,
    ReportStorageInterface,
    StorageError,
)


REPORT_SUFFIX = ".csv"


class LocalFileReportStorage(ReportStorageInterface):
    """Report storage backed by a directory of row files."""

    def __init__(
        self,
        base_dir: Optional[str | Path] = None,
        encoding: Optional[str] = None,
    ):
        settings = get_settings().reports
        self._base_dir = Path(base_dir or settings.reports_dir).resolve()
        self._encoding = encoding or settings.file_encoding
        self._logger = structlog.get_logger("budget.storage")

    @property
    def base_dir(self) -> Path:
        return self._base_dir

    def _resolve(self, filename: str) -> Path:
        """Map a filename to a path, refusing anything outside base_dir."""
        path = (self._base_dir / filename).resolve()
        if path == self._base_dir or not path.is_relative_to(self._base_dir):
            raise StorageError(f"Invalid report filename: {filename!r}")
        return path

    def save_report(self, report: BaseReport, filename: str) -> bool:
        path = self._resolve(filename)
        tmp_path = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding=self._encoding, newline="") as f:
                report.write_rows(f)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, path)
        except OSError as e:
            raise StorageError(f"Failed to save report to {path}: {e}") from e
        finally:
            if tmp_path and os.path.exists(tmp_path):
                os.unlink(tmp_path)

        self._logger.info(
            "report_file_written",
            path=str(path),
            transaction_count=len(report.transactions),
        )
        return True

    def load_report(self, name: str, filename: str) -> BaseReport:
        path = self._resolve(filename)
        try:
            with open(path, "r", encoding=self._encoding, newline="") as f:
                report = load_report(name, f)
        except FileNotFoundError:
            raise NotFoundError(f"Report file not found: {path}") from None
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"Failed to read report from {path}: {e}") from e

        self._logger.info(
            "report_file_read",
            path=str(path),
            variant=report.variant.value,
            transaction_count=len(report.transactions),
        )
        return report

    def exists(self, filename: str) -> bool:
        return self._resolve(filename).is_file()

    def list_reports(self) -> list[str]:
        if not self._base_dir.is_dir():
            return []
        return sorted(
            p.name
            for p in self._base_dir.iterdir()
            if p.is_file() and p.suffix == REPORT_SUFFIX and not p.name.startswith(".")
        )
