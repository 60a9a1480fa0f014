"""
Main Orchestrator for Budget Reports

This module ties together all the components and defines the
end-to-end flow the front end drives:
1. Build (raw input -> validate -> transactions -> report)
2. Merge (stored report files + fresh report -> combined report)
3. Output (render for display, save rows to a file)

DESIGN DECISION: The orchestrator enforces the boundaries:
- Nothing reaches the report core without validation
- The core decides nothing about printing, saving or paths
- Every step is audited, and every failure is re-raised to the caller
"""

from typing import Optional, Sequence
from uuid import UUID

from budget.audit import AuditLogger, create_correlation_id
from budget.config import get_settings
from budget.models.audit import AuditEventBuilder
from budget.models.validation import TransactionInput, ValidationResult
from budget.reports import (
    BaseReport,
    ReportFormatError,
    VariantMismatchError,
    build_report,
    combine_reports,
    load_report,
)
from budget.services.storage import (
    InMemoryAuditStorage,
    LocalFileReportStorage,
    ReportStorageInterface,
    StorageError,
)
from budget.validation import InvalidTransactionInputError, TransactionValidator


class ReportFlow:
    """
    Orchestrates building, merging and saving reports.

    Flow:
    1. Validate -> Raw rows typed by the user
    2. Build -> Fresh report from validated transactions
    3. Load -> Existing report files picked by the user
    4. Combine -> Fresh report first, then files in the order given
    5. Render / Save -> Whatever the user asked for
    """

    def __init__(
        self,
        storage: ReportStorageInterface,
        audit_logger: Optional[AuditLogger] = None,
        validator: Optional[TransactionValidator] = None,
        encoding: Optional[str] = None,
    ):
        self._storage = storage
        self._audit_logger = audit_logger or AuditLogger()
        self._validator = validator or TransactionValidator()
        self._encoding = encoding or get_settings().reports.file_encoding

    @property
    def storage(self) -> ReportStorageInterface:
        return self._storage

    def validate(self, inputs: Sequence[TransactionInput]) -> ValidationResult:
        """Check raw input without building anything."""
        return self._validator.validate(inputs)

    def build_report(
        self,
        name: str,
        inputs: Sequence[TransactionInput],
        correlation_id: Optional[UUID] = None,
    ) -> BaseReport:
        """
        Validate raw input and build a report from it.

        Raises:
            InvalidTransactionInputError: If the input has errors
        """
        correlation_id = correlation_id or create_correlation_id()
        try:
            transactions = self._validator.to_transactions(inputs)
        except InvalidTransactionInputError as e:
            self._audit_logger.log(AuditEventBuilder.validation_failed(
                report_name=name,
                issues=[issue.model_dump() for issue in e.result.issues],
                correlation_id=correlation_id,
            ))
            raise

        report = build_report(name, transactions, self._validator.variant_of(inputs))
        self._audit_logger.log(AuditEventBuilder.report_built(
            report_name=name,
            variant=report.variant.value,
            transaction_count=len(report.transactions),
            net_income=str(report.net_income),
            correlation_id=correlation_id,
        ))
        return report

    def load_report(
        self,
        name: str,
        filename: str,
        correlation_id: Optional[UUID] = None,
    ) -> BaseReport:
        """
        Read a stored report.

        Raises:
            StorageError: If the file is missing or unreadable
            ReportFormatError: If its rows are malformed
        """
        try:
            report = self._storage.load_report(name, filename)
        except ReportFormatError as e:
            self._audit_logger.log(AuditEventBuilder.row_parse_failed(
                report_name=name,
                filename=filename,
                error_message=str(e),
                correlation_id=correlation_id,
            ))
            raise
        except StorageError as e:
            self._audit_logger.log(AuditEventBuilder.load_failed(
                report_name=name,
                filename=filename,
                error_message=str(e),
                correlation_id=correlation_id,
            ))
            raise
        except Exception as e:
            self._audit_logger.log_error(
                error_type=type(e).__name__,
                error_message=str(e),
                details={"operation": "load_report", "filename": filename},
                correlation_id=correlation_id,
            )
            raise

        self._audit_logger.log(AuditEventBuilder.report_loaded(
            report_name=name,
            filename=filename,
            variant=report.variant.value,
            transaction_count=len(report.transactions),
            correlation_id=correlation_id,
        ))
        return report

    def load_upload(
        self,
        name: str,
        data: bytes,
        correlation_id: Optional[UUID] = None,
    ) -> BaseReport:
        """
        Read a report from uploaded bytes.

        Raises:
            ReportFormatError: If the bytes aren't text in the configured
                encoding, or their rows are malformed
        """
        try:
            text = data.decode(self._encoding)
        except UnicodeDecodeError as e:
            error = ReportFormatError(f"{name} is not {self._encoding} text: {e}")
            self._audit_logger.log(AuditEventBuilder.row_parse_failed(
                report_name=name,
                filename=name,
                error_message=str(error),
                correlation_id=correlation_id,
            ))
            raise error from e

        try:
            report = load_report(name, text)
        except ReportFormatError as e:
            self._audit_logger.log(AuditEventBuilder.row_parse_failed(
                report_name=name,
                filename=name,
                error_message=str(e),
                correlation_id=correlation_id,
            ))
            raise

        self._audit_logger.log(AuditEventBuilder.report_loaded(
            report_name=name,
            filename=name,
            variant=report.variant.value,
            transaction_count=len(report.transactions),
            correlation_id=correlation_id,
        ))
        return report

    def combine(
        self,
        name: str,
        reports: Sequence[BaseReport],
        correlation_id: Optional[UUID] = None,
    ) -> BaseReport:
        """
        Combine same-variant reports.

        Raises:
            EmptyCombinationError: If `reports` is empty
            VariantMismatchError: If the variants differ
        """
        try:
            combined = combine_reports(name, reports)
        except VariantMismatchError as e:
            self._audit_logger.log(AuditEventBuilder.variant_mismatch(
                report_name=name,
                variants=[type(r).__name__ for r in reports],
                error_message=str(e),
                correlation_id=correlation_id,
            ))
            raise

        self._audit_logger.log(AuditEventBuilder.reports_combined(
            report_name=name,
            source_names=[r.name for r in reports],
            transaction_count=len(combined.transactions),
            correlation_id=correlation_id,
        ))
        return combined

    def merge_with_files(
        self,
        name: str,
        report: BaseReport,
        filenames: Sequence[str],
        correlation_id: Optional[UUID] = None,
    ) -> BaseReport:
        """
        Merge a fresh report with stored files.

        The fresh report's transactions come first, then each file's in
        the order given. Any failing file aborts the whole merge.
        """
        correlation_id = correlation_id or create_correlation_id()
        loaded = [self.load_report(filename, filename, correlation_id) for filename in filenames]
        if not loaded:
            return report
        return self.combine(name, [report, *loaded], correlation_id)

    def render(self, report: BaseReport, correlation_id: Optional[UUID] = None) -> str:
        text = report.render()
        self._audit_logger.log(AuditEventBuilder.report_rendered(
            report_name=report.name,
            correlation_id=correlation_id,
        ))
        return text

    def save(
        self,
        report: BaseReport,
        filename: str,
        correlation_id: Optional[UUID] = None,
    ) -> bool:
        """
        Save a report's rows.

        Raises:
            StorageError: If the save fails (the previous file is kept)
        """
        try:
            saved = self._storage.save_report(report, filename)
        except StorageError as e:
            self._audit_logger.log(AuditEventBuilder.save_failed(
                report_name=report.name,
                filename=filename,
                error_message=str(e),
                correlation_id=correlation_id,
            ))
            raise
        except Exception as e:
            self._audit_logger.log_error(
                error_type=type(e).__name__,
                error_message=str(e),
                details={"operation": "save", "filename": filename},
                correlation_id=correlation_id,
            )
            raise

        self._audit_logger.log(AuditEventBuilder.report_saved(
            report_name=report.name,
            filename=filename,
            transaction_count=len(report.transactions),
            correlation_id=correlation_id,
        ))
        return saved


def create_app_components(
    storage: Optional[ReportStorageInterface] = None,
) -> tuple[ReportFlow, InMemoryAuditStorage]:
    """
    Factory function to create all application components.

    Args:
        storage: Report storage to use. Defaults to local files in
                 BUDGET_REPORTS_DIR.

    Returns:
        (report_flow, audit_storage)
    """
    storage = storage or LocalFileReportStorage()
    audit_storage = InMemoryAuditStorage()
    audit_logger = AuditLogger(audit_storage)

    report_flow = ReportFlow(storage=storage, audit_logger=audit_logger)
    return report_flow, audit_storage
