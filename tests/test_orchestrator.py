"""
Integration tests for ReportFlow using in-memory storage.
"""

import pytest

from budget.audit import AuditLogger, create_correlation_id
from budget.models.audit import AuditEvent, AuditEventType, AuditSeverity
from budget.models.currency import Euro
from budget.models.validation import TransactionInput
from budget.orchestrator import ReportFlow, create_app_components
from budget.reports import (
    BasicReport,
    MalformedRowError,
    MultiPayerReport,
    ReportFormatError,
    VariantMismatchError,
)
from budget.services.storage import (
    InMemoryAuditStorage,
    InMemoryReportStorage,
    NotFoundError,
    StorageError,
)
from budget.validation import InvalidTransactionInputError


class FailingReportStorage(InMemoryReportStorage):
    def save_report(self, report, filename):
        raise StorageError("disk full")


class BrokenReportStorage(InMemoryReportStorage):
    def save_report(self, report, filename):
        raise RuntimeError("driver crashed")

    def load_report(self, name, filename):
        raise RuntimeError("driver crashed")


class FailingAuditStorage(InMemoryAuditStorage):
    def append_event(self, event):
        raise RuntimeError("audit backend down")


@pytest.fixture
def audit_storage():
    return InMemoryAuditStorage()


@pytest.fixture
def storage():
    return InMemoryReportStorage({
        "january.csv": "Time,Amount,Description\n1,500.00,Income\n2,-25.00,Groceries",
        "shared.csv": "Time,Amount,Description,Name\n1,10.00,Salary,Ann",
        "broken.csv": "1,ten,Rent",
    })


@pytest.fixture
def flow(storage, audit_storage):
    return ReportFlow(storage=storage, audit_logger=AuditLogger(audit_storage))


def event_types(audit_storage):
    return [event.event_type for event in audit_storage.events]


def inputs(*rows):
    return [TransactionInput(time=t, amount=a, description=d) for t, a, d in rows]


class TestBuild:
    """Tests for building reports from raw input."""

    def test_build_basic(self, flow, audit_storage):
        """Test valid input builds a report and is audited."""
        report = flow.build_report("May", inputs(("1", "100", "Salary"), ("2", "-50", "Groceries")))
        assert type(report) is BasicReport
        assert report.net_income == Euro.from_amount("50")
        assert event_types(audit_storage) == [AuditEventType.REPORT_BUILT]
        assert audit_storage.events[0].details["net_income"] == "€50.00"

    def test_build_multi_payer(self, flow):
        """Test payer input builds a multi-payer report."""
        report = flow.build_report("May", [
            TransactionInput(time="1", amount="100", description="Salary", paid_by="Ann"),
        ])
        assert type(report) is MultiPayerReport

    def test_build_empty(self, flow):
        """Test an empty batch builds an empty basic report."""
        report = flow.build_report("Empty", [])
        assert type(report) is BasicReport
        assert report.transactions == ()

    def test_invalid_input_audited(self, flow, audit_storage):
        """Test invalid input raises and records the issues."""
        with pytest.raises(InvalidTransactionInputError):
            flow.build_report("May", inputs(("1", "ten", "Salary")))
        (event,) = audit_storage.events
        assert event.event_type == AuditEventType.VALIDATION_FAILED
        assert event.details["issues"][0]["issue_type"] == "invalid_format"


class TestMerge:
    """Tests for loading and combining stored reports."""

    def test_load(self, flow, audit_storage):
        """Test loading a stored report is audited."""
        report = flow.load_report("January", "january.csv")
        assert report.total_income == Euro.from_amount("500.00")
        assert event_types(audit_storage) == [AuditEventType.REPORT_LOADED]

    def test_merge_fresh_report_first(self, flow, audit_storage):
        """Test the fresh report's transactions come before the files'."""
        fresh = flow.build_report("May", inputs(("9", "-5", "Coffee")))
        merged = flow.merge_with_files("May", fresh, ["january.csv", "january.csv"])
        assert merged.transactions[0] == fresh.transactions[0]
        assert len(merged.transactions) == 5
        assert merged.total_income == Euro.from_amount("1000.00")
        assert merged.total_expense == Euro.from_amount("-55.00")
        assert event_types(audit_storage) == [
            AuditEventType.REPORT_BUILT,
            AuditEventType.REPORT_LOADED,
            AuditEventType.REPORT_LOADED,
            AuditEventType.REPORTS_COMBINED,
        ]

    def test_merge_events_share_correlation_id(self, flow, audit_storage):
        """Test one merge can be traced through its correlation id."""
        correlation_id = create_correlation_id()
        fresh = flow.build_report("May", inputs(("9", "-5", "Coffee")), correlation_id)
        flow.merge_with_files("May", fresh, ["january.csv"], correlation_id)
        assert len(audit_storage.get_events_by_correlation_id(correlation_id)) == 3

    def test_merge_without_files(self, flow):
        """Test merging nothing returns the fresh report."""
        fresh = flow.build_report("May", inputs(("9", "-5", "Coffee")))
        assert flow.merge_with_files("May", fresh, []) is fresh

    def test_merge_missing_file(self, flow, audit_storage):
        """Test a missing file aborts the merge."""
        fresh = flow.build_report("May", [])
        with pytest.raises(NotFoundError):
            flow.merge_with_files("May", fresh, ["missing.csv"])
        assert audit_storage.events[-1].event_type == AuditEventType.LOAD_FAILED

    def test_merge_broken_file(self, flow, audit_storage):
        """Test a malformed file aborts the merge."""
        fresh = flow.build_report("May", [])
        with pytest.raises(MalformedRowError):
            flow.merge_with_files("May", fresh, ["broken.csv"])
        assert audit_storage.events[-1].event_type == AuditEventType.ROW_PARSE_FAILED

    def test_merge_other_variant(self, flow, audit_storage):
        """Test merging a shared file into a basic report is refused."""
        fresh = flow.build_report("May", inputs(("9", "-5", "Coffee")))
        with pytest.raises(VariantMismatchError):
            flow.merge_with_files("May", fresh, ["shared.csv"])
        event = audit_storage.events[-1]
        assert event.event_type == AuditEventType.VARIANT_MISMATCH
        assert event.details["variants"] == ["BasicReport", "MultiPayerReport"]


class TestOutput:
    """Tests for rendering and saving."""

    def test_render(self, flow, audit_storage):
        """Test rendering returns the report text."""
        report = flow.load_report("January", "january.csv")
        text = flow.render(report)
        assert text.startswith("Budget Report for the period January\n")
        assert audit_storage.events[-1].event_type == AuditEventType.REPORT_RENDERED

    def test_save(self, flow, storage, audit_storage):
        """Test saving writes rows and is audited."""
        report = flow.build_report("May", inputs(("1", "100", "Salary")))
        assert flow.save(report, "may.csv") is True
        assert storage.read_text("may.csv") == "Time,Amount,Description\n1,100.00,Salary"
        assert audit_storage.events[-1].event_type == AuditEventType.REPORT_SAVED

    def test_save_failure(self, audit_storage):
        """Test a failed save raises and is audited."""
        flow = ReportFlow(storage=FailingReportStorage(), audit_logger=AuditLogger(audit_storage))
        report = BasicReport.build("May", [])
        with pytest.raises(StorageError):
            flow.save(report, "may.csv")
        event = audit_storage.events[-1]
        assert event.event_type == AuditEventType.SAVE_FAILED
        assert event.error_message == "disk full"

    @pytest.mark.parametrize("operation", ["save", "load_report"])
    def test_unexpected_failure_audited(self, audit_storage, operation):
        """Test errors outside the storage taxonomy are recorded as system errors."""
        flow = ReportFlow(storage=BrokenReportStorage(), audit_logger=AuditLogger(audit_storage))
        with pytest.raises(RuntimeError):
            if operation == "save":
                flow.save(BasicReport.build("May", []), "may.csv")
            else:
                flow.load_report("May", "may.csv")
        event = audit_storage.events[-1]
        assert event.event_type == AuditEventType.SYSTEM_ERROR
        assert event.severity == AuditSeverity.ERROR
        assert event.error_message == "driver crashed"
        assert event.details == {"operation": operation, "filename": "may.csv"}


class TestUpload:
    """Tests for reading uploaded report files."""

    def test_load_upload(self, flow, audit_storage):
        """Test uploaded bytes load like a stored file."""
        report = flow.load_upload("june.csv", "1,500.00,Income\n2,-25.00,Groceries".encode("utf-8"))
        assert report.net_income == Euro.from_amount("475.00")
        assert event_types(audit_storage) == [AuditEventType.REPORT_LOADED]

    def test_undecodable_upload(self, flow, audit_storage):
        """Test bytes in the wrong encoding are a format error, not a crash."""
        with pytest.raises(ReportFormatError, match="not utf-8 text"):
            flow.load_upload("latin.csv", "1,-5.00,Café".encode("latin-1"))
        assert audit_storage.events[-1].event_type == AuditEventType.ROW_PARSE_FAILED

    def test_configured_encoding(self, storage, audit_storage):
        """Test uploads are decoded with the flow's encoding."""
        flow = ReportFlow(storage=storage, audit_logger=AuditLogger(audit_storage), encoding="latin-1")
        report = flow.load_upload("latin.csv", "1,-5.00,Café".encode("latin-1"))
        assert report.transactions[0].description == "Café"

    def test_malformed_upload(self, flow, audit_storage):
        """Test malformed uploaded rows are audited and raised."""
        with pytest.raises(MalformedRowError):
            flow.load_upload("bad.csv", b"1,ten,Rent")
        assert audit_storage.events[-1].event_type == AuditEventType.ROW_PARSE_FAILED


class TestAuditLogger:
    """Tests for AuditLogger."""

    def test_logs_without_storage(self):
        """Test logging works without a storage backend."""
        logger = AuditLogger()
        event = AuditEvent(event_type=AuditEventType.REPORT_BUILT, description="built")
        assert logger.log(event) is True

    def test_storage_failure_does_not_raise(self):
        """Test a failing audit backend never breaks a report operation."""
        logger = AuditLogger(FailingAuditStorage())
        event = AuditEvent(event_type=AuditEventType.REPORT_BUILT, description="built")
        assert logger.log(event) is False

    def test_flow_survives_audit_failure(self, storage):
        """Test report operations succeed when auditing fails."""
        flow = ReportFlow(storage=storage, audit_logger=AuditLogger(FailingAuditStorage()))
        report = flow.load_report("January", "january.csv")
        assert type(report) is BasicReport


class TestCreateAppComponents:
    """Tests for the component factory."""

    def test_factory(self, storage):
        """Test the factory wires a flow to an audit store."""
        flow, audit_storage = create_app_components(storage)
        assert isinstance(flow, ReportFlow)
        assert flow.storage is storage
        flow.load_report("January", "january.csv")
        assert event_types(audit_storage) == [AuditEventType.REPORT_LOADED]
