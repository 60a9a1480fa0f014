"""
Streamlit Frontend for Budget Reports

This is the user interface for recording a budget period.

DESIGN PRINCIPLES:
1. The user types incomes and expenses, nothing is guessed
2. Problems are shown before a report is built
3. Printing and saving are separate, explicit actions
4. Existing report files can be merged into the new report

The UI is thin glue: every decision about totals, sorting, merging and
the file format lives in the `budget` package.
"""

import io

import streamlit as st

from budget.audit import create_correlation_id
from budget.config import get_settings, validate_all_settings
from budget.models.validation import TransactionInput
from budget.orchestrator import ReportFlow, create_app_components
from budget.reports import ReportError
from budget.services.storage import StorageError
from budget.validation import InvalidTransactionInputError


settings = get_settings()

# Page configuration
st.set_page_config(
    page_title=settings.app.page_title,
    page_icon="💶",
    layout="wide",
)

EMPTY_ROW = {"time": "", "amount": "", "description": "", "paid_by": ""}


@st.cache_resource
def get_components():
    """Get or create application components (cached)."""
    return create_app_components()


def show_error(message: str, error: Exception):
    """Show a failure; the traceback too in debug mode."""
    st.error(f"{message}: {error}")
    if settings.app.debug_mode:
        st.exception(error)


def main():
    """Main application entry point."""
    report_flow, audit_storage = get_components()

    st.sidebar.title("💶 Budget Tracker")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        ["📝 New Report", "📂 Saved Reports", "⚙️ Settings"],
        index=0,
    )

    st.sidebar.markdown("---")
    st.sidebar.markdown(
        """
        **How to use:**
        1. Name the period (e.g. "January 2025")
        2. Enter incomes as positive and expenses as negative amounts
        3. Optionally merge saved reports
        4. View or save the report

        Add a payer name to every row to track a shared budget.
        """
    )

    if page == "📝 New Report":
        render_new_report_page(report_flow)
    elif page == "📂 Saved Reports":
        render_saved_reports_page(report_flow)
    elif page == "⚙️ Settings":
        render_settings_page(audit_storage)


def render_new_report_page(report_flow: ReportFlow):
    """Render the page where a period's transactions are entered."""
    st.title("📝 New Report")

    if "report" not in st.session_state:
        st.session_state.report = None

    period = st.text_input(
        "For what period would you like to record your budget?",
        placeholder="January 2025",
    )

    st.markdown("### Transactions")
    rows = st.data_editor(
        [dict(EMPTY_ROW)],
        num_rows="dynamic",
        use_container_width=True,
        key="transactions_editor",
    )
    inputs = [
        TransactionInput(**row)
        for row in rows
        if any(str(value or "").strip() for value in row.values())
    ]

    merge_files = st.multiselect(
        "Merge saved reports into this one",
        report_flow.storage.list_reports(),
    )

    if st.button("📊 Build Report", type="primary"):
        if not period.strip():
            st.error("Please enter a period name.")
            st.stop()

        correlation_id = create_correlation_id()
        try:
            report = report_flow.build_report(period, inputs, correlation_id)
            report = report_flow.merge_with_files(period, report, merge_files, correlation_id)
        except InvalidTransactionInputError as e:
            st.error("Some transactions need fixing:")
            for issue in e.result.issues:
                if issue.severity == "error":
                    st.markdown(f"- **{issue.field}**: {issue.message}")
            st.stop()
        except (ReportError, StorageError) as e:
            show_error("Could not build the report", e)
            st.stop()

        for warning in report_flow.validate(inputs).warnings:
            st.warning(warning)
        st.session_state.report = report

    report = st.session_state.report
    if report is None:
        return

    render_report(report_flow, report)

    st.markdown("### Save")
    filename = st.text_input("Filename", value=f"{report.name}.csv")
    if st.button("💾 Save Report"):
        try:
            report_flow.save(report, filename)
            st.success(f"Saved to {filename}")
        except StorageError as e:
            show_error("Could not save the report", e)


def render_report(report_flow: ReportFlow, report):
    """Show totals, the full text report and a download of the rows."""
    col1, col2, col3 = st.columns(3)
    col1.metric("Total Income", str(report.total_income))
    col2.metric("Total Expense", str(report.total_expense))
    col3.metric("Net Income", str(report.net_income))

    st.code(report_flow.render(report), language=None)

    buffer = io.StringIO()
    report.write_rows(buffer)
    st.download_button(
        "⬇️ Download rows",
        data=buffer.getvalue(),
        file_name=f"{report.name}.csv",
        mime="text/csv",
    )


def render_saved_reports_page(report_flow: ReportFlow):
    """Render saved reports, optionally combined."""
    st.title("📂 Saved Reports")

    filenames = report_flow.storage.list_reports()
    uploaded = st.file_uploader("Or upload report files", type=["csv"], accept_multiple_files=True)

    if not filenames and not uploaded:
        st.info(
            "📋 Saved reports will appear here once you save one. "
            "Use the 'New Report' page to record your first period."
        )
        return

    selected = st.multiselect("Reports to show", filenames, default=filenames[:1])
    name = st.text_input("Name for the combined report", value="Combined")

    correlation_id = create_correlation_id()
    try:
        reports = [report_flow.load_report(f, f, correlation_id) for f in selected]
        for upload in uploaded or []:
            reports.append(report_flow.load_upload(upload.name, upload.getvalue(), correlation_id))
        if not reports:
            return
        report = reports[0] if len(reports) == 1 else report_flow.combine(name, reports, correlation_id)
    except (ReportError, StorageError) as e:
        show_error("Could not load the reports", e)
        return

    render_report(report_flow, report)


def render_settings_page(audit_storage):
    """Render the settings page."""
    st.title("⚙️ Settings")

    status = validate_all_settings()
    for name, key in [("Report storage", "reports"), ("Application", "app")]:
        if status.get(key, False):
            st.success(f"✅ {name} - OK")
        else:
            st.error(f"❌ {name} - {status.get(f'{key}_error', 'Not configured')}")

    st.markdown("### Configuration")
    st.markdown(
        f"Reports are stored in `{settings.reports.reports_dir}`. "
        "Set `BUDGET_REPORTS_DIR` in a `.env` file to change it."
    )
    st.markdown(f"Environment: `{settings.app.app_environment}`")

    st.markdown("### Recent activity")
    for event in audit_storage.get_recent_events(limit=20):
        st.markdown(f"- `{event.timestamp:%H:%M:%S}` {event.description}")


if __name__ == "__main__":
    main()
