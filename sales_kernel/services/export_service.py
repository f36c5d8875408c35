"""
ExportService -- CSV, JSON and XLSX export of selected reports.

Responsibility:
    Narrows the whole report set with the export criteria (date range,
    region, agent, service), keeps the reports the supervisor selected, and
    renders them in one of three formats.

Invariants enforced:
    - Export requires the EXPORT_REPORTS capability.
    - An empty selection is an error, never an empty file.
    - CSV and XLSX share one column layout; "Paid Amount" and "Due Date"
      are blank on non-installment rows.  JSON is the persisted layout.

Failure modes:
    - PermissionDeniedError, EmptySelectionError, ValueError (unknown format).
"""

from __future__ import annotations

import csv
import io
import json
from enum import Enum
from pathlib import Path
from typing import Any, Iterable

from openpyxl import Workbook

from sales_kernel.domain.access import Capability
from sales_kernel.domain.filters import ReportFilter
from sales_kernel.domain.report import Report
from sales_kernel.exceptions import EmptySelectionError
from sales_kernel.logging_config import get_logger
from sales_kernel.services.base import BaseService
from sales_kernel.services.report_store import ReportStore

logger = get_logger("services.export")

EXPORT_HEADERS: tuple[str, ...] = (
    "Date",
    "Booking ID",
    "Agent",
    "Region",
    "Customer Name",
    "Service",
    "Provider",
    "Destination",
    "Check-In",
    "Pax",
    "Currency",
    "Net Rate",
    "Selling Rate",
    "Payment Method",
    "Installment",
    "Paid Amount",
    "Due Date",
)


class ExportFormat(str, Enum):
    CSV = "csv"
    JSON = "json"
    XLSX = "xlsx"


def _cell(value: Any) -> str:
    return "" if value is None else str(value)


def export_row(report: Report) -> list[str]:
    """One report as the ordered cells under EXPORT_HEADERS."""
    created = report.created_at
    paid = report.is_installment
    return [
        created.date().isoformat() if created else "",
        _cell(report.booking_id),
        _cell(report.agent_name),
        _cell(report.region),
        _cell(report.customer_name),
        _cell(report.service),
        _cell(report.provider),
        _cell(report.destination),
        _cell(report.check_in),
        _cell(report.pax_number),
        _cell(report.currency),
        _cell(report.net_rate),
        _cell(report.selling_rate),
        _cell(report.payment_method),
        _cell(report.installment),
        _cell(report.installment_paid) if paid else "",
        _cell(report.due_date) if paid else "",
    ]


def render_csv(reports: Iterable[Report]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(EXPORT_HEADERS)
    for report in reports:
        writer.writerow(export_row(report))
    return buffer.getvalue()


def render_json(reports: Iterable[Report]) -> str:
    return json.dumps([r.to_record() for r in reports], indent=2, default=str)


def render_xlsx(reports: Iterable[Report]) -> bytes:
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = "Sales Reports"
    sheet.append(list(EXPORT_HEADERS))
    for report in reports:
        sheet.append(export_row(report))
    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


class ExportService(BaseService):

    def __init__(self, reports: ReportStore, file_prefix: str = "sales-reports-export"):
        super().__init__(reports.store, reports.clock)
        self.reports = reports
        self.file_prefix = file_prefix

    def candidates(self, criteria: ReportFilter | None = None) -> list[Report]:
        """
        Reports matching the export criteria, whole store.

        Raises:
            PermissionDeniedError: caller is not a supervisor.
        """
        self.reports.auth.require(Capability.EXPORT_REPORTS, "export reports")
        reports = self.reports.get_saved_reports(filter_by_user=False)
        return (criteria or ReportFilter()).apply(reports)

    def select(self, candidates: Iterable[Report], selected_ids: Iterable[str]) -> list[Report]:
        """
        Candidates whose id is selected, in candidate order.

        Raises:
            EmptySelectionError: nothing selected, or nothing selected matches.
        """
        wanted = set(selected_ids)
        chosen = [r for r in candidates if r.id in wanted]
        if not chosen:
            raise EmptySelectionError()
        return chosen

    def filename(self, fmt: ExportFormat) -> str:
        return f"{self.file_prefix}-{self.clock.today().isoformat()}.{fmt.value}"

    def render(self, reports: list[Report], fmt: ExportFormat) -> bytes:
        if fmt is ExportFormat.CSV:
            return render_csv(reports).encode("utf-8")
        if fmt is ExportFormat.JSON:
            return render_json(reports).encode("utf-8")
        if fmt is ExportFormat.XLSX:
            return render_xlsx(reports)
        raise ValueError(f"Unsupported export format: {fmt!r}")

    def export(
        self,
        selected_ids: Iterable[str],
        fmt: ExportFormat,
        output_dir: Path,
        criteria: ReportFilter | None = None,
    ) -> Path:
        """
        Write the selected reports to ``output_dir`` and return the file path.

        Raises:
            PermissionDeniedError: caller is not a supervisor.
            EmptySelectionError: nothing selected.
        """
        chosen = self.select(self.candidates(criteria), selected_ids)
        output_dir.mkdir(parents=True, exist_ok=True)
        path = output_dir / self.filename(fmt)
        path.write_bytes(self.render(chosen, fmt))
        logger.info(
            "reports_exported",
            extra={"format": fmt.value, "count": len(chosen), "path": str(path)},
        )
        return path
