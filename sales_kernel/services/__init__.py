"""Services for the sales kernel (write side)."""

from sales_kernel.services.auth_service import AuthService
from sales_kernel.services.report_store import ReportStore, validate_report_submission
from sales_kernel.services.user_service import UserService
from sales_kernel.services.installment_service import (
    InstallmentService,
    validate_installment_payment,
)
from sales_kernel.services.export_service import ExportFormat, ExportService

__all__ = [
    "AuthService",
    "ExportFormat",
    "ExportService",
    "InstallmentService",
    "ReportStore",
    "UserService",
    "validate_installment_payment",
    "validate_report_submission",
]
