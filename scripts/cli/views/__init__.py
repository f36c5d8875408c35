"""CLI views: one module per screen."""

from scripts.cli.views.dashboard import show_dashboard
from scripts.cli.views.exports import show_export
from scripts.cli.views.installments import show_installment_lookup
from scripts.cli.views.reports import show_advanced_filter, show_new_report, show_saved_reports
from scripts.cli.views.users import show_user_management

__all__ = [
    "show_advanced_filter",
    "show_dashboard",
    "show_export",
    "show_installment_lookup",
    "show_new_report",
    "show_saved_reports",
    "show_user_management",
]
