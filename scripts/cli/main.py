"""CLI main loop: login, menu dispatch, error display."""

import logging
import sys

from sales_kernel.exceptions import SalesKernelError
from sales_kernel.logging_config import StructuredFormatter, configure_logging
from scripts.cli import config as cli_config
from scripts.cli.menu import available_items, print_menu
from scripts.cli.setup import build_services
from scripts.cli.views import (
    show_advanced_filter,
    show_dashboard,
    show_export,
    show_installment_lookup,
    show_new_report,
    show_saved_reports,
    show_user_management,
)

VIEWS = {
    "N": show_new_report,
    "S": show_saved_reports,
    "I": show_installment_lookup,
    "D": show_dashboard,
    "A": show_advanced_filter,
    "E": show_export,
    "U": show_user_management,
}


class _FlushingFileHandler(logging.FileHandler):
    """FileHandler that flushes after every emit so interactive.log updates immediately."""

    def emit(self, record: logging.LogRecord) -> None:
        super().emit(record)
        self.flush()


def _attach_file_log(level: str) -> logging.Handler:
    cli_config.LOG_DIR.mkdir(parents=True, exist_ok=True)
    configure_logging(level=level)
    handler = _FlushingFileHandler(str(cli_config.LOG_PATH), mode="a")
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(StructuredFormatter())
    sk_logger = logging.getLogger("sales_kernel")
    sk_logger.addHandler(handler)
    for h in sk_logger.handlers:
        if isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler):
            h.setLevel(logging.CRITICAL + 1)
    return handler


def login(services) -> bool:
    """Prompt until login succeeds. False on EOF/interrupt."""
    print("\n  Please log in.\n")
    while True:
        try:
            username = input("  Username: ").strip()
            password = input("  Password: ").strip()
        except (EOFError, KeyboardInterrupt):
            print()
            return False
        user = services.auth.login(username, password)
        if user is not None:
            print(f"\n  Welcome, {user.name}.")
            return True
        print("  Invalid username or password.\n")


def run_view(view, services) -> None:
    """Run one screen; kernel errors are shown, not raised."""
    try:
        view(services)
    except SalesKernelError as exc:
        print(f"\n  ERROR [{exc.code}]: {exc}\n")
    except (EOFError, KeyboardInterrupt):
        print("\n  Cancelled.\n")


def main() -> int:
    config = cli_config.load_config()
    _attach_file_log(config.log_level)
    logger = logging.getLogger("sales_kernel.cli")
    logger.info(
        "interactive_cli_starting",
        extra={"log_path": str(cli_config.LOG_PATH), "config_id": config.config_id},
    )

    try:
        services = build_services(config)
    except Exception as exc:
        print(f"  ERROR: {exc}", file=sys.stderr)
        return 1

    print(f"  Config: {config.config_id} v{config.version}")
    print(f"  Logging to: {cli_config.LOG_PATH}", file=sys.stderr)

    if not login(services):
        return 0

    while True:
        user = services.auth.get_current_user()
        print_menu(user)
        try:
            choice = input("  Pick: ").strip().upper()
        except (EOFError, KeyboardInterrupt):
            print("\n")
            break

        if choice == "Q":
            print("\n  Goodbye.\n")
            break
        elif choice == "O":
            services.auth.logout()
            if not login(services):
                break
        elif choice in dict(available_items(user)):
            run_view(VIEWS[choice], services)
        else:
            print("  Unknown option.")

    logger.info("interactive_cli_stopped")
    return 0


if __name__ == "__main__":
    sys.exit(main())
