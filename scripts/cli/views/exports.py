"""CLI views: export selected reports to CSV, JSON or XLSX."""

from pathlib import Path

from sales_kernel.services import ExportFormat
from scripts.cli import config as cli_config
from scripts.cli.util import ask, ask_choice
from scripts.cli.views.reports import print_report_table, prompt_filter


def parse_selection(raw: str, count: int) -> list[int]:
    """'all', '1,3', '2-5' -> zero-based indexes within range."""
    raw = raw.strip().lower()
    if raw == "all":
        return list(range(count))
    picked: list[int] = []
    for part in raw.split(","):
        part = part.strip()
        if "-" in part:
            lo, _, hi = part.partition("-")
            if lo.isdigit() and hi.isdigit():
                picked.extend(range(int(lo) - 1, int(hi)))
        elif part.isdigit():
            picked.append(int(part) - 1)
    return [i for i in dict.fromkeys(picked) if 0 <= i < count]


def show_export(services):
    """Filter, select and export reports."""
    criteria = prompt_filter(services, with_amounts=False)
    candidates = services.exports.candidates(criteria)
    print_report_table(candidates, "EXPORT CANDIDATES")
    if not candidates:
        return
    indexes = parse_selection(ask("Select (all, 1,3, 2-5)", "all"), len(candidates))
    raw = ask_choice("Format", [f.value for f in ExportFormat], ExportFormat.CSV.value)
    try:
        fmt = ExportFormat(raw.lower())
    except ValueError:
        print(f"  Unknown format: {raw}\n")
        return
    out_dir = Path(services.config.export.output_dir)
    if not out_dir.is_absolute():
        out_dir = cli_config.ROOT / out_dir
    path = services.exports.export([candidates[i].id for i in indexes], fmt, out_dir, criteria)
    print(f"\n  Exported {len(indexes)} reports to {path}\n")
