"""CLI menu: print main menu for the logged-in user."""

from sales_kernel.domain.access import Capability, User, can

# (key, label, capability or None for everyone)
MENU_ITEMS: tuple[tuple[str, str, Capability | None], ...] = (
    ("N", "New report", Capability.SUBMIT_REPORT),
    ("S", "Saved reports", None),
    ("I", "Installment lookup / pay", None),
    ("D", "Statistics dashboard", Capability.VIEW_STATISTICS),
    ("A", "Advanced filter", Capability.ADVANCED_FILTER),
    ("E", "Export reports", Capability.EXPORT_REPORTS),
    ("U", "User management", Capability.MANAGE_USERS),
)


def available_items(user: User) -> list[tuple[str, str]]:
    return [(key, label) for key, label, cap in MENU_ITEMS if cap is None or can(user, cap)]


def print_menu(user: User):
    """Print the main interactive menu."""
    W = 72
    role = "Supervisor" if user.is_supervisor else f"Agent ({user.region})"
    print()
    print("=" * W)
    print("  TRAVEL SALES REPORTS".center(W))
    print(f"  {user.name} - {role}".center(W))
    print("=" * W)
    print()
    for key, label in available_items(user):
        print(f"    {key}   {label}")
    print()
    print("    O   Log out")
    print("    Q   Quit")
    print()
