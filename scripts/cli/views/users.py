"""CLI views: supervisor user management."""

from sales_kernel.domain.access import AGENT_ROLE, SUPERVISOR_ROLE
from scripts.cli.util import ask, ask_choice, confirm


def print_users(users):
    print()
    print(f"  {'#':>3}  {'Username':<16} {'Name':<24} {'Role':<11} {'Region':<14}")
    print(f"  {'-'*3}  {'-'*16} {'-'*24} {'-'*11} {'-'*14}")
    for i, u in enumerate(users, 1):
        print(f"  {i:>3}  {u['username']:<16} {u['name']:<24} {u['role']:<11} {u.get('region') or '-':<14}")
    print()


def _user_form(services, current=None):
    current = current or {}
    role = ask_choice("Role", [AGENT_ROLE, SUPERVISOR_ROLE], current.get("role", AGENT_ROLE))
    region = ""
    if role == AGENT_ROLE:
        region = ask_choice("Region", services.config.reports.regions, current.get("region", ""))
    return {
        "username": ask("Username", current.get("username", "")),
        "password": ask("Password (blank keeps current)" if current else "Password"),
        "name": ask("Full name", current.get("name", "")),
        "role": role,
        "region": region,
    }


def show_user_management(services):
    """List, add, edit and delete users."""
    users = services.users.get_all_users()
    print_users(users)
    action = ask("[A]dd, [E]dit #, [D]elete #, blank to go back").upper()
    if action == "A":
        created = services.users.create_user(_user_form(services))
        print(f"\n  Created user {created['username']}.\n")
        return
    if len(action) < 2 or action[0] not in "ED" or not action[1:].strip().isdigit():
        return
    idx = int(action[1:].strip()) - 1
    if not 0 <= idx < len(users):
        print("  No such user.\n")
        return
    target = users[idx]
    if action[0] == "E":
        services.users.update_user(target["id"], _user_form(services, target))
        print("\n  User updated.\n")
    elif confirm(f"Delete {target['username']}?"):
        services.users.delete_user(target["id"])
        print("\n  User deleted.\n")
