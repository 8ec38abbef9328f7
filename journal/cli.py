"""CLI tool for admin operations.

Usage:
    python -m journal.cli create-user
    python -m journal.cli reconcile [--fix]
"""

import sys
import getpass

from sqlmodel import Session

from journal.database import engine, create_db_and_tables
from journal.services.auth import get_user_by_email, register_user
from journal.services.reconciliation import audit_balances
from journal.utils.logging import setup_logging


def create_user():
    """Create a user interactively."""
    create_db_and_tables()

    email = input("Email: ").strip().lower()
    if not email or "@" not in email:
        print("A valid email is required.")
        sys.exit(1)

    with Session(engine) as session:
        if get_user_by_email(session, email):
            print(f"User '{email}' already exists.")
            sys.exit(1)

    password = getpass.getpass("Password: ")
    password_confirm = getpass.getpass("Confirm password: ")
    if password != password_confirm:
        print("Passwords do not match.")
        sys.exit(1)
    if len(password) < 8:
        print("Password must be at least 8 characters.")
        sys.exit(1)

    with Session(engine) as session:
        register_user(session, email, password)

    print(f"\nUser '{email}' created successfully.")


def reconcile(fix: bool = False):
    """Audit every account balance against its trades."""
    create_db_and_tables()

    with Session(engine) as session:
        drifts = audit_balances(session, fix=fix, record=True)

    if not drifts:
        print("All account balances match their trades.")
        return

    print(f"{'Account':<30} {'Stored':>14} {'Expected':>14} {'Drift':>12}")
    for d in drifts:
        label = f"#{d.account_id} {d.account_name}"[:30]
        print(
            f"{label:<30} {d.recorded_balance:>14.2f} {d.expected_balance:>14.2f} "
            f"{d.drift:>+12.2f}{'  (corrected)' if d.corrected else ''}"
        )
    if not fix:
        print("\nRun with --fix to post correcting balance deltas.")


def main():
    if len(sys.argv) < 2:
        print("Usage: python -m journal.cli <command>")
        print("Commands: create-user, reconcile [--fix]")
        sys.exit(1)

    setup_logging()
    command = sys.argv[1]
    if command == "create-user":
        create_user()
    elif command == "reconcile":
        reconcile(fix="--fix" in sys.argv[2:])
    else:
        print(f"Unknown command: {command}")
        sys.exit(1)


if __name__ == "__main__":
    main()
