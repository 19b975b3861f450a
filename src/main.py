"""Main entry point for the Alumni Portal console.

This module provides an interactive command-line front end over the
persistent store: log in, read and send messages, look at statistics, and
export or back up the user collection.
"""

import getpass
import logging
import sys
from typing import List

from core.dependencies import PortalContext, build_context, get_shared_storage, initialize_store
from core.exceptions import AlumniPortalError
from core.logging_config import setup_logging
from schemas.user import User
from utils import analytics
from utils.directory import alumni_network, dashboard_stats
from utils.export_manager import create_backup, export_all, export_user, write_export

logger = logging.getLogger(__name__)

HELP = """Commands:
  inbox                 list your messages
  read <id>             mark a message as read
  del <id>              delete a message
  send <email> <text>   send a message
  broadcast <text>      (admin) message every alumni
  network               (alumni) show the alumni network
  stats                 show statistics
  export                export your data (admin: everything)
  backup                (admin) snapshot the user collection
  logout | q            leave
"""


def print_banner() -> None:
    print("=" * 70)
    print("  Alumni Portal Console")
    print("=" * 70)
    print()


def print_inbox(portal: PortalContext, user: User) -> None:
    inbox = portal.messages.list_for_recipient(user.email)
    if not inbox:
        print("No messages yet.\n")
        return
    for m in inbox:
        flag = " " if m.read else "*"
        print(f"{flag} [{m.id}] {m.timestamp}  {m.display_sender}: {m.text}")
    print()


def print_stats(portal: PortalContext, user: User) -> None:
    users = portal.users.list_users()
    if user.is_admin:
        stats = analytics.admin_stats(users)
        print(f"Alumni: {stats.total_alumni}  Departments: {stats.total_departments}  Mentors: {stats.mentors}")
        for dept, count in analytics.department_counts(users).items():
            print(f"  {dept:<12} {count}")
        print("Top companies:", ", ".join(f"{c} ({n})" for c, n in analytics.top_companies(users)))
        print("Top skills:", ", ".join(f"{s} ({n})" for s, n in analytics.top_skills(users)))
    else:
        stats = dashboard_stats(users, user)
        print(f"Alumni: {stats.total_alumni}  In your department: {stats.department_alumni}  Mentors: {stats.mentors}")
    print()


def run_command(portal: PortalContext, user: User, args: List[str]) -> bool:
    """Run one console command. Returns False when the user leaves."""
    command = args[0].lower()
    if command in ("q", "quit", "logout"):
        portal.session.logout()
        return False
    if command == "inbox":
        print_inbox(portal, user)
    elif command == "read" and len(args) == 2:
        portal.messages.mark_read(int(args[1]))
    elif command == "del" and len(args) == 2:
        portal.messages.delete(int(args[1]))
    elif command == "send" and len(args) >= 3:
        message = portal.messages.send(user.email, user.name, args[1], " ".join(args[2:]))
        print(f"Message sent (id {message.id}).\n")
    elif command == "broadcast" and len(args) >= 2:
        sent = portal.messages.broadcast_to_alumni(user, portal.users.list_alumni(), " ".join(args[1:]))
        print(f"Broadcast sent to {len(sent)} alumni.\n")
    elif command == "network":
        for peer in alumni_network(portal.users.list_users(), user):
            print(f"  {peer.name:<20} {peer.department}, {peer.graduation_year}  {peer.email}")
        print()
    elif command == "stats":
        print_stats(portal, user)
    elif command == "export":
        if user.is_admin:
            filename, payload = export_all(portal.users.list_users())
        else:
            filename, payload = export_user(user)
        print(f"Exported to {write_export(filename, payload)}\n")
    elif command == "backup" and user.is_admin:
        print(f"Backup created successfully! Backup key: {create_backup(portal.store)}\n")
    else:
        print(HELP)
    return True


def interactive_console(portal: PortalContext) -> None:
    """Log in and run commands until the user leaves."""
    email = input("Email: ").strip()
    password = getpass.getpass("Password: ")
    user = portal.session.login(email, password)
    print(f"\nWelcome, {user.name} ({user.role}).")
    unread = portal.messages.unread_count(user.email)
    if unread:
        print(f"You have {unread} unread message(s).")
    print(HELP)

    while True:
        line = input("> ").strip()
        if not line:
            continue
        user = portal.session.refresh() or user
        try:
            if not run_command(portal, user, line.split()):
                break
        except (AlumniPortalError, ValueError) as e:
            print(f"Error: {e}\n")


def run_one_shot(portal: PortalContext, argv: List[str]) -> bool:
    """Log in and run a single command.

    Args:
        portal: Managers for the console context.
        argv: email, password, then the command and its arguments.

    Returns:
        False if the command arguments could not be parsed.
    """
    user = portal.session.login(argv[0], argv[1])
    try:
        run_command(portal, user, argv[2:])
    except ValueError as e:
        print(f"Error: {e}\n")
        return False
    return True


def main() -> None:
    """Main entry point."""
    setup_logging()
    print_banner()

    portal = build_context(get_shared_storage().open_context("console"))
    initialize_store(portal.users)

    # Optional one-shot command: python main.py <email> <password> <command...>
    try:
        if len(sys.argv) > 3:
            if not run_one_shot(portal, sys.argv[1:]):
                sys.exit(2)
        else:
            interactive_console(portal)
    except KeyboardInterrupt:
        print("\n\nInterrupted.")
    except AlumniPortalError as e:
        logger.error("Command failed: %s", e)
        print(f"\n{e}\n")
        sys.exit(1)


if __name__ == "__main__":
    main()
