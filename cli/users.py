#!/usr/bin/env python3

from logger import get_logger

logger = get_logger()


def cmd_list(args, services):
    """List all users and their email preferences."""
    users = services.users.find_all()

    if not users:
        logger.info("No users found.")
        return

    logger.info("\nUsers:")
    logger.info("=" * 80)
    for user in users:
        logger.info(f"ID: {user.id}")
        logger.info(f"Name: {user.name}")
        logger.info(f"Email: {user.email or '-'}")
        logger.info(
            f"Daily report: {user.daily_report}, "
            f"Monthly report: {user.monthly_report}, "
            f"Budget alerts: {user.budget_alerts}"
        )
        logger.info("-" * 80)

    logger.info(f"\nTotal users: {len(users)}")


def cmd_create(args, services):
    """Create a user."""
    user = services.users.create(args.name, args.email)
    logger.info(f"✓ User created successfully with ID: {user.id}")


def cmd_preferences(args, services):
    """Toggle email preferences for a user."""
    changes = {
        name: value == "on"
        for name, value in (
            ("daily_report", args.daily_report),
            ("monthly_report", args.monthly_report),
            ("budget_alerts", args.budget_alerts),
        )
        if value is not None
    }
    if not changes:
        logger.info("Nothing to update.")
        return

    if services.users.update_preferences(args.user_id, **changes):
        logger.info(f"✓ Preferences updated for user {args.user_id}")
    else:
        logger.error(f"User with ID {args.user_id} not found.")


def setup_parser(subparsers):
    """Setup users subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "users",
        help="Manage users",
        description="Create and list users, and set their email preferences",
    )

    users_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available user commands",
        dest="subcommand",
        required=True,
    )

    list_parser = users_subparsers.add_parser("list", help="List all users")
    list_parser.set_defaults(func=cmd_list)

    create_parser = users_subparsers.add_parser("create", help="Create a user")
    create_parser.add_argument("name", help="Display name")
    create_parser.add_argument("--email", help="Email address for reports and alerts")
    create_parser.set_defaults(func=cmd_create)

    prefs_parser = users_subparsers.add_parser(
        "preferences", help="Turn email reports and alerts on or off"
    )
    prefs_parser.add_argument("user_id", type=int, help="ID of the user")
    for flag in ("--daily-report", "--monthly-report", "--budget-alerts"):
        prefs_parser.add_argument(flag, choices=["on", "off"])
    prefs_parser.set_defaults(func=cmd_preferences)
