#!/usr/bin/env python3

import sys
from datetime import date
from notifications import get_dispatcher
from tools.goals import progress_percentage
from logger import get_logger

logger = get_logger()


def cmd_create(args, services):
    """Create a savings goal."""
    goal = services.goals.create(
        args.user_id,
        args.name,
        args.target,
        current_amount=args.current,
        deadline=date.fromisoformat(args.deadline) if args.deadline else None,
        description=args.description,
    )
    logger.info(f"✓ Goal created successfully with ID: {goal.id}")


def cmd_list(args, services):
    """List a user's goals and how far along they are."""
    goals = services.goals.find_by_user(args.user_id)

    if not goals:
        logger.info("No goals found.")
        return

    currency = services.config.currency_symbol
    logger.info("\nGoals:")
    logger.info("=" * 80)
    for goal in goals:
        marker = "✓" if goal.is_achieved else " "
        deadline = f"  by {goal.deadline}" if goal.deadline else ""
        logger.info(
            f"{marker} {goal.id:>4}  {goal.name:<28} "
            f"{currency}{goal.current_amount:,.2f} / {currency}{goal.target_amount:,.2f}  "
            f"({progress_percentage(goal)}%){deadline}"
        )

    logger.info(f"\nTotal goals: {len(goals)}")


def cmd_progress(args, services):
    """Set the amount saved towards a goal."""
    dispatcher = get_dispatcher(services.config, services.db_manager)
    result = services.tracking.record_goal_contribution(
        args.user_id, args.goal_id, args.amount, dispatcher
    )

    goal = result.goal
    logger.info(f"✓ Goal '{goal.name}' is at {progress_percentage(goal)}%")
    if result.just_achieved:
        logger.info("🎉 Goal achieved!")


def cmd_edit(args, services):
    """Change a goal's name, target, deadline or description."""
    changes = {}
    if args.name is not None:
        changes["name"] = args.name
    if args.target is not None:
        changes["target_amount"] = args.target
    if args.deadline is not None:
        changes["deadline"] = date.fromisoformat(args.deadline)
    if args.description is not None:
        changes["description"] = args.description

    if not changes:
        logger.error("Nothing to change.")
        sys.exit(1)

    dispatcher = get_dispatcher(services.config, services.db_manager)
    result = services.tracking.update_goal(
        args.user_id, args.goal_id, dispatcher, **changes
    )

    logger.info(f"✓ Goal {result.goal.id} updated.")
    if result.just_achieved:
        logger.info("🎉 Goal achieved!")


def cmd_delete(args, services):
    """Delete one of a user's goals."""
    if services.goals.delete(args.user_id, args.goal_id):
        logger.info(f"✓ Goal {args.goal_id} deleted.")
    else:
        logger.error(f"Goal with ID {args.goal_id} not found.")
        sys.exit(1)


def setup_parser(subparsers):
    """Setup goals subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "goals",
        help="Manage savings goals",
        description="Create savings goals and record progress towards them",
    )

    goals_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available goal commands",
        dest="subcommand",
        required=True,
    )

    create_parser = goals_subparsers.add_parser("create", help="Create a goal")
    create_parser.add_argument("name", help="Goal name")
    create_parser.add_argument("--user-id", type=int, required=True)
    create_parser.add_argument("--target", required=True, help="Target amount")
    create_parser.add_argument("--current", default="0", help="Amount already saved")
    create_parser.add_argument("--deadline", help="Target day (YYYY-MM-DD)")
    create_parser.add_argument("--description")
    create_parser.set_defaults(func=cmd_create)

    list_parser = goals_subparsers.add_parser("list", help="List goals")
    list_parser.add_argument("--user-id", type=int, required=True)
    list_parser.set_defaults(func=cmd_list)

    progress_parser = goals_subparsers.add_parser(
        "progress", help="Set the amount saved so far"
    )
    progress_parser.add_argument("goal_id", type=int)
    progress_parser.add_argument("amount", help="New total saved")
    progress_parser.add_argument("--user-id", type=int, required=True)
    progress_parser.set_defaults(func=cmd_progress)

    edit_parser = goals_subparsers.add_parser("edit", help="Edit a goal")
    edit_parser.add_argument("goal_id", type=int)
    edit_parser.add_argument("--user-id", type=int, required=True)
    edit_parser.add_argument("--name")
    edit_parser.add_argument("--target", help="Target amount")
    edit_parser.add_argument("--deadline", help="Target day (YYYY-MM-DD)")
    edit_parser.add_argument("--description")
    edit_parser.set_defaults(func=cmd_edit)

    delete_parser = goals_subparsers.add_parser("delete", help="Delete a goal")
    delete_parser.add_argument("goal_id", type=int)
    delete_parser.add_argument("--user-id", type=int, required=True)
    delete_parser.set_defaults(func=cmd_delete)
