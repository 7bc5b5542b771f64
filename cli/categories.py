#!/usr/bin/env python3

import sys
import json
from pathlib import Path
from logger import get_logger

logger = get_logger()


def cmd_list(args, services):
    """List predefined categories, plus a user's own when --user-id is given."""
    categories = services.categories.find_all(args.user_id)

    if not categories:
        logger.info("No categories found.")
        return

    logger.info("\nCategories:")
    logger.info("=" * 80)
    for category in categories:
        owner = "predefined" if category.is_predefined else f"user {category.user_id}"
        logger.info(
            f"{category.id:>4}  {category.type:<8} {category.name:<24} "
            f"{category.color}  ({owner})"
        )

    logger.info(f"\nTotal categories: {len(categories)}")


def cmd_create(args, services):
    """Create a custom category for a user."""
    category = services.categories.create(
        args.name, args.type, user_id=args.user_id, color=args.color
    )
    logger.info(f"✓ Category created successfully with ID: {category.id}")


def cmd_delete(args, services):
    """Delete a category by ID."""
    category = services.categories.find(args.category_id)
    if not category:
        logger.error(f"Category with ID {args.category_id} not found.")
        sys.exit(1)

    if services.categories.delete(args.category_id):
        logger.info(f"✓ Category '{category.name}' deleted successfully.")
    else:
        logger.error("Failed to delete category.")
        sys.exit(1)


def cmd_seed(args, services):
    """Seed predefined categories from JSON file."""
    seed_file = Path(__file__).parent.parent / "db" / "seed" / "categories.json"

    if not seed_file.exists():
        logger.error(f"Seed file not found: {seed_file}")
        sys.exit(1)

    try:
        with open(seed_file, "r") as f:
            categories_data = json.load(f)
    except json.JSONDecodeError as e:
        logger.error(f"Error parsing JSON file: {e}")
        sys.exit(1)

    logger.info("\nSeeding categories from db/seed/categories.json")
    logger.info("=" * 80)

    created_count = 0
    skipped_count = 0

    for category_data in categories_data:
        name = category_data.get("name")
        category_type = category_data.get("type")

        if not name or not category_type:
            logger.warning(f"Skipping incomplete category entry: {category_data}")
            continue

        if services.categories.find_by_name(name, category_type):
            logger.info(f"⊘ Skipped '{name}' ({category_type}, already exists)")
            skipped_count += 1
            continue

        category = services.categories.create(
            name, category_type, color=category_data.get("color", "#CCCCCC")
        )
        logger.info(f"✓ Created '{name}' ({category_type}, ID: {category.id})")
        created_count += 1

    logger.info("=" * 80)
    logger.info("\nSeeding complete!")
    logger.info(f"Created: {created_count}")
    logger.info(f"Skipped: {skipped_count}")


def setup_parser(subparsers):
    """Setup categories subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "categories",
        help="Manage categories",
        description="Create, list, delete and seed transaction categories",
    )

    categories_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available category commands",
        dest="subcommand",
        required=True,
    )

    list_parser = categories_subparsers.add_parser("list", help="List categories")
    list_parser.add_argument("--user-id", type=int, help="Include this user's categories")
    list_parser.set_defaults(func=cmd_list)

    create_parser = categories_subparsers.add_parser(
        "create", help="Create a custom category"
    )
    create_parser.add_argument("name", help="Category name")
    create_parser.add_argument("--type", required=True, choices=["income", "expense"])
    create_parser.add_argument("--user-id", type=int, required=True)
    create_parser.add_argument("--color", default="#CCCCCC", help="Hex chart color")
    create_parser.set_defaults(func=cmd_create)

    delete_parser = categories_subparsers.add_parser(
        "delete", help="Delete a category by ID"
    )
    delete_parser.add_argument("category_id", type=int, help="ID of the category to delete")
    delete_parser.set_defaults(func=cmd_delete)

    seed_parser = categories_subparsers.add_parser(
        "seed", help="Seed predefined categories from JSON file"
    )
    seed_parser.set_defaults(func=cmd_seed)
