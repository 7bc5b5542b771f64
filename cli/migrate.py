#!/usr/bin/env python3

from logger import get_logger

logger = get_logger()

MIGRATIONS_TABLE = "schema_migrations"


def ensure_migrations_table(conn):
    conn.execute(f"""
        CREATE TABLE IF NOT EXISTS {MIGRATIONS_TABLE} (
            migration_file TEXT PRIMARY KEY,
            applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    """)
    conn.commit()


def applied_migrations(conn) -> dict:
    """Map of applied migration file name to when it was applied."""
    cursor = conn.execute(
        f"SELECT migration_file, applied_at FROM {MIGRATIONS_TABLE} ORDER BY migration_file"
    )
    return dict(cursor.fetchall())


def migration_files(db_manager) -> list:
    """Migration files on disk, in the order they must run."""
    migrations_dir = db_manager.get_migrations_dir()
    if not migrations_dir.exists():
        return []
    return sorted(migrations_dir.glob("*.sql"), key=lambda path: path.name)


def apply_pending(db_manager, dry_run: bool = False) -> list:
    """Apply every migration not yet recorded.

    Each file runs in its own script; a failing file is rolled back and
    stops the run, leaving earlier files applied.

    Returns:
        Names of the migrations applied (or that would be, on a dry run).
    """
    with db_manager.connect() as conn:
        ensure_migrations_table(conn)
        done = applied_migrations(conn)
        pending = [path for path in migration_files(db_manager) if path.name not in done]

        if dry_run:
            return [path.name for path in pending]

        for path in pending:
            try:
                conn.executescript(path.read_text())
                conn.execute(
                    f"INSERT INTO {MIGRATIONS_TABLE} (migration_file) VALUES (?)",
                    (path.name,),
                )
                conn.commit()
                logger.info(f"Applied migration: {path.name}")
            except Exception as e:
                conn.rollback()
                logger.error(f"Error applying migration {path.name}: {e}")
                raise

    return [path.name for path in pending]


def cmd_status(args, db_manager):
    """Show migration status."""
    if not db_manager.get_db_path().exists():
        logger.info(
            "Database does not exist. Run 'python -m cli migrate apply' to create it."
        )
        return

    with db_manager.connect() as conn:
        ensure_migrations_table(conn)
        done = applied_migrations(conn)

    available = [path.name for path in migration_files(db_manager)]
    if not available:
        logger.info("No migrations found.")
        return

    logger.info("Migration Status:")
    logger.info("================")
    for name in available:
        if name in done:
            logger.info(f"{name}: APPLIED {done[name]}")
        else:
            logger.info(f"{name}: PENDING")

    logger.info(f"\nApplied: {len(done)} of {len(available)}")


def cmd_apply(args, db_manager):
    """Apply pending migrations."""
    names = apply_pending(db_manager, dry_run=args.dry_run)

    if not names:
        logger.info("No pending migrations.")
    elif args.dry_run:
        logger.info("Would apply:")
        for name in names:
            logger.info(f"  {name}")
    else:
        logger.info(f"Successfully applied {len(names)} migration(s).")
        logger.info("Run 'python -m cli categories seed' to add predefined categories.")


def setup_parser(subparsers):
    """Setup migrate subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "migrate",
        help="Database migrations",
        description="Manage database schema migrations",
    )

    migrate_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available migration commands",
        dest="subcommand",
        required=True,
    )

    status_parser = migrate_subparsers.add_parser(
        "status", help="Show migration status"
    )
    status_parser.set_defaults(func=cmd_status)

    apply_parser = migrate_subparsers.add_parser(
        "apply", help="Apply pending migrations"
    )
    apply_parser.add_argument(
        "--dry-run", action="store_true", help="List pending migrations only"
    )
    apply_parser.set_defaults(func=cmd_apply)
