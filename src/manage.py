"""Orderflow management CLI.

Schema management and outbox inspection for operators.

Usage:
    python src/manage.py setup-db                  # Create all tables
    python src/manage.py drop-db                   # Drop all tables
    python src/manage.py outbox-status             # Row counts per outbox status
    python src/manage.py requeue-failed --max-retries 3
    python src/manage.py reclaim-stuck --older-than 600
"""

import argparse
import sys


def setup_database():
    from orderflow.domain import orderflow
    from orderflow.utils.db import setup_db

    print("Initializing orderflow domain...")
    orderflow.init()
    print("Creating database schema...")
    setup_db(orderflow)
    print("Done.")


def drop_database():
    from orderflow.domain import orderflow
    from orderflow.utils.db import drop_db

    print("Initializing orderflow domain...")
    orderflow.init()
    print("Dropping database schema...")
    drop_db(orderflow)
    print("Done.")


def outbox_status():
    from orderflow.domain import orderflow
    from orderflow.outbox.store import OutboxStore

    orderflow.init()
    with orderflow.domain_context():
        counts = OutboxStore().count_by_status()

    for status, count in counts.items():
        print(f"{status:<12} {count}")
    return counts


def requeue_failed(max_retries=None):
    from orderflow.bootstrap import build_processor
    from orderflow.domain import orderflow

    orderflow.init()
    with orderflow.domain_context():
        requeued = build_processor().requeue_failed(max_retries)

    print(f"Re-queued {requeued} failed outbox record(s).")
    return requeued


def reclaim_stuck(older_than=None, max_retries=None):
    from orderflow.bootstrap import build_processor
    from orderflow.domain import orderflow
    from orderflow.outbox.processor import outbox_settings

    orderflow.init()
    with orderflow.domain_context():
        if older_than is None:
            older_than = outbox_settings()["processing_timeout_seconds"]
        released = build_processor().reclaim_stuck(older_than, max_retries)

    print(f"Released {released} stuck outbox record(s).")
    return released


def main():
    parser = argparse.ArgumentParser(description="Orderflow management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")
    subparsers.add_parser("outbox-status", help="Show outbox row counts per status")

    requeue_parser = subparsers.add_parser("requeue-failed", help="Send FAILED outbox rows back to PENDING")
    requeue_parser.add_argument(
        "--max-retries",
        type=int,
        help="Skip rows re-queued this many times already (default: from domain.toml)",
    )

    reclaim_parser = subparsers.add_parser(
        "reclaim-stuck", help="Send PROCESSING rows abandoned by a crashed tick back to PENDING"
    )
    reclaim_parser.add_argument(
        "--older-than",
        type=float,
        help="Seconds since the row was claimed (default: from domain.toml)",
    )
    reclaim_parser.add_argument("--max-retries", type=int, help="Fail rows attempted this many times instead")

    args = parser.parse_args()

    from orderflow.utils.logging import configure_logging

    configure_logging()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "outbox-status":
        outbox_status()
    elif args.command == "requeue-failed":
        requeue_failed(args.max_retries)
    elif args.command == "reclaim-stuck":
        reclaim_stuck(args.older_than, args.max_retries)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
