"""
Seed script for transactions.

Downloads the sample product transaction dataset (or reads a local JSON file)
and inserts it into the database. Can be run multiple times - skips
transactions whose id already exists.

Usage:
    python -m transaction_dashboard.scripts.seed_transactions
    python -m transaction_dashboard.scripts.seed_transactions --file data.json --reset
"""

import json
from pathlib import Path
from typing import Any

import httpx
import structlog
from pydantic import TypeAdapter
from sqlalchemy import delete, select
from sqlalchemy.orm import Session

import transaction_dashboard.db.base  # noqa: F401
from transaction_dashboard.core.config import settings
from transaction_dashboard.core.log_config import setup_logging
from transaction_dashboard.db.session import Base, SessionLocal, engine
from transaction_dashboard.transactions.models.transaction import Transaction
from transaction_dashboard.transactions.schemas.transaction import TransactionSeed

logger = structlog.get_logger(__name__)

_records_adapter = TypeAdapter(list[TransactionSeed])


def fetch_records(url: str, timeout: float = 30.0) -> list[dict[str, Any]]:
    """Download the raw dataset."""
    response = httpx.get(url, timeout=timeout, follow_redirects=True)
    response.raise_for_status()
    data: list[dict[str, Any]] = response.json()
    return data


def read_records(path: Path) -> list[dict[str, Any]]:
    data: list[dict[str, Any]] = json.loads(path.read_text(encoding="utf-8"))
    return data


def seed_transactions(
    db: Session, raw_records: list[dict[str, Any]], reset: bool = False
) -> tuple[int, int]:
    """Validate and insert transactions.

    Args:
        db: Database session.
        raw_records: Records in the sample dataset shape (camelCase keys).
        reset: Delete all existing transactions first.

    Returns:
        Tuple of (created, skipped) counts.
    """
    records = _records_adapter.validate_python(raw_records)

    if reset:
        db.execute(delete(Transaction))

    existing_ids = set(db.scalars(select(Transaction.id)))
    created = 0
    skipped = 0
    for record in records:
        if record.id in existing_ids:
            skipped += 1
            continue
        db.add(Transaction(**record.model_dump()))
        existing_ids.add(record.id)
        created += 1

    db.commit()
    logger.info("transactions_seeded", created=created, skipped=skipped, reset=reset)
    return created, skipped


def main() -> None:
    """Main entry point."""
    import argparse

    parser = argparse.ArgumentParser(description="Seed the transactions table")
    parser.add_argument("--url", default=settings.SEED_DATA_URL, help="Dataset URL")
    parser.add_argument("--file", type=Path, help="Read the dataset from a local JSON file")
    parser.add_argument("--reset", action="store_true", help="Delete existing transactions first")
    args = parser.parse_args()

    setup_logging()
    Base.metadata.create_all(engine)

    raw_records = read_records(args.file) if args.file else fetch_records(args.url)
    with SessionLocal() as db:
        seed_transactions(db, raw_records, reset=args.reset)


if __name__ == "__main__":
    main()
