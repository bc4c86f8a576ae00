#!/usr/bin/env python3
"""
Data import script for the Vietnamese History Explorer.

Loads MongoDB Extended-JSON exports (`mongoexport --jsonArray`) of the
periods, sub-periods and events collections into the configured database.
Identifiers and references may be plain strings or `{"$oid": ...}`.

Usage:
    python -m app.scripts.import_data --input data/sample
    python -m app.scripts.import_data --input data/sample --clear
"""
import argparse
import json
import logging
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

# Load environment variables before settings are read
load_dotenv()

from app.db.session import SessionLocal, init_db  # noqa: E402
from app.explorer.identifiers import normalize_id  # noqa: E402
from app.models import Event, Period, SubPeriod  # noqa: E402
from app.models.base import new_object_id  # noqa: E402
from app.services import event_service, stats_service  # noqa: E402

logger = logging.getLogger(__name__)


def from_extended_json(value: Any) -> Any:
    """Unwrap canonical-mode number wrappers; `$oid` is left for normalize_id."""
    if isinstance(value, list):
        return [from_extended_json(item) for item in value]
    if isinstance(value, dict):
        if len(value) == 1:
            key, inner = next(iter(value.items()))
            if key in ("$numberInt", "$numberLong"):
                return int(inner)
            if key == "$numberDouble":
                return float(inner)
        return {key: from_extended_json(inner) for key, inner in value.items()}
    return value


def load_documents(path: Path) -> list[dict]:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = [data]
    return [from_extended_json(doc) for doc in data if isinstance(doc, dict)]


def collection_of(path: Path) -> Optional[str]:
    """Which collection an export file holds, judged by its file name."""
    name = path.name.lower()
    if name.endswith("subperiods.json"):
        return "sub_periods"
    if name.endswith("periods.json"):
        return "periods"
    if name.endswith("events.json"):
        return "events"
    return None


class DataImporter:
    """Imports Extended-JSON exports into the database."""

    def __init__(self, session):
        self.db = session
        self.stats = {
            "periods_imported": 0,
            "sub_periods_imported": 0,
            "events_imported": 0,
            "events_skipped": 0,
        }

    def clear_all(self):
        """Delete every document from the three collections."""
        print("Clearing all data...")
        for model in (Event, SubPeriod, Period):
            self.db.query(model).delete()
        self.db.commit()
        print("Data cleared!")

    def import_all(self, input_dir: Path):
        """Import every recognised export file under `input_dir`."""
        print("\n" + "=" * 60)
        print("Importing data to database")
        print("=" * 60)

        files = {"periods": [], "sub_periods": [], "events": []}
        for path in sorted(input_dir.glob("*.json")):
            collection = collection_of(path)
            if collection:
                files[collection].append(path)

        for path in files["periods"]:
            self.import_periods(load_documents(path), path.name)
        for path in files["sub_periods"]:
            self.import_sub_periods(load_documents(path), path.name)
        for path in files["events"]:
            self.import_events(load_documents(path), path.name)

        self.db.commit()
        print("\n" + "=" * 60)
        print("Import Complete!")
        print("=" * 60)

    def import_periods(self, documents: list[dict], source: str = "periods"):
        print(f"\nImporting periods from {source}...")
        for doc in documents:
            self.db.merge(Period(
                id=normalize_id(doc.get("_id")) or new_object_id(),
                name=doc.get("name") or "",
                slug=doc.get("slug"),
                order=doc.get("order") or 0,
                color=doc.get("color"),
                start_year=doc.get("startYear"),
                end_year=doc.get("endYear"),
                description=doc.get("description"),
            ))
            self.stats["periods_imported"] += 1
        print(f"  Imported {self.stats['periods_imported']} periods")

    def import_sub_periods(self, documents: list[dict], source: str = "subPeriods"):
        print(f"\nImporting sub-periods from {source}...")
        for doc in documents:
            self.db.merge(SubPeriod(
                id=normalize_id(doc.get("_id")) or new_object_id(),
                name=doc.get("name") or "",
                order=doc.get("order") or 0,
                color=doc.get("color"),
                period_id=normalize_id(doc.get("periodId")),
                start_year=doc.get("startYear"),
                end_year=doc.get("endYear"),
                description=doc.get("description"),
            ))
            self.stats["sub_periods_imported"] += 1
        print(f"  Imported {self.stats['sub_periods_imported']} sub-periods")

    def import_events(self, documents: list[dict], source: str = "events"):
        print(f"\nImporting events from {source}...")
        for doc in documents:
            if not doc.get("title") or not isinstance(doc.get("date"), dict):
                logger.warning("Skipping event without title or date: %s", doc.get("_id"))
                self.stats["events_skipped"] += 1
                continue

            values = dict(doc)
            values["periodId"] = normalize_id(doc.get("periodId"))
            values["subPeriodId"] = normalize_id(doc.get("subPeriodId"))

            event = Event(id=normalize_id(doc.get("_id")) or new_object_id())
            event_service.apply_document_fields(event, values)
            self.db.merge(event)
            self.stats["events_imported"] += 1
        print(f"  Imported {self.stats['events_imported']} events")

    def print_database_stats(self) -> dict:
        """Print collection totals, warning when the database is empty."""
        totals = stats_service.get_stats(self.db)
        print("\nDatabase statistics:")
        print(f"   - Periods: {totals['totalPeriods']}")
        print(f"   - Sub-periods: {totals['totalSubPeriods']}")
        print(f"   - Events: {totals['totalEvents']}")
        if self.stats["events_skipped"]:
            print(f"   - Events skipped: {self.stats['events_skipped']}")

        if not totals["totalPeriods"] or not totals["totalEvents"]:
            print("Database is empty. Check the input directory for *periods.json and *events.json exports.")
        return totals


def main(argv=None):
    parser = argparse.ArgumentParser(description="Vietnamese History Explorer data importer")
    parser.add_argument(
        "--input",
        type=Path,
        default=Path("data/sample"),
        help="Directory with periods/subPeriods/events JSON exports",
    )
    parser.add_argument(
        "--clear",
        action="store_true",
        help="Clear all data before import",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )

    print("Vietnamese History Explorer Data Importer")
    print(f"Input: {args.input}")

    if not args.input.is_dir():
        parser.error(f"input directory not found: {args.input}")

    init_db()
    session = SessionLocal()
    try:
        importer = DataImporter(session)
        if args.clear:
            importer.clear_all()
        importer.import_all(args.input)
        importer.print_database_stats()
    finally:
        session.close()


if __name__ == "__main__":
    main()
