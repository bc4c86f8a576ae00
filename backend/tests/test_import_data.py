"""
Tests for the Extended-JSON import script.
"""
import json
from pathlib import Path

import pytest

from app.models import Event, Period, SubPeriod
from app.scripts.import_data import DataImporter, collection_of, from_extended_json, load_documents

SAMPLE_DIR = Path(__file__).resolve().parents[2] / "data" / "sample"


class TestExtendedJson:
    def test_number_wrappers(self):
        doc = {"date": {"year": {"$numberInt": "-257"}}, "weight": {"$numberDouble": "1.5"}}
        assert from_extended_json(doc) == {"date": {"year": -257}, "weight": 1.5}

    def test_oid_is_left_alone(self):
        assert from_extended_json({"_id": {"$oid": "abc"}}) == {"_id": {"$oid": "abc"}}

    def test_collection_of(self):
        assert collection_of(Path("subPeriods.json")) == "sub_periods"
        assert collection_of(Path("vn_periods.json")) == "periods"
        assert collection_of(Path("events.json")) == "events"
        assert collection_of(Path("notes.json")) is None

    def test_single_document_file(self, tmp_path):
        path = tmp_path / "events.json"
        path.write_text(json.dumps({"_id": "x", "title": "One"}), encoding="utf-8")
        assert load_documents(path) == [{"_id": "x", "title": "One"}]


class TestDataImporter:
    def test_import_sample(self, db_session, capsys):
        importer = DataImporter(db_session)
        importer.import_all(SAMPLE_DIR)
        totals = importer.print_database_stats()

        assert totals["totalPeriods"] == 4
        assert totals["totalSubPeriods"] == 4
        assert totals["totalEvents"] == 8
        assert "Database statistics" in capsys.readouterr().out

        bach_dang = db_session.get(Event, "65a1f2000000000000000004")
        assert bach_dang.period_id == "65a1f0000000000000000003"
        assert bach_dang.year == 938
        assert bach_dang.latitude == pytest.approx(20.9489)

        sub_period = db_session.get(SubPeriod, "65a1f1000000000000000002")
        assert sub_period.period_id == "65a1f0000000000000000003"

    def test_reimport_merges(self, db_session):
        importer = DataImporter(db_session)
        importer.import_all(SAMPLE_DIR)
        importer.import_all(SAMPLE_DIR)
        assert db_session.query(Period).count() == 4
        assert db_session.query(Event).count() == 8

    def test_skips_invalid_events(self, db_session):
        importer = DataImporter(db_session)
        importer.import_events([
            {"_id": "ok", "title": "Valid", "date": {"year": 1}},
            {"_id": "no-date", "title": "Missing date"},
            {"_id": "no-title", "date": {"year": 2}},
        ])
        db_session.commit()
        assert importer.stats == {
            "periods_imported": 0,
            "sub_periods_imported": 0,
            "events_imported": 1,
            "events_skipped": 2,
        }

    def test_clear_all(self, db_session):
        importer = DataImporter(db_session)
        importer.import_all(SAMPLE_DIR)
        importer.clear_all()
        assert db_session.query(Event).count() == 0
        assert db_session.query(Period).count() == 0

    def test_empty_database_warning(self, db_session, capsys):
        DataImporter(db_session).print_database_stats()
        assert "Database is empty" in capsys.readouterr().out
