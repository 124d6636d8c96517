"""Tests for the catalog seed and alias backfill scripts."""

from app.scripts.backfill_contractor_aliases import backfill, all_project_ids
from app.scripts.seed_catalog import CATALOG, seed_catalog
from tests.conftest import OWNER_ID, CONTRACTOR_A_ID, CONTRACTOR_B_ID


class TestSeedCatalog:
    def test_seed_is_repeatable(self, fake_db):
        seed_catalog(fake_db)
        seed_catalog(fake_db)
        for table, rows in CATALOG.items():
            assert len(fake_db.rows(table)) == len(rows)


class TestBackfillContractorAliases:
    def test_backfills_every_project(self, fake_db, project):
        other = fake_db.seed("projects", owner_id=OWNER_ID, title="Roof", status="published",
                             bid_status="accepting_bids", bid_count=0)
        fake_db.seed("bids", project_id=project["id"], contractor_id=CONTRACTOR_A_ID, amount=1, status="pending")
        fake_db.seed("messages", project_id=other["id"], sender_id=CONTRACTOR_B_ID, content="hi",
                     message_type="individual")

        counts = backfill(fake_db, all_project_ids(fake_db))

        assert counts == {project["id"]: 1, other["id"]: 1}
        assert fake_db.rows("contractor_aliases", project_id=other["id"])[0]["alias"] == "A"

    def test_missing_project_is_skipped(self, fake_db, project):
        assert backfill(fake_db, ["missing", project["id"]]) == {project["id"]: 0}
