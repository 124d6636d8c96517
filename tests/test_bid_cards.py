"""Tests for bid card endpoints."""

import json

from tests.conftest import OWNER_ID, CONTRACTOR_A_ID, ADMIN_ID

CARD = {
    "title": "Kitchen remodel",
    "description": "Replace cabinets, counters and flooring",
    "zip_code": "94110",
    "budget_min": 10000,
    "budget_max": 20000,
    "job_size": "large",
    "location": {
        "address_line1": "1 Main St",
        "city": "San Francisco",
        "state": "CA",
        "zip_code": "94110",
    },
}


def _create(client, card=None, files=None, submit=False):
    data = {"data": json.dumps(card or CARD)}
    if submit:
        data["submit"] = "true"
    return client.post("/api/v1/bid-cards", data=data, files=files)


class TestCreateBidCard:
    def test_saves_draft(self, client, fake_db, login_as):
        login_as(OWNER_ID)
        response = _create(client)

        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "draft"
        assert body["creator_id"] == OWNER_ID
        assert body["location"]["city"] == "San Francisco"
        assert body["media"] == []

    def test_submit_publishes(self, client, login_as):
        login_as(OWNER_ID)
        assert _create(client, submit=True).json()["status"] == "published"

    def test_status_in_data_does_not_publish(self, client, fake_db, login_as):
        login_as(OWNER_ID)
        response = _create(client, {**CARD, "status": "published"})
        assert response.status_code == 201
        assert response.json()["status"] == "draft"
        assert fake_db.rows("bid_cards")[0]["status"] == "draft"

    def test_files_become_media(self, client, fake_db, login_as):
        login_as(OWNER_ID)
        response = _create(client, files=[
            ("files", ("before.jpg", b"jpeg-bytes", "image/jpeg")),
            ("files", ("plan.pdf", b"pdf-bytes", "application/pdf")),
        ])

        assert response.status_code == 201
        card = response.json()
        media = {m["file_name"]: m for m in card["media"]}
        assert media["before.jpg"]["media_type"] == "photo"
        assert media["plan.pdf"]["media_type"] == "document"
        assert media["before.jpg"]["file_path"].startswith(f"bid-cards/{card['id']}/")
        assert media["before.jpg"]["url"].startswith("https://storage.test/media/")
        assert len(fake_db.storage.from_("media").files) == 2

    def test_catalog_names_attached(self, client, fake_db, login_as):
        category = fake_db.seed("job_categories", name="kitchen", display_name="Kitchen", display_order=1)
        login_as(OWNER_ID)
        response = _create(client, {**CARD, "job_category_id": category["id"]})
        assert response.json()["job_category"] == "Kitchen"

    def test_missing_data_is_400(self, client, login_as):
        login_as(OWNER_ID)
        response = client.post("/api/v1/bid-cards", data={"submit": "true"})
        assert response.status_code == 400

    def test_validation_errors(self, client, login_as):
        login_as(OWNER_ID)
        assert _create(client, {**CARD, "title": "ab"}).status_code == 422
        assert _create(client, {**CARD, "description": "too short"}).status_code == 422
        assert _create(client, {**CARD, "zip_code": "123"}).status_code == 422
        assert _create(client, {**CARD, "budget_min": 50000}).status_code == 422

    def test_oversized_file_is_413(self, client, fake_db, login_as, monkeypatch):
        from app.config import settings
        monkeypatch.setattr(settings, "max_upload_bytes", 3)
        login_as(OWNER_ID)
        response = _create(client, files=[("files", ("big.jpg", b"0123", "image/jpeg"))])
        assert response.status_code == 413
        assert fake_db.rows("bid_cards") == []

    def test_contractor_cannot_create(self, client, login_as):
        login_as(CONTRACTOR_A_ID)
        assert _create(client).status_code == 403


class TestManageBidCard:
    def test_list_only_own_cards(self, client, login_as):
        login_as(OWNER_ID)
        _create(client)
        _create(client, {**CARD, "title": "Second card"})
        login_as(ADMIN_ID)
        _create(client, {**CARD, "title": "Not mine"})

        login_as(OWNER_ID)
        titles = [c["title"] for c in client.get("/api/v1/bid-cards").json()]
        assert titles == ["Second card", "Kitchen remodel"]

    def test_get_requires_creator(self, client, login_as):
        login_as(OWNER_ID)
        card = _create(client).json()
        login_as(ADMIN_ID)
        response = client.get(f"/api/v1/bid-cards/{card['id']}")
        assert response.status_code == 403
        assert response.json()["detail"] == "Unauthorized to access this bid card"

    def test_get_missing(self, client, login_as):
        login_as(OWNER_ID)
        assert client.get("/api/v1/bid-cards/missing").status_code == 404

    def test_patch_updates_and_publishes(self, client, login_as):
        login_as(OWNER_ID)
        card = _create(client).json()
        response = client.patch(
            f"/api/v1/bid-cards/{card['id']}",
            data={"data": json.dumps({"title": "Kitchen and dining"}), "submit": "true"},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["title"] == "Kitchen and dining"
        assert body["status"] == "published"
        assert body["updated_at"] is not None

    def test_patch_checks_merged_budget(self, client, login_as):
        login_as(OWNER_ID)
        card = _create(client).json()
        response = client.patch(f"/api/v1/bid-cards/{card['id']}", data={"data": json.dumps({"budget_max": 500})})
        assert response.status_code == 400

    def test_delete_removes_files_and_media(self, client, fake_db, login_as):
        login_as(OWNER_ID)
        card = _create(client, files=[("files", ("before.jpg", b"jpeg-bytes", "image/jpeg"))]).json()

        assert client.delete(f"/api/v1/bid-cards/{card['id']}").status_code == 204
        assert fake_db.rows("bid_cards") == []
        assert fake_db.rows("bid_card_media") == []
        assert fake_db.storage.from_("media").files == {}

    def test_media_without_file_path_has_no_url(self, client, fake_db, login_as):
        login_as(OWNER_ID)
        card = _create(client).json()
        fake_db.seed("bid_card_media", bid_card_id=card["id"], media_type="photo",
                     file_path=None, file_name="lost.jpg")

        response = client.get(f"/api/v1/bid-cards/{card['id']}")

        assert response.status_code == 200
        [media] = response.json()["media"]
        assert media["file_path"] is None
        assert media["url"] is None
