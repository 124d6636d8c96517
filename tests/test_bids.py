"""Tests for bid submission and review."""

from tests.conftest import OWNER_ID, CONTRACTOR_A_ID, CONTRACTOR_B_ID, ADMIN_ID

BID = {"amount": 15000, "description": "Cabinets and counters", "materials_included": True}


def _submit(client, project, payload=None):
    return client.post(f"/api/v1/projects/{project['id']}/bids", json=payload or BID)


class TestSubmitBid:
    def test_contractor_submits_bid(self, client, fake_db, project, login_as):
        login_as(CONTRACTOR_A_ID)
        response = _submit(client, project)

        assert response.status_code == 201
        bid = response.json()
        assert bid["status"] == "pending"
        assert bid["contractor_alias"] == "A"
        assert bid["materials_included"] is True
        assert fake_db.rows("projects", id=project["id"])[0]["bid_count"] == 1

    def test_resubmitting_updates_pending_bid(self, client, fake_db, project, login_as):
        login_as(CONTRACTOR_A_ID)
        first = _submit(client, project).json()
        second = _submit(client, project, {"amount": 14000}).json()

        assert second["id"] == first["id"]
        assert second["amount"] == 14000
        assert len(fake_db.rows("bids", project_id=project["id"])) == 1

    def test_owner_cannot_bid_on_own_project(self, client, fake_db, project, login_as):
        fake_db.seed("profiles", id="owner-contractor", user_type="contractor", full_name="Self Bidder")
        fake_db.tables["projects"][0]["owner_id"] = "owner-contractor"
        login_as("owner-contractor")
        assert _submit(client, project).status_code == 400

    def test_project_not_accepting_bids(self, client, fake_db, project, login_as):
        fake_db.tables["projects"][0]["status"] = "draft"
        login_as(CONTRACTOR_A_ID)
        assert _submit(client, project).status_code == 409

    def test_bidding_closed(self, client, fake_db, project, login_as):
        fake_db.tables["projects"][0]["bid_status"] = "completed"
        login_as(CONTRACTOR_A_ID)
        assert _submit(client, project).status_code == 409

    def test_non_pending_bid_cannot_change(self, client, fake_db, project, login_as):
        fake_db.seed("bids", project_id=project["id"], contractor_id=CONTRACTOR_A_ID, amount=100, status="rejected")
        login_as(CONTRACTOR_A_ID)
        assert _submit(client, project).status_code == 409

    def test_amount_must_be_positive(self, client, project, login_as):
        login_as(CONTRACTOR_A_ID)
        assert _submit(client, project, {"amount": 0}).status_code == 422

    def test_homeowner_lacks_bid_permission(self, client, project, login_as):
        login_as(ADMIN_ID)  # homeowner profile without admin app_metadata
        assert _submit(client, project).status_code == 403

    def test_missing_project(self, client, login_as):
        login_as(CONTRACTOR_A_ID)
        response = client.post("/api/v1/projects/missing/bids", json=BID)
        assert response.status_code == 404


class TestReviewBids:
    def _two_bids(self, client, project, login_as):
        login_as(CONTRACTOR_A_ID)
        a = _submit(client, project, {"amount": 20000}).json()
        login_as(CONTRACTOR_B_ID)
        b = _submit(client, project, {"amount": 12000}).json()
        return a, b

    def test_owner_lists_bids_cheapest_first(self, client, project, login_as):
        self._two_bids(client, project, login_as)
        login_as(OWNER_ID)
        response = client.get(f"/api/v1/projects/{project['id']}/bids")

        assert response.status_code == 200
        assert [(b["amount"], b["contractor_alias"]) for b in response.json()] == [(12000, "B"), (20000, "A")]

    def test_contractor_cannot_list_project_bids(self, client, project, login_as):
        self._two_bids(client, project, login_as)
        login_as(CONTRACTOR_A_ID)
        assert client.get(f"/api/v1/projects/{project['id']}/bids").status_code == 403

    def test_accept_rejects_others_and_starts_project(self, client, fake_db, project, login_as):
        a, b = self._two_bids(client, project, login_as)
        login_as(OWNER_ID)
        response = client.post(f"/api/v1/bids/{b['id']}/accept")

        assert response.status_code == 200
        assert response.json()["status"] == "accepted"
        assert fake_db.rows("bids", id=a["id"])[0]["status"] == "rejected"
        stored_project = fake_db.rows("projects", id=project["id"])[0]
        assert stored_project["status"] == "in_progress"
        assert stored_project["bid_status"] == "completed"

    def test_accept_twice_conflicts(self, client, project, login_as):
        _, b = self._two_bids(client, project, login_as)
        login_as(OWNER_ID)
        client.post(f"/api/v1/bids/{b['id']}/accept")
        assert client.post(f"/api/v1/bids/{b['id']}/accept").status_code == 409

    def test_reject(self, client, project, login_as):
        a, _ = self._two_bids(client, project, login_as)
        login_as(OWNER_ID)
        response = client.post(f"/api/v1/bids/{a['id']}/reject")
        assert response.json()["status"] == "rejected"

    def test_only_owner_reviews(self, client, project, login_as):
        a, _ = self._two_bids(client, project, login_as)
        fake_owner = "66666666-6666-6666-6666-666666666666"
        login_as(fake_owner)
        # no profile, so no permissions at all
        assert client.post(f"/api/v1/bids/{a['id']}/accept").status_code == 403

    def test_withdraw_own_bid_updates_count(self, client, fake_db, project, login_as):
        a, _ = self._two_bids(client, project, login_as)
        login_as(CONTRACTOR_A_ID)
        response = client.post(f"/api/v1/bids/{a['id']}/withdraw")

        assert response.status_code == 200
        assert response.json()["status"] == "withdrawn"
        assert fake_db.rows("projects", id=project["id"])[0]["bid_count"] == 1

    def test_cannot_withdraw_someone_elses_bid(self, client, project, login_as):
        a, _ = self._two_bids(client, project, login_as)
        login_as(CONTRACTOR_B_ID)
        assert client.post(f"/api/v1/bids/{a['id']}/withdraw").status_code == 403

    def test_unknown_bid(self, client, login_as):
        login_as(OWNER_ID)
        assert client.post("/api/v1/bids/missing/accept").status_code == 404

    def test_my_bids(self, client, project, login_as):
        self._two_bids(client, project, login_as)
        login_as(CONTRACTOR_B_ID)
        response = client.get("/api/v1/bids/mine")
        assert [b["amount"] for b in response.json()] == [12000]
