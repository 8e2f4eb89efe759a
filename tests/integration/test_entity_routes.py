"""
Integration tests for the generic entity routes.

Tests cover:
- Create (single and bulk), list, get, update, delete
- Sorting, filtering and limits
- Owner scoping (403 for someone else's record, 404 for a missing one)
- Default category seeding
- Delegated access through legacy sharing records
- Share status accepted only by the invitee's Google sign-in
"""

import uuid

from httpx import AsyncClient
from sqlalchemy.exc import OperationalError

from src.integrations.google_identity import GoogleIdentity
from src.repositories.shared_user_repository import SharedUserRepository

NOTE = {"title": "Groceries", "content": "milk, eggs", "tags": ["home"]}
EXPENSE = {
    "type": "Expense",
    "amount": 42.5,
    "category": "food_dining",
    "date": "2026-03-01",
    "paymentMethod": "card",
}


async def create(client: AsyncClient, headers, collection: str, payload):
    response = await client.post(f"/api/entities/{collection}", headers=headers, json=payload)
    assert response.status_code in (200, 201), response.text
    return response.json()["data"]


# ============================================================================
# Create Tests
# ============================================================================
class TestCreate:
    async def test_create_single_record(self, async_client: AsyncClient, alice):
        response = await async_client.post(
            "/api/entities/notes", headers=alice["headers"], json=NOTE
        )

        assert response.status_code == 201
        note = response.json()["data"]
        assert note["title"] == "Groceries"
        assert note["tags"] == ["home"]
        assert note["isPinned"] is False
        assert note["color"] == "#5C8374"
        assert note["created_by"] == "alice@example.com"
        assert note["created_date"]
        assert note["updated_date"]
        uuid.UUID(note["id"])

    async def test_server_fields_cannot_be_forged(self, async_client: AsyncClient, alice):
        forged_id = str(uuid.uuid4())
        note = await create(
            async_client,
            alice["headers"],
            "notes",
            {**NOTE, "id": forged_id, "created_by": "mallory@example.com"},
        )

        assert note["id"] != forged_id
        assert note["created_by"] == "alice@example.com"

    async def test_create_bulk(self, async_client: AsyncClient, alice):
        response = await async_client.post(
            "/api/entities/transactions",
            headers=alice["headers"],
            json=[EXPENSE, {**EXPENSE, "amount": 10, "type": "Income", "category": "salary"}],
        )

        assert response.status_code == 200
        records = response.json()["data"]
        assert [r["amount"] for r in records] == [42.5, 10]
        assert all(r["created_by"] == "alice@example.com" for r in records)

    async def test_bulk_validation_error_names_the_item(self, async_client: AsyncClient, alice):
        response = await async_client.post(
            "/api/entities/transactions",
            headers=alice["headers"],
            json=[EXPENSE, {**EXPENSE, "type": "Gift"}],
        )

        assert response.status_code == 400
        assert response.json()["error"].startswith("Validation error: 1.type")

        listing = await async_client.get("/api/entities/transactions", headers=alice["headers"])
        assert listing.json()["data"] == []

    async def test_empty_body_rejected(self, async_client: AsyncClient, alice):
        for payload in ({}, []):
            response = await async_client.post(
                "/api/entities/notes", headers=alice["headers"], json=payload
            )

            assert response.status_code == 400
            assert response.json()["error"] == "Request body is required"

    async def test_missing_required_field(self, async_client: AsyncClient, alice):
        response = await async_client.post(
            "/api/entities/budgets", headers=alice["headers"], json={"category": "food"}
        )

        assert response.status_code == 400
        assert "monthlyLimit" in response.json()["error"] or "monthly_limit" in response.json()["error"]

    async def test_snapshot_total_pnl_alias(self, async_client: AsyncClient, alice):
        snapshot = await create(
            async_client,
            alice["headers"],
            "snapshots",
            {"date": "2026-03-01", "totalValue": 1000, "totalPnL": 125.5},
        )

        assert snapshot["totalPnL"] == 125.5
        assert snapshot["totalValue"] == 1000

    async def test_unknown_collection(self, async_client: AsyncClient, alice):
        response = await async_client.get("/api/entities/unicorns", headers=alice["headers"])

        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"

    async def test_requires_authentication(self, async_client: AsyncClient):
        response = await async_client.get("/api/entities/notes")

        assert response.status_code == 401


# ============================================================================
# Read Tests
# ============================================================================
class TestRead:
    async def test_list_newest_first(self, async_client: AsyncClient, alice):
        first = await create(async_client, alice["headers"], "notes", {**NOTE, "title": "first"})
        second = await create(async_client, alice["headers"], "notes", {**NOTE, "title": "second"})

        response = await async_client.get("/api/entities/notes", headers=alice["headers"])

        assert response.status_code == 200
        assert [n["id"] for n in response.json()["data"]] == [second["id"], first["id"]]

    async def test_sort_and_limit(self, async_client: AsyncClient, alice):
        for amount in (30, 10, 20):
            await create(async_client, alice["headers"], "transactions", {**EXPENSE, "amount": amount})

        response = await async_client.get(
            "/api/entities/transactions?sort=amount&limit=2", headers=alice["headers"]
        )

        assert [t["amount"] for t in response.json()["data"]] == [10, 20]

    async def test_invalid_sort_field(self, async_client: AsyncClient, alice):
        response = await async_client.get(
            "/api/entities/notes?sort=-shoeSize", headers=alice["headers"]
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid sort field: shoeSize"

    async def test_filter_by_field(self, async_client: AsyncClient, alice):
        await create(async_client, alice["headers"], "notes", {**NOTE, "isPinned": True})
        await create(async_client, alice["headers"], "notes", NOTE)

        response = await async_client.get(
            "/api/entities/notes?isPinned=true", headers=alice["headers"]
        )

        notes = response.json()["data"]
        assert len(notes) == 1
        assert notes[0]["isPinned"] is True

    async def test_filter_on_unknown_field_is_empty(self, async_client: AsyncClient, alice):
        await create(async_client, alice["headers"], "notes", NOTE)

        response = await async_client.get(
            "/api/entities/notes?shoeSize=42", headers=alice["headers"]
        )

        assert response.status_code == 200
        assert response.json()["data"] == []

    async def test_get_single(self, async_client: AsyncClient, alice):
        note = await create(async_client, alice["headers"], "notes", NOTE)

        response = await async_client.get(
            f"/api/entities/notes?id={note['id']}&_single=true", headers=alice["headers"]
        )

        assert response.status_code == 200
        assert response.json()["data"]["id"] == note["id"]

    async def test_id_without_single_returns_array(self, async_client: AsyncClient, alice):
        note = await create(async_client, alice["headers"], "notes", NOTE)

        response = await async_client.get(
            f"/api/entities/notes?id={note['id']}", headers=alice["headers"]
        )

        assert [n["id"] for n in response.json()["data"]] == [note["id"]]

    async def test_get_single_missing(self, async_client: AsyncClient, alice):
        response = await async_client.get(
            f"/api/entities/notes?id={uuid.uuid4()}&_single=true", headers=alice["headers"]
        )

        assert response.status_code == 404

    async def test_lists_are_scoped_to_owner(self, async_client: AsyncClient, alice, bob):
        await create(async_client, alice["headers"], "notes", NOTE)

        response = await async_client.get("/api/entities/notes", headers=bob["headers"])

        assert response.json()["data"] == []


# ============================================================================
# Update / Delete Tests
# ============================================================================
class TestWrite:
    async def test_partial_update(self, async_client: AsyncClient, alice):
        budget = await create(
            async_client, alice["headers"], "budgets", {"category": "food", "monthlyLimit": 300}
        )

        response = await async_client.put(
            f"/api/entities/budgets?id={budget['id']}",
            headers=alice["headers"],
            json={"monthlyLimit": 450, "created_by": "mallory@example.com"},
        )

        assert response.status_code == 200
        updated = response.json()["data"]
        assert updated["monthlyLimit"] == 450
        assert updated["category"] == "food"
        assert updated["alertThreshold"] == 80
        assert updated["created_by"] == "alice@example.com"

    async def test_patch_validates_merged_record(self, async_client: AsyncClient, alice):
        budget = await create(
            async_client, alice["headers"], "budgets", {"category": "food", "monthlyLimit": 300}
        )

        response = await async_client.patch(
            f"/api/entities/budgets?id={budget['id']}",
            headers=alice["headers"],
            json={"alertThreshold": 150},
        )

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    async def test_update_requires_id(self, async_client: AsyncClient, alice):
        response = await async_client.put(
            "/api/entities/notes", headers=alice["headers"], json={"title": "x"}
        )

        assert response.status_code == 400
        assert response.json()["error"] == "ID is required for update. Provide ?id=... in URL"

    async def test_update_someone_elses_record_is_forbidden(
        self, async_client: AsyncClient, alice, bob
    ):
        note = await create(async_client, alice["headers"], "notes", NOTE)

        response = await async_client.put(
            f"/api/entities/notes?id={note['id']}", headers=bob["headers"], json={"title": "mine"}
        )

        assert response.status_code == 403

    async def test_update_missing_record(self, async_client: AsyncClient, alice):
        response = await async_client.put(
            f"/api/entities/notes?id={uuid.uuid4()}", headers=alice["headers"], json={"title": "x"}
        )

        assert response.status_code == 404

    async def test_delete(self, async_client: AsyncClient, alice):
        note = await create(async_client, alice["headers"], "notes", NOTE)

        response = await async_client.delete(
            f"/api/entities/notes?id={note['id']}", headers=alice["headers"]
        )

        assert response.status_code == 200
        assert response.json()["data"] == {"deleted": True, "id": note["id"]}

        again = await async_client.delete(
            f"/api/entities/notes?id={note['id']}", headers=alice["headers"]
        )
        assert again.status_code == 404

    async def test_delete_requires_id(self, async_client: AsyncClient, alice):
        response = await async_client.delete("/api/entities/notes", headers=alice["headers"])

        assert response.status_code == 400
        assert response.json()["error"] == "ID is required for delete. Provide ?id=... in URL"

    async def test_delete_someone_elses_record_is_forbidden(
        self, async_client: AsyncClient, alice, bob
    ):
        note = await create(async_client, alice["headers"], "notes", NOTE)

        response = await async_client.delete(
            f"/api/entities/notes?id={note['id']}", headers=bob["headers"]
        )

        assert response.status_code == 403


# ============================================================================
# Category Seeding Tests
# ============================================================================
class TestCategorySeeding:
    async def test_first_list_seeds_defaults(self, async_client: AsyncClient, alice):
        response = await async_client.get("/api/entities/categories", headers=alice["headers"])

        categories = response.json()["data"]
        assert len(categories) == 23
        assert all(c["isDefault"] for c in categories)
        assert {c["type"] for c in categories} == {"Expense", "Income"}

        again = await async_client.get("/api/entities/categories", headers=alice["headers"])
        assert len(again.json()["data"]) == 23

    async def test_filtered_list_does_not_seed(self, async_client: AsyncClient, alice):
        response = await async_client.get(
            "/api/entities/categories?type=Income", headers=alice["headers"]
        )

        assert response.json()["data"] == []


# ============================================================================
# Legacy Sharing Tests
# ============================================================================
async def sign_in_with_google(client: AsyncClient, identities, email: str) -> None:
    """Google sign-in is what accepts the shares pending for an e-mail."""
    credential = f"cred-{email}"
    identities[credential] = GoogleIdentity(email=email, google_id=f"g-{email}")
    response = await client.post("/api/auth/google", json={"credential": credential})
    assert response.status_code == 200, response.text


class TestLegacySharing:
    async def share(self, client: AsyncClient, owner, email: str, **permissions):
        return await create(
            client,
            owner["headers"],
            "shared-users",
            {"invitedEmail": email, "permissions": permissions},
        )

    async def test_accepted_share_redirects_to_inviter(
        self, async_client: AsyncClient, alice, bob, google_identities
    ):
        await create(async_client, alice["headers"], "notes", NOTE)
        await self.share(async_client, alice, "bob@example.com", viewNotes=True, editNotes=False)
        await sign_in_with_google(async_client, google_identities, "bob@example.com")

        listing = await async_client.get("/api/entities/notes", headers=bob["headers"])
        assert [n["created_by"] for n in listing.json()["data"]] == ["alice@example.com"]

        denied = await async_client.post("/api/entities/notes", headers=bob["headers"], json=NOTE)
        assert denied.status_code == 403
        assert denied.json()["code"] == "INSUFFICIENT_PERMISSIONS"

        permissions = await async_client.get("/api/auth/permissions", headers=bob["headers"])
        assert permissions.json()["data"]["viewNotes"] is True
        assert permissions.json()["data"]["editNotes"] is False

    async def test_sign_in_marks_share_accepted(
        self, async_client: AsyncClient, alice, google_identities
    ):
        shared = await self.share(async_client, alice, "Bob@Example.com", viewNotes=True)
        assert shared["status"] == "pending"

        await sign_in_with_google(async_client, google_identities, "bob@example.com")

        response = await async_client.get(
            f"/api/entities/shared-users?id={shared['id']}&_single=true",
            headers=alice["headers"],
        )
        assert response.json()["data"]["status"] == "accepted"

    async def test_delegated_writes_are_stamped_with_owner(
        self, async_client: AsyncClient, alice, bob, google_identities
    ):
        await self.share(async_client, alice, "bob@example.com", viewGoals=True, editGoals=True)
        await sign_in_with_google(async_client, google_identities, "bob@example.com")

        goal = await create(
            async_client, bob["headers"], "goals", {"name": "House", "targetAmount": 50000}
        )

        assert goal["created_by"] == "alice@example.com"

    async def test_pending_share_keeps_own_data(self, async_client: AsyncClient, alice, bob):
        await create(async_client, alice["headers"], "notes", NOTE)
        await self.share(async_client, alice, "bob@example.com", viewNotes=True)

        listing = await async_client.get("/api/entities/notes", headers=bob["headers"])

        assert listing.json()["data"] == []

    async def test_sharing_records_always_belong_to_caller(
        self, async_client: AsyncClient, alice, bob, google_identities
    ):
        await self.share(async_client, alice, "bob@example.com", viewNotes=True)
        await sign_in_with_google(async_client, google_identities, "bob@example.com")

        response = await async_client.get("/api/entities/shared-users", headers=bob["headers"])

        assert response.status_code == 200
        assert response.json()["data"] == []


# ============================================================================
# Share Status Tests
# ============================================================================
class TestShareStatusIsServerControlled:
    async def test_status_in_create_payload_is_ignored(
        self, async_client: AsyncClient, alice, bob
    ):
        shared = await create(
            async_client,
            alice["headers"],
            "shared-users",
            {"invitedEmail": "bob@example.com", "status": "accepted", "permissions": {}},
        )
        assert shared["status"] == "pending"

        # Bob never accepted, so his writes stay his own
        note = await create(async_client, bob["headers"], "notes", NOTE)
        assert note["created_by"] == "bob@example.com"

        alice_notes = await async_client.get("/api/entities/notes", headers=alice["headers"])
        assert alice_notes.json()["data"] == []

    async def test_status_cannot_be_updated(self, async_client: AsyncClient, alice):
        shared = await create(
            async_client,
            alice["headers"],
            "shared-users",
            {"invitedEmail": "bob@example.com", "permissions": {}},
        )

        response = await async_client.put(
            f"/api/entities/shared-users?id={shared['id']}",
            headers=alice["headers"],
            json={"status": "accepted"},
        )
        assert response.status_code == 400

        current = await async_client.get(
            f"/api/entities/shared-users?id={shared['id']}&_single=true",
            headers=alice["headers"],
        )
        assert current.json()["data"]["status"] == "pending"

    async def test_retargeting_an_accepted_share_resets_it(
        self, async_client: AsyncClient, alice, bob, google_identities
    ):
        shared = await create(
            async_client,
            alice["headers"],
            "shared-users",
            {"invitedEmail": "bob@example.com", "permissions": {"viewNotes": True}},
        )
        await sign_in_with_google(async_client, google_identities, "bob@example.com")

        response = await async_client.put(
            f"/api/entities/shared-users?id={shared['id']}",
            headers=alice["headers"],
            json={"invitedEmail": "carol@example.com"},
        )

        assert response.status_code == 200, response.text
        assert response.json()["data"]["status"] == "pending"


# ============================================================================
# Ownership Lookup Failure Tests
# ============================================================================
class TestShareLookupFailure:
    async def test_entity_request_serves_own_data(
        self, async_client: AsyncClient, bob, monkeypatch
    ):
        async def broken_lookup(self, email: str):
            raise OperationalError("SELECT shared_users", {}, Exception("no such table"))

        monkeypatch.setattr(SharedUserRepository, "find_accepted_for_email", broken_lookup)

        created = await async_client.post("/api/entities/notes", headers=bob["headers"], json=NOTE)
        listing = await async_client.get("/api/entities/notes", headers=bob["headers"])

        assert created.status_code in (200, 201), created.text
        assert created.json()["data"]["created_by"] == "bob@example.com"
        assert [n["title"] for n in listing.json()["data"]] == [NOTE["title"]]
