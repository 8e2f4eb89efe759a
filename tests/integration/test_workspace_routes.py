"""
Integration tests for workspace, membership and invitation routes.

Tests cover:
- Creating, listing, renaming and deleting workspaces
- Inviting members and the member management rules
- Public invitation lookup
- Invitation binding at Google sign-in
- Acting on workspace data via X-Workspace-Id, and isolation between workspaces
"""

import asyncio
import uuid

import pytest
from httpx import AsyncClient

from src.integrations.google_identity import GoogleIdentity


def with_workspace(user, workspace_id: str) -> dict[str, str]:
    return {**user["headers"], "X-Workspace-Id": workspace_id}


async def invite(client: AsyncClient, owner, workspace_id: str, email: str, **extra):
    response = await client.post(
        f"/api/workspaces?id={workspace_id}&action=invite",
        headers=owner["headers"],
        json={"email": email, **extra},
    )
    assert response.status_code == 200, response.text
    return response.json()["data"]


async def google_sign_in(client: AsyncClient, identities, email: str) -> dict[str, str]:
    credential = f"cred-{email}"
    identities[credential] = GoogleIdentity(email=email, google_id=f"g-{email}", name=email)
    response = await client.post("/api/auth/google", json={"credential": credential})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['data']['token']}"}


@pytest.fixture
def workspace_id(alice) -> str:
    return alice["user"]["defaultWorkspace"]


# ============================================================================
# Workspace Lifecycle Tests
# ============================================================================
class TestWorkspaceLifecycle:
    async def test_create_workspace(self, async_client: AsyncClient, alice):
        response = await async_client.post(
            "/api/workspaces", headers=alice["headers"], json={"name": "  Family  "}
        )

        assert response.status_code == 201
        workspace = response.json()["data"]
        assert workspace["name"] == "Family"
        assert workspace["ownerId"] == alice["user"]["id"]
        assert workspace["created_date"]
        assert workspace["updated_date"]
        [owner] = workspace["members"]
        assert owner["userId"] == alice["user"]["id"]
        assert owner["email"] == "alice@example.com"
        assert owner["role"] == "owner"
        assert owner["workspaceId"] == workspace["id"]

    async def test_create_requires_name(self, async_client: AsyncClient, alice):
        response = await async_client.post(
            "/api/workspaces", headers=alice["headers"], json={"name": "   "}
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Workspace name required"

    async def test_list_newest_first(self, async_client: AsyncClient, alice, workspace_id):
        await async_client.post("/api/workspaces", headers=alice["headers"], json={"name": "Second"})

        response = await async_client.get("/api/workspaces", headers=alice["headers"])

        names = [w["name"] for w in response.json()["data"]]
        assert names == ["Second", "My Workspace"]

    async def test_get_one(self, async_client: AsyncClient, alice, workspace_id):
        response = await async_client.get(
            f"/api/workspaces?id={workspace_id}", headers=alice["headers"]
        )

        assert response.status_code == 200
        assert response.json()["data"]["id"] == workspace_id

    async def test_get_foreign_workspace_is_not_found(
        self, async_client: AsyncClient, bob, workspace_id
    ):
        response = await async_client.get(
            f"/api/workspaces?id={workspace_id}", headers=bob["headers"]
        )

        assert response.status_code == 404
        assert response.json()["error"] == "Workspace not found or access denied"

    async def test_rename(self, async_client: AsyncClient, alice, workspace_id):
        response = await async_client.put(
            f"/api/workspaces?id={workspace_id}", headers=alice["headers"], json={"name": "Home"}
        )

        assert response.status_code == 200
        assert response.json()["data"]["name"] == "Home"

    async def test_delete(self, async_client: AsyncClient, alice, workspace_id):
        response = await async_client.delete(
            f"/api/workspaces?id={workspace_id}", headers=alice["headers"]
        )

        assert response.status_code == 200
        assert response.json()["data"] == {"message": "Workspace deleted"}

        listing = await async_client.get("/api/workspaces", headers=alice["headers"])
        assert listing.json()["data"] == []

    async def test_accept_action_is_rejected(self, async_client: AsyncClient, alice):
        response = await async_client.post(
            "/api/workspaces?action=accept", headers=alice["headers"], json={}
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Use the invitation link to accept"

    async def test_requires_authentication(self, async_client: AsyncClient):
        response = await async_client.get("/api/workspaces")

        assert response.status_code == 401


# ============================================================================
# Member Management Tests
# ============================================================================
class TestMembers:
    async def test_invite(self, async_client: AsyncClient, alice, workspace_id):
        data = await invite(
            async_client, alice, workspace_id, "Dave@Example.com", permissions={"viewNotes": True}
        )

        assert data["message"] == "Invitation sent"
        member = data["member"]
        assert member["email"] == "dave@example.com"
        assert member["role"] == "viewer"
        assert member["status"] == "pending"
        assert member["userId"] is None
        assert member["permissions"]["viewNotes"] is True
        assert member["permissions"]["viewPortfolio"] is True
        assert member["permissions"]["editNotes"] is False
        assert len(member["permissions"]) == 12
        assert [m["email"] for m in data["workspace"]["members"]] == [
            "alice@example.com",
            "dave@example.com",
        ]

    async def test_concurrent_invites_for_different_emails(
        self, async_client: AsyncClient, alice, workspace_id
    ):
        await asyncio.gather(
            invite(async_client, alice, workspace_id, "dave@example.com"),
            invite(async_client, alice, workspace_id, "erin@example.com"),
        )

        response = await async_client.get(
            f"/api/workspaces?id={workspace_id}", headers=alice["headers"]
        )

        emails = {m["email"] for m in response.json()["data"]["members"]}
        assert emails == {"alice@example.com", "dave@example.com", "erin@example.com"}

    async def test_invite_requires_email(self, async_client: AsyncClient, alice, workspace_id):
        response = await async_client.post(
            f"/api/workspaces?id={workspace_id}&action=invite",
            headers=alice["headers"],
            json={"role": "viewer"},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Email required"

    async def test_invite_cannot_grant_owner(self, async_client: AsyncClient, alice, workspace_id):
        response = await async_client.post(
            f"/api/workspaces?id={workspace_id}&action=invite",
            headers=alice["headers"],
            json={"email": "dave@example.com", "role": "owner"},
        )

        assert response.status_code == 400

    async def test_duplicate_invite(self, async_client: AsyncClient, alice, workspace_id):
        await invite(async_client, alice, workspace_id, "dave@example.com")

        response = await async_client.post(
            f"/api/workspaces?id={workspace_id}&action=invite",
            headers=alice["headers"],
            json={"email": "DAVE@example.com"},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "User is already a member or invited"

    async def test_update_member(self, async_client: AsyncClient, alice, workspace_id):
        member = (await invite(async_client, alice, workspace_id, "dave@example.com"))["member"]

        response = await async_client.put(
            f"/api/workspaces?id={workspace_id}&action=updateMember&memberId={member['id']}",
            headers=alice["headers"],
            json={"role": "editor", "permissions": {"editNotes": True}},
        )

        assert response.status_code == 200
        updated = response.json()["data"]["members"][1]
        assert updated["role"] == "editor"
        assert updated["permissions"]["editNotes"] is True
        assert updated["permissions"]["viewPortfolio"] is True

    async def test_owner_member_cannot_be_changed(
        self, async_client: AsyncClient, alice, workspace_id
    ):
        response = await async_client.put(
            f"/api/workspaces?id={workspace_id}&action=updateMember&memberId={alice['user']['id']}",
            headers=alice["headers"],
            json={"role": "viewer"},
        )

        assert response.status_code == 403

    async def test_update_unknown_member(self, async_client: AsyncClient, alice, workspace_id):
        response = await async_client.put(
            f"/api/workspaces?id={workspace_id}&action=updateMember&memberId={uuid.uuid4()}",
            headers=alice["headers"],
            json={"role": "viewer"},
        )

        assert response.status_code == 404
        assert response.json()["error"] == "Member not found"

    async def test_remove_member(self, async_client: AsyncClient, alice, workspace_id):
        member = (await invite(async_client, alice, workspace_id, "dave@example.com"))["member"]

        response = await async_client.delete(
            f"/api/workspaces?id={workspace_id}&action=removeMember&memberId={member['id']}",
            headers=alice["headers"],
        )

        assert response.status_code == 200
        assert len(response.json()["data"]["members"]) == 1

    async def test_owner_cannot_be_removed(self, async_client: AsyncClient, alice, workspace_id):
        response = await async_client.delete(
            f"/api/workspaces?id={workspace_id}&action=removeMember&memberId={alice['user']['id']}",
            headers=alice["headers"],
        )

        assert response.status_code == 400


# ============================================================================
# Invitation Lookup Tests
# ============================================================================
class TestInvitationLookup:
    async def test_lookup_pending_invitation(self, async_client: AsyncClient, alice, workspace_id):
        member = (await invite(async_client, alice, workspace_id, "dave@example.com"))["member"]

        response = await async_client.get(f"/api/invitations/{member['id']}")

        assert response.status_code == 200
        invitation = response.json()["data"]
        assert invitation["id"] == member["id"]
        assert invitation["workspaceId"] == workspace_id
        assert invitation["workspaceName"] == "My Workspace"
        assert invitation["invitedEmail"] == "dave@example.com"
        assert invitation["invitedBy"] == "alice@example.com"
        assert invitation["role"] == "viewer"

    async def test_lookup_by_query_parameter(self, async_client: AsyncClient, alice, workspace_id):
        member = (await invite(async_client, alice, workspace_id, "dave@example.com"))["member"]

        response = await async_client.get(f"/api/invitations?token={member['id']}")

        assert response.status_code == 200
        assert response.json()["data"]["id"] == member["id"]

    async def test_missing_token(self, async_client: AsyncClient):
        response = await async_client.get("/api/invitations")

        assert response.status_code == 400
        assert response.json()["error"] == "Invitation token is required"

    @pytest.mark.parametrize("token", ["not-a-uuid", str(uuid.uuid4())])
    async def test_unknown_token(self, async_client: AsyncClient, token):
        response = await async_client.get(f"/api/invitations/{token}")

        assert response.status_code == 404
        assert response.json()["error"] == "Invitation not found"

    async def test_legacy_sharing_record(self, async_client: AsyncClient, alice):
        created = await async_client.post(
            "/api/entities/shared-users",
            headers=alice["headers"],
            json={"invitedEmail": "dave@example.com", "displayName": "Alice's books"},
        )
        record = created.json()["data"]

        response = await async_client.get(f"/api/invitations/{record['id']}")

        assert response.status_code == 200
        invitation = response.json()["data"]
        assert invitation["workspaceId"] is None
        assert invitation["workspaceName"] == "Alice's books"
        assert invitation["invitedBy"] == "alice@example.com"


# ============================================================================
# Google Binding and Workspace Context Tests
# ============================================================================
class TestInvitationBinding:
    async def test_google_sign_in_accepts_invitation(
        self, async_client: AsyncClient, alice, workspace_id, google_identities
    ):
        member = (
            await invite(
                async_client,
                alice,
                workspace_id,
                "dave@example.com",
                permissions={"viewNotes": True},
            )
        )["member"]

        dave_headers = await google_sign_in(async_client, google_identities, "dave@example.com")

        listing = await async_client.get("/api/workspaces", headers=dave_headers)
        shared = next(w for w in listing.json()["data"] if w["id"] == workspace_id)
        bound = next(m for m in shared["members"] if m["id"] == member["id"])
        assert bound["status"] == "accepted"
        assert bound["userId"]

        lookup = await async_client.get(f"/api/invitations/{member['id']}")
        assert lookup.status_code == 400
        assert lookup.json()["error"] == "Invitation has already been accepted"

    async def test_member_sees_workspace_data_with_grant(
        self, async_client: AsyncClient, alice, workspace_id, google_identities
    ):
        await async_client.post(
            "/api/entities/notes",
            headers=with_workspace(alice, workspace_id),
            json={"title": "Plan"},
        )
        await invite(
            async_client, alice, workspace_id, "dave@example.com", permissions={"viewNotes": True}
        )
        dave_headers = await google_sign_in(async_client, google_identities, "dave@example.com")
        headers = {**dave_headers, "X-Workspace-Id": workspace_id}

        notes = await async_client.get("/api/entities/notes", headers=headers)
        assert [n["title"] for n in notes.json()["data"]] == ["Plan"]

        denied = await async_client.post(
            "/api/entities/notes", headers=headers, json={"title": "Mine"}
        )
        assert denied.status_code == 403

        budgets = await async_client.get("/api/entities/budgets", headers=headers)
        assert budgets.status_code == 403

        permissions = await async_client.get("/api/auth/permissions", headers=headers)
        assert permissions.json()["data"]["viewNotes"] is True
        assert permissions.json()["data"]["editNotes"] is False

        own_notes = await async_client.get("/api/entities/notes", headers=dave_headers)
        assert own_notes.json()["data"] == []

    async def test_member_writes_are_stamped_with_workspace(
        self, async_client: AsyncClient, alice, workspace_id, google_identities
    ):
        await invite(
            async_client,
            alice,
            workspace_id,
            "dave@example.com",
            role="editor",
            permissions={"viewNotes": True, "editNotes": True},
        )
        dave_headers = await google_sign_in(async_client, google_identities, "dave@example.com")

        created = await async_client.post(
            "/api/entities/notes",
            headers={**dave_headers, "X-Workspace-Id": workspace_id},
            json={"title": "Shared"},
        )

        assert created.status_code == 201
        assert created.json()["data"]["created_by"] == f"workspace:{workspace_id}"

        in_workspace = await async_client.get(
            "/api/entities/notes", headers=with_workspace(alice, workspace_id)
        )
        assert [n["title"] for n in in_workspace.json()["data"]] == ["Shared"]

        personal = await async_client.get("/api/entities/notes", headers=alice["headers"])
        assert personal.json()["data"] == []

    async def test_foreign_workspace_header_is_ignored(
        self, async_client: AsyncClient, alice, bob, workspace_id
    ):
        await async_client.post(
            "/api/entities/notes", headers=alice["headers"], json={"title": "Private"}
        )

        response = await async_client.get(
            "/api/entities/notes", headers=with_workspace(bob, workspace_id)
        )

        assert response.status_code == 200
        assert response.json()["data"] == []

    async def test_non_owner_cannot_rename_or_invite(
        self, async_client: AsyncClient, alice, workspace_id, google_identities
    ):
        await invite(async_client, alice, workspace_id, "dave@example.com")
        dave_headers = await google_sign_in(async_client, google_identities, "dave@example.com")

        rename = await async_client.put(
            f"/api/workspaces?id={workspace_id}", headers=dave_headers, json={"name": "Mine"}
        )
        assert rename.status_code == 403

        invite_response = await async_client.post(
            f"/api/workspaces?id={workspace_id}&action=invite",
            headers=dave_headers,
            json={"email": "erin@example.com"},
        )
        assert invite_response.status_code == 403

    async def test_member_can_leave(
        self, async_client: AsyncClient, alice, workspace_id, google_identities
    ):
        member = (await invite(async_client, alice, workspace_id, "dave@example.com"))["member"]
        dave_headers = await google_sign_in(async_client, google_identities, "dave@example.com")

        response = await async_client.delete(
            f"/api/workspaces?id={workspace_id}&action=removeMember&memberId={member['id']}",
            headers=dave_headers,
        )

        assert response.status_code == 200
        listing = await async_client.get("/api/workspaces", headers=dave_headers)
        assert workspace_id not in [w["id"] for w in listing.json()["data"]]


# ============================================================================
# Workspace Data Isolation Tests
# ============================================================================
class TestWorkspaceDataIsolation:
    async def create_workspace(self, client: AsyncClient, owner, name: str) -> str:
        response = await client.post(
            "/api/workspaces", headers=owner["headers"], json={"name": name}
        )
        assert response.status_code == 201, response.text
        return response.json()["data"]["id"]

    async def note_titles(self, client: AsyncClient, headers) -> list[str]:
        response = await client.get("/api/entities/notes", headers=headers)
        assert response.status_code == 200, response.text
        return [n["title"] for n in response.json()["data"]]

    async def test_each_workspace_keeps_its_own_records(
        self, async_client: AsyncClient, alice, workspace_id
    ):
        business_id = await self.create_workspace(async_client, alice, "Business")
        await async_client.post(
            "/api/entities/notes",
            headers=with_workspace(alice, workspace_id),
            json={"title": "Family plan"},
        )
        await async_client.post(
            "/api/entities/notes", headers=alice["headers"], json={"title": "Diary"}
        )

        assert await self.note_titles(async_client, with_workspace(alice, workspace_id)) == [
            "Family plan"
        ]
        assert await self.note_titles(async_client, with_workspace(alice, business_id)) == []
        assert await self.note_titles(async_client, alice["headers"]) == ["Diary"]

    async def test_member_of_one_workspace_cannot_read_another(
        self, async_client: AsyncClient, alice, workspace_id, google_identities
    ):
        business_id = await self.create_workspace(async_client, alice, "Business")
        await async_client.post(
            "/api/entities/notes",
            headers=with_workspace(alice, workspace_id),
            json={"title": "Family plan"},
        )
        await invite(
            async_client, alice, business_id, "dave@example.com", permissions={"viewNotes": True}
        )
        dave_headers = await google_sign_in(async_client, google_identities, "dave@example.com")

        in_business = await self.note_titles(
            async_client, {**dave_headers, "X-Workspace-Id": business_id}
        )
        # Not a member of the family workspace: the header is ignored
        in_family = await self.note_titles(
            async_client, {**dave_headers, "X-Workspace-Id": workspace_id}
        )

        assert in_business == []
        assert in_family == []
