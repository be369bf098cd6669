# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false

"""Tests for the /api/teams endpoints and the membership invariant."""

from fastapi.testclient import TestClient

from main import app

client = TestClient(app)


def _create(user, name="Core Team"):
    return client.post("/api/teams", headers=user["headers"], json={"name": name})


def _member_ids(team_id, headers):
    team = client.get(f"/api/teams/{team_id}", headers=headers).json()["data"]
    return {m["id"] for m in team["members"]}


class TestCreateTeam:
    def test_user_creating_team_becomes_manager(self, make_user, db):
        user = make_user()
        response = _create(user)
        assert response.status_code == 201
        data = response.json()["data"]
        assert data["manager"]["id"] == user["id"]
        assert data["members"] == []
        assert db["users"].find_one({"_id": user["doc"]["_id"]})["role"] == "manager"

    def test_admin_cannot_own_team(self, make_user):
        admin = make_user(role="admin")
        assert _create(admin).status_code == 403

    def test_duplicate_name_is_409(self, make_user):
        first, second = make_user(role="manager"), make_user(role="manager")
        _create(first)
        assert _create(second).status_code == 409

    def test_name_is_trimmed(self, make_user):
        manager = make_user(role="manager")
        data = _create(manager, name="   Spaced Out   ").json()["data"]
        assert data["name"] == "Spaced Out"

    def test_blank_name_is_400(self, make_user):
        manager = make_user(role="manager")
        assert _create(manager, name="      ").status_code == 400


class TestMembers:
    def test_manager_adds_member(self, make_user, db):
        manager, user = make_user(role="manager"), make_user()
        team = _create(manager).json()["data"]
        response = client.post(f"/api/teams/{team['id']}/members", headers=manager["headers"],
                               json={"userId": user["id"]})
        assert response.status_code == 200
        assert response.json()["data"]["membersCount"] == 1
        stored = db["users"].find_one({"_id": user["doc"]["_id"]})
        assert str(stored["team"]) == team["id"]

    def test_admin_adds_member(self, make_user):
        manager, admin, user = make_user(role="manager"), make_user(role="admin"), make_user()
        team = _create(manager).json()["data"]
        response = client.post(f"/api/teams/{team['id']}/members", headers=admin["headers"],
                               json={"userId": user["id"]})
        assert response.status_code == 200

    def test_other_manager_cannot_add(self, make_user):
        owner, other, user = make_user(role="manager"), make_user(role="manager"), make_user()
        team = _create(owner).json()["data"]
        response = client.post(f"/api/teams/{team['id']}/members", headers=other["headers"],
                               json={"userId": user["id"]})
        assert response.status_code == 403

    def test_user_in_other_team_is_409(self, make_user):
        first, second, user = make_user(role="manager"), make_user(role="manager"), make_user()
        team_a = _create(first, "Team Alpha").json()["data"]
        team_b = _create(second, "Team Bravo").json()["data"]
        client.post(f"/api/teams/{team_a['id']}/members", headers=first["headers"], json={"userId": user["id"]})
        response = client.post(f"/api/teams/{team_b['id']}/members", headers=second["headers"],
                               json={"userId": user["id"]})
        assert response.status_code == 409

    def test_remove_member_clears_user_team(self, make_user, db):
        manager, user = make_user(role="manager"), make_user()
        team = _create(manager).json()["data"]
        client.post(f"/api/teams/{team['id']}/members", headers=manager["headers"], json={"userId": user["id"]})
        response = client.post(f"/api/teams/{team['id']}/members/remove", headers=manager["headers"],
                               json={"userId": user["id"]})
        assert response.status_code == 200
        assert _member_ids(team["id"], manager["headers"]) == set()
        assert db["users"].find_one({"_id": user["doc"]["_id"]}).get("team") is None

    def test_remove_non_member_is_404(self, make_user):
        manager, user = make_user(role="manager"), make_user()
        team = _create(manager).json()["data"]
        response = client.post(f"/api/teams/{team['id']}/members/remove", headers=manager["headers"],
                               json={"userId": user["id"]})
        assert response.status_code == 404

    def test_remove_malformed_user_id_is_400(self, make_user):
        manager = make_user(role="manager")
        team = _create(manager).json()["data"]
        response = client.post(f"/api/teams/{team['id']}/members/remove", headers=manager["headers"],
                               json={"userId": "not-an-id"})
        assert response.status_code == 400
        assert "Invalid id format" in response.json()["message"]


class TestReadTeams:
    def test_get_populated_team(self, make_user):
        manager, user = make_user(role="manager", name="Mona Manager"), make_user()
        team = _create(manager).json()["data"]
        client.post(f"/api/teams/{team['id']}/members", headers=manager["headers"], json={"userId": user["id"]})
        data = client.get(f"/api/teams/{team['id']}", headers=user["headers"]).json()["data"]
        assert data["manager"]["name"] == "Mona Manager"
        assert data["members"][0]["id"] == user["id"]

    def test_missing_team_is_404(self, make_user):
        user = make_user()
        assert client.get("/api/teams/65a1b2c3d4e5f6a7b8c9d0e1", headers=user["headers"]).status_code == 404

    def test_paginated_list(self, make_user):
        for i in range(3):
            _create(make_user(role="manager"), name=f"Team number {i}")
        viewer = make_user()
        data = client.get("/api/teams?page=1&limit=2", headers=viewer["headers"]).json()["data"]
        assert len(data["items"]) == 2
        assert data["pagination"]["total"] == 3
        assert data["items"][0]["manager"]["name"]


class TestDeleteTeam:
    def test_only_admin_deletes(self, make_user):
        manager = make_user(role="manager")
        team = _create(manager).json()["data"]
        assert client.delete(f"/api/teams/{team['id']}", headers=manager["headers"]).status_code == 403

    def test_admin_delete_releases_members(self, make_user, db):
        manager, admin, user = make_user(role="manager"), make_user(role="admin"), make_user()
        team = _create(manager).json()["data"]
        client.post(f"/api/teams/{team['id']}/members", headers=manager["headers"], json={"userId": user["id"]})
        response = client.delete(f"/api/teams/{team['id']}", headers=admin["headers"])
        assert response.status_code == 200
        assert db["teams"].count_documents({}) == 0
        assert db["users"].find_one({"_id": user["doc"]["_id"]}).get("team") is None
