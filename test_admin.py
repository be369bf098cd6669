# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false

"""Tests for the admin console: user management, role changes, team assignment, dashboard."""

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from main import app
from taskhub.util import utcnow

client = TestClient(app)


@pytest.fixture
def admin(make_user):
    return make_user(role="admin")


def _team(manager, name="Ops Team"):
    return client.post("/api/manager/team", headers=manager["headers"], json={"name": name}).json()["data"]


class TestUsers:
    def test_list_users(self, admin, make_user):
        make_user()
        data = client.get("/api/admin/users", headers=admin["headers"]).json()["data"]
        assert len(data) == 2

    def test_get_user(self, admin, make_user):
        user = make_user(name="Visible User")
        data = client.get(f"/api/admin/users/{user['id']}", headers=admin["headers"]).json()["data"]
        assert data["name"] == "Visible User"

    def test_get_missing_user_is_404(self, admin):
        response = client.get("/api/admin/users/65a1b2c3d4e5f6a7b8c9d0e1", headers=admin["headers"])
        assert response.status_code == 404

    def test_create_user_requires_reset(self, admin):
        response = client.post("/api/admin/user", headers=admin["headers"], json={
            "name": "New Hire", "email": "hire@example.com", "password": "temp1234", "role": "manager",
        })
        assert response.status_code == 201
        data = response.json()["data"]
        assert data["mustResetPassword"] is True
        assert data["role"] == "manager"
        login = client.post("/api/auth/login", json={"email": "hire@example.com", "password": "temp1234"})
        assert login.json()["data"]["mustResetPassword"] is True

    def test_create_user_bad_role_is_400(self, admin):
        response = client.post("/api/admin/user", headers=admin["headers"], json={
            "name": "New Hire", "email": "hire@example.com", "password": "temp1234", "role": "owner",
        })
        assert response.status_code == 400

    def test_update_user(self, admin, make_user):
        user = make_user()
        response = client.put(f"/api/admin/users/{user['id']}", headers=admin["headers"],
                              json={"name": "Renamed User"})
        assert response.status_code == 200
        assert response.json()["data"]["name"] == "Renamed User"

    def test_update_duplicate_email_is_409(self, admin, make_user):
        first, second = make_user(), make_user()
        response = client.put(f"/api/admin/users/{first['id']}", headers=admin["headers"],
                              json={"email": second["doc"]["email"]})
        assert response.status_code == 409

    def test_update_requires_a_field(self, admin, make_user):
        user = make_user()
        response = client.put(f"/api/admin/users/{user['id']}", headers=admin["headers"], json={})
        assert response.status_code == 400

    def test_admin_cannot_change_own_role(self, admin):
        response = client.put(f"/api/admin/users/{admin['id']}", headers=admin["headers"],
                              json={"role": "user"})
        assert response.status_code == 400


class TestDeleteUser:
    def test_cannot_delete_self(self, admin):
        response = client.delete(f"/api/admin/users/{admin['id']}", headers=admin["headers"])
        assert response.status_code == 400

    def test_cannot_delete_active_manager(self, admin, make_user):
        manager = make_user(role="manager")
        _team(manager)
        response = client.delete(f"/api/admin/users/{manager['id']}", headers=admin["headers"])
        assert response.status_code == 409

    def test_delete_cleans_up_team_and_tasks(self, admin, make_user, due_date, db):
        manager, member = make_user(role="manager"), make_user()
        team = _team(manager)
        client.post(f"/api/manager/team/{team['id']}/add-user/{member['id']}", headers=manager["headers"])
        task = client.post("/api/admin/tasks", headers=admin["headers"],
                           json={"title": "Orphan me", "dueDate": due_date, "assignedTo": member["id"]}).json()["data"]

        response = client.delete(f"/api/admin/users/{member['id']}", headers=admin["headers"])
        assert response.status_code == 200
        assert db["users"].find_one({"_id": member["doc"]["_id"]}) is None
        assert db["teams"].find_one({})["members"] == []
        remaining = client.get(f"/api/tasks/{task['id']}", headers=admin["headers"]).json()["data"]
        assert remaining["assignedTo"] is None


class TestRoles:
    def test_promote_user(self, admin, make_user, publisher):
        user = make_user()
        response = client.post(f"/api/admin/users/{user['id']}/promote", headers=admin["headers"])
        assert response.status_code == 200
        assert response.json()["data"]["role"] == "manager"
        assert publisher.named("notification")

    def test_promote_manager_is_400(self, admin, make_user):
        manager = make_user(role="manager")
        response = client.post(f"/api/admin/users/{manager['id']}/promote", headers=admin["headers"])
        assert response.status_code == 400

    def test_promote_member_leaves_team(self, admin, make_user, db):
        manager, member = make_user(role="manager"), make_user()
        team = _team(manager)
        client.post(f"/api/manager/team/{team['id']}/add-user/{member['id']}", headers=manager["headers"])
        client.post(f"/api/admin/users/{member['id']}/promote", headers=admin["headers"])
        assert db["teams"].find_one({})["members"] == []
        assert db["users"].find_one({"_id": member["doc"]["_id"]}).get("team") is None

    def test_demote_manager(self, admin, make_user):
        manager = make_user(role="manager")
        response = client.post(f"/api/admin/users/{manager['id']}/demote", headers=admin["headers"])
        assert response.status_code == 200
        assert response.json()["data"]["role"] == "user"

    def test_demote_manager_with_team_is_409(self, admin, make_user):
        manager = make_user(role="manager")
        _team(manager)
        response = client.post(f"/api/admin/users/{manager['id']}/demote", headers=admin["headers"])
        assert response.status_code == 409

    def test_demote_user_is_400(self, admin, make_user):
        user = make_user()
        response = client.post(f"/api/admin/users/{user['id']}/demote", headers=admin["headers"])
        assert response.status_code == 400


class TestTeamAssignment:
    def test_assign_moves_between_teams(self, admin, make_user, db):
        first, second, user = make_user(role="manager"), make_user(role="manager"), make_user()
        team_a, team_b = _team(first, "Team Alpha"), _team(second, "Team Bravo")
        client.post(f"/api/admin/users/{user['id']}/assign-team", headers=admin["headers"],
                    json={"teamId": team_a["id"]})
        response = client.post(f"/api/admin/users/{user['id']}/assign-team", headers=admin["headers"],
                               json={"teamId": team_b["id"]})
        assert response.status_code == 200
        assert response.json()["data"]["team"] == team_b["id"]
        assert db["teams"].find_one({"name": "Team Alpha"})["members"] == []
        assert db["teams"].find_one({"name": "Team Bravo"})["members"] == [user["doc"]["_id"]]

    def test_assign_to_same_team_is_409(self, admin, make_user):
        manager, user = make_user(role="manager"), make_user()
        team = _team(manager)
        client.post(f"/api/admin/users/{user['id']}/assign-team", headers=admin["headers"], json={"teamId": team["id"]})
        response = client.post(f"/api/admin/users/{user['id']}/assign-team", headers=admin["headers"],
                               json={"teamId": team["id"]})
        assert response.status_code == 409

    def test_remove_team(self, admin, make_user):
        manager, user = make_user(role="manager"), make_user()
        team = _team(manager)
        client.post(f"/api/admin/users/{user['id']}/assign-team", headers=admin["headers"], json={"teamId": team["id"]})
        response = client.post(f"/api/admin/users/{user['id']}/remove-team", headers=admin["headers"])
        assert response.status_code == 200
        assert response.json()["data"]["team"] is None

    def test_remove_team_without_team_is_400(self, admin, make_user):
        user = make_user()
        response = client.post(f"/api/admin/users/{user['id']}/remove-team", headers=admin["headers"])
        assert response.status_code == 400


class TestAdminTasks:
    def test_create_requires_assignee(self, admin, due_date):
        response = client.post("/api/admin/tasks", headers=admin["headers"],
                               json={"title": "Nobody's task", "dueDate": due_date})
        assert response.status_code == 400

    def test_user_tasks(self, admin, make_user, due_date):
        user = make_user()
        client.post("/api/admin/tasks", headers=admin["headers"],
                    json={"title": "For the user", "dueDate": due_date, "assignedTo": user["id"]})
        data = client.get(f"/api/admin/users/{user['id']}/tasks", headers=admin["headers"]).json()["data"]
        assert [t["title"] for t in data] == ["For the user"]

    def test_delete_task(self, admin, make_user, due_date):
        user = make_user()
        task = client.post("/api/tasks", headers=user["headers"],
                           json={"title": "User task", "dueDate": due_date}).json()["data"]
        response = client.delete(f"/api/admin/tasks/{task['id']}", headers=admin["headers"])
        assert response.status_code == 200


class TestDashboard:
    def test_task_stats_counts_overdue(self, admin, make_user, due_date, db):
        user = make_user()
        task = client.post("/api/tasks", headers=user["headers"],
                           json={"title": "Late task", "dueDate": due_date}).json()["data"]
        client.post("/api/tasks", headers=user["headers"],
                    json={"title": "Finished", "dueDate": due_date, "status": "done"})
        db["tasks"].update_one({"title": "Late task"}, {"$set": {"dueDate": utcnow() - timedelta(days=1)}})

        data = client.get("/api/admin/dashboard/task-stats", headers=admin["headers"]).json()["data"]
        assert data == {"total": 2, "todo": 1, "inProgress": 0, "done": 1, "overdue": 1}
        assert task["id"]

    def test_user_stats(self, admin, make_user):
        make_user()
        make_user()
        make_user(role="manager")
        data = client.get("/api/admin/dashboard/user-stats", headers=admin["headers"]).json()["data"]
        assert data == {"totalUsers": 2, "totalManagers": 1, "totalAdmins": 1}

    def test_managers_and_teams(self, admin, make_user):
        manager, member = make_user(role="manager", name="Team Lead"), make_user()
        team = _team(manager)
        client.post(f"/api/manager/team/{team['id']}/add-user/{member['id']}", headers=manager["headers"])

        managers = client.get("/api/admin/dashboard/managers", headers=admin["headers"]).json()["data"]
        assert [m["name"] for m in managers] == ["Team Lead"]

        teams = client.get("/api/admin/dashboard/teams", headers=admin["headers"]).json()["data"]
        assert teams == [{"id": team["id"], "name": "Ops Team",
                          "manager": {"id": manager["id"], "name": "Team Lead",
                                      "email": manager["doc"]["email"], "role": "manager"},
                          "membersCount": 1}]

    def test_tasks_by_user(self, admin, make_user, due_date):
        busy, idle = make_user(name="Busy Person"), make_user()
        for i in range(2):
            client.post("/api/admin/tasks", headers=admin["headers"],
                        json={"title": f"Busy task {i}", "dueDate": due_date, "assignedTo": busy["id"]})
        client.post("/api/admin/tasks", headers=admin["headers"],
                    json={"title": "Idle task", "dueDate": due_date, "assignedTo": idle["id"]})
        rows = client.get("/api/admin/dashboard/tasks-by-user", headers=admin["headers"]).json()["data"]
        assert rows[0]["userId"] == busy["id"]
        assert rows[0]["user"]["name"] == "Busy Person"
        assert rows[0]["totalTasks"] == 2
        assert rows[1]["totalTasks"] == 1
