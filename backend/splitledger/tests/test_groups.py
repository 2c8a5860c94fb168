"""
Tests for group and member endpoints.
"""
from splitledger.models.group import GroupInvite, GroupMember
from splitledger.models.transaction import Transaction, TransactionSplit


def _shared_expense(client, group):
    response = client.post("/api/transactions", json={
        "type": "expense",
        "amount": "30.00",
        "description": "Pizza",
        "date": "2024-03-10T20:00:00",
        "paidBy": "Alice",
        "isShared": True,
        "groupId": group["id"],
    })
    assert response.status_code == 201
    return response.json()


def test_create_group(client, group, publisher):
    """Test group creation with initial members."""
    assert group["memberCount"] == 3
    assert [member["name"] for member in group["members"]] == ["Alice", "Bob", "Carol"]
    assert publisher.events() == ["group_created"]


def test_create_group_rejects_blank_name(client):
    assert client.post("/api/groups", json={"name": ""}).status_code == 422
    assert client.post("/api/groups", json={"name": "   "}).status_code == 422


def test_list_groups_newest_first(client, group):
    client.post("/api/groups", json={"name": "Road trip"})

    response = client.get("/api/groups")

    assert [g["name"] for g in response.json()] == ["Road trip", "Flat 4B"]


def test_get_unknown_group(client):
    assert client.get("/api/groups/999").status_code == 404


def test_add_member(client, group, publisher):
    response = client.post(f"/api/groups/{group['id']}/members", json={"name": "Dave", "openingBalance": "-5"})

    assert response.status_code == 201
    assert response.json()["groupId"] == group["id"]
    assert client.get(f"/api/groups/{group['id']}").json()["memberCount"] == 4
    assert "group_member_added" in publisher.events()


def test_add_member_rejects_bad_email(client, group):
    response = client.post(f"/api/groups/{group['id']}/members", json={"name": "Dave", "email": "nope"})

    assert response.status_code == 422


def test_remove_member_keeps_split_name(client, group, db_session):
    _shared_expense(client, group)
    bob = next(member for member in group["members"] if member["name"] == "Bob")

    response = client.delete(f"/api/groups/{group['id']}/members/{bob['id']}")

    assert response.status_code == 200
    split = db_session.query(TransactionSplit).filter(TransactionSplit.member_name == "Bob").one()
    db_session.refresh(split)
    assert split.member_id is None


def test_member_of_other_group_is_not_found(client, group):
    other = client.post("/api/groups", json={"name": "Other"}).json()
    alice = group["members"][0]

    response = client.patch(f"/api/groups/{other['id']}/members/{alice['id']}", json={"name": "Al"})

    assert response.status_code == 404


def test_delete_group_cascades(client, group, db_session):
    _shared_expense(client, group)
    client.post(f"/api/groups/{group['id']}/invites", json={})

    response = client.delete(f"/api/groups/{group['id']}")

    assert response.status_code == 200
    assert db_session.query(GroupMember).count() == 0
    assert db_session.query(GroupInvite).count() == 0
    assert db_session.query(Transaction).count() == 0
    assert db_session.query(TransactionSplit).count() == 0
