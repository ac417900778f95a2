"""HTTP tests for the shared expense, settlement and group routes."""
import pytest
from bson import ObjectId

BASE = "/api/v1/shared-expenses"


def equal_expense(**overrides):
    payload = {
        "groupId": "family",
        "paidBy": "alice",
        "paidByName": "Alice",
        "totalAmount": 300,
        "splitType": "equal",
        "description": "Groceries",
        "participants": [
            {"userId": "alice", "userName": "Alice"},
            {"userId": "bob", "userName": "Bob"},
            {"userId": "carol", "userName": "Carol"},
        ],
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def post_expense(client, auth_headers):
    def _post(payload, user_id="alice"):
        return client.post(f"{BASE}/", json=payload, headers=auth_headers(user_id))
    return _post


class TestCreateExpense:

    def test_equal_split(self, post_expense):
        response = post_expense(equal_expense())
        assert response.status_code == 201
        body = response.get_json()
        assert ObjectId.is_valid(body["_id"])
        assert body["createdBy"] == "alice"
        assert body["groupName"] == "Family"
        assert body["totalAmount"] == 300.0
        assert [p["amountOwed"] for p in body["participants"]] == [100.0, 100.0, 100.0]
        assert [p["hasPaid"] for p in body["participants"]] == [True, False, False]

    def test_percentage_split(self, post_expense):
        response = post_expense(equal_expense(
            totalAmount=500,
            splitType="percentage",
            participants=[
                {"userId": "alice", "userName": "Alice", "percentage": 60},
                {"userId": "bob", "userName": "Bob", "percentage": 40},
            ],
        ))
        assert response.status_code == 201
        participants = response.get_json()["participants"]
        assert [p["amountOwed"] for p in participants] == [300.0, 200.0]
        assert [p["percentage"] for p in participants] == [60.0, 40.0]

    def test_custom_split_accepts_string_amounts(self, post_expense):
        response = post_expense(equal_expense(
            totalAmount="100.00",
            splitType="custom",
            participants=[
                {"userId": "alice", "userName": "Alice", "customAmount": "25.50"},
                {"userId": "bob", "userName": "Bob", "customAmount": "74.50"},
            ],
        ))
        assert response.status_code == 201
        assert [p["amountOwed"] for p in response.get_json()["participants"]] == [25.5, 74.5]

    def test_user_defined_group_names(self, post_expense):
        named = post_expense(equal_expense(groupId="flat-42", groupName="Flat 42"))
        assert named.get_json()["groupName"] == "Flat 42"
        unnamed = post_expense(equal_expense(groupId="flat-43"))
        assert unnamed.get_json()["groupName"] == "flat-43"

    def test_explicit_date(self, post_expense):
        response = post_expense(equal_expense(date="2024-05-01T19:00:00Z"))
        assert response.get_json()["date"].startswith("2024-05-01T19:00:00")

    @pytest.mark.parametrize("missing", ["groupId", "paidBy", "totalAmount", "splitType", "participants"])
    def test_missing_required_field(self, post_expense, missing):
        payload = equal_expense()
        del payload[missing]
        response = post_expense(payload)
        assert response.status_code == 400
        assert missing in response.get_json()["error"]

    def test_participant_without_name(self, post_expense):
        response = post_expense(equal_expense(participants=[{"userId": "bob"}]))
        assert response.status_code == 400

    @pytest.mark.parametrize("overrides", [
        {"splitType": "weighted"},
        {"totalAmount": "abc"},
        {"participants": []},
        {"date": "yesterday"},
    ])
    def test_malformed_fields(self, post_expense, overrides):
        assert post_expense(equal_expense(**overrides)).status_code == 400

    @pytest.mark.parametrize("amount", ["1E+7000", "1E-7000"])
    def test_amount_outside_storable_range(self, client, auth_headers, post_expense, amount):
        response = post_expense(equal_expense(totalAmount=amount))
        assert response.status_code == 400
        assert response.get_json() == {"error": "totalAmount is out of range"}

        custom = post_expense(equal_expense(splitType="custom", participants=[
            {"userId": "bob", "userName": "Bob", "customAmount": amount},
        ]))
        assert custom.status_code == 400

        listed = client.get(f"{BASE}/group/family", headers=auth_headers())
        assert listed.get_json() == []

    @pytest.mark.parametrize("overrides", [
        {"totalAmount": 0},
        {"splitType": "percentage", "participants": [
            {"userId": "alice", "userName": "Alice", "percentage": 60},
            {"userId": "bob", "userName": "Bob", "percentage": 39},
        ]},
        {"splitType": "custom", "participants": [
            {"userId": "alice", "userName": "Alice", "customAmount": 100},
            {"userId": "bob", "userName": "Bob", "customAmount": 100},
        ]},
    ])
    def test_invalid_split_is_not_persisted(self, client, auth_headers, post_expense, overrides):
        response = post_expense(equal_expense(**overrides))
        assert response.status_code == 400
        assert "error" in response.get_json()

        listed = client.get(f"{BASE}/group/family", headers=auth_headers())
        assert listed.get_json() == []

    def test_requires_token(self, client):
        assert client.post(f"{BASE}/", json=equal_expense()).status_code == 401

    def test_non_json_body(self, client, auth_headers):
        response = client.post(f"{BASE}/", data="nope", headers=auth_headers())
        assert response.status_code == 400


class TestReadExpenses:

    def test_get_one(self, client, auth_headers, post_expense):
        expense_id = post_expense(equal_expense()).get_json()["_id"]
        response = client.get(f"{BASE}/{expense_id}", headers=auth_headers())
        assert response.status_code == 200
        assert response.get_json()["_id"] == expense_id

    def test_get_missing(self, client, auth_headers):
        response = client.get(f"{BASE}/{ObjectId()}", headers=auth_headers())
        assert response.status_code == 404
        assert response.get_json() == {"error": "Expense not found"}

    def test_list_by_group_and_user(self, client, auth_headers, post_expense):
        post_expense(equal_expense())
        post_expense(equal_expense(groupId="trip", paidBy="dave", participants=[
            {"userId": "dave", "userName": "Dave"},
            {"userId": "erin", "userName": "Erin"},
        ]), user_id="dave")

        family = client.get(f"{BASE}/group/family", headers=auth_headers()).get_json()
        assert [e["groupId"] for e in family] == ["family"]

        bob = client.get(f"{BASE}/user/bob", headers=auth_headers()).get_json()
        assert [e["groupId"] for e in bob] == ["family"]

        erin = client.get(f"{BASE}/user/erin", headers=auth_headers()).get_json()
        assert [e["groupId"] for e in erin] == ["trip"]


class TestMarkPaid:

    def test_marks_and_is_idempotent(self, client, auth_headers, post_expense):
        expense_id = post_expense(equal_expense()).get_json()["_id"]
        url = f"{BASE}/{expense_id}/mark-paid/bob"

        first = client.put(url, headers=auth_headers())
        assert first.status_code == 200
        assert [p["hasPaid"] for p in first.get_json()["participants"]] == [True, True, False]

        second = client.put(url, headers=auth_headers())
        assert second.status_code == 200
        assert second.get_json()["participants"] == first.get_json()["participants"]
        assert second.get_json()["updatedAt"] == first.get_json()["updatedAt"]

    def test_unknown_participant(self, client, auth_headers, post_expense):
        expense_id = post_expense(equal_expense()).get_json()["_id"]
        response = client.put(f"{BASE}/{expense_id}/mark-paid/mallory", headers=auth_headers())
        assert response.status_code == 404
        assert response.get_json() == {"error": "Participant not found"}

    @pytest.mark.parametrize("expense_id", [str(ObjectId()), "bogus"])
    def test_unknown_expense(self, client, auth_headers, expense_id):
        response = client.put(f"{BASE}/{expense_id}/mark-paid/bob", headers=auth_headers())
        assert response.status_code == 404


class TestDeleteExpense:

    def test_delete_then_gone(self, client, auth_headers, post_expense):
        expense_id = post_expense(equal_expense()).get_json()["_id"]

        response = client.delete(f"{BASE}/{expense_id}", headers=auth_headers())
        assert response.status_code == 200
        assert response.get_json()["_id"] == expense_id

        assert client.delete(f"{BASE}/{expense_id}", headers=auth_headers()).status_code == 404

        balance = client.get("/api/v1/settlements/balance/family/alice", headers=auth_headers())
        assert balance.get_json()["totalOwedToUser"] == 0.0


class TestSettlements:

    def test_balance_of_payer(self, client, auth_headers, post_expense):
        post_expense(equal_expense())
        response = client.get("/api/v1/settlements/balance/family/alice", headers=auth_headers())
        assert response.status_code == 200
        assert response.get_json() == {
            "groupId": "family",
            "userId": "alice",
            "totalOwed": 0.0,
            "totalOwedToUser": 200.0,
            "netBalance": 200.0,
        }

    def test_balance_of_empty_group(self, client, auth_headers):
        response = client.get("/api/v1/settlements/balance/nobody/alice", headers=auth_headers())
        body = response.get_json()
        assert (body["totalOwed"], body["totalOwedToUser"], body["netBalance"]) == (0.0, 0.0, 0.0)

    def test_plan_nets_reciprocal_debts(self, client, auth_headers, post_expense):
        post_expense(equal_expense(
            paidBy="bob", paidByName="Bob", totalAmount=100, splitType="custom",
            participants=[{"userId": "alice", "userName": "Alice", "customAmount": 100}],
        ))
        post_expense(equal_expense(
            totalAmount=40, splitType="custom",
            participants=[{"userId": "bob", "userName": "Bob", "customAmount": 40}],
        ))

        response = client.get("/api/v1/settlements/plan/family", headers=auth_headers())
        assert response.status_code == 200
        assert response.get_json() == {
            "groupId": "family",
            "transfers": [
                {"from": "alice", "fromName": "Alice", "to": "bob", "toName": "Bob", "amount": 60.0},
            ],
            "totalAmount": 60.0,
        }

    def test_plan_is_empty_once_everyone_paid(self, client, auth_headers, post_expense):
        expense_id = post_expense(equal_expense()).get_json()["_id"]
        for user_id in ("bob", "carol"):
            client.put(f"{BASE}/{expense_id}/mark-paid/{user_id}", headers=auth_headers())

        plan = client.get("/api/v1/settlements/plan/family", headers=auth_headers()).get_json()
        assert plan["transfers"] == []
        for user_id in ("alice", "bob", "carol"):
            body = client.get(
                f"/api/v1/settlements/balance/family/{user_id}", headers=auth_headers()
            ).get_json()
            assert (body["totalOwed"], body["totalOwedToUser"], body["netBalance"]) == (0.0, 0.0, 0.0)


class TestGroups:

    def test_lists_configured_groups(self, client, auth_headers):
        response = client.get("/api/v1/groups/", headers=auth_headers())
        assert response.status_code == 200
        assert response.get_json() == {"groups": [
            {"id": "family", "name": "Family"},
            {"id": "trip", "name": "Goa Trip"},
        ]}
