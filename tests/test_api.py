"""API integration tests for the Personal Finance Tracker."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from finance_tracker.api.dependencies import get_store
from finance_tracker.core.errors import StoreError
from finance_tracker.core.models import Transaction, TransactionDraft
from finance_tracker.services.store import TransactionStore

PATH = "/api/transactions"
HTTP_200_OK = 200
HTTP_201_CREATED = 201
HTTP_400_BAD_REQUEST = 400
HTTP_404_NOT_FOUND = 404
HTTP_405_METHOD_NOT_ALLOWED = 405
HTTP_500_INTERNAL_SERVER_ERROR = 500

MISSING_FIELDS = "Missing required fields: description, amount, date"


def create(client: TestClient, **body: object) -> dict:
    """POST a transaction and return the created record."""
    response = client.post(PATH, json=body)
    if response.status_code != HTTP_201_CREATED:
        msg = f"Expected status {HTTP_201_CREATED}, got {response.status_code}: {response.text}"
        raise AssertionError(msg)
    return response.json()


def delete(client: TestClient, body: dict) -> object:
    """DELETE with a JSON body."""
    return client.request("DELETE", PATH, json=body)


def expect_error(response: object, status: int, message: str) -> None:
    """Check a failed response's status and ``{"error": ...}`` body."""
    if response.status_code != status:
        msg = f"Expected status {status}, got {response.status_code}: {response.text}"
        raise AssertionError(msg)
    if response.json() != {"error": message}:
        msg = f"Expected error {message!r}, got {response.json()}"
        raise AssertionError(msg)


class FailingStore(TransactionStore):
    """A store whose backend is unreachable."""

    def list_all(self) -> list[Transaction]:
        raise StoreError("connection refused")

    def get(self, transaction_id: int) -> Transaction | None:
        raise StoreError("connection refused")

    def insert(self, draft: TransactionDraft) -> Transaction:
        raise StoreError("connection refused")

    def replace(self, transaction_id: int, draft: TransactionDraft) -> Transaction | None:
        raise StoreError("connection refused")

    def delete(self, transaction_id: int) -> bool:
        raise StoreError("connection refused")


def test_health(client: TestClient) -> None:
    """Test the /health endpoint returns status ok."""
    response = client.get("/health")
    if response.status_code != HTTP_200_OK:
        msg = f"Expected status {HTTP_200_OK}, got {response.status_code}"
        raise AssertionError(msg)
    if response.json() != {"status": "ok"}:
        msg = f"Expected response {{'status': 'ok'}}, got {response.json()}"
        raise AssertionError(msg)


def test_scalar_docs(client: TestClient) -> None:
    """Test the /scalar endpoint returns OpenAPI or Swagger docs."""
    response = client.get("/scalar")
    if response.status_code != HTTP_200_OK:
        msg = f"Expected status {HTTP_200_OK}, got {response.status_code}"
        raise AssertionError(msg)
    if not ("openapi" in response.text or "swagger" in response.text):
        msg = "Expected 'openapi' or 'swagger' in response text"
        raise AssertionError(msg)


def test_list_empty(client: TestClient) -> None:
    """A fresh store lists no transactions."""
    response = client.get(PATH)
    if response.status_code != HTTP_200_OK or response.json() != []:
        msg = f"Expected an empty list, got {response.status_code}: {response.text}"
        raise AssertionError(msg)


def test_create_normalizes_fields(client: TestClient) -> None:
    """Description and category are trimmed, amount parsed, type derived from the sign."""
    created = create(client, description="  Groceries  ", amount="-42.25", date="2024-03-01", category="   ")
    expected = {
        "description": "Groceries",
        "amount": -42.25,
        "category": "General",
        "date": "2024-03-01",
        "type": "expense",
        "updatedAt": None,
    }
    for key, value in expected.items():
        if created[key] != value:
            msg = f"Expected {key}={value!r}, got {created[key]!r}"
            raise AssertionError(msg)
    if not created["id"].isdigit():
        msg = f"Expected a decimal string id, got {created['id']!r}"
        raise AssertionError(msg)
    if not created["createdAt"]:
        msg = "Expected createdAt to be set"
        raise AssertionError(msg)


def test_create_keeps_trimmed_category_and_explicit_type(client: TestClient) -> None:
    """An explicit type is stored even when it disagrees with the amount sign."""
    created = create(client, description="Refund", amount=25, date="2024-03-01", category=" Food ", type="expense")
    if created["category"] != "Food":
        msg = f"Expected category 'Food', got {created['category']!r}"
        raise AssertionError(msg)
    if created["type"] != "expense":
        msg = f"Expected type 'expense', got {created['type']!r}"
        raise AssertionError(msg)


def test_create_zero_amount_is_income(client: TestClient) -> None:
    """The server accepts a zero amount and types it as income."""
    created = create(client, description="Nothing", amount=0, date="2024-03-01")
    if created["type"] != "income" or created["amount"] != 0:
        msg = f"Expected a zero income transaction, got {created}"
        raise AssertionError(msg)


def test_create_accepts_iso_datetime(client: TestClient) -> None:
    """A datetime is reduced to its calendar date."""
    created = create(client, description="Salary", amount=1000, date="2024-03-31T23:00:00Z")
    if created["date"] != "2024-03-31":
        msg = f"Expected date '2024-03-31', got {created['date']!r}"
        raise AssertionError(msg)


@pytest.mark.parametrize(
    "body",
    [
        {"amount": 10, "date": "2024-03-01"},
        {"description": "Lunch", "date": "2024-03-01"},
        {"description": "Lunch", "amount": 10},
        {"description": "   ", "amount": 10, "date": "2024-03-01"},
        {"description": "Lunch", "amount": None, "date": "2024-03-01"},
        {"description": "Lunch", "amount": 10, "date": ""},
    ],
)
def test_create_missing_fields(client: TestClient, body: dict) -> None:
    """Missing description, amount or date is rejected and nothing is stored."""
    expect_error(client.post(PATH, json=body), HTTP_400_BAD_REQUEST, MISSING_FIELDS)
    if client.get(PATH).json() != []:
        msg = "Expected the store to be untouched"
        raise AssertionError(msg)


@pytest.mark.parametrize("amount", ["abc", "", True, "nan", "Infinity", [1]])
def test_create_invalid_amount(client: TestClient, amount: object) -> None:
    """Non-numeric and non-finite amounts are rejected."""
    response = client.post(PATH, json={"description": "Lunch", "amount": amount, "date": "2024-03-01"})
    expect_error(response, HTTP_400_BAD_REQUEST, "Amount must be a valid number")


def test_create_amount_too_large_for_float(client: TestClient) -> None:
    """An integer literal beyond the float range is an invalid amount, not a server error."""
    body = '{"description": "Big", "amount": ' + "9" * 400 + ', "date": "2024-03-01"}'
    response = client.post(PATH, content=body, headers={"Content-Type": "application/json"})
    expect_error(response, HTTP_400_BAD_REQUEST, "Amount must be a valid number")
    if client.get(PATH).json() != []:
        msg = "Expected the store to be untouched"
        raise AssertionError(msg)


def test_create_invalid_date_and_type(client: TestClient) -> None:
    """Unparseable dates and unknown types are rejected."""
    response = client.post(PATH, json={"description": "Lunch", "amount": 5, "date": "03/01/2024"})
    expect_error(response, HTTP_400_BAD_REQUEST, "Date must be a valid date")
    response = client.post(PATH, json={"description": "Lunch", "amount": 5, "date": "2024-03-01", "type": "transfer"})
    expect_error(response, HTTP_400_BAD_REQUEST, "Type must be either 'income' or 'expense'")


def test_create_invalid_json(client: TestClient) -> None:
    """A body that is not JSON is a validation failure, not a server error."""
    response = client.post(PATH, content="not json", headers={"Content-Type": "application/json"})
    if response.status_code != HTTP_400_BAD_REQUEST or "error" not in response.json():
        msg = f"Expected 400 with an error body, got {response.status_code}: {response.text}"
        raise AssertionError(msg)


def test_list_orders_by_date_then_id(client: TestClient) -> None:
    """Most recent date first; same-day entries newest id first."""
    first = create(client, description="Older", amount=1, date="2024-01-15")
    second = create(client, description="Same day A", amount=2, date="2024-02-01")
    third = create(client, description="Same day B", amount=3, date="2024-02-01")
    fourth = create(client, description="Newest", amount=4, date="2024-03-01")
    ids = [item["id"] for item in client.get(PATH).json()]
    expected = [fourth["id"], third["id"], second["id"], first["id"]]
    if ids != expected:
        msg = f"Expected order {expected}, got {ids}"
        raise AssertionError(msg)


def test_update_replaces_all_fields(client: TestClient) -> None:
    """PUT is a full replacement: omitted optional fields fall back to defaults."""
    created = create(client, description="Dinner", amount=-30, date="2024-03-01", category="Food")
    body = {"id": created["id"], "description": " Bonus ", "amount": 500, "date": "2024-03-05"}
    response = client.put(PATH, json=body)
    if response.status_code != HTTP_200_OK:
        msg = f"Expected status {HTTP_200_OK}, got {response.status_code}: {response.text}"
        raise AssertionError(msg)
    updated = response.json()
    expected = {
        "id": created["id"],
        "description": "Bonus",
        "amount": 500,
        "category": "General",
        "date": "2024-03-05",
        "type": "income",
        "createdAt": created["createdAt"],
    }
    for key, value in expected.items():
        if updated[key] != value:
            msg = f"Expected {key}={value!r}, got {updated[key]!r}"
            raise AssertionError(msg)
    if not updated["updatedAt"]:
        msg = "Expected updatedAt to be set"
        raise AssertionError(msg)


def test_update_id_validation(client: TestClient) -> None:
    """Missing and malformed ids are 400; a well-formed unknown id is 404."""
    body = {"description": "Lunch", "amount": 5, "date": "2024-03-01"}
    expect_error(client.put(PATH, json=body), HTTP_400_BAD_REQUEST, "Transaction ID is required")
    expect_error(client.put(PATH, json={**body, "id": "abc"}), HTTP_400_BAD_REQUEST, "Invalid transaction ID")
    expect_error(client.put(PATH, json={**body, "id": "-3"}), HTTP_400_BAD_REQUEST, "Invalid transaction ID")
    expect_error(client.put(PATH, json={**body, "id": "999"}), HTTP_404_NOT_FOUND, "Transaction not found")


def test_update_missing_fields_does_not_mutate(client: TestClient) -> None:
    """An invalid update leaves the stored record as it was."""
    created = create(client, description="Dinner", amount=-30, date="2024-03-01")
    response = client.put(PATH, json={"id": created["id"], "description": "Dinner", "amount": -30})
    expect_error(response, HTTP_400_BAD_REQUEST, MISSING_FIELDS)
    if client.get(PATH).json() != [created]:
        msg = "Expected the stored record to be unchanged"
        raise AssertionError(msg)


def test_delete_twice(client: TestClient) -> None:
    """The first delete succeeds, the second reports not found."""
    created = create(client, description="Coffee", amount=-4.5, date="2024-03-01")
    response = delete(client, {"id": created["id"]})
    if response.status_code != HTTP_200_OK:
        msg = f"Expected status {HTTP_200_OK}, got {response.status_code}"
        raise AssertionError(msg)
    if response.json() != {"message": "Transaction deleted successfully"}:
        msg = f"Unexpected delete confirmation: {response.json()}"
        raise AssertionError(msg)
    expect_error(delete(client, {"id": created["id"]}), HTTP_404_NOT_FOUND, "Transaction not found")


def test_delete_id_validation(client: TestClient) -> None:
    """Delete requires a well-formed id."""
    expect_error(delete(client, {}), HTTP_400_BAD_REQUEST, "Transaction ID is required")
    expect_error(delete(client, {"id": "65f0c0ffee"}), HTTP_400_BAD_REQUEST, "Invalid transaction ID")


def test_method_not_allowed(client: TestClient) -> None:
    """Unsupported methods get 405 with the supported set in the Allow header."""
    response = client.patch(PATH, json={})
    expect_error(response, HTTP_405_METHOD_NOT_ALLOWED, "Method PATCH not allowed")
    if response.headers.get("allow") != "GET, POST, PUT, DELETE":
        msg = f"Unexpected Allow header: {response.headers.get('allow')!r}"
        raise AssertionError(msg)


@pytest.mark.parametrize(
    ("method", "body", "message"),
    [
        ("GET", None, "Failed to fetch transactions"),
        ("POST", {"description": "Lunch", "amount": 5, "date": "2024-03-01"}, "Failed to add transaction"),
        ("PUT", {"id": "1", "description": "Lunch", "amount": 5, "date": "2024-03-01"}, "Failed to update transaction"),
        ("DELETE", {"id": "1"}, "Failed to delete transaction"),
    ],
)
def test_store_failure(app: FastAPI, client: TestClient, method: str, body: dict | None, message: str) -> None:
    """Store failures become 500 with an operation-specific message."""
    app.dependency_overrides[get_store] = FailingStore
    try:
        response = client.request(method, PATH, json=body)
    finally:
        app.dependency_overrides.clear()
    expect_error(response, HTTP_500_INTERNAL_SERVER_ERROR, message)


def test_end_to_end_scenario(client: TestClient) -> None:
    """Create, list, update and delete one transaction."""
    created = create(client, description="Coffee", amount=-4.50, date="2024-03-01")
    if created["type"] != "expense" or created["category"] != "General":
        msg = f"Expected an uncategorised expense, got {created}"
        raise AssertionError(msg)

    listed = client.get(PATH).json()
    if listed != [created]:
        msg = f"Expected exactly the created record, got {listed}"
        raise AssertionError(msg)

    body = {"id": created["id"], "amount": 100, "description": "Refund", "date": "2024-03-02"}
    response = client.put(PATH, json=body)
    updated = response.json()
    if response.status_code != HTTP_200_OK or updated["type"] != "income":
        msg = f"Expected an income after update, got {response.status_code}: {updated}"
        raise AssertionError(msg)
    if (updated["description"], updated["amount"], updated["date"]) != ("Refund", 100, "2024-03-02"):
        msg = f"Expected all fields replaced, got {updated}"
        raise AssertionError(msg)

    if delete(client, {"id": created["id"]}).status_code != HTTP_200_OK:
        msg = "Expected delete to succeed"
        raise AssertionError(msg)
    if any(item["id"] == created["id"] for item in client.get(PATH).json()):
        msg = "Expected the deleted record to be gone"
        raise AssertionError(msg)
