import pytest
from fastapi.testclient import TestClient

from backend.app.db.base import Base
from backend.app.db.session import engine
from backend.app.main import app


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


def create_request(client: TestClient, unique_no: str = "PAY-100", amount=500, **overrides):
    payload = {"uniqueNo": unique_no, "fmsName": "Store", "payTo": "Acme", "amount": amount}
    payload.update(overrides)
    resp = client.post("/api/payment-fms/create", json=payload)
    assert resp.status_code == 201
    body = resp.json()
    assert body["success"] is True
    return body["data"]


def queue_ids(client: TestClient, stage: str, queue: str):
    resp = client.get(f"/api/payment-fms/{stage}/{queue}")
    assert resp.status_code == 200
    return [item["id"] for item in resp.json()["data"]]


def approve(client: TestClient, record_id: int, status: str = "Approved", remarks: str = "ok"):
    return client.patch(
        f"/api/payment-fms/approval/{record_id}/process",
        json={"status": status, "stageRemarks": remarks},
    )


def pay(client: TestClient, record_id: int, payment_type: str = "UPI"):
    return client.patch(f"/api/payment-fms/make-payment/{record_id}/process", json={"paymentType": payment_type})


def test_create_returns_pending_record_with_camel_case_keys():
    client = TestClient(app)
    data = create_request(client, remarks="Steel supply", attachment="bill.pdf")
    assert data["status"] == "Pending"
    assert data["uniqueNo"] == "PAY-100"
    assert data["fmsName"] == "Store"
    assert data["payTo"] == "Acme"
    assert data["amount"] == 500
    assert data["attachment"] == "bill.pdf"
    assert data["planned1"] is not None
    assert data["actual1"] is None
    assert "createdAt" in data


def test_create_accepts_snake_case_payload():
    client = TestClient(app)
    resp = client.post(
        "/api/payment-fms/create",
        json={"unique_no": "PAY-200", "fms_name": "Repair", "pay_to": "Fixit", "amount": "125.50"},
    )
    assert resp.status_code == 201
    data = resp.json()["data"]
    assert data["uniqueNo"] == "PAY-200"
    assert data["amount"] == 125.5


def test_create_rejects_missing_fields_with_envelope():
    client = TestClient(app)
    resp = client.post("/api/payment-fms/create", json={"uniqueNo": "PAY-1", "fmsName": "", "amount": 10})
    assert resp.status_code == 422
    body = resp.json()
    assert body["success"] is False
    assert body["error"]
    assert client.get("/api/payment-fms/all").json()["data"] == []


def test_create_rejects_negative_amount():
    client = TestClient(app)
    resp = client.post(
        "/api/payment-fms/create",
        json={"uniqueNo": "PAY-1", "fmsName": "Store", "payTo": "Acme", "amount": -1},
    )
    assert resp.status_code == 422


def test_list_all_returns_newest_first():
    client = TestClient(app)
    first = create_request(client, "PAY-1")
    second = create_request(client, "PAY-2")
    resp = client.get("/api/payment-fms/all")
    ids = [item["id"] for item in resp.json()["data"]]
    assert ids == [second["id"], first["id"]]


def test_delete_pending_record():
    client = TestClient(app)
    record = create_request(client)
    resp = client.delete(f"/api/payment-fms/{record['id']}")
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "data": None, "error": None}
    assert client.get("/api/payment-fms/all").json()["data"] == []


def test_delete_unknown_record_returns_404():
    client = TestClient(app)
    resp = client.delete("/api/payment-fms/999")
    assert resp.status_code == 404
    assert resp.json()["success"] is False


def test_delete_rejected_once_approved():
    client = TestClient(app)
    record = create_request(client)
    assert approve(client, record["id"]).status_code == 200
    resp = client.delete(f"/api/payment-fms/{record['id']}")
    assert resp.status_code == 409
    assert "Approved" in resp.json()["error"]


def test_approval_moves_record_from_pending_to_history():
    client = TestClient(app)
    record = create_request(client)
    assert queue_ids(client, "approval", "pending") == [record["id"]]

    resp = approve(client, record["id"], remarks="ok")
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["status"] == "Approved"
    assert data["stageRemarks"] == "ok"
    assert data["actual1"] is not None
    assert data["planned2"] is not None

    assert queue_ids(client, "approval", "pending") == []
    assert queue_ids(client, "approval", "history") == [record["id"]]
    assert queue_ids(client, "make-payment", "pending") == [record["id"]]


def test_rejected_record_is_terminal():
    client = TestClient(app)
    record = create_request(client)
    resp = approve(client, record["id"], status="Rejected", remarks="duplicate")
    assert resp.json()["data"]["status"] == "Rejected"
    assert queue_ids(client, "make-payment", "pending") == []

    assert approve(client, record["id"]).status_code == 409
    assert pay(client, record["id"]).status_code == 409


def test_approval_rejects_unknown_decision():
    client = TestClient(app)
    record = create_request(client)
    resp = approve(client, record["id"], status="Paid")
    assert resp.status_code == 422
    assert resp.json()["success"] is False


def test_payment_requires_approval():
    client = TestClient(app)
    record = create_request(client)
    resp = pay(client, record["id"])
    assert resp.status_code == 409
    assert resp.json()["error"] == f"Record {record['id']} cannot move from Pending to Paid"


def test_payment_defaults_to_cash_and_rejects_unknown_type():
    client = TestClient(app)
    record = create_request(client)
    approve(client, record["id"])
    assert pay(client, record["id"], payment_type="Cheque").status_code == 422

    resp = client.patch(f"/api/payment-fms/make-payment/{record['id']}/process", json={})
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["status"] == "Paid"
    assert data["paymentType"] == "Cash"
    assert queue_ids(client, "make-payment", "history") == [record["id"]]
    assert queue_ids(client, "tally-entry", "pending") == [record["id"]]


def test_tally_batch_processes_all_selected():
    client = TestClient(app)
    ids = []
    for n in range(3):
        record = create_request(client, f"PAY-{n}")
        approve(client, record["id"])
        pay(client, record["id"])
        ids.append(record["id"])

    resp = client.post("/api/payment-fms/tally-entry/process", json={"ids": ids[:2]})
    assert resp.status_code == 200
    assert [item["status"] for item in resp.json()["data"]] == ["Processed", "Processed"]
    assert queue_ids(client, "tally-entry", "pending") == [ids[2]]
    assert sorted(queue_ids(client, "tally-entry", "history")) == sorted(ids[:2])


def test_tally_batch_is_all_or_nothing():
    client = TestClient(app)
    paid = create_request(client, "PAY-1")
    approve(client, paid["id"])
    pay(client, paid["id"])
    pending = create_request(client, "PAY-2")

    resp = client.post("/api/payment-fms/tally-entry/process", json={"ids": [paid["id"], pending["id"]]})
    assert resp.status_code == 409
    assert queue_ids(client, "tally-entry", "pending") == [paid["id"]]
    assert queue_ids(client, "tally-entry", "history") == []


def test_tally_batch_requires_ids():
    client = TestClient(app)
    resp = client.post("/api/payment-fms/tally-entry/process", json={"ids": []})
    assert resp.status_code == 422
    assert resp.json()["success"] is False


def test_tally_batch_unknown_id_returns_404():
    client = TestClient(app)
    resp = client.post("/api/payment-fms/tally-entry/process", json={"ids": [42]})
    assert resp.status_code == 404


def test_events_record_each_transition():
    client = TestClient(app)
    record = create_request(client)
    approve(client, record["id"], remarks="ok")
    pay(client, record["id"], payment_type="UPI")

    resp = client.get(f"/api/payment-fms/{record['id']}/events")
    assert resp.status_code == 200
    events = resp.json()["data"]
    assert [(e["fromStatus"], e["toStatus"]) for e in events] == [
        (None, "Pending"),
        ("Pending", "Approved"),
        ("Approved", "Paid"),
    ]
    assert events[1]["remarks"] == "ok"
    assert events[2]["remarks"] == "UPI"
