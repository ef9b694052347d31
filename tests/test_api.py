"""HTTP-level tests for the FastAPI application (offline mode)."""

import pytest
from fastapi.testclient import TestClient

from billtracker.api import create_app
from billtracker.config import AppConfig
from billtracker.services import create_services


@pytest.fixture
def config(data_dir):
    return AppConfig(DATA_DIR=data_dir, MAX_UPLOAD_BYTES=64)


@pytest.fixture
def services(sqlite_db, config):
    return create_services(db=sqlite_db, config=config)


@pytest.fixture
def client(services, config):
    return TestClient(create_app(services=services, config=config, online=False))


def _add(client, **bill):
    payload = {
        "name": "Electricity",
        "amount": 120.5,
        "dueDate": "2025-05-10",
        "ownerId": "user-1",
    }
    payload.update(bill)
    resp = client.post("/api/database", json={"action": "adicionarBoleto", "bill": payload})
    assert resp.status_code == 200
    return resp.json()


def _list(client, owner_id="user-1"):
    resp = client.get("/api/database", params={"action": "buscarBoletos", "ownerId": owner_id})
    assert resp.status_code == 200
    return resp.json()


def test_health(client):
    assert client.get("/health").json() == {"status": "ok", "online": False}


def test_initialize(client, data_dir):
    body = client.get("/api/database", params={"action": "inicializar"}).json()
    assert body["success"] is True
    assert body["message"] == "Database initialized"
    assert (data_dir / "usuarios.json").is_file()
    assert (data_dir / "pdfs").is_dir()


def test_add_and_list_bills(client):
    created = _add(client, dueDate="2025-08-01")
    _add(client, name="Rent", dueDate="2025-03-01")
    _add(client, ownerId="user-2")

    assert created["success"] is True
    assert created["data"]["ownerId"] == "user-1"
    assert created["data"]["amount"] == 120.5
    assert created["data"]["id"]

    body = _list(client)
    assert body["success"] is True
    assert [bill["name"] for bill in body["data"]] == ["Rent", "Electricity"]


def test_add_invalid_bill(client):
    body = _add(client, name="")
    assert body["success"] is False
    assert body["error"].startswith("Invalid bill")


def test_update_bill(client):
    created = _add(client)["data"]
    resp = client.post(
        "/api/database",
        json={"action": "atualizarBoleto", "id": created["id"], "updates": {"paid": True}},
    )
    body = resp.json()
    assert body["success"] is True
    assert body["data"]["paid"] is True
    assert _list(client)["data"][0]["paid"] is True


def test_update_unknown_bill(client):
    body = client.post(
        "/api/database",
        json={"action": "atualizarBoleto", "id": "ghost", "updates": {"paid": True}},
    ).json()
    assert body == {"success": False, "data": None, "error": "Bill not found", "message": None}


def test_remove_bill(client):
    created = _add(client)["data"]
    first = client.post("/api/database", json={"action": "removerBoleto", "id": created["id"]})
    second = client.post("/api/database", json={"action": "removerBoleto", "id": created["id"]})

    assert first.json()["success"] is True
    assert second.json()["success"] is False
    assert _list(client)["data"] == []


def test_users_and_login(client):
    created = client.post(
        "/api/database",
        json={"action": "criarUsuario", "username": "ana", "password": "pw"},
    ).json()
    assert created["success"] is True

    found = client.get("/api/database", params={"action": "buscarUsuario", "username": "ana"}).json()
    assert found["data"]["id"] == created["data"]["id"]

    missing = client.get("/api/database", params={"action": "buscarUsuario", "username": "zed"}).json()
    assert missing == {"success": True, "data": None, "error": None, "message": None}

    ok = client.post(
        "/api/database",
        json={"action": "login", "username": "gabriel", "password": "laranja42"},
    ).json()
    assert ok["success"] is True
    assert ok["data"]["username"] == "gabriel"

    bad = client.post(
        "/api/database",
        json={"action": "login", "username": "gabriel", "password": "wrong"},
    ).json()
    assert bad["success"] is False
    assert bad["error"] == "Invalid username or password"


@pytest.mark.parametrize(
    "params",
    [
        {"action": "desconhecida"},
        {"action": "buscarBoletos"},
        {"action": "buscarUsuario"},
        {},
    ],
)
def test_unrecognized_get_action(client, params):
    body = client.get("/api/database", params=params).json()
    assert body["success"] is False
    assert body["error"] == "Unrecognized action"


@pytest.mark.parametrize(
    "payload",
    [
        {"action": "desconhecida"},
        {"action": "removerBoleto"},
        {"action": "atualizarBoleto", "id": "x"},
        {"action": "criarUsuario", "username": "ana"},
    ],
)
def test_unrecognized_post_action(client, payload):
    body = client.post("/api/database", json=payload).json()
    assert body["success"] is False
    assert body["error"] == "Unrecognized action"


def test_malformed_body(client):
    resp = client.post(
        "/api/database",
        content=b"not json",
        headers={"Content-Type": "application/json"},
    )
    assert resp.status_code == 422
    assert resp.json()["success"] is False


def test_internal_error(services, config):
    class Broken:
        def list_bills(self, owner_id):
            raise RuntimeError("boom")

    broken = dict(services, sync_service=Broken())
    client = TestClient(create_app(services=broken, config=config))

    resp = client.get("/api/database", params={"action": "buscarBoletos", "ownerId": "u"})
    assert resp.status_code == 500
    assert resp.json()["error"] == "Internal server error"


# ---------------------------------------------------------------------------
# Files
# ---------------------------------------------------------------------------


def test_upload_and_download(client):
    resp = client.post(
        "/api/files",
        data={"action": "salvarArquivo", "filename": "boleto.pdf"},
        files={"file": ("original.pdf", b"%PDF-1.4", "application/pdf")},
    )
    assert resp.json()["data"] == {"filename": "boleto.pdf"}

    download = client.get("/api/files/boleto.pdf")
    assert download.status_code == 200
    assert download.content == b"%PDF-1.4"
    assert download.headers["content-type"] == "application/pdf"


def test_upload_generates_name(client):
    resp = client.post(
        "/api/files",
        data={"action": "salvarArquivo"},
        files={"file": ("my scan.png", b"\x89PNG", "image/png")},
    )
    name = resp.json()["data"]["filename"]
    assert name.endswith("_my_scan.png")
    assert client.get(f"/api/files/{name}").headers["content-type"] == "image/png"


def test_upload_too_large(client):
    resp = client.post(
        "/api/files",
        data={"action": "salvarArquivo", "filename": "big.pdf"},
        files={"file": ("big.pdf", b"x" * 65, "application/pdf")},
    )
    assert resp.status_code == 413
    assert resp.json()["success"] is False


def test_upload_wrong_action(client):
    resp = client.post(
        "/api/files",
        data={"action": "outra"},
        files={"file": ("a.pdf", b"x", "application/pdf")},
    )
    assert resp.json()["error"] == "Unrecognized action"


def test_download_missing(client):
    resp = client.get("/api/files/absent.pdf")
    assert resp.status_code == 404
    assert resp.json() == {"success": False, "error": "File not found"}


# ---------------------------------------------------------------------------
# Calendar
# ---------------------------------------------------------------------------


def test_month_view_and_toggle(client):
    rent = _add(client, name="Rent", amount=1000, dueDate="2025-05-05")["data"]
    _add(client, name="Power", dueDate="2025-05-20")
    _add(client, name="Gym", dueDate="2025-06-01")

    month = client.get("/api/calendar/user-1/2025/5").json()["data"]
    assert month["days"] == [5, 20]
    assert month["summary"]["count"] == 2
    assert month["summary"]["unpaidAmount"] == 1120.5
    assert [bill["name"] for bill in month["bills"]] == ["Rent", "Power"]

    toggled = client.post(f"/api/calendar/user-1/bills/{rent['id']}/toggle-paid").json()
    assert toggled["data"]["paid"] is True

    day = client.get("/api/calendar/user-1/day/2025-05-05").json()["data"]
    assert day[0]["paid"] is True


def test_month_view_rejects_bad_month(client):
    assert client.get("/api/calendar/user-1/2025/13").status_code == 422
