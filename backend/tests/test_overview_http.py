import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import IntegrityError

from stockinfo.config.settings import Settings
from stockinfo.db.session import get_session
from stockinfo.main import create_app
from stockinfo.providers.alpha_vantage import get_overview_client

IBM_PAYLOAD = {
    "Symbol": "IBM",
    "AssetType": "Common Stock",
    "Name": "IBM Corp",
    "Exchange": "NYSE",
    "Currency": "USD",
    "52WeekHigh": "199.18",
    "Unlisted": "ignored",
}


class FakeClient:
    def __init__(self, payload: dict) -> None:
        self.payload = payload

    def fetch_overview(self, symbol: str) -> dict:
        if self.payload.get("Symbol") != symbol:
            return {}
        return dict(self.payload)


class FakeScalars:
    def __init__(self, rows: list) -> None:
        self.rows = rows

    def all(self) -> list:
        return list(self.rows)

    def first(self):
        return self.rows[0] if self.rows else None


class FakeResult:
    def __init__(self, rows: list) -> None:
        self.rows = rows

    def scalars(self) -> FakeScalars:
        return FakeScalars(self.rows)

    def scalar_one_or_none(self):
        return self.rows[0] if self.rows else None


class InMemorySession:
    """Just enough of AsyncSession for OverviewRepository's single-row paths."""

    def __init__(self) -> None:
        self.rows: dict[int, object] = {}
        self.pending: list = []
        self.next_id = 1

    def add(self, obj) -> None:
        self.pending.append(obj)

    async def commit(self) -> None:
        pending, self.pending = self.pending, []
        for obj in pending:
            if any(row.symbol == obj.symbol for row in self.rows.values()):
                raise IntegrityError("INSERT INTO overviews", None, Exception("duplicate key"))
            obj.id = self.next_id
            self.next_id += 1
            self.rows[obj.id] = obj

    async def rollback(self) -> None:
        self.pending = []

    async def refresh(self, obj) -> None:
        return None

    async def get(self, model, key):
        return self.rows.get(key)

    async def delete(self, obj) -> None:
        self.rows.pop(obj.id, None)

    async def execute(self, stmt) -> FakeResult:
        rows = [self.rows[key] for key in sorted(self.rows)]
        criteria = stmt.whereclause
        if criteria is not None:
            rows = [row for row in rows if getattr(row, criteria.left.key) == criteria.right.value]
        return FakeResult(rows)


@pytest.fixture
def session() -> InMemorySession:
    return InMemorySession()


@pytest.fixture
def client(session: InMemorySession) -> TestClient:
    app = create_app(Settings(create_tables=False))
    app.dependency_overrides[get_session] = lambda: session
    app.dependency_overrides[get_overview_client] = lambda: FakeClient(IBM_PAYLOAD)
    return TestClient(app)


def test_store_then_get_by_id_over_http(client: TestClient) -> None:
    created = client.post("/api/overview/IBM")

    assert created.status_code == 200
    body = created.json()
    assert body["Symbol"] == "IBM"
    assert body["52WeekHigh"] == "199.18"
    assert isinstance(body["id"], int)
    assert "Unlisted" not in body

    fetched = client.get(f"/api/overview/id/{body['id']}")

    assert fetched.status_code == 200
    assert fetched.json() == body


def test_live_fetch_over_http_has_no_id(client: TestClient) -> None:
    response = client.get("/api/overview/ibm")

    assert response.status_code == 200
    assert response.json()["Name"] == "IBM Corp"
    assert "id" not in response.json()


def test_duplicate_store_over_http_is_400(client: TestClient, session: InMemorySession) -> None:
    assert client.post("/api/overview/IBM").status_code == 200

    response = client.post("/api/overview/IBM")

    assert response.status_code == 400
    assert response.json() == {"message": "Can not upload duplicate stock data"}
    assert len(session.rows) == 1


def test_error_bodies_over_http(client: TestClient) -> None:
    unknown = client.get("/api/overview/NOPE")
    bad_id = client.get("/api/overview/id/1_0")
    huge_id = client.delete("/api/overview/id/99999999999999999999")
    empty = client.delete("/api/overview/deleteall")

    assert (unknown.status_code, unknown.json()) == (404, {"message": "Invalid stock symbol: NOPE"})
    assert (bad_id.status_code, bad_id.json()) == (400, {"message": "Invalid ID: 1_0"})
    assert huge_id.status_code == 404
    assert huge_id.json() == {"message": "Overview not found: id 99999999999999999999"}
    assert (empty.status_code, empty.json()) == (404, {"message": "No overviews to delete"})


def test_health_over_http(client: TestClient) -> None:
    assert client.get("/health").json() == {"status": "ok"}
