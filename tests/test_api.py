from datetime import datetime

import httpx
import pytest
from fastapi.testclient import TestClient

from spendwise.core.dependencies import get_conversation, get_insight_client, get_now, get_store
from spendwise.db.store import ExpenseStore
from spendwise.main import app
from spendwise.utils.insights import FALLBACK_MESSAGE, InsightClient, InsightConversation

NOW = datetime(2024, 6, 15, 14, 30)

dinner = {"amount": 45, "category": "Food", "date": "2024-06-01", "notes": "Dinner with friends"}
gas = {"amount": 85, "category": "Transport", "date": "2024-06-02", "notes": "Gas"}
jacket = {"amount": 120, "category": "Shopping", "date": "2024-05-20", "notes": "Winter jacket"}


def agent_reply(request):
    return httpx.Response(200, json={"success": True, "response": {"summary": "Transport leads"}})


@pytest.fixture
def store():
    return ExpenseStore()


@pytest.fixture
def agent_handler():
    return agent_reply


@pytest.fixture
def client(store, agent_handler):
    conversation = InsightConversation()
    insight_client = InsightClient("http://agent.test/api/agent", "agent-1", transport=httpx.MockTransport(agent_handler))
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_now] = lambda: NOW
    app.dependency_overrides[get_conversation] = lambda: conversation
    app.dependency_overrides[get_insight_client] = lambda: insight_client
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_root_and_health(client, store):
    store.create(dinner)
    assert client.get("/").json() == {"message": "Welcome to SpendWise API"}
    body = client.get("/api/health").json()
    assert body["status"] == "healthy"
    assert body["expenses"] == 1


def test_create_and_fetch_expense(client):
    response = client.post("/api/expenses/", json=dinner)
    assert response.status_code == 201
    created = response.json()
    assert created["amount"] == 45
    assert created["category"] == "Food"
    assert "seq" not in created

    fetched = client.get(f"/api/expenses/{created['id']}")
    assert fetched.status_code == 200
    assert fetched.json() == created


def test_create_rejects_unknown_category(client, store):
    response = client.post("/api/expenses/", json={**dinner, "category": "Groceries"})
    assert response.status_code == 422
    assert store.count() == 0


def test_create_rejects_negative_amount(client, store):
    response = client.post("/api/expenses/", json={**dinner, "amount": -5})
    assert response.status_code == 400
    assert store.count() == 0


def test_update_and_delete(client, store):
    created = store.create(dinner)
    response = client.put(f"/api/expenses/{created.id}", json={**gas, "notes": "Fuel"})
    assert response.status_code == 200
    assert response.json()["id"] == created.id
    assert response.json()["notes"] == "Fuel"

    assert client.delete(f"/api/expenses/{created.id}").status_code == 204
    assert store.count() == 0


def test_unknown_ids_are_404(client, store):
    kept = store.create(dinner)
    assert client.get("/api/expenses/missing").status_code == 404
    assert client.put("/api/expenses/missing", json=gas).status_code == 404
    assert client.delete("/api/expenses/missing").status_code == 404
    assert store.all() == [kept]


def test_list_filters_and_orders_newest_first(client, store):
    for fields in (jacket, dinner, gas):
        store.create(fields)
    everything = client.get("/api/expenses/").json()
    assert [exp["notes"] for exp in everything] == ["Gas", "Dinner with friends", "Winter jacket"]

    month = client.get("/api/expenses/", params={"date_range": "month"}).json()
    assert [exp["notes"] for exp in month] == ["Gas", "Dinner with friends"]

    searched = client.get("/api/expenses/", params={"search": "JACKET", "category": "Shopping"}).json()
    assert [exp["notes"] for exp in searched] == ["Winter jacket"]

    assert client.get("/api/expenses/", params={"category": "Groceries"}).status_code == 400


def test_recent_is_limited(client, store):
    for fields in (jacket, dinner, gas):
        store.create(fields)
    recent = client.get("/api/expenses/recent", params={"limit": 2}).json()
    assert [exp["notes"] for exp in recent] == ["Gas", "Dinner with friends"]


def test_summary_scenario(client, store):
    store.create(dinner)
    store.create(gas)
    summary = client.get("/api/reports/summary").json()
    assert summary["grand_total"] == 130
    assert summary["category_totals"] == {"Food": 45, "Transport": 85}
    assert summary["top_category"] == "Transport"
    assert summary["average"] == 65
    assert summary["month_to_date_total"] == 130
    assert summary["previous_month_total"] == 0
    assert summary["month_over_month_change_percent"] is None
    assert summary["has_baseline"] is False


def test_summary_compares_against_previous_month(client, store):
    for fields in (jacket, dinner, gas):
        store.create(fields)
    summary = client.get("/api/reports/summary", params={"date_range": "month"}).json()
    assert summary["grand_total"] == 130
    assert summary["previous_month_total"] == 120
    assert summary["month_over_month_change_percent"] == pytest.approx(8.33)
    assert summary["has_baseline"] is True


def test_breakdown(client, store):
    store.create(dinner)
    store.create(gas)
    rows = client.get("/api/reports/breakdown").json()
    assert [(row["name"], row["percentage"]) for row in rows] == [("Food", "34.6"), ("Transport", "65.4")]


def test_trend(client, store):
    store.create(dinner)
    points = client.get("/api/reports/trend").json()
    assert len(points) == 30
    assert points[-1]["date"] == "2024-06-15"
    assert sum(point["amount"] for point in points) == 45
    assert len(client.get("/api/reports/trend", params={"days": 7}).json()) == 7
    assert client.get("/api/reports/trend", params={"days": 0}).status_code == 422


def test_ask_insight(client, store):
    store.create(dinner)
    response = client.post("/api/insights/ask", json={"question": "What leads?", "date_range": "month"})
    assert response.status_code == 200
    assert response.json()["content"] == "Transport leads"
    messages = client.get("/api/insights/messages").json()
    assert [msg["role"] for msg in messages] == ["user", "agent"]


@pytest.mark.parametrize("agent_handler", [lambda request: httpx.Response(502)])
def test_ask_insight_falls_back(client):
    response = client.post("/api/insights/ask", json={"question": "Anything?"})
    assert response.status_code == 200
    assert response.json()["content"] == FALLBACK_MESSAGE


def test_ask_insight_rejects_blank_question(client):
    assert client.post("/api/insights/ask", json={"question": " "}).status_code == 400
    assert client.get("/api/insights/messages").json() == []


def test_suggestions(client):
    suggestions = client.get("/api/insights/suggestions").json()["suggestions"]
    assert "Compare this month vs last month" in suggestions
