import pytest

from supportdesk.core.ai import Unavailable

from tests.conftest import ANALYZED


@pytest.fixture
def ticket(client, customer):
    r = client.post("/api/tickets", json={
        "userId": customer.id,
        "subject": "API limit exceeded",
        "description": "Getting 429 errors",
    })
    assert r.status_code == 201
    return r.json()


def test_root_and_health(client):
    assert client.get("/").status_code == 200
    assert client.get("/health").json() == {"status": "ok"}


def test_list_users(client, customer, agent, other_customer):
    r = client.get("/api/users")
    assert r.status_code == 200
    body = r.json()
    assert [u["id"] for u in body] == [customer.id, agent.id, other_customer.id]
    assert body[1]["role"] == "AGENT"
    assert "avatarUrl" in body[0]


def test_get_user(client, agent):
    assert client.get(f"/api/users/{agent.id}").json()["email"] == "maria@example.com"
    r = client.get("/api/users/999")
    assert r.status_code == 404
    assert r.json()["error"]["code"] == "not_found"


def test_create_ticket(ticket, customer):
    assert ticket["customerId"] == customer.id
    assert ticket["status"] == "OPEN"
    assert ticket["priority"] == "MEDIUM"
    assert ticket["category"] == "General"
    assert ticket["createdAt"] == ticket["updatedAt"]
    assert ticket["aiSummary"] is None


def test_create_ticket_seeds_thread(client, ticket, customer):
    r = client.get(f"/api/tickets/{ticket['id']}/messages", params={"userId": customer.id})
    assert r.status_code == 200
    messages = r.json()
    assert len(messages) == 1
    assert messages[0]["content"] == "Getting 429 errors"
    assert messages[0]["senderId"] == customer.id
    assert messages[0]["isInternalNote"] is False


def test_create_ticket_with_ai(client, advisor, customer):
    advisor.result = ANALYZED
    r = client.post("/api/tickets", json={
        "userId": customer.id, "subject": "Charged twice", "description": "Two invoices",
    })
    assert r.status_code == 201
    body = r.json()
    assert body["category"] == "Billing"
    assert body["priority"] == "HIGH"
    assert body["aiSentiment"] == "Frustrated"


@pytest.mark.parametrize("payload, status", [
    ({"subject": "", "description": "d"}, 400),
    ({"subject": "s", "description": "  "}, 400),
    ({"subject": "s", "description": "d", "priority": "URGENT"}, 400),
    ({"subject": "x" * 300, "description": "d"}, 400),
    ({"subject": "s", "description": "d", "category": "c" * 101}, 400),
    ({"subject": "s"}, 422),
])
def test_create_ticket_validation(client, customer, payload, status):
    r = client.post("/api/tickets", json={"userId": customer.id, **payload})
    assert r.status_code == status
    assert client.get("/api/tickets", params={"userId": customer.id}).json() == []


def test_create_ticket_unknown_user(client, users):
    r = client.post("/api/tickets", json={"userId": 404, "subject": "s", "description": "d"})
    assert r.status_code == 404


def test_get_ticket(client, ticket):
    assert client.get(f"/api/tickets/{ticket['id']}").json()["subject"] == "API limit exceeded"
    assert client.get("/api/tickets/9999").status_code == 404


def test_update_status(client, ticket):
    r = client.put(f"/api/tickets/{ticket['id']}/status", json={"status": "CLOSED"})
    assert r.status_code == 200
    assert r.json()["status"] == "CLOSED"
    assert r.json()["updatedAt"] >= ticket["updatedAt"]

    r = client.put(f"/api/tickets/{ticket['id']}/status", json={"status": "OPEN"})
    assert r.json()["status"] == "OPEN"


def test_update_status_errors(client, ticket):
    assert client.put("/api/tickets/9999/status", json={"status": "CLOSED"}).status_code == 404
    r = client.put(f"/api/tickets/{ticket['id']}/status", json={"status": "DONE"})
    assert r.status_code == 400
    assert r.json()["error"]["code"] == "invalid_input"


def test_list_tickets_by_role(client, ticket, customer, other_customer, agent):
    client.post("/api/tickets", json={"userId": other_customer.id, "subject": "Other", "description": "x"})

    mine = client.get("/api/tickets", params={"userId": customer.id}).json()
    everything = client.get("/api/tickets", params={"userId": agent.id, "status": "ALL"}).json()
    closed = client.get("/api/tickets", params={"userId": agent.id, "status": "CLOSED"}).json()

    assert [t["id"] for t in mine] == [ticket["id"]]
    assert len(everything) == 2
    assert everything[0]["subject"] == "Other"
    assert closed == []


def test_list_tickets_requires_caller(client, ticket):
    assert client.get("/api/tickets").status_code == 422
    assert client.get("/api/tickets", params={"userId": 12345}).status_code == 404


def test_list_tickets_bad_status(client, agent):
    assert client.get("/api/tickets", params={"userId": agent.id, "status": "NOPE"}).status_code == 400


def test_post_message_and_visibility(client, ticket, customer, agent):
    url = f"/api/tickets/{ticket['id']}/messages"
    r = client.post(url, json={"senderId": agent.id, "content": "Escalate to billing", "isInternalNote": True})
    assert r.status_code == 201
    assert r.json()["isInternalNote"] is True

    r = client.post(url, json={"senderId": agent.id, "content": "We raised your limit."})
    assert r.status_code == 201
    assert r.json()["isInternalNote"] is False

    customer_view = client.get(url, params={"userId": customer.id}).json()
    agent_view = client.get(url, params={"userId": agent.id}).json()
    assert [m["content"] for m in customer_view] == ["Getting 429 errors", "We raised your limit."]
    assert len(agent_view) == 3

    refreshed = client.get(f"/api/tickets/{ticket['id']}").json()
    assert refreshed["updatedAt"] >= agent_view[-1]["createdAt"]


def test_post_message_errors(client, ticket, customer, other_customer):
    url = f"/api/tickets/{ticket['id']}/messages"
    assert client.post(url, json={"senderId": customer.id, "content": ""}).status_code == 400
    assert client.post(url, json={"senderId": 999, "content": "hi"}).status_code == 404
    assert client.post("/api/tickets/999/messages", json={"senderId": customer.id, "content": "hi"}).status_code == 404
    r = client.post(url, json={"senderId": customer.id, "content": "note", "isInternalNote": True})
    assert r.status_code == 403
    assert client.get(url, params={"userId": other_customer.id}).status_code == 404


def test_draft_reply(client, bot, ticket, customer, agent):
    url = f"/api/tickets/{ticket['id']}/messages"
    client.post(url, json={"senderId": customer.id, "content": "Still failing today"})
    client.post(url, json={"senderId": agent.id, "content": "Looking"})

    r = client.post(f"/api/tickets/{ticket['id']}/draft-reply", params={"userId": agent.id})

    assert r.status_code == 200
    assert r.json() == {"ticketId": ticket["id"], "draft": bot.reply}
    assert bot.calls == [(ticket["id"], "Still failing today")]


def test_draft_reply_is_agent_only(client, bot, ticket, customer):
    r = client.post(f"/api/tickets/{ticket['id']}/draft-reply", params={"userId": customer.id})
    assert r.status_code == 403
    assert bot.calls == []


def test_reanalyze(client, advisor, ticket):
    advisor.result = ANALYZED
    r = client.post(f"/api/tickets/{ticket['id']}/analysis")
    assert r.status_code == 200
    body = r.json()
    assert body["available"] is True
    assert body["suggestedSolution"] == "Refund the duplicate charge."
    assert body["ticket"]["aiSummary"] == "Customer was charged twice."


def test_reanalyze_unavailable(client, advisor, ticket):
    advisor.result = Unavailable(reason="AI advisory service is not configured")
    body = client.post(f"/api/tickets/{ticket['id']}/analysis").json()
    assert body["available"] is False
    assert body["summary"] == "analysis unavailable"
    assert body["reason"] == "AI advisory service is not configured"
    assert body["ticket"]["aiSummary"] is None
