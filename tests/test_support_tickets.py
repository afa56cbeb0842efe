"""
Tests for support tickets: the contact form and the admin ticket desk.
"""
import pytest
from sqlalchemy.exc import OperationalError

from app.core.exceptions import NotFoundError, TransientStoreError
from app.db.models.support_ticket import SupportTicket
from app.services.support_service import (
    add_support_ticket_reply,
    create_support_ticket,
    get_support_ticket_detail,
    list_support_tickets,
    update_support_ticket_status,
)


def test_anonymous_ticket(client, db):
    response = client.post(
        "/support-tickets",
        json={"email": "Visitor@Example.com", "subject": "Fiyatlar", "message": "Yıllık plan var mı?"},
    )

    assert response.status_code == 201
    data = response.json()
    assert data["status"] == "open"
    assert data["user_id"] is None
    assert data["email"] == "visitor@example.com"


def test_signed_in_ticket_is_linked_to_user(client, test_user, auth_headers):
    response = client.post(
        "/support-tickets",
        json={"email": test_user.email, "subject": "Download", "message": "The animation will not download."},
        headers=auth_headers,
    )

    assert response.status_code == 201
    assert response.json()["user_id"] == test_user.id


def test_ticket_requires_subject_and_message(client, db):
    response = client.post(
        "/support-tickets",
        json={"email": "visitor@example.com", "subject": "", "message": "Hello"},
    )
    assert response.status_code == 422

    response = client.post("/support-tickets", json={"email": "visitor@example.com", "subject": "Hi"})
    assert response.status_code == 422


def test_admin_ticket_routes_require_admin(client, db, auth_headers):
    assert client.get("/admin/tickets").status_code == 401
    assert client.get("/admin/tickets", headers=auth_headers).status_code == 403


def test_admin_lists_and_filters_tickets(client, db, admin_headers):
    first = create_support_ticket(db, "a@example.com", "First", "One")
    create_support_ticket(db, "b@example.com", "Second", "Two")
    update_support_ticket_status(db, first.id, "closed")

    response = client.get("/admin/tickets", headers=admin_headers)
    assert response.status_code == 200
    assert len(response.json()) == 2

    response = client.get("/admin/tickets?status=open", headers=admin_headers)
    assert [ticket["subject"] for ticket in response.json()] == ["Second"]


def test_admin_reply_marks_ticket_replied(client, db, admin_headers):
    ticket = create_support_ticket(db, "a@example.com", "Watermark", "Why is there a watermark?")

    response = client.post(
        f"/admin/tickets/{ticket.id}/reply",
        json={"reply": "The free plan adds a watermark."},
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert response.json()["admin_id"] == "admin@example.com"

    detail = client.get(f"/admin/tickets/{ticket.id}", headers=admin_headers).json()
    assert detail["ticket"]["status"] == "replied"
    assert detail["ticket"]["replied_at"] is not None
    assert [reply["reply_text"] for reply in detail["replies"]] == ["The free plan adds a watermark."]


def test_admin_closes_ticket(client, db, admin_headers):
    ticket = create_support_ticket(db, "a@example.com", "Done", "Thanks")

    response = client.post(
        f"/admin/tickets/{ticket.id}/status", json={"status": "closed"}, headers=admin_headers
    )

    assert response.status_code == 200
    assert response.json()["status"] == "closed"


def test_admin_rejects_unknown_status(client, db, admin_headers):
    ticket = create_support_ticket(db, "a@example.com", "Subject", "Body")

    response = client.post(
        f"/admin/tickets/{ticket.id}/status", json={"status": "archived"}, headers=admin_headers
    )

    assert response.status_code == 422


def test_unknown_ticket_returns_404(client, db, admin_headers):
    assert client.get("/admin/tickets/missing", headers=admin_headers).status_code == 404
    response = client.post(
        "/admin/tickets/missing/reply", json={"reply": "Hello"}, headers=admin_headers
    )
    assert response.status_code == 404


def test_replies_are_kept_in_order(db):
    ticket = create_support_ticket(db, "a@example.com", "Subject", "Body")
    add_support_ticket_reply(db, ticket.id, "first", "admin@example.com")
    add_support_ticket_reply(db, ticket.id, "second", "admin@example.com")

    detail = get_support_ticket_detail(db, ticket.id)

    assert [reply.reply_text for reply in detail["replies"]] == ["first", "second"]
    assert list_support_tickets(db, "replied")[0].id == ticket.id


def test_status_must_be_known(db):
    ticket = create_support_ticket(db, "a@example.com", "Subject", "Body")

    with pytest.raises(ValueError):
        update_support_ticket_status(db, ticket.id, "archived")
    with pytest.raises(NotFoundError):
        update_support_ticket_status(db, "missing", "closed")


def test_ticket_store_failure_is_transient(db, monkeypatch):
    def broken_commit():
        raise OperationalError("INSERT INTO support_tickets", {}, Exception("database is locked"))

    monkeypatch.setattr(db, "commit", broken_commit)

    with pytest.raises(TransientStoreError):
        create_support_ticket(db, "a@example.com", "Subject", "Body")
    assert db.query(SupportTicket).count() == 0
