"""
Tests for message endpoints.
"""
from galleryhq.messaging import MessageStore
from galleryhq.models.message import STATUS_APPROVED, STATUS_PENDING_REVIEW

from conftest import headers_for, make_message


class TestSendAndList:
    """Sending, listing and fetching messages."""

    def test_send_message(self, client, sender, recipient):
        response = client.post(
            "/api/messages",
            headers=headers_for(sender),
            json={
                "recipientId": recipient.id,
                "subject": "Commission",
                "body": "Would you take a commission?",
                "contextType": "artist",
                "contextId": recipient.id,
            },
        )
        assert response.status_code == 201
        data = response.json()
        assert data["senderId"] == sender.id
        assert data["recipientId"] == recipient.id
        assert data["moderationStatus"] == STATUS_PENDING_REVIEW
        assert data["readAt"] is None
        assert "hiddenBySender" not in data

    def test_send_to_self(self, client, sender):
        response = client.post(
            "/api/messages",
            headers=headers_for(sender),
            json={"recipientId": sender.id, "body": "note to self"},
        )
        assert response.status_code == 400
        assert response.json()["error_code"] == "BAD_REQUEST"

    def test_send_missing_body(self, client, sender, recipient):
        response = client.post(
            "/api/messages",
            headers=headers_for(sender),
            json={"recipientId": recipient.id},
        )
        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    def test_send_unauthenticated(self, client, recipient):
        response = client.post("/api/messages", json={"recipientId": recipient.id, "body": "hi"})
        assert response.status_code == 401

    def test_inbox_shows_only_approved(self, client, db, sender, recipient, pending_message, approved_message):
        response = client.get("/api/messages", headers=headers_for(recipient))
        assert response.status_code == 200
        data = response.json()
        assert [m["id"] for m in data["data"]] == [approved_message]
        assert data["pagination"] == {"page": 1, "pageSize": 20, "total": 1, "totalPages": 1}

    def test_sent_folder_includes_pending(self, client, sender, pending_message, approved_message):
        response = client.get("/api/messages?folder=sent", headers=headers_for(sender))
        assert response.status_code == 200
        assert {m["id"] for m in response.json()["data"]} == {pending_message, approved_message}

    def test_list_pagination(self, client, db, sender, recipient):
        for _ in range(3):
            make_message(db, sender, recipient)
        response = client.get("/api/messages?page=2&pageSize=2", headers=headers_for(recipient))
        data = response.json()
        assert len(data["data"]) == 1
        assert data["pagination"]["totalPages"] == 2

    def test_invalid_folder(self, client, sender):
        response = client.get("/api/messages?folder=archive", headers=headers_for(sender))
        assert response.status_code == 400

    def test_get_message(self, client, recipient, approved_message):
        response = client.get(f"/api/messages/{approved_message}", headers=headers_for(recipient))
        assert response.status_code == 200
        assert response.json()["id"] == approved_message

    def test_list_includes_participants(self, client, db, sender, recipient, approved_message):
        recipient.avatar_url = "https://cdn.example.com/avatars/artist.png"
        db.commit()

        response = client.get("/api/messages", headers=headers_for(recipient))
        message = response.json()["data"][0]
        assert message["sender"] == {
            "id": sender.id,
            "username": "collector",
            "displayName": "Collector",
            "avatarUrl": None,
        }
        assert message["recipient"]["avatarUrl"] == "https://cdn.example.com/avatars/artist.png"

    def test_get_includes_participants(self, client, sender, recipient, approved_message):
        response = client.get(f"/api/messages/{approved_message}", headers=headers_for(sender))
        data = response.json()
        assert data["sender"]["username"] == "collector"
        assert data["recipient"]["id"] == recipient.id
        assert data["recipient"]["displayName"] == "Artist"
        assert "email" not in data["recipient"]

    def test_get_message_as_outsider(self, client, outsider, approved_message):
        response = client.get(f"/api/messages/{approved_message}", headers=headers_for(outsider))
        assert response.status_code == 404

    def test_get_pending_message_as_recipient(self, client, recipient, pending_message):
        response = client.get(f"/api/messages/{pending_message}", headers=headers_for(recipient))
        assert response.status_code == 404


class TestModerationEndpoints:
    """Approve and reject."""

    def test_approve(self, client, admin, pending_message):
        response = client.post(f"/api/messages/{pending_message}/approve", headers=headers_for(admin))
        assert response.status_code == 200
        data = response.json()
        assert data["moderationStatus"] == STATUS_APPROVED
        assert data["reviewedBy"] == admin.id
        assert data["reviewedAt"] is not None

    def test_reject_with_reason(self, client, admin, pending_message):
        response = client.post(
            f"/api/messages/{pending_message}/reject",
            headers=headers_for(admin),
            json={"reason": "Harassment"},
        )
        assert response.status_code == 200
        assert response.json()["moderationStatus"] == "rejected"

    def test_reject_without_body(self, client, admin, pending_message):
        response = client.post(f"/api/messages/{pending_message}/reject", headers=headers_for(admin))
        assert response.status_code == 200

    def test_reject_reason_too_long(self, client, admin, pending_message):
        response = client.post(
            f"/api/messages/{pending_message}/reject",
            headers=headers_for(admin),
            json={"reason": "x" * 1001},
        )
        assert response.status_code == 400

    def test_second_decision_conflicts(self, client, db, admin, second_admin, pending_message):
        first = client.post(f"/api/messages/{pending_message}/approve", headers=headers_for(admin))
        second = client.post(f"/api/messages/{pending_message}/reject", headers=headers_for(second_admin))
        assert first.status_code == 200
        assert second.status_code == 409
        assert second.json()["error_code"] == "CONFLICT"

        message = MessageStore(db).get(pending_message)
        assert message.moderation_status == STATUS_APPROVED
        assert message.reviewed_by == admin.id

    def test_non_admin_cannot_approve(self, client, recipient, pending_message):
        response = client.post(f"/api/messages/{pending_message}/approve", headers=headers_for(recipient))
        assert response.status_code == 403

    def test_approve_unknown(self, client, admin):
        response = client.post("/api/messages/missing/approve", headers=headers_for(admin))
        assert response.status_code == 404


class TestReadEndpoints:
    """Read tracking and unread counts."""

    def test_mark_read_twice(self, client, recipient, approved_message):
        first = client.patch(f"/api/messages/{approved_message}/read", headers=headers_for(recipient))
        second = client.patch(f"/api/messages/{approved_message}/read", headers=headers_for(recipient))
        assert first.status_code == 200
        assert second.status_code == 200
        assert first.json()["readAt"] is not None
        assert second.json()["readAt"] == first.json()["readAt"]

    def test_sender_cannot_mark_read(self, client, sender, approved_message):
        response = client.patch(f"/api/messages/{approved_message}/read", headers=headers_for(sender))
        assert response.status_code == 403

    def test_mark_read_unknown(self, client, recipient):
        response = client.patch("/api/messages/missing/read", headers=headers_for(recipient))
        assert response.status_code == 404

    def test_unread_count(self, client, db, sender, recipient, approved_message, pending_message):
        response = client.get("/api/messages/unread-count", headers=headers_for(recipient))
        assert response.status_code == 200
        assert response.json() == {"unreadCount": 1}

        client.patch(f"/api/messages/{approved_message}/read", headers=headers_for(recipient))
        response = client.get("/api/messages/unread-count", headers=headers_for(recipient))
        assert response.json() == {"unreadCount": 0}

    def test_read_bulk_skips_foreign_ids(self, client, db, sender, recipient, outsider):
        m1 = make_message(db, sender, recipient)
        m2 = make_message(db, sender, outsider)
        m3 = make_message(db, sender, recipient)

        response = client.patch(
            "/api/messages/read-bulk",
            headers=headers_for(recipient),
            json={"messageIds": [m1, m2, m3]},
        )
        assert response.status_code == 200
        assert response.json() == {"updated": 2}

        store = MessageStore(db)
        assert store.get(m2).read_at is None

    def test_read_bulk_empty(self, client, recipient):
        response = client.patch(
            "/api/messages/read-bulk",
            headers=headers_for(recipient),
            json={"messageIds": []},
        )
        assert response.status_code == 400

    def test_read_bulk_too_many(self, client, recipient):
        response = client.patch(
            "/api/messages/read-bulk",
            headers=headers_for(recipient),
            json={"messageIds": [f"id-{i}" for i in range(1001)]},
        )
        assert response.status_code == 400

    def test_read_bulk_missing_ids(self, client, recipient):
        response = client.patch("/api/messages/read-bulk", headers=headers_for(recipient), json={})
        assert response.status_code == 400


class TestDeleteEndpoints:
    """Per-participant deletion."""

    def test_delete_hides_only_for_caller(self, client, sender, recipient, approved_message):
        response = client.delete(f"/api/messages/{approved_message}", headers=headers_for(sender))
        assert response.status_code == 204

        sent = client.get("/api/messages?folder=sent", headers=headers_for(sender)).json()
        assert sent["data"] == []

        inbox = client.get("/api/messages", headers=headers_for(recipient)).json()
        assert [m["id"] for m in inbox["data"]] == [approved_message]

        response = client.get(f"/api/messages/{approved_message}", headers=headers_for(sender))
        assert response.status_code == 404

    def test_delete_twice(self, client, recipient, approved_message):
        assert client.delete(f"/api/messages/{approved_message}", headers=headers_for(recipient)).status_code == 204
        assert client.delete(f"/api/messages/{approved_message}", headers=headers_for(recipient)).status_code == 204

    def test_delete_with_soft_strategy(self, client, recipient, approved_message):
        response = client.request(
            "DELETE",
            f"/api/messages/{approved_message}",
            headers=headers_for(recipient),
            json={"strategy": "soft"},
        )
        assert response.status_code == 204

    def test_delete_with_unknown_strategy(self, client, recipient, approved_message):
        response = client.request(
            "DELETE",
            f"/api/messages/{approved_message}",
            headers=headers_for(recipient),
            json={"strategy": "hard"},
        )
        assert response.status_code == 400

    def test_delete_as_outsider(self, client, outsider, approved_message):
        response = client.delete(f"/api/messages/{approved_message}", headers=headers_for(outsider))
        assert response.status_code == 403

    def test_delete_unknown(self, client, sender):
        response = client.delete("/api/messages/missing", headers=headers_for(sender))
        assert response.status_code == 404

    def test_delete_bulk(self, client, db, sender, recipient, outsider):
        mine = [make_message(db, sender, recipient) for _ in range(2)]
        foreign = make_message(db, outsider, recipient)

        response = client.post(
            "/api/messages/delete-bulk",
            headers=headers_for(sender),
            json={"messageIds": mine + [foreign], "strategy": "soft"},
        )
        assert response.status_code == 200
        assert response.json() == {"deleted": 2}

        store = MessageStore(db)
        assert store.get(foreign).hidden_by_sender is False

    def test_delete_bulk_empty(self, client, sender):
        response = client.post("/api/messages/delete-bulk", headers=headers_for(sender), json={"messageIds": []})
        assert response.status_code == 400
