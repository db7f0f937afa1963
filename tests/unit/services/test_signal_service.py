from __future__ import annotations

from app.models import Document, DocumentStatus, Message, SignatureRequest, SignatureStatus
from app.services.signal_service import SignalService


def _add_activity(session, tenant_id: int, user_id: int) -> None:
    session.add_all(
        [
            Message(tenant_id=tenant_id, user_id=user_id, content="hi", is_from_client=True, is_read=False),
            Message(tenant_id=tenant_id, user_id=user_id, content="read", is_from_client=True, is_read=True),
            Message(tenant_id=tenant_id, user_id=user_id, content="ours", is_from_client=False, is_read=False),
            Document(tenant_id=tenant_id, user_id=user_id, file_name="w2.pdf", status=DocumentStatus.PENDING),
            Document(tenant_id=tenant_id, user_id=user_id, file_name="1099.pdf", status=DocumentStatus.PROCESSING),
            Document(tenant_id=tenant_id, user_id=user_id, file_name="id.pdf", status=DocumentStatus.VERIFIED),
            SignatureRequest(tenant_id=tenant_id, user_id=user_id, document_type="form_8879", status=SignatureStatus.PENDING),
            SignatureRequest(tenant_id=tenant_id, user_id=user_id, document_type="engagement_letter", status=SignatureStatus.SIGNED),
        ]
    )
    session.commit()


def test_signals_count_only_open_items(session, tenant, make_client):
    user, _ = make_client()
    _add_activity(session, tenant.id, user.id)

    signals = SignalService(tenant.id, db=session).signals_for_client(user.id)
    assert (signals.unread_messages, signals.pending_documents, signals.pending_signatures) == (1, 2, 1)


def test_needs_attention_is_computed_live_and_skips_archived(session, tenant, make_client):
    quiet, _ = make_client(first_name="Quiet")
    busy, _ = make_client(first_name="Busy")
    archived, _ = make_client(first_name="Gone", archived=True)
    _add_activity(session, tenant.id, busy.id)
    _add_activity(session, tenant.id, archived.id)
    service = SignalService(tenant.id, db=session)

    assert [client.id for client, _ in service.needs_attention_clients()] == [busy.id]
    assert service.client_needs_attention(quiet.id) is False

    session.add(Message(tenant_id=tenant.id, user_id=quiet.id, content="?", is_from_client=True))
    session.commit()
    assert service.client_needs_attention(quiet.id) is True


def test_admin_stats_aggregate_tenant_counts(session, tenant, make_client):
    user, _ = make_client()
    make_client(first_name="Other")
    _add_activity(session, tenant.id, user.id)

    stats = SignalService(tenant.id, db=session).admin_stats()
    assert stats.total_clients == 2
    assert (stats.unread_messages, stats.pending_documents, stats.pending_signatures) == (1, 2, 1)
