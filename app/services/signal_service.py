"""Attention signals aggregated from messages, documents and signatures."""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import func

from app.models import Document, DocumentStatus, Message, SignatureRequest, SignatureStatus, User
from app.pipeline.progress import AttentionSignals, needs_attention
from app.services.base_service import BaseService

PENDING_DOCUMENT_STATUSES = (DocumentStatus.PENDING, DocumentStatus.PROCESSING)


@dataclass(frozen=True)
class AdminStats:
    total_clients: int
    pending_documents: int
    unread_messages: int
    pending_signatures: int


class SignalService(BaseService):
    """Read-only counts; computed per request, never cached."""

    def _count(self, query) -> int:
        return int(query.scalar() or 0)

    def _unread_messages(self):
        return self.db.query(func.count(Message.id)).filter(
            Message.tenant_id == self.tenant_id,
            Message.is_from_client.is_(True),
            Message.is_read.is_(False),
        )

    def _pending_documents(self):
        return self.db.query(func.count(Document.id)).filter(
            Document.tenant_id == self.tenant_id,
            Document.status.in_(PENDING_DOCUMENT_STATUSES),
        )

    def _pending_signatures(self):
        return self.db.query(func.count(SignatureRequest.id)).filter(
            SignatureRequest.tenant_id == self.tenant_id,
            SignatureRequest.status == SignatureStatus.PENDING,
        )

    def unread_count_for_client(self, client_id: int) -> int:
        return self._count(self._unread_messages().filter(Message.user_id == client_id))

    def pending_document_count_for_client(self, client_id: int) -> int:
        return self._count(self._pending_documents().filter(Document.user_id == client_id))

    def pending_signature_count_for_client(self, client_id: int) -> int:
        return self._count(self._pending_signatures().filter(SignatureRequest.user_id == client_id))

    def signals_for_client(self, client_id: int) -> AttentionSignals:
        return AttentionSignals(
            unread_messages=self.unread_count_for_client(client_id),
            pending_documents=self.pending_document_count_for_client(client_id),
            pending_signatures=self.pending_signature_count_for_client(client_id),
        )

    def client_needs_attention(self, client_id: int) -> bool:
        return needs_attention(self.signals_for_client(client_id))

    def needs_attention_clients(self) -> list[tuple[User, AttentionSignals]]:
        """Active clients with at least one open signal, in id order."""
        clients = (
            self.db.query(User)
            .filter(
                User.tenant_id == self.tenant_id,
                User.is_admin.is_(False),
                User.is_archived.is_(False),
            )
            .order_by(User.id)
            .all()
        )
        flagged = []
        for client in clients:
            signals = self.signals_for_client(client.id)
            if needs_attention(signals):
                flagged.append((client, signals))
        return flagged

    def admin_stats(self) -> AdminStats:
        total_clients = self._count(
            self.db.query(func.count(User.id)).filter(
                User.tenant_id == self.tenant_id,
                User.is_admin.is_(False),
                User.is_archived.is_(False),
            )
        )
        return AdminStats(
            total_clients=total_clients,
            pending_documents=self._count(self._pending_documents()),
            unread_messages=self._count(self._unread_messages()),
            pending_signatures=self._count(self._pending_signatures()),
        )
