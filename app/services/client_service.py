"""Client directory: listing, onboarding and archival."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from app.core.config import get_config
from app.core.exceptions import ConflictError, NotFoundError, ValidationError
from app.models import ReturnPrepStatus, ReturnType, TaxReturn, User
from app.services.base_service import BaseService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClientSummary:
    id: int
    name: str
    email: str
    archived: bool


def summarize(user: User) -> ClientSummary:
    return ClientSummary(id=user.id, name=user.display_name, email=user.email, archived=user.is_archived)


class ClientService(BaseService):
    """Tenant-scoped access to client (non-admin) users."""

    def _clients(self):
        return self.db.query(User).filter(User.tenant_id == self.tenant_id, User.is_admin.is_(False))

    def list_clients(self, include_archived: bool = True) -> list[ClientSummary]:
        query = self._clients()
        if not include_archived:
            query = query.filter(User.is_archived.is_(False))
        return [summarize(user) for user in query.order_by(User.id).all()]

    def get_client(self, client_id: int) -> User:
        user = self._clients().filter(User.id == client_id).first()
        if user is None:
            raise NotFoundError(f"Client not found: {client_id}")
        return user

    def onboard_client(
        self,
        email: str,
        first_name: str | None = None,
        last_name: str | None = None,
        tax_year: int | None = None,
    ) -> User:
        """Create a client together with a personal return at the first stage."""
        normalized = email.strip().lower()
        if not normalized or "@" not in normalized:
            raise ValidationError("A valid email is required.")
        exists = (
            self.db.query(User.id)
            .filter(User.tenant_id == self.tenant_id, User.email == normalized)
            .first()
        )
        if exists:
            raise ConflictError(f"A user with email {normalized} already exists.")

        user = User(
            tenant_id=self.tenant_id,
            email=normalized,
            first_name=first_name,
            last_name=last_name,
            is_admin=False,
        )
        self.db.add(user)
        self.flush()
        self.db.add(
            TaxReturn(
                tenant_id=self.tenant_id,
                user_id=user.id,
                return_type=ReturnType.PERSONAL,
                name="Personal Return",
                tax_year=tax_year or get_config().DEFAULT_TAX_YEAR,
                status=ReturnPrepStatus.NOT_STARTED,
            )
        )
        self.commit()
        self.db.refresh(user)
        logger.info(
            "client.onboarded",
            extra={"event": "client.onboarded", "tenant_id": self.tenant_id, "client_id": user.id},
        )
        return user

    def set_archived(self, client_id: int, archived: bool) -> User:
        """Toggle the archival flag; pipeline state is left untouched."""
        user = self.get_client(client_id)
        if user.is_archived != archived:
            user.is_archived = archived
            self.commit()
            self.db.refresh(user)
        return user

    def archive(self, client_id: int) -> User:
        return self.set_archived(client_id, archived=True)

    def unarchive(self, client_id: int) -> User:
        return self.set_archived(client_id, archived=False)
