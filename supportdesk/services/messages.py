import logging
from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from supportdesk.core.database import transaction, utcnow
from supportdesk.core.errors import InvalidInput, NotFound, PermissionDenied
from supportdesk.models.message import Message
from supportdesk.models.ticket import Ticket
from supportdesk.models.user import User, UserRole
from supportdesk.services.directory import IdentityDirectory

if TYPE_CHECKING:
    from supportdesk.services.tickets import TicketLifecycle

logger = logging.getLogger(__name__)


def visible_to(stmt, role: UserRole):
    """Internal notes are for agents only."""
    if role == UserRole.AGENT:
        return stmt
    return stmt.where(Message.is_internal_note.is_(False))


class MessageThread:
    """Append-only, per-ticket message log."""

    def __init__(self, db: Session, directory: IdentityDirectory, tickets: "TicketLifecycle"):
        self.db = db
        self.directory = directory
        self.tickets = tickets

    def append_message(self, ticket_id: int, sender_id: int, content: str, is_internal_note: bool = False) -> Message:
        if content is None or not content.strip():
            raise InvalidInput("content must not be empty", details={"field": "content"})
        with transaction(self.db):
            # Row lock on the ticket serializes concurrent appends to one thread
            ticket = self.tickets.get_ticket(ticket_id, for_update=True)
            sender = self.directory.get_user(sender_id)
            if is_internal_note and not sender.is_agent:
                raise PermissionDenied("Only agents can add internal notes")
            message = self._append(ticket, sender.id, content, bool(is_internal_note))
        logger.info("Message %s appended to ticket %s by user %s (internal: %s)",
                    message.id, ticket.id, sender.id, message.is_internal_note)
        return message

    def add_seed_message(self, ticket: Ticket) -> Message:
        """First message of a new thread; runs inside the creation transaction."""
        return self._append(ticket, ticket.customer_id, ticket.description, False, at=ticket.created_at)

    def list_messages(self, ticket_id: int, caller: User) -> List[Message]:
        ticket = self.tickets.get_ticket(ticket_id)
        if not caller.is_agent and ticket.customer_id != caller.id:
            raise NotFound(f"Ticket {ticket_id} not found", details={"ticketId": ticket_id})
        stmt = (
            select(Message)
            .where(Message.ticket_id == ticket.id)
            .order_by(Message.created_at, Message.id)
        )
        return list(self.db.scalars(visible_to(stmt, caller.role)))

    def _append(self, ticket: Ticket, sender_id: int, content: str, internal: bool,
                at: Optional[datetime] = None) -> Message:
        created_at = self._next_timestamp(ticket.id, at or utcnow())
        message = Message(
            ticket_id=ticket.id,
            sender_id=sender_id,
            content=content,
            created_at=created_at,
            is_internal_note=internal,
        )
        self.db.add(message)
        self.db.flush()
        self.tickets.touch(ticket.id, created_at)
        return message

    def _next_timestamp(self, ticket_id: int, now: datetime) -> datetime:
        # Clamp to the thread's latest timestamp so (created_at, id) order never regresses
        latest = self.db.scalar(
            select(func.max(Message.created_at)).where(Message.ticket_id == ticket_id)
        )
        if latest is not None and latest > now:
            return latest
        return now
