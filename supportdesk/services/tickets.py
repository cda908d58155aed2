"""Ticket lifecycle: creation with its seed message, status changes, and the
``touch`` hook the message thread uses to keep ``updated_at`` current."""
import logging
from datetime import datetime
from typing import Optional, Tuple

from sqlalchemy.orm import Session

from supportdesk.core.ai import Analysis, Analyzed, TicketAdvisor, Unavailable
from supportdesk.core.database import transaction, utcnow
from supportdesk.core.errors import InvalidInput, NotFound
from supportdesk.models.ticket import (
    CATEGORY_LENGTH,
    DEFAULT_CATEGORY,
    SENTIMENT_LENGTH,
    SUBJECT_LENGTH,
    Ticket,
    TicketPriority,
    TicketStatus,
)
from supportdesk.services.directory import IdentityDirectory
from supportdesk.services.messages import MessageThread

logger = logging.getLogger(__name__)


def require_text(value: Optional[str], field: str, max_length: Optional[int] = None) -> str:
    if value is None or not value.strip():
        raise InvalidInput(f"{field} must not be empty", details={"field": field})
    if max_length is not None and len(value) > max_length:
        raise InvalidInput(
            f"{field} must be at most {max_length} characters",
            details={"field": field, "maxLength": max_length},
        )
    return value


def clip(value: Optional[str], length: int) -> Optional[str]:
    """Fit advisory text into its column; suggestions are never rejected."""
    return value[:length] if value else value


def parse_status(value) -> TicketStatus:
    try:
        return TicketStatus(value)
    except ValueError:
        raise InvalidInput(
            f"Unknown ticket status: {value}",
            details={"allowed": [s.value for s in TicketStatus]},
        ) from None


def parse_priority(value) -> TicketPriority:
    try:
        return TicketPriority(value)
    except ValueError:
        raise InvalidInput(
            f"Unknown ticket priority: {value}",
            details={"allowed": [p.value for p in TicketPriority]},
        ) from None


class TicketLifecycle:
    def __init__(self, db: Session, directory: IdentityDirectory, advisor: Optional[TicketAdvisor] = None):
        self.db = db
        self.directory = directory
        self.advisor = advisor

    @property
    def thread(self) -> MessageThread:
        return MessageThread(self.db, self.directory, self)

    def get_ticket(self, ticket_id: int, for_update: bool = False) -> Ticket:
        ticket = self.db.get(Ticket, ticket_id, with_for_update=True if for_update else None)
        if ticket is None:
            raise NotFound(f"Ticket {ticket_id} not found", details={"ticketId": ticket_id})
        return ticket

    def create_ticket(
        self,
        customer_id: int,
        subject: str,
        description: str,
        category: Optional[str] = None,
        priority=None,
    ) -> Ticket:
        subject = require_text(subject, "subject", SUBJECT_LENGTH)
        description = require_text(description, "description")
        if category and category.strip():
            category = require_text(category.strip(), "category", CATEGORY_LENGTH)
        else:
            category = None
        priority = parse_priority(priority) if priority else None
        customer_id = self.directory.get_user(customer_id).id

        # End the read transaction so no connection is held during the advisory call
        self.db.rollback()
        analysis = self.analyze(subject, description)
        summary = sentiment = None
        if isinstance(analysis, Analyzed):
            category = category or clip(analysis.category, CATEGORY_LENGTH)
            priority = priority or analysis.priority
            summary, sentiment = analysis.summary, clip(analysis.sentiment, SENTIMENT_LENGTH)

        now = utcnow()
        ticket = Ticket(
            customer_id=customer_id,
            subject=subject,
            description=description,
            status=TicketStatus.OPEN,
            priority=priority or TicketPriority.MEDIUM,
            category=category or DEFAULT_CATEGORY,
            created_at=now,
            updated_at=now,
            ai_summary=summary,
            ai_sentiment=sentiment,
        )
        with transaction(self.db):
            self.db.add(ticket)
            self.db.flush()
            self.thread.add_seed_message(ticket)

        logger.info("Ticket %s created for customer %s (analysis available: %s)",
                    ticket.id, customer_id, analysis.available)
        return ticket

    def change_status(self, ticket_id: int, new_status) -> Ticket:
        status = parse_status(new_status)
        with transaction(self.db):
            ticket = self.get_ticket(ticket_id, for_update=True)
            previous = ticket.status
            ticket.status = status
            self._advance_updated_at(ticket, utcnow())
        logger.info("Ticket %s status %s -> %s", ticket.id, previous.value, status.value)
        return ticket

    def touch(self, ticket_id: int, at: Optional[datetime] = None) -> Ticket:
        """Refresh ``updated_at`` as part of the caller's open transaction."""
        ticket = self.get_ticket(ticket_id, for_update=True)
        self._advance_updated_at(ticket, at or utcnow())
        self.db.flush()
        return ticket

    def analyze(self, subject: str, description: str) -> Analysis:
        if self.advisor is None:
            return Unavailable(reason="AI advisory service is not configured")
        return self.advisor.analyze(subject, description)

    def reanalyze(self, ticket_id: int) -> Tuple[Ticket, Analysis]:
        ticket = self.get_ticket(ticket_id)
        subject, description = ticket.subject, ticket.description
        self.db.rollback()
        analysis = self.analyze(subject, description)
        if isinstance(analysis, Analyzed):
            with transaction(self.db):
                ticket = self.get_ticket(ticket_id, for_update=True)
                ticket.ai_summary = analysis.summary
                ticket.ai_sentiment = clip(analysis.sentiment, SENTIMENT_LENGTH)
            logger.info("Ticket %s analysis refreshed", ticket.id)
        return ticket, analysis

    @staticmethod
    def _advance_updated_at(ticket: Ticket, at: datetime) -> None:
        # Never earlier than creation or the previous refresh
        ticket.updated_at = max(at, ticket.updated_at or at, ticket.created_at or at)
