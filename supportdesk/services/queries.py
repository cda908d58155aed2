from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from supportdesk.core.errors import InvalidInput
from supportdesk.models.ticket import Ticket, TicketStatus
from supportdesk.models.user import UserRole

ALL_STATUSES = "ALL"


class TicketQueryView:
    """Role-scoped, status-filtered ticket listings. Read only."""

    def __init__(self, db: Session):
        self.db = db

    def list_tickets(self, caller_role: UserRole, caller_user_id: int, status_filter: Optional[str] = ALL_STATUSES) -> List[Ticket]:
        stmt = select(Ticket)
        if caller_role != UserRole.AGENT:
            stmt = stmt.where(Ticket.customer_id == caller_user_id)

        if status_filter and status_filter != ALL_STATUSES:
            try:
                status = TicketStatus(status_filter)
            except ValueError:
                raise InvalidInput(
                    f"Unknown status filter: {status_filter}",
                    details={"allowed": [ALL_STATUSES] + [s.value for s in TicketStatus]},
                ) from None
            stmt = stmt.where(Ticket.status == status)

        stmt = stmt.order_by(Ticket.updated_at.desc(), Ticket.id.desc())
        return list(self.db.scalars(stmt))
