from fastapi import APIRouter, Depends, Query, status
from typing import List, Optional
from supportdesk.core.deps import get_caller, get_drafts, get_query_view, get_tickets
from supportdesk.models.user import User
from supportdesk.schemas.ticket import (
    DraftReplyRead,
    TicketAnalysisRead,
    TicketCreate,
    TicketRead,
    TicketStatusUpdate,
)
from supportdesk.services.drafts import DraftReplies
from supportdesk.services.queries import ALL_STATUSES, TicketQueryView
from supportdesk.services.tickets import TicketLifecycle

router = APIRouter(prefix="/api/tickets", tags=["tickets"])

@router.get("", response_model=List[TicketRead])
def list_tickets(
    status_filter: Optional[str] = Query(ALL_STATUSES, alias="status"),
    caller: User = Depends(get_caller),
    view: TicketQueryView = Depends(get_query_view),
):
    return view.list_tickets(caller.role, caller.id, status_filter)

@router.post("", response_model=TicketRead, status_code=status.HTTP_201_CREATED)
def create_ticket(ticket_in: TicketCreate, tickets: TicketLifecycle = Depends(get_tickets)):
    return tickets.create_ticket(
        customer_id=ticket_in.user_id,
        subject=ticket_in.subject,
        description=ticket_in.description,
        category=ticket_in.category,
        priority=ticket_in.priority,
    )

@router.get("/{ticket_id}", response_model=TicketRead)
def get_ticket(ticket_id: int, tickets: TicketLifecycle = Depends(get_tickets)):
    return tickets.get_ticket(ticket_id)

@router.put("/{ticket_id}/status", response_model=TicketRead)
def update_ticket_status(ticket_id: int, update: TicketStatusUpdate, tickets: TicketLifecycle = Depends(get_tickets)):
    return tickets.change_status(ticket_id, update.status)

@router.post("/{ticket_id}/analysis", response_model=TicketAnalysisRead)
def analyze_ticket(ticket_id: int, tickets: TicketLifecycle = Depends(get_tickets)):
    ticket, analysis = tickets.reanalyze(ticket_id)
    return TicketAnalysisRead(
        available=analysis.available,
        category=analysis.category,
        priority=analysis.priority,
        summary=analysis.summary,
        sentiment=analysis.sentiment,
        suggested_solution=analysis.solution,
        reason=getattr(analysis, "reason", None),
        ticket=TicketRead.model_validate(ticket),
    )

@router.post("/{ticket_id}/draft-reply", response_model=DraftReplyRead)
def draft_reply(ticket_id: int, caller: User = Depends(get_caller), drafts: DraftReplies = Depends(get_drafts)):
    return DraftReplyRead(ticket_id=ticket_id, draft=drafts.draft_for(ticket_id, caller))
