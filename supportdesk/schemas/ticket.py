from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from typing import Optional
from datetime import datetime
from supportdesk.models.ticket import TicketPriority, TicketStatus

class CamelModel(BaseModel):
    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True

class TicketCreate(CamelModel):
    # Content checks live in the lifecycle, not here
    user_id: int
    subject: str
    description: str
    category: Optional[str] = None
    priority: Optional[str] = None

class TicketStatusUpdate(CamelModel):
    status: str

class TicketRead(CamelModel):
    id: int
    customer_id: int
    subject: str
    description: str
    status: TicketStatus
    priority: TicketPriority
    category: str
    created_at: datetime
    updated_at: datetime
    assigned_to: Optional[int] = None
    ai_summary: Optional[str] = None
    ai_sentiment: Optional[str] = None

class TicketAnalysisRead(CamelModel):
    available: bool
    category: str
    priority: TicketPriority
    summary: str
    sentiment: str
    suggested_solution: str
    reason: Optional[str] = None
    ticket: TicketRead

class DraftReplyRead(CamelModel):
    ticket_id: int
    draft: str
