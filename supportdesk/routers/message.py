from fastapi import APIRouter, Depends, status
from typing import List
from supportdesk.core.deps import get_caller, get_thread
from supportdesk.models.user import User
from supportdesk.schemas.message import MessageCreate, MessageRead
from supportdesk.services.messages import MessageThread

router = APIRouter(prefix="/api/tickets", tags=["messages"])

@router.get("/{ticket_id}/messages", response_model=List[MessageRead])
def list_ticket_messages(ticket_id: int, caller: User = Depends(get_caller), thread: MessageThread = Depends(get_thread)):
    return thread.list_messages(ticket_id, caller)

@router.post("/{ticket_id}/messages", response_model=MessageRead, status_code=status.HTTP_201_CREATED)
def send_message(ticket_id: int, message_in: MessageCreate, thread: MessageThread = Depends(get_thread)):
    return thread.append_message(
        ticket_id,
        sender_id=message_in.sender_id,
        content=message_in.content,
        is_internal_note=message_in.is_internal_note,
    )
