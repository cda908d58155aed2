from fastapi import Depends, Query
from sqlalchemy.orm import Session

from supportdesk.core.ai import TicketAdvisor
from supportdesk.core.bot import DraftReplyBot
from supportdesk.core.database import SessionLocal
from supportdesk.models.user import User
from supportdesk.services.directory import IdentityDirectory
from supportdesk.services.drafts import DraftReplies
from supportdesk.services.messages import MessageThread
from supportdesk.services.queries import TicketQueryView
from supportdesk.services.tickets import TicketLifecycle

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def get_advisor() -> TicketAdvisor:
    return TicketAdvisor.from_settings()

def get_bot() -> DraftReplyBot:
    return DraftReplyBot.from_settings()

def get_directory(db: Session = Depends(get_db)) -> IdentityDirectory:
    return IdentityDirectory(db)

def get_tickets(
    db: Session = Depends(get_db),
    directory: IdentityDirectory = Depends(get_directory),
    advisor: TicketAdvisor = Depends(get_advisor),
) -> TicketLifecycle:
    return TicketLifecycle(db, directory, advisor)

def get_thread(tickets: TicketLifecycle = Depends(get_tickets)) -> MessageThread:
    return tickets.thread

def get_query_view(db: Session = Depends(get_db)) -> TicketQueryView:
    return TicketQueryView(db)

def get_drafts(thread: MessageThread = Depends(get_thread), bot: DraftReplyBot = Depends(get_bot)) -> DraftReplies:
    return DraftReplies(thread, bot)

def get_caller(
    user_id: int = Query(..., alias="userId", description="Identity of the caller; trusted as given"),
    directory: IdentityDirectory = Depends(get_directory),
) -> User:
    return directory.get_user(user_id)
