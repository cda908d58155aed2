"""Seed reference users and a sample ticket.

Run with ``python -m supportdesk.seed``. Safe to run more than once.
"""
import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from supportdesk.core.config import settings
from supportdesk.core.database import SessionLocal, init_db, transaction
from supportdesk.core.logging import setup_logging
from supportdesk.models.ticket import Ticket, TicketPriority
from supportdesk.models.user import User, UserRole
from supportdesk.services.directory import IdentityDirectory
from supportdesk.services.tickets import TicketLifecycle

logger = logging.getLogger(__name__)

USERS = [
    {
        "name": "Alex Customer",
        "email": "alex@example.com",
        "role": UserRole.CUSTOMER,
        "avatar_url": "https://picsum.photos/100/100?random=1",
    },
    {
        "name": "Maria, Support Agent",
        "email": "support@example.com",
        "role": UserRole.AGENT,
        "avatar_url": "https://picsum.photos/100/100?random=2",
    },
]

SAMPLE_TICKET = {
    "subject": "API request limit exceeded",
    "description": "I keep getting 429 errors when calling the Instagram auto-like endpoint. Can you raise my limits?",
    "category": "API Integration",
    "priority": TicketPriority.HIGH,
}
SAMPLE_SUMMARY = "Customer is hitting rate limits on the Instagram API."
SAMPLE_SENTIMENT = "Frustrated"


def seed_users(db: Session) -> list:
    users = []
    with transaction(db):
        for data in USERS:
            user = db.scalar(select(User).where(User.email == data["email"]))
            if user is None:
                user = User(**data)
                db.add(user)
            users.append(user)
    return users


def seed_sample_ticket(db: Session, customer: User) -> None:
    if db.scalar(select(Ticket.id).where(Ticket.customer_id == customer.id).limit(1)) is not None:
        return
    tickets = TicketLifecycle(db, IdentityDirectory(db))
    ticket = tickets.create_ticket(customer_id=customer.id, **SAMPLE_TICKET)
    with transaction(db):
        ticket.ai_summary = SAMPLE_SUMMARY
        ticket.ai_sentiment = SAMPLE_SENTIMENT


def seed(db: Session) -> None:
    customer, _agent = seed_users(db)
    seed_sample_ticket(db, customer)
    logger.info("Seed data in place")


if __name__ == "__main__":
    setup_logging(settings.LOG_LEVEL)
    init_db()
    session = SessionLocal()
    try:
        seed(session)
    finally:
        session.close()
