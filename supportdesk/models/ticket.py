from sqlalchemy import Column, Integer, String, Text, Enum, ForeignKey, Index
from sqlalchemy.orm import relationship
from supportdesk.core.database import Base, Timestamp
import enum

class TicketStatus(str, enum.Enum):
    OPEN = "OPEN"
    IN_PROGRESS = "IN_PROGRESS"
    WAITING_FOR_USER = "WAITING_FOR_USER"
    CLOSED = "CLOSED"

class TicketPriority(str, enum.Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"

DEFAULT_CATEGORY = "General"

# Column widths, shared with input validation in the lifecycle
SUBJECT_LENGTH = 255
CATEGORY_LENGTH = 100
SENTIMENT_LENGTH = 100

class Ticket(Base):
    __tablename__ = "tickets"

    id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    subject = Column(String(SUBJECT_LENGTH), nullable=False)
    description = Column(Text, nullable=False)
    status = Column(Enum(TicketStatus), default=TicketStatus.OPEN, nullable=False)
    priority = Column(Enum(TicketPriority), default=TicketPriority.MEDIUM, nullable=False)
    category = Column(String(CATEGORY_LENGTH), default=DEFAULT_CATEGORY, nullable=False)
    created_at = Column(Timestamp, nullable=False)
    updated_at = Column(Timestamp, nullable=False)
    assigned_to = Column(Integer, ForeignKey("users.id"), nullable=True)
    ai_summary = Column(Text, nullable=True)
    ai_sentiment = Column(String(SENTIMENT_LENGTH), nullable=True)

    customer = relationship("User", foreign_keys=[customer_id], back_populates="tickets")
    messages = relationship("Message", back_populates="ticket")

    __table_args__ = (
        Index("ix_tickets_status_updated", "status", "updated_at"),
    )
