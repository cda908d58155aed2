from sqlalchemy import Column, Integer, Text, ForeignKey, Boolean, Index
from sqlalchemy.orm import relationship
from supportdesk.core.database import Base, Timestamp

class Message(Base):
    __tablename__ = "messages"

    id = Column(Integer, primary_key=True, index=True)
    ticket_id = Column(Integer, ForeignKey("tickets.id"), nullable=False)
    sender_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    content = Column(Text, nullable=False)
    created_at = Column(Timestamp, nullable=False)
    is_internal_note = Column(Boolean, default=False, nullable=False)

    ticket = relationship("Ticket", back_populates="messages")

    __table_args__ = (
        Index("ix_messages_ticket_created", "ticket_id", "created_at", "id"),
    )
