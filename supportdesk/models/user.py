from sqlalchemy import Column, Integer, String, Enum
from sqlalchemy.orm import relationship
from supportdesk.core.database import Base
import enum

class UserRole(str, enum.Enum):
    CUSTOMER = "CUSTOMER"
    AGENT = "AGENT"

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    role = Column(Enum(UserRole), nullable=False)
    avatar_url = Column(String(255), nullable=True)

    tickets = relationship("Ticket", foreign_keys="[Ticket.customer_id]", back_populates="customer")

    @property
    def is_agent(self) -> bool:
        return self.role == UserRole.AGENT
