from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from datetime import datetime

class MessageCreate(BaseModel):
    sender_id: int
    content: str
    is_internal_note: bool = False

    class Config:
        alias_generator = to_camel
        populate_by_name = True

class MessageRead(BaseModel):
    id: int
    ticket_id: int
    sender_id: int
    content: str
    created_at: datetime
    is_internal_note: bool

    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True
