from pydantic import BaseModel, EmailStr
from pydantic.alias_generators import to_camel
from typing import Optional
from supportdesk.models.user import UserRole

class UserRead(BaseModel):
    id: int
    name: str
    email: EmailStr
    role: UserRole
    avatar_url: Optional[str] = None

    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True
