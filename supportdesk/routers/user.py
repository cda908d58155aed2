from fastapi import APIRouter, Depends
from typing import List
from supportdesk.schemas.user import UserRead
from supportdesk.core.deps import get_directory
from supportdesk.services.directory import IdentityDirectory

router = APIRouter(prefix="/api/users", tags=["users"])

@router.get("", response_model=List[UserRead])
def read_users(directory: IdentityDirectory = Depends(get_directory)):
    return directory.list_users()

@router.get("/{user_id}", response_model=UserRead)
def read_user(user_id: int, directory: IdentityDirectory = Depends(get_directory)):
    return directory.get_user(user_id)
