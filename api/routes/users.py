from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from api.schemas import UserProfile
from core.errors import NotFound
from core.security import AuthData, get_current_user
from db.models import User
from db.session import get_db

router = APIRouter()


@router.get("/profile", response_model=UserProfile)
def get_profile(
    user: AuthData = Depends(get_current_user), db: Session = Depends(get_db)
):
    """Profile of the authenticated user."""
    row = db.get(User, user.user_id)
    if row is None:
        raise NotFound("User not found")
    return UserProfile(
        id=str(row.id),
        email=row.email,
        first_name=row.first_name,
        last_name=row.last_name,
        created_at=row.created_at,
    )
