"""Profile API router."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from adminconsole.core.security import get_current_user
from adminconsole.db.session import get_db
from adminconsole.schemas.schemas import UserDetailResponse
from adminconsole.services.profile_service import profile_service

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("/{user_id}", response_model=UserDetailResponse)
async def view_profile(
    user_id: int,
    db: Session = Depends(get_db),
    payload: dict = Depends(get_current_user),
):
    """The caller's profile; admins may look at anyone's."""
    user = profile_service.view_profile(db, payload, user_id)
    return UserDetailResponse(message="User profile fetched successfully", user=user)
