"""Profile service: a user's own record, or any record for an admin."""

from typing import Any, Dict

from sqlalchemy.orm import Session

from adminconsole.models.user import UserRole
from adminconsole.services.user_service import user_service


class ProfileService:

    @staticmethod
    def view_profile(db: Session, requester: dict, user_id: int) -> Dict[str, Any]:
        """Return the profile for ``user_id``.

        Non-admins always get their own profile, whatever id they ask for.
        """
        if requester.get("role") != UserRole.admin.value:
            user_id = int(requester["user_id"])
        return user_service.get_user_detail(db, user_id)


profile_service = ProfileService()
