"""Seed the first Admin account from env vars."""

from sqlalchemy.orm import Session

from adminconsole.core.config import settings
from adminconsole.core.security import hash_password
from adminconsole.models.user import User, UserRole


def seed_admin(db: Session) -> None:
    """Create the bootstrap Admin if not already present."""
    email = settings.ADMIN_EMAIL.strip().lower()
    existing = db.query(User).filter(
        (User.email == email) | (User.username == settings.ADMIN_USERNAME)
    ).first()
    if existing:
        print(f"ℹ️  Admin '{email}' already exists, skipping.")
        return

    admin = User(
        username=settings.ADMIN_USERNAME,
        full_name=settings.ADMIN_FULL_NAME,
        email=email,
        mobile=settings.ADMIN_MOBILE,
        role=UserRole.admin,
        password_hash=hash_password(settings.ADMIN_PASSWORD),
    )
    db.add(admin)
    db.commit()
    print(f"✅ Created admin: {email}")
