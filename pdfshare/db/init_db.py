"""
Database initialization and seeding.

Run ``pdfshare-init-db`` (or ``python -m pdfshare.db.init_db``) once per
environment: it creates missing tables, prepares the configured file
storage and seeds an admin account. Alembic remains the path for schema
changes on existing databases.
"""
import argparse
import logging
import os
from typing import List, Optional

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from pdfshare.core.config import settings
from pdfshare.core.security import get_password_hash
from pdfshare.db.base import SessionLocal, engine
from pdfshare.models import Base
from pdfshare.models.user import User
from pdfshare.services.file_service import get_file_storage

logger = logging.getLogger(__name__)


def init_db(db: Session) -> User:
    """
    Seed a local admin account if none exists.

    Credentials come from ADMIN_EMAIL / ADMIN_PASSWORD, falling back to
    development defaults.

    Returns:
        The existing or newly created admin
    """
    email = os.getenv("ADMIN_EMAIL", "admin@example.com")
    admin = db.query(User).filter(User.email == email).first()
    if admin:
        logger.info(f"Admin user {email} already exists")
        return admin

    admin = User(
        email=email,
        username="admin",
        full_name="System Administrator",
        hashed_password=get_password_hash(os.getenv("ADMIN_PASSWORD", "admin123")),
        is_active=True,
    )
    db.add(admin)
    db.commit()
    db.refresh(admin)
    logger.info(f"Admin user {email} created")
    return admin


def init(bind: Engine = engine, session_factory: sessionmaker = SessionLocal, seed_admin: bool = True) -> None:
    """
    Create tables, prepare file storage and optionally seed the admin.

    Args:
        bind: Engine to create tables on
        session_factory: Session factory used for seeding
        seed_admin: Whether to create the admin account
    """
    logger.info("Creating database tables")
    Base.metadata.create_all(bind=bind)

    # Local storage creates its upload directory on construction
    storage = get_file_storage()
    logger.info(f"File storage '{storage.name}' ready (max upload {settings.MAX_UPLOAD_SIZE} bytes)")

    if seed_admin:
        db = session_factory()
        try:
            init_db(db)
        finally:
            db.close()

    logger.info("Database initialization complete")


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Initialize the pdfshare database")
    parser.add_argument("--skip-admin", action="store_true", help="Do not seed the admin account")
    args = parser.parse_args(argv)

    logging.basicConfig(level=settings.LOG_LEVEL, format="%(levelname)s:\t%(name)s\t%(message)s")
    init(seed_admin=not args.skip_admin)


if __name__ == "__main__":
    main()
