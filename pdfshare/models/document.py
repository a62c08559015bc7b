"""
Document, access token and access log models.
"""
from sqlalchemy import Boolean, Column, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from pdfshare.db.base import Base, UTCDateTime, utcnow


class Document(Base):
    """Uploaded PDF metadata. The bytes live in the file storage backend."""

    __tablename__ = "documents"

    id = Column(Integer, primary_key=True, index=True)
    filename = Column(String, nullable=False)
    file_path = Column(String, nullable=False)  # storage key returned by the backend
    file_size = Column(Integer, nullable=False)
    content_type = Column(String, nullable=False, default="application/pdf")
    owner_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    uploaded_at = Column(UTCDateTime, default=utcnow, nullable=False)

    # Relationships
    owner = relationship("User", back_populates="documents")
    access_tokens = relationship(
        "AccessToken", back_populates="document", cascade="all, delete-orphan", passive_deletes=True
    )
    access_logs = relationship(
        "AccessLog", back_populates="document", cascade="all, delete-orphan", passive_deletes=True
    )
    comments = relationship(
        "Comment", back_populates="document", cascade="all, delete-orphan", passive_deletes=True
    )


class AccessToken(Base):
    """Time-limited, revocable capability granting anonymous access to one document."""

    __tablename__ = "access_tokens"

    id = Column(Integer, primary_key=True, index=True)
    document_id = Column(Integer, ForeignKey("documents.id", ondelete="CASCADE"), nullable=False, index=True)
    token = Column(String, unique=True, index=True, nullable=False)
    created_at = Column(UTCDateTime, default=utcnow, nullable=False)
    expires_at = Column(UTCDateTime, nullable=False)
    is_revoked = Column(Boolean, default=False, nullable=False)

    # Relationships
    document = relationship("Document", back_populates="access_tokens")


class AccessLog(Base):
    """Append-only record of a successful token resolution."""

    __tablename__ = "access_logs"

    id = Column(Integer, primary_key=True, index=True)
    document_id = Column(Integer, ForeignKey("documents.id", ondelete="CASCADE"), nullable=False, index=True)
    accessed_at = Column(UTCDateTime, default=utcnow, nullable=False)
    ip_address = Column(String, nullable=True)
    user_agent = Column(Text, nullable=True)

    # Relationships
    document = relationship("Document", back_populates="access_logs")
