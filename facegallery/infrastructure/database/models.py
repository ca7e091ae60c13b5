"""SQLAlchemy models for the face gallery store."""
import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


class Person(Base):
    """Named cluster of faces believed to be the same individual.

    Membership is not stored here: a person owns exactly the faces whose
    ``person_id`` points at it.
    """

    __tablename__ = "persons"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=_new_id
    )
    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Operator-editable display name"
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utcnow
    )


class Image(Base):
    """Uploaded image in which faces were detected."""

    __tablename__ = "images"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=_new_id
    )
    filename: Mapped[str] = mapped_column(
        String(512),
        nullable=False,
        comment="Stored file name, resolved by the external image store"
    )
    mime_type: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        default="image/jpeg"
    )
    uploaded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utcnow
    )


class Face(Base):
    """Detected face, owned by exactly one person."""

    __tablename__ = "faces"
    __table_args__ = (
        Index("idx_faces_person", "person_id"),
        Index("idx_faces_image", "image_id"),
    )

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=_new_id
    )
    person_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("persons.id"),
        nullable=False
    )
    image_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("images.id", ondelete="CASCADE"),
        nullable=False
    )
    bbox_top: Mapped[int] = mapped_column(Integer)
    bbox_right: Mapped[int] = mapped_column(Integer)
    bbox_bottom: Mapped[int] = mapped_column(Integer)
    bbox_left: Mapped[int] = mapped_column(Integer)
    cropped_face_filename: Mapped[str] = mapped_column(
        String(512),
        nullable=True,
        comment="Cropped thumbnail produced by the detection engine"
    )
    manually_assigned: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
        comment="Set once an operator has moved the face"
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utcnow
    )

    # Many-to-one only; person membership is always queried, never cached
    person: Mapped[Person] = relationship(lazy="raise")
    image: Mapped[Image] = relationship(lazy="raise")
