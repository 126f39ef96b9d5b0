"""Relational schema: one table per entity.

contact(id PK, name, email UNIQUE, phone?, company?, notes?, status, created_at)
project(id PK, title, description?, amount?, due_date?, status, created_at,
        contact_id FK -> contact.id ON UPDATE CASCADE ON DELETE RESTRICT)
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Enum, Float, ForeignKey, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from crm.domain import ContactStatus, ProjectStatus


class Base(DeclarativeBase):
    pass


class ContactRecord(Base):
    __tablename__ = "contact"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True)
    phone: Mapped[Optional[str]] = mapped_column(String(32))
    company: Mapped[Optional[str]] = mapped_column(String(255))
    notes: Mapped[Optional[str]] = mapped_column(Text)
    status: Mapped[ContactStatus] = mapped_column(
        Enum(ContactStatus, name="contact_status"),
        nullable=False,
        default=ContactStatus.PROSPECT,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    # The database enforces RESTRICT; the ORM must not try to null out children.
    projects: Mapped[list["ProjectRecord"]] = relationship(
        back_populates="contact", passive_deletes="all", lazy="noload"
    )


class ProjectRecord(Base):
    __tablename__ = "project"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    amount: Mapped[Optional[float]] = mapped_column(Float)
    due_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    status: Mapped[ProjectStatus] = mapped_column(
        Enum(ProjectStatus, name="project_status"),
        nullable=False,
        default=ProjectStatus.PENDING,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    contact_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("contact.id", ondelete="RESTRICT", onupdate="CASCADE"),
        nullable=False,
        index=True,
    )

    contact: Mapped[ContactRecord] = relationship(back_populates="projects", lazy="joined")
