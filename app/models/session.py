from datetime import datetime

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from app.database import Base


class MentorSession(Base):
    __tablename__ = "sessions"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    duration = Column(String, nullable=True)
    date = Column(String, nullable=True)
    time = Column(String, nullable=True)
    mentor = Column(String, nullable=True)

    mode = Column(String(20), nullable=False, default="offline")
    meeting_link = Column(String, nullable=True)  # online only
    location = Column(String, nullable=True)  # offline only

    status = Column(String(20), nullable=False, default="draft", index=True)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    registered_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    registrations = relationship(
        "SessionRegistration",
        back_populates="session",
        order_by="SessionRegistration.id",
        passive_deletes=True,
    )

    @property
    def registered_users(self) -> list[int]:
        return [registration.user_id for registration in self.registrations]


class SessionRegistration(Base):
    __tablename__ = "session_registrations"
    __table_args__ = (
        UniqueConstraint("session_id", "user_id", name="uq_session_registration_user"),
    )

    id = Column(Integer, primary_key=True, index=True)
    session_id = Column(Integer, ForeignKey("sessions.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    registered_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    session = relationship("MentorSession", back_populates="registrations")
    user = relationship("User", lazy="joined")
