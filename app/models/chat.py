"""Contest chat threads and their messages.

A message's author is a ``Sender``: a role tag plus the id inside that role's
table. Both columns are mandatory, so a message always has exactly one author.
"""

import datetime
from dataclasses import dataclass

from sqlalchemy import Column, Integer, Text, ForeignKey, DateTime, Enum, Index
from sqlalchemy.orm import relationship, composite
from app.core.database import Base
from app.models.user import Role


@dataclass(frozen=True)
class Sender:
    role: Role
    id: int


class ContestChat(Base):
    __tablename__ = "contest_chats"

    id = Column(Integer, primary_key=True, index=True)
    contest_id = Column(Integer, ForeignKey("contests.id", ondelete="CASCADE"), unique=True, nullable=False)
    created_at = Column(DateTime, default=datetime.datetime.utcnow)

    contest = relationship("Contest", back_populates="chat")
    messages = relationship(
        "Message", back_populates="chat", cascade="all, delete-orphan", passive_deletes=True
    )


class Message(Base):
    __tablename__ = "messages"
    __table_args__ = (Index("ix_messages_sender", "sender_role", "sender_id"),)

    id = Column(Integer, primary_key=True, index=True)
    chat_id = Column(Integer, ForeignKey("contest_chats.id", ondelete="CASCADE"), nullable=False, index=True)
    sender_role = Column(Enum(Role, values_callable=lambda roles: [r.value for r in roles], create_constraint=True), nullable=False)
    sender_id = Column(Integer, nullable=False)
    message_text = Column(Text, nullable=False)
    sent_at = Column(DateTime, default=datetime.datetime.utcnow, nullable=False)

    sender = composite(Sender, sender_role, sender_id)

    chat = relationship("ContestChat", back_populates="messages")
