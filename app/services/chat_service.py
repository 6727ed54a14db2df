"""Per-contest chat threads.

Threads are created on first use. Clients poll ``list_messages``; nothing here
pushes to anyone and no read state is kept on the server.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import func
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import Forbidden, NotFound, ValidationError
from app.models import Contest, ContestChat, Message, ROLE_MODELS, Sender
from app.schemas.auth_schemas import Identity
from app.services import contest_service

logger = logging.getLogger(__name__)


def sender_of(identity: Identity) -> Sender:
    return Sender(identity.role, identity.id)


def get_or_create_chat(db: Session, contest_id: int) -> ContestChat:
    contest_service.get_contest(db, contest_id)
    chat = db.query(ContestChat).filter(ContestChat.contest_id == contest_id).first()
    if chat:
        return chat

    db.execute(
        sqlite_insert(ContestChat.__table__)
        .values(contest_id=contest_id, created_at=contest_service.utcnow())
        .on_conflict_do_nothing(index_elements=["contest_id"])
    )
    db.commit()
    logger.debug("Chat thread created lazily for contest %s", contest_id)
    return db.query(ContestChat).filter(ContestChat.contest_id == contest_id).one()


def _resolve_sender_names(db: Session, messages: Iterable[Message]) -> Dict[Sender, str]:
    ids_by_role: Dict[Any, set] = {}
    for message in messages:
        ids_by_role.setdefault(message.sender_role, set()).add(message.sender_id)

    names = {}
    for role, ids in ids_by_role.items():
        model = ROLE_MODELS[role]
        for person_id, name in db.query(model.id, model.name).filter(model.id.in_(ids)):
            names[Sender(role, person_id)] = name
    return names


def _message_row(message: Message, sender_name: Optional[str]) -> Dict[str, Any]:
    return {
        "id": message.id,
        "chat_id": message.chat_id,
        "sender_role": message.sender_role,
        "sender_id": message.sender_id,
        "sender_name": sender_name,
        "message_text": message.message_text,
        "sent_at": message.sent_at,
    }


def post_message(db: Session, contest_id: int, identity: Identity, text: Optional[str]) -> Dict[str, Any]:
    text = (text or "").strip()
    if not text:
        raise ValidationError("Message text is required")

    chat = get_or_create_chat(db, contest_id)
    message = Message(chat_id=chat.id, sender=sender_of(identity), message_text=text)
    db.add(message)
    db.commit()
    db.refresh(message)
    logger.info("Message %s posted to contest %s by %s %s", message.id, contest_id, identity.role.value, identity.id)
    return _message_row(message, identity.name)


def list_messages(db: Session, contest_id: int, limit: Optional[int] = None, before: Optional[int] = None) -> Dict[str, Any]:
    """Return the newest ``limit`` messages (older than ``before`` if given), oldest first."""
    if limit is None:
        limit = settings.CHAT_PAGE_SIZE
    if not 1 <= limit <= settings.CHAT_MAX_PAGE_SIZE:
        raise ValidationError(f"limit must be between 1 and {settings.CHAT_MAX_PAGE_SIZE}")

    chat = get_or_create_chat(db, contest_id)
    query = db.query(Message).filter(Message.chat_id == chat.id)
    if before is not None:
        query = query.filter(Message.id < before)
    page = query.order_by(Message.id.desc()).limit(limit).all()
    page.reverse()

    names = _resolve_sender_names(db, page)
    return {
        "chat_id": chat.id,
        "contest_id": contest_id,
        "messages": [_message_row(m, names.get(m.sender)) for m in page],
    }


def delete_message(db: Session, message_id: int, identity: Identity) -> None:
    message = db.query(Message).filter(Message.id == message_id).first()
    if not message:
        raise NotFound("Message not found")
    if message.sender != sender_of(identity):
        raise Forbidden("You can only delete your own messages")

    db.delete(message)
    db.commit()
    logger.info("Message %s deleted by %s %s", message_id, identity.role.value, identity.id)


def list_groups_for_user(db: Session, identity: Identity) -> List[Dict[str, Any]]:
    """Contests the caller has posted in, most recently active first."""
    last_activity = func.max(Message.sent_at).label("last_activity")
    rows = (
        db.query(Contest.id, Contest.title, last_activity)
        .join(ContestChat, ContestChat.contest_id == Contest.id)
        .join(Message, Message.chat_id == ContestChat.id)
        .filter(Message.sender_role == identity.role, Message.sender_id == identity.id)
        .group_by(Contest.id, Contest.title)
        .order_by(last_activity.desc(), Contest.id.desc())
        .all()
    )
    return [
        {"contest_id": contest_id, "title": title, "last_activity": activity}
        for contest_id, title, activity in rows
    ]
