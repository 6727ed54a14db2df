from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.services import chat_service
from app.schemas import auth_schemas, chat_schemas
from app.schemas.common_schemas import MessageResponse
from app.api.dependencies import get_db, any_role

router = APIRouter()

@router.get("/my-groups", response_model=List[chat_schemas.ChatGroup])
async def my_groups_endpoint(
    db: Session = Depends(get_db),
    identity: auth_schemas.Identity = Depends(any_role),
):
    return chat_service.list_groups_for_user(db, identity)

@router.get("/{contest_id}", response_model=chat_schemas.MessagePage)
async def list_messages_endpoint(
    contest_id: int,
    limit: Optional[int] = Query(None),
    before: Optional[int] = Query(None),
    db: Session = Depends(get_db),
    identity: auth_schemas.Identity = Depends(any_role),
):
    return chat_service.list_messages(db, contest_id, limit=limit, before=before)

@router.post("/{contest_id}", response_model=chat_schemas.MessageRead, status_code=status.HTTP_201_CREATED)
async def post_message_endpoint(
    contest_id: int,
    message_in: chat_schemas.MessageCreate,
    db: Session = Depends(get_db),
    identity: auth_schemas.Identity = Depends(any_role),
):
    return chat_service.post_message(db, contest_id, identity, message_in.message_text)

@router.delete("/message/{message_id}", response_model=MessageResponse)
async def delete_message_endpoint(
    message_id: int,
    db: Session = Depends(get_db),
    identity: auth_schemas.Identity = Depends(any_role),
):
    chat_service.delete_message(db, message_id, identity)
    return {"message": "Message deleted successfully"}
