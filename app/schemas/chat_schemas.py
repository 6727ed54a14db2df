from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime

from app.models.user import Role

class MessageCreate(BaseModel):
    message_text: str = Field(max_length=4000)

class MessageRead(BaseModel):
    id: int
    chat_id: int
    sender_role: Role
    sender_id: int
    sender_name: Optional[str] = None
    message_text: str
    sent_at: datetime

class MessagePage(BaseModel):
    chat_id: int
    contest_id: int
    messages: List[MessageRead]

class ChatGroup(BaseModel):
    contest_id: int
    title: str
    last_activity: datetime
