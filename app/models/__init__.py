from app.core.database import Base

# Import all models here to ensure they are registered with Base
from .user import Role, Student, Coordinator, Mentor, ROLE_MODELS
from .contest import Contest
from .registration import Registration
from .team import Team, TeamMember
from .chat import ContestChat, Message, Sender
