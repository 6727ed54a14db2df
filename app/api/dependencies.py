from app.core.database import SessionLocal
from app.services.auth_service import get_current_identity, require_roles
from app.models import Role

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

# Role gates shared by the routers
student_only = require_roles(Role.STUDENT)
coordinator_only = require_roles(Role.COORDINATOR)
mentor_only = require_roles(Role.MENTOR)
staff_only = require_roles(Role.COORDINATOR, Role.MENTOR)
any_role = get_current_identity
