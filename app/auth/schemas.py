from typing import Optional

from pydantic import BaseModel

from app.core.enums import UserRole


class CurrentUser(BaseModel):
    """Identity carried by the bearer token. Issued by the login service."""

    id: str
    role: UserRole
    # Set for STUDENT tokens; links the user to a student profile
    student_id: Optional[str] = None
