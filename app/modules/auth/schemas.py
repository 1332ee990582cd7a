from pydantic import BaseModel, EmailStr
from typing import Optional, Dict, Any


class CurrentUserResponse(BaseModel):
    id: str
    email: Optional[EmailStr] = None
    user_metadata: Dict[str, Any] = {}
    app_metadata: Dict[str, Any] = {}
    is_super_user: bool = False
