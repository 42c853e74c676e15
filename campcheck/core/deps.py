# File: campcheck/core/deps.py
from typing import Optional
from fastapi import Header
from pydantic import BaseModel

class CallerContext(BaseModel):
    """Identity forwarded by the authentication layer in front of this service"""
    email: Optional[str] = None
    role: Optional[str] = None  # admin | leader

def get_caller_context(
    x_user_email: Optional[str] = Header(None),
    x_user_role: Optional[str] = Header(None)
) -> CallerContext:
    # Authorization already happened upstream; this only carries identity for the ledger
    return CallerContext(
        email=x_user_email,
        role=x_user_role.lower() if x_user_role else None
    )
