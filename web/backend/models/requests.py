#!/usr/bin/env python3
"""
Request models for API endpoints.
"""

from pydantic import BaseModel, Field
from typing import Optional


class StatusUpdateRequest(BaseModel):
    """Request to move a match along the status lifecycle."""
    status: str = Field(..., description="Target status, e.g. viewed, contacted, shortlisted")
    actor_id: Optional[str] = Field(None, description="User performing the update")


class ContactRequest(BaseModel):
    """Request to mark a candidate as contacted."""
    actor_id: Optional[str] = Field(None, description="User contacting the candidate")
