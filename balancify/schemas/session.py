# schemas/session.py

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import ConfigDict, Field

from .common import CamelModel


class SessionCreate(CamelModel):
    user_name: str = Field(..., min_length=1, max_length=255, description="Name the questionnaire greets the user with.")


class SessionProgressUpdate(CamelModel):
    form_data: Dict[str, Any] = Field(default_factory=dict, description="Answers collected so far; merged into the stored form data.")
    current_step: int = Field(..., ge=0, description="Index of the questionnaire step the user is on.")


class SessionComplete(CamelModel):
    questionnaire_id: Optional[str] = Field(None, description="Questionnaire created from this session, if submitted.")


class SessionOut(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_name: str
    status: str
    current_step: int
    form_data: Dict[str, Any]
    questionnaire_id: Optional[str] = None
    started_at: datetime
    last_updated: datetime
    expires_at: datetime
