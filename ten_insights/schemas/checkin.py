"""
Check-in schemas.

POST /checkin/{user_id}/evaluate          → TriggerDecisionResponse
POST /checkin/{user_id}/start             → CheckInSessionResponse
GET  /checkin/sessions/{id}               → CheckInSessionResponse
POST /checkin/sessions/{id}/advance       → CheckInSessionResponse
POST /checkin/sessions/{id}/skip          → CheckInSessionResponse
"""
from typing import Literal, Optional
from pydantic import BaseModel, Field


class EvaluateRequest(BaseModel):
    auto_start: bool = Field(
        default=False,
        description="Start a session right away when the trigger fires.",
    )
    has_best_friend: bool = False
    best_friend_name: Optional[str] = Field(default=None, max_length=128)


class StartCheckInRequest(BaseModel):
    has_best_friend: bool = False
    best_friend_name: Optional[str] = Field(default=None, max_length=128)


class AdvanceRequest(BaseModel):
    response: Optional[str] = Field(
        default=None,
        max_length=2000,
        description="Free-text answer; accepted at the reflection and gratitude steps.",
    )
    notify_friend: Optional[bool] = Field(
        default=None,
        description="Opt in/out of a heads-up to the best friend; friend_notice step only.",
    )


class CheckInSessionResponse(BaseModel):
    id: str
    user_id: str
    started_at: str
    status: Literal["active", "completed", "skipped"]
    current_step: str
    step_title: str
    steps: list[str]
    has_best_friend: bool
    best_friend_name: Optional[str] = None
    notify_friend: bool
    will_notify_friend: bool
    reflection_prompt: str
    gratitude_prompt: str
    reflection_response: Optional[str] = None
    gratitude_response: Optional[str] = None


class TriggerDecisionResponse(BaseModel):
    user_id: str
    should_trigger: bool
    reason: Literal[
        "no_ratings", "cooldown_active", "cooldown_unavailable",
        "low_average", "sharp_drop", "no_signal",
    ]
    last_triggered_at: Optional[str] = None
    recent_average: Optional[float] = None
    drop: Optional[int] = None
    session: Optional[CheckInSessionResponse] = Field(
        default=None, description="Present when auto_start was requested and a session is open.",
    )
