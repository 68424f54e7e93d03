"""
Check-in router.

POST /checkin/{user_id}/evaluate: should the prompt show now?
POST /checkin/{user_id}/start: user accepted; start a session
POST /checkin/{user_id}/reset-cooldown: let the prompt fire again (support tool)
GET  /checkin/sessions/{session_id}: current session state
POST /checkin/sessions/{session_id}/advance
POST /checkin/sessions/{session_id}/skip
"""
from __future__ import annotations

from datetime import timedelta
from typing import Optional

from fastapi import APIRouter, Depends, status

from ten_insights.core.config import settings
from ten_insights.core.dependencies import get_checkin_engine, get_rating_repository
from ten_insights.schemas.checkin import (
    AdvanceRequest,
    CheckInSessionResponse,
    EvaluateRequest,
    StartCheckInRequest,
    TriggerDecisionResponse,
)
from ten_insights.schemas.common import SESSION_NOT_FOUND, ErrorResponse
from ten_insights.services.checkin_engine import CheckInSession, CheckInTriggerEngine
from ten_insights.services.repositories import SqlRatingRepository

router = APIRouter(prefix="/checkin", tags=["checkin"])


# ---------------------------------------------------------------------------
# Serialization helper
# ---------------------------------------------------------------------------

def _session_to_response(s: CheckInSession) -> CheckInSessionResponse:
    return CheckInSessionResponse(
        id=s.id,
        user_id=s.user_id,
        started_at=s.started_at.isoformat(),
        status=s.status.value,
        current_step=s.current_step.name,
        step_title=s.current_step.title,
        steps=[step.name for step in s.steps],
        has_best_friend=s.has_best_friend,
        best_friend_name=s.best_friend_name,
        notify_friend=s.notify_friend,
        will_notify_friend=s.will_notify_friend,
        reflection_prompt=s.reflection_prompt,
        gratitude_prompt=s.gratitude_prompt,
        reflection_response=s.reflection_response,
        gratitude_response=s.gratitude_response,
    )


# ---------------------------------------------------------------------------
# Trigger
# ---------------------------------------------------------------------------

@router.post(
    "/{user_id}/evaluate",
    response_model=TriggerDecisionResponse,
    summary="Evaluate the check-in trigger",
)
def evaluate(
    user_id: str,
    payload: Optional[EvaluateRequest] = None,
    repo: SqlRatingRepository = Depends(get_rating_repository),
    engine: CheckInTriggerEngine = Depends(get_checkin_engine),
):
    """
    Fires when the last 3 ratings average below 5, or the latest rating
    dropped 4+ points from the one before. At most once per 24 hours.

    With `auto_start=true` a triggered evaluation also starts the session
    atomically, so two devices can't both start one.
    """
    payload = payload or EvaluateRequest()
    since = engine.clock.now() - timedelta(days=settings.RATING_HISTORY_DAYS)
    ratings = repo.list_ratings(user_id, since=since)
    decision = engine.check(user_id, ratings)

    session = None
    if payload.auto_start and decision.should_trigger:
        session = engine.evaluate_and_start(
            user_id,
            ratings,
            has_best_friend=payload.has_best_friend,
            best_friend_name=payload.best_friend_name,
        )
        if session is None:
            # Another request consumed the cooldown in between
            decision = engine.check(user_id, ratings)

    return TriggerDecisionResponse(
        user_id=user_id,
        should_trigger=decision.should_trigger,
        reason=decision.reason.value,
        last_triggered_at=(
            decision.last_triggered_at.isoformat() if decision.last_triggered_at else None
        ),
        recent_average=decision.recent_average,
        drop=decision.drop,
        session=_session_to_response(session) if session else None,
    )


@router.post(
    "/{user_id}/start",
    response_model=CheckInSessionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Start a check-in session",
    responses={503: {"model": ErrorResponse, "description": "Cooldown could not be saved; retry later."}},
)
def start(
    user_id: str,
    payload: StartCheckInRequest,
    engine: CheckInTriggerEngine = Depends(get_checkin_engine),
):
    """
    Create a session and start the 24h cooldown. If the user already has an
    open session, that one is returned.
    """
    session = engine.start_check_in(
        user_id,
        has_best_friend=payload.has_best_friend,
        best_friend_name=payload.best_friend_name,
    )
    return _session_to_response(session)


@router.post(
    "/{user_id}/reset-cooldown",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Clear the check-in cooldown",
)
def reset_cooldown(user_id: str, engine: CheckInTriggerEngine = Depends(get_checkin_engine)):
    engine.reset_cooldown(user_id)


# ---------------------------------------------------------------------------
# Sessions
# ---------------------------------------------------------------------------

@router.get(
    "/sessions/{session_id}",
    response_model=CheckInSessionResponse,
    summary="Get a check-in session",
    responses=SESSION_NOT_FOUND,
)
def get_session(session_id: str, engine: CheckInTriggerEngine = Depends(get_checkin_engine)):
    return _session_to_response(engine.get_session(session_id))


@router.post(
    "/sessions/{session_id}/advance",
    response_model=CheckInSessionResponse,
    summary="Move a check-in session to its next step",
    responses={
        **SESSION_NOT_FOUND,
        409: {"model": ErrorResponse, "description": "Input not accepted at the current step."},
    },
)
def advance(
    session_id: str,
    payload: Optional[AdvanceRequest] = None,
    engine: CheckInTriggerEngine = Depends(get_checkin_engine),
):
    """
    Steps: welcome → acknowledgment → friend_notice (only with a best
    friend) → reflection → gratitude → closing → complete.

    Advancing from `closing` completes the session; `will_notify_friend`
    tells the client whether to send the best friend a heads-up.
    """
    payload = payload or AdvanceRequest()
    session = engine.advance(
        session_id,
        response=payload.response,
        notify_friend=payload.notify_friend,
    )
    return _session_to_response(session)


@router.post(
    "/sessions/{session_id}/skip",
    response_model=CheckInSessionResponse,
    summary="Skip a check-in session",
    responses=SESSION_NOT_FOUND,
)
def skip(session_id: str, engine: CheckInTriggerEngine = Depends(get_checkin_engine)):
    """Dismiss the session from any step. The cooldown stays consumed."""
    return _session_to_response(engine.skip_check_in(session_id))
