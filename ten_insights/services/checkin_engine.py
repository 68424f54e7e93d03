"""
Check-in trigger engine: "does this user need a check-in prompt".

Trigger rules (evaluated newest rating first)
---------------------------------------------
  0. NO_RATINGS       no ratings at all                      -> no prompt
  1. COOLDOWN         < 24h since the last prompt started     -> no prompt
                      (a failed cooldown read counts as "in cooldown")
  2. LOW_AVERAGE      mean of the 3 most recent < 5.0         -> prompt
                      (needs at least 2 ratings)
  3. SHARP_DROP       previous - current >= 4                 -> prompt
  otherwise           NO_SIGNAL                               -> no prompt

Starting a session consumes the cooldown immediately; skipping it later
does not give the day back. At most one prompt per user per cooldown.

Session steps
-------------
  welcome -> acknowledgment -> [friend_notice if has_best_friend]
          -> reflection -> gratitude -> closing -> complete

Sessions are ephemeral and live in this process only. The cooldown is the
single piece of persisted state, written through the injected store.
A session left open for a full cooldown is abandoned: it is marked skipped
and dropped, and the next start writes a fresh cooldown.

Concurrency: every evaluate+start and every session mutation for a user
runs under that user's lock. `evaluate` alone only reads.
"""
from __future__ import annotations

import enum
import logging
import random
import threading
import uuid
import weakref
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Iterable, Optional

from ten_insights.core.clock import Clock
from ten_insights.core.errors import (
    CheckInSessionNotFoundError,
    CooldownStoreError,
    InvalidCheckInTransitionError,
)
from ten_insights.services.cooldown_store import CooldownStore
from ten_insights.services.domain import RatingEntry, mean, newest_first

logger = logging.getLogger(__name__)

DEFAULT_COOLDOWN = timedelta(hours=24)
RECENT_WINDOW = 3
LOW_AVERAGE_THRESHOLD = 5.0
SHARP_DROP_POINTS = 4


# ---------------------------------------------------------------------------
# Trigger decision
# ---------------------------------------------------------------------------

class TriggerReason(str, enum.Enum):
    no_ratings = "no_ratings"
    cooldown_active = "cooldown_active"
    cooldown_unavailable = "cooldown_unavailable"
    low_average = "low_average"
    sharp_drop = "sharp_drop"
    no_signal = "no_signal"


@dataclass(frozen=True)
class TriggerDecision:
    should_trigger: bool
    reason: TriggerReason
    last_triggered_at: Optional[datetime] = None
    recent_average: Optional[float] = None
    drop: Optional[int] = None


# ---------------------------------------------------------------------------
# Session state machine
# ---------------------------------------------------------------------------

class CheckInStep(int, enum.Enum):
    welcome = 0
    acknowledgment = 1
    friend_notice = 2
    reflection = 3
    gratitude = 4
    closing = 5
    complete = 6

    @property
    def title(self) -> str:
        return _STEP_TITLES[self]


_STEP_TITLES = {
    CheckInStep.welcome: "Hey there",
    CheckInStep.acknowledgment: "It's okay",
    CheckInStep.friend_notice: "Your people",
    CheckInStep.reflection: "A moment to reflect",
    CheckInStep.gratitude: "Finding light",
    CheckInStep.closing: "You matter",
    CheckInStep.complete: "Done",
}


class SessionStatus(str, enum.Enum):
    active = "active"
    completed = "completed"
    skipped = "skipped"


def next_step(step: CheckInStep, has_best_friend: bool) -> CheckInStep:
    if step is CheckInStep.complete:
        raise ValueError("complete is terminal")
    following = CheckInStep(step.value + 1)
    if following is CheckInStep.friend_notice and not has_best_friend:
        return CheckInStep.reflection
    return following


CHECKIN_PROMPTS = [
    "What's one small thing that brought you comfort today?",
    "If you could talk to yourself from this morning, what would you say?",
    "What's something you're looking forward to, even if it's small?",
    "What would feel like a tiny win right now?",
    "Is there something weighing on you that you'd like to let go of?",
    "What's one thing you wish others understood about how you're feeling?",
    "If today had a color, what would it be and why?",
    "What's something kind you could do for yourself in the next hour?",
    "What part of your day do you wish had gone differently?",
    "Is there someone you'd like to connect with right now?",
]

GRATITUDE_PROMPTS = [
    "Even on hard days, is there one tiny thing you're grateful for?",
    "What's something simple that made today a little easier?",
    "Is there someone who cares about you that you're thankful for?",
    "What's one thing about yourself you appreciate today?",
    "Is there a small comfort you have access to right now?",
    "What's something you did today, even if small, that you can be proud of?",
]


@dataclass
class CheckInSession:
    user_id: str
    started_at: datetime
    has_best_friend: bool
    best_friend_name: Optional[str] = None
    reflection_prompt: str = ""
    gratitude_prompt: str = ""
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    current_step: CheckInStep = CheckInStep.welcome
    status: SessionStatus = SessionStatus.active
    notify_friend: bool = False
    reflection_response: Optional[str] = None
    gratitude_response: Optional[str] = None

    @property
    def will_notify_friend(self) -> bool:
        return self.notify_friend and self.has_best_friend

    @property
    def steps(self) -> list[CheckInStep]:
        """Steps this session walks through, in order."""
        return [
            s for s in CheckInStep
            if s is not CheckInStep.friend_notice or self.has_best_friend
        ]


@dataclass(frozen=True)
class CheckInOutcome:
    session: CheckInSession
    notify_friend: bool


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------

class CheckInTriggerEngine:

    def __init__(
        self,
        store: CooldownStore,
        clock: Clock,
        cooldown: timedelta = DEFAULT_COOLDOWN,
        rng: Optional[random.Random] = None,
    ):
        self.store = store
        self.clock = clock
        self.cooldown = cooldown
        self._rng = rng or random.Random()
        self._sessions: dict[str, CheckInSession] = {}
        self._open_by_user: dict[str, str] = {}
        # A user's lock lives as long as some caller still holds it
        self._locks: weakref.WeakValueDictionary[str, threading.Lock] = (
            weakref.WeakValueDictionary()
        )
        self._guard = threading.Lock()

    def _user_lock(self, user_id: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(user_id)
            if lock is None:
                lock = self._locks[user_id] = threading.Lock()
            return lock

    # -- evaluation ---------------------------------------------------------

    def check(self, user_id: str, ratings: Iterable[RatingEntry]) -> TriggerDecision:
        """Evaluate all trigger rules and say which one decided."""
        ratings = list(ratings)
        if not ratings:
            return TriggerDecision(False, TriggerReason.no_ratings)

        try:
            last = self.store.get_last_triggered(user_id)
        except CooldownStoreError:
            logger.warning("Cooldown unavailable for user %s; treating as active", user_id)
            return TriggerDecision(False, TriggerReason.cooldown_unavailable)

        if last is not None and self.clock.now() - last < self.cooldown:
            return TriggerDecision(False, TriggerReason.cooldown_active, last_triggered_at=last)

        ordered = newest_first(ratings)
        recent = ordered[:RECENT_WINDOW]
        if len(recent) < 2:
            return TriggerDecision(False, TriggerReason.no_signal, last_triggered_at=last)

        avg = mean([r.value for r in recent])
        drop = ordered[1].value - ordered[0].value

        if avg < LOW_AVERAGE_THRESHOLD:
            reason = TriggerReason.low_average
        elif drop >= SHARP_DROP_POINTS:
            reason = TriggerReason.sharp_drop
        else:
            return TriggerDecision(
                False, TriggerReason.no_signal,
                last_triggered_at=last, recent_average=avg, drop=drop,
            )

        logger.info("Check-in triggered for user %s (%s, avg=%.2f, drop=%d)",
                    user_id, reason.value, avg, drop)
        return TriggerDecision(
            True, reason, last_triggered_at=last, recent_average=avg, drop=drop,
        )

    def evaluate(self, user_id: str, ratings: Iterable[RatingEntry]) -> bool:
        return self.check(user_id, ratings).should_trigger

    # -- session lifecycle --------------------------------------------------

    def _is_stale(self, session: CheckInSession, now: datetime) -> bool:
        return now - session.started_at >= self.cooldown

    def _abandon(self, session: CheckInSession) -> None:
        session.status = SessionStatus.skipped
        self._discard(session)
        logger.info("Check-in session %s abandoned at %s", session.id, session.current_step.name)

    def _prune_stale(self, now: datetime) -> None:
        with self._guard:
            stale = [s for s in self._sessions.values() if self._is_stale(s, now)]
        for session in stale:
            self._abandon(session)

    def _open_session(self, user_id: str) -> Optional[CheckInSession]:
        session_id = self._open_by_user.get(user_id)
        session = self._sessions.get(session_id) if session_id else None
        if session is not None and self._is_stale(session, self.clock.now()):
            self._abandon(session)
            return None
        return session

    def _start_locked(
        self,
        user_id: str,
        has_best_friend: bool,
        best_friend_name: Optional[str],
    ) -> CheckInSession:
        existing = self._open_session(user_id)
        if existing is not None:
            return existing

        now = self.clock.now()
        self._prune_stale(now)
        # Raises CooldownStoreError; no session is created in that case
        self.store.set_last_triggered(user_id, now)

        session = CheckInSession(
            user_id=user_id,
            started_at=now,
            has_best_friend=has_best_friend,
            best_friend_name=best_friend_name if has_best_friend else None,
            reflection_prompt=self._rng.choice(CHECKIN_PROMPTS),
            gratitude_prompt=self._rng.choice(GRATITUDE_PROMPTS),
        )
        with self._guard:
            self._sessions[session.id] = session
            self._open_by_user[user_id] = session.id
        logger.info("Check-in session %s started for user %s", session.id, user_id)
        return session

    def start_check_in(
        self,
        user_id: str,
        has_best_friend: bool,
        best_friend_name: Optional[str] = None,
    ) -> CheckInSession:
        """
        Create a session and consume the cooldown. An open session younger
        than the cooldown is returned as is; an older one is abandoned first.
        """
        with self._user_lock(user_id):
            return self._start_locked(user_id, has_best_friend, best_friend_name)

    def evaluate_and_start(
        self,
        user_id: str,
        ratings: Iterable[RatingEntry],
        has_best_friend: bool,
        best_friend_name: Optional[str] = None,
    ) -> Optional[CheckInSession]:
        """Evaluate and, if triggered, start, without letting another request in between."""
        with self._user_lock(user_id):
            existing = self._open_session(user_id)
            if existing is not None:
                return existing
            if not self.check(user_id, ratings).should_trigger:
                return None
            return self._start_locked(user_id, has_best_friend, best_friend_name)

    def get_session(self, session_id: str) -> CheckInSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise CheckInSessionNotFoundError(session_id)
        if self._is_stale(session, self.clock.now()):
            self._abandon(session)
            raise CheckInSessionNotFoundError(session_id)
        return session

    def _discard(self, session: CheckInSession) -> None:
        with self._guard:
            self._sessions.pop(session.id, None)
            if self._open_by_user.get(session.user_id) == session.id:
                del self._open_by_user[session.user_id]

    def advance(
        self,
        session_id: str,
        response: Optional[str] = None,
        notify_friend: Optional[bool] = None,
    ) -> CheckInSession:
        """Record the current step's input and move to the next step."""
        session = self.get_session(session_id)
        with self._user_lock(session.user_id):
            session = self.get_session(session_id)
            step = session.current_step

            if notify_friend is not None:
                if step is not CheckInStep.friend_notice:
                    raise InvalidCheckInTransitionError(session.id, step.name, "set notify_friend")
                session.notify_friend = notify_friend

            if response is not None:
                if step is CheckInStep.reflection:
                    session.reflection_response = response
                elif step is CheckInStep.gratitude:
                    session.gratitude_response = response
                else:
                    raise InvalidCheckInTransitionError(session.id, step.name, "record a response")

            if step is CheckInStep.closing:
                return self._complete_locked(session).session

            session.current_step = next_step(step, session.has_best_friend)
            return session

    def _complete_locked(self, session: CheckInSession) -> CheckInOutcome:
        session.current_step = CheckInStep.complete
        session.status = SessionStatus.completed
        self._discard(session)
        logger.info("Check-in session %s completed (notify_friend=%s)",
                    session.id, session.will_notify_friend)
        return CheckInOutcome(session=session, notify_friend=session.will_notify_friend)

    def complete_check_in(self, session_id: str) -> CheckInOutcome:
        """Finish a session that reached the closing step."""
        session = self.get_session(session_id)
        with self._user_lock(session.user_id):
            session = self.get_session(session_id)
            if session.current_step is not CheckInStep.closing:
                raise InvalidCheckInTransitionError(
                    session.id, session.current_step.name, "complete the check-in"
                )
            return self._complete_locked(session)

    def skip_check_in(self, session_id: str) -> CheckInSession:
        """Dismiss from any step. The cooldown already spent stays spent."""
        session = self.get_session(session_id)
        with self._user_lock(session.user_id):
            session = self.get_session(session_id)
            session.status = SessionStatus.skipped
            self._discard(session)
            logger.info("Check-in session %s skipped at %s", session.id, session.current_step.name)
            return session

    def reset_cooldown(self, user_id: str) -> None:
        """Allow the prompt to fire again (support / debugging)."""
        with self._user_lock(user_id):
            self.store.clear(user_id)
        logger.info("Check-in cooldown reset for user %s", user_id)
