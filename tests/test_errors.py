"""
Tests for error handling: structured error responses, HTTP status codes,
the custom exception classes and rating validation at construction.
"""
from datetime import datetime, timezone

import pytest

from ten_insights.core.clock import resolve_timezone
from ten_insights.core.errors import (
    CheckInSessionNotFoundError,
    CooldownStoreError,
    InvalidCheckInTransitionError,
    InvalidRatingError,
    InvalidTimezoneError,
)
from ten_insights.schemas.common import ErrorResponse, ValidationErrorResponse
from ten_insights.services.domain import RatingEntry

_TS = datetime(2026, 3, 18, 9, 0, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Unit tests on exception classes
# ---------------------------------------------------------------------------

class TestExceptionClasses:
    def test_cooldown_store_error(self):
        err = CooldownStoreError(user_id="u1", operation="write")
        assert err.http_status == 503
        assert err.code == "COOLDOWN_STORE_UNAVAILABLE"
        assert err.recoverable
        d = err.to_dict()
        assert d["details"] == {"user_id": "u1", "operation": "write"}

    def test_session_not_found(self):
        err = CheckInSessionNotFoundError("abc")
        assert err.http_status == 404
        assert "abc" in err.message

    def test_invalid_transition(self):
        err = InvalidCheckInTransitionError("abc", "welcome", "record a response")
        assert err.http_status == 409
        assert err.to_dict()["details"]["step"] == "welcome"

    def test_invalid_timezone(self):
        with pytest.raises(InvalidTimezoneError) as exc_info:
            resolve_timezone("Mars/Olympus_Mons")
        assert exc_info.value.http_status == 422
        assert exc_info.value.details == {"timezone": "Mars/Olympus_Mons"}

    def test_empty_details_are_omitted(self):
        err = InvalidRatingError("bad")
        assert err.to_dict() == {"code": "INVALID_RATING", "message": "bad"}


# ---------------------------------------------------------------------------
# RatingEntry validation
# ---------------------------------------------------------------------------

class TestRatingEntry:
    @pytest.mark.parametrize("raw,stored", [(0, 1), (-3, 1), (1, 1), (10, 10), (15, 10), (7.0, 7)])
    def test_integer_values_are_clamped(self, raw, stored):
        assert RatingEntry(value=raw, timestamp=_TS).value == stored

    @pytest.mark.parametrize("raw", [7.5, "7", None, True])
    def test_non_integer_values_fail_fast(self, raw):
        with pytest.raises(InvalidRatingError) as exc_info:
            RatingEntry(value=raw, timestamp=_TS)
        assert exc_info.value.details["field"] == "value"

    def test_naive_timestamp_fails_fast(self):
        with pytest.raises(InvalidRatingError) as exc_info:
            RatingEntry(value=5, timestamp=datetime(2026, 3, 18, 9, 0))
        assert exc_info.value.details["field"] == "timestamp"

    def test_non_datetime_timestamp_fails_fast(self):
        with pytest.raises(InvalidRatingError):
            RatingEntry(value=5, timestamp="2026-03-18T09:00:00Z")


# ---------------------------------------------------------------------------
# HTTP error envelopes
# ---------------------------------------------------------------------------

class TestErrorResponses:
    def test_rating_out_of_range_is_validation_error(self, client, user_id):
        r = client.post("/ratings", json={"user_id": user_id, "value": 11})
        assert r.status_code == 422
        body = r.json()
        assert body["code"] == "VALIDATION_ERROR"
        assert body["details"]["errors"][0]["field"] == "value"

    def test_fractional_rating_rejected(self, client, user_id):
        r = client.post("/ratings", json={"user_id": user_id, "value": 6.5})
        assert r.status_code == 422

    def test_naive_timestamp_rejected(self, client, user_id):
        r = client.post("/ratings", json={
            "user_id": user_id, "value": 6, "timestamp": "2026-03-18T09:00:00",
        })
        assert r.status_code == 422
        assert r.json()["code"] == "VALIDATION_ERROR"

    def test_unknown_timezone(self, client, user_id):
        r = client.get(f"/analytics/{user_id}/trend?tz=Not/AZone")
        assert r.status_code == 422
        assert r.json()["code"] == "INVALID_TIMEZONE"

    def test_unknown_session(self, client):
        r = client.get("/checkin/sessions/does-not-exist")
        assert r.status_code == 404
        assert r.json()["code"] == "CHECKIN_SESSION_NOT_FOUND"

    def test_invalid_transition(self, client, user_id):
        session = client.post(f"/checkin/{user_id}/start", json={}).json()
        r = client.post(f"/checkin/sessions/{session['id']}/advance", json={"response": "hi"})
        assert r.status_code == 409
        assert r.json()["code"] == "INVALID_CHECKIN_TRANSITION"


class TestErrorEnvelopeSchema:
    def test_bodies_match_documented_models(self, client, user_id):
        r = client.post("/ratings", json={"user_id": user_id, "value": 0})
        ValidationErrorResponse.model_validate(r.json())
        r = client.get("/checkin/sessions/does-not-exist")
        assert ErrorResponse.model_validate(r.json()).code == "CHECKIN_SESSION_NOT_FOUND"

    def test_openapi_documents_error_envelope(self, client):
        paths = client.get("/openapi.json").json()["paths"]

        def ref(path, method, code):
            return paths[path][method]["responses"][code]["content"]["application/json"]["schema"]["$ref"]

        assert ref("/checkin/sessions/{session_id}", "get", "404").endswith("/ErrorResponse")
        assert ref("/checkin/sessions/{session_id}/advance", "post", "409").endswith("/ErrorResponse")
        assert ref("/checkin/{user_id}/start", "post", "503").endswith("/ErrorResponse")
        assert ref("/ratings", "post", "422").endswith("/ValidationErrorResponse")
        assert ref("/analytics/{user_id}/trend", "get", "422").endswith("/ErrorResponse")
