from __future__ import annotations

from core.errors import ApiError, ErrorCode, SessionExpiredError, code_for_status


def test_code_for_unknown_status_is_server_error():
    assert code_for_status(418) is ErrorCode.SERVER_ERROR
    assert code_for_status(401) is ErrorCode.AUTH_ERROR


def test_from_status_joins_validation_messages():
    error = ApiError.from_status(400, {"message": ["email must be an email", "password too short"], "requestId": "r9"})

    assert error.code is ErrorCode.VALIDATION_ERROR
    assert error.message == "email must be an email; password too short"
    assert error.request_id == "r9"


def test_from_status_with_text_body_and_default():
    text = ApiError.from_status(502, "  Bad gateway  ")
    empty = ApiError.from_status(500, None, default_message="Server exploded")
    bare = ApiError.from_status(503, {})

    assert text.message == "Bad gateway"
    assert empty.message == "Server exploded"
    assert bare.message == "Request failed with status 503"


def test_to_dict_omits_empty_fields():
    error = ApiError(ErrorCode.NOT_FOUND, "missing", status_code=404, timestamp="2026-01-01T00:00:00+00:00")

    assert error.to_dict() == {
        "code": "NOT_FOUND",
        "message": "missing",
        "timestamp": "2026-01-01T00:00:00+00:00",
        "statusCode": 404,
    }


def test_session_expired_is_an_auth_error():
    error = SessionExpiredError()

    assert isinstance(error, ApiError)
    assert error.code is ErrorCode.AUTH_ERROR
    assert error.status_code == 401
