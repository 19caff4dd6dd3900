from __future__ import annotations

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from core.domain.models import AuthToken, DeleteRequest, FileOcrSubmission, StartRequest
from core.domain.product import Product
from core.domain.request import RequestDescriptor

LOGIN_RESPONSE = {
    "access_token": "abc",
    ".issued": "2026-03-01T10:00:00.1234567Z",
    ".expires": "2026-03-03T10:00:00.1234567Z",
    "token_type": "bearer",
    "userName": "me@example.com",
}


def test_token_parses_service_timestamps_and_keeps_claims():
    token = AuthToken.model_validate(LOGIN_RESPONSE)

    assert token.expires == datetime(2026, 3, 3, 10, 0, 0, 123456, tzinfo=timezone.utc)
    assert token.issued == datetime(2026, 3, 1, 10, 0, 0, 123456, tzinfo=timezone.utc)
    assert token.model_extra == {"token_type": "bearer", "userName": "me@example.com"}
    assert token.bearer() == {"Authorization": "Bearer abc"}


def test_token_json_round_trip_uses_wire_names():
    token = AuthToken.model_validate(LOGIN_RESPONSE)

    dumped = token.model_dump(by_alias=True, mode="json")
    assert ".expires" in dumped and "userName" in dumped
    assert AuthToken.model_validate_json(token.model_dump_json(by_alias=True)) == token


def test_token_is_immutable():
    token = AuthToken.model_validate(LOGIN_RESPONSE)

    with pytest.raises(ValidationError):
        token.access_token = "other"


def test_token_requires_expiry():
    with pytest.raises(ValidationError):
        AuthToken.model_validate({"access_token": "abc"})


def test_ocr_submission_accepts_python_names_and_dumps_aliases():
    submission = FileOcrSubmission(
        base64="eA==",
        filename="page.png",
        lang_code="he",
        properties={"webhooks": {"status": "https://h/{STATUS}", "new_result": "https://h/new"}, "cheatDetection": True},
    )

    payload = submission.to_payload()
    assert payload["langCode"] == "he"
    assert payload["properties"]["webhooks"] == {"status": "https://h/{STATUS}", "newResult": "https://h/new"}
    assert payload["properties"]["cheatDetection"] is True


def test_start_and_delete_validation():
    with pytest.raises(ValidationError):
        StartRequest(trigger=[])
    with pytest.raises(ValidationError):
        DeleteRequest(scans=[])


def test_request_descriptor_is_frozen_and_normalized():
    headers = {"Authorization": "Bearer t"}
    request = RequestDescriptor(method="patch", path="/v3/x", headers=headers)
    headers["X-Other"] = "1"

    assert request.method == "PATCH"
    assert dict(request.headers) == {"Authorization": "Bearer t"}
    with pytest.raises(TypeError):
        request.headers["X-Other"] = "1"  # type: ignore[index]
    with pytest.raises(AttributeError):
        request.method = "GET"  # type: ignore[misc]


def test_product_values():
    assert Product("education") is Product.EDUCATION
    assert Product.default() is Product.EDUCATION
    assert Product.BUSINESSES.label() == "Businesses"
