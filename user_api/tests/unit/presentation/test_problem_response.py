"""Tests for the problem document responses and exception handlers."""

import json

import pytest
from fastapi import APIRouter
from httpx import ASGITransport, AsyncClient

from user_api.app_factory import create_application, problem_response
from user_api.core.exceptions import (
    ConstraintViolation,
    InvalidArgumentError,
    ValidationException,
)


def test_problem_response_document():
    response = problem_response(404, "Not here.", headers={"X-Test": "1"})

    assert response.status_code == 404
    assert response.media_type == "application/problem+json"
    assert response.headers["x-test"] == "1"
    assert json.loads(response.body) == {
        "type": "/errors/404",
        "title": "An error occurred",
        "status": 404,
        "detail": "Not here.",
    }


def test_problem_response_extra_members():
    response = problem_response(422, "x", problem_type="/validation_errors", violations=[])

    body = json.loads(response.body)
    assert body["type"] == "/validation_errors"
    assert body["violations"] == []


@pytest.mark.asyncio
async def test_exception_handlers(test_settings):
    app = create_application(settings_override=test_settings)
    probe = APIRouter()

    @probe.get("/violations")
    async def violations():
        raise ValidationException(
            [ConstraintViolation("name", "First."), ConstraintViolation("roles", "Second.")]
        )

    @probe.get("/configuration")
    async def configuration():
        raise InvalidArgumentError("Bad constraint configuration.")

    @probe.get("/crash")
    async def crash():
        raise RuntimeError("secret internals")

    app.include_router(probe, prefix="/probe")

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        violation_response = await client.get("/probe/violations")
        configuration_response = await client.get("/probe/configuration")
        crash_response = await client.get("/probe/crash")

    assert violation_response.status_code == 422
    assert violation_response.json() == {
        "type": "/validation_errors",
        "title": "An error occurred",
        "status": 422,
        "detail": "name: First.\nroles: Second.",
        "violations": [
            {"propertyPath": "name", "message": "First."},
            {"propertyPath": "roles", "message": "Second."},
        ],
    }
    assert configuration_response.status_code == 500
    assert configuration_response.json()["detail"] == "An internal server error occurred."
    assert crash_response.status_code == 500
    assert "secret" not in crash_response.text
