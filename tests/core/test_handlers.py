from __future__ import annotations

import logging
from typing import AsyncIterator, cast

import pytest
import pytest_asyncio
from fastapi import FastAPI, HTTPException
from fastapi.routing import APIRouter
from httpx import ASGITransport, AsyncClient
from starlette.types import ASGIApp

from resperr.core.config import Settings
from resperr.core.errors import (
    StatusCodeError,
    new,
    with_code_and_message,
    with_status_code,
    with_user_message,
)
from resperr.core.handlers import build_error_payload, error_response, register_exception_handlers


def _build_test_router() -> APIRouter:
    router = APIRouter()

    @router.get("/not-found")
    async def raise_not_found() -> None:
        raise new(404, "deck %s does not exist", "d-1")

    @router.get("/validation")
    async def raise_validation() -> None:
        raise with_user_message(ValueError("empty title"), "Title must not be empty")

    @router.get("/conflict")
    async def raise_conflict() -> None:
        raise with_code_and_message(KeyError("lemma"), 409, "Card already exists")

    @router.get("/wrapped")
    async def raise_wrapped() -> None:
        try:
            raise with_status_code(TimeoutError("upstream"), 503)
        except StatusCodeError as exc:
            raise RuntimeError("fetch failed") from exc

    @router.get("/http-error")
    async def raise_http_exc() -> None:
        raise HTTPException(status_code=403, detail="Forbidden")

    @router.get("/crash")
    async def raise_generic_exc() -> None:
        raise RuntimeError("boom")

    return router


@pytest.fixture(scope="module")
def error_test_app() -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app)
    app.include_router(_build_test_router())
    return app


@pytest_asyncio.fixture
async def error_test_client(error_test_app: FastAPI) -> AsyncIterator[AsyncClient]:
    # FastAPI implements the ASGI callable interface but type stubs disagree.
    transport = ASGITransport(
        app=cast(ASGIApp, error_test_app),  # type: ignore[arg-type]
        raise_app_exceptions=False,
    )
    client = AsyncClient(transport=transport, base_url="http://testserver")
    try:
        yield client
    finally:
        await client.aclose()


@pytest.mark.asyncio
async def test_status_code_error_uses_status_text(error_test_client: AsyncClient) -> None:
    response = await error_test_client.get("/not-found")

    assert response.status_code == 404
    assert response.json() == {"error": {"status": 404, "message": "Not Found"}}


@pytest.mark.asyncio
async def test_user_message_error_defaults_to_bad_request(error_test_client: AsyncClient) -> None:
    response = await error_test_client.get("/validation")

    assert response.status_code == 400
    assert response.json()["error"]["message"] == "Title must not be empty"


@pytest.mark.asyncio
async def test_code_and_message_are_rendered(error_test_client: AsyncClient) -> None:
    response = await error_test_client.get("/conflict")

    assert response.status_code == 409
    assert response.json()["error"]["message"] == "Card already exists"


@pytest.mark.asyncio
async def test_explicit_cause_is_followed(error_test_client: AsyncClient) -> None:
    response = await error_test_client.get("/wrapped")

    assert response.status_code == 503
    assert response.json()["error"]["message"] == "Service Unavailable"


@pytest.mark.asyncio
async def test_http_exception_keeps_framework_handler(error_test_client: AsyncClient) -> None:
    response = await error_test_client.get("/http-error")

    assert response.status_code == 403
    assert response.json() == {"detail": "Forbidden"}


@pytest.mark.asyncio
async def test_undecorated_exception_is_logged_as_server_error(
    error_test_client: AsyncClient,
    caplog: pytest.LogCaptureFixture,
) -> None:
    with caplog.at_level(logging.INFO, logger="resperr.handlers"):
        response = await error_test_client.get("/crash")

    assert response.status_code == 500
    assert response.json()["error"]["message"] == "Internal Server Error"
    records = [record for record in caplog.records if record.name == "resperr.handlers"]
    assert records
    assert records[-1].levelno == logging.ERROR
    assert records[-1].exc_info is not None


@pytest.mark.asyncio
async def test_client_errors_are_logged_at_info(
    error_test_client: AsyncClient,
    caplog: pytest.LogCaptureFixture,
) -> None:
    with caplog.at_level(logging.INFO, logger="resperr.handlers"):
        await error_test_client.get("/validation")

    records = [record for record in caplog.records if record.name == "resperr.handlers"]
    assert records
    assert records[-1].levelno == logging.INFO
    assert getattr(records[-1], "status_code", None) == 400


def test_build_error_payload_for_nil_error() -> None:
    assert build_error_payload(None) == {"error": {"status": 200, "message": ""}}


def test_error_response_honours_explicit_settings() -> None:
    response = error_response(Exception("boom"), settings=Settings(status_code_err=502))

    assert response.status_code == 502
    assert b'"Bad Gateway"' in response.body
