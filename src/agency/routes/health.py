"""Health check endpoints for liveness and readiness probes."""
import sqlite3
from pathlib import Path
from typing import Literal

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from agency.search.store import SearchRecordStore

router = APIRouter(prefix="/health", tags=["health"])


class LivenessResponse(BaseModel):
    """Response model for liveness probe.

    Attributes:
        status: Always 'alive' when process is running.
    """

    status: Literal["alive"]


class ReadinessCheck(BaseModel):
    """Individual dependency check result.

    Attributes:
        name: Identifier for the dependency being checked.
        status: Result of the check ('ok' or 'failed').
        message: Error details when status is 'failed'.
    """

    name: str
    status: Literal["ok", "failed"]
    message: str | None = None


class ReadinessResponse(BaseModel):
    """Response model for readiness probe.

    Attributes:
        status: Overall readiness ('ready' or 'not_ready').
        checks: List of individual dependency check results.
    """

    status: Literal["ready", "not_ready"]
    checks: list[ReadinessCheck]


def _check_directory(path: Path) -> ReadinessCheck:
    """Verify the content directory exists and is readable.

    Args:
        path: Directory to check.

    Returns:
        Check result with status and optional error message.
    """
    name = f"dir:{path}"
    try:
        if path.exists() and path.is_dir():
            list(path.iterdir())
            return ReadinessCheck(name=name, status="ok")
        return ReadinessCheck(name=name, status="failed", message="Directory not found")
    except PermissionError as e:
        return ReadinessCheck(name=name, status="failed", message=f"Permission denied: {e}")
    except OSError as e:
        return ReadinessCheck(name=name, status="failed", message=str(e))


def _check_store(store: SearchRecordStore) -> ReadinessCheck:
    """Verify the search record store answers queries.

    Args:
        store: Open search record store.

    Returns:
        Check result with status and optional error message.
    """
    name = f"db:{store.path}"
    try:
        store.count()
        return ReadinessCheck(name=name, status="ok")
    except sqlite3.Error as e:
        return ReadinessCheck(name=name, status="failed", message=str(e))


@router.get("/live", response_model=LivenessResponse)
async def liveness() -> LivenessResponse:
    """Liveness probe endpoint.

    Returns:
        Liveness status response.
    """
    return LivenessResponse(status="alive")


@router.get("/ready", response_model=ReadinessResponse)
async def readiness(request: Request) -> JSONResponse:
    """Readiness probe endpoint.

    Checks the content root and the search record store. Returns 200 if
    all checks pass, 503 if any fail.

    Returns:
        Readiness status with individual check results.
    """
    checks = [
        _check_directory(Path(request.app.state.settings.content_root)),
        _check_store(request.app.state.store),
    ]
    all_ok = all(c.status == "ok" for c in checks)
    response = ReadinessResponse(
        status="ready" if all_ok else "not_ready",
        checks=checks,
    )
    code = status.HTTP_200_OK if all_ok else status.HTTP_503_SERVICE_UNAVAILABLE
    return JSONResponse(content=response.model_dump(), status_code=code)
