from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from shipyard.dependencies import get_connection, get_import_max_bytes
from shipyard.imports import import_application
from shipyard.imports.uploads import (
    UploadTooLargeError,
    describe_upload_limit,
    read_body_limited,
)

router = APIRouter()


@router.post("/projects/{project_key}/import/application")
async def import_application_route(
    project_key: str,
    request: Request,
    fmt: str = Query(default="yaml", alias="format"),
    force_update: bool = Query(default=False, alias="forceUpdate"),
    accept_language: Optional[str] = Header(default=None),
    connection=Depends(get_connection),
):
    max_bytes = get_import_max_bytes()
    try:
        payload = await read_body_limited(request.stream(), max_bytes=max_bytes)
    except UploadTooLargeError as exc:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"Request body exceeds maximum size of {describe_upload_limit(max_bytes)}.",
        ) from exc

    outcome = await run_in_threadpool(
        import_application,
        connection,
        project_key,
        payload,
        fmt,
        force_update=force_update,
        locale=accept_language,
    )
    if outcome.error is not None and outcome.error.kind.is_unexpected:
        raise HTTPException(status_code=outcome.status_code, detail=str(outcome.error))
    return JSONResponse(content=outcome.messages, status_code=outcome.status_code)
