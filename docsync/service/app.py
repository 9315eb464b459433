"""FastAPI application entrypoint for docsync service mode."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Dict, List, Optional, TypeVar

try:  # pragma: no cover - optional dependency
    from fastapi import Depends, FastAPI
    from fastapi.responses import JSONResponse
    from pydantic import BaseModel

    _FASTAPI_AVAILABLE = True
except ModuleNotFoundError:  # pragma: no cover - service mode optional
    FastAPI = None  # type: ignore[assignment]
    Depends = None  # type: ignore[assignment]
    JSONResponse = None  # type: ignore[assignment]
    BaseModel = object  # type: ignore[assignment]
    _FASTAPI_AVAILABLE = False

from ..errors import DocSyncError, PathNotFound, PermissionDenied
from ..models import DEPTHS
from ..pipeline import Pipeline
from ..reports import analysis_result_to_dict, sync_report_to_dict, validation_result_to_dict
from ..validators import ValidationOptions

_T = TypeVar("_T")

_INSTALL_HINT = "FastAPI is required for service mode. Install it with `pip install docsync[service]`."


class AnalyzeRequest(BaseModel):
    path: str
    include: Optional[List[str]] = None
    exclude: Optional[List[str]] = None
    depth: str = "standard"


class SyncRequest(BaseModel):
    docs: str
    source: str
    auto_update: bool = False
    source_extension: str = ".ts"


class ValidateRequest(BaseModel):
    docs: str
    strict: bool = False
    check_links: bool = True
    check_code_examples: bool = True


class HealthResponse(BaseModel):
    status: str


def _default_pipeline() -> Pipeline:
    return Pipeline()


async def _run_blocking(func: Callable[[], _T]) -> _T:
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, func)


def create_app(
    pipeline_factory: Callable[[], Pipeline] = _default_pipeline,
) -> FastAPI:
    """Create the FastAPI application exposing docsync passes."""

    if not _FASTAPI_AVAILABLE:  # pragma: no cover - validated via unit tests
        raise RuntimeError(_INSTALL_HINT)

    app = FastAPI(title="DocSync Service", version="1.0.0")

    async def get_pipeline() -> Pipeline:
        return pipeline_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/analyze")
    async def analyze(
        payload: AnalyzeRequest,
        pipeline: Pipeline = Depends(get_pipeline),
    ) -> Dict[str, Any]:
        if payload.depth not in DEPTHS:
            raise DocSyncError(f"depth must be one of {', '.join(DEPTHS)}, got {payload.depth!r}")
        result = await _run_blocking(
            lambda: pipeline.run_analysis(
                payload.path,
                include=payload.include,
                exclude=payload.exclude,
                depth=payload.depth,
            )
        )
        return analysis_result_to_dict(result)

    @app.post("/sync")
    async def sync(
        payload: SyncRequest,
        pipeline: Pipeline = Depends(get_pipeline),
    ) -> Dict[str, Any]:
        report = await _run_blocking(
            lambda: pipeline.run_sync(
                payload.docs,
                payload.source,
                auto_update=payload.auto_update,
                source_extension=payload.source_extension,
            )
        )
        return sync_report_to_dict(report)

    @app.post("/validate")
    async def validate(
        payload: ValidateRequest,
        pipeline: Pipeline = Depends(get_pipeline),
    ) -> Dict[str, Any]:
        options = ValidationOptions(
            strict=payload.strict,
            check_links=payload.check_links,
            check_code_examples=payload.check_code_examples,
        )
        result = await _run_blocking(lambda: pipeline.run_validation(payload.docs, options))
        return validation_result_to_dict(result)

    @app.exception_handler(PathNotFound)
    async def path_not_found_handler(_: Any, exc: PathNotFound) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(PermissionDenied)
    async def permission_denied_handler(_: Any, exc: PermissionDenied) -> JSONResponse:
        return JSONResponse(status_code=403, content={"detail": str(exc)})

    @app.exception_handler(DocSyncError)
    async def docsync_error_handler(_: Any, exc: DocSyncError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(
    host: str = "127.0.0.1", port: int = 8000
) -> None:  # pragma: no cover - integration path
    if not _FASTAPI_AVAILABLE:
        raise RuntimeError(_INSTALL_HINT)

    try:
        import uvicorn
    except ModuleNotFoundError as exc:  # pragma: no cover - optional dependency
        raise RuntimeError(
            "uvicorn is required to run the service. Install it with `pip install uvicorn`."
        ) from exc

    uvicorn.run(create_app(), host=host, port=port)
