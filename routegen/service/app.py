"""FastAPI application exposing the manifest for inspection and regeneration."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..config import ConfigError, load_config
from ..coordinator import ChangeCoordinator
from ..devloop import coordinator_from_config
from ..errors import FormatterError, LogicalNameConflictError, RouteGenError
from ..stores import MemoryManifestStore


class ManifestResponse(BaseModel):
    root: str
    routables: List[str]
    hydratables: List[str]


class RegenerateRequest(BaseModel):
    path: str
    force: bool = False


class RegenerateResponse(BaseModel):
    status: str
    manifest_path: str
    routables: int
    hydratables: int


class HealthResponse(BaseModel):
    status: str


CoordinatorFactory = Callable[[Path], ChangeCoordinator]


def _default_coordinator_factory() -> CoordinatorFactory:
    # One in-memory snapshot per project root for the lifetime of the app.
    stores: Dict[Path, MemoryManifestStore] = {}

    def factory(root: Path) -> ChangeCoordinator:
        config = load_config(root)
        store = stores.setdefault(config.root, MemoryManifestStore())
        return coordinator_from_config(config, store=store)

    return factory


def _project_root(path: str) -> Path:
    root = Path(path).expanduser().resolve()
    if not root.is_dir():
        raise FileNotFoundError(f"Project path not found: {path}")
    return root


def create_app(coordinator_factory: Optional[CoordinatorFactory] = None) -> FastAPI:
    """Create the FastAPI application exposing routegen operations."""
    factory = coordinator_factory or _default_coordinator_factory()
    app = FastAPI(title="routegen", version="0.1.0")

    async def get_factory() -> CoordinatorFactory:
        return factory

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.get("/manifest", response_model=ManifestResponse)
    async def read_manifest(
        path: str,
        make_coordinator: CoordinatorFactory = Depends(get_factory),
    ) -> ManifestResponse:
        root = _project_root(path)
        coordinator = make_coordinator(root)
        loop = asyncio.get_running_loop()
        manifest = await loop.run_in_executor(None, coordinator.collector.collect, root)
        return ManifestResponse(
            root=str(root),
            routables=manifest.routables,
            hydratables=manifest.hydratables,
        )

    @app.post("/regenerate", response_model=RegenerateResponse)
    async def regenerate(
        payload: RegenerateRequest,
        make_coordinator: CoordinatorFactory = Depends(get_factory),
    ) -> RegenerateResponse:
        root = _project_root(payload.path)
        coordinator = make_coordinator(root)

        def _run() -> Any:
            return coordinator.regenerate(root, force=payload.force)

        loop = asyncio.get_running_loop()
        outcome = await loop.run_in_executor(None, _run)
        return RegenerateResponse(
            status="regenerated" if outcome.changed else "unchanged",
            manifest_path=str(outcome.manifest_path),
            routables=len(outcome.manifest.routables),
            hydratables=len(outcome.manifest.hydratables),
        )

    @app.exception_handler(FileNotFoundError)
    async def file_not_found_handler(_: Any, exc: FileNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(LogicalNameConflictError)
    async def conflict_handler(_: Any, exc: LogicalNameConflictError) -> JSONResponse:
        conflict = exc.conflict
        return JSONResponse(
            status_code=409,
            content={
                "detail": str(exc),
                "root": str(conflict.root),
                "logical_name": conflict.logical_name,
                "paths": list(conflict.paths),
            },
        )

    @app.exception_handler(FormatterError)
    async def formatter_handler(_: Any, exc: FormatterError) -> JSONResponse:
        return JSONResponse(status_code=502, content={"detail": str(exc)})

    @app.exception_handler(ConfigError)
    async def config_handler(_: Any, exc: ConfigError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(RouteGenError)
    async def routegen_error_handler(_: Any, exc: RouteGenError) -> JSONResponse:  # pragma: no cover - simple mapping
        return JSONResponse(status_code=500, content={"detail": str(exc)})

    return app


def run_service(host: str = "127.0.0.1", port: int = 8000) -> None:  # pragma: no cover - integration path
    import uvicorn

    uvicorn.run(create_app(), host=host, port=port)
