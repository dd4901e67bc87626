"""FastAPI service exposing the constant dependency graph."""

from __future__ import annotations

import argparse

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from .config import get_settings
from .logging_config import setup_logging
from .service import DependencyService, ProjectPathError


class FileDependenciesRequest(BaseModel):
    filePath: str = ""


def create_app(service: DependencyService) -> FastAPI:
    app = FastAPI(title="Constant Dependency Graph API")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["POST", "GET", "OPTIONS", "PUT", "DELETE"],
        allow_headers=[
            "Accept",
            "Content-Type",
            "Content-Length",
            "Accept-Encoding",
            "Authorization",
        ],
    )
    app.state.service = service

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/api/project-info")
    def project_info() -> dict[str, str]:
        return service.project_info()

    @app.get("/api/file-tree")
    def file_tree() -> dict:
        return service.file_tree().to_dict()

    @app.get("/api/dependency-graph")
    def dependency_graph() -> dict:
        return service.graph().to_dict()

    @app.post("/api/file-dependencies")
    def file_dependencies(request: FileDependenciesRequest) -> dict:
        return service.file_dependencies(request.filePath).to_dict()

    @app.post("/api/rebuild")
    def rebuild() -> dict:
        service.rebuild()
        return service.metadata()

    @app.get("/api/stats")
    def stats(limit: int = 10) -> dict:
        return service.stats(limit=limit)

    return app


def main() -> int:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Serve the constant dependency graph of a JS/TS project")
    parser.add_argument("--path", default=settings.PROJECT_PATH, help="Path to the JavaScript/TypeScript project")
    parser.add_argument("--host", default=settings.HOST, help="Bind host")
    parser.add_argument("--port", type=int, default=settings.PORT, help="Bind port")
    parser.add_argument("--workers", type=int, default=settings.MAX_WORKERS, help="Concurrent file scans")
    args = parser.parse_args()

    if not args.path:
        parser.error("a project path is required (--path or CONSTGRAPH_PROJECT_PATH)")
    if args.workers < 1:
        parser.error("--workers must be at least 1")

    setup_logging(settings.LOG_LEVEL)
    try:
        service = DependencyService(
            args.path, max_workers=args.workers, extensions=settings.EXTENSIONS
        )
    except ProjectPathError as exc:
        raise SystemExit(f"Error: {exc}") from exc
    service.build()

    import uvicorn

    uvicorn.run(create_app(service), host=args.host, port=args.port, reload=False)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
