"""FastAPI application for the WBS engines."""
from __future__ import annotations

from fastapi import FastAPI, HTTPException

from wbs_engines.common.error_envelope import envelope_exception_handler
from wbs_engines.wbs_schedule.routes import router as schedule_router
from wbs_engines.wbs_tree.routes import router as project_router


def create_app() -> FastAPI:
    app = FastAPI(title="WBS Gantt Engines", version="0.1.0")
    app.include_router(schedule_router)
    app.include_router(project_router)
    app.add_exception_handler(HTTPException, envelope_exception_handler)
    return app


app = create_app()
