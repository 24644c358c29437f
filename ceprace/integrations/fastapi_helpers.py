"""
FastAPI integration helpers for ceprace

Converts ceprace exceptions into JSON error responses.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ceprace.exceptions import MissingCep
from ceprace.race.exceptions import RaceAllFailed, RaceTimeout


def add_ceprace_exception_handlers(app: FastAPI) -> None:
    """
    Add exception handlers for lookup errors.

    Status codes:
        * MissingCep    -> 400 Bad Request
        * RaceTimeout   -> 408 Request Timeout
        * RaceAllFailed -> 502 Bad Gateway (only raised when failed lookups may not win)

    Usage:
        app = FastAPI()
        add_ceprace_exception_handlers(app)
    """

    @app.exception_handler(MissingCep)
    async def missing_cep_handler(request: Request, exc: MissingCep):
        return JSONResponse(
            status_code=400,
            content={"error": "missing_cep", "message": str(exc)},
        )

    @app.exception_handler(RaceTimeout)
    async def race_timeout_handler(request: Request, exc: RaceTimeout):
        return JSONResponse(
            status_code=408,
            content={"error": "timeout", "message": "Timeout reached"},
        )

    @app.exception_handler(RaceAllFailed)
    async def race_all_failed_handler(request: Request, exc: RaceAllFailed):
        return JSONResponse(
            status_code=502,
            content={"error": "upstream_failed", "message": "Every lookup service failed"},
        )
