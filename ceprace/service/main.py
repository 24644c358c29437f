# main.py
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from ceprace.config import Settings, Telemetry, load_settings
from ceprace.integrations.fastapi_helpers import add_ceprace_exception_handlers
from ceprace.lookup import CepLookup

_logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, lookup: Optional[CepLookup] = None) -> FastAPI:
    settings = settings or load_settings()
    cep_lookup = lookup or CepLookup(settings)

    if settings.telemetry == Telemetry.OTEL:
        from .telemetry import setup_otel

        setup_otel(settings.service_name, settings.otel_endpoint)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        _logger.info(
            f"Serving CEP lookups: timeout={settings.timeout}s, skip_failures={settings.skip_failures}"
        )
        yield
        # let abandoned fetches finish instead of tearing them down mid-request
        await cep_lookup.aclose()

    app = FastAPI(title="ceprace", lifespan=lifespan)
    app.state.lookup = cep_lookup
    add_ceprace_exception_handlers(app)

    @app.get("/")
    async def fetch_both(cep: Optional[str] = None):
        result = await cep_lookup.lookup(cep)
        return JSONResponse(
            status_code=200,
            content=jsonable_encoder(result.payload),
            headers={"X-Cep-Source": result.contender},
        )

    @app.get("/health")
    async def health():
        return {"status": "healthy"}

    return app
