"""
Ways of sharing an exchange rate between handlers.

Each factory builds a small FastAPI app serving ``GET /usd_to_gbp`` and
``GET /gbp_to_usd`` (plain-text amount in, plain-text amount out); they differ
only in how the handlers reach the rate.
"""

import logging
from typing import Union

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.responses import PlainTextResponse

from resource_api.errors import InvalidAmountError, register_error_handlers
from resource_api.exchange.extensions import ExtensionMiddleware, extension
from resource_api.exchange.rates import (
    GbpToUsd,
    ProvidesEurToUsd,
    ProvidesGbpToUsd,
    SharedRate,
    convert_eur_to_usd,
    convert_gbp_to_usd,
    convert_usd_to_eur,
    convert_usd_to_gbp,
    parse_rate,
)

logger = logging.getLogger(__name__)


async def read_amount(request: Request) -> str:
    body = await request.body()
    try:
        return body.decode()
    except UnicodeDecodeError:
        raise InvalidAmountError(body) from None


def _new_app(title: str) -> FastAPI:
    app = FastAPI(title=title)
    register_error_handlers(app)
    return app


# ============================================================================
# Closures
# ============================================================================


def closure_app(gbp_to_usd_rate: float) -> FastAPI:
    """Both handlers capture the same immutable rate."""
    app = _new_app("closure exchange")

    @app.get("/usd_to_gbp", response_class=PlainTextResponse)
    async def usd_to_gbp(usd: str = Depends(read_amount)):
        return convert_usd_to_gbp(usd, gbp_to_usd_rate)

    @app.get("/gbp_to_usd", response_class=PlainTextResponse)
    async def gbp_to_usd(gbp: str = Depends(read_amount)):
        return convert_gbp_to_usd(gbp, gbp_to_usd_rate)

    return app


def shared_mutable_app(rate: Union[float, SharedRate]) -> FastAPI:
    """Both handlers capture one SharedRate; whoever else holds it can change it."""
    shared = rate if isinstance(rate, SharedRate) else SharedRate(rate)
    app = _new_app("shared mutable exchange")

    @app.get("/usd_to_gbp", response_class=PlainTextResponse)
    async def usd_to_gbp(usd: str = Depends(read_amount)):
        return convert_usd_to_gbp(usd, shared.get())

    @app.get("/gbp_to_usd", response_class=PlainTextResponse)
    async def gbp_to_usd(gbp: str = Depends(read_amount)):
        return convert_gbp_to_usd(gbp, shared.get())

    return app


# ============================================================================
# Application state
# ============================================================================


def get_state_rate(request: Request) -> float:
    return request.app.state.gbp_to_usd_rate


state_router = APIRouter()


@state_router.get("/usd_to_gbp", response_class=PlainTextResponse)
async def state_usd_to_gbp(rate: float = Depends(get_state_rate), usd: str = Depends(read_amount)):
    return convert_usd_to_gbp(usd, rate)


@state_router.get("/gbp_to_usd", response_class=PlainTextResponse)
async def state_gbp_to_usd(rate: float = Depends(get_state_rate), gbp: str = Depends(read_amount)):
    return convert_gbp_to_usd(gbp, rate)


def state_app(gbp_to_usd_rate: float) -> FastAPI:
    app = _new_app("state exchange")
    app.state.gbp_to_usd_rate = gbp_to_usd_rate
    app.include_router(state_router)
    return app


def get_shared_rate(request: Request) -> SharedRate:
    return request.app.state.exchange_rate


mutable_rate_router = APIRouter()


@mutable_rate_router.get("/usd_to_gbp", response_class=PlainTextResponse)
async def mutable_usd_to_gbp(rate: SharedRate = Depends(get_shared_rate), usd: str = Depends(read_amount)):
    return convert_usd_to_gbp(usd, rate.get())


@mutable_rate_router.get("/gbp_to_usd", response_class=PlainTextResponse)
async def mutable_gbp_to_usd(rate: SharedRate = Depends(get_shared_rate), gbp: str = Depends(read_amount)):
    return convert_gbp_to_usd(gbp, rate.get())


@mutable_rate_router.put("/set_exchange_rate", response_class=PlainTextResponse)
async def set_exchange_rate(rate: SharedRate = Depends(get_shared_rate), new_rate: str = Depends(read_amount)):
    value = parse_rate(new_rate)
    rate.set(value)
    logger.info("Exchange rate set to %s", value)
    return ""


def mutable_state_app(gbp_to_usd_rate: float) -> FastAPI:
    app = _new_app("mutable state exchange")
    app.state.exchange_rate = SharedRate(gbp_to_usd_rate)
    app.include_router(mutable_rate_router)
    return app


# ============================================================================
# Capability-typed state
# ============================================================================


def get_rates(request: Request):
    return request.app.state.rates


def gbp_router() -> APIRouter:
    """Routes needing only a GBP rate; any state implementing ProvidesGbpToUsd fits."""
    router = APIRouter()

    @router.get("/usd_to_gbp", response_class=PlainTextResponse)
    async def usd_to_gbp(state: ProvidesGbpToUsd = Depends(get_rates), usd: str = Depends(read_amount)):
        return convert_usd_to_gbp(usd, state.gbp_to_usd().rate)

    @router.get("/gbp_to_usd", response_class=PlainTextResponse)
    async def gbp_to_usd(state: ProvidesGbpToUsd = Depends(get_rates), gbp: str = Depends(read_amount)):
        return convert_gbp_to_usd(gbp, state.gbp_to_usd().rate)

    return router


def eur_router() -> APIRouter:
    router = APIRouter()

    @router.get("/usd_to_eur", response_class=PlainTextResponse)
    async def usd_to_eur(state: ProvidesEurToUsd = Depends(get_rates), usd: str = Depends(read_amount)):
        return convert_usd_to_eur(usd, state.eur_to_usd().rate)

    @router.get("/eur_to_usd", response_class=PlainTextResponse)
    async def eur_to_usd(state: ProvidesEurToUsd = Depends(get_rates), eur: str = Depends(read_amount)):
        return convert_eur_to_usd(eur, state.eur_to_usd().rate)

    return router


def generic_app(rates) -> FastAPI:
    """Mount every route group whose capability ``rates`` provides.

    ``AllExchangeRates`` gets all four routes; a bare ``GbpToUsd`` only the
    GBP pair.
    """
    app = _new_app("generic exchange")
    app.state.rates = rates
    mounted = 0
    if isinstance(rates, ProvidesGbpToUsd):
        app.include_router(gbp_router())
        mounted += 1
    if isinstance(rates, ProvidesEurToUsd):
        app.include_router(eur_router())
        mounted += 1
    if not mounted:
        raise TypeError(f"{type(rates).__name__} provides no exchange rate")
    return app


# ============================================================================
# Extensions
# ============================================================================


def extension_app(gbp_to_usd_rate=None) -> FastAPI:
    """Rate delivered per request through Extensions.

    Without a rate the middleware is not installed and every conversion fails
    with 500.
    """
    app = _new_app("extension exchange")

    @app.get("/usd_to_gbp", response_class=PlainTextResponse)
    async def usd_to_gbp(rate: GbpToUsd = Depends(extension(GbpToUsd)), usd: str = Depends(read_amount)):
        return convert_usd_to_gbp(usd, rate.rate)

    @app.get("/gbp_to_usd", response_class=PlainTextResponse)
    async def gbp_to_usd(rate: GbpToUsd = Depends(extension(GbpToUsd)), gbp: str = Depends(read_amount)):
        return convert_gbp_to_usd(gbp, rate.rate)

    if gbp_to_usd_rate is not None:
        app.add_middleware(ExtensionMiddleware, value=GbpToUsd(gbp_to_usd_rate))
    return app


__all__ = [
    "closure_app",
    "extension_app",
    "generic_app",
    "mutable_rate_router",
    "mutable_state_app",
    "shared_mutable_app",
    "state_app",
]
