"""DNS configuration backend web app.

Copyright (c) 2024 MultiFactor
License: https://github.com/MultiDirectoryLab/MultiDirectory/blob/main/LICENSE
"""

import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable

from dishka import make_async_container
from dishka.integrations.fastapi import setup_dishka
from fastapi import FastAPI, Request, Response

from api import dns_router
from config import VENDOR_VERSION, Settings
from dns_config import configure_log_sink
from ioc import DNSConfigProvider


async def proc_time_header_middleware(
    request: Request,
    call_next: Callable,
) -> Response:
    """Set X-Process-Time header."""
    start_time = time.perf_counter()
    response = await call_next(request)
    process_time = time.perf_counter() - start_time
    response.headers["X-Process-Time"] = "{:.4f}".format(process_time)
    return response


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create FastAPI app without container."""

    @asynccontextmanager
    async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.dishka_container.close()

    settings = settings or Settings.from_os()

    app = FastAPI(
        name="ServerManager",
        title="Server Manager",
        debug=settings.DEBUG,
        root_path="/api",
        version=VENDOR_VERSION,
        lifespan=_lifespan,
    )
    app.include_router(dns_router)

    if settings.DEBUG:
        app.middleware("http")(proc_time_header_middleware)

    return app


def create_prod_app(settings: Settings | None = None) -> FastAPI:
    """Create production app with container."""
    settings = settings or Settings.from_os()
    configure_log_sink(settings.DNS_LOG_DIR)

    app = create_app(settings)
    container = make_async_container(
        DNSConfigProvider(),
        context={Settings: settings},
    )

    setup_dishka(container, app)
    return app
