# api/interfaces/api/main.py
from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from api.infrastructure.config import get_settings
from api.interfaces.api.middleware.rate_limit import RateLimitMiddleware


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    from api.infrastructure.coleta import fechar_cliente
    from api.infrastructure.duckdb_connection import get_connection
    get_connection()  # valida conexao no startup
    yield
    await fechar_cliente()


app = FastAPI(
    title="Gabinete Aberto API",
    debug=get_settings().debug,
    lifespan=lifespan,
    docs_url="/api/docs",
    redoc_url=None,
)


@app.middleware("http")
async def add_security_headers(request: Request, call_next: object) -> Response:
    response = await call_next(request)  # type: ignore[misc]
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    return response  # type: ignore[return-value]


app.add_middleware(RateLimitMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(get_settings().cors_origins),
    allow_methods=["GET"],
    allow_headers=["*"],
)

from api.interfaces.api.routes.despesas_routes import router as despesas_router  # noqa: E402
from api.interfaces.api.routes.equipe_routes import router as equipe_router  # noqa: E402

app.include_router(equipe_router, prefix="/api")
app.include_router(despesas_router, prefix="/api")
