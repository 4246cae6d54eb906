# api/interfaces/api/middleware/rate_limit.py
#
# Per-IP sliding-window limit on the routes that trigger live collection.
#
# /staff and /expenses call Câmara, Senado and third-party sources on every
# request. Other routes only read the local store and are not counted. A
# request carrying the configured X-API-Key skips the limit.
from __future__ import annotations

import hmac
import time
from collections import defaultdict

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from api.infrastructure.config import get_settings

_PREFIXOS_LIMITADOS = ("/api/staff/", "/api/expenses/")
_JANELA_SEGUNDOS = 60.0


class RateLimitMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: object) -> None:
        super().__init__(app)  # type: ignore[arg-type]
        self._requests: dict[str, list[float]] = defaultdict(list)

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        settings = get_settings()

        # 0 = sem limite (usado em testes)
        if settings.rate_limit_per_minute == 0 or not request.url.path.startswith(_PREFIXOS_LIMITADOS):
            return await call_next(request)

        api_key = request.headers.get("X-API-Key", "")
        if settings.api_key and hmac.compare_digest(api_key, settings.api_key):
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        now = time.monotonic()
        recentes = [t for t in self._requests[client_ip] if now - t < _JANELA_SEGUNDOS]

        if len(recentes) >= settings.rate_limit_per_minute:
            self._requests[client_ip] = recentes
            return Response(
                content='{"detail": "Rate limit excedido. Tente novamente em 1 minuto."}',
                status_code=429,
                media_type="application/json",
                headers={"Retry-After": str(int(_JANELA_SEGUNDOS - (now - recentes[0])) + 1)},
            )

        recentes.append(now)
        self._requests[client_ip] = recentes
        return await call_next(request)
