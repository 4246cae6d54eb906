# api/infrastructure/coleta.py
#
# Adapter wiring for the on-demand routes.
#
# The routes reuse the collector's orchestrator. One AsyncClient is shared by
# every request and closed on shutdown (lifespan in main.py). Tests replace
# the whole adapter table with set_prioridades.
from __future__ import annotations

import httpx

from pipeline.config import load_config
from pipeline.orquestrador import PrioridadeAdaptadores, montar_prioridades
from pipeline.sources.base import criar_cliente

from .config import get_settings

_client: httpx.AsyncClient | None = None
_prioridades: PrioridadeAdaptadores | None = None


def get_prioridades() -> PrioridadeAdaptadores:
    global _client, _prioridades  # noqa: PLW0603
    if _prioridades is None:
        _client = criar_cliente(get_settings().http_timeout)
        _prioridades = montar_prioridades(_client, load_config())
    return _prioridades


def set_prioridades(prioridades: PrioridadeAdaptadores) -> None:
    """Usado em testes para injetar adaptadores falsos."""
    global _prioridades  # noqa: PLW0603
    _prioridades = prioridades


async def fechar_cliente() -> None:
    global _client, _prioridades  # noqa: PLW0603
    if _client is not None:
        await _client.aclose()
        _client = None
        _prioridades = None
