# pipeline/sources/base.py
#
# Protocol definition and boundary helpers for all source adapters.
#
# Design decisions:
#   - Uses typing.Protocol (structural subtyping) rather than ABC so that
#     concrete adapters don't need to inherit from a base, they just need to
#     expose the right interface. Test doubles in tests/ are plain classes.
#   - runtime_checkable is set so the orchestrator can use isinstance() when
#     validating its configuration.
#   - fetch() returns Payload | Falha instead of raising. adapter_boundary is
#     the single place that turns AdapterError, httpx errors and shape errors
#     (KeyError/TypeError/ValueError/AttributeError) into a Falha, so every
#     adapter body can be written as straight-line code that raises on trouble.
#   - An empty result set is a Falha too: the orchestrator only stops on a
#     non-empty payload.
#   - Adapters never retry. Moving to the next tier is the orchestrator's job.
from __future__ import annotations

import functools
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Any, Protocol, TypeVar, runtime_checkable

import httpx

from pipeline.models import Categoria, DespesaItem, Fonte, MembroEquipe, Periodo, Politico
from pipeline.sources.errors import (
    AdapterError,
    MalformedPayloadError,
    NotFoundError,
    SourceUnavailableError,
)

Registro = DespesaItem | MembroEquipe


@dataclass(frozen=True)
class Payload:
    """Normalized records from one adapter, tagged with their provenance."""

    registros: tuple[Registro, ...]
    fonte: Fonte
    adaptador: str

    def __len__(self) -> int:
        return len(self.registros)


@dataclass(frozen=True)
class Falha:
    """Why one adapter produced nothing usable."""

    adaptador: str
    motivo: str
    tipo: type[AdapterError]

    def __str__(self) -> str:
        return f"{self.adaptador}: {self.tipo.__name__}: {self.motivo}"


@runtime_checkable
class SourceAdapter(Protocol):
    """Contract for source adapters.

        name        identifier used in logs and on Payload/Falha.
        categoria   the single data category this adapter serves.
        fonte       provenance tier stamped on every Payload it returns.
        fetch       fetch and normalize; never raises.
    """

    name: str
    categoria: Categoria
    fonte: Fonte

    async def fetch(self, politico: Politico, periodo: Periodo) -> Payload | Falha:
        """Fetch the official's records for the period.

        Returns:
            Payload with at least one record, or Falha with a short reason.
        """
        ...


_A = TypeVar("_A", bound=SourceAdapter)
_Coleta = Callable[[_A, Politico, Periodo], Awaitable[Sequence[Registro]]]


def adapter_boundary(coletar: _Coleta[_A]) -> Callable[[_A, Politico, Periodo], Awaitable[Payload | Falha]]:
    """Wrap an adapter's collection coroutine so it returns Payload | Falha."""

    @functools.wraps(coletar)
    async def fetch(self: _A, politico: Politico, periodo: Periodo) -> Payload | Falha:
        try:
            registros = await coletar(self, politico, periodo)
        except AdapterError as err:
            return Falha(self.name, str(err), type(err))
        except httpx.TimeoutException as err:
            return Falha(self.name, f"timeout: {err!r}", SourceUnavailableError)
        except httpx.HTTPError as err:
            return Falha(self.name, f"erro de rede: {err!r}", SourceUnavailableError)
        except (KeyError, TypeError, ValueError, AttributeError) as err:
            return Falha(self.name, f"formato inesperado: {err!r}", MalformedPayloadError)

        if not registros:
            return Falha(self.name, "nenhum registro retornado", NotFoundError)
        return Payload(registros=tuple(registros), fonte=self.fonte, adaptador=self.name)

    return fetch


async def get_json(client: httpx.AsyncClient, url: str, params: dict[str, Any] | None = None) -> Any:
    """GET a JSON document.

    Raises:
        NotFoundError: on HTTP 404.
        SourceUnavailableError: on any other non-2xx status.
        MalformedPayloadError: if the body is not JSON.
    """
    response = await client.get(url, params=params, headers={"Accept": "application/json"})
    _checar_status(response)
    try:
        return response.json()
    except ValueError as err:
        raise MalformedPayloadError(f"resposta nao-JSON de {url}") from err


async def get_text(client: httpx.AsyncClient, url: str, params: dict[str, Any] | None = None) -> str:
    """GET an HTML page. Same status handling as get_json."""
    response = await client.get(url, params=params, headers={"Accept": "text/html,application/xhtml+xml"})
    _checar_status(response)
    return response.text


def _checar_status(response: httpx.Response) -> None:
    if response.status_code == 404:
        raise NotFoundError(f"HTTP 404 em {response.request.url}")
    if not response.is_success:
        raise SourceUnavailableError(f"HTTP {response.status_code} em {response.request.url}")


def criar_cliente(timeout: float, transport: httpx.AsyncBaseTransport | None = None) -> httpx.AsyncClient:
    """Shared AsyncClient for one run. Every request is bounded by timeout."""
    return httpx.AsyncClient(
        timeout=timeout,
        follow_redirects=True,
        transport=transport,
        headers={"User-Agent": "Mozilla/5.0 (compatible; gabinete-aberto/0.1)"},
    )
