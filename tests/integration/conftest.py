# tests/integration/conftest.py
from __future__ import annotations

import os
from collections.abc import Generator
from datetime import UTC, datetime

import duckdb
import pytest
from fastapi.testclient import TestClient

from pipeline.models import Cargo, Categoria, DespesaItem, Fonte, MembroEquipe, Periodo, Politico
from pipeline.orquestrador import PrioridadeAdaptadores
from pipeline.output.duckdb_repo import DuckDBPoliticoRepo, aplicar_schema
from pipeline.sources.base import Falha, Payload, Registro
from pipeline.sources.errors import NotFoundError, SourceUnavailableError

# Desabilitar rate limit em testes
os.environ["GABINETE_API_RATE_LIMIT"] = "0"

DEPUTADO = Politico(
    id="dep-204554",
    external_id="204554",
    cargo=Cargo.DEPUTADO_FEDERAL,
    nome="Fulano de Tal",
    uf="SP",
    partido="PT",
)
SENADOR = Politico(id="sen-6337", external_id="6337", cargo=Cargo.SENADOR, nome="Fulana Senadora", uf="MG")
VEREADOR = Politico(id="cm_são_paulo_001", external_id=None, cargo=Cargo.VEREADOR, nome="Beltrano", uf="SP")

DESPESAS_DEPUTADO = (
    DespesaItem("2024-03-05", "Posto Central", "12345678000199", "COMBUSTÍVEIS E LUBRIFICANTES.", 100.0, "1", 3),
    DespesaItem("2024-03-20", "Posto Central", "12345678000199", "COMBUSTÍVEIS E LUBRIFICANTES.", 200.0, "2", 3),
    DespesaItem("2024-04-02", "Cia Aérea", None, "PASSAGEM AÉREA - SIGEPA", 700.0, "3", 4),
)
EQUIPE_DEPUTADO = (
    MembroEquipe("Maria da Silva", "Secretário Parlamentar", 5472.0, Fonte.OFFICIAL_API, "2023-02-01"),
    MembroEquipe("João Souza", "Secretário Parlamentar", 5472.0, Fonte.OFFICIAL_API, None, "inactive"),
)


class AdaptadorFixo:
    """Serve registros fixos por external_id; sem registros, falha."""

    def __init__(
        self,
        name: str,
        categoria: Categoria,
        fonte: Fonte,
        registros: dict[str, tuple[Registro, ...]],
    ) -> None:
        self.name = name
        self.categoria = categoria
        self.fonte = fonte
        self._registros = registros

    async def fetch(self, politico: Politico, periodo: Periodo) -> Payload | Falha:
        registros = self._registros.get(politico.external_id or "", ())
        if periodo.mes is not None:
            registros = tuple(r for r in registros if not isinstance(r, DespesaItem) or r.mes == periodo.mes)
        if not registros:
            return Falha(self.name, "sem dados", NotFoundError)
        return Payload(registros=registros, fonte=self.fonte, adaptador=self.name)


class AdaptadorForaDoAr:
    def __init__(self, name: str, categoria: Categoria) -> None:
        self.name = name
        self.categoria = categoria
        self.fonte = Fonte.OFFICIAL_API

    async def fetch(self, politico: Politico, periodo: Periodo) -> Payload | Falha:
        return Falha(self.name, "HTTP 503", SourceUnavailableError)


def prioridades_de_teste() -> PrioridadeAdaptadores:
    return PrioridadeAdaptadores(
        {
            Cargo.DEPUTADO_FEDERAL: {
                Categoria.DESPESAS: (
                    AdaptadorFixo(
                        "camara_fake", Categoria.DESPESAS, Fonte.OFFICIAL_API, {"204554": DESPESAS_DEPUTADO}
                    ),
                ),
                Categoria.EQUIPE: (
                    AdaptadorFixo("secretarios_fake", Categoria.EQUIPE, Fonte.OFFICIAL_API, {"204554": EQUIPE_DEPUTADO}),
                ),
            },
            Cargo.SENADOR: {
                Categoria.DESPESAS: (AdaptadorForaDoAr("codante_fake", Categoria.DESPESAS),),
                Categoria.EQUIPE: (AdaptadorForaDoAr("senado_fake", Categoria.EQUIPE),),
            },
        }
    )


@pytest.fixture()
def prioridades() -> PrioridadeAdaptadores:
    return prioridades_de_teste()


@pytest.fixture(scope="session")
def test_db() -> Generator[duckdb.DuckDBPyConnection, None, None]:
    """Cria DuckDB in-memory com schema e dados deterministicos."""
    conn = duckdb.connect(":memory:")
    aplicar_schema(conn)

    repo = DuckDBPoliticoRepo(conn)
    for politico in (DEPUTADO, SENADOR, VEREADOR):
        repo.inserir(politico)

    # --- Resumo gravado pelo coletor (so para o deputado) ---
    repo.update(
        DEPUTADO.id,
        despesas={"total": 1000.0, "transaction_count": 3, "source": "official_api"},
        equipe={"total_staff": 2, "source": "official_api"},
        atualizado_em=datetime(2024, 6, 1, 9, 0, tzinfo=UTC),
    )

    yield conn
    conn.close()


@pytest.fixture(scope="session")
def client(test_db: duckdb.DuckDBPyConnection) -> Generator[TestClient, None, None]:
    """TestClient do FastAPI com DuckDB in-memory e adaptadores falsos injetados."""
    from api.infrastructure import coleta, duckdb_connection
    duckdb_connection.set_connection(test_db)
    coleta.set_prioridades(prioridades_de_teste())

    # Limpar cache de settings para pegar GABINETE_API_RATE_LIMIT=0
    from api.infrastructure.config import get_settings
    get_settings.cache_clear()

    from api.interfaces.api.main import app
    with TestClient(app) as c:
        yield c
