# pipeline/output/duckdb_repo.py
#
# DuckDB implementation of PoliticoRepository.
#
# Design decisions:
#   - The repo receives an open connection and never opens or closes one, so
#     tests can hand it an in-memory database.
#   - Schema comes from schema.sql (aplicar_schema), the single source of
#     truth for table structure.
#   - Summaries are written as JSON text into JSON columns and read back with
#     json.loads. Timestamps are stored as naive UTC.
#   - update() writes both summaries and the timestamp in one statement, so a
#     reader never sees new expenses next to an old roster.
#
# Invariants:
#   - Never interpolates caller input into SQL; all values use ? placeholders.
#   - get() returns None for an unknown id; update() raises PoliticoNaoEncontrado.
from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import duckdb

from pipeline.models import Cargo, Politico
from pipeline.output.repository import PoliticoNaoEncontrado

SCHEMA_PATH = Path(__file__).parent / "schema.sql"

_COLUNAS_POLITICO = "id, external_id, cargo, nome, uf, partido"


def aplicar_schema(conn: duckdb.DuckDBPyConnection) -> None:
    conn.execute(SCHEMA_PATH.read_text(encoding="utf-8"))


def _para_politico(row: tuple[Any, ...]) -> Politico:
    return Politico(
        id=str(row[0]),
        external_id=str(row[1]) if row[1] is not None else None,
        cargo=Cargo(row[2]),
        nome=str(row[3]),
        uf=str(row[4]) if row[4] is not None else None,
        partido=str(row[5]) if row[5] is not None else None,
    )


def _utc_naive(instante: datetime) -> datetime:
    if instante.tzinfo is None:
        return instante
    return instante.astimezone(UTC).replace(tzinfo=None)


class DuckDBPoliticoRepo:
    def __init__(self, conn: duckdb.DuckDBPyConnection) -> None:
        self._conn = conn

    def listar(self) -> list[Politico]:
        rows = self._conn.execute(f"SELECT {_COLUNAS_POLITICO} FROM politico ORDER BY id").fetchall()  # noqa: S608
        return [_para_politico(r) for r in rows]

    def get(self, politico_id: str) -> Politico | None:
        row = self._conn.execute(
            f"SELECT {_COLUNAS_POLITICO} FROM politico WHERE id = ?",  # noqa: S608
            [politico_id],
        ).fetchone()
        return _para_politico(row) if row is not None else None

    def update(
        self,
        politico_id: str,
        *,
        despesas: dict[str, Any],
        equipe: dict[str, Any],
        atualizado_em: datetime,
    ) -> None:
        if self.get(politico_id) is None:
            raise PoliticoNaoEncontrado(politico_id)
        self._conn.execute(
            """
            UPDATE politico
            SET despesas = ?, equipe = ?, atualizado_em = ?
            WHERE id = ?
            """,
            [
                json.dumps(despesas, ensure_ascii=False),
                json.dumps(equipe, ensure_ascii=False),
                _utc_naive(atualizado_em),
                politico_id,
            ],
        )

    def inserir(self, politico: Politico) -> None:
        """Add or replace an official's identity. Used by seeding and tests."""
        self._conn.execute(
            f"INSERT OR REPLACE INTO politico ({_COLUNAS_POLITICO}) VALUES (?, ?, ?, ?, ?, ?)",  # noqa: S608
            [
                politico.id,
                politico.external_id,
                politico.cargo.value,
                politico.nome,
                politico.uf,
                politico.partido,
            ],
        )

    def resumos(self, politico_id: str) -> tuple[dict[str, Any] | None, dict[str, Any] | None, datetime | None]:
        """Stored (despesas, equipe, atualizado_em) of an official.

        Raises:
            PoliticoNaoEncontrado: if the id is unknown.
        """
        row = self._conn.execute(
            "SELECT despesas, equipe, atualizado_em FROM politico WHERE id = ?",
            [politico_id],
        ).fetchone()
        if row is None:
            raise PoliticoNaoEncontrado(politico_id)
        despesas = json.loads(row[0]) if row[0] is not None else None
        equipe = json.loads(row[1]) if row[1] is not None else None
        return despesas, equipe, row[2]
