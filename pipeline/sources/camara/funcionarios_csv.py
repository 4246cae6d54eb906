# pipeline/sources/camara/funcionarios_csv.py
#
# Static reference: the Câmara staff CSV export (funcionarios_camara.csv).
#
# Design decisions:
#   - The file is a periodic dump of every Câmara employee, ';'-separated and
#     quoted. Office staff are linked to their deputy only through
#     uriLotacao (".../deputados/{id}"), so the deputy id is extracted from it
#     with a regex rather than matched by substring, which would confuse
#     id 204 with 2045.
#   - Only "Secretário Parlamentar" rows belong to a deputy's office; other
#     positions in the same lotação are chamber staff.
#   - All columns are read as strings (infer_schema_length=0) because the
#     export mixes formats between releases.
#   - The read is blocking disk IO, so it runs through asyncio.to_thread and
#     the event loop keeps serving other officials of the batch.
#   - A missing file is SourceUnavailableError: the tier is simply skipped.
from __future__ import annotations

import asyncio
from pathlib import Path

import polars as pl

from pipeline.models import Categoria, Fonte, MembroEquipe, Periodo, Politico
from pipeline.sources.base import adapter_boundary
from pipeline.sources.errors import MalformedPayloadError, NotFoundError, SourceUnavailableError
from pipeline.transform.equipe import TABELA_CAMARA, estimar_salario

_COLUNAS_OBRIGATORIAS = ("nome", "cargo", "uriLotacao")


def ler_funcionarios_csv(path: Path) -> pl.DataFrame:
    """Read the staff export into a string-typed DataFrame.

    Raises:
        SourceUnavailableError: if the file does not exist.
        MalformedPayloadError: if it cannot be parsed or lacks required columns.
    """
    if not path.exists():
        raise SourceUnavailableError(f"CSV de funcionarios nao encontrado: {path}")
    try:
        df = pl.read_csv(
            path,
            separator=";",
            quote_char='"',
            encoding="utf8-lossy",
            infer_schema_length=0,
            null_values=["", "NULL"],
            truncate_ragged_lines=True,
        )
    except pl.exceptions.PolarsError as err:
        raise MalformedPayloadError(f"CSV de funcionarios ilegivel: {err}") from err

    df = df.rename({col: col.strip() for col in df.columns})
    ausentes = [c for c in _COLUNAS_OBRIGATORIAS if c not in df.columns]
    if ausentes:
        raise MalformedPayloadError(f"CSV de funcionarios sem colunas {ausentes}")
    return df


def filtrar_gabinete(df: pl.DataFrame, deputado_id: str) -> pl.DataFrame:
    """Rows of the deputy's office staff (Secretário Parlamentar only)."""
    return df.filter(
        (pl.col("uriLotacao").str.extract(r"deputados/(\d+)", 1) == deputado_id)
        & pl.col("cargo").str.contains("Secretário Parlamentar", literal=True)
    )


class CamaraFuncionariosCsvAdapter:
    name = "camara_funcionarios_csv"
    categoria = Categoria.EQUIPE
    fonte = Fonte.STATIC_REFERENCE

    def __init__(self, csv_path: Path) -> None:
        self._csv_path = csv_path

    @adapter_boundary
    async def fetch(self, politico: Politico, periodo: Periodo) -> list[MembroEquipe]:
        if not politico.external_id:
            raise NotFoundError(f"{politico.nome} sem id da Câmara")
        df = await asyncio.to_thread(ler_funcionarios_csv, self._csv_path)
        gabinete = filtrar_gabinete(df, str(politico.external_id))

        tem_nomeacao = "dataNomeacao" in gabinete.columns
        membros: list[MembroEquipe] = []
        for row in gabinete.iter_rows(named=True):
            nome = (row["nome"] or "").strip()
            if not nome:
                continue
            cargo = row["cargo"].strip()
            membros.append(
                MembroEquipe(
                    nome=nome,
                    cargo=cargo,
                    salario_estimado=estimar_salario(cargo, TABELA_CAMARA),
                    data_admissao=row["dataNomeacao"] if tem_nomeacao else None,
                    status="active",
                    fonte=self.fonte,
                )
            )
        return membros
