# pipeline/transform/despesas.py
#
# Expense aggregation: line items from any tier -> ResumoDespesas.
#
# Design decisions:
#   - Pure function over a Polars DataFrame built from the items. No IO, no
#     global state; the caller chooses the provenance tag.
#   - Unparseable amounts (valor_liquido=None) count as zero in every total
#     but still count as a transaction: the receipt exists, its value does not.
#   - Percentages are derived from the total in the same pass that builds the
#     category map. ResumoDespesas is frozen, so they cannot drift afterwards.
#   - The monthly average is always total / 12, also for partial years and for
#     single-month queries. Consumers compare offices on the same basis.
#   - Month comes from DespesaItem.mes when the source sets it, else from the
#     ISO date (YYYY-MM-DD). Items without either are left out of the monthly
#     series only.
#   - Maps are ordered by total descending, then label, so the JSON output is
#     stable between runs.
#
# Invariants:
#   - sum(c.total for c in categorias.values()) == total (float tolerance).
#   - sum(c.percentual) == 100 (float tolerance) when total > 0, else every
#     percentual is 0.
#   - qtd_transacoes == len(itens).
from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, datetime

import polars as pl

from pipeline.models import DespesaItem, Fonte, ResumoDespesas, TotalCategoria, TotalGrupo
from pipeline.transform.rotulos import ROTULO_SEM_CATEGORIA, ROTULO_SEM_FORNECEDOR

MESES_NO_ANO = 12

_SCHEMA = {
    "categoria": pl.Utf8,
    "fornecedor": pl.Utf8,
    "mes": pl.Int64,
    "valor": pl.Float64,
}


def _mes(item: DespesaItem) -> int | None:
    if item.mes is not None:
        return item.mes
    data = item.data or ""
    if len(data) >= 7 and data[4] == "-" and data[5:7].isdigit():
        mes = int(data[5:7])
        return mes if 1 <= mes <= 12 else None
    return None


def itens_para_dataframe(itens: Iterable[DespesaItem]) -> pl.DataFrame:
    """One row per item: categoria, fornecedor, mes, valor (nulls filled)."""
    linhas = [
        {
            "categoria": item.categoria,
            "fornecedor": item.fornecedor,
            "mes": _mes(item),
            "valor": float(item.valor_liquido) if item.valor_liquido is not None else None,
        }
        for item in itens
    ]
    return pl.DataFrame(linhas, schema=_SCHEMA).with_columns(
        pl.col("categoria").fill_null(ROTULO_SEM_CATEGORIA),
        pl.col("fornecedor").fill_null(ROTULO_SEM_FORNECEDOR),
        pl.col("valor").fill_null(0.0),
    )


def _agrupar(df: pl.DataFrame, chave: str) -> pl.DataFrame:
    return (
        df.group_by(chave)
        .agg(
            pl.col("valor").sum().alias("total"),
            pl.len().alias("count"),
        )
        .sort(["total", chave], descending=[True, False])
    )


def resumir_despesas(
    itens: Iterable[DespesaItem],
    fonte: Fonte,
    atualizado_em: datetime | None = None,
) -> ResumoDespesas:
    """Aggregate expense line items into a ResumoDespesas.

    Args:
        itens:         Line items, already label-canonicalized by the caller.
        fonte:         Provenance of the items as a whole.
        atualizado_em: Timestamp to stamp on the summary (default: now, UTC).

    Returns:
        ResumoDespesas. Empty input gives zeros and empty maps.
    """
    df = itens_para_dataframe(itens)
    carimbo = atualizado_em or datetime.now(tz=UTC)

    if df.is_empty():
        return ResumoDespesas(
            total=0.0,
            media_mensal=0.0,
            categorias={},
            fornecedores={},
            meses={},
            qtd_transacoes=0,
            fonte=fonte,
            atualizado_em=carimbo,
        )

    total = float(df["valor"].sum())

    categorias = {
        row["categoria"]: TotalCategoria(
            total=row["total"],
            count=row["count"],
            percentual=(row["total"] / total * 100) if total else 0.0,
        )
        for row in _agrupar(df, "categoria").iter_rows(named=True)
    }
    fornecedores = {
        row["fornecedor"]: TotalGrupo(total=row["total"], count=row["count"])
        for row in _agrupar(df, "fornecedor").iter_rows(named=True)
    }
    meses = {
        row["mes"]: TotalGrupo(total=row["total"], count=row["count"])
        for row in _agrupar(df.filter(pl.col("mes").is_not_null()), "mes")
        .sort("mes")
        .iter_rows(named=True)
    }

    return ResumoDespesas(
        total=total,
        media_mensal=total / MESES_NO_ANO,
        categorias=categorias,
        fornecedores=fornecedores,
        meses=meses,
        qtd_transacoes=df.height,
        fonte=fonte,
        atualizado_em=carimbo,
    )
