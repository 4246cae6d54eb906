# pipeline/main.py
#
# Collector entry point: batch update of every tracked official, update of a
# single official, or a listing of a state's directory.
#
# Design decisions:
#   - One HTTP client and one DuckDB connection per run, opened here and
#     passed down. Adapters and the repository never open their own.
#   - The schema is applied on start (CREATE ... IF NOT EXISTS), so a fresh
#     data dir works without a separate setup step.
#   - Each step logs progress to stdout. No structured logging framework is used
#     because the collector is a batch job, not a long-running service.
#   - Exit code is 0 when every official succeeded, 1 when any failed and 2
#     when a single requested official does not exist.
#
# Usage:
#   python -m pipeline.main                       # every official, current year
#   python -m pipeline.main --politico dep-204554 # one official
#   python -m pipeline.main --ano 2024
#   python -m pipeline.main --diretorio SP        # state deputies and mayors of SP
from __future__ import annotations

import argparse
import asyncio
from collections.abc import Sequence

import duckdb

from pipeline.atualizacao import AtualizadorLote, EstadoTarefa, RelatorioExecucao, Tarefa
from pipeline.config import PipelineConfig, load_config
from pipeline.log import log
from pipeline.models import Periodo
from pipeline.orquestrador import Orquestrador, montar_prioridades
from pipeline.output.duckdb_repo import DuckDBPoliticoRepo, aplicar_schema
from pipeline.output.repository import PoliticoNaoEncontrado
from pipeline.sources.assembleias.estados import diretorio_estadual
from pipeline.sources.base import criar_cliente
from pipeline.sources.diretorio import Diretorio
from pipeline.sources.tse.municipios import TsePrefeitosDiretorio


async def run_update(
    config: PipelineConfig,
    periodo: Periodo,
    politico_id: str | None = None,
) -> RelatorioExecucao | Tarefa:
    """Update one official, or all of them, against config.duckdb_path.

    Raises:
        PoliticoNaoEncontrado: if politico_id is given and unknown.
    """
    config.duckdb_path.parent.mkdir(parents=True, exist_ok=True)
    conn = duckdb.connect(str(config.duckdb_path))
    try:
        aplicar_schema(conn)
        async with criar_cliente(config.http_timeout) as client:
            atualizador = AtualizadorLote(
                Orquestrador(montar_prioridades(client, config)),
                DuckDBPoliticoRepo(conn),
                tamanho_lote=config.batch_size,
                pausa=config.pausa_entre_lotes,
                periodo=periodo,
            )
            if politico_id is not None:
                return await atualizador.atualizar_um(politico_id)
            return await atualizador.atualizar_todos()
    finally:
        conn.close()


async def run_diretorio(config: PipelineConfig, uf: str) -> list[Diretorio]:
    async with criar_cliente(config.http_timeout) as client:
        return [
            await diretorio_estadual(client, config.source_urls.alesp, uf),
            await TsePrefeitosDiretorio().listar(uf),
        ]


def _imprimir_diretorio(diretorio: Diretorio) -> None:
    aviso = " (dados ilustrativos)" if diretorio.fonte.ilustrativa else ""
    log(f"{diretorio.origem}: {len(diretorio)} politicos, fonte={diretorio.fonte}{aviso}")
    for p in diretorio.politicos:
        log(f"  {p.id:<22} {p.nome:<32} {p.partido or '-':<14} {p.uf or '-'}")


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="python -m pipeline.main",
        description="Atualiza despesas e equipes de gabinete dos politicos acompanhados.",
    )
    parser.add_argument("--politico", metavar="ID", help="atualiza apenas este politico")
    parser.add_argument("--ano", type=int, help="ano de referencia (padrao: ano corrente)")
    parser.add_argument("--mes", type=int, choices=range(1, 13), metavar="MES", help="filtra despesas por mes")
    parser.add_argument("--diretorio", metavar="UF", help="lista deputados estaduais e prefeitos da UF")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    config = load_config()

    if args.diretorio:
        for diretorio in asyncio.run(run_diretorio(config, args.diretorio)):
            _imprimir_diretorio(diretorio)
        return 0

    periodo = Periodo(ano=args.ano or Periodo.atual().ano, mes=args.mes)
    try:
        resultado = asyncio.run(run_update(config, periodo, args.politico))
    except PoliticoNaoEncontrado as err:
        log(str(err), nivel="ERROR")
        return 2

    if isinstance(resultado, Tarefa):
        return 0 if resultado.estado is EstadoTarefa.SUCCEEDED else 1
    return 0 if resultado.falhas == 0 else 1


if __name__ == "__main__":
    raise SystemExit(main())
