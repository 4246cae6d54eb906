# pipeline/atualizacao.py
#
# Batch update of every tracked official: resolve, aggregate, persist.
#
# Design decisions:
#   - Each official is a Tarefa with a small terminal state machine:
#     pending -> fetching -> succeeded | failed. A failed official is not
#     retried in the same run; the next run picks it up again.
#   - Federal officials go first (Câmara and Senado have the most reliable
#     sources), then state, then municipal. Order inside a branch is the
#     order the repository returns.
#   - Officials run in fixed-size batches. Inside a batch the tasks run
#     concurrently with asyncio.gather; between batches there is a fixed
#     pause, skipped after the last one. Batch size is the only concurrency
#     bound and the pause is the only backpressure on upstream sources.
#   - One official's exception is caught in its own task, logged and counted.
#     It never aborts the batch or the run.
#   - sleep is injectable so tests can record pauses without waiting.
#   - atualizar_um runs the same per-official task for a single official,
#     outside the batching and pacing.
from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Iterable, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum

from pipeline.log import log
from pipeline.models import Categoria, DespesaItem, MembroEquipe, Periodo, Politico
from pipeline.orquestrador import Orquestrador
from pipeline.output.repository import PoliticoNaoEncontrado, PoliticoRepository
from pipeline.transform.despesas import resumir_despesas
from pipeline.transform.equipe import resumir_equipe
from pipeline.transform.rotulos import canonicalizar_itens

_ORDEM_ESFERAS = ("federal", "estadual", "municipal")


class EstadoTarefa(StrEnum):
    PENDING = "pending"
    FETCHING = "fetching"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class TransicaoInvalida(RuntimeError):
    pass


@dataclass
class Tarefa:
    politico: Politico
    estado: EstadoTarefa = EstadoTarefa.PENDING
    erro: str | None = None

    def iniciar(self) -> None:
        self._transitar(EstadoTarefa.PENDING, EstadoTarefa.FETCHING)

    def concluir(self) -> None:
        self._transitar(EstadoTarefa.FETCHING, EstadoTarefa.SUCCEEDED)

    def falhar(self, erro: str) -> None:
        self._transitar(EstadoTarefa.FETCHING, EstadoTarefa.FAILED)
        self.erro = erro

    def _transitar(self, de: EstadoTarefa, para: EstadoTarefa) -> None:
        if self.estado is not de:
            raise TransicaoInvalida(f"{self.politico.id}: {self.estado} -> {para}")
        self.estado = para


@dataclass(frozen=True)
class RelatorioExecucao:
    sucessos: int
    falhas: int
    total: int
    tarefas: tuple[Tarefa, ...] = field(default=(), repr=False)


def particionar(politicos: Iterable[Politico]) -> list[Politico]:
    """Federal first, then state, then municipal; stable within each branch."""
    lista = list(politicos)
    return [p for esfera in _ORDEM_ESFERAS for p in lista if p.cargo.esfera == esfera]


def em_lotes(politicos: Sequence[Politico], tamanho: int) -> list[list[Politico]]:
    if tamanho < 1:
        raise ValueError(f"tamanho de lote deve ser >= 1, recebido {tamanho}")
    return [list(politicos[i : i + tamanho]) for i in range(0, len(politicos), tamanho)]


async def atualizar_politico(
    politico: Politico,
    periodo: Periodo,
    orquestrador: Orquestrador,
    repo: PoliticoRepository,
) -> None:
    """Resolve both categories, aggregate and persist once.

    Raises whatever the repository raises; callers count it as a failure.
    """
    payload_despesas, payload_equipe = await asyncio.gather(
        orquestrador.resolve(Categoria.DESPESAS, politico, periodo),
        orquestrador.resolve(Categoria.EQUIPE, politico, periodo),
    )

    itens = canonicalizar_itens(r for r in payload_despesas.registros if isinstance(r, DespesaItem))
    membros = [r for r in payload_equipe.registros if isinstance(r, MembroEquipe)]

    agora = datetime.now(tz=UTC)
    despesas = resumir_despesas(itens, payload_despesas.fonte, agora)
    equipe = resumir_equipe(membros, payload_equipe.fonte)

    repo.update(
        politico.id,
        despesas=despesas.para_dict(),
        equipe=equipe.para_dict(),
        atualizado_em=agora,
    )


class AtualizadorLote:
    def __init__(
        self,
        orquestrador: Orquestrador,
        repo: PoliticoRepository,
        *,
        tamanho_lote: int = 3,
        pausa: float = 3.0,
        periodo: Periodo | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if tamanho_lote < 1:
            raise ValueError(f"tamanho_lote deve ser >= 1, recebido {tamanho_lote}")
        self._orquestrador = orquestrador
        self._repo = repo
        self._tamanho_lote = tamanho_lote
        self._pausa = pausa
        self._periodo = periodo or Periodo.atual()
        self._sleep = sleep

    async def executar(self, tarefa: Tarefa) -> Tarefa:
        tarefa.iniciar()
        try:
            await atualizar_politico(tarefa.politico, self._periodo, self._orquestrador, self._repo)
        except Exception as err:  # noqa: BLE001
            tarefa.falhar(f"{type(err).__name__}: {err}")
            log(f"  {tarefa.politico.id} ({tarefa.politico.nome}) falhou: {tarefa.erro}", nivel="ERROR")
        else:
            tarefa.concluir()
        return tarefa

    async def atualizar_todos(self, politicos: Iterable[Politico] | None = None) -> RelatorioExecucao:
        """Update every official (default: everyone in the repository)."""
        ordenados = particionar(self._repo.listar() if politicos is None else politicos)
        lotes = em_lotes(ordenados, self._tamanho_lote)
        log(f"Atualizando {len(ordenados)} politicos em {len(lotes)} lotes de ate {self._tamanho_lote}")

        tarefas: list[Tarefa] = []
        for numero, lote in enumerate(lotes, start=1):
            log(f"Lote {numero}/{len(lotes)}: {', '.join(p.id for p in lote)}")
            tarefas.extend(await asyncio.gather(*(self.executar(Tarefa(p)) for p in lote)))
            if numero < len(lotes) and self._pausa > 0:
                await self._sleep(self._pausa)

        sucessos = sum(1 for t in tarefas if t.estado is EstadoTarefa.SUCCEEDED)
        relatorio = RelatorioExecucao(
            sucessos=sucessos,
            falhas=len(tarefas) - sucessos,
            total=len(tarefas),
            tarefas=tuple(tarefas),
        )
        log(f"Concluido: {relatorio.sucessos} sucessos, {relatorio.falhas} falhas, {relatorio.total} total")
        return relatorio

    async def atualizar_um(self, politico_id: str) -> Tarefa:
        """Run the per-official task for one official, without batching.

        Raises:
            PoliticoNaoEncontrado: if the id is not in the repository.
        """
        politico = self._repo.get(politico_id)
        if politico is None:
            raise PoliticoNaoEncontrado(politico_id)
        tarefa = await self.executar(Tarefa(politico))
        log(f"{politico_id}: {tarefa.estado}")
        return tarefa
