# api/application/services/gabinete_service.py
from __future__ import annotations

from datetime import UTC, datetime

from pipeline.models import Categoria, DespesaItem, MembroEquipe, Periodo, Politico
from pipeline.orquestrador import Orquestrador
from pipeline.output.duckdb_repo import DuckDBPoliticoRepo
from pipeline.output.repository import PoliticoNaoEncontrado
from pipeline.transform.despesas import resumir_despesas
from pipeline.transform.equipe import remuneracao_para, resumir_equipe
from pipeline.transform.rotulos import canonicalizar_itens

from ..dtos.gabinete_dto import (
    DespesasDTO,
    DespesasRespostaDTO,
    EquipeDTO,
    EquipeRespostaDTO,
    PoliticoDTO,
    RemuneracaoDTO,
    ResumoArmazenadoDTO,
)


def _politico_dto(politico: Politico) -> PoliticoDTO:
    return PoliticoDTO(
        id=politico.id,
        name=politico.nome,
        position=politico.cargo.value,
        party=politico.partido,
        state=politico.uf,
    )


def _remuneracao_dto(politico: Politico) -> RemuneracaoDTO | None:
    remuneracao = remuneracao_para(politico.cargo)
    return RemuneracaoDTO(**remuneracao.para_dict()) if remuneracao else None


class GabineteService:
    """Imperative Shell: resolve as fontes (IO) e chama o core puro (resumos).

    Nao grava nada: a gravacao e do coletor (pipeline.atualizacao).
    """

    def __init__(self, repo: DuckDBPoliticoRepo, orquestrador: Orquestrador) -> None:
        self._repo = repo
        self._orquestrador = orquestrador

    async def obter_equipe(self, politico_id: str, periodo: Periodo | None = None) -> EquipeRespostaDTO | None:
        politico = self._repo.get(politico_id)
        if politico is None:
            return None

        payload = await self._orquestrador.resolve(Categoria.EQUIPE, politico, periodo or Periodo.atual())
        membros = [r for r in payload.registros if isinstance(r, MembroEquipe)]
        resumo = resumir_equipe(membros, payload.fonte)

        return EquipeRespostaDTO(
            politician=_politico_dto(politico),
            staff=EquipeDTO(**resumo.para_dict(), illustrative=resumo.fonte.ilustrativa),
            compensation=_remuneracao_dto(politico),
            updated_at=datetime.now(tz=UTC),
        )

    async def obter_despesas(self, politico_id: str, periodo: Periodo) -> DespesasRespostaDTO | None:
        politico = self._repo.get(politico_id)
        if politico is None:
            return None

        payload = await self._orquestrador.resolve(Categoria.DESPESAS, politico, periodo)
        itens = canonicalizar_itens(r for r in payload.registros if isinstance(r, DespesaItem))
        resumo = resumir_despesas(itens, payload.fonte)

        return DespesasRespostaDTO(
            politician=_politico_dto(politico),
            expenses=DespesasDTO(
                **resumo.para_dict(),
                year=periodo.ano,
                month=periodo.mes,
                illustrative=resumo.fonte.ilustrativa,
            ),
            updated_at=datetime.now(tz=UTC),
        )

    def obter_resumo_armazenado(self, politico_id: str) -> ResumoArmazenadoDTO | None:
        politico = self._repo.get(politico_id)
        if politico is None:
            return None
        try:
            despesas, equipe, atualizado_em = self._repo.resumos(politico_id)
        except PoliticoNaoEncontrado:
            return None
        return ResumoArmazenadoDTO(
            politician=_politico_dto(politico),
            expenses=despesas,
            staff=equipe,
            updated_at=atualizado_em,
            compensation=_remuneracao_dto(politico),
        )
