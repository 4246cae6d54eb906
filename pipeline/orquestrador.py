# pipeline/orquestrador.py
#
# Fallback orchestration: first usable payload across an ordered list of
# adapters, or a synthesized placeholder.
#
# Design decisions:
#   - Which adapters serve which (cargo, categoria), and in which order, is
#     plain data (PrioridadeAdaptadores) built once per run by
#     montar_prioridades and handed to the Orquestrador. Tests build their own
#     with fakes; nothing here branches on cargo.
#   - Adapters are tried strictly in sequence. The first Payload with at least
#     one record wins and later tiers are never called.
#   - resolve() never raises. A Falha is logged and the next tier tried. An
#     adapter that breaks its contract and raises is logged and treated the
#     same way.
#   - When every tier fails, or the branch has no adapters at all, the result
#     is a Payload tagged SYNTHESIZED: a deterministic roster for EQUIPE and an
#     empty item list for DESPESAS (no invented expenses).
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

import httpx

from pipeline.config import PipelineConfig
from pipeline.log import log
from pipeline.models import Cargo, Categoria, Fonte, Periodo, Politico
from pipeline.sources.base import Falha, Payload, SourceAdapter
from pipeline.sources.camara.despesas import CamaraDespesasAdapter
from pipeline.sources.camara.funcionarios_csv import CamaraFuncionariosCsvAdapter
from pipeline.sources.camara.secretarios import CamaraSecretariosAdapter
from pipeline.sources.errors import AdapterError, NotFoundError
from pipeline.sources.senado.codante import CodanteDespesasAdapter
from pipeline.sources.senado.funcionarios import SenadoFuncionariosAdapter
from pipeline.sources.senado.transparencia import SenadoPessoalAdapter, SenadoTransparenciaDespesasAdapter
from pipeline.transform.equipe import sintetizar_equipe

ADAPTADOR_SINTESE = "sintese"


@dataclass(frozen=True)
class PrioridadeAdaptadores:
    """cargo -> categoria -> adapters, most trusted first."""

    ordem: Mapping[Cargo, Mapping[Categoria, tuple[SourceAdapter, ...]]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        for por_categoria in self.ordem.values():
            for categoria, adaptadores in por_categoria.items():
                for adaptador in adaptadores:
                    if not isinstance(adaptador, SourceAdapter):
                        raise TypeError(f"{adaptador!r} nao implementa SourceAdapter")
                    if adaptador.categoria is not categoria:
                        raise ValueError(
                            f"{adaptador.name} serve {adaptador.categoria}, configurado em {categoria}"
                        )

    def adaptadores(self, cargo: Cargo, categoria: Categoria) -> tuple[SourceAdapter, ...]:
        return tuple(self.ordem.get(cargo, {}).get(categoria, ()))


def montar_prioridades(client: httpx.AsyncClient, config: PipelineConfig) -> PrioridadeAdaptadores:
    """Production adapter order for every branch.

    State and municipal branches have no expense or staff source yet; they
    always resolve to the synthesized placeholder.
    """
    urls = config.source_urls
    return PrioridadeAdaptadores(
        ordem={
            Cargo.DEPUTADO_FEDERAL: {
                Categoria.DESPESAS: (CamaraDespesasAdapter(client, urls.camara_api),),
                Categoria.EQUIPE: (
                    CamaraSecretariosAdapter(client, urls.camara_api),
                    CamaraFuncionariosCsvAdapter(config.funcionarios_csv),
                ),
            },
            Cargo.SENADOR: {
                Categoria.DESPESAS: (
                    CodanteDespesasAdapter(client, urls.codante_api, config.codante_ids),
                    SenadoTransparenciaDespesasAdapter(client, urls.senado_transparencia),
                ),
                Categoria.EQUIPE: (
                    SenadoFuncionariosAdapter(client, urls.senado_dados_abertos),
                    SenadoPessoalAdapter(client, urls.senado_transparencia),
                ),
            },
        }
    )


def placeholder(categoria: Categoria, politico: Politico) -> Payload:
    """Last-tier result when no adapter produced data."""
    registros = tuple(sintetizar_equipe(politico)) if categoria is Categoria.EQUIPE else ()
    return Payload(registros=registros, fonte=Fonte.SYNTHESIZED, adaptador=ADAPTADOR_SINTESE)


class Orquestrador:
    def __init__(self, prioridades: PrioridadeAdaptadores) -> None:
        self._prioridades = prioridades

    async def resolve(self, categoria: Categoria, politico: Politico, periodo: Periodo) -> Payload:
        """Return the first non-empty payload for the official, or a placeholder.

        Never raises.
        """
        for adaptador in self._prioridades.adaptadores(politico.cargo, categoria):
            try:
                resultado = await adaptador.fetch(politico, periodo)
            except Exception as err:  # noqa: BLE001
                resultado = Falha(adaptador.name, f"excecao nao tratada: {err!r}", AdapterError)

            if isinstance(resultado, Payload) and len(resultado) > 0:
                log(f"  {politico.id} {categoria}: {len(resultado)} registros de {resultado.adaptador}")
                return resultado
            if isinstance(resultado, Payload):
                resultado = Falha(adaptador.name, "payload vazio", NotFoundError)
            log(f"  {politico.id} {categoria}: {resultado}", nivel="WARN")

        log(f"  {politico.id} {categoria}: nenhuma fonte disponivel, usando dados sintetizados", nivel="WARN")
        return placeholder(categoria, politico)
