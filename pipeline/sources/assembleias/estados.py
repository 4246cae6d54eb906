# pipeline/sources/assembleias/estados.py
#
# State-deputy directories for every UF.
#
# Design decisions:
#   - SP has a real integration (alesp.py). RJ has none: ALERJ publishes no
#     machine-readable roster, so its directory is the reference list only.
#   - Other UFs have no integration and no reference list. They get numbered
#     placeholder seats ("Deputado Estadual 1 de BA") tagged SYNTHESIZED, with
#     parties assigned round-robin so the output is reproducible.
#   - diretorio_estadual is the single dispatch point used by the CLI.
from __future__ import annotations

import httpx

from pipeline.models import Cargo, Fonte, Politico
from pipeline.sources.assembleias.alesp import AlespDiretorio
from pipeline.sources.diretorio import Diretorio, Referencia, roster_de_referencia

REFERENCIA_ALERJ = (
    Referencia("André Ceciliano", "PT"),
    Referencia("Carlos Minc", "PSB"),
    Referencia("Chico Machado", "PSD"),
    Referencia("Flávio Serafini", "PSOL"),
    Referencia("Gustavo Tutuca", "MDB"),
    Referencia("Jair Bittencourt", "PP"),
    Referencia("Luiz Paulo", "CIDADANIA"),
    Referencia("Martha Rocha", "PDT"),
    Referencia("Rodrigo Bacellar", "UNIÃO"),
    Referencia("Tia Ju", "REPUBLICANOS"),
)

_PARTIDOS_GENERICOS = ("PT", "PSDB", "MDB", "PL", "PSL", "PDT", "PSB", "REPUBLICANOS", "DEM", "PSOL")
_CADEIRAS_GENERICAS = 10


class AlerjDiretorio:
    name = "alerj"

    async def listar(self, uf: str | None = None, municipio: str | None = None) -> Diretorio:
        return roster_de_referencia(
            REFERENCIA_ALERJ,
            cargo=Cargo.DEPUTADO_ESTADUAL,
            prefixo_id="alerj_real",
            origem=self.name,
            uf="RJ",
        )


class AssembleiaGenericaDiretorio:
    name = "assembleia_estadual"

    async def listar(self, uf: str | None = None, municipio: str | None = None) -> Diretorio:
        sigla = (uf or "").upper()
        if not sigla:
            return Diretorio(politicos=(), fonte=Fonte.SYNTHESIZED, origem=self.name)
        politicos = tuple(
            Politico(
                id=f"{sigla.lower()}_dep_{i:03d}",
                external_id=f"{sigla.lower()}_dep_{i:03d}",
                cargo=Cargo.DEPUTADO_ESTADUAL,
                nome=f"Deputado Estadual {i} de {sigla}",
                uf=sigla,
                partido=_PARTIDOS_GENERICOS[(i - 1) % len(_PARTIDOS_GENERICOS)],
            )
            for i in range(1, _CADEIRAS_GENERICAS + 1)
        )
        return Diretorio(politicos=politicos, fonte=Fonte.SYNTHESIZED, origem=self.name)


async def diretorio_estadual(client: httpx.AsyncClient, alesp_url: str, uf: str) -> Diretorio:
    """State deputies of one UF, from the best directory available for it."""
    sigla = uf.upper()
    if sigla == "SP":
        return await AlespDiretorio(client, alesp_url).listar(sigla)
    if sigla == "RJ":
        return await AlerjDiretorio().listar(sigla)
    return await AssembleiaGenericaDiretorio().listar(sigla)
