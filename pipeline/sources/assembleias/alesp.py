# pipeline/sources/assembleias/alesp.py
#
# ALESP (Assembleia Legislativa de São Paulo) deputy directory.
#
# Design decisions:
#   - ALESP has moved its open-data JSON several times. The known locations
#     are tried in order; the first that returns a list (bare, or under a
#     "deputados" key) wins.
#   - When none answers, the per-party endpoint is tried for the largest
#     parties, with a short pause between calls because that endpoint starts
#     refusing bursts. Parties that answer are merged.
#   - Every failed attempt is logged and swallowed: this is a fallback cascade,
#     not an error. The final tier is the fixed reference roster.
#   - Field names differ between the JSON dumps (IdDeputado / id,
#     NomeDeputado / nome); normalizar_deputado accepts both.
from __future__ import annotations

import asyncio
from typing import Any

import httpx

from pipeline.log import log
from pipeline.models import Cargo, Fonte, Politico
from pipeline.sources.base import get_json
from pipeline.sources.diretorio import Diretorio, Referencia, roster_de_referencia
from pipeline.sources.errors import AdapterError

CAMINHOS_JSON = (
    "/repositorio/deputados/deputados.json",
    "/repositorio/dadosAbertos/deputados.json",
    "/dados-abertos/deputados.json",
)
PARTIDOS_PRINCIPAIS = ("PT", "PSDB", "PL")

REFERENCIA_ALESP = (
    Referencia("Arthur do Val", "PODE"),
    Referencia("Delegado Olim", "PP"),
    Referencia("Erica Malunguinho", "PSOL"),
    Referencia("Fernando Cury", "CIDADANIA"),
    Referencia("Gilmaci Santos", "REPUBLICANOS"),
    Referencia("Janaina Paschoal", "PRTB"),
    Referencia("Leci Brandão", "PCdoB"),
    Referencia("Marcos Zerbini", "PSDB"),
    Referencia("Monica Seixas", "PSOL"),
    Referencia("Rodrigo Gambale", "PODE"),
)


def normalizar_deputado(dado: dict[str, Any], posicao: int) -> Politico:
    external_id = str(dado.get("IdDeputado") or dado.get("id") or f"alesp_{posicao}")
    nome = dado.get("NomeDeputado") or dado.get("nome") or dado.get("name") or f"Deputado {posicao}"
    partido = dado.get("Partido") or dado.get("partido") or dado.get("party") or "INDEFINIDO"
    return Politico(
        id=f"alesp_{external_id}",
        external_id=external_id,
        cargo=Cargo.DEPUTADO_ESTADUAL,
        nome=str(nome).strip(),
        uf="SP",
        partido=str(partido).strip(),
    )


def _lista_de_deputados(corpo: Any) -> list[dict[str, Any]] | None:
    if isinstance(corpo, list):
        return corpo
    if isinstance(corpo, dict) and isinstance(corpo.get("deputados"), list):
        return corpo["deputados"]
    return None


class AlespDiretorio:
    name = "alesp"

    def __init__(self, client: httpx.AsyncClient, base_url: str, pausa: float = 0.5) -> None:
        self._client = client
        self._base_url = base_url
        self._pausa = pausa

    async def listar(self, uf: str | None = None, municipio: str | None = None) -> Diretorio:
        for caminho in CAMINHOS_JSON:
            deputados = await self._tentar(f"{self._base_url}{caminho}")
            if deputados:
                log(f"  alesp: {len(deputados)} deputados em {caminho}")
                return self._diretorio(deputados)

        por_partido: list[dict[str, Any]] = []
        for partido in PARTIDOS_PRINCIPAIS:
            deputados = await self._tentar(f"{self._base_url}/dados-abertos/deputado/{partido}")
            por_partido.extend(deputados or [])
            await asyncio.sleep(self._pausa)
        if por_partido:
            log(f"  alesp: {len(por_partido)} deputados via endpoint por partido")
            return self._diretorio(por_partido)

        log("  alesp: fontes indisponiveis, usando lista de referencia", nivel="WARN")
        return roster_de_referencia(
            REFERENCIA_ALESP,
            cargo=Cargo.DEPUTADO_ESTADUAL,
            prefixo_id="alesp_real",
            origem=self.name,
            uf="SP",
        )

    async def _tentar(self, url: str) -> list[dict[str, Any]] | None:
        try:
            corpo = await get_json(self._client, url)
        except (AdapterError, httpx.HTTPError) as err:
            log(f"  alesp: {url} falhou ({err})", nivel="WARN")
            return None
        return _lista_de_deputados(corpo)

    def _diretorio(self, deputados: list[dict[str, Any]]) -> Diretorio:
        politicos = tuple(normalizar_deputado(d, i) for i, d in enumerate(deputados, start=1))
        return Diretorio(politicos=politicos, fonte=Fonte.OFFICIAL_API, origem=self.name)
