# pipeline/sources/camara/despesas.py
#
# Câmara dos Deputados open-data API: quota expenses of one deputy.
#
# Design decisions:
#   - Queries one calendar year, optionally one month, ordered by document
#     date descending (ordem=DESC, ordenarPor=dataDocumento) so the newest
#     receipts come first when a page limit cuts the listing short.
#   - The API paginates with a "next" entry in `links`. Pages are followed
#     until it disappears or _MAX_PAGINAS is hit.
#   - valorLiquido is the amount actually reimbursed. When it is missing the
#     gross valorDocumento is used instead; when both are unreadable the item
#     keeps valor_liquido=None and the aggregator counts it as zero.
#   - Field names are normalized here; nothing downstream sees Câmara keys.
from __future__ import annotations

from typing import Any

import httpx

from pipeline.models import Categoria, DespesaItem, Fonte, Periodo, Politico
from pipeline.sources.base import adapter_boundary, get_json
from pipeline.sources.errors import MalformedPayloadError, NotFoundError
from pipeline.sources.moeda import valor_ou_none

_ITENS_POR_PAGINA = 100
_MAX_PAGINAS = 30


def normalizar_despesa(dado: dict[str, Any]) -> DespesaItem:
    """Map one Câmara `dados` entry to a DespesaItem."""
    valor = valor_ou_none(dado.get("valorLiquido"))
    if valor is None:
        valor = valor_ou_none(dado.get("valorDocumento"))
    documento = dado.get("numDocumento") or dado.get("codDocumento")
    mes = dado.get("mes")
    return DespesaItem(
        data=dado.get("dataDocumento"),
        fornecedor=dado.get("nomeFornecedor"),
        cnpj_cpf_fornecedor=dado.get("cnpjCpfFornecedor"),
        categoria=dado.get("tipoDespesa"),
        valor_liquido=valor,
        documento=str(documento) if documento not in (None, "") else None,
        mes=int(mes) if mes not in (None, "") else None,
    )


def _proxima_pagina(corpo: dict[str, Any]) -> str | None:
    for link in corpo.get("links") or []:
        if link.get("rel") == "next":
            return link.get("href")
    return None


class CamaraDespesasAdapter:
    name = "camara_despesas"
    categoria = Categoria.DESPESAS
    fonte = Fonte.OFFICIAL_API

    def __init__(self, client: httpx.AsyncClient, base_url: str) -> None:
        self._client = client
        self._base_url = base_url

    @adapter_boundary
    async def fetch(self, politico: Politico, periodo: Periodo) -> list[DespesaItem]:
        if not politico.external_id:
            raise NotFoundError(f"{politico.nome} sem id da Câmara")

        url: str | None = f"{self._base_url}/deputados/{politico.external_id}/despesas"
        params: dict[str, Any] | None = {
            "ano": periodo.ano,
            "ordem": "DESC",
            "ordenarPor": "dataDocumento",
            "itens": _ITENS_POR_PAGINA,
        }
        if periodo.mes is not None:
            params["mes"] = periodo.mes

        itens: list[DespesaItem] = []
        paginas = 0
        while url and paginas < _MAX_PAGINAS:
            corpo = await get_json(self._client, url, params=params)
            dados = corpo.get("dados") if isinstance(corpo, dict) else None
            if not isinstance(dados, list):
                raise MalformedPayloadError("campo 'dados' ausente na resposta de despesas")
            itens.extend(normalizar_despesa(d) for d in dados)
            # The next href already carries every query parameter.
            url, params = _proxima_pagina(corpo), None
            paginas += 1
        return itens
