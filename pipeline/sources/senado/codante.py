# pipeline/sources/senado/codante.py
#
# Codante senator-expenses mirror: CEAPS expenses of one senator.
#
# Design decisions:
#   - The mirror uses its own ids. The Senado code is mapped through the
#     configured id table first; senators missing from it are looked up in
#     the mirror's senators list by name, on `name` or `full_name`: an exact
#     case-insensitive match anywhere in the list wins, otherwise the first
#     case-insensitive substring match in either direction.
#   - A resolved id is cached on the adapter instance for the rest of the run,
#     so a batch that asks for several periods only lists senators once.
#   - The mirror answers per year only. A month filter is applied here on the
#     ISO date of each expense.
from __future__ import annotations

from typing import Any

import httpx

from pipeline.models import Categoria, DespesaItem, Fonte, Periodo, Politico
from pipeline.sources.base import adapter_boundary, get_json
from pipeline.sources.errors import MalformedPayloadError, NotFoundError
from pipeline.sources.moeda import valor_ou_none


def _mes_da_data(data: str | None) -> int | None:
    if not data or len(data) < 7 or not data[5:7].isdigit():
        return None
    return int(data[5:7])


def normalizar_despesa_codante(dado: dict[str, Any]) -> DespesaItem:
    data = dado.get("date")
    original_id = dado.get("original_id")
    return DespesaItem(
        data=data,
        fornecedor=dado.get("supplier"),
        cnpj_cpf_fornecedor=dado.get("supplier_document"),
        categoria=dado.get("expense_category"),
        valor_liquido=valor_ou_none(dado.get("amount")),
        documento=str(original_id) if original_id is not None else None,
        mes=_mes_da_data(data),
    )


def _dados(corpo: Any) -> list[dict[str, Any]]:
    dados = corpo.get("data") if isinstance(corpo, dict) else None
    if not isinstance(dados, list):
        raise MalformedPayloadError("campo 'data' ausente na resposta do Codante")
    return dados


def _nomes(senador: dict[str, Any]) -> list[str]:
    valores = (senador.get(campo) for campo in ("name", "full_name"))
    return [valor.casefold() for valor in valores if valor]


def _nome_exato(procurado: str, senador: dict[str, Any]) -> bool:
    return procurado.casefold() in _nomes(senador)


def _nome_confere(procurado: str, senador: dict[str, Any]) -> bool:
    alvo = procurado.casefold()
    return any(alvo in valor or valor in alvo for valor in _nomes(senador))


class CodanteDespesasAdapter:
    name = "codante_despesas"
    categoria = Categoria.DESPESAS
    fonte = Fonte.ALTERNATE_API

    def __init__(self, client: httpx.AsyncClient, base_url: str, ids: dict[str, int]) -> None:
        self._client = client
        self._base_url = base_url
        self._ids: dict[str, int] = dict(ids)

    async def resolver_id(self, politico: Politico) -> int:
        """Codante id for the senator.

        Raises:
            NotFoundError: if neither the id table nor the name search finds it.
        """
        if politico.external_id and politico.external_id in self._ids:
            return self._ids[politico.external_id]

        corpo = await get_json(self._client, f"{self._base_url}/senators")
        senadores = _dados(corpo)
        for criterio in (_nome_exato, _nome_confere):
            for senador in senadores:
                if criterio(politico.nome, senador):
                    codante_id = int(senador["id"])
                    if politico.external_id:
                        self._ids[politico.external_id] = codante_id
                    return codante_id
        raise NotFoundError(f"senador {politico.nome!r} nao encontrado no Codante")

    @adapter_boundary
    async def fetch(self, politico: Politico, periodo: Periodo) -> list[DespesaItem]:
        codante_id = await self.resolver_id(politico)
        corpo = await get_json(
            self._client,
            f"{self._base_url}/senators/{codante_id}/expenses",
            params={"year": periodo.ano},
        )
        itens = [normalizar_despesa_codante(d) for d in _dados(corpo)]
        if periodo.mes is not None:
            itens = [i for i in itens if i.mes == periodo.mes]
        return itens
