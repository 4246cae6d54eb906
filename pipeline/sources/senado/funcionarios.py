# pipeline/sources/senado/funcionarios.py
#
# Senado open-data API: office staff of one senator (funcionarios.json).
#
# Design decisions:
#   - The XML-to-JSON bridge of the Senado API returns a single object instead
#     of a one-element list when there is only one row; both are accepted.
#   - Field names vary between releases (NomeFuncionario / Nome, DescricaoCargo /
#     Cargo), so each is read from the first key present.
from __future__ import annotations

from typing import Any

import httpx

from pipeline.models import Categoria, Fonte, MembroEquipe, Periodo, Politico
from pipeline.sources.base import adapter_boundary, get_json
from pipeline.sources.errors import MalformedPayloadError, NotFoundError
from pipeline.transform.equipe import TABELA_SENADO, estimar_salario


def _primeiro(dado: dict[str, Any], *chaves: str) -> str | None:
    for chave in chaves:
        valor = dado.get(chave)
        if isinstance(valor, str) and valor.strip():
            return valor.strip()
    return None


def extrair_funcionarios(corpo: Any) -> list[dict[str, Any]]:
    if not isinstance(corpo, dict):
        raise MalformedPayloadError("resposta de funcionarios nao e um objeto")
    senador = corpo.get("FuncionariosSenador") or {}
    bloco = (senador.get("Funcionarios") or {}) if isinstance(senador, dict) else None
    if not isinstance(bloco, dict):
        raise MalformedPayloadError("bloco 'Funcionarios' nao e um objeto")
    linhas = bloco.get("Funcionario") or []
    if isinstance(linhas, dict):
        linhas = [linhas]
    if not isinstance(linhas, list) or not all(isinstance(linha, dict) for linha in linhas):
        raise MalformedPayloadError("linhas de 'Funcionario' fora do formato esperado")
    return linhas


class SenadoFuncionariosAdapter:
    name = "senado_funcionarios"
    categoria = Categoria.EQUIPE
    fonte = Fonte.OFFICIAL_API

    def __init__(self, client: httpx.AsyncClient, base_url: str) -> None:
        self._client = client
        self._base_url = base_url

    @adapter_boundary
    async def fetch(self, politico: Politico, periodo: Periodo) -> list[MembroEquipe]:
        if not politico.external_id:
            raise NotFoundError(f"{politico.nome} sem codigo do Senado")
        corpo = await get_json(
            self._client, f"{self._base_url}/senador/{politico.external_id}/funcionarios.json"
        )
        membros: list[MembroEquipe] = []
        for linha in extrair_funcionarios(corpo):
            nome = _primeiro(linha, "NomeFuncionario", "Nome")
            if not nome:
                continue
            cargo = _primeiro(linha, "DescricaoCargo", "Cargo", "Funcao") or "Função Comissionada"
            membros.append(
                MembroEquipe(
                    nome=nome,
                    cargo=cargo,
                    codigo_cargo=_primeiro(linha, "CodigoCargo", "Simbolo"),
                    salario_estimado=estimar_salario(cargo, TABELA_SENADO),
                    data_admissao=_primeiro(linha, "DataAdmissao", "DataInicio"),
                    status="inactive" if _primeiro(linha, "DataFim", "DataDesligamento") else "active",
                    fonte=self.fonte,
                )
            )
        return membros
