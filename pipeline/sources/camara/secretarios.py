# pipeline/sources/camara/secretarios.py
#
# Câmara dos Deputados open-data API: office staff (secretários parlamentares).
#
# Design decisions:
#   - The endpoint lists names, positions and appointment dates but no pay,
#     so salaries come from the Câmara table in transform/equipe.py.
#   - A filled dataFim means the appointment ended: status "inactive".
#     Inactive rows stay in the roster; the summary counts them separately.
from __future__ import annotations

from typing import Any

import httpx

from pipeline.models import Categoria, Fonte, MembroEquipe, Periodo, Politico
from pipeline.sources.base import adapter_boundary, get_json
from pipeline.sources.errors import MalformedPayloadError, NotFoundError
from pipeline.transform.equipe import TABELA_CAMARA, estimar_salario


def normalizar_secretario(dado: dict[str, Any], fonte: Fonte) -> MembroEquipe:
    cargo = (dado.get("cargo") or "Secretário Parlamentar").strip()
    return MembroEquipe(
        nome=dado["nome"].strip(),
        cargo=cargo,
        salario_estimado=estimar_salario(cargo, TABELA_CAMARA),
        data_admissao=dado.get("dataInicio") or None,
        status="inactive" if dado.get("dataFim") else "active",
        fonte=fonte,
    )


class CamaraSecretariosAdapter:
    name = "camara_secretarios"
    categoria = Categoria.EQUIPE
    fonte = Fonte.OFFICIAL_API

    def __init__(self, client: httpx.AsyncClient, base_url: str) -> None:
        self._client = client
        self._base_url = base_url

    @adapter_boundary
    async def fetch(self, politico: Politico, periodo: Periodo) -> list[MembroEquipe]:
        if not politico.external_id:
            raise NotFoundError(f"{politico.nome} sem id da Câmara")
        corpo = await get_json(
            self._client, f"{self._base_url}/deputados/{politico.external_id}/secretarios"
        )
        dados = corpo.get("dados") if isinstance(corpo, dict) else None
        if not isinstance(dados, list):
            raise MalformedPayloadError("campo 'dados' ausente na resposta de secretarios")
        return [normalizar_secretario(d, self.fonte) for d in dados if d.get("nome")]
