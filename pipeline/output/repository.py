# pipeline/output/repository.py
#
# Contract between the collector and the record store.
#
# Design decisions:
#   - Three calls only: list tracked officials, read one, overwrite its
#     summaries. The collector never creates or deletes officials.
#   - update() takes the JSON-ready dict form of the summaries so the store
#     does not depend on the dataclasses in pipeline.models.
from __future__ import annotations

from datetime import datetime
from typing import Any, Protocol

from pipeline.models import Politico


class PoliticoNaoEncontrado(LookupError):
    """No official with the given id in the record store."""

    def __init__(self, politico_id: str) -> None:
        super().__init__(f"politico {politico_id!r} nao encontrado")
        self.politico_id = politico_id


class PoliticoRepository(Protocol):
    def listar(self) -> list[Politico]: ...

    def get(self, politico_id: str) -> Politico | None: ...

    def update(
        self,
        politico_id: str,
        *,
        despesas: dict[str, Any],
        equipe: dict[str, Any],
        atualizado_em: datetime,
    ) -> None: ...
