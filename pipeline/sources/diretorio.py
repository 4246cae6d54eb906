# pipeline/sources/diretorio.py
#
# Directory adapters: who holds an office, for branches without a usable
# registry of their own (state assemblies, city halls, municipal councils).
#
# Design decisions:
#   - A directory answers "which officials exist", not "what did they spend",
#     so it has its own small contract instead of SourceAdapter.
#   - listar() never raises and never returns an empty roster for an unfiltered
#     query. When the real source is down the roster comes from a fixed
#     reference list of real names and parties, and the whole Diretorio is
#     tagged Fonte.FALLBACK. Real and reference rows are never mixed.
#   - Reference ids carry a recognisable prefix ("alesp_real_001") so a
#     downstream reader can tell them apart even without the tag.
from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from pipeline.models import Cargo, Fonte, Politico


@dataclass(frozen=True)
class Referencia:
    nome: str
    partido: str
    municipio: str | None = None
    uf: str | None = None


@dataclass(frozen=True)
class Diretorio:
    politicos: tuple[Politico, ...]
    fonte: Fonte
    origem: str

    def __len__(self) -> int:
        return len(self.politicos)


@runtime_checkable
class DirectoryAdapter(Protocol):
    name: str

    async def listar(self, uf: str | None = None, municipio: str | None = None) -> Diretorio:
        ...


def roster_de_referencia(
    referencias: Sequence[Referencia],
    *,
    cargo: Cargo,
    prefixo_id: str,
    origem: str,
    uf: str | None = None,
    fonte: Fonte = Fonte.FALLBACK,
    filtro: Callable[[Referencia], bool] | None = None,
) -> Diretorio:
    """Build a clearly tagged roster from a fixed reference list.

    Ids are numbered over the full list before filtro is applied, so an
    official keeps the same id whatever filter a caller passes.
    """
    politicos = tuple(
        Politico(
            id=f"{prefixo_id}_{i:03d}",
            external_id=f"{prefixo_id}_{i:03d}",
            cargo=cargo,
            nome=ref.nome,
            uf=ref.uf or uf,
            partido=ref.partido,
        )
        for i, ref in enumerate(referencias, start=1)
        if filtro is None or filtro(ref)
    )
    return Diretorio(politicos=politicos, fonte=fonte, origem=origem)
