# pipeline/transform/rotulos.py
#
# Canonical form of free-text labels (expense categories, supplier names).
#
# Design decisions:
#   - Sources spell the same category differently ("COMBUSTÍVEIS E
#     LUBRIFICANTES." vs "Combustíveis e lubrificantes"). Only whitespace and
#     trailing punctuation are normalized; case and accents are kept because
#     the labels are displayed as-is.
#   - Missing labels get a fixed placeholder so they group together instead of
#     producing a None key.
#   - Applied by the per-official update task before aggregation. The
#     aggregator itself does not rewrite labels.
from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import replace

from pipeline.models import DespesaItem

ROTULO_SEM_CATEGORIA = "Outros"
ROTULO_SEM_FORNECEDOR = "Não informado"

_ESPACOS = re.compile(r"\s+")
_PONTUACAO_FINAL = re.compile(r"[\s\.,;:\-]+$")


def canonicalizar_rotulo(rotulo: str | None, padrao: str = ROTULO_SEM_CATEGORIA) -> str:
    """Trim, collapse whitespace and drop trailing punctuation.

    >>> canonicalizar_rotulo("  COMBUSTÍVEIS  E LUBRIFICANTES. ")
    'COMBUSTÍVEIS E LUBRIFICANTES'
    """
    if rotulo is None:
        return padrao
    limpo = _PONTUACAO_FINAL.sub("", _ESPACOS.sub(" ", rotulo).strip())
    return limpo or padrao


def canonicalizar_itens(itens: Iterable[DespesaItem]) -> list[DespesaItem]:
    return [
        replace(
            item,
            categoria=canonicalizar_rotulo(item.categoria),
            fornecedor=canonicalizar_rotulo(item.fornecedor, ROTULO_SEM_FORNECEDOR),
        )
        for item in itens
    ]
