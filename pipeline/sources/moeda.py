# pipeline/sources/moeda.py
#
# Parsing of Brazilian-formatted money strings and loose numeric fields.
#
# Design decisions:
#   - Government pages print money as "1.234,56" (dot thousands, comma
#     decimals). parse_moeda_br is strict about that format and raises
#     ParseFailureError, because a scraped figure that does not match is a
#     sign the page layout changed.
#   - valor_ou_none is the lenient counterpart for JSON APIs, where values may
#     arrive as numbers, "1234.56", "1.234,56", "" or null. Anything it cannot
#     read becomes None and the aggregator counts it as zero.
from __future__ import annotations

import math
import re
from typing import Any

from pipeline.sources.errors import ParseFailureError

_MOEDA_BR = re.compile(r"^-?(?:\d{1,3}(?:\.\d{3})+|\d+),\d{2}$")


def parse_moeda_br(texto: str) -> float:
    """Parse '1.234,56' (optionally prefixed by 'R$') into 1234.56.

    Raises:
        ParseFailureError: if the text is not in Brazilian currency format.
    """
    limpo = texto.replace("R$", "").replace("\xa0", " ").strip()
    if not _MOEDA_BR.match(limpo):
        raise ParseFailureError(f"valor monetario invalido: {texto!r}")
    return float(limpo.replace(".", "").replace(",", "."))


def valor_ou_none(valor: Any) -> float | None:
    """Best-effort numeric read of an API money field."""
    if valor is None or isinstance(valor, bool):
        return None
    if isinstance(valor, int | float):
        return float(valor) if math.isfinite(valor) else None
    texto = str(valor).strip()
    if not texto:
        return None
    if "," in texto:
        try:
            return parse_moeda_br(texto)
        except ParseFailureError:
            return None
    try:
        numero = float(texto)
    except ValueError:
        return None
    return numero if math.isfinite(numero) else None
