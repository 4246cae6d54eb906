# pipeline/models.py
#
# Canonical records shared by adapters, transforms and the scheduler.
#
# Design decisions:
#   - Frozen dataclasses for identities and raw records; summaries are frozen
#     too and built only through the transform functions, so derived fields
#     (percentual, folha_estimada) can never drift from the totals.
#   - Category and position labels stay plain strings. Sources disagree on
#     spelling, so a closed enum would reject real data.
#   - Money is float (BRL). Raw values that cannot be parsed are None on the
#     line item and count as zero in the totals.
#   - Every summary carries exactly one Fonte. FALLBACK and SYNTHESIZED mark
#     illustrative data and must never be shown as authoritative.
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import UTC, date, datetime
from enum import StrEnum
from typing import Any


class Cargo(StrEnum):
    DEPUTADO_FEDERAL = "deputado_federal"
    SENADOR = "senador"
    DEPUTADO_ESTADUAL = "deputado_estadual"
    PREFEITO = "prefeito"
    VEREADOR = "vereador"

    @property
    def esfera(self) -> str:
        """federal, estadual or municipal."""
        if self in (Cargo.DEPUTADO_FEDERAL, Cargo.SENADOR):
            return "federal"
        if self is Cargo.DEPUTADO_ESTADUAL:
            return "estadual"
        return "municipal"


class Categoria(StrEnum):
    DESPESAS = "despesas"
    EQUIPE = "equipe"


class Fonte(StrEnum):
    """Provenance tier, ordered from most to least trusted."""

    OFFICIAL_API = "official_api"
    ALTERNATE_API = "alternate_api"
    SCRAPED_PAGE = "scraped_page"
    STATIC_REFERENCE = "static_reference"
    FALLBACK = "fallback"
    SYNTHESIZED = "synthesized"

    @property
    def ilustrativa(self) -> bool:
        return self in (Fonte.FALLBACK, Fonte.SYNTHESIZED)


@dataclass(frozen=True)
class Politico:
    id: str
    external_id: str | None
    cargo: Cargo
    nome: str
    uf: str | None = None
    partido: str | None = None


@dataclass(frozen=True)
class Periodo:
    ano: int
    mes: int | None = None

    def __post_init__(self) -> None:
        if self.mes is not None and not 1 <= self.mes <= 12:
            raise ValueError(f"Mes invalido: {self.mes}")

    @classmethod
    def atual(cls) -> Periodo:
        return cls(ano=date.today().year)


@dataclass(frozen=True)
class DespesaItem:
    data: str | None
    fornecedor: str | None
    cnpj_cpf_fornecedor: str | None
    categoria: str | None
    valor_liquido: float | None
    documento: str | None
    mes: int | None = None


@dataclass(frozen=True)
class MembroEquipe:
    nome: str
    cargo: str
    salario_estimado: float
    fonte: Fonte
    data_admissao: str | None = None
    status: str = "active"
    codigo_cargo: str | None = None


@dataclass(frozen=True)
class TotalGrupo:
    total: float
    count: int


@dataclass(frozen=True)
class TotalCategoria:
    total: float
    count: int
    percentual: float


@dataclass(frozen=True)
class ResumoDespesas:
    total: float
    media_mensal: float
    categorias: dict[str, TotalCategoria]
    fornecedores: dict[str, TotalGrupo]
    meses: dict[int, TotalGrupo]
    qtd_transacoes: int
    fonte: Fonte
    atualizado_em: datetime

    def para_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "monthly_average": self.media_mensal,
            "categories": {
                rotulo: {"total": c.total, "count": c.count, "percentage_of_total": c.percentual}
                for rotulo, c in self.categorias.items()
            },
            "suppliers": {nome: asdict(g) for nome, g in self.fornecedores.items()},
            "months": {str(mes): asdict(g) for mes, g in self.meses.items()},
            "transaction_count": self.qtd_transacoes,
            "source": self.fonte.value,
            "last_updated": self.atualizado_em.isoformat(),
        }


@dataclass(frozen=True)
class ResumoEquipe:
    membros: tuple[MembroEquipe, ...]
    cargos: dict[str, int]
    folha_estimada: float
    ativos: int
    inativos: int
    fonte: Fonte
    atualizado_em: datetime = field(default_factory=lambda: datetime.now(tz=UTC))

    @property
    def total_funcionarios(self) -> int:
        return len(self.membros)

    def para_dict(self) -> dict[str, Any]:
        return {
            "total_staff": self.total_funcionarios,
            "estimated_total_payroll": self.folha_estimada,
            "positions": dict(self.cargos),
            "active": self.ativos,
            "inactive": self.inativos,
            "members": [
                {
                    "name": m.nome,
                    "position": m.cargo,
                    "position_code": m.codigo_cargo,
                    "estimated_salary": m.salario_estimado,
                    "hire_date": m.data_admissao or "unknown",
                    "status": m.status,
                    "source": m.fonte.value,
                }
                for m in self.membros
            ],
            "source": self.fonte.value,
            "last_updated": self.atualizado_em.isoformat(),
        }
