# pipeline/transform/equipe.py
#
# Staff payroll estimation, roster synthesis and the office-holder pay reference.
#
# Design decisions:
#   - Sources publish who works in an office but not what they earn. Salaries
#     are therefore estimated from static position tables: one for the Senado
#     (reference pay per commissioned role) and one for the Câmara (midpoint
#     of the official pay band of each role, rounded to whole reais).
#   - estimar_salario matches case-insensitively: exact key first, then a
#     substring match in either direction in table order, then the table's
#     default. Table order matters for the substring step, so more specific
#     keys come first.
#   - sintetizar_equipe is the last fallback tier. It is deterministic: the
#     random generator is seeded with the official's id, so re-running the
#     batch does not reshuffle an office that has no real data. Every
#     synthesized member carries Fonte.SYNTHESIZED.
#   - remuneracao_para covers the office holder, not the staff. Only the two
#     federal houses publish a fixed subsidy and allowance, so other offices
#     get None.
#   - resumir_equipe is pure: no IO, no global state.
#
# Invariants:
#   - ResumoEquipe.total_funcionarios == len(membros).
#   - ResumoEquipe.folha_estimada == sum(m.salario_estimado for m in membros).
from __future__ import annotations

import random
from collections import Counter
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date
from typing import Any

from pipeline.models import Cargo, Fonte, MembroEquipe, Politico, ResumoEquipe


@dataclass(frozen=True)
class TabelaSalarial:
    valores: Mapping[str, float]
    padrao: float


TABELA_SENADO = TabelaSalarial(
    valores={
        "ASSESSOR PARLAMENTAR": 17319.31,
        "SECRETÁRIO PARLAMENTAR": 13884.28,
        "ASSISTENTE PARLAMENTAR SÊNIOR": 13339.82,
        "ASSISTENTE PARLAMENTAR PLENO": 11350.08,
        "ASSISTENTE PARLAMENTAR INTERMEDIÁRIO": 10763.57,
        "ASSISTENTE PARLAMENTAR JÚNIOR": 9360.30,
        "AUXILIAR PARLAMENTAR SÊNIOR": 9203.20,
        "AUXILIAR PARLAMENTAR PLENO": 8456.78,
        "AUXILIAR PARLAMENTAR INTERMEDIÁRIO": 7800.00,
        "AUXILIAR PARLAMENTAR JÚNIOR": 7234.56,
        "AJUDANTE PARLAMENTAR SÊNIOR": 6500.00,
        "AJUDANTE PARLAMENTAR PLENO": 6000.00,
        "AJUDANTE PARLAMENTAR INTERMEDIÁRIO": 5500.00,
        "AJUDANTE PARLAMENTAR JÚNIOR": 5000.00,
        "SUBCHEFE DE GABINETE": 15000.00,
        "CHEFE DE GABINETE": 18000.00,
        "ASSISTENTE TÉCNICO": 12000.00,
        "MOTORISTA": 4500.00,
        "FUNÇÃO COMISSIONADA": 10000.00,
    },
    padrao=8000.00,
)

# Câmara pay bands (min, max); the estimate is the midpoint in whole reais.
_FAIXAS_CAMARA: dict[str, tuple[float, float]] = {
    "Secretário Parlamentar": (1584.10, 9359.94),
    "Assessor Parlamentar": (2500.00, 8500.00),
    "Chefe de Gabinete": (8000.00, 12000.00),
    "Assessor Técnico": (3000.00, 7000.00),
    "Assistente": (1584.10, 4000.00),
}


def _ponto_medio(minimo: float, maximo: float) -> float:
    return float(round((minimo + maximo) / 2))


TABELA_CAMARA = TabelaSalarial(
    valores={cargo: _ponto_medio(lo, hi) for cargo, (lo, hi) in _FAIXAS_CAMARA.items()},
    padrao=_ponto_medio(*_FAIXAS_CAMARA["Secretário Parlamentar"]),
)


def tabela_para(cargo: Cargo) -> TabelaSalarial:
    """Salary table used to estimate pay for an official's office."""
    return TABELA_SENADO if cargo is Cargo.SENADOR else TABELA_CAMARA


def estimar_salario(cargo: str | None, tabela: TabelaSalarial = TABELA_SENADO) -> float:
    """Estimate the monthly salary of a position from a static table.

    Args:
        cargo:  Free-text position label as published by the source.
        tabela: Position -> reference salary table.

    Returns:
        Reference salary for the exact match, else for the first substring
        match, else tabela.padrao.
    """
    if not cargo or not cargo.strip():
        return tabela.padrao
    alvo = cargo.strip().casefold()

    normalizada = {chave.casefold(): valor for chave, valor in tabela.valores.items()}
    if alvo in normalizada:
        return normalizada[alvo]

    for chave, valor in normalizada.items():
        if chave in alvo or alvo in chave:
            return valor
    return tabela.padrao


# ---------------------------------------------------------------------------
# Office-holder pay
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RemuneracaoParlamentar:
    """Published monthly pay of a federal legislator (the office holder, not staff).

    total_mensal_potencial is the figure published by the house as the monthly
    ceiling; it is stored as published, not recomputed from the parts.
    """

    subsidio: float
    verba_gabinete: float
    auxilios: Mapping[str, float]
    total_mensal_potencial: float
    data_referencia: str = "2024-01-01"
    fonte: Fonte = Fonte.STATIC_REFERENCE

    def para_dict(self) -> dict[str, Any]:
        return {
            "subsidy": self.subsidio,
            "office_allowance": self.verba_gabinete,
            "allowances": dict(self.auxilios),
            "total_monthly_potential": self.total_mensal_potencial,
            "currency": "BRL",
            "reference_date": self.data_referencia,
            "source": self.fonte.value,
        }


_AUXILIOS_FEDERAIS = {
    "auxilio_moradia": 4253.00,
    "auxilio_telefone_anual": 7200.00,
    "auxilio_combustivel": 6000.00,
}

REMUNERACAO_PARLAMENTAR: dict[Cargo, RemuneracaoParlamentar] = {
    Cargo.DEPUTADO_FEDERAL: RemuneracaoParlamentar(
        subsidio=33763.00,
        verba_gabinete=106000.00,
        auxilios=_AUXILIOS_FEDERAIS,
        total_mensal_potencial=149016.00,
    ),
    Cargo.SENADOR: RemuneracaoParlamentar(
        subsidio=33763.00,
        verba_gabinete=120000.00,
        auxilios=_AUXILIOS_FEDERAIS,
        total_mensal_potencial=163016.00,
    ),
}


def remuneracao_para(cargo: Cargo) -> RemuneracaoParlamentar | None:
    """Reference pay for the office, or None where no figure is published."""
    return REMUNERACAO_PARLAMENTAR.get(cargo)


# ---------------------------------------------------------------------------
# Synthesis
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CargoReferencia:
    cargo: str
    salario: float
    codigo: str | None = None


@dataclass(frozen=True)
class ReferenciaSintese:
    """Reference data for one kind of office.

    faixa is the inclusive head-count band. When sufixar_nomes is True the
    name pool is smaller than the band and each synthetic name gets a letter
    suffix so rows stay distinguishable.
    """

    cargos: tuple[CargoReferencia, ...]
    nomes: tuple[str, ...]
    faixa: tuple[int, int]
    sufixar_nomes: bool = False


REFERENCIA_SENADO = ReferenciaSintese(
    cargos=(
        CargoReferencia("Assessor Parlamentar", 17319.31, "SF02"),
        CargoReferencia("Secretário Parlamentar", 13884.28, "SF01"),
        CargoReferencia("Assistente Parlamentar Sênior", 13339.82, "AP12"),
        CargoReferencia("Assistente Parlamentar Pleno", 11350.08, "AP11"),
        CargoReferencia("Assistente Parlamentar Intermediário", 10763.57, "AP10"),
        CargoReferencia("Assistente Parlamentar Júnior", 9360.30, "AP09"),
    ),
    nomes=(
        "Ana Carolina Silva Santos", "Carlos Eduardo Oliveira Lima", "Maria Fernanda Costa Pereira",
        "João Pedro Almeida Souza", "Luciana Mendes Rodrigues", "Roberto Carlos Santos Silva",
        "Patricia Ferreira Alves", "Fernando José Pereira Costa", "Juliana Santos Oliveira",
        "Marcos Antonio Lima Silva", "Camila Rodrigues Ferreira", "Ricardo Alves Mendes",
        "Beatriz Costa Santos", "André Luiz Oliveira Pereira", "Gabriela Silva Almeida",
        "Rafael Santos Costa", "Mariana Ferreira Lima", "Diego Pereira Santos",
        "Larissa Alves Rodrigues", "Thiago Costa Oliveira", "Vanessa Santos Silva",
        "Leonardo Lima Ferreira", "Priscila Rodrigues Costa", "Gustavo Silva Santos",
    ),
    faixa=(10, 24),
)

REFERENCIA_CAMARA = ReferenciaSintese(
    cargos=(
        CargoReferencia("Secretário Parlamentar Nível 12", 9359.94),
        CargoReferencia("Secretário Parlamentar Nível 10", 7500.00),
        CargoReferencia("Secretário Parlamentar Nível 8", 5800.00),
        CargoReferencia("Secretário Parlamentar Nível 6", 4200.00),
        CargoReferencia("Secretário Parlamentar Nível 4", 3000.00),
        CargoReferencia("Secretário Parlamentar Nível 1", 1584.10),
    ),
    nomes=(
        "Ana Carolina Silva", "Carlos Eduardo Santos", "Maria Fernanda Lima",
        "João Pedro Oliveira", "Luciana Almeida Costa", "Roberto Carlos Souza",
        "Patricia Mendes Rocha", "Fernando Rodrigues", "Juliana Pereira Santos",
        "Marcos Antonio Silva", "Camila Ferreira", "Ricardo Alves",
    ),
    faixa=(8, 17),
    sufixar_nomes=True,
)


def referencia_para(cargo: Cargo) -> ReferenciaSintese:
    # State and municipal offices have no published structure; they reuse the
    # Câmara band, the smallest of the two.
    return REFERENCIA_SENADO if cargo is Cargo.SENADOR else REFERENCIA_CAMARA


def sintetizar_equipe(politico: Politico, referencia: ReferenciaSintese | None = None) -> list[MembroEquipe]:
    """Generate a plausible, clearly tagged roster for an office with no real data.

    The same politico.id always yields the same roster.
    """
    ref = referencia or referencia_para(politico.cargo)
    rng = random.Random(f"equipe:{politico.id}")
    minimo, maximo = ref.faixa
    quantidade = rng.randint(minimo, maximo)

    if ref.sufixar_nomes:
        nomes = [f"{rng.choice(ref.nomes)} {chr(65 + i)}" for i in range(quantidade)]
    else:
        # Unique names while the pool lasts, then repeats.
        nomes = rng.sample(ref.nomes, k=min(quantidade, len(ref.nomes)))
        nomes += [rng.choice(ref.nomes) for _ in range(quantidade - len(nomes))]

    membros: list[MembroEquipe] = []
    for nome in nomes:
        posicao = rng.choice(ref.cargos)
        admissao = date(2023, rng.randint(1, 12), rng.randint(1, 28))
        membros.append(
            MembroEquipe(
                nome=nome,
                cargo=posicao.cargo,
                codigo_cargo=posicao.codigo,
                salario_estimado=posicao.salario,
                data_admissao=admissao.isoformat(),
                status="active",
                fonte=Fonte.SYNTHESIZED,
            )
        )
    return membros


# ---------------------------------------------------------------------------
# Summary
# ---------------------------------------------------------------------------


def resumir_equipe(membros: Iterable[MembroEquipe], fonte: Fonte) -> ResumoEquipe:
    """Aggregate a roster into headcount, payroll and position counts.

    Args:
        membros: Roster from any tier. May be empty.
        fonte:   Provenance of the roster as a whole.
    """
    lista = tuple(membros)
    cargos = Counter(m.cargo or "Não especificado" for m in lista)
    ativos = sum(1 for m in lista if m.status == "active")
    return ResumoEquipe(
        membros=lista,
        cargos=dict(cargos),
        folha_estimada=sum(m.salario_estimado for m in lista),
        ativos=ativos,
        inativos=len(lista) - ativos,
        fonte=fonte,
    )
