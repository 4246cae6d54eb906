# pipeline/sources/tse/municipios.py
#
# Municipal directories: mayors (TSE election results) and city councilors.
#
# Design decisions:
#   - The TSE publishes results only as bulk CSV dumps per election, with no
#     per-city query. Until that dump is ingested, mayors come from a
#     reference list of state-capital mayors, tagged FALLBACK.
#   - Councils have no common registry at all. The three largest cities have
#     reference lists; any other city gets a small generic roster tagged
#     SYNTHESIZED, since those names are not real officials.
#   - Filters are case-insensitive and the city filter matches by substring.
#     Accents are not folded: "Sao Paulo" returns an empty roster.
from __future__ import annotations

import re

from pipeline.models import Cargo, Fonte
from pipeline.sources.diretorio import Diretorio, Referencia, roster_de_referencia

REFERENCIA_PREFEITOS = (
    Referencia("Ricardo Nunes", "MDB", "São Paulo", "SP"),
    Referencia("Eduardo Paes", "PSD", "Rio de Janeiro", "RJ"),
    Referencia("Fuad Noman", "PSD", "Belo Horizonte", "MG"),
    Referencia("João Campos", "PSB", "Recife", "PE"),
    Referencia("Bruno Reis", "UNIÃO", "Salvador", "BA"),
    Referencia("José Sarto", "PDT", "Fortaleza", "CE"),
    Referencia("Arthur Virgílio Neto", "PSDB", "Manaus", "AM"),
    Referencia("Edmilson Rodrigues", "PSOL", "Belém", "PA"),
    Referencia("Cícero Lucena", "PP", "João Pessoa", "PB"),
    Referencia("Axel Grael", "PDT", "Niterói", "RJ"),
    Referencia("Sebastião Melo", "MDB", "Porto Alegre", "RS"),
    Referencia("Rafael Greca", "DEM", "Curitiba", "PR"),
    Referencia("Topázio Neto", "PSD", "Florianópolis", "SC"),
    Referencia("Emanuel Pinheiro", "MDB", "Cuiabá", "MT"),
    Referencia("Adriane Lopes", "PP", "Campo Grande", "MS"),
)

REFERENCIA_VEREADORES: dict[str, tuple[Referencia, ...]] = {
    "São Paulo": (
        Referencia("Eduardo Tuma", "PSDB"),
        Referencia("Erika Hilton", "PSOL"),
        Referencia("Gilberto Natalini", "PV"),
        Referencia("Janaína Lima", "NOVO"),
        Referencia("Luana Alves", "PSOL"),
        Referencia("Milton Leite", "DEM"),
        Referencia("Rodrigo Goulart", "PSD"),
        Referencia("Rubinho Nunes", "UNIÃO"),
        Referencia("Sâmia Bomfim", "PSOL"),
        Referencia("Toninho Vespoli", "PSOL"),
    ),
    "Rio de Janeiro": (
        Referencia("Carlo Caiado", "DEM"),
        Referencia("Chico Alencar", "PSOL"),
        Referencia("Dr. Jairinho", "SOLIDARIEDADE"),
        Referencia("Marielle Franco", "PSOL"),
        Referencia("Paulo Pinheiro", "PSOL"),
        Referencia("Reimont", "PT"),
        Referencia("Rosa Fernandes", "PSC"),
        Referencia("Tarcísio Motta", "PSOL"),
        Referencia("Teresa Bergher", "CIDADANIA"),
        Referencia("William Siri", "PSOL"),
    ),
    "Belo Horizonte": (
        Referencia("Áurea Carolina", "PSOL"),
        Referencia("Bella Gonçalves", "PSOL"),
        Referencia("Cida Falabella", "PSOL"),
        Referencia("Duda Salabert", "PDT"),
        Referencia("Gabriel Azevedo", "MDB"),
        Referencia("Henrique Braga", "PSDB"),
        Referencia("Jair di Gregório", "PP"),
        Referencia("Marcela Trópia", "NOVO"),
        Referencia("Pedro Patrus", "PT"),
        Referencia("Professora Marli", "PP"),
    ),
}

_VEREADORES_GENERICOS = (
    Referencia("João Silva", "PSDB"),
    Referencia("Maria Santos", "PT"),
    Referencia("Pedro Oliveira", "MDB"),
    Referencia("Ana Costa", "PSOL"),
    Referencia("Carlos Ferreira", "PP"),
)


def _slug(texto: str) -> str:
    return re.sub(r"\s+", "_", texto.strip().lower())


class TsePrefeitosDiretorio:
    name = "tse_prefeitos"

    async def listar(self, uf: str | None = None, municipio: str | None = None) -> Diretorio:
        sigla = uf.upper() if uf else None
        cidade = municipio.casefold() if municipio else None

        def _confere(ref: Referencia) -> bool:
            if sigla and ref.uf != sigla:
                return False
            return not cidade or cidade in (ref.municipio or "").casefold()

        return roster_de_referencia(
            REFERENCIA_PREFEITOS,
            cargo=Cargo.PREFEITO,
            prefixo_id="tse_prefeito",
            origem=self.name,
            filtro=_confere,
        )


class CamaraMunicipalDiretorio:
    name = "camara_municipal"

    async def listar(self, uf: str | None = None, municipio: str | None = None) -> Diretorio:
        if not municipio:
            return Diretorio(politicos=(), fonte=Fonte.FALLBACK, origem=self.name)
        referencias = REFERENCIA_VEREADORES.get(municipio)
        fonte = Fonte.FALLBACK if referencias else Fonte.SYNTHESIZED
        return roster_de_referencia(
            referencias or _VEREADORES_GENERICOS,
            cargo=Cargo.VEREADOR,
            prefixo_id=f"cm_{_slug(municipio)}",
            origem=self.name,
            uf=uf.upper() if uf else None,
            fonte=fonte,
        )
