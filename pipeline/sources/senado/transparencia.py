# pipeline/sources/senado/transparencia.py
#
# Senado transparency pages, scraped: annual expenses and office staff.
#
# Design decisions:
#   - Both pages are server-rendered HTML without a stable API. They are
#     parsed with BeautifulSoup (html.parser) and read by structure: the total
#     is the td.valor cell, each labeled category is the first <span> after
#     its label text, and staff are the first three cells of each table row.
#     Markup inside a cell (links, <abbr>, extra spans) does not matter. If
#     the total is missing the adapter raises ParseFailureError and the
#     orchestrator moves to the next tier.
#   - The expense page only publishes yearly aggregates. The page total is
#     split into the two labeled categories it breaks out (rent and
#     locomotion) plus an "Outras despesas" remainder, so the items always sum
#     to the published total. The items carry no date and no month, so they
#     count toward the annual total but never toward a monthly bucket. A month
#     filter cannot be honoured and yields NotFoundError.
#   - Staff rows are (name, code, role) triples. The table repeats its header
#     inside the body on some pages; rows whose name contains "funcionário" or
#     whose code contains "função" are that header and are dropped.
from __future__ import annotations

import re

import httpx
from bs4 import BeautifulSoup, Tag

from pipeline.models import Categoria, DespesaItem, Fonte, MembroEquipe, Periodo, Politico
from pipeline.sources.base import adapter_boundary, get_text
from pipeline.sources.errors import NotFoundError, ParseFailureError
from pipeline.sources.moeda import parse_moeda_br
from pipeline.transform.equipe import TABELA_SENADO, estimar_salario

_VALOR = re.compile(r"\d{1,3}(?:\.\d{3})*,\d{2}")

CATEGORIA_ALUGUEL = "Aluguel de imóveis para escritório político, compreendendo despesas concernentes a eles."
CATEGORIA_LOCOMOCAO = "Locomoção, hospedagem, alimentação, combustíveis e lubrificantes"
CATEGORIA_OUTRAS = "Outras despesas"
FORNECEDOR_EXTRAIDO = "Extraído do site oficial"

# (label prefix as printed on the page, category stored on the item)
_CATEGORIAS_ROTULADAS = (
    ("Aluguel de imóveis para escritório político", CATEGORIA_ALUGUEL),
    ("Locomoção, hospedagem, alimentação", CATEGORIA_LOCOMOCAO),
)


def _texto(no: Tag | str) -> str:
    bruto = no.get_text(" ", strip=True) if isinstance(no, Tag) else str(no)
    return " ".join(bruto.split())


def _valor_em(no: Tag | None) -> float | None:
    if no is None:
        return None
    achado = _VALOR.search(_texto(no))
    return parse_moeda_br(achado.group(0)) if achado else None


def _valor_do_rotulo(soup: BeautifulSoup, prefixo: str) -> float | None:
    alvo = prefixo.casefold()
    rotulo = soup.find(string=lambda s: s is not None and _texto(s).casefold().startswith(alvo))
    if rotulo is None:
        return None
    return _valor_em(rotulo.find_next("span"))


def extrair_despesas(pagina: str) -> list[DespesaItem]:
    """Split the page's annual total into labeled line items.

    Raises:
        ParseFailureError: if the main total is not on the page.
    """
    soup = BeautifulSoup(pagina, "html.parser")
    total = _valor_em(soup.find("td", class_="valor"))
    if total is None:
        raise ParseFailureError("total anual nao encontrado na pagina de transparencia")

    partes: list[tuple[str, float]] = []
    for prefixo, rotulo in _CATEGORIAS_ROTULADAS:
        valor = _valor_do_rotulo(soup, prefixo)
        if valor is not None:
            partes.append((rotulo, valor))

    restante = round(total - sum(valor for _, valor in partes), 2)
    if restante > 0:
        partes.append((CATEGORIA_OUTRAS, restante))

    return [
        DespesaItem(
            data=None,
            fornecedor=FORNECEDOR_EXTRAIDO,
            cnpj_cpf_fornecedor=None,
            categoria=rotulo,
            valor_liquido=valor,
            documento=f"SCRAPE_{i:03d}",
            mes=None,
        )
        for i, (rotulo, valor) in enumerate(partes, start=1)
    ]


def _eh_cabecalho(nome: str, codigo: str) -> bool:
    return "funcionário" in nome.casefold() or "função" in codigo.casefold()


def extrair_pessoal(pagina: str, fonte: Fonte = Fonte.SCRAPED_PAGE) -> list[MembroEquipe]:
    """(name, code, role) rows of the staff table, header rows excluded."""
    soup = BeautifulSoup(pagina, "html.parser")
    membros: list[MembroEquipe] = []
    for linha in soup.find_all("tr"):
        celulas = linha.find_all(["td", "th"])
        if len(celulas) < 3:
            continue
        nome, codigo, cargo = (_texto(c) for c in celulas[:3])
        if not nome or _eh_cabecalho(nome, codigo):
            continue
        membros.append(
            MembroEquipe(
                nome=nome,
                cargo=cargo,
                codigo_cargo=codigo or None,
                salario_estimado=estimar_salario(cargo, TABELA_SENADO),
                data_admissao=None,
                status="active",
                fonte=fonte,
            )
        )
    return membros


class SenadoTransparenciaDespesasAdapter:
    name = "senado_transparencia_despesas"
    categoria = Categoria.DESPESAS
    fonte = Fonte.SCRAPED_PAGE

    def __init__(self, client: httpx.AsyncClient, base_url: str) -> None:
        self._client = client
        self._base_url = base_url

    @adapter_boundary
    async def fetch(self, politico: Politico, periodo: Periodo) -> list[DespesaItem]:
        if not politico.external_id:
            raise NotFoundError(f"{politico.nome} sem codigo do Senado")
        if periodo.mes is not None:
            raise NotFoundError("pagina de transparencia so publica totais anuais")
        pagina = await get_text(
            self._client, f"{self._base_url}/{politico.external_id}/", params={"ano": periodo.ano}
        )
        return extrair_despesas(pagina)


class SenadoPessoalAdapter:
    name = "senado_pessoal"
    categoria = Categoria.EQUIPE
    fonte = Fonte.SCRAPED_PAGE

    def __init__(self, client: httpx.AsyncClient, base_url: str) -> None:
        self._client = client
        self._base_url = base_url

    @adapter_boundary
    async def fetch(self, politico: Politico, periodo: Periodo) -> list[MembroEquipe]:
        if not politico.external_id:
            raise NotFoundError(f"{politico.nome} sem codigo do Senado")
        pagina = await get_text(
            self._client,
            f"{self._base_url}/{politico.external_id}/pessoal/",
            params={"local": "gabinete", "ano": periodo.ano, "vinculo": "COMISSIONADO"},
        )
        return extrair_pessoal(pagina, self.fonte)
