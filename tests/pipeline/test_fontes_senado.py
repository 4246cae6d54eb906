# tests/pipeline/test_fontes_senado.py
#
# Senado adapters: Codante mirror, transparency scraping, open-data staff.
from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any

import httpx
import pytest

from pipeline.models import Cargo, Fonte, Periodo, Politico
from pipeline.sources.base import Falha, Payload, criar_cliente
from pipeline.sources.errors import MalformedPayloadError, NotFoundError, ParseFailureError
from pipeline.sources.senado.codante import CodanteDespesasAdapter, normalizar_despesa_codante
from pipeline.sources.senado.funcionarios import SenadoFuncionariosAdapter, extrair_funcionarios
from pipeline.sources.senado.transparencia import (
    CATEGORIA_ALUGUEL,
    CATEGORIA_LOCOMOCAO,
    CATEGORIA_OUTRAS,
    SenadoPessoalAdapter,
    SenadoTransparenciaDespesasAdapter,
    extrair_despesas,
    extrair_pessoal,
)
from pipeline.transform.despesas import resumir_despesas

CODANTE = "https://codante.test/api/senator-expenses"
SENADO = "https://legis.senado.test/dadosabertos"
TRANSPARENCIA = "https://www6g.senado.test/transparencia/sen"
FIXTURES = Path(__file__).parent.parent / "fixtures"
SENADOR = Politico(id="sen-6337", external_id="6337", cargo=Cargo.SENADOR, nome="Fulana de Tal")
OUTRO = Politico(id="sen-5012", external_id="5012", cargo=Cargo.SENADOR, nome="Sicrano Souza")


def _rodar(handler: Callable[[httpx.Request], httpx.Response], coro: Callable[[httpx.AsyncClient], Awaitable[Any]]) -> Any:
    async def _run() -> Any:
        async with criar_cliente(5.0, transport=httpx.MockTransport(handler)) as client:
            return await coro(client)

    return asyncio.run(_run())


def _despesa_codante(data: str, valor: Any) -> dict[str, Any]:
    return {
        "date": data,
        "amount": valor,
        "expense_category": "Passagens aéreas",
        "supplier": "Cia Aérea",
        "supplier_document": "00.000.000/0001-00",
        "original_id": 991,
    }


# ── Codante ───────────────────────────────────────────────────────────────────


def test_normalizar_despesa_codante() -> None:
    item = normalizar_despesa_codante(_despesa_codante("2024-05-20", "1.234,56"))
    assert item.valor_liquido == pytest.approx(1234.56)
    assert item.mes == 5
    assert item.documento == "991"
    assert item.categoria == "Passagens aéreas"


def test_codante_usa_tabela_de_ids() -> None:
    caminhos: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        caminhos.append(request.url.path)
        return httpx.Response(200, json={"data": [_despesa_codante("2024-01-02", 100.0)]})

    resultado = _rodar(
        handler,
        lambda c: CodanteDespesasAdapter(c, CODANTE, {"6337": 42154}).fetch(SENADOR, Periodo(ano=2024)),
    )

    assert isinstance(resultado, Payload)
    assert resultado.fonte is Fonte.ALTERNATE_API
    assert caminhos == ["/api/senator-expenses/senators/42154/expenses"]


def test_codante_busca_por_nome_e_guarda_o_id() -> None:
    caminhos: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        caminhos.append(request.url.path)
        if request.url.path.endswith("/senators"):
            return httpx.Response(
                200,
                json={"data": [{"id": 1, "name": "Outro Nome"}, {"id": 77, "name": "Sicrano", "full_name": "Sicrano Souza"}]},
            )
        return httpx.Response(200, json={"data": [_despesa_codante("2024-02-01", 10.0)]})

    async def duas_vezes(client: httpx.AsyncClient) -> list[Any]:
        adapter = CodanteDespesasAdapter(client, CODANTE, {})
        return [await adapter.fetch(OUTRO, Periodo(ano=2024)), await adapter.fetch(OUTRO, Periodo(ano=2023))]

    resultados = _rodar(handler, duas_vezes)

    assert all(isinstance(r, Payload) for r in resultados)
    assert caminhos.count("/api/senator-expenses/senators") == 1
    assert caminhos.count("/api/senator-expenses/senators/77/expenses") == 2


def test_codante_prefere_nome_exato_a_substring() -> None:
    caminhos: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        caminhos.append(request.url.path)
        if request.url.path.endswith("/senators"):
            return httpx.Response(
                200,
                json={"data": [{"id": 1, "name": "Sicrano"}, {"id": 77, "name": "Sicrano Souza"}]},
            )
        return httpx.Response(200, json={"data": [_despesa_codante("2024-02-01", 10.0)]})

    resultado = _rodar(handler, lambda c: CodanteDespesasAdapter(c, CODANTE, {}).fetch(OUTRO, Periodo(ano=2024)))

    assert isinstance(resultado, Payload)
    assert caminhos[-1] == "/api/senator-expenses/senators/77/expenses"


def test_codante_senador_desconhecido() -> None:
    resultado = _rodar(
        lambda _req: httpx.Response(200, json={"data": [{"id": 1, "name": "Outro Nome"}]}),
        lambda c: CodanteDespesasAdapter(c, CODANTE, {}).fetch(OUTRO, Periodo(ano=2024)),
    )
    assert isinstance(resultado, Falha)
    assert resultado.tipo is NotFoundError


def test_codante_filtra_mes() -> None:
    corpo = {"data": [_despesa_codante("2024-03-01", 10.0), _despesa_codante("2024-04-01", 20.0)]}
    resultado = _rodar(
        lambda _req: httpx.Response(200, json=corpo),
        lambda c: CodanteDespesasAdapter(c, CODANTE, {"6337": 42154}).fetch(SENADOR, Periodo(ano=2024, mes=4)),
    )
    assert isinstance(resultado, Payload)
    assert [r.valor_liquido for r in resultado.registros] == [20.0]


# ── transparencia: despesas ───────────────────────────────────────────────────


def test_extrair_despesas_soma_o_total_da_pagina() -> None:
    pagina = (FIXTURES / "senado_transparencia.html").read_text(encoding="utf-8")

    itens = extrair_despesas(pagina)

    assert [i.categoria for i in itens] == [CATEGORIA_ALUGUEL, CATEGORIA_LOCOMOCAO, CATEGORIA_OUTRAS]
    assert [i.valor_liquido for i in itens] == pytest.approx([24000.00, 50000.50, 49456.28])
    assert sum(i.valor_liquido or 0 for i in itens) == pytest.approx(123456.78)
    assert [i.documento for i in itens] == ["SCRAPE_001", "SCRAPE_002", "SCRAPE_003"]
    assert all(i.data is None and i.mes is None for i in itens)


def test_despesas_anuais_extraidas_nao_caem_em_nenhum_mes() -> None:
    pagina = (FIXTURES / "senado_transparencia.html").read_text(encoding="utf-8")

    resumo = resumir_despesas(extrair_despesas(pagina), Fonte.SCRAPED_PAGE)

    assert resumo.total == pytest.approx(123456.78)
    assert resumo.meses == {}


def test_extrair_despesas_rotulo_com_marcacao_extra() -> None:
    pagina = """
    <table><tr><th>Total</th><td class="valor"> 1.500,00 </td></tr></table>
    <section>
      <h3><strong>Locomoção, hospedagem, alimentação</strong>, combustíveis e lubrificantes</h3>
      <div><em>Valor</em> <span class="num">R$ 1.200,00</span></div>
    </section>
    """

    itens = extrair_despesas(pagina)

    assert [(i.categoria, i.valor_liquido) for i in itens] == [
        (CATEGORIA_LOCOMOCAO, pytest.approx(1200.0)),
        (CATEGORIA_OUTRAS, pytest.approx(300.0)),
    ]


def test_extrair_despesas_sem_total() -> None:
    with pytest.raises(ParseFailureError):
        extrair_despesas("<html><body>Pagina em manutencao</body></html>")


def test_extrair_despesas_so_total() -> None:
    itens = extrair_despesas('<td class="valor">1.000,00</td>')
    assert [(i.categoria, i.valor_liquido) for i in itens] == [(CATEGORIA_OUTRAS, 1000.0)]


def test_transparencia_adapter() -> None:
    pagina = (FIXTURES / "senado_transparencia.html").read_text(encoding="utf-8")
    vistos: list[httpx.URL] = []

    def handler(request: httpx.Request) -> httpx.Response:
        vistos.append(request.url)
        return httpx.Response(200, text=pagina)

    resultado = _rodar(
        handler, lambda c: SenadoTransparenciaDespesasAdapter(c, TRANSPARENCIA).fetch(OUTRO, Periodo(ano=2024))
    )

    assert isinstance(resultado, Payload)
    assert resultado.fonte is Fonte.SCRAPED_PAGE
    assert len(resultado) == 3
    assert vistos[0].path.endswith("/5012/")
    assert vistos[0].params["ano"] == "2024"


def test_transparencia_nao_atende_filtro_de_mes() -> None:
    resultado = _rodar(
        lambda _req: httpx.Response(200, text='<td class="valor">1,00</td>'),
        lambda c: SenadoTransparenciaDespesasAdapter(c, TRANSPARENCIA).fetch(OUTRO, Periodo(ano=2024, mes=2)),
    )
    assert isinstance(resultado, Falha)
    assert resultado.tipo is NotFoundError


def test_transparencia_layout_quebrado_e_parse_failure() -> None:
    resultado = _rodar(
        lambda _req: httpx.Response(200, text="<html></html>"),
        lambda c: SenadoTransparenciaDespesasAdapter(c, TRANSPARENCIA).fetch(OUTRO, Periodo(ano=2024)),
    )
    assert isinstance(resultado, Falha)
    assert resultado.tipo is ParseFailureError


# ── transparencia: pessoal ────────────────────────────────────────────────────


def test_extrair_pessoal_descarta_cabecalho() -> None:
    pagina = (FIXTURES / "senado_pessoal.html").read_text(encoding="utf-8")

    membros = extrair_pessoal(pagina)

    assert [m.nome for m in membros] == ["Ana Beatriz Moura", "Bruno César Lima", "Carlos Eduardo Prado"]
    assert [m.codigo_cargo for m in membros] == ["SF02", "AP09", "FC01"]
    assert [m.salario_estimado for m in membros] == pytest.approx([17319.31, 9360.30, 4500.00])
    assert all(m.data_admissao is None for m in membros)


def test_extrair_pessoal_linhas_sem_link_e_com_abbr() -> None:
    pagina = """
    <table>
      <thead><tr><th>Funcionário</th><th>Função</th><th>Cargo</th></tr></thead>
      <tbody>
        <tr><td>Daniela Ribeiro</td><td>AP03</td><td><abbr title="Assessor">ASSESSOR</abbr> PARLAMENTAR</td></tr>
        <tr>
          <td><span class="nome">  Eduardo
              Castro </span></td>
          <td> SF01 </td>
          <td>Motorista</td>
        </tr>
      </tbody>
    </table>
    """

    membros = extrair_pessoal(pagina)

    assert [m.nome for m in membros] == ["Daniela Ribeiro", "Eduardo Castro"]
    assert [m.codigo_cargo for m in membros] == ["AP03", "SF01"]
    assert [m.cargo for m in membros] == ["ASSESSOR PARLAMENTAR", "Motorista"]
    assert membros[0].salario_estimado == pytest.approx(17319.31)


def test_pessoal_adapter_envia_filtros() -> None:
    pagina = (FIXTURES / "senado_pessoal.html").read_text(encoding="utf-8")
    vistos: list[httpx.URL] = []

    def handler(request: httpx.Request) -> httpx.Response:
        vistos.append(request.url)
        return httpx.Response(200, text=pagina)

    resultado = _rodar(handler, lambda c: SenadoPessoalAdapter(c, TRANSPARENCIA).fetch(OUTRO, Periodo(ano=2024)))

    assert isinstance(resultado, Payload)
    assert len(resultado) == 3
    assert vistos[0].path.endswith("/5012/pessoal/")
    assert vistos[0].params["local"] == "gabinete"
    assert vistos[0].params["vinculo"] == "COMISSIONADO"


def test_pessoal_pagina_sem_tabela_e_falha() -> None:
    resultado = _rodar(
        lambda _req: httpx.Response(200, text="<html></html>"),
        lambda c: SenadoPessoalAdapter(c, TRANSPARENCIA).fetch(OUTRO, Periodo(ano=2024)),
    )
    assert isinstance(resultado, Falha)
    assert resultado.tipo is NotFoundError


# ── dados abertos: funcionarios ───────────────────────────────────────────────


def test_extrair_funcionarios_aceita_objeto_unico() -> None:
    corpo = {"FuncionariosSenador": {"Funcionarios": {"Funcionario": {"NomeFuncionario": "Ana"}}}}
    assert extrair_funcionarios(corpo) == [{"NomeFuncionario": "Ana"}]


def test_extrair_funcionarios_sem_bloco() -> None:
    assert extrair_funcionarios({"FuncionariosSenador": {}}) == []


@pytest.mark.parametrize(
    "corpo",
    [
        {"FuncionariosSenador": {"Funcionarios": [{"Funcionario": []}]}},
        {"FuncionariosSenador": ["lixo"]},
        {"FuncionariosSenador": {"Funcionarios": {"Funcionario": ["Ana"]}}},
    ],
)
def test_funcionarios_adapter_formato_inesperado_e_malformado(corpo: dict[str, Any]) -> None:
    resultado = _rodar(
        lambda _req: httpx.Response(200, json=corpo),
        lambda c: SenadoFuncionariosAdapter(c, SENADO).fetch(SENADOR, Periodo(ano=2024)),
    )
    assert isinstance(resultado, Falha)
    assert resultado.tipo is MalformedPayloadError
    assert resultado.adaptador == "senado_funcionarios"


def test_funcionarios_adapter_normaliza_campos() -> None:
    corpo = {
        "FuncionariosSenador": {
            "Funcionarios": {
                "Funcionario": [
                    {
                        "NomeFuncionario": "Ana Beatriz Moura",
                        "DescricaoCargo": "Assessor Parlamentar",
                        "CodigoCargo": "SF02",
                        "DataAdmissao": "2023-02-01",
                    },
                    {"Nome": "Bruno Lima", "Funcao": "Motorista", "DataDesligamento": "2024-06-30"},
                    {"Nome": "Sem Cargo"},
                    {"DescricaoCargo": "Sem nome"},
                ]
            }
        }
    }

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path.endswith("/senador/6337/funcionarios.json")
        return httpx.Response(200, json=corpo)

    resultado = _rodar(handler, lambda c: SenadoFuncionariosAdapter(c, SENADO).fetch(SENADOR, Periodo(ano=2024)))

    assert isinstance(resultado, Payload)
    ana, bruno, sem_cargo = resultado.registros
    assert (ana.codigo_cargo, ana.data_admissao, ana.status) == ("SF02", "2023-02-01", "active")
    assert ana.salario_estimado == pytest.approx(17319.31)
    assert (bruno.cargo, bruno.status) == ("Motorista", "inactive")
    assert sem_cargo.cargo == "Função Comissionada"
    assert sem_cargo.salario_estimado == pytest.approx(10000.00)
