# tests/integration/test_api_despesas.py
from __future__ import annotations

import pytest
from fastapi.testclient import TestClient


def test_despesas_deputado(client: TestClient) -> None:
    response = client.get("/api/expenses/dep-204554", params={"ano": 2024})
    assert response.status_code == 200
    data = response.json()

    assert data["success"] is True
    assert data["politician"] == {
        "id": "dep-204554",
        "name": "Fulano de Tal",
        "position": "deputado_federal",
        "party": "PT",
        "state": "SP",
    }
    despesas = data["expenses"]
    assert despesas["year"] == 2024
    assert despesas["month"] is None
    assert despesas["total"] == pytest.approx(1000.0)
    assert despesas["monthly_average"] == pytest.approx(1000.0 / 12)
    assert despesas["transaction_count"] == 3
    assert despesas["source"] == "official_api"
    assert despesas["illustrative"] is False


def test_despesas_categorias_canonicas_e_percentuais(client: TestClient) -> None:
    despesas = client.get("/api/expenses/dep-204554", params={"ano": 2024}).json()["expenses"]

    categorias = despesas["categories"]
    assert list(categorias) == ["PASSAGEM AÉREA - SIGEPA", "COMBUSTÍVEIS E LUBRIFICANTES"]
    assert categorias["COMBUSTÍVEIS E LUBRIFICANTES"]["count"] == 2
    assert categorias["COMBUSTÍVEIS E LUBRIFICANTES"]["percentage_of_total"] == pytest.approx(30.0)
    assert sum(c["percentage_of_total"] for c in categorias.values()) == pytest.approx(100.0)


def test_despesas_fornecedores_e_meses(client: TestClient) -> None:
    despesas = client.get("/api/expenses/dep-204554", params={"ano": 2024}).json()["expenses"]

    assert despesas["suppliers"]["Posto Central"] == {"total": 300.0, "count": 2}
    assert despesas["months"]["3"] == {"total": 300.0, "count": 2}
    assert despesas["months"]["4"] == {"total": 700.0, "count": 1}


def test_despesas_filtradas_por_mes(client: TestClient) -> None:
    despesas = client.get("/api/expenses/dep-204554", params={"ano": 2024, "mes": 4}).json()["expenses"]
    assert despesas["month"] == 4
    assert despesas["total"] == pytest.approx(700.0)
    assert list(despesas["months"]) == ["4"]


def test_despesas_senador_sem_fontes_e_ilustrativo(client: TestClient) -> None:
    response = client.get("/api/expenses/sen-6337")
    assert response.status_code == 200
    despesas = response.json()["expenses"]
    assert despesas["source"] == "synthesized"
    assert despesas["illustrative"] is True
    assert despesas["total"] == 0.0
    assert despesas["categories"] == {}


def test_despesas_politico_inexistente(client: TestClient) -> None:
    response = client.get("/api/expenses/nao-existe")
    assert response.status_code == 404
    assert response.json()["detail"] == "Politico nao encontrado"


@pytest.mark.parametrize("params", [{"mes": 13}, {"mes": 0}, {"ano": 1999}])
def test_despesas_parametros_invalidos(client: TestClient, params: dict[str, int]) -> None:
    assert client.get("/api/expenses/dep-204554", params=params).status_code == 422


def test_resumo_armazenado(client: TestClient) -> None:
    response = client.get("/api/politicians/dep-204554/summary")
    assert response.status_code == 200
    data = response.json()
    assert data["politician"]["id"] == "dep-204554"
    assert data["expenses"]["total"] == 1000.0
    assert data["staff"]["total_staff"] == 2
    assert data["updated_at"].startswith("2024-06-01T09:00:00")


def test_resumo_armazenado_ainda_nao_coletado(client: TestClient) -> None:
    data = client.get("/api/politicians/sen-6337/summary").json()
    assert data["expenses"] is None
    assert data["staff"] is None
    assert data["updated_at"] is None


def test_resumo_armazenado_inexistente(client: TestClient) -> None:
    assert client.get("/api/politicians/nao-existe/summary").status_code == 404


def test_cabecalhos_de_seguranca(client: TestClient) -> None:
    response = client.get("/api/politicians/dep-204554/summary")
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"
    assert response.headers["Referrer-Policy"] == "strict-origin-when-cross-origin"


def test_cors_libera_origem_configurada(client: TestClient) -> None:
    response = client.get(
        "/api/politicians/dep-204554/summary",
        headers={"Origin": "http://localhost:5173"},
    )
    assert response.headers["access-control-allow-origin"] == "http://localhost:5173"


def test_cors_nao_libera_origem_desconhecida(client: TestClient) -> None:
    response = client.get(
        "/api/politicians/dep-204554/summary",
        headers={"Origin": "https://exemplo.invalid"},
    )
    assert "access-control-allow-origin" not in response.headers


def test_resumo_armazenado_traz_remuneracao_de_referencia(client: TestClient) -> None:
    remuneracao = client.get("/api/politicians/dep-204554/summary").json()["compensation"]
    assert remuneracao["subsidy"] == 33763.0
    assert remuneracao["office_allowance"] == 106000.0
    assert remuneracao["total_monthly_potential"] == 149016.0
    assert remuneracao["allowances"]["auxilio_moradia"] == 4253.0
    assert remuneracao["source"] == "static_reference"
    assert remuneracao["reference_date"] == "2024-01-01"


def test_resumo_armazenado_sem_remuneracao_fora_do_congresso(client: TestClient) -> None:
    data = client.get("/api/politicians/cm_são_paulo_001/summary").json()
    assert data["compensation"] is None
