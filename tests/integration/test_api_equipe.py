# tests/integration/test_api_equipe.py
from __future__ import annotations

import pytest
from fastapi.testclient import TestClient


def test_equipe_deputado(client: TestClient) -> None:
    response = client.get("/api/staff/dep-204554")
    assert response.status_code == 200
    data = response.json()

    assert data["success"] is True
    assert data["politician"]["name"] == "Fulano de Tal"
    equipe = data["staff"]
    assert equipe["total_staff"] == 2
    assert equipe["active"] == 1
    assert equipe["inactive"] == 1
    assert equipe["positions"] == {"Secretário Parlamentar": 2}
    assert equipe["estimated_total_payroll"] == pytest.approx(2 * 5472.0)
    assert equipe["source"] == "official_api"
    assert equipe["illustrative"] is False


def test_equipe_membros(client: TestClient) -> None:
    membros = client.get("/api/staff/dep-204554").json()["staff"]["members"]
    assert [m["name"] for m in membros] == ["Maria da Silva", "João Souza"]
    assert membros[0]["hire_date"] == "2023-02-01"
    assert membros[1]["hire_date"] == "unknown"
    assert membros[1]["status"] == "inactive"


def test_equipe_senador_sintetizada(client: TestClient) -> None:
    equipe = client.get("/api/staff/sen-6337").json()["staff"]

    assert equipe["source"] == "synthesized"
    assert equipe["illustrative"] is True
    assert 10 <= equipe["total_staff"] <= 24
    assert all(m["source"] == "synthesized" for m in equipe["members"])
    assert equipe["active"] + equipe["inactive"] == equipe["total_staff"]


def test_equipe_sintetizada_e_estavel(client: TestClient) -> None:
    primeira = client.get("/api/staff/sen-6337").json()["staff"]["members"]
    segunda = client.get("/api/staff/sen-6337").json()["staff"]["members"]
    assert primeira == segunda


def test_equipe_vereador_sem_adaptadores(client: TestClient) -> None:
    response = client.get("/api/staff/cm_são_paulo_001")
    assert response.status_code == 200
    assert response.json()["staff"]["illustrative"] is True


def test_equipe_politico_inexistente(client: TestClient) -> None:
    response = client.get("/api/staff/nao-existe")
    assert response.status_code == 404
    assert response.json()["detail"] == "Politico nao encontrado"


def test_equipe_senador_traz_remuneracao_do_senado(client: TestClient) -> None:
    remuneracao = client.get("/api/staff/sen-6337").json()["compensation"]
    assert remuneracao["subsidy"] == 33763.0
    assert remuneracao["office_allowance"] == 120000.0
    assert remuneracao["total_monthly_potential"] == 163016.0
