# api/interfaces/api/routes/despesas_routes.py
from fastapi import APIRouter, Depends, HTTPException, Query

from api.application.dtos.gabinete_dto import DespesasRespostaDTO, ResumoArmazenadoDTO
from api.application.services.gabinete_service import GabineteService
from api.interfaces.api.dependencies import get_gabinete_service
from pipeline.models import Periodo

router = APIRouter()


@router.get("/expenses/{politico_id}", response_model=DespesasRespostaDTO)
async def get_despesas(
    politico_id: str,
    ano: int | None = Query(default=None, ge=2000, le=2100),
    mes: int | None = Query(default=None, ge=1, le=12),
    service: GabineteService = Depends(get_gabinete_service),  # noqa: B008
) -> DespesasRespostaDTO:
    periodo = Periodo(ano=ano or Periodo.atual().ano, mes=mes)
    resposta = await service.obter_despesas(politico_id, periodo)
    if resposta is None:
        raise HTTPException(status_code=404, detail="Politico nao encontrado")
    return resposta


@router.get("/politicians/{politico_id}/summary", response_model=ResumoArmazenadoDTO)
def get_resumo_armazenado(
    politico_id: str,
    service: GabineteService = Depends(get_gabinete_service),  # noqa: B008
) -> ResumoArmazenadoDTO:
    resumo = service.obter_resumo_armazenado(politico_id)
    if resumo is None:
        raise HTTPException(status_code=404, detail="Politico nao encontrado")
    return resumo
