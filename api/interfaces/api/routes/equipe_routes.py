# api/interfaces/api/routes/equipe_routes.py
from fastapi import APIRouter, Depends, HTTPException, Query

from api.application.dtos.gabinete_dto import EquipeRespostaDTO
from api.application.services.gabinete_service import GabineteService
from api.interfaces.api.dependencies import get_gabinete_service
from pipeline.models import Periodo

router = APIRouter()


@router.get("/staff/{politico_id}", response_model=EquipeRespostaDTO)
async def get_equipe(
    politico_id: str,
    ano: int | None = Query(default=None, ge=2000, le=2100),
    service: GabineteService = Depends(get_gabinete_service),  # noqa: B008
) -> EquipeRespostaDTO:
    periodo = Periodo(ano=ano) if ano is not None else None
    resposta = await service.obter_equipe(politico_id, periodo)
    if resposta is None:
        raise HTTPException(status_code=404, detail="Politico nao encontrado")
    return resposta
