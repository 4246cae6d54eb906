# api/application/dtos/gabinete_dto.py
from datetime import datetime

from pydantic import BaseModel


class PoliticoDTO(BaseModel):
    id: str
    name: str
    position: str
    party: str | None
    state: str | None


class MembroEquipeDTO(BaseModel):
    name: str
    position: str
    position_code: str | None
    estimated_salary: float
    hire_date: str
    status: str
    source: str


class EquipeDTO(BaseModel):
    total_staff: int
    estimated_total_payroll: float
    positions: dict[str, int]
    active: int
    inactive: int
    members: list[MembroEquipeDTO]
    source: str
    illustrative: bool
    last_updated: datetime


class RemuneracaoDTO(BaseModel):
    subsidy: float
    office_allowance: float
    allowances: dict[str, float]
    total_monthly_potential: float
    currency: str
    reference_date: str
    source: str


class EquipeRespostaDTO(BaseModel):
    success: bool = True
    politician: PoliticoDTO
    staff: EquipeDTO
    compensation: RemuneracaoDTO | None = None
    updated_at: datetime


class TotalGrupoDTO(BaseModel):
    total: float
    count: int


class TotalCategoriaDTO(BaseModel):
    total: float
    count: int
    percentage_of_total: float


class DespesasDTO(BaseModel):
    year: int
    month: int | None
    total: float
    monthly_average: float
    categories: dict[str, TotalCategoriaDTO]
    suppliers: dict[str, TotalGrupoDTO]
    months: dict[int, TotalGrupoDTO]
    transaction_count: int
    source: str
    illustrative: bool
    last_updated: datetime


class DespesasRespostaDTO(BaseModel):
    success: bool = True
    politician: PoliticoDTO
    expenses: DespesasDTO
    updated_at: datetime


class ResumoArmazenadoDTO(BaseModel):
    politician: PoliticoDTO
    expenses: dict | None
    staff: dict | None
    updated_at: datetime | None
    compensation: RemuneracaoDTO | None = None
