# api/interfaces/api/dependencies.py
from api.application.services.gabinete_service import GabineteService
from api.infrastructure.coleta import get_prioridades
from api.infrastructure.duckdb_connection import get_connection
from pipeline.orquestrador import Orquestrador
from pipeline.output.duckdb_repo import DuckDBPoliticoRepo


def get_gabinete_service() -> GabineteService:
    return GabineteService(
        repo=DuckDBPoliticoRepo(get_connection()),
        orquestrador=Orquestrador(get_prioridades()),
    )
