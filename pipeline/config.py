# pipeline/config.py
#
# Pipeline configuration loaded from environment variables.
#
# Design decisions:
#   - Uses a frozen dataclass (not pydantic Settings) because the collector is a
#     standalone batch process and pydantic is reserved for the API layer.
#   - SOURCE_URLS are declared here so every adapter reads from one place.
#     They can be overridden via environment variables for testing or mirror use.
#   - The Codante id map is configuration, not code: new senators are added
#     here without touching the adapter.
#   - Paths default to pipeline/data relative to this file's directory so the
#     collector works out of the box after a fresh checkout.
from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

_PIPELINE_DIR = Path(__file__).parent

# Senado codigo -> Codante id, for senators whose Codante id is already known.
# Senators missing here are resolved by name through the Codante senators list.
CODANTE_IDS_SENADO: dict[str, int] = {
    "6337": 42154,
}


@dataclass(frozen=True)
class SourceUrls:
    """Base URLs for each upstream source.

    Invariant: no trailing slash. Adapters append their own paths.
    """

    camara_api: str = os.environ.get(
        "GABINETE_CAMARA_API", "https://dadosabertos.camara.leg.br/api/v2"
    )
    senado_dados_abertos: str = os.environ.get(
        "GABINETE_SENADO_API", "https://legis.senado.leg.br/dadosabertos"
    )
    senado_transparencia: str = os.environ.get(
        "GABINETE_SENADO_TRANSPARENCIA", "https://www6g.senado.leg.br/transparencia/sen"
    )
    codante_api: str = os.environ.get(
        "GABINETE_CODANTE_API", "https://apis.codante.io/senator-expenses"
    )
    alesp: str = os.environ.get("GABINETE_ALESP", "https://www.al.sp.gov.br")


@dataclass(frozen=True)
class PipelineConfig:
    """Immutable collector configuration.

    Invariants:
      - http_timeout, batch_size are positive.
      - pausa_entre_lotes is >= 0 (seconds).
    """

    data_dir: Path
    duckdb_path: Path
    funcionarios_csv: Path
    source_urls: SourceUrls = field(default_factory=SourceUrls)
    codante_ids: dict[str, int] = field(default_factory=lambda: dict(CODANTE_IDS_SENADO))
    http_timeout: float = 15.0
    batch_size: int = 3
    pausa_entre_lotes: float = 3.0

    def __post_init__(self) -> None:
        if self.http_timeout <= 0:
            raise ValueError(f"http_timeout deve ser positivo, recebido {self.http_timeout}")
        if self.batch_size < 1:
            raise ValueError(f"batch_size deve ser >= 1, recebido {self.batch_size}")
        if self.pausa_entre_lotes < 0:
            raise ValueError(f"pausa_entre_lotes nao pode ser negativa, recebido {self.pausa_entre_lotes}")


def load_config() -> PipelineConfig:
    """Build PipelineConfig from environment variables.

    Raises:
        ValueError: if a numeric variable is not a number or is out of range.
    """
    data_dir = Path(os.environ.get("GABINETE_DATA_DIR", str(_PIPELINE_DIR / "data")))
    duckdb_path = Path(
        os.environ.get("GABINETE_DUCKDB_PATH", str(data_dir / "output" / "gabinete_aberto.duckdb"))
    )
    funcionarios_csv = Path(
        os.environ.get(
            "GABINETE_FUNCIONARIOS_CSV",
            str(data_dir / "reference" / "funcionarios_camara.csv"),
        )
    )

    return PipelineConfig(
        data_dir=data_dir,
        duckdb_path=duckdb_path,
        funcionarios_csv=funcionarios_csv,
        source_urls=SourceUrls(),
        http_timeout=float(os.environ.get("GABINETE_HTTP_TIMEOUT", "15")),
        batch_size=int(os.environ.get("GABINETE_BATCH_SIZE", "3")),
        pausa_entre_lotes=float(os.environ.get("GABINETE_PAUSA_LOTES", "3")),
    )
