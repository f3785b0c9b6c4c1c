from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv


load_dotenv()


DEFAULT_DATA_URL = (
    "https://raw.githubusercontent.com/johnmbf/municipio_limitrofe/refs/heads/main/municipios_limitrofes.csv"
)


@dataclass(frozen=True)
class Settings:
    # Where the adjacency CSV lives (URL or local path).
    data_url: str = os.getenv("LIMITROFES_DATA_URL", DEFAULT_DATA_URL)

    # Header names of the two required columns.
    entity_field: str = os.getenv("LIMITROFES_ENTITY_FIELD", "NM_MUN")
    neighbor_field: str = os.getenv("LIMITROFES_NEIGHBOR_FIELD", "NM_LIM")
    delimiter: str = os.getenv("LIMITROFES_DELIMITER", ",")

    fetch_timeout: float = float(os.getenv("LIMITROFES_FETCH_TIMEOUT", "30"))
    log_level: str = os.getenv("LIMITROFES_LOG_LEVEL", "WARNING")
