import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

DEFAULT_ENDPOINTS_PATH = Path(__file__).resolve().parents[1] / "endpoints.yml"

# Background probe cadence (15 minutes); fixed, not read from the environment.
CHECK_INTERVAL_S: int = 900
DASHBOARD_REFRESH_MINUTES: int = 5


class Settings:
    ENDPOINTS_PATH: str = os.getenv(
        "HEALTHBOARD_ENDPOINTS_PATH", str(DEFAULT_ENDPOINTS_PATH)
    )
    PROBE_TIMEOUT_MS: int = int(os.getenv("PROBE_TIMEOUT_MS", 5000))
    PROBE_TIMEOUT_S: float = PROBE_TIMEOUT_MS / 1000
    HOST: str = os.getenv("HEALTHBOARD_HOST", "0.0.0.0")
    PORT: int = int(os.getenv("HEALTHBOARD_PORT", 8000))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()


settings = Settings()
