from enum import Enum
from pathlib import Path

from pydantic_settings import BaseSettings


ROOT = Path(__file__).resolve().parent.parent


class Env(Enum):
    local = "local"
    dev = "dev"
    prod = "prod"


class Config(BaseSettings):
    env: Env = Env.local
    host: str = "localhost"
    port: int = 3000
    html_dir: Path = ROOT / "assets/html"
    assets_dir: Path = ROOT / "assets"
    backend_url: str = "http://localhost:8111"
    log_level: str = "INFO"
    service_name: str = "deepdi.sh-frontend-server"
    service_version: str = "0.1.0"
    otlp_endpoint: str = "http://localhost:4318"
    telemetry_enabled: bool = True
