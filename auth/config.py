from pydantic_settings import BaseSettings


class Config(BaseSettings):
    host: str = "localhost"
    port: int = 8333
    log_level: str = "INFO"
    service_name: str = "deepdi.sh-auth"
    service_version: str = "0.1.0"
    otlp_endpoint: str = "http://localhost:4318"
    telemetry_enabled: bool = True
