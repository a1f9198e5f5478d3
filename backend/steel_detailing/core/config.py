from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "Steel Detailing API"
    environment: str = "development"
    api_v1_prefix: str = "/api/v1"

    cors_origins: list[str] = ["http://localhost:5173"]
    allowed_origins: Optional[list[str]] = None

    LOG_LEVEL: str = "INFO"

    # Violaciones de contrato (consultar un extremo inexistente de un nodo):
    # True -> excepción, False -> se registra y se ignora.
    DETAILING_VALIDATION_STRICT: bool = True

    DEFAULT_COVER_M: float = 0.04
    DEFAULT_BASTON_LC_M: float = 0.5
    DEFAULT_UNIT_SCALE: float = 2.0
    HOOK_LEG_M: float = 0.15

    # Cuantías (kg/cm2)
    QUANTITY_FC_KGCM2: float = 210.0
    QUANTITY_FY_KGCM2: float = 4200.0

    @field_validator("cors_origins", mode="before")
    @classmethod
    def split_cors(cls, value):  # noqa: D401
        """Permite configurar orígenes como cadena separada por comas."""
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def split_allowed(cls, value):
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @property
    def cors_origins_list(self) -> list[str]:
        return self.allowed_origins or self.cors_origins

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


settings = Settings()
