from pathlib import Path

from pydantic_settings import BaseSettings

from .domain import FormulaVariant, RegionSource

PROJECT_ROOT = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    APP_NAME: str = "housing-subsidy-calculator"
    DATABASE_URL: str = "sqlite:///./subsidy.db"
    LOG_LEVEL: str = "INFO"

    # Deployment variant: income-based (A) or area/service-based (B)
    FORMULA_VARIANT: FormulaVariant = FormulaVariant.AREA_SERVICE

    # Where region constants come from at startup
    REGION_SOURCE: RegionSource = RegionSource.FILE
    REGIONS_FILE: str = "data/city_coefficients.json"

    # Startup connection wait (database source only)
    DB_CONNECT_ATTEMPTS: int = 5
    DB_CONNECT_RETRY_SECONDS: float = 2.0

    class Config:
        env_file = ".env"

    @property
    def regions_path(self) -> Path:
        """REGIONS_FILE resolved against the project root when relative."""
        path = Path(self.REGIONS_FILE)
        if not path.is_absolute():
            path = PROJECT_ROOT / path
        return path


settings = Settings()
