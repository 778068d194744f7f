from sqlalchemy import Column, Integer, String, Float

from .database import Base


class CityCoefficient(Base):
    """Per-region constants. Read-only at request time."""
    __tablename__ = "city_coefficients"

    id = Column(Integer, primary_key=True, index=True)
    city_name = Column(String(255), unique=True, nullable=False)
    coefficient = Column(Float, nullable=True)                      # Variant A
    market_value_per_sq_meter = Column(Float, nullable=True)        # Variant B
    market_value_correction_factor = Column(Float, nullable=True)   # Variant B
