"""
Reference store: per-region constants, loaded once and read-only afterwards.

Three backings, one interface (lookup / list_all):
1. InMemoryRegionStore: a list of records (tests, embedding)
2. JsonFileRegionStore: data/city_coefficients.json
3. DatabaseRegionStore: city_coefficients table, one SELECT per call

The database backing also owns the startup concerns: waiting for the
server to accept connections and seeding an empty table from the JSON file.
"""

import json
import logging
import unicodedata
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable, Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from tenacity import (
    Retrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

from .database import Base, SessionLocal, engine as default_engine
from .domain import RegionId, RegionRecord, RegionSource, normalize_region_id
from .errors import RegionDataError, RegionNotFoundError, StoreUnavailableError
from .models import CityCoefficient

logger = logging.getLogger(__name__)

def region_sort_key(name: str) -> tuple:
    """
    Russian-aware collation key for display names.

    Case-insensitive; ё collates with е (ties broken ё after е). Latin
    names sort before Cyrillic ones, as in the 'ru' locale.
    """
    folded = unicodedata.normalize("NFC", name).casefold()
    return (folded.replace("ё", "е"), folded, name)


def _positive(region_id, field: str, value) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, bool):
        raise RegionDataError(f"Region {region_id!r}: {field} must be a number, got {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise RegionDataError(f"Region {region_id!r}: {field} must be a number, got {value!r}") from None
    if not number > 0:
        raise RegionDataError(f"Region {region_id!r}: {field} must be positive, got {value!r}")
    return number


def make_region_record(region_id, name, coefficient=None, value_per_area=None,
                       correction_factor=None) -> RegionRecord:
    """Build a RegionRecord, rejecting missing ids/names and non-positive constants."""
    if region_id is None or isinstance(region_id, bool) or normalize_region_id(region_id) == "":
        raise RegionDataError(f"Region record has no id (name={name!r})")
    if not isinstance(name, str) or not name.strip():
        raise RegionDataError(f"Region {region_id!r} has no city_name")
    return RegionRecord(
        id=region_id,
        name=name.strip(),
        coefficient=_positive(region_id, "coefficient", coefficient),
        value_per_area=_positive(region_id, "market_value_per_sq_meter", value_per_area),
        correction_factor=_positive(region_id, "market_value_correction_factor", correction_factor),
    )


def record_from_json(entry: dict) -> RegionRecord:
    """One entry of city_coefficients.json -> RegionRecord."""
    if not isinstance(entry, dict):
        raise RegionDataError(f"Region entry must be an object, got {entry!r}")
    return make_region_record(
        entry.get("id"),
        entry.get("city_name"),
        coefficient=entry.get("coefficient"),
        value_per_area=entry.get("market_value_per_sq_meter"),
        correction_factor=entry.get("market_value_correction_factor"),
    )


def load_region_file(path) -> list[RegionRecord]:
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            entries = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise StoreUnavailableError(f"Cannot read region file {path}: {e}") from e
    if not isinstance(entries, list):
        raise RegionDataError(f"Region file {path} must contain a JSON list")
    return [record_from_json(entry) for entry in entries]


# --- Store interface ---

class RegionStore(ABC):

    @abstractmethod
    def lookup(self, region_id: RegionId) -> RegionRecord:
        """Record for region_id, or RegionNotFoundError."""

    @abstractmethod
    def list_all(self) -> list[RegionRecord]:
        """Every record, sorted by region_sort_key(name)."""


class InMemoryRegionStore(RegionStore):

    def __init__(self, records: Iterable[RegionRecord]):
        self._records: dict[str, RegionRecord] = {}
        for record in records:
            if record.key in self._records:
                raise RegionDataError(f"Duplicate region id {record.id!r}")
            self._records[record.key] = record
        self._sorted = sorted(self._records.values(), key=lambda r: region_sort_key(r.name))

    def lookup(self, region_id: RegionId) -> RegionRecord:
        record = self._records.get(normalize_region_id(region_id))
        if record is None:
            raise RegionNotFoundError(region_id)
        return record

    def list_all(self) -> list[RegionRecord]:
        return list(self._sorted)

    def __len__(self):
        return len(self._records)


class JsonFileRegionStore(InMemoryRegionStore):
    """Reads the file once at construction."""

    def __init__(self, path):
        self.path = Path(path)
        super().__init__(load_region_file(self.path))
        logger.info("Loaded %d regions from %s", len(self), self.path)


class DatabaseRegionStore(RegionStore):
    """city_coefficients table. Short-lived session per call, reads only."""

    def __init__(self, session_factory):
        self.session_factory = session_factory

    @staticmethod
    def _to_record(row) -> RegionRecord:
        return make_region_record(
            row.id,
            row.city_name,
            coefficient=row.coefficient,
            value_per_area=row.market_value_per_sq_meter,
            correction_factor=row.market_value_correction_factor,
        )

    def lookup(self, region_id: RegionId) -> RegionRecord:
        # Table ids are integers; anything else cannot match
        try:
            key = int(normalize_region_id(region_id))
        except ValueError:
            raise RegionNotFoundError(region_id) from None

        db = self.session_factory()
        try:
            row = db.query(CityCoefficient).filter(CityCoefficient.id == key).first()
        except SQLAlchemyError as e:
            raise StoreUnavailableError(f"Region lookup failed: {e}") from e
        finally:
            db.close()
        if row is None:
            raise RegionNotFoundError(region_id)
        return self._to_record(row)

    def list_all(self) -> list[RegionRecord]:
        db = self.session_factory()
        try:
            rows = db.query(CityCoefficient).all()
        except SQLAlchemyError as e:
            raise StoreUnavailableError(f"Region listing failed: {e}") from e
        finally:
            db.close()
        records = [self._to_record(row) for row in rows]
        return sorted(records, key=lambda r: region_sort_key(r.name))


# --- Database startup ---

def wait_for_database(engine, attempts: int = 5, delay_seconds: float = 2.0) -> None:
    """
    Block until `SELECT 1` succeeds, retrying at a fixed interval.

    Re-raises the last OperationalError/DBAPI error after `attempts` failures.
    """
    retrying = Retrying(
        reraise=True,
        stop=stop_after_attempt(max(1, attempts)),
        wait=wait_fixed(delay_seconds),
        retry=retry_if_exception_type(SQLAlchemyError),
        before_sleep=before_sleep_log(logger, logging.WARNING),
    )
    for attempt in retrying:
        with attempt:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
    logger.info("Database connection established")


def bootstrap_database(engine, session_factory, seed_path) -> int:
    """
    Create missing tables and seed city_coefficients from the JSON file when empty.

    Returns the number of rows inserted (0 when the table was already populated).
    """
    Base.metadata.create_all(bind=engine)

    db = session_factory()
    try:
        if db.query(CityCoefficient).count() > 0:
            logger.info("Table city_coefficients already populated")
            return 0

        logger.warning("Table city_coefficients is empty, seeding from %s", seed_path)
        records = load_region_file(seed_path)
        InMemoryRegionStore(records)  # duplicate-id check before writing
        for record in records:
            if not isinstance(record.id, int):
                raise RegionDataError(
                    f"Region id {record.id!r} is not an integer; the database table needs integer ids"
                )
            db.add(CityCoefficient(
                id=record.id,
                city_name=record.name,
                coefficient=record.coefficient,
                market_value_per_sq_meter=record.value_per_area,
                market_value_correction_factor=record.correction_factor,
            ))
        db.commit()
        logger.info("Seeded %d regions into city_coefficients", len(records))
        return len(records)
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def build_region_store(settings, engine=None, session_factory=None) -> RegionStore:
    """Construct the configured store. Called once at process startup."""
    if settings.REGION_SOURCE == RegionSource.FILE:
        return JsonFileRegionStore(settings.regions_path)

    engine = engine or default_engine
    session_factory = session_factory or SessionLocal

    wait_for_database(engine, settings.DB_CONNECT_ATTEMPTS, settings.DB_CONNECT_RETRY_SECONDS)
    bootstrap_database(engine, session_factory, settings.regions_path)
    return DatabaseRegionStore(session_factory)
