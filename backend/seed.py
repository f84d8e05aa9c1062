# Seed data - load patients and heart-rate readings from the JSON dataset
import json
import logging
from pathlib import Path
from typing import Optional, Union

from config import DEFAULT_SEED_FILE
from models import HeartRateReading, Patient
from stores import PatientStore, ReadingStore

logger = logging.getLogger(__name__)


def seed_data(
    patient_store: PatientStore,
    reading_store: ReadingStore,
    path: Optional[Union[str, Path]] = None,
) -> int:
    """
    Load {"patients": [...], "heartRateReadings": [...]} into both stores.

    A missing or broken dataset is logged and leaves the stores untouched;
    the service still starts. Returns the number of patients in the store.
    """
    seed_path = Path(path) if path else DEFAULT_SEED_FILE
    try:
        with seed_path.open(encoding="utf-8") as fh:
            data = json.load(fh)
        patients = [Patient.from_dict(raw) for raw in data.get("patients") or []]
        readings = [HeartRateReading.from_dict(raw) for raw in data.get("heartRateReadings") or []]
    except (OSError, ValueError, KeyError, TypeError, AttributeError):
        logger.exception("Failed to seed initial data", extra={"context": {"path": str(seed_path)}})
        return len(patient_store.find_all())

    patient_store.upsert_many(patients)
    reading_store.upsert_many(readings)

    total = len(patient_store.find_all())
    logger.info(
        f"Seeded {total} patients",
        extra={"context": {"path": str(seed_path), "patients": len(patients), "readings": len(readings)}},
    )
    return total


if __name__ == "__main__":
    from logging_config import configure_logging

    configure_logging()
    seed_data(PatientStore(), ReadingStore())
