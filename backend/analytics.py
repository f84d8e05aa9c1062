# Heart-rate analytics - high events and windowed statistics per patient
from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, List, Optional, Union

from errors import AppError, ErrCode
from stores import PatientStore, ReadingStore
from time_window import assert_valid_window, is_in_range, parse_timestamp

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD = 100

Number = Union[int, float]


def round_half_up(value: Decimal, places: int = 2) -> float:
    """Round to `places` decimals, halves away from zero (94.335 -> 94.34)."""
    quantum = Decimal(1).scaleb(-places)
    return float(value.quantize(quantum, rounding=ROUND_HALF_UP))


def mean(values: List[Number]) -> Decimal:
    total = sum((Decimal(str(v)) for v in values), Decimal(0))
    return total / Decimal(len(values))


class HeartRateAnalytics:
    """
    Read-only queries over the patient and reading stores.

    Both operations raise AppError for recognized failures and pass them
    through unchanged; anything else is logged and surfaced as
    INTERNAL_ERROR carrying only the patient id and the call parameters.
    """

    def __init__(self, patients: PatientStore, readings: ReadingStore):
        self.patients = patients
        self.readings = readings

    def _ensure_patient(self, patient_id: str) -> None:
        if self.patients.find_by_id(patient_id) is None:
            logger.warning("patient not found", extra={"context": {"patientId": patient_id}})
            raise AppError.not_found(ErrCode.PATIENT_NOT_FOUND, {"id": patient_id})

    def get_high_events(self, patient_id: str, threshold: Optional[Number] = None) -> Dict:
        """
        Readings strictly above `threshold` (default 100), oldest first.

        Readings with unparsable timestamps are skipped.
        """
        if threshold is None:
            threshold = DEFAULT_THRESHOLD
        params = {"patientId": patient_id, "threshold": threshold}
        try:
            logger.info("getHighEvents called", extra={"context": params})
            self._ensure_patient(patient_id)

            if threshold < 0:
                logger.warning("invalid threshold", extra={"context": params})
                raise AppError.bad_request(ErrCode.INVALID_THRESHOLD, {"threshold": threshold})

            events = [
                {"timestamp": r.timestamp, "heartRate": r.heartRate}
                for r in self.readings.get_by_patient(patient_id)
                if parse_timestamp(r.timestamp) is not None and r.heartRate > threshold
            ]

            logger.info(
                "high events computed",
                extra={"context": {"patientId": patient_id, "count": len(events)}},
            )
            return {"patientId": patient_id, "count": len(events), "events": events}
        except AppError:
            raise
        except Exception as exc:
            logger.exception("getHighEvents failed", extra={"context": params})
            raise AppError.internal(params) from exc

    def get_analytics(self, patient_id: str, from_: str, to: str) -> Dict:
        """Count, min, max and average heart rate inside the closed window [from_, to]."""
        params = {"patientId": patient_id, "from": from_, "to": to}
        try:
            logger.info("getAnalytics called", extra={"context": params})
            self._ensure_patient(patient_id)
            try:
                assert_valid_window(from_, to)
            except AppError:
                logger.warning("invalid time window", extra={"context": params})
                raise

            values = [
                r.heartRate
                for r in self.readings.get_by_patient(patient_id)
                if is_in_range(r.timestamp, from_, to)
            ]

            if not values:
                logger.info("no readings in window", extra={"context": params})
                return {
                    "patientId": patient_id,
                    "from": from_,
                    "to": to,
                    "count": 0,
                    "avg": None,
                    "min": None,
                    "max": None,
                }

            result = {
                "patientId": patient_id,
                "from": from_,
                "to": to,
                "count": len(values),
                "avg": round_half_up(mean(values)),
                "min": min(values),
                "max": max(values),
            }
            logger.info(
                "analytics computed",
                extra={"context": {k: result[k] for k in ("patientId", "count", "min", "max", "avg")}},
            )
            return result
        except AppError:
            raise
        except Exception as exc:
            logger.exception("getAnalytics failed", extra={"context": params})
            raise AppError.internal(params) from exc
