# In-memory stores for patients, request counters and heart-rate readings
from __future__ import annotations

import threading
from collections import defaultdict
from typing import DefaultDict, Dict, Iterable, List, Optional

from models import HeartRateReading, Patient


class PatientStore:
    """
    Patient records keyed by id plus a per-patient request counter.

    Mutations are serialized by a single lock; counters are never
    decremented and are lost on restart.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._patients_by_id: Dict[str, Patient] = {}
        self._request_counts: DefaultDict[str, int] = defaultdict(int)

    def upsert_many(self, records: Iterable[Patient]) -> None:
        """Insert or replace patients by id; the last record for an id wins."""
        with self._lock:
            for patient in records:
                self._patients_by_id[patient.id] = patient

    def find_all(self) -> List[Patient]:
        with self._lock:
            return list(self._patients_by_id.values())

    def find_by_id(self, patient_id: str) -> Optional[Patient]:
        with self._lock:
            return self._patients_by_id.get(patient_id)

    def increment_request_count(self, patient_id: str) -> None:
        """Bump the counter for a known patient. Unknown ids are ignored."""
        with self._lock:
            if patient_id not in self._patients_by_id:
                return
            self._request_counts[patient_id] += 1

    def get_request_count(self, patient_id: str) -> int:
        with self._lock:
            return self._request_counts.get(patient_id, 0)


class ReadingStore:
    """Heart-rate readings grouped per patient, sorted by timestamp string."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._readings_by_patient: Dict[str, List[HeartRateReading]] = {}

    def upsert_many(self, readings: Iterable[HeartRateReading]) -> None:
        """
        Replace the full reading list of every patient present in the batch.

        Patients absent from the batch keep their readings. Two batches for
        the same patient do not merge: the second one wins.
        """
        grouped: DefaultDict[str, List[HeartRateReading]] = defaultdict(list)
        for reading in readings:
            grouped[reading.patientId].append(reading)

        for batch in grouped.values():
            batch.sort(key=lambda r: r.timestamp)

        with self._lock:
            self._readings_by_patient.update(grouped)

    def get_by_patient(self, patient_id: str) -> List[HeartRateReading]:
        with self._lock:
            return list(self._readings_by_patient.get(patient_id, []))
