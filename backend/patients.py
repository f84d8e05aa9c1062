# Patient profile queries
from __future__ import annotations

import logging
from typing import Dict, List

from errors import AppError, ErrCode
from models import Patient
from stores import PatientStore

logger = logging.getLogger(__name__)


class PatientService:
    def __init__(self, patients: PatientStore):
        self.patients = patients

    def get_all(self) -> List[Patient]:
        try:
            patients = self.patients.find_all()
            logger.info("getAll patients", extra={"context": {"count": len(patients)}})
            return patients
        except Exception as exc:
            logger.exception("getAll failed")
            raise AppError.internal() from exc

    def get_by_id(self, patient_id: str) -> Patient:
        """Fetch one patient or raise PATIENT_NOT_FOUND."""
        try:
            patient = self.patients.find_by_id(patient_id)
            if patient is None:
                logger.warning("patient not found", extra={"context": {"patientId": patient_id}})
                raise AppError.not_found(ErrCode.PATIENT_NOT_FOUND, {"id": patient_id})
            logger.info("getById patient", extra={"context": {"patientId": patient_id}})
            return patient
        except AppError:
            raise
        except Exception as exc:
            logger.exception("getById failed", extra={"context": {"patientId": patient_id}})
            raise AppError.internal({"patientId": patient_id}) from exc

    def get_requests_count(self, patient_id: str) -> Dict:
        """How many tracked reads this patient's data has received."""
        try:
            self.get_by_id(patient_id)
            requests_count = self.patients.get_request_count(patient_id)
            logger.info(
                "requests counter read",
                extra={"context": {"patientId": patient_id, "requestsCount": requests_count}},
            )
            return {"patientId": patient_id, "requestsCount": requests_count}
        except AppError:
            raise
        except Exception as exc:
            logger.exception("getRequestsCount failed", extra={"context": {"patientId": patient_id}})
            raise AppError.internal({"patientId": patient_id}) from exc
