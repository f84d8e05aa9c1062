# In-memory data models - patients and heart-rate readings
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Union


class PatientGender(str, Enum):
    FEMALE = "FEMALE"
    MALE = "MALE"
    OTHER = "OTHER"


@dataclass(frozen=True)
class Patient:
    """Patient profile, created once at startup and never updated."""
    id: str
    name: str
    age: int  # >= 0
    gender: PatientGender

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "Patient":
        age = int(raw["age"])
        if age < 0:
            raise ValueError(f"age must be non-negative, got {age}")
        return cls(
            id=str(raw["id"]),
            name=str(raw["name"]),
            age=age,
            gender=PatientGender(str(raw["gender"]).upper()),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "age": self.age, "gender": self.gender.value}


@dataclass(frozen=True)
class HeartRateReading:
    """One timestamped heart-rate measurement."""
    patientId: str
    timestamp: str  # ISO-8601, may be malformed
    heartRate: Union[int, float]

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "HeartRateReading":
        heart_rate = raw["heartRate"]
        if isinstance(heart_rate, bool) or not isinstance(heart_rate, (int, float)):
            heart_rate = float(heart_rate)
        return cls(
            patientId=str(raw["patientId"]),
            timestamp=str(raw["timestamp"]),
            heartRate=heart_rate,
        )
