from datetime import date
from typing import Any, Iterable, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

INSERT_PATIENT_SQL = "INSERT INTO patient (name, dateOfBirth) VALUES (%s, %s)"


class PatientRecord(BaseModel):
    """
    One entry of the insert-multiple payload.

    Both keys must be present. A null value is stored as NULL and a numeric
    name is stored as its text; birthDate must be an ISO date.
    """

    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    name: Optional[str] = Field(..., alias="patientName")
    birth_date: Optional[date] = Field(..., alias="birthDate")

    def as_params(self) -> Tuple[Optional[str], Optional[date]]:
        return self.name, self.birth_date


def insert_patients(database, entries: Iterable[Any]) -> int:
    """
    Insert entries one at a time, in input order.

    The first invalid entry (pydantic.ValidationError) or failed insert
    (DatabaseError) propagates and stops the batch. Rows inserted before
    it are kept; nothing wraps the batch in a transaction.
    """
    inserted = 0
    for entry in entries:
        record = PatientRecord.model_validate(entry)
        database.execute(INSERT_PATIENT_SQL, record.as_params())
        inserted += 1
    return inserted
