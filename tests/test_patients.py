from datetime import date

import pytest
from pydantic import ValidationError

from patient_api.db import DatabaseError
from patient_api.patients import INSERT_PATIENT_SQL, PatientRecord, insert_patients

from conftest import FakeDatabase


class TestPatientRecord:
    def test_from_payload_keys(self):
        record = PatientRecord.model_validate({"patientName": "Alice", "birthDate": "1990-01-01"})
        assert record.name == "Alice"
        assert record.birth_date == date(1990, 1, 1)
        assert record.as_params() == ("Alice", date(1990, 1, 1))

    def test_from_field_names(self):
        record = PatientRecord(name="Bob", birth_date=date(1985, 5, 5))
        assert record.as_params() == ("Bob", date(1985, 5, 5))

    def test_null_values_are_kept(self):
        record = PatientRecord.model_validate({"patientName": None, "birthDate": None})
        assert record.as_params() == (None, None)

    def test_numeric_name_becomes_text(self):
        record = PatientRecord.model_validate({"patientName": 42, "birthDate": "1990-01-01"})
        assert record.name == "42"

    @pytest.mark.parametrize(
        "entry",
        [
            {"patientName": "Alice"},
            {"birthDate": "1990-01-01"},
            {"patientName": "Alice", "birthDate": "not a date"},
            "Alice",
            None,
        ],
    )
    def test_invalid_entries(self, entry):
        with pytest.raises(ValidationError):
            PatientRecord.model_validate(entry)


class TestInsertPatients:
    def test_returns_count(self):
        database = FakeDatabase()
        entries = [
            {"patientName": "Alice", "birthDate": "1990-01-01"},
            {"patientName": "Bob", "birthDate": "1985-05-05"},
        ]
        assert insert_patients(database, entries) == 2
        assert database.calls == [
            (INSERT_PATIENT_SQL, ("Alice", date(1990, 1, 1))),
            (INSERT_PATIENT_SQL, ("Bob", date(1985, 5, 5))),
        ]

    def test_database_error_propagates(self):
        database = FakeDatabase(fail_on=1)
        with pytest.raises(DatabaseError):
            insert_patients(
                database,
                [
                    {"patientName": "Alice", "birthDate": "1990-01-01"},
                    {"patientName": "Bob", "birthDate": "1985-05-05"},
                ],
            )
        assert len(database.calls) == 1

    def test_entries_before_invalid_one_are_kept(self):
        database = FakeDatabase()
        with pytest.raises(ValidationError):
            insert_patients(
                database,
                [
                    {"patientName": "Alice", "birthDate": "1990-01-01"},
                    {"patientName": "Bob", "birthDate": "yesterday"},
                ],
            )
        assert database.calls == [(INSERT_PATIENT_SQL, ("Alice", date(1990, 1, 1)))]
