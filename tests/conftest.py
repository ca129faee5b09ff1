import pytest

from patient_api.app import create_app
from patient_api.classifiers.lexical import LexicalStatementClassifier
from patient_api.db import DatabaseError


class FakeDatabase:
    """Records every execute() call; optionally fails on the Nth call (1-based)."""

    def __init__(self, rows=None, fail_on=None):
        self.rows = rows or []
        self.fail_on = fail_on
        self.calls = []

    def execute(self, statement, params=None):
        self.calls.append((statement, params))
        if self.fail_on is not None and len(self.calls) == self.fail_on:
            raise DatabaseError("simulated failure")
        return list(self.rows)


@pytest.fixture
def database():
    return FakeDatabase()


@pytest.fixture
def app(database):
    app = create_app(database, classifier=LexicalStatementClassifier())
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()
