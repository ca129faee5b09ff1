# patient_api/app.py
import base64
import logging
from datetime import date, time, timedelta

from flask import Flask, request, jsonify
from flask.json.provider import DefaultJSONProvider
from pydantic import ValidationError
from werkzeug.exceptions import InternalServerError

from . import config, messages
from .db import Database, DatabaseError
from .patients import insert_patients
from .sql_validation import (
    ALLOWED_GET_KINDS,
    ALLOWED_POST_KINDS,
    get_classifier,
    validate_sql,
)

# Basic logging setup
logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL, logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger("patient_api")

# Every standard verb except OPTIONS, which the preflight hook answers
ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "TRACE", "CONNECT"]

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


class PatientJSONProvider(DefaultJSONProvider):
    """
    Keeps column order, writes DATE/TIME values as ISO strings and
    BINARY/BLOB values as base64.
    """

    sort_keys = False

    @staticmethod
    def default(o):
        if isinstance(o, (date, time)):
            return o.isoformat()
        if isinstance(o, timedelta):
            return str(o)
        if isinstance(o, (bytes, bytearray)):
            return base64.b64encode(bytes(o)).decode("ascii")
        return DefaultJSONProvider.default(o)


def _json_body() -> dict:
    data = request.get_json(force=True, silent=True)
    return data if isinstance(data, dict) else {}


def _error(message: str, status: int):
    return jsonify({"error": message}), status


def create_app(database, classifier=None) -> Flask:
    """
    Build the Flask app around an execution collaborator.
    `database` needs an execute(statement, params=None) -> rows method.
    """
    app = Flask(__name__)
    app.json = PatientJSONProvider(app)
    classifier = classifier or get_classifier(config.SQL_CLASSIFIER)

    @app.before_request
    def preflight():
        if request.method == "OPTIONS":
            response = app.response_class(status=204)
            del response.headers["Content-Type"]
            return response
        return None

    @app.after_request
    def add_cors_headers(response):
        response.headers.update(CORS_HEADERS)
        return response

    @app.errorhandler(404)
    def not_found(e):
        return _error(messages.NOT_FOUND, 404)

    @app.errorhandler(405)
    def method_not_allowed(e):
        return _error(messages.METHOD_NOT_ALLOWED, 405)

    @app.errorhandler(InternalServerError)
    def internal_error(e):
        logger.error(
            "Unhandled error on %s %s: %r",
            request.method,
            request.path,
            e.original_exception or e,
        )
        return _error(messages.INTERNAL_ERROR, 500)

    @app.route("/", methods=ALL_METHODS)
    def index():
        return jsonify({"message": messages.WELCOME}), 200

    @app.route("/api/insert-multiple", methods=ALL_METHODS)
    def insert_multiple():
        # Only POST is routed here; other verbs look like an unknown path
        if request.method != "POST":
            return _error(messages.NOT_FOUND, 404)

        data = _json_body()
        patients = data.get("patients")
        if not isinstance(patients, list):
            logger.warning("Rejected insert-multiple body: 'patients' is not a list")
            return _error(messages.INVALID_FORMAT, 400)

        logger.info("Inserting %d patients", len(patients))
        try:
            inserted = insert_patients(database, patients)
        except (DatabaseError, ValidationError):
            logger.exception("Error inserting patients")
            return _error(messages.INTERNAL_ERROR, 500)

        logger.info("Inserted %d patients", inserted)
        return jsonify({"message": messages.INSERT_SUCCESS}), 200

    @app.route("/api/query", methods=["GET", "POST"])
    def query():
        if request.method == "GET":
            return _read_query()
        if request.method == "POST":
            return _write_query()
        # HEAD is added to GET routes automatically
        return _error(messages.METHOD_NOT_ALLOWED, 405)

    def _read_query():
        sql = request.args.get("sql")
        logger.info("Received GET query='%s'", sql)

        if not sql or not sql.strip():
            logger.warning("Missing 'sql' query parameter")
            return _error(messages.MISSING_SQL_PARAM, 400)

        ok, reason = validate_sql(sql, ALLOWED_GET_KINDS, classifier)
        if not ok:
            logger.warning("SQL validation failed: %s", reason)
            return _error(messages.GET_QUERY_ERROR, 400)

        try:
            rows = database.execute(sql)
        except DatabaseError:
            logger.exception("Error executing query")
            return _error(messages.INTERNAL_ERROR, 500)

        logger.info("SELECT returned %d rows", len(rows))
        return jsonify(rows), 200

    def _write_query():
        data = _json_body()
        sql = data.get("sql")
        logger.info("Received POST query='%s'", sql)

        if not isinstance(sql, str) or not sql.strip():
            logger.warning("Missing 'sql' in body")
            return _error(messages.MISSING_SQL_FIELD, 400)

        ok, reason = validate_sql(sql, ALLOWED_POST_KINDS, classifier)
        if not ok:
            logger.warning("SQL validation failed: %s", reason)
            return _error(messages.POST_QUERY_ERROR, 400)

        try:
            database.execute(sql)
        except DatabaseError:
            logger.exception("Error executing query")
            return _error(messages.INTERNAL_ERROR, 500)

        return jsonify({"message": messages.POST_SUCCESS}), 200

    return app


def main():
    logger.info(
        "Starting Patient API on %s:%s with DB_HOST=%s SQL_CLASSIFIER=%s DEBUG=%s",
        config.HOST,
        config.PORT,
        config.DB_HOST,
        config.SQL_CLASSIFIER,
        config.DEBUG,
    )

    try:
        database = Database.from_config()
        database.ensure_table()
    except DatabaseError:
        logger.exception("Failed to start server")
        raise SystemExit(1)

    app = create_app(database)
    app.run(host=config.HOST, port=config.PORT, debug=config.DEBUG)


if __name__ == "__main__":
    main()
