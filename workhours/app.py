"""HTTP service that answers work hours questions and stores holidays."""

from __future__ import annotations

import argparse
import logging
import os
import sqlite3
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask, Response, jsonify, request

from workhours.calculator import (
    HolidayInput,
    InvalidRequestError,
    WorkHoursRequest,
    calculate_work_hours,
)
from workhours.db import Database, Holiday
from workhours.openapi import swagger_spec_json

logger = logging.getLogger(__name__)

SWAGGER_UI_FILE = "swagger-ui.html"
_MISSING_END = "Either endDate or durationSeconds must be provided"


def _text_response(message: str, status: int) -> Response:
    return Response(message, status=status, mimetype="text/plain")


def create_app(database: Database) -> Flask:
    """Build the web application around an open holiday database."""
    app = Flask(__name__)

    @app.get("/health")
    def health() -> Response:
        return _text_response("OK", 200)

    @app.post("/holidays/<country>")
    def add_holiday(country: str):
        country = country.lower()
        payload = request.get_json(silent=True)
        if not isinstance(payload, list):
            return _text_response("Request body must be a JSON array of holidays", 400)
        try:
            holidays = [HolidayInput.from_dict(item) for item in payload]
        except InvalidRequestError as exc:
            return _text_response(str(exc), 400)

        added = 0
        errors: list[str] = []
        for holiday in holidays:
            stored = Holiday(date=holiday.date, description=holiday.description, country=country)
            try:
                database.add_holiday(stored)
            except sqlite3.Error as exc:
                errors.append(f"Failed to add holiday {holiday.date}: {exc}")
            else:
                added += 1

        if errors:
            return jsonify(errors), 500
        return jsonify(f"{added} holidays added successfully"), 200

    @app.get("/holidays/<country>")
    def list_holidays(country: str):
        try:
            holidays = database.get_holidays_by_country(country.lower())
        except sqlite3.Error as exc:
            return _text_response(f"Failed to fetch holidays: {exc}", 500)
        return jsonify([holiday.to_dict() for holiday in holidays]), 200

    @app.get("/")
    def get_work_hours():
        args = request.args
        logger.debug("Received work hours request: %r", args.to_dict())
        if "startDate" in args and "endDate" not in args and "durationSeconds" not in args:
            return jsonify(_MISSING_END), 400
        try:
            work_request = WorkHoursRequest.from_dict(args.to_dict())
            result = calculate_work_hours(database, work_request)
        except InvalidRequestError as exc:
            return _text_response(str(exc), 400)
        return jsonify(result.to_dict()), 200

    @app.get("/swagger")
    def serve_swagger_ui() -> Response:
        try:
            content = Path(SWAGGER_UI_FILE).read_text(encoding="utf-8")
        except OSError:
            return _text_response(f"Could not read {SWAGGER_UI_FILE} file", 500)
        return Response(content, status=200, content_type="text/html; charset=utf-8")

    @app.get("/schema")
    def serve_swagger_schema() -> Response:
        return Response(swagger_spec_json(), status=200, content_type="application/json")

    return app


def _configure_logging() -> None:
    level_name = os.environ.get("LOG_LEVEL", "WARNING").upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.WARNING
    logging.basicConfig(level=level)


def main(argv: list[str] | None = None) -> int:
    """Start the server; settings come from the environment and an optional .env file."""
    parser = argparse.ArgumentParser(
        prog="workhours",
        description="Serve the work hours API. Configure with DATABASE_LOCATION and PORT.",
    )
    parser.parse_args(argv)

    load_dotenv()
    _configure_logging()

    db_location = os.environ.get("DATABASE_LOCATION", "workhours.db")
    host = "0.0.0.0"
    port_text = os.environ.get("PORT", "8080")
    try:
        port = int(port_text)
    except ValueError:
        parser.error(f"PORT must be an integer, got {port_text!r}")

    server_url = f"{host}:{port}"
    with Database(db_location) as database:
        app = create_app(database)
        logger.info("Starting server on %s...", server_url)
        print(f"Starting server at {server_url}")
        app.run(host=host, port=port)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())