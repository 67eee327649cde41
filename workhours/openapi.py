"""OpenAPI description of the work hours service."""

from __future__ import annotations

import json
import os
from collections.abc import Iterable, Mapping
from typing import Any, NamedTuple, Optional

_API_TITLE = "Work Hours API"
_API_VERSION = "1.0.0"
_API_SUMMARY = (
    "API for calculating work hours between dates, taking into account "
    "country-specific holidays and timezones"
)


class _Param(NamedTuple):
    name: str
    required: bool
    kind: str
    fmt: Optional[str]
    description: str
    default: Optional[str] = None


_EITHER_END = "(use either endDate or durationSeconds)"

_QUERY_PARAMS: tuple[_Param, ...] = (
    _Param("startDate", True, "string", "date-time", "Start date in RFC3339 format"),
    _Param("endDate", False, "string", "date-time", f"End date in RFC3339 format {_EITHER_END}"),
    _Param("durationSeconds", False, "integer", None, f"Duration in seconds {_EITHER_END}"),
    _Param(
        "startOfDay", False, "string", "time",
        'Time to start counting work hours from (e.g. "07:00:00")', "09:00:00",
    ),
    _Param(
        "EndOfDay", False, "string", "time",
        'Time to stop counting work hours from (e.g. "18:00:00")', "17:00:00",
    ),
    _Param("country", True, "string", None, 'Country code (e.g. "fr" for France)', "fr"),
    _Param(
        "timezone", True, "string", None,
        'Timezone in IANA format (e.g. "Europe/Paris")', "Europe/Paris",
    ),
)


def _schema(kind: str, fmt: Optional[str] = None) -> dict[str, str]:
    schema = {"type": kind}
    if fmt is not None:
        schema["format"] = fmt
    return schema


def _ref(name: str) -> dict[str, str]:
    return {"$ref": f"#/components/schemas/{name}"}


def _array_of(name: str) -> dict[str, Any]:
    return {"type": "array", "items": _ref(name)}


def _object(
    properties: Mapping[str, dict[str, Any]], required: Iterable[str] = ()
) -> dict[str, Any]:
    schema: dict[str, Any] = {"type": "object"}
    required = list(required)
    if required:
        schema["required"] = required
    schema["properties"] = dict(properties)
    return schema


def _content(media_type: str, schema: dict[str, Any]) -> dict[str, Any]:
    return {media_type: {"schema": schema}}


def _response(description: str, media_type: str, schema: dict[str, Any]) -> dict[str, Any]:
    return {"description": description, "content": _content(media_type, schema)}


def _parameter(location: str, param: _Param) -> dict[str, Any]:
    entry: dict[str, Any] = {
        "in": location,
        "name": param.name,
        "required": param.required,
        "schema": _schema(param.kind, param.fmt),
        "description": param.description,
    }
    if param.default is not None:
        entry["default"] = param.default
    return entry


def _country_parameter() -> dict[str, Any]:
    return _parameter("path", _Param("country", True, "string", None, "Country code"))


def _work_hours_operation() -> dict[str, Any]:
    error_schema = _object({"error": _schema("string")})
    return {
        "summary": "Calculate work hours between dates",
        "description": (
            "Calculates the number of work hours between two dates, taking "
            "into account weekends, holidays, and timezones"
        ),
        "parameters": [_parameter("query", p) for p in _QUERY_PARAMS],
        "responses": {
            "200": _response(
                "Successful response", "application/json", _ref("WorkHoursResponse")
            ),
            "400": _response("Bad request", "application/json", error_schema),
        },
    }


def _holiday_operations() -> dict[str, Any]:
    return {
        "post": {
            "summary": "Add holidays for a country",
            "description": "Adds multiple holidays for the specified country",
            "parameters": [_country_parameter()],
            "requestBody": {
                "required": True,
                "content": _content("application/json", _array_of("Holiday")),
            },
            "responses": {
                "201": _response(
                    "Holiday added successfully", "text/plain", _schema("string")
                )
            },
        },
        "get": {
            "summary": "List holidays for a country",
            "description": "Adds a holiday for the specified country",
            "parameters": [_country_parameter()],
            "responses": {
                "200": _response(
                    "List of holidays for the specified country",
                    "application/json",
                    _array_of("Holiday"),
                )
            },
        },
    }


def _schemas() -> dict[str, Any]:
    request_fields = {p.name: (p.kind, p.fmt) for p in _QUERY_PARAMS}
    # The request schema names its day bounds in camel case and types them as "time".
    request_fields["startOfDay"] = ("time", None)
    request_fields.pop("EndOfDay")
    request_fields["endOfDay"] = ("time", None)
    order = ("startDate", "endDate", "durationSeconds", "startOfDay", "endOfDay",
             "country", "timezone")

    float_fields = ("workHours", "workMinutes", "workSeconds")
    date_fields = ("startDate", "endDate")
    response_props = {name: _schema("number", "float") for name in float_fields}
    response_props.update({name: _schema("string", "date-time") for name in date_fields})

    return {
        "WorkHoursRequest": _object({name: _schema(*request_fields[name]) for name in order}),
        "Holiday": _object(
            {"date": _schema("string", "date-time"), "description": _schema("string")},
            required=["date"],
        ),
        "WorkHoursResponse": _object(response_props),
    }


def swagger_spec(environ: Mapping[str, str] | None = None) -> dict[str, Any]:
    """Build the OpenAPI document; the server URL comes from SERVER_HOST and SERVER_PORT."""
    env = os.environ if environ is None else environ
    host = env.get("SERVER_HOST", "localhost")
    port = env.get("SERVER_PORT", "8080")

    return {
        "openapi": "3.0.0",
        "info": {"title": _API_TITLE, "description": _API_SUMMARY, "version": _API_VERSION},
        "servers": [{"url": f"http://{host}:{port}", "description": "Local server"}],
        "paths": {
            "/": {"get": _work_hours_operation()},
            "/holidays/{country}": _holiday_operations(),
        },
        "components": {"schemas": _schemas()},
    }


def swagger_spec_json(environ: Mapping[str, str] | None = None) -> str:
    """Return the OpenAPI document as compact JSON text."""
    return json.dumps(swagger_spec(environ), separators=(",", ":"), sort_keys=True)