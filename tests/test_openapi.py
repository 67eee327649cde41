import json

from workhours.openapi import swagger_spec, swagger_spec_json


def test_default_server_url():
    spec = swagger_spec({})
    assert spec["servers"][0]["url"] == "http://localhost:8080"
    assert spec["servers"][0]["description"] == "Local server"


def test_server_url_from_environment():
    spec = swagger_spec({"SERVER_HOST": "api.internal", "SERVER_PORT": "9000"})
    assert spec["servers"][0]["url"] == "http://api.internal:9000"


def test_partial_environment_uses_defaults():
    spec = swagger_spec({"SERVER_PORT": "9000"})
    assert spec["servers"][0]["url"] == "http://localhost:9000"


def test_info_block():
    info = swagger_spec({})["info"]
    assert info["title"] == "Work Hours API"
    assert info["version"] == "1.0.0"
    assert swagger_spec({})["openapi"] == "3.0.0"


def test_paths_and_methods():
    paths = swagger_spec({})["paths"]
    assert set(paths) == {"/", "/holidays/{country}"}
    assert set(paths["/"]) == {"get"}
    assert set(paths["/holidays/{country}"]) == {"get", "post"}


def test_query_parameters_defaults():
    params = {p["name"]: p for p in swagger_spec({})["paths"]["/"]["get"]["parameters"]}
    assert params["startDate"]["required"] is True
    assert params["startOfDay"]["default"] == "09:00:00"
    assert params["EndOfDay"]["default"] == "17:00:00"
    assert params["timezone"]["default"] == "Europe/Paris"


def test_schema_references_resolve():
    spec = swagger_spec({})
    schemas = spec["components"]["schemas"]
    text = json.dumps(spec)
    prefix = "#/components/schemas/"
    refs = {
        part.split('"')[0]
        for part in text.split(prefix)[1:]
    }
    assert refs
    assert refs <= set(schemas)


def test_json_round_trip():
    environ = {"SERVER_HOST": "example.com", "SERVER_PORT": "443"}
    assert json.loads(swagger_spec_json(environ)) == swagger_spec(environ)


def test_json_is_compact():
    text = swagger_spec_json({})
    assert "\n" not in text
    assert ": " not in text.replace('e.g. "', "")
    assert text.startswith("{")


def test_holiday_schema_requires_date():
    holiday = swagger_spec({})["components"]["schemas"]["Holiday"]
    assert holiday["required"] == ["date"]
    assert set(holiday["properties"]) == {"date", "description"}