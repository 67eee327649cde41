# workhours

A small HTTP service that tells you how many working hours lie between two
instants. Weekends are skipped, as are holidays that you register per country,
and every calculation happens in the IANA timezone you ask for.

## Installation

```
pip install .
```

## Running the server

```
workhours
```

The server listens on `0.0.0.0`, on the port that `PORT` gives (by default
`8080`; a value that is not an integer stops the command with an error).
Holidays are kept in an SQLite file whose location comes from
`DATABASE_LOCATION` (by default `workhours.db`). `LOG_LEVEL` sets the logging
level (by default `WARNING`). These variables may also be set in a `.env` file
in the working directory. The command takes no options besides `--help`.

## Endpoints

### `GET /`

Calculates work hours. Query parameters:

| name              | required | default    | meaning                                        |
|-------------------|----------|------------|------------------------------------------------|
| `startDate`       | yes      |            | RFC 3339 start instant                         |
| `endDate`         | one of   |            | RFC 3339 end instant                           |
| `durationSeconds` | one of   |            | length of the interval in seconds              |
| `startOfDay`      | no       | `09:00:00` | when a working day begins (`HH:MM:SS`)         |
| `endOfDay`        | no       | `17:00:00` | when a working day ends (`HH:MM:SS`)           |
| `country`         | no       |            | country code whose holidays apply              |
| `timezone`        | yes      |            | IANA timezone name, for example `Europe/Paris` |

Either `endDate` or `durationSeconds` must be given; when both are, `endDate`
is used. The wall-clock times written in the dates are read in the requested
timezone, and their offsets are ignored. The start must be strictly before the
end. Invalid dates, times or timezones, and local times that are ambiguous or
do not exist in the timezone, give a `400` response.

Saturdays, Sundays and the country's stored holidays count for nothing. The
first and last day count only the part that falls within the working day; the
days between count the whole working day.

```
GET /?startDate=2023-10-02T09:00:00Z&endDate=2023-10-06T17:00:00Z&country=us&timezone=UTC
```

```json
{
  "end_date": "2023-10-06T17:00:00+00:00",
  "start_date": "2023-10-02T09:00:00+00:00",
  "work_hours": 40.0,
  "work_minutes": 2400.0,
  "work_seconds": 144000.0
}
```

### `POST /holidays/{country}`

Registers a list of holidays for a country. The country code is stored in
lower case. Each entry needs a `date`; `description` is optional. The response
is a JSON string such as `"1 holidays added successfully"`; a body that is not
a JSON array of such objects gives a `400` response.

```json
[{"date": "2023-12-25T00:00:00Z", "description": "Christmas"}]
```

### `GET /holidays/{country}`

Lists the holidays stored for a country, each with its `id`, `date`,
`description` and `country`.

### Other routes

* `GET /health` answers `OK`.
* `GET /schema` returns the OpenAPI 3 description of the API. The server URL
  in it is built from `SERVER_HOST` and `SERVER_PORT`, by default
  `localhost` and `8080`.
* `GET /swagger` serves `swagger-ui.html` from the working directory.

## Using it as a library

```python
from workhours.db import Database
from workhours.calculator import WorkHoursRequest, calculate_work_hours

database = Database(":memory:")
request = WorkHoursRequest.from_dict({
    "startDate": "2023-10-02T09:00:00Z",
    "endDate": "2023-10-02T17:00:00Z",
    "timezone": "UTC",
})
print(calculate_work_hours(database, request).work_hours)  # 8.0
```

`WorkHoursRequest.from_dict` and `calculate_work_hours` raise
`InvalidRequestError` for a request they cannot handle. `Database` stores
`Holiday` records through `add_holiday`, `get_holidays_by_country`,
`get_all_holidays` and `delete_holiday`, and can be used as a context manager.
`workhours.openapi.swagger_spec()` returns the OpenAPI document as a dictionary.
To embed the web application elsewhere, build it with
`workhours.app.create_app(database)`.

## What it does not do

* The package does not ship a `swagger-ui.html` page; `GET /swagger` answers
  with a `500` error unless such a file is placed in the working directory.
* Timezones come from the system's IANA timezone database. Where none is
  installed, only `UTC` is accepted.
* There is no authentication: anyone who can reach the server can add holidays.

## Tests

```
pip install .[test]
pytest
```