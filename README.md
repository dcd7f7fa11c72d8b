# kemai

A Python library for working with a Kimai time tracking server: the data
types of its JSON API, a client that sends requests through `requests`, a
local cache, session state, an update check, and toolkit-free view models.

## What is in the package

- `kemai.api`: data classes `Customer`, `Project`, `Activity`, `TimeSheet`,
  `Task`, `User`, `Plugin`, `KimaiVersion`, `TimeSheetConfig`; enums
  `ApiPlugin`, `TrackingMode`, `TaskStatus`; `plugin_by_name`,
  `parse_version` (versions are tuples of ints), `can_request_plugins`
  (true from 1.14.1) and `should_use_api_token` (true from 2.14.0).
- `kemai.parser`: `ApiTypesParser` reads a JSON reply with `value_of(kind)`
  or `array_of(kind)` and raises `KimaiParseError` on invalid JSON, a wrong
  top-level type, a missing required key or a wrong value type.
  `timesheet_to_json`, `customer_to_json`, `project_to_json` and
  `activity_to_json` build request bodies as dicts.
- `kemai.reply`: `ApiResult`, holding the value or error of one request.
  `on_ready` and `on_error` register callbacks that receive the `ApiResult`
  itself; a callback registered after the outcome is known runs at once.
- `kemai.client`: `KimaiClient`, `ApiMethod` and `api_method_path`.
- `kemai.cache`: `KimaiCache` with `CacheCategory` and `CacheStatus`.
- `kemai.events_monitor`: `KimaiEventsMonitor`, which follows the running
  time sheet.
- `kemai.session`: `KemaiSession`, which ties a client, a cache and a
  monitor together.
- `kemai.updater`: `KemaiUpdater` and `VersionDetails`.
- `kemai.data_list`: `KimaiDataListModel`, `KimaiDataFilter`,
  `validate_completion` and `CompletionState`.
- `kemai.task_models`: `TaskListModel` and `TaskFilter`.
- `kemai.logger_model`: `LoggerTreeModel` (the last 500 log entries),
  `LoggerEntry` and the `logging` handler `LoggerTreeModelHandler`.
- `kemai.duration`: `parse_duration` and `is_acceptable_duration` for
  `hours[:minutes]` text.
- `kemai.helpers`: `duration_string`, `log_dir_path`, `log_file_path`.
- `kemai.settings`: data classes `Settings`, `Profile`, `KemaiOptions`,
  `EventsSettings`; `Settings.find_profile` looks a profile up by UUID.

## Installation

```
pip install kemai
```

To run the tests:

```
pip install "kemai[test]"
pytest
```

## Usage

### Talking to a server

Requests are sent when the method is called, so the returned `ApiResult`
already holds its value or error.

```python
import requests

from kemai.client import KimaiClient

client = KimaiClient("https://kimai.example.com", requests.Session())
client.api_token = "token"          # Kimai 2.14 and later
# or: client.set_legacy_auth("user", "token")

result = client.request_kimai_version()
result.on_ready(lambda r: print("Connected to Kimai", r.result.kimai))
result.on_error(lambda r: print("Request failed:", r.error_message))
```

Without an API token the client sends `X-AUTH-USER` / `X-AUTH-TOKEN`
headers; with one it sends `Authorization: Bearer ...`.

### Parsing replies yourself

```python
from kemai.api import Project
from kemai.parser import ApiTypesParser, KimaiParseError

try:
    projects = ApiTypesParser(b'[{"id": 3, "name": "Website"}]').array_of(Project)
except KimaiParseError as exc:
    print(exc)
```

### Version features

```python
from kemai.api import parse_version, should_use_api_token

if should_use_api_token(parse_version("2.14.0")):
    print("Use an API token instead of username and password")
```

### Durations

```python
from datetime import datetime

from kemai.duration import parse_duration
from kemai.helpers import duration_string

parse_duration("1:30")   # 5400
duration_string(datetime(2024, 1, 1, 9, 0), datetime(2024, 1, 1, 10, 5, 7))  # "01:05:07"
```

### Caching and sessions

```python
from kemai.cache import CacheCategory, KimaiCache
from kemai.session import KemaiSession

cache = KimaiCache()
cache.on_synchronize_finished(lambda: print(len(cache.customers()), "customers"))
cache.synchronize(client, None)          # None means every category

projects = cache.projects(customer_id=1)
activities = cache.activities(project_id=3)   # includes activities with no project

session = KemaiSession(client)
session.refresh_session_infos()          # user, server version, tracking mode, plugins
session.refresh_cache(CacheCategory.PROJECTS)
session.refresh_current_timesheet()
print(session.has_current_timesheet, session.current_timesheet)
```

`KimaiEventsMonitor.tick(auto_refresh, delay_seconds, now)` asks the server
again once the last answer is at least `delay_seconds` old; the caller
decides how often to call it.

### Update check

```python
from kemai.updater import KemaiUpdater

updater = KemaiUpdater("https://api.example.com/releases/latest")
details = updater.check_available_new_version((0, 1, 0), silence_if_no_new=False)
```

The reply is read for `tag_name`, `body` and `html_url`. A newer version
gives filled-in `VersionDetails`; otherwise empty details are returned, or
`None` when `silence_if_no_new` is set or the request failed.

## What the package does not do

- It has no graphical interface and no command-line program; the view
  models only hold and filter data for one.
- `Settings` and its parts are plain data classes: nothing loads them from
  or saves them to disk.
- It does not watch the desktop for idle time or screen locking, and does
  not install trusted certificates; `Settings.trusted_certificates` is only
  stored.
- Polling is not scheduled: call `KimaiEventsMonitor.tick` yourself.