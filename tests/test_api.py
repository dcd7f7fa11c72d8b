import pytest

from kemai.api import (
    ApiPlugin,
    Project,
    TimeSheet,
    can_request_plugins,
    parse_version,
    plugin_by_name,
    should_use_api_token,
)


def test_plugin_by_name_task_management():
    assert plugin_by_name("TaskManagementBundle") is ApiPlugin.TASK_MANAGEMENT


@pytest.mark.parametrize("name", ["", "taskmanagementbundle", "OtherBundle"])
def test_plugin_by_name_unknown(name):
    assert plugin_by_name(name) is ApiPlugin.UNKNOWN


def test_parse_version_full():
    assert parse_version("1.14.1") == (1, 14, 1)


def test_parse_version_stops_at_suffix():
    assert parse_version("2.0-beta.3") == (2, 0)


def test_parse_version_without_digits_is_empty():
    assert parse_version("v1") == ()
    assert parse_version("") == parse_version("v1")


def test_parse_version_roundtrip_of_plain_numbers():
    version = parse_version("3.7.12")
    assert ".".join(str(segment) for segment in version) == "3.7.12"


@pytest.mark.parametrize(
    "text, expected",
    [("1.14.1", True), ("1.14.0", False), ("1.14", False), ("1.15", True), ("2.0", True), ("0.9.9", False)],
)
def test_can_request_plugins(text, expected):
    assert can_request_plugins(parse_version(text)) is expected


@pytest.mark.parametrize(
    "text, expected",
    [("2.14.0", True), ("2.14", False), ("2.13.9", False), ("2.15.1", True), ("1.30", False)],
)
def test_should_use_api_token(text, expected):
    assert should_use_api_token(parse_version(text)) is expected


def test_nested_defaults_are_not_shared():
    first, second = Project(), Project()
    first.customer.id = 42
    assert second.customer.id == 0

    sheet_a, sheet_b = TimeSheet(), TimeSheet()
    sheet_a.tags.append("tag")
    assert sheet_b.tags == []