from datetime import datetime, timedelta

from kemai.api import TimeSheet
from kemai.events_monitor import KimaiEventsMonitor
from kemai.reply import ApiResult


class FakeClient:
    def __init__(self):
        self.active = []
        self.fail = False
        self.calls = 0

    def request_active_timesheets(self):
        self.calls += 1
        result = ApiResult()
        if self.fail:
            result.set_error("boom")
        else:
            result.set_result(list(self.active))
        return result


def make_monitor():
    client = FakeClient()
    monitor = KimaiEventsMonitor(client)
    changes = []
    monitor.on_current_timesheet_changed(lambda: changes.append(monitor.current_timesheet))
    return client, monitor, changes


def test_first_refresh_with_running_timesheet():
    client, monitor, changes = make_monitor()
    client.active = [TimeSheet(id=3, description="work")]
    monitor.refresh_current_timesheet()
    assert monitor.has_current_timesheet
    assert monitor.current_timesheet.id == 3
    assert len(changes) == 1


def test_first_refresh_without_timesheet_still_notifies():
    client, monitor, changes = make_monitor()
    monitor.refresh_current_timesheet()
    assert not monitor.has_current_timesheet
    assert changes == [None]


def test_same_timesheet_does_not_notify_again():
    client, monitor, changes = make_monitor()
    client.active = [TimeSheet(id=3)]
    monitor.refresh_current_timesheet()
    monitor.refresh_current_timesheet()
    assert len(changes) == 1


def test_other_timesheet_notifies():
    client, monitor, changes = make_monitor()
    client.active = [TimeSheet(id=3)]
    monitor.refresh_current_timesheet()
    client.active = [TimeSheet(id=4)]
    monitor.refresh_current_timesheet()
    assert [timesheet.id for timesheet in changes] == [3, 4]


def test_stopped_timesheet_clears_current():
    client, monitor, changes = make_monitor()
    client.active = [TimeSheet(id=3)]
    monitor.refresh_current_timesheet()
    client.active = []
    monitor.refresh_current_timesheet()
    assert monitor.current_timesheet is None
    assert len(changes) == 2
    monitor.refresh_current_timesheet()
    assert len(changes) == 2


def test_error_keeps_current_state():
    client, monitor, changes = make_monitor()
    client.active = [TimeSheet(id=3)]
    monitor.refresh_current_timesheet()
    client.fail = True
    monitor.refresh_current_timesheet()
    assert monitor.current_timesheet.id == 3
    assert len(changes) == 1


def test_tick_before_first_update_does_nothing():
    client, monitor, _ = make_monitor()
    assert monitor.tick(True, 0) is False
    assert client.calls == 0


def test_tick_refreshes_after_delay():
    client, monitor, _ = make_monitor()
    monitor.refresh_current_timesheet()
    later = datetime.now() + timedelta(seconds=10)
    assert monitor.tick(True, 5, later) is True
    assert client.calls == 2


def test_tick_waits_for_delay_and_respects_switch():
    client, monitor, _ = make_monitor()
    monitor.refresh_current_timesheet()
    later = datetime.now() + timedelta(seconds=10)
    assert monitor.tick(False, 5, later) is False
    assert monitor.tick(True, 3600, datetime.now()) is False
    assert client.calls == 1