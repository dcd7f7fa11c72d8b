import pytest

from kemai.api import Activity, Customer, Project, TimeSheet
from kemai.cache import CacheCategory, CacheStatus, KimaiCache
from kemai.reply import ApiResult


CUSTOMERS = [Customer(id=1, name="Acme"), Customer(id=2, name="Globex")]
PROJECTS = [
    Project(id=10, name="Site", customer=Customer(id=1)),
    Project(id=11, name="App", customer=Customer(id=2)),
    Project(id=12, name="Docs", customer=Customer(id=1)),
]
ACTIVITIES = [
    Activity(id=100, name="Dev", project=Project(id=10)),
    Activity(id=101, name="Meeting"),
    Activity(id=102, name="Design", project=Project(id=11)),
]
TIMESHEETS = [TimeSheet(id=5), TimeSheet(id=6)]


class FakeClient:
    def __init__(self, failing=(), deferred=False):
        self.data = {
            "customers": CUSTOMERS,
            "projects": PROJECTS,
            "activities": ACTIVITIES,
            "recent": TIMESHEETS,
        }
        self.failing = set(failing)
        self.deferred = deferred
        self.calls = []
        self.pending = []

    def _make(self, name):
        self.calls.append(name)
        result = ApiResult()
        if self.deferred:
            self.pending.append((name, result))
        else:
            self._complete(name, result)
        return result

    def _complete(self, name, result):
        if name in self.failing:
            result.set_error("boom")
        else:
            result.set_result(list(self.data[name]))

    def finish_all(self):
        for name, result in self.pending:
            self._complete(name, result)
        self.pending.clear()

    def request_customers(self):
        return self._make("customers")

    def request_projects(self):
        return self._make("projects")

    def request_activities(self):
        return self._make("activities")

    def request_recent_timesheets(self):
        return self._make("recent")


def test_new_cache_is_empty():
    cache = KimaiCache()
    assert cache.status is CacheStatus.EMPTY
    assert cache.customers() == []
    assert cache.projects() == []


def test_synchronize_all_categories():
    cache = KimaiCache()
    events = []
    cache.on_synchronize_started(lambda: events.append("started"))
    cache.on_synchronize_finished(lambda: events.append("finished"))
    client = FakeClient()

    cache.synchronize(client)

    assert cache.status is CacheStatus.READY
    assert events == ["started", "finished"]
    assert sorted(client.calls) == ["activities", "customers", "projects", "recent"]
    assert cache.customers() == CUSTOMERS
    assert cache.projects() == PROJECTS
    assert cache.activities() == ACTIVITIES
    assert cache.recent_timesheets() == TIMESHEETS


def test_synchronize_only_requested_categories():
    cache = KimaiCache()
    client = FakeClient()
    cache.synchronize(client, {CacheCategory.CUSTOMERS})
    assert client.calls == ["customers"]
    assert cache.customers() == CUSTOMERS
    assert cache.projects() == []
    assert cache.status is CacheStatus.READY


def test_projects_filtered_by_customer():
    cache = KimaiCache()
    cache.synchronize(FakeClient())
    filtered = cache.projects(1)
    assert [project.id for project in filtered] == [10, 12]
    assert all(project.customer.id == 1 for project in filtered)


def test_activities_filtered_by_project_keep_global_ones():
    cache = KimaiCache()
    cache.synchronize(FakeClient())
    filtered = cache.activities(10)
    assert [activity.id for activity in filtered] == [100, 101]


def test_failed_category_stays_empty_but_sync_finishes():
    cache = KimaiCache()
    finished = []
    cache.on_synchronize_finished(lambda: finished.append(True))
    cache.synchronize(FakeClient(failing={"projects"}))
    assert cache.projects() == []
    assert cache.customers() == CUSTOMERS
    assert cache.status is CacheStatus.READY
    assert finished == [True]


def test_second_synchronize_ignored_while_pending():
    cache = KimaiCache()
    client = FakeClient(deferred=True)
    cache.synchronize(client)
    assert cache.status is CacheStatus.SYNC_PENDING

    cache.synchronize(client)
    assert len(client.calls) == 4

    client.finish_all()
    assert cache.status is CacheStatus.READY
    assert cache.customers() == CUSTOMERS


def test_resync_after_completion_clears_and_refills():
    cache = KimaiCache()
    client = FakeClient()
    cache.synchronize(client)
    client.data["customers"] = [Customer(id=9, name="Initech")]
    cache.synchronize(client, [CacheCategory.CUSTOMERS])
    assert [customer.id for customer in cache.customers()] == [9]


@pytest.mark.parametrize("category", list(CacheCategory))
def test_each_category_alone_reaches_ready(category):
    cache = KimaiCache()
    cache.synchronize(FakeClient(), {category})
    assert cache.status is CacheStatus.READY