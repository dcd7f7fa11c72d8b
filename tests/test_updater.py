import requests
import responses

from kemai.updater import KemaiUpdater, VersionDetails

URL = "https://releases.example.com/latest"
RELEASE = {
    "tag_name": "1.2.0",
    "body": "Bug fixes",
    "html_url": "https://releases.example.com/1.2.0",
}


def make_updater():
    updater = KemaiUpdater(URL, http_session=requests.Session())
    received = []
    updater.on_check_finished(received.append)
    return updater, received


def test_newer_version_is_reported():
    updater, received = make_updater()
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, URL, json=RELEASE)
        details = updater.check_available_new_version((1, 1, 0))
        accept = rsps.calls[0].request.headers["accept"]
    assert details == VersionDetails(vn=(1, 2, 0), description="Bug fixes", url=RELEASE["html_url"])
    assert received == [details]
    assert accept == "application/vnd.github.v3+json"


def test_same_version_silent_reports_nothing():
    updater, received = make_updater()
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, URL, json=RELEASE)
        details = updater.check_available_new_version((1, 2, 0), silence_if_no_new=True)
    assert details is None
    assert received == []


def test_same_version_not_silent_reports_empty_details():
    updater, received = make_updater()
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, URL, json=RELEASE)
        details = updater.check_available_new_version((1, 2, 0))
    assert details == VersionDetails()
    assert received == [VersionDetails()]


def test_http_error_reports_nothing():
    updater, received = make_updater()
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, URL, status=404)
        details = updater.check_available_new_version((0, 0, 0))
    assert details is None
    assert received == []


def test_default_since_version_finds_any_release():
    updater, _ = make_updater()
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, URL, json=RELEASE)
        details = updater.check_available_new_version()
    assert details.vn == (1, 2, 0)


def test_invalid_document_counts_as_no_new_version():
    updater, received = make_updater()
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, URL, body="not json")
        details = updater.check_available_new_version((0, 0, 0))
    assert details == VersionDetails()
    assert received == [VersionDetails()]