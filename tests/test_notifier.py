from types import SimpleNamespace

import pytest
import requests

import notifier as notifier_module
from models import Listing
from notifier import SlackNotifier
from scrapers import SearchRequest, ValidationError

API = "https://slack.test/api"


def slack_response(status=200, body=None, headers=None):
    body = {"ok": True, "channel": "C123", "ts": "1.2"} if body is None else body
    return SimpleNamespace(status_code=status, headers=headers or {}, text=str(body), json=lambda: body)


class FakePost:
    def __init__(self, *results):
        self.results = list(results)
        self.calls = []

    def __call__(self, url, json=None, timeout=None):
        self.calls.append((url, json))
        result = self.results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture
def slack(monkeypatch):
    monkeypatch.setattr(notifier_module.time, "sleep", lambda seconds: None)
    client = SlackNotifier("xoxb-test", "C123", api_url=API)

    def install(*results):
        post = FakePost(*results)
        monkeypatch.setattr(client.session, "post", post)
        return post

    client.install = install
    return client


def test_token_is_sent_as_bearer(slack):
    assert slack.session.headers["Authorization"] == "Bearer xoxb-test"


def test_missing_token_is_rejected():
    with pytest.raises(ValidationError, match="SLACK_ACCESS_TOKEN"):
        SlackNotifier("", "C123")


def test_missing_channel_is_rejected():
    with pytest.raises(ValidationError):
        SlackNotifier("xoxb-test", "")


def test_notify_posts_listing_summary(slack):
    post = slack.install(slack_response())
    listing = Listing(id="1", title="Bike", price=80.0, condition="Used", url="https://www.carousell.sg/p/1/")

    assert slack.notify(listing) is True

    [(url, payload)] = post.calls
    assert url == f"{API}/chat.postMessage"
    assert payload == {"channel": "C123", "text": listing.summary()}


def test_slack_error_returns_false(slack):
    slack.install(slack_response(body={"ok": False, "error": "channel_not_found"}))
    assert slack.notify(Listing(id="1")) is False


def test_rate_limit_is_retried(slack):
    post = slack.install(slack_response(status=429, headers={"Retry-After": "1"}), slack_response())

    assert slack.send_message("hello") is True
    assert len(post.calls) == 2


def test_network_errors_are_retried_then_give_up(slack):
    post = slack.install(*[requests.ConnectionError("down")] * 3)

    assert slack.send_message("hello") is False
    assert len(post.calls) == 3


def test_http_error_is_not_retried(slack):
    post = slack.install(slack_response(status=500, body={}))

    assert slack.send_message("hello") is False
    assert len(post.calls) == 1


def test_startup_message_describes_search(slack):
    post = slack.install(slack_response())

    slack.send_startup_message(SearchRequest(["bike"], price_floor=10), 15)

    text = post.calls[0][1]["text"]
    assert '"bike"' in text and "min S$10" in text and "15 min" in text


def test_error_message_is_truncated(slack):
    post = slack.install(slack_response())

    slack.send_error_message("x" * 5000)

    assert len(post.calls[0][1]["text"]) < 2100


def test_token_check_uses_auth_test(slack):
    post = slack.install(slack_response(body={"ok": True}))
    assert slack.test_token() is True
    assert post.calls[0][0] == f"{API}/auth.test"
