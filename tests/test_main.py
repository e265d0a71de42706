import pytest

import config
import main
from models import Listing
from scrapers import FetchError


class FakeScraper:
    listings = [
        Listing(id="1", title="Bike", price=80.0, condition="Used", url="https://www.carousell.sg/p/1/"),
        Listing(id="2", title="Helmet", price=20.0, condition="New", url="https://www.carousell.sg/p/2/"),
    ]
    error = None
    requests = []

    def __init__(self, *args, **kwargs):
        self.closed = False

    def get_listings(self, request):
        FakeScraper.requests.append(request)
        if FakeScraper.error:
            raise FakeScraper.error
        return list(self.listings)

    def close(self):
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()


@pytest.fixture(autouse=True)
def fake_scraper(monkeypatch):
    FakeScraper.error = None
    FakeScraper.requests = []
    monkeypatch.setattr(main, "CarousellScraper", FakeScraper)
    monkeypatch.setattr(main, "setup_logging", lambda verbose: None)
    return FakeScraper


def test_get_shorthand_prints_summaries(capsys):
    assert main.main(["get", "bike", "-s"]) == 0

    out = capsys.readouterr().out
    assert "Bike - S$80 - Used\nhttps://www.carousell.sg/p/1/\n" in out
    assert out.index("Bike") < out.index("Helmet")


def test_get_prints_count(capsys):
    assert main.main(["get", "bike"]) == 0
    assert "Obtained 2 listings" in capsys.readouterr().out


def test_get_passes_filters(fake_scraper):
    main.main(["get", "road bike", "-r", "-f", "100", "-c", "900"])

    [request] = fake_scraper.requests
    assert request.search_terms == ["road bike"]
    assert (request.price_floor, request.price_ceil, request.recent) == (100, 900, True)


def test_blank_search_term_fails_before_fetch(capsys, fake_scraper):
    assert main.main(["get", "  "]) == 1

    assert fake_scraper.requests == []
    assert "Something unexpected happened" in capsys.readouterr().out


def test_fetch_error_exits_with_failure(capsys, fake_scraper):
    fake_scraper.error = FetchError("timed out")

    assert main.main(["get", "bike"]) == 1
    assert "Something unexpected happened" in capsys.readouterr().out


def test_notify_without_token_fails(monkeypatch, capsys):
    monkeypatch.setattr(config, "SLACK_ACCESS_TOKEN", "")

    assert main.main(["notify", "bike", "--slack-channel", "C123"]) == 1
    assert "Something unexpected happened" in capsys.readouterr().out


@pytest.mark.parametrize("argv", [
    ["notify", "bike", "--slack-channel", "C1", "-i", "0"],
    ["get", "bike", "-f", "-5"],
    ["get"],
])
def test_invalid_arguments_exit(argv):
    with pytest.raises(SystemExit):
        main.main(argv)


class FakeNotifier:
    instances = []

    def __init__(self, token, channel):
        self.channel = channel
        self.messages = []
        FakeNotifier.instances.append(self)

    def test_token(self):
        return True

    def notify(self, listing):
        self.messages.append(listing.summary())
        return True

    def send_startup_message(self, request, interval):
        self.messages.append("startup")

    def send_error_message(self, error):
        self.messages.append(f"error: {error}")

    def close(self):
        pass


class StubPoller:
    def __init__(self, scraper, request, notify, interval_minutes):
        self.scraper = scraper
        self.interval_minutes = interval_minutes
        self.running = False

    def run(self):
        raise FetchError("site down")

    def stop(self):
        self.running = False


def test_notify_reports_fetch_error_to_slack(monkeypatch, capsys):
    FakeNotifier.instances = []
    monkeypatch.setattr(main, "SlackNotifier", FakeNotifier)
    monkeypatch.setattr(main, "Poller", StubPoller)
    monkeypatch.setattr(main, "install_signal_handlers", lambda poller: None)

    assert main.main(["notify", "bike", "--slack-channel", "C9", "-i", "3"]) == 1

    [notifier] = FakeNotifier.instances
    assert notifier.channel == "C9"
    assert notifier.messages == ["startup", "error: CarouWatch stopped: site down"]
    out = capsys.readouterr().out
    assert "Interval: 3" in out
    assert "Something unexpected happened" in out
