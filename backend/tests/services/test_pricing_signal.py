"""
Pricing Signal Tests

HTTP suggestion client against httpx.MockTransport, plus the rule-based fallback.
"""
import json
import pytest
from datetime import datetime, timezone
from decimal import Decimal
from uuid import uuid4

import httpx

from rightsdesk.config import Settings
from rightsdesk.exceptions import UpstreamServiceError
from rightsdesk.models import Event
from rightsdesk.services.pricing_signal import (
    HttpPricingSignal,
    RuleBasedPricingSignal,
    clamp_price,
    get_pricing_signal,
)

MIN, MAX, DEFAULT = Decimal("0.99"), Decimal("5.00"), Decimal("2.99")


def make_event(**overrides):
    values = dict(
        id=uuid4(),
        sport="Football",
        league="Ligue 1",
        home_team="PSG",
        away_team="Marseille",
        event_date=datetime(2025, 3, 1, 20, 0, tzinfo=timezone.utc),
        is_pinned=False,
    )
    values.update(overrides)
    return Event(**values)


def http_signal(handler, api_key="secret"):
    client = httpx.Client(base_url="https://pricing.example.com/suggest", transport=httpx.MockTransport(handler))
    return HttpPricingSignal(
        base_url="https://pricing.example.com/suggest",
        min_price=MIN,
        max_price=MAX,
        default_price=DEFAULT,
        api_key=api_key,
        client=client,
    )


class TestHttpPricingSignal:

    def test_posts_event_metadata(self):
        """Should send sport, league, teams and date with the bearer key."""
        seen = {}

        def handler(request):
            seen["auth"] = request.headers.get("Authorization")
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"success": True, "data": {"price": 3.49}})

        price = http_signal(handler).suggest(make_event())

        assert price == Decimal("3.49")
        assert seen["auth"] == "Bearer secret"
        assert seen["body"]["league"] == "Ligue 1"
        assert seen["body"]["home_team"] == "PSG"
        assert seen["body"]["event_date"].startswith("2025-03-01T20:00:00")

    def test_flat_payload(self):
        """Should accept a top-level price."""
        signal = http_signal(lambda request: httpx.Response(200, json={"price": "1.5"}))

        assert signal.suggest(make_event()) == Decimal("1.50")

    @pytest.mark.parametrize("raw,expected", [
        (12.0, Decimal("5.00")),
        (0.10, Decimal("0.99")),
        (2.345, Decimal("2.35")),
    ])
    def test_clamps_and_rounds(self, raw, expected):
        """Should clamp to the platform range and round to cents."""
        signal = http_signal(lambda request: httpx.Response(200, json={"data": {"price": raw}}))

        assert signal.suggest(make_event()) == expected

    @pytest.mark.parametrize("payload", [{"data": {"price": "two euros"}}, {}, [1, 2]])
    def test_unparseable_price_uses_default(self, payload):
        """Should fall back to the default price."""
        signal = http_signal(lambda request: httpx.Response(200, json=payload))

        assert signal.suggest(make_event()) == DEFAULT

    def test_error_status_raises(self):
        """Should raise UpstreamServiceError on a 5xx answer."""
        signal = http_signal(lambda request: httpx.Response(503, json={"error": "down"}))

        with pytest.raises(UpstreamServiceError) as exc_info:
            signal.suggest(make_event())

        assert "503" in exc_info.value.message

    def test_transport_error_raises(self):
        """Should raise UpstreamServiceError when the service is unreachable."""
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(UpstreamServiceError):
            http_signal(handler).suggest(make_event())


class TestRuleBasedPricingSignal:

    def setup_method(self):
        self.signal = RuleBasedPricingSignal(MIN, MAX, DEFAULT)

    def test_premium_league(self):
        """Should price Champions League and Premier League highest."""
        assert self.signal.suggest(make_event(league="UEFA Champions League")) == Decimal("3.99")
        assert self.signal.suggest(make_event(league="Premier League")) == Decimal("3.99")

    def test_major_league(self):
        """Should price Ligue 1 and La Liga in the middle."""
        assert self.signal.suggest(make_event(league="Ligue 1")) == Decimal("2.99")

    def test_pinned_and_default(self):
        """Should favour pinned events over the base price."""
        assert self.signal.suggest(make_event(league="Pro D2", is_pinned=True)) == Decimal("2.49")
        assert self.signal.suggest(make_event(league=None)) == Decimal("1.49")


class TestSignalFactory:

    def test_rule_based_without_url(self):
        """Should fall back to rules when no service URL is configured."""
        signal = get_pricing_signal(Settings(pricing_signal_url=None))
        assert isinstance(signal, RuleBasedPricingSignal)

    def test_http_with_url(self):
        """Should build the HTTP client when a URL is configured."""
        signal = get_pricing_signal(Settings(pricing_signal_url="https://pricing.example.com", pricing_signal_api_key="k"))
        assert isinstance(signal, HttpPricingSignal)
        assert signal.api_key == "k"

    def test_clamp_price(self):
        assert clamp_price(Decimal("4.999"), MIN, MAX) == Decimal("5.00")


class TestSignalLifecycle:

    def test_http_close_releases_client(self):
        """Should close the underlying httpx client."""
        signal = http_signal(lambda request: httpx.Response(200, json={"price": "2.00"}))
        client = signal.get_client()

        signal.close()

        assert client.is_closed
        signal.close()

    def test_rule_based_close_is_noop(self):
        signal = RuleBasedPricingSignal(MIN, MAX, DEFAULT)
        signal.close()
        assert signal.suggest(make_event()) == Decimal("2.99")

    def test_dependency_closes_signal(self, monkeypatch):
        """Should close the request's signal when the dependency is torn down."""
        from rightsdesk.api import pricing as pricing_api

        class TrackedSignal(RuleBasedPricingSignal):
            closed = False

            def close(self):
                self.closed = True

        tracked = TrackedSignal(MIN, MAX, DEFAULT)
        monkeypatch.setattr(pricing_api, "get_pricing_signal", lambda settings: tracked)

        dependency = pricing_api.get_signal()
        assert next(dependency) is tracked
        assert tracked.closed is False

        dependency.close()

        assert tracked.closed is True
