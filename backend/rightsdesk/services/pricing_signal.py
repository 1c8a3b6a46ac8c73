"""
Pricing Signal

Source of the automatic (computed) price for an event. The HTTP client
talks to an external suggestion service; the rule-based signal is used
when no service is configured.
"""
import logging
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Dict, Optional

import httpx

from rightsdesk.config import Settings
from rightsdesk.exceptions import UpstreamServiceError
from rightsdesk.models import Event

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


def clamp_price(value: Decimal, minimum: Decimal, maximum: Decimal) -> Decimal:
    """Clamp to the platform range and round to cents"""
    return max(minimum, min(maximum, value)).quantize(CENT, rounding=ROUND_HALF_UP)


class PricingSignal:
    """Base class for computed price sources"""

    def __init__(self, min_price: Decimal, max_price: Decimal, default_price: Decimal):
        self.min_price = min_price
        self.max_price = max_price
        self.default_price = default_price

    def suggest(self, event: Event) -> Decimal:
        """Return a price within [min_price, max_price] rounded to cents"""
        raise NotImplementedError

    def close(self) -> None:
        """Release resources held by the signal"""


class RuleBasedPricingSignal(PricingSignal):
    """League and pin based price heuristics"""

    PREMIUM_LEAGUES = ("champions", "premier")
    MAJOR_LEAGUES = ("ligue 1", "la liga")

    def suggest(self, event: Event) -> Decimal:
        league = (event.league or "").lower()

        if any(name in league for name in self.PREMIUM_LEAGUES):
            price = Decimal("3.99")
        elif any(name in league for name in self.MAJOR_LEAGUES):
            price = Decimal("2.99")
        elif event.is_pinned:
            price = Decimal("2.49")
        else:
            price = Decimal("1.49")

        return clamp_price(price, self.min_price, self.max_price)


class HttpPricingSignal(PricingSignal):
    """
    Client for the external price suggestion service.

    The service receives the event's sport, league, teams and date and
    answers with {"data": {"price": ...}} or {"price": ...}. Unparseable
    prices fall back to the default price; transport errors and error
    statuses raise UpstreamServiceError.
    """

    def __init__(
        self,
        base_url: str,
        min_price: Decimal,
        max_price: Decimal,
        default_price: Decimal,
        api_key: Optional[str] = None,
        timeout: float = 10.0,
        client: Optional[httpx.Client] = None,
    ):
        super().__init__(min_price, max_price, default_price)
        self.base_url = base_url
        self.api_key = api_key
        self.timeout = timeout
        self._client = client

    def get_client(self) -> httpx.Client:
        if self._client is None or self._client.is_closed:
            self._client = httpx.Client(base_url=self.base_url, timeout=self.timeout)
        return self._client

    def close(self) -> None:
        if self._client and not self._client.is_closed:
            self._client.close()
            self._client = None

    def _get_headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def _parse_price(self, payload: Any) -> Decimal:
        raw = None
        if isinstance(payload, dict):
            data = payload.get("data")
            raw = data.get("price") if isinstance(data, dict) else payload.get("price")

        try:
            price = Decimal(str(raw).strip())
        except (InvalidOperation, TypeError, ValueError):
            logger.warning(f"Unparseable price suggestion {raw!r}, using default {self.default_price}")
            return clamp_price(self.default_price, self.min_price, self.max_price)

        if not price.is_finite():
            return clamp_price(self.default_price, self.min_price, self.max_price)
        return clamp_price(price, self.min_price, self.max_price)

    def suggest(self, event: Event) -> Decimal:
        body = {
            "sport": event.sport,
            "league": event.league,
            "home_team": event.home_team,
            "away_team": event.away_team,
            "event_date": event.event_date.isoformat() if event.event_date else None,
        }

        try:
            response = self.get_client().post("", json=body, headers=self._get_headers())
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"Price suggestion HTTP {e.response.status_code} for event {event.id}")
            raise UpstreamServiceError(
                f"Price suggestion service returned {e.response.status_code}", e
            )
        except httpx.HTTPError as e:
            logger.error(f"Price suggestion request failed for event {event.id}: {e}")
            raise UpstreamServiceError("Price suggestion service unreachable", e)
        except ValueError:
            payload = None

        return self._parse_price(payload)


def get_pricing_signal(settings: Settings) -> PricingSignal:
    """Pick the HTTP signal when a service URL is configured"""
    if settings.pricing_signal_url:
        return HttpPricingSignal(
            base_url=settings.pricing_signal_url,
            min_price=settings.platform_min_price,
            max_price=settings.platform_max_price,
            default_price=settings.default_price,
            api_key=settings.pricing_signal_api_key,
            timeout=settings.pricing_signal_timeout,
        )
    return RuleBasedPricingSignal(
        min_price=settings.platform_min_price,
        max_price=settings.platform_max_price,
        default_price=settings.default_price,
    )
