"""
Commerce backend client.

Looks up the customer profile and recent orders for an email address via the
store's REST search endpoints (Magento-style ``searchCriteria`` queries).
Both calls are read-only and authenticated with the static integration token
configured at deploy time.
"""

from __future__ import annotations

from typing import Dict, List, Optional

import httpx
from pydantic import ValidationError

from models.customer import CustomerProfile, OrderRecord
from utils.error_handling import EnrichmentError
from utils.logging_config import get_logger

logger = get_logger(__name__)

ORDER_HISTORY_LIMIT = 5


def _email_filter(field: str, email: str) -> Dict[str, str]:
    prefix = "searchCriteria[filterGroups][0][filters][0]"
    return {
        f"{prefix}[field]": field,
        f"{prefix}[value]": email,
        f"{prefix}[conditionType]": "eq",
    }


class CommerceClient:
    """Read customer and order data for ticket enrichment."""

    def __init__(self, base_url: str, api_token: str, client: Optional[httpx.Client] = None):
        self.base_url = base_url.rstrip("/")
        self.headers = {"Authorization": f"Bearer {api_token}"}
        self.http = client or httpx.Client()

    def get_customer_details(self, email: str) -> Optional[CustomerProfile]:
        """Return the first customer matching ``email``, or None."""
        params = _email_filter("email", email)
        items = self._search("/customers/search", params)
        if not items:
            return None
        try:
            return CustomerProfile.model_validate(items[0])
        except ValidationError as exc:
            raise EnrichmentError(f"Commerce API returned an invalid customer: {exc}") from exc

    def get_order_history(self, email: str) -> List[OrderRecord]:
        """Most recent orders first, at most ORDER_HISTORY_LIMIT."""
        params = _email_filter("customer_email", email)
        params.update(
            {
                "searchCriteria[sortOrders][0][field]": "created_at",
                "searchCriteria[sortOrders][0][direction]": "DESC",
                "searchCriteria[pageSize]": str(ORDER_HISTORY_LIMIT),
                "searchCriteria[currentPage]": "1",
            }
        )
        try:
            orders = [OrderRecord.model_validate(item) for item in self._search("/orders", params)]
        except ValidationError as exc:
            raise EnrichmentError(f"Commerce API returned an invalid order: {exc}") from exc
        # Stable sort keeps backend order for equal timestamps.
        orders.sort(key=lambda o: o.created_at, reverse=True)
        return orders[:ORDER_HISTORY_LIMIT]

    def _search(self, path: str, params: Dict[str, str]) -> List[dict]:
        url = f"{self.base_url}{path}"
        try:
            resp = self.http.get(url, params=params, headers=self.headers)
        except httpx.HTTPError as exc:
            raise EnrichmentError(f"Commerce API unreachable: {exc}") from exc

        if not resp.is_success:
            logger.warning(
                "Commerce API returned an error",
                extra={"path": path, "status": resp.status_code},
            )
            raise EnrichmentError(f"Commerce API {path} returned HTTP {resp.status_code}")

        try:
            data = resp.json()
        except ValueError as exc:
            raise EnrichmentError(f"Commerce API {path} returned invalid JSON") from exc
        if not isinstance(data, dict):
            raise EnrichmentError(f"Commerce API {path} returned an unexpected body")
        return data.get("items") or []
