"""HTTP client for the external pincode-serviceability oracle (Delhivery API).

Request:  GET {DELIVERY_API_URL}?filter_codes=<pincode>
          Authorization: Token <DELIVERY_API_KEY>
Response: {"delivery_codes": [{"postal_code": {"pin": 110001, "cod": "Y",
          "district": "New Delhi", "state_code": "DL", ...}}]}

One bounded-timeout attempt per lookup, no retry. Every failure mode
(missing key, timeout, transport error, non-2xx, malformed JSON) surfaces
as DeliveryOracleError.
"""

import logging
from typing import Any

import httpx

from src.mk_delivery.domain.models import OracleMatch
from src.mk_delivery.domain.oracle import DeliveryOracleError

logger = logging.getLogger(__name__)


def _parse_match(pincode: str, payload: Any) -> OracleMatch | None:
    if not isinstance(payload, dict):
        raise DeliveryOracleError("Malformed oracle response")
    codes = payload.get("delivery_codes") or []
    if not isinstance(codes, list):
        raise DeliveryOracleError("Malformed oracle response")
    if not codes:
        return None
    code = codes[0].get("postal_code") if isinstance(codes[0], dict) else None
    if not code:
        return None
    if not isinstance(code, dict):
        raise DeliveryOracleError("Malformed oracle response")
    return OracleMatch(
        pincode=pincode,
        cash_on_delivery=code.get("cod") == "Y",
        district=code.get("district") or code.get("district_name"),
        state=code.get("state") or code.get("state_code"),
    )


class HttpDeliveryOracle:
    def __init__(
        self,
        base_url: str,
        api_key: str | None,
        timeout_seconds: float,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url
        self._api_key = api_key
        self._timeout = httpx.Timeout(timeout_seconds)
        self._transport = transport

    async def lookup(self, pincode: str) -> OracleMatch | None:
        if not self._api_key:
            raise DeliveryOracleError("Delivery API key not configured")

        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                resp = await client.get(
                    self._base_url,
                    params={"filter_codes": pincode},
                    headers={"Authorization": f"Token {self._api_key}"},
                )
        except httpx.HTTPError as exc:
            raise DeliveryOracleError(f"Oracle request failed: {exc!r}") from exc

        if not resp.is_success:
            raise DeliveryOracleError(f"Oracle responded {resp.status_code}")

        try:
            payload = resp.json()
        except ValueError as exc:
            raise DeliveryOracleError("Oracle returned invalid JSON") from exc
        return _parse_match(pincode, payload)
