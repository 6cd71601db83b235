"""Redis read-through cache in front of a delivery oracle.

Only definitive oracle answers (match / no match) are cached. Oracle
failures propagate uncached so the next request asks again. A Redis
outage degrades to a direct oracle call.

Key: "delivery:pincode:<pincode>"  Value: JSON match dict or "null".
"""

import json
import logging
from dataclasses import asdict

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from src.mk_delivery.domain.models import OracleMatch
from src.mk_delivery.domain.oracle import DeliveryOracleProtocol

logger = logging.getLogger(__name__)

_KEY_PREFIX = "delivery:pincode:"


class CachedDeliveryOracle:
    def __init__(
        self, inner: DeliveryOracleProtocol, redis: aioredis.Redis, ttl_seconds: int
    ) -> None:
        self._inner = inner
        self._redis = redis
        self._ttl = ttl_seconds

    async def lookup(self, pincode: str) -> OracleMatch | None:
        key = f"{_KEY_PREFIX}{pincode}"
        try:
            cached = await self._redis.get(key)
        except RedisError as exc:
            logger.warning("Delivery cache read failed for %s: %s", pincode, exc)
            return await self._inner.lookup(pincode)

        if cached is not None:
            try:
                data = json.loads(cached)
                return OracleMatch(**data) if data else None
            except (ValueError, TypeError) as exc:
                # Undecodable entry: treat as a miss and overwrite it below
                logger.warning("Delivery cache entry for %s unreadable: %s", pincode, exc)

        match = await self._inner.lookup(pincode)
        value = json.dumps(asdict(match) if match else None)
        try:
            await self._redis.set(key, value, ex=self._ttl)
        except RedisError as exc:
            logger.warning("Delivery cache write failed for %s: %s", pincode, exc)
        return match
