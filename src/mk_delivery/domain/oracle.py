# src/mk_delivery/domain/oracle.py
"""Delivery oracle Protocol: the external serviceability service."""
from typing import Protocol

from src.mk_delivery.domain.models import OracleMatch


class DeliveryOracleError(Exception):
    """The oracle could not be consulted (misconfigured, unreachable, bad response)."""


class DeliveryOracleProtocol(Protocol):
    async def lookup(self, pincode: str) -> OracleMatch | None:
        """Return the matched postal code, or None when the oracle has no match.

        Raises DeliveryOracleError on any transport or configuration failure.
        """
        ...
