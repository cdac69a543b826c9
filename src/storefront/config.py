"""Application settings for the storefront client.

Infrastructure (databases, brokers, event store) is configured by protean
through ``domain.toml``. Settings for reaching the REST backend are read from
the environment here.
"""

import os
from dataclasses import dataclass

DEFAULT_API_URL = "https://fakestoreapi.com"
DEFAULT_TIMEOUT_SECONDS = 10.0


@dataclass(frozen=True)
class GatewaySettings:
    """Where and how the remote product/cart service is reached."""

    adapter: str = "fake"
    base_url: str = DEFAULT_API_URL
    timeout: float = DEFAULT_TIMEOUT_SECONDS
    orders_path: str = "orders"

    @classmethod
    def from_env(cls) -> "GatewaySettings":
        timeout = os.getenv("STOREFRONT_API_TIMEOUT")
        return cls(
            adapter=os.getenv("STOREFRONT_GATEWAY", "fake").lower(),
            base_url=os.getenv("STOREFRONT_API_URL", DEFAULT_API_URL).rstrip("/"),
            timeout=float(timeout) if timeout else DEFAULT_TIMEOUT_SECONDS,
            orders_path=os.getenv("STOREFRONT_ORDERS_PATH", "orders").strip("/"),
        )
