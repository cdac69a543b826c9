"""Store gateway factory.

Provides get_gateway() / set_gateway() to swap implementations:
- FakeStoreGateway for development and testing
- HttpStoreGateway for a real FakeStore-compatible backend
"""

from storefront.config import GatewaySettings
from storefront.gateway.fake_adapter import FakeStoreGateway
from storefront.gateway.http_adapter import HttpStoreGateway
from storefront.gateway.port import StoreGateway

_current_gateway: StoreGateway | None = None


def build_gateway(settings: GatewaySettings | None = None) -> StoreGateway:
    """Create the adapter named by ``settings.adapter`` (``"http"`` or ``"fake"``)."""
    settings = settings or GatewaySettings.from_env()
    if settings.adapter == "http":
        return HttpStoreGateway(settings)
    if settings.adapter == "fake":
        return FakeStoreGateway()
    raise ValueError(f"Unknown store gateway adapter: {settings.adapter!r}")


def get_gateway() -> StoreGateway:
    """Return the current store gateway, building it from the environment on first use."""
    global _current_gateway
    if _current_gateway is None:
        _current_gateway = build_gateway()
    return _current_gateway


def set_gateway(gateway: StoreGateway) -> None:
    """Override the active store gateway (useful for tests)."""
    global _current_gateway
    _current_gateway = gateway


def reset_gateway() -> None:
    """Reset to default gateway."""
    global _current_gateway
    _current_gateway = None
