"""Tests for gateway configuration and the get/set/reset factory."""

import pytest
from storefront.cart.session import ShoppingSession
from storefront.config import DEFAULT_API_URL, GatewaySettings
from storefront.gateway import build_gateway, get_gateway, reset_gateway, set_gateway
from storefront.gateway.fake_adapter import FakeStoreGateway
from storefront.gateway.http_adapter import HttpStoreGateway


class TestGatewaySettings:
    def test_defaults(self, monkeypatch):
        for name in ("STOREFRONT_GATEWAY", "STOREFRONT_API_URL", "STOREFRONT_API_TIMEOUT", "STOREFRONT_ORDERS_PATH"):
            monkeypatch.delenv(name, raising=False)

        settings = GatewaySettings.from_env()

        assert settings == GatewaySettings()
        assert settings.base_url == DEFAULT_API_URL

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("STOREFRONT_GATEWAY", "HTTP")
        monkeypatch.setenv("STOREFRONT_API_URL", "https://shop.example.com/api/")
        monkeypatch.setenv("STOREFRONT_API_TIMEOUT", "3")
        monkeypatch.setenv("STOREFRONT_ORDERS_PATH", "/checkout/orders/")

        settings = GatewaySettings.from_env()

        assert settings.adapter == "http"
        assert settings.base_url == "https://shop.example.com/api"
        assert settings.timeout == 3.0
        assert settings.orders_path == "checkout/orders"


class TestBuildGateway:
    def test_fake(self):
        assert isinstance(build_gateway(GatewaySettings(adapter="fake")), FakeStoreGateway)

    def test_http(self):
        gateway = build_gateway(GatewaySettings(adapter="http", base_url="https://shop.test"))
        assert isinstance(gateway, HttpStoreGateway)
        assert gateway.settings.base_url == "https://shop.test"

    def test_unknown_adapter(self):
        with pytest.raises(ValueError):
            build_gateway(GatewaySettings(adapter="carrier-pigeon"))


class TestCurrentGateway:
    def test_set_and_reset(self, gateway, monkeypatch):
        monkeypatch.delenv("STOREFRONT_GATEWAY", raising=False)

        set_gateway(gateway)
        assert get_gateway() is gateway

        reset_gateway()
        current = get_gateway()
        assert current is not gateway
        assert isinstance(current, FakeStoreGateway)

    def test_session_uses_current_gateway(self, gateway):
        set_gateway(gateway)
        assert ShoppingSession().gateway is gateway
