"""Storefront: catalog-and-checkout client core for a remote product/cart REST service."""
