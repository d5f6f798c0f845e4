"""Storefront services: money helpers and the remote product catalog."""
