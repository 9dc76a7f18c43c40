"""Tenant registry backends and the optional TTL cache in front of them."""
