"""Hour-bucket counter stores.

The in-memory store serves local development and tests; the Supabase store
is the only one safe across several service instances.
"""
