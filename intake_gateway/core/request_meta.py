"""Helpers reading caller metadata (origin, source address, agent) from requests."""

from __future__ import annotations

import ipaddress

from fastapi import Request

UNKNOWN_SOURCE_ADDRESS = "0.0.0.0"


def _valid_ip(value: str | None) -> str | None:
    if not value:
        return None
    candidate = value.strip()
    try:
        return str(ipaddress.ip_address(candidate))
    except ValueError:
        return None


def get_request_origin(request: Request) -> str:
    return request.headers.get("origin") or ""


def get_client_ip(request: Request) -> str:
    """Resolve the submitter's address from proxy hints or the socket peer.

    ``X-Forwarded-For`` (first hop) wins over ``X-Real-IP``, which wins over
    the peer address. Values that are not IP addresses are skipped so that
    the counter store always receives a valid ``inet``.

    Returns:
        Normalized IP address string, or ``0.0.0.0`` when none is usable.
    """

    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        ip = _valid_ip(forwarded.split(",")[0])
        if ip:
            return ip

    ip = _valid_ip(request.headers.get("x-real-ip"))
    if ip:
        return ip

    ip = _valid_ip(request.client.host if request.client else None)
    return ip or UNKNOWN_SOURCE_ADDRESS


def get_user_agent(request: Request) -> str:
    return request.headers.get("user-agent") or ""


def cors_headers(origin: str) -> dict[str, str]:
    """CORS headers echoing a declared origin (empty when none was declared)."""

    if not origin:
        return {}
    return {
        "access-control-allow-origin": origin,
        "access-control-allow-methods": "POST, OPTIONS",
        "access-control-allow-headers": "content-type",
        "access-control-max-age": "86400",
        "vary": "Origin",
    }
