from __future__ import annotations

from uuid import uuid4

# Digitraffic asks every client to identify itself with this header
DIGITRAFFIC_USER = "commuter-dashboard-mcp/0.1"

USER_AGENT = DIGITRAFFIC_USER

ACCEPT_JSON = "application/json"
ACCEPT_XML = "application/xml, text/xml;q=0.9"


def make_headers(accept: str = ACCEPT_JSON) -> dict[str, str]:
    """Return the request headers sent to every upstream API.

    x-request-id is freshly generated on every call so a request can be
    traced in the logs.
    """
    return {
        "Accept": accept,
        "Accept-Encoding": "gzip",
        "User-Agent": USER_AGENT,
        "Digitraffic-User": DIGITRAFFIC_USER,
        "x-request-id": str(uuid4()),
    }
