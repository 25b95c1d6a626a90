"""Authentication backed by claims forwarded from the API gateway."""
from __future__ import annotations

import json

from rest_framework import authentication, exceptions

from .identity import ClaimSet

CLAIMS_HEADER = "X-Auth-Claims"


class ForwardedClaimsAuthentication(authentication.BaseAuthentication):
    """Expose gateway-verified claims as ``request.auth``.

    The gateway validates the bearer token and forwards the decoded claims as
    a JSON object. Requests without the header stay anonymous.
    """

    def authenticate(self, request):  # type: ignore[override]
        raw = request.headers.get(CLAIMS_HEADER)
        if not raw:
            return None
        try:
            payload = json.loads(raw)
        except ValueError as exc:
            raise exceptions.AuthenticationFailed("Malformed claims header.") from exc
        if not isinstance(payload, dict):
            raise exceptions.AuthenticationFailed("Claims header must be a JSON object.")
        return (None, ClaimSet(payload))

    def authenticate_header(self, request):  # type: ignore[override]
        return CLAIMS_HEADER
