"""Caller identity resolution from forwarded credential claims."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping, Optional, Tuple

NAME_IDENTIFIER_CLAIM = "http://schemas.xmlsoap.org/ws/2005/05/identity/claims/nameidentifier"
NAME_ID_CLAIM = "nameId"

# Lookup order when resolving the submitting user.
USER_ID_CLAIMS: Tuple[str, ...] = (NAME_IDENTIFIER_CLAIM, NAME_ID_CLAIM)


class ClaimSet:
    """Read-only bag of claims keyed by claim name."""

    def __init__(self, claims: Optional[Mapping[str, object]] = None) -> None:
        self._claims = {
            str(name): str(value) for name, value in (claims or {}).items() if value is not None
        }

    def get_claim(self, name: str) -> Optional[str]:
        return self._claims.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._claims

    def __bool__(self) -> bool:
        return bool(self._claims)

    def __repr__(self) -> str:
        return f"ClaimSet({sorted(self._claims)})"


@dataclass(frozen=True)
class Identity:
    user_id: int


def resolve_identity(
    claims: Optional[ClaimSet], claim_names: Iterable[str] = USER_ID_CLAIMS
) -> Optional[Identity]:
    """Return the caller's identity, or ``None`` when no usable user id is present.

    The first claim that is present wins; a present but malformed value is not
    skipped in favour of a later claim.
    """

    if claims is None:
        return None
    raw: Optional[str] = None
    for name in claim_names:
        raw = claims.get_claim(name)
        if raw is not None:
            break
    if raw is None:
        return None
    try:
        user_id = int(raw.strip())
    except ValueError:
        return None
    if user_id <= 0:
        return None
    return Identity(user_id=user_id)
