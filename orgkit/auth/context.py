"""
Caller identity - the claims attached to an authenticated request.

This is the lightweight object the authorization policies inspect.
Claims are (type, value) pairs in the order the token listed them;
a type may repeat, and lookups by type always return the first one.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any


SUBJECT_CLAIM = "sub"


@dataclass(frozen=True)
class Claim:
    """A single assertion about the caller."""
    
    type: str
    value: str


@dataclass
class CallerIdentity:
    """
    Identity of the caller of a request.
    
    Usage in routes:
        async def my_route(identity: CallerIdentity = Depends(require_auth())):
            print(f"User {identity.user_id}")
            claim = identity.first("653bf78afc1ba1ad481195c4")
    """
    
    claims: list[Claim] = field(default_factory=list)
    
    # First claim of each type (first match wins on repeated types)
    _first_by_type: dict[str, Claim] = field(default_factory=dict, init=False, repr=False)
    
    def __post_init__(self):
        for claim in self.claims:
            self._first_by_type.setdefault(claim.type, claim)
    
    @property
    def user_id(self) -> str | None:
        claim = self.first(SUBJECT_CLAIM)
        return claim.value if claim else None
    
    @property
    def is_authenticated(self) -> bool:
        """Is there a logged-in user?"""
        return self.user_id is not None
    
    def first(self, claim_type: str) -> Claim | None:
        """The first claim of a type, or None."""
        return self._first_by_type.get(claim_type)
    
    def values(self, claim_type: str) -> list[str]:
        """Every value of a type, in order."""
        return [c.value for c in self.claims if c.type == claim_type]
    
    @classmethod
    def anonymous(cls) -> CallerIdentity:
        """An identity with no claims."""
        return cls()
    
    @classmethod
    def from_token_payload(cls, payload: dict[str, Any]) -> CallerIdentity:
        """
        Flatten a decoded token payload into claims.
        
        - strings are kept as is
        - lists become one claim per element, in order
        - anything else (objects, numbers, booleans, null) is
          serialized as compact JSON
        """
        claims: list[Claim] = []
        for claim_type, value in payload.items():
            items = value if isinstance(value, list) else [value]
            for item in items:
                claims.append(Claim(type=claim_type, value=_claim_value(item)))
        return cls(claims=claims)


def _claim_value(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, separators=(",", ":"))
