"""
Caller identity passed from the boundary into every service call.

The boundary (router dependency or function handler) resolves the bearer
token once per request; services only ever see the resulting Caller.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Identity:
    id: int
    email: str
    name: str
    role: str


@dataclass(frozen=True)
class Caller:
    identity: Optional[Identity] = None
    ip_address: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return self.identity is not None

    @property
    def user_id(self) -> Optional[int]:
        return self.identity.id if self.identity else None

    @classmethod
    def anonymous(cls, ip_address: Optional[str] = None) -> "Caller":
        return cls(identity=None, ip_address=ip_address)
