"""
Caller Identity
===============

Read-only view over the claims of an authenticated caller.

The semantic layer never authenticates anyone. It only needs two values out
of whatever identity the HTTP layer resolved: the caller's tenant id and
user id, used to inject row-level security filters. Both are looked up by a
fixed claim-name preference order; an empty claim falls through to the next
name, and a caller with neither yields "".

RELATED FILES
-------------
- reporting/security.py: Decodes bearer tokens into claims
- reporting/deps.py: get_caller_identity dependency
- reporting/semantic/strategies/base.py: Security filter injection
"""

from types import MappingProxyType
from typing import Any, Mapping, Optional, Sequence

TENANT_CLAIMS = (
    "tenant_id",
    "http://schemas.microsoft.com/identity/claims/tenantid",
)

USER_CLAIMS = (
    "http://schemas.xmlsoap.org/ws/2005/05/identity/claims/nameidentifier",
    "sub",
)


class CallerIdentity:
    """
    Claims of the caller, resolved to tenant and user ids.

    EXAMPLES:
        >>> CallerIdentity({"tenant_id": "T1", "sub": "u-7"}).tenant_id()
        'T1'
        >>> CallerIdentity({"sub": "u-7"}).tenant_id()
        ''
    """

    __slots__ = ("_claims",)

    def __init__(self, claims: Optional[Mapping[str, Any]] = None):
        self._claims = MappingProxyType(dict(claims or {}))

    @property
    def claims(self) -> Mapping[str, Any]:
        return self._claims

    def _first(self, names: Sequence[str]) -> str:
        for name in names:
            value = self._claims.get(name)
            if value is None:
                continue
            text = str(value)
            if text:
                return text
        return ""

    def tenant_id(self) -> str:
        return self._first(TENANT_CLAIMS)

    def user_id(self) -> str:
        return self._first(USER_CLAIMS)

    def __repr__(self) -> str:
        return f"CallerIdentity(tenant={self.tenant_id()!r}, user={self.user_id()!r})"
