"""
Cache Value Objects

Immutable value objects for the response cache key namespace and TTL policy.
Keys follow the ``"<domain>:<query-signature>"`` convention so that a whole
family of cached query variants can be invalidated with one prefix.
"""

import hashlib
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional, Union
from urllib.parse import urlencode

# Longer signatures are stored as a digest to bound key size
MAX_SIGNATURE_LENGTH = 256


class CacheDomain(str, Enum):
    """Listing domains served through the response cache."""

    ENVIRONMENTS = "environments"
    COMPETITIONS = "competitions"
    JOBS = "jobs"
    RESOURCES = "resources"
    STARTUPS = "startups"
    TRENDING = "trending"


def _render_param(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


@dataclass(frozen=True)
class CacheKey:
    """
    Immutable cache key value object.

    Built deterministically from an endpoint domain and its query
    parameters, e.g. ``jobs:active=true&limit=20``.
    """

    value: str

    def __post_init__(self) -> None:
        """Validate cache key format."""
        if not self.value:
            raise ValueError("Cache key cannot be empty")

    @staticmethod
    def _domain_name(domain: Union[str, CacheDomain]) -> str:
        name = domain.value if isinstance(domain, CacheDomain) else domain
        if not name:
            raise ValueError("Cache domain cannot be empty")
        if ":" in name:
            raise ValueError("Cache domain cannot contain ':'")
        return name

    @classmethod
    def prefix(cls, domain: Union[str, CacheDomain]) -> str:
        """Key prefix shared by every cached variant of a domain."""
        return f"{cls._domain_name(domain)}:"

    @classmethod
    def for_query(
        cls,
        domain: Union[str, CacheDomain],
        params: Optional[Mapping[str, Any]] = None,
    ) -> "CacheKey":
        """
        Create a cache key from a domain and normalized query parameters.

        Parameters are sorted by name so the same query always maps to the
        same key regardless of the order the caller supplied them in. Names
        and values are percent-encoded, so a value containing ``&`` or ``=``
        cannot impersonate another parameter set. Signatures longer than
        MAX_SIGNATURE_LENGTH are replaced by ``#sha256=<digest>``; ``#`` never
        survives encoding, so a digest cannot collide with a plain signature.

        Args:
            domain: Listing domain the query belongs to
            params: Query parameters; ``None`` values render as empty strings

        Returns:
            CacheKey for the query
        """
        signature = urlencode(
            [
                (str(name), _render_param(value))
                for name, value in sorted((params or {}).items())
            ]
        )
        if len(signature) > MAX_SIGNATURE_LENGTH:
            digest = hashlib.sha256(signature.encode("utf-8")).hexdigest()
            signature = f"#sha256={digest}"
        return cls(f"{cls.prefix(domain)}{signature}")

    @property
    def domain(self) -> str:
        """Domain portion of the key."""
        return self.value.split(":", 1)[0]

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class TTL:
    """
    Time To Live value object for cache expiration.

    Whole seconds, measured from insertion; never refreshed on read.
    """

    seconds: int

    # Observed per-domain policy for listing endpoints
    DOMAIN_DEFAULTS = {
        CacheDomain.ENVIRONMENTS: 300,
        CacheDomain.COMPETITIONS: 120,
        CacheDomain.RESOURCES: 120,
        CacheDomain.JOBS: 60,
        CacheDomain.STARTUPS: 60,
        CacheDomain.TRENDING: 60,
    }

    def __post_init__(self) -> None:
        """Validate TTL value."""
        if self.seconds <= 0:
            raise ValueError("TTL must be positive")
        if self.seconds > 86400:
            raise ValueError("TTL too large (max 1 day)")

    @classmethod
    def minutes(cls, minutes: int) -> "TTL":
        """Create TTL from minutes."""
        return cls(minutes * 60)

    @classmethod
    def for_domain(
        cls,
        domain: Union[str, CacheDomain],
        overrides: Optional[Mapping[CacheDomain, int]] = None,
    ) -> "TTL":
        """
        Default TTL for a listing domain.

        Args:
            domain: Listing domain
            overrides: Configured per-domain seconds taking precedence

        Raises:
            ValueError: If the domain has no TTL policy
        """
        domain = CacheDomain(domain)
        if overrides and domain in overrides:
            return cls(overrides[domain])
        return cls(cls.DOMAIN_DEFAULTS[domain])

    @property
    def stale_while_revalidate(self) -> int:
        """Grace window advertised to HTTP caches."""
        return max(1, self.seconds // 2)

    def __str__(self) -> str:
        return f"{self.seconds}s"
