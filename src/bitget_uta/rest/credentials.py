"""
API credentials held by a single client instance.
"""

from dataclasses import dataclass, field
from typing import Tuple


@dataclass(frozen=True)
class Credentials:
    """Key, secret and passphrase. Immutable; repr never shows values."""

    api_key: str = field(repr=False)
    secret_key: str = field(repr=False)
    passphrase: str = field(repr=False)

    def __repr__(self) -> str:
        return f"Credentials(api_key={'***' if self.api_key else ''!r})"

    @property
    def is_complete(self) -> bool:
        return bool(self.api_key and self.secret_key and self.passphrase)

    def secrets(self) -> Tuple[str, ...]:
        """Values that must never appear in logs"""
        return tuple(v for v in (self.api_key, self.secret_key, self.passphrase) if v)
