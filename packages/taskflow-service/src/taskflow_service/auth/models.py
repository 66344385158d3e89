"""Auth domain models."""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class Identity:
    """The authenticated caller, resolved from a validated access token.

    Passed explicitly into every service call; downstream code trusts it
    without re-validating the token.
    """

    user_id: UUID
