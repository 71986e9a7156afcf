"""Resolver functions that turn entity ids into display strings."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

# (id) -> (display, extra).  ``extra`` is only read from the role resolver,
# where it is an optional CSS colour.
Resolver = Callable[[str], tuple[str, str | None]]


def identity_resolver(entity_id: str) -> tuple[str, str | None]:
    """Echo the id back as its own display string."""
    return entity_id, None


@dataclass(frozen=True)
class Resolvers:
    """The four lookups the renderers call for entity nodes.

    Attributes:
        emoji: receives ``"<id>.png"`` / ``"<id>.gif"``, returns the image path.
        user: receives a user id, returns the user's display name.
        role: receives a role id, returns the role name and optional colour.
        channel: receives a channel id, returns the channel name.
    """

    emoji: Resolver = identity_resolver
    user: Resolver = identity_resolver
    role: Resolver = identity_resolver
    channel: Resolver = identity_resolver


DEFAULT_RESOLVERS = Resolvers()
