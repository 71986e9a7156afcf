"""Resolver table model - id lookups loaded from a JSON file."""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import BaseModel, ValidationError, field_validator, model_validator

from discord_markdown.core.exceptions import ResolverConfigError
from discord_markdown.core.markdown.resolvers import Resolvers

logger = logging.getLogger(__name__)


class RoleEntry(BaseModel):
    model_config = {"frozen": True}

    name: str
    color: str | None = None  # CSS colour like "#ff0000" or None

    @model_validator(mode="before")
    @classmethod
    def _from_api(cls, data: object) -> object:
        if isinstance(data, str):
            return {"name": data}
        if not isinstance(data, dict):
            return data

        color = data.get("color")
        if isinstance(color, int) and not isinstance(color, bool):
            # Discord API colours are integers; 0 means "no colour"
            data = {**data, "color": f"#{color:06x}" if color > 0 else None}
        return data


class ResolverTable(BaseModel):
    """Display data for the ids a message may reference.

    ``emoji_url`` is a ``str.format`` template receiving ``id`` (the emoji
    id with its ``.png``/``.gif`` extension).  Ids missing from a table are
    displayed as themselves.
    """

    model_config = {"frozen": True}

    emoji_url: str = "{id}"
    users: dict[str, str] = {}
    roles: dict[str, RoleEntry] = {}
    channels: dict[str, str] = {}

    @field_validator("emoji_url")
    @classmethod
    def _check_emoji_url(cls, value: str) -> str:
        try:
            value.format(id="0")
        except (AttributeError, IndexError, KeyError, ValueError) as exc:
            raise ValueError(f"emoji_url must be a format template using only {{id}}: {exc}") from exc
        return value

    @classmethod
    def load(cls, path: str | Path) -> ResolverTable:
        """Read a resolver table from a JSON file."""
        path = Path(path)
        try:
            raw = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ResolverConfigError(f"Cannot read resolver table {str(path)!r}: {exc}") from exc
        try:
            table = cls.model_validate_json(raw)
        except ValidationError as exc:
            raise ResolverConfigError(f"Invalid resolver table {str(path)!r}: {exc}") from exc

        logger.debug(
            "Loaded resolver table %s: %d users, %d roles, %d channels",
            path,
            len(table.users),
            len(table.roles),
            len(table.channels),
        )
        return table

    # -- lookups --

    def resolve_emoji(self, emoji_id: str) -> tuple[str, str | None]:
        return self.emoji_url.format(id=emoji_id), None

    def resolve_user(self, user_id: str) -> tuple[str, str | None]:
        name = self.users.get(user_id)
        if name is None:
            logger.debug("No user name for id %s", user_id)
            return user_id, None
        return name, None

    def resolve_role(self, role_id: str) -> tuple[str, str | None]:
        role = self.roles.get(role_id)
        if role is None:
            logger.debug("No role for id %s", role_id)
            return role_id, None
        return role.name, role.color

    def resolve_channel(self, channel_id: str) -> tuple[str, str | None]:
        name = self.channels.get(channel_id)
        if name is None:
            logger.debug("No channel name for id %s", channel_id)
            return channel_id, None
        return name, None

    def resolvers(self) -> Resolvers:
        return Resolvers(
            emoji=self.resolve_emoji,
            user=self.resolve_user,
            role=self.resolve_role,
            channel=self.resolve_channel,
        )
