"""Shared fixtures for resolver tables."""

from __future__ import annotations

import json

import pytest

from discord_markdown.core.resolver_table import ResolverTable

# ---------------------------------------------------------------------------
# Resolver tables
# ---------------------------------------------------------------------------

RESOLVER_TABLE_DATA = {
    "emoji_url": "https://cdn.discordapp.com/emojis/{id}",
    "users": {"1001": "Jane Doe"},
    "roles": {
        "2001": {"name": "Moderator", "color": 16734003},
        "2002": "Member",
    },
    "channels": {"3001": "general"},
}


@pytest.fixture
def resolver_table() -> ResolverTable:
    return ResolverTable.model_validate(RESOLVER_TABLE_DATA)


@pytest.fixture
def resolver_table_file(tmp_path):
    path = tmp_path / "resolvers.json"
    path.write_text(json.dumps(RESOLVER_TABLE_DATA), encoding="utf-8")
    return path
