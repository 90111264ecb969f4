"""Tests for the sign-in allowlist and its audit trail, with a mocked session."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.constellation.auth.allowlist import Allowlist, AuthOutcome
from src.constellation.core.security import hash_ip
from src.constellation.models.access import AuthAuditEventModel


def _session_factory(entry):
    """Session factory yielding one mocked AsyncSession whose lookup returns ``entry``."""
    result = MagicMock()
    result.scalar_one_or_none.return_value = entry

    session = MagicMock()
    session.execute = AsyncMock(return_value=result)
    session.commit = AsyncMock()

    async def factory():
        yield session

    return factory, session


def _audit_row(session) -> AuthAuditEventModel:
    session.add.assert_called_once()
    row = session.add.call_args.args[0]
    assert isinstance(row, AuthAuditEventModel)
    return row


@pytest.mark.asyncio
async def test_active_entry_is_allowed_with_role():
    factory, session = _session_factory(SimpleNamespace(is_active=True, role="admin"))

    decision = await Allowlist(factory).authorize("Admin@Example.com", "203.0.113.9")

    assert decision.allowed
    assert decision.role == "admin"
    row = _audit_row(session)
    assert row.email == "admin@example.com"
    assert row.outcome == "allowed"
    assert row.action == "sign_in"
    assert row.ip_hash == hash_ip("203.0.113.9")
    session.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_unknown_email_is_denied():
    factory, session = _session_factory(None)

    decision = await Allowlist(factory).authorize("stranger@example.com")

    assert not decision.allowed
    assert decision.outcome == AuthOutcome.DENIED_NOT_ALLOWLISTED
    assert _audit_row(session).outcome == "denied-not-allowlisted"


@pytest.mark.asyncio
async def test_inactive_entry_is_denied():
    factory, session = _session_factory(SimpleNamespace(is_active=False, role="member"))

    decision = await Allowlist(factory).authorize("former@example.com")

    assert decision.outcome == AuthOutcome.DENIED_INACTIVE
    assert _audit_row(session).outcome == "denied-inactive"


@pytest.mark.asyncio
async def test_missing_email_is_denied_without_lookup():
    factory, session = _session_factory(None)

    decision = await Allowlist(factory).authorize(None)

    assert decision.outcome == AuthOutcome.DENIED_NOT_ALLOWLISTED
    session.execute.assert_not_awaited()
    assert _audit_row(session).email == "unknown"
