"""Sign-in allowlist with an audit trail.

Only emails present and active in allowed_emails may sign in. Every decision,
allowed or denied, is written to auth_audit_events with the hashed client IP.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Callable
from dataclasses import dataclass
from enum import Enum

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.constellation.core.security import hash_ip
from src.constellation.models.access import AllowedEmailModel, AuthAuditEventModel

logger = structlog.get_logger(__name__)


class AuthOutcome(str, Enum):
    ALLOWED = "allowed"
    DENIED_NOT_ALLOWLISTED = "denied-not-allowlisted"
    DENIED_INACTIVE = "denied-inactive"


@dataclass(frozen=True)
class AllowlistDecision:
    outcome: AuthOutcome
    role: str | None = None

    @property
    def allowed(self) -> bool:
        return self.outcome == AuthOutcome.ALLOWED


class Allowlist:
    """Checks sign-in attempts against allowed_emails.

    Args:
        session_factory: Async callable that yields AsyncSession instances.
    """

    def __init__(
        self, session_factory: Callable[..., AsyncGenerator[AsyncSession, None]]
    ) -> None:
        self._session_factory = session_factory

    async def authorize(self, email: str | None, ip: str | None = None) -> AllowlistDecision:
        """Decide whether ``email`` may sign in and record the decision."""
        normalized = (email or "").strip().lower()

        async for session in self._session_factory():
            if not normalized:
                decision = AllowlistDecision(AuthOutcome.DENIED_NOT_ALLOWLISTED)
            else:
                result = await session.execute(
                    select(AllowedEmailModel).where(AllowedEmailModel.email == normalized)
                )
                entry = result.scalar_one_or_none()
                if entry is None:
                    decision = AllowlistDecision(AuthOutcome.DENIED_NOT_ALLOWLISTED)
                elif not entry.is_active:
                    decision = AllowlistDecision(AuthOutcome.DENIED_INACTIVE)
                else:
                    decision = AllowlistDecision(AuthOutcome.ALLOWED, role=entry.role or "member")

            session.add(
                AuthAuditEventModel(
                    email=normalized or "unknown",
                    action="sign_in",
                    outcome=decision.outcome.value,
                    ip_hash=hash_ip(ip),
                )
            )
            await session.commit()

            logger.info(
                "auth.sign_in_decision",
                email=normalized or "unknown",
                outcome=decision.outcome.value,
            )
            return decision
