"""Result types returned by page handlers.

A page handler returns exactly one of these; the HTTP layer turns it into a
response. Redirects are ordinary return values, not exceptions.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union


@dataclass(frozen=True)
class ComponentView:
    """A presentational component and the named inputs it is rendered with."""

    component: str
    props: dict[str, Any] = field(default_factory=dict)
    title: str | None = None


@dataclass(frozen=True)
class RedirectResult:
    """Send the client elsewhere. 307 keeps the request method, matching framework redirects."""

    location: str
    status_code: int = 307


@dataclass(frozen=True)
class NotFoundResult:
    message: str = "Not found"


PageResult = Union[ComponentView, RedirectResult, NotFoundResult]
