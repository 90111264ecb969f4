"""Redirect-only routes: the sectors default tab and legacy strategy URLs.

None of these touch data or validate the identifier; the matched string is
percent-encoded into the target path so it stays one path segment.
"""

from __future__ import annotations

from urllib.parse import quote

from src.constellation.pages.views import RedirectResult

SECTORS_DEFAULT_PATH = "/sectors/list"


def sectors_page() -> RedirectResult:
    """/sectors defaults to the sectors list tab."""
    return RedirectResult(SECTORS_DEFAULT_PATH)


def legacy_strategy_redirect(strategy_id: str) -> RedirectResult:
    """/strategies/{id} moved to /lga/strategies/{id}."""
    return RedirectResult(f"/lga/strategies/{quote(strategy_id, safe='')}")


def legacy_strategy_upload_redirect() -> RedirectResult:
    """/strategies/upload moved to /lga/strategies/upload."""
    return RedirectResult("/lga/strategies/upload")
