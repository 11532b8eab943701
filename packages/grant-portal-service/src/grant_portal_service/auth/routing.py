"""Page routing policy for browser navigation.

API routes answer guard failures with JSON errors; page navigation answers
them with a redirect to the landing page the caller is allowed to see.
"""

from __future__ import annotations

import re

from grant_portal_service.auth.guards import is_admin, is_reviewer
from grant_portal_service.auth.roles import Role

SIGN_IN_PATH = "/sign-in"
APPLICANT_LANDING = "/dashboard"
REVIEWER_LANDING = "/reviewer/dashboard"

_PUBLIC = re.compile(r"^/(about|eligibility|sign-in.*|sign-up.*|api/webhooks.*)?$")
_ADMIN_AREA = re.compile(r"^/reviewer/admin(/.*)?$")
_REVIEWER_AREA = re.compile(r"^/reviewer(/.*)?$")
_APPLICANT_AREA = re.compile(r"^/(dashboard|profile(/.*)?|documents(/.*)?|applications(/.*)?|loi(/.*)?|settings)$")


def landing_page(role: Role) -> str:
    return REVIEWER_LANDING if is_reviewer(role) else APPLICANT_LANDING


def page_redirect(path: str, role: Role, authenticated: bool) -> str | None:
    """Return where to send the caller instead of *path*, or None to allow it."""
    if _PUBLIC.match(path):
        return None
    if not authenticated:
        return SIGN_IN_PATH
    if _ADMIN_AREA.match(path):
        return None if is_admin(role) else REVIEWER_LANDING
    if _REVIEWER_AREA.match(path):
        return None if is_reviewer(role) else APPLICANT_LANDING
    if _APPLICANT_AREA.match(path):
        return REVIEWER_LANDING if is_reviewer(role) else None
    return None
