"""
Storefront Notices
====================
The toast shown at the top of a storefront page ("Invalid product selected",
"Your cart is empty...", "Thank you for your order!").

Every cart and checkout action answers with a 303 redirect, so a notice raised
while handling the POST has to ride a short-lived cookie to the page that
follows. A notice raised while a page is being rendered directly (checkout
re-render with errors) is shown on that same page. The page hides notices
after NOTICE_DISMISS_MS.

    flash(request, e.message)                       # danger
    flash(request, "Thank you for your order!", SUCCESS)
    return RedirectResponse("/", status_code=303)
"""

import json
import logging
import urllib.parse
from typing import List, NamedTuple

from fastapi import Request, Response

logger = logging.getLogger("storefront.notices")

FLASH_COOKIE = "_flash"
FLASH_MAX_AGE = 60

DANGER = "danger"
SUCCESS = "success"


class Notice(NamedTuple):
    text: str
    category: str = DANGER


def flash(request: Request, message: str, category: str = DANGER):
    """Queue a notice for the page that answers this request (directly or after a redirect)."""
    _queued(request).append(Notice(message, category))


def get_flashed_messages(request: Request) -> List[Notice]:
    """Notices carried in by cookie, then the ones queued while rendering this page."""
    return _read_cookie(request) + _queued(request)


def carry_notices(request: Request, response: Response) -> Response:
    """
    Middleware step. A redirect stores the queued notices in the cookie; any
    other response has already rendered them, so the cookie is dropped.
    """
    queued = _queued(request)
    if 300 <= response.status_code < 400:
        if queued:
            set_flash_cookie(response, queued)
    elif request.cookies.get(FLASH_COOKIE):
        clear_flash_cookie(response)
    return response


def set_flash_cookie(response: Response, notices: List[Notice]):
    payload = json.dumps([n._asdict() for n in notices], ensure_ascii=False)
    response.set_cookie(
        FLASH_COOKIE, urllib.parse.quote(payload),
        httponly=True, samesite="lax", max_age=FLASH_MAX_AGE,
    )


def clear_flash_cookie(response: Response):
    response.delete_cookie(FLASH_COOKIE)


def _queued(request: Request) -> List[Notice]:
    if not hasattr(request.state, "notices"):
        request.state.notices = []
    return request.state.notices


def _read_cookie(request: Request) -> List[Notice]:
    raw = request.cookies.get(FLASH_COOKIE)
    if not raw:
        return []
    try:
        data = json.loads(urllib.parse.unquote(raw))
        return [Notice(str(d["text"]), str(d.get("category", DANGER))) for d in data]
    except (ValueError, TypeError, KeyError):
        logger.warning("Discarding unreadable notice cookie")
        return []
