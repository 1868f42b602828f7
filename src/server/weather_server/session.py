"""Anonymous session users.

Each browser session gets an opaque token and a numeric user id the first
time it touches the API. Both live in the signed session cookie.
"""

import logging
import sqlite3
import uuid

from fastapi import Request
from starlette.concurrency import run_in_threadpool

logger = logging.getLogger(__name__)

SESSION_COOKIE = 'weather_session'


async def get_current_user(request: Request) -> int | None:
    """Return the session's user id, creating the user on first touch.

    Tracking failures are logged and the request continues without a user.
    """
    user_id = request.session.get('user_id')
    if user_id is not None:
        return user_id

    session_id = request.session.get('sid')
    if session_id is None:
        session_id = request.session['sid'] = uuid.uuid4().hex

    db = request.app.state.db
    try:
        user_id = await run_in_threadpool(db.create_user, session_id)
    except sqlite3.Error as e:
        logger.error(f'User tracking error: {e}')
        return None

    request.session['user_id'] = user_id
    return user_id
