"""Retry-on-miss lookup shared by the session registry and the statement cache"""

import logging
from typing import Any, Callable, Hashable, Optional

from tenacity import Retrying, retry_if_result, stop_after_attempt

from .exceptions import ConfigurationError
from .metrics import lookup_misses

logger = logging.getLogger(__name__)

# Returned by lookups when the key is not cached at all
MISSING = object()


def validate_retry_budget(connect_retry: int) -> int:
    if isinstance(connect_retry, bool) or not isinstance(connect_retry, int) or connect_retry < 0:
        raise ConfigurationError(f"Retry budget must be a non-negative integer, got {connect_retry!r}")
    return connect_retry


def lookup_with_refresh(
    lookup: Callable[[Hashable], Any],
    key: Hashable,
    refresh: Callable[[], object],
    connect_retry: int,
    kind: str,
) -> Optional[Any]:
    """
    Look ``key`` up, running ``refresh`` and looking again on every miss

    ``lookup`` returns ``MISSING`` for an unknown key. The first attempt never
    refreshes; each further attempt, up to ``connect_retry`` of them, runs one
    full ``refresh`` before looking again. Returns None once the budget is
    exhausted.
    """
    validate_retry_budget(connect_retry)

    def before_attempt(retry_state):
        if retry_state.attempt_number > 1:
            lookup_misses.labels(kind=kind).inc()
            logger.warning(
                f"No {kind} found for '{key}', refreshing "
                f"(attempt {retry_state.attempt_number - 1} of {connect_retry})"
            )
            refresh()

    retrying = Retrying(
        stop=stop_after_attempt(connect_retry + 1),
        retry=retry_if_result(lambda found: found is MISSING),
        before=before_attempt,
        retry_error_callback=lambda retry_state: MISSING,
    )
    found = retrying(lookup, key)
    return None if found is MISSING else found
