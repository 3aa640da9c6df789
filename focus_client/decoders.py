# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Tool response decoders

Server versions disagree on where they put results. Each decoder handles
one known payload shape and returns None when the payload is not that
shape. Decoders for an operation are listed in priority order and tried
with first_match().
"""

import logging
from typing import Any, Callable, List, Optional, Sequence, TypeVar

from pydantic import ValidationError

from focus_client.models import CurrentFocus, Focus

logger = logging.getLogger(__name__)

T = TypeVar("T")
Decoder = Callable[[Any], Optional[T]]

# Field names different server versions use for the history array
HISTORY_FIELDS = ("focusHistory", "history", "focuses", "previousFocuses", "pastFocuses")


def first_match(decoders: Sequence[Decoder], payload: Any) -> Optional[T]:
    """Return the result of the first decoder that recognises the payload"""
    for decoder in decoders:
        result = decoder(payload)
        if result is not None:
            return result
    return None


def parse_focus(data: Any) -> Optional[Focus]:
    if not isinstance(data, dict):
        return None
    try:
        return Focus.model_validate(data)
    except ValidationError as e:
        logger.debug(f"Not a focus object: {e.error_count()} validation errors")
        return None


def parse_focus_list(items: List[Any]) -> List[Focus]:
    foci = []
    for item in items:
        focus = parse_focus(item)
        if focus is None:
            logger.warning(f"Skipping malformed history entry: {item!r}")
            continue
        foci.append(focus)
    return foci


def _is_success(payload: Any) -> bool:
    return isinstance(payload, dict) and bool(payload.get("success"))


def _is_failure(payload: Any) -> bool:
    """True only for an explicit success: false; a missing flag is not a failure"""
    return isinstance(payload, dict) and payload.get("success") is False


def _as_list(value: Any) -> List[Any]:
    return list(value) if isinstance(value, list) else []


def _nested_context(payload: Any) -> Optional[dict]:
    if not _is_success(payload):
        return None
    context = payload.get("context")
    return context if isinstance(context, dict) else None


# =============================================================================
# CURRENT FOCUS
# =============================================================================

def decode_current_nested(payload: Any) -> Optional[CurrentFocus]:
    """{success: true, context: {currentFocus, recentDecisions}}"""
    context = _nested_context(payload)
    if context is None:
        return None
    return CurrentFocus(
        current_focus=parse_focus(context.get("currentFocus")),
        recent_context=_as_list(context.get("recentDecisions")) or _as_list(context.get("recentContext"))
    )


def decode_current_flat(payload: Any) -> Optional[CurrentFocus]:
    """{currentFocus, recentContext}"""
    if not isinstance(payload, dict) or _is_failure(payload):
        return None
    if "currentFocus" not in payload and "recentContext" not in payload:
        return None
    return CurrentFocus(
        current_focus=parse_focus(payload.get("currentFocus")),
        recent_context=_as_list(payload.get("recentContext"))
    )


CURRENT_FOCUS_DECODERS = (decode_current_nested, decode_current_flat)


# =============================================================================
# SET FOCUS
# =============================================================================

def _written_focus(*candidates: Any) -> Optional[Focus]:
    """First candidate that parses as a focus the server has assigned an id"""
    for candidate in candidates:
        focus = parse_focus(candidate)
        if focus is not None and focus.id is not None:
            return focus
    return None


def decode_focus_nested(payload: Any) -> Optional[Focus]:
    """{success: true, focus: {...}} or {success: true, currentFocus: {...}}"""
    if not _is_success(payload):
        return None
    return _written_focus(payload.get("focus"), payload.get("currentFocus"))


def decode_focus_nested_context(payload: Any) -> Optional[Focus]:
    """{success: true, context: {currentFocus: {...}}}"""
    context = _nested_context(payload)
    if context is None:
        return None
    return _written_focus(context.get("focus"), context.get("currentFocus"))


def decode_focus_flat(payload: Any) -> Optional[Focus]:
    """{currentFocus: {...}} or the focus object itself"""
    # A failed write may still echo the previous focus
    if not isinstance(payload, dict) or _is_failure(payload):
        return None
    return _written_focus(payload.get("currentFocus"), payload.get("focus"), payload)


SET_FOCUS_DECODERS = (decode_focus_nested, decode_focus_nested_context, decode_focus_flat)


# =============================================================================
# HISTORY
# =============================================================================

def _first_history(container: dict) -> Optional[List[Focus]]:
    for name in HISTORY_FIELDS:
        items = container.get(name)
        if isinstance(items, list) and items:
            foci = parse_focus_list(items)
            if foci:
                return foci
    return None


def decode_history_nested(payload: Any) -> Optional[List[Focus]]:
    """{success: true, focusHistory: [...]} or {success: true, context: {focusHistory: [...]}}"""
    if not _is_success(payload):
        return None
    found = _first_history(payload)
    if found:
        return found
    context = payload.get("context")
    return _first_history(context) if isinstance(context, dict) else None


def decode_history_flat(payload: Any) -> Optional[List[Focus]]:
    """{focusHistory: [...]} or any synonym at top level"""
    if not isinstance(payload, dict) or _is_failure(payload):
        return None
    return _first_history(payload)


HISTORY_DECODERS = (decode_history_nested, decode_history_flat)
