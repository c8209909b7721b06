"""Settings export and import.

A settings subset (view preferences, message filters and the per-user flag) is
serialised to JSON, base64 encoded and embedded in a ready-to-send
``/import <token>`` command so it can be pasted into another chat.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging

from pydantic import ValidationError

from ..models import ImportedSettings, SessionData

logger = logging.getLogger(__name__)

IMPORT_COMMAND = "/import"


def encode_settings(session: SessionData) -> str:
    """Encode the transferable part of a session as a token."""
    payload = {
        "v": session.view_preferences.to_record(),
        "f": session.message_filters.to_record(),
        "u": session.use_per_user_preferences,
    }
    raw = json.dumps(payload, separators=(",", ":"), ensure_ascii=False)
    return base64.b64encode(raw.encode("utf-8")).decode("ascii")


def export_settings(session: SessionData) -> str:
    """Build the ``/import`` command that recreates this chat's settings.

    Args:
        session: Chat record to export.

    Returns:
        Command string embedding the token.
    """
    return f"{IMPORT_COMMAND} {encode_settings(session)}"


def import_settings(token: str) -> ImportedSettings | None:
    """Decode a settings token.

    Returns None instead of raising when the token is not base64, does not
    hold JSON, holds JSON whose fields do not validate as settings, or carries
    no settings at all.

    Args:
        token: Token produced by ``encode_settings``; a full ``/import`` command
            is accepted as well.

    Returns:
        The decoded settings subset, or None.
    """
    token = token.strip()
    if token.startswith(IMPORT_COMMAND):
        token = token[len(IMPORT_COMMAND):].strip()

    if not token:
        return None

    try:
        raw = base64.b64decode(token, validate=True).decode("utf-8")
        payload = json.loads(raw)
    except (binascii.Error, UnicodeDecodeError, ValueError) as e:
        logger.debug(f"Rejected settings token: {e}")
        return None

    if not isinstance(payload, dict):
        logger.debug("Rejected settings token: payload is not an object")
        return None

    try:
        imported = ImportedSettings.model_validate(
            {
                "viewPreferences": payload.get("v"),
                "messageFilters": payload.get("f"),
                "usePerUserPreferences": payload.get("u"),
            }
        )
    except ValidationError as e:
        logger.debug(f"Rejected settings token: {e.error_count()} invalid fields")
        return None

    if imported.model_dump(exclude_none=True) == {}:
        logger.debug("Rejected settings token: no settings in payload")
        return None
    return imported


def apply_imported_settings(session: SessionData, imported: ImportedSettings) -> SessionData:
    """Copy the fields present in ``imported`` onto ``session`` in place."""
    if imported.view_preferences is not None:
        session.view_preferences = imported.view_preferences.model_copy(deep=True)
    if imported.message_filters is not None:
        session.message_filters = imported.message_filters.model_copy(deep=True)
    if imported.use_per_user_preferences is not None:
        session.use_per_user_preferences = imported.use_per_user_preferences
    return session
