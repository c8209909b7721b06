"""Tests for preference defaults and resolution."""

import pytest

from inspector_bot.models import (
    DisplayMode,
    MessageFilters,
    MessageType,
    SessionData,
    UserPreferences,
)
from inspector_bot.services.preferences import (
    default_message_filters,
    default_session,
    default_view_preferences,
    detect_message_type,
    ensure_complete_session,
    get_effective_preferences,
    should_process_message_type,
)


class TestDefaults:
    def test_message_filters_enable_everything(self) -> None:
        filters = default_message_filters()

        assert filters.respond_to_all is True
        assert set(filters.enabled_types) == set(MessageType)
        assert all(filters.enabled_types.values())

    def test_group_view_defaults_to_raw(self) -> None:
        preferences = default_view_preferences(is_group=True)

        assert preferences.display_mode is DisplayMode.RAW
        assert preferences.show_forward_info is True
        assert preferences.show_author_info is True

    def test_phone_numbers_masked_by_default(self) -> None:
        for is_group in (True, False):
            options = default_view_preferences(is_group).privacy_options
            assert options.mask_phone_numbers is True
            assert options.mask_user_ids is False
            assert options.mask_chat_ids is False

    def test_private_chat_session(self) -> None:
        session = default_session("private")

        assert session.enabled is True
        assert session.view_preferences.display_mode is DisplayMode.COMPACT
        assert session.use_per_user_preferences is False
        assert session.user_preferences == {}

    @pytest.mark.parametrize("chat_type", ["group", "supergroup", "channel"])
    def test_group_like_chat_session(self, chat_type: str) -> None:
        session = default_session(chat_type)

        assert session.enabled is False
        assert session.view_preferences.display_mode is DisplayMode.RAW

    def test_defaults_are_fresh_copies(self) -> None:
        first = default_session("private")
        second = default_session("private")

        first.view_preferences.show_author_info = False

        assert second.view_preferences.show_author_info is True


class TestEnsureCompleteSession:
    def test_none_gives_defaults(self) -> None:
        assert ensure_complete_session(None, "supergroup") == default_session("supergroup")

    def test_explicit_false_is_kept(self) -> None:
        session = ensure_complete_session(
            {"enabled": False, "viewPreferences": {"showAuthorInfo": False}},
            "private",
        )

        assert session.enabled is False
        assert session.view_preferences.show_author_info is False
        assert session.view_preferences.show_forward_info is True
        assert session.view_preferences.display_mode is DisplayMode.COMPACT

    def test_none_values_take_defaults(self) -> None:
        session = ensure_complete_session({"enabled": None, "messageFilters": None}, "private")

        assert session.enabled is True
        assert session.message_filters == default_message_filters()

    def test_sparse_filter_map_is_filled(self) -> None:
        session = ensure_complete_session(
            {"messageFilters": {"respondToAll": False, "enabledTypes": {"photo": False}}},
            "group",
        )

        enabled = session.message_filters.enabled_types
        assert enabled[MessageType.PHOTO] is False
        assert enabled[MessageType.TEXT] is True
        assert len(enabled) == len(MessageType)

    def test_user_overrides_are_completed(self) -> None:
        session = ensure_complete_session(
            {
                "usePerUserPreferences": True,
                "userPreferences": {"42": {"viewPreferences": {"displayMode": "full"}}},
            },
            "group",
        )

        override = session.user_preferences[42].view_preferences
        assert override.display_mode is DisplayMode.FULL
        assert override.privacy_options.mask_phone_numbers is True

    @pytest.mark.parametrize(
        "partial",
        [
            None,
            {},
            {"enabled": True},
            {"viewPreferences": {"privacyOptions": {"maskChatIds": True}}},
            {"messageFilters": {"enabledTypes": {"voice": False}}},
            {"userPreferences": {"7": {}}, "usePerUserPreferences": True},
        ],
    )
    @pytest.mark.parametrize("chat_type", ["private", "supergroup", None])
    def test_idempotent(self, partial, chat_type) -> None:
        once = ensure_complete_session(partial, chat_type)

        assert ensure_complete_session(once, chat_type) == once
        assert ensure_complete_session(once.to_record(), chat_type) == once

    def test_unknown_filter_types_are_dropped(self) -> None:
        session = ensure_complete_session(
            {"enabled": True, "messageFilters": {"respondToAll": False, "enabledTypes": {"gif": False, "voice": False}}},
            "group",
        )

        assert session.enabled is True
        assert session.message_filters.enabled_types[MessageType.VOICE] is False
        assert set(session.message_filters.enabled_types) == set(MessageType)

    @pytest.mark.parametrize(
        "partial",
        [
            {"viewPreferences": {"displayMode": "huge"}},
            {"enabled": "sometimes"},
            {"userPreferences": {"not-a-user": {}}},
            {"userPreferences": ["7"]},
        ],
    )
    def test_invalid_record_falls_back_to_defaults(self, partial, caplog) -> None:
        with caplog.at_level("WARNING", logger="inspector_bot.services.preferences"):
            session = ensure_complete_session(partial, "supergroup")

        assert session == default_session("supergroup")
        assert "Discarding invalid session record" in caplog.text


class TestEffectivePreferences:
    def _session_with_override(self, per_user: bool) -> SessionData:
        session = default_session("group")
        session.use_per_user_preferences = per_user
        override = default_view_preferences(is_group=False)
        override.display_mode = DisplayMode.FULL
        session.user_preferences[42] = UserPreferences(view_preferences=override)
        return session

    def test_group_preferences_when_per_user_off(self) -> None:
        session = self._session_with_override(per_user=False)

        assert get_effective_preferences(session, 42) == session.view_preferences
        assert get_effective_preferences(session, None) == session.view_preferences

    def test_user_override_when_per_user_on(self) -> None:
        session = self._session_with_override(per_user=True)

        preferences = get_effective_preferences(session, 42)

        assert preferences is session.user_preferences[42].view_preferences
        assert preferences.display_mode is DisplayMode.FULL

    def test_unknown_user_falls_back_without_creating_entry(self) -> None:
        session = self._session_with_override(per_user=True)

        assert get_effective_preferences(session, 99) == session.view_preferences
        assert 99 not in session.user_preferences


class TestShouldProcessMessageType:
    def test_missing_filters_fail_open(self) -> None:
        assert should_process_message_type(None, "photo") is True

    def test_explicit_false_blocks(self) -> None:
        filters = {"respondToAll": False, "enabledTypes": {"photo": False, "text": True}}

        assert should_process_message_type(filters, "photo") is False
        assert should_process_message_type(filters, "text") is True

    def test_respond_to_all_ignores_map(self) -> None:
        filters = MessageFilters(enabled_types={MessageType.PHOTO: False}, respond_to_all=True)

        assert should_process_message_type(filters, MessageType.PHOTO) is True

    def test_legacy_missing_respond_to_all(self) -> None:
        assert should_process_message_type({"enabledTypes": {"photo": False}}, "photo") is True

    def test_missing_entry_defaults_to_true(self) -> None:
        filters = MessageFilters(enabled_types={MessageType.PHOTO: False}, respond_to_all=False)

        assert should_process_message_type(filters, MessageType.VOICE) is True
        assert should_process_message_type(filters, MessageType.PHOTO) is False

    def test_missing_map_defaults_to_true(self) -> None:
        assert should_process_message_type({"respondToAll": False}, "sticker") is True


class TestDetectMessageType:
    def test_forward_wins_over_content(self) -> None:
        message = {"photo": [{"file_id": "x"}], "forward_origin": {"type": "user"}}

        assert detect_message_type(message) is MessageType.FORWARD

    def test_animation_checked_before_document(self) -> None:
        message = {"animation": {"file_id": "a"}, "document": {"file_id": "a"}}

        assert detect_message_type(message) is MessageType.ANIMATION

    def test_text(self) -> None:
        assert detect_message_type({"text": "hi"}) is MessageType.TEXT

    def test_service_message_is_unclassified(self) -> None:
        assert detect_message_type({"new_chat_title": "x"}) is None
        assert detect_message_type({}) is None
