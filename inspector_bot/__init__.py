"""Inspector Bot Application Package.

A Telegram bot that replies to messages with what the Bot API reports about
them: ids, the original sender of forwarded messages and the raw update JSON.
Display preferences are kept per chat, with optional per-user overrides.

The application follows a modular architecture with separate concerns for:
- Bot handlers, keyboards and report formatting
- Preference defaults, resolution and privacy masking
- Settings export/import and session storage
"""
