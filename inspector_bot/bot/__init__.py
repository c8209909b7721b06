"""Telegram bot implementation package.

Contains all Telegram specific functionality: command, callback and message
handlers, inline keyboards, callback decoding, forward-origin classification
and update report formatting.
"""
