"""Business logic services package.

Contains the framework-independent logic: preference defaults and resolution,
privacy masking, the settings codec and session storage backends.
"""
