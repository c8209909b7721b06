"""Privacy masking for rendered reports.

Each enabled option runs one substitution over the text. The passes run in a
fixed order (user ids, phone numbers, chat ids) and each one sees the output
of the previous pass.
"""

import re
from typing import Final

from ..models import PrivacyOptions

USER_ID_PATTERN: Final[re.Pattern[str]] = re.compile(r"(?<!\d)(\d{8,10})(?!\d)")
PHONE_NUMBER_PATTERN: Final[re.Pattern[str]] = re.compile(r"\+(\d{1,3})\d{6,}")
CHAT_ID_PATTERN: Final[re.Pattern[str]] = re.compile(r"(-100\d{6,})")

MASK = "****"
PHONE_MASK = "******"


def apply_privacy_mask(text: str, options: PrivacyOptions | None) -> str:
    """Obfuscate numeric identifiers in ``text``.

    User and chat ids keep their digits between mask markers so they stay
    recognisable while debugging; phone numbers lose everything after the
    country code.

    Args:
        text: Rendered report.
        options: Which masks to apply, nothing is masked when None.

    Returns:
        The masked text.
    """
    if options is None:
        return text

    if options.mask_user_ids:
        text = USER_ID_PATTERN.sub(rf"{MASK}\1{MASK}", text)

    if options.mask_phone_numbers:
        text = PHONE_NUMBER_PATTERN.sub(rf"+\1{PHONE_MASK}", text)

    if options.mask_chat_ids:
        text = CHAT_ID_PATTERN.sub(rf"{MASK}\1{MASK}", text)

    return text
