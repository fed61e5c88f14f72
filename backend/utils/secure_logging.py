"""
Log-safe helpers for report locations and submitter identities.

Flood reports carry a reporter's precise position and user id; log lines keep
only coarse locations and one-way hashed ids.

Usage:
    from utils.secure_logging import coarse_location, hash_user_id

    logger.info(f"Report near {coarse_location(lat, lon)} by {hash_user_id(uid)}")
    # Output: "Report near (29.45, -98.50) by 3f1c0d9a2b7e4c10"
"""

import re
import hashlib

# 4+ decimal places is ~11m precision
PRECISE_COORDINATE = re.compile(r'-?\d{1,3}\.\d{4,}')


def redact_coordinates(text: str) -> str:
    """
    Mask precise coordinates in a log message.

    Examples:
        >>> redact_coordinates("Report at 29.4241, -98.4936")
        'Report at [COORD_REDACTED], [COORD_REDACTED]'
        >>> redact_coordinates("Radius 2.5 mi")
        'Radius 2.5 mi'
    """
    if not text:
        return text
    return PRECISE_COORDINATE.sub('[COORD_REDACTED]', text)


def coarse_location(latitude: float, longitude: float) -> str:
    """Round a position to 2 decimals (~1 km) for logging."""
    try:
        return f'({float(latitude):.2f}, {float(longitude):.2f})'
    except (TypeError, ValueError):
        return '(unknown)'


def hash_user_id(user_id: str, length: int = 16) -> str:
    """
    One-way hash of a user id so log lines can be correlated without
    exposing the id itself.

    Examples:
        >>> hash_user_id('') == '[NO_USER_ID]'
        True
        >>> hash_user_id('user_1') == hash_user_id('user_1')
        True
    """
    if not user_id:
        return '[NO_USER_ID]'

    return hashlib.sha256(user_id.encode()).hexdigest()[:length]
