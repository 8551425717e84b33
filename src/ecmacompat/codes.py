"""Reason code constants for ecmacompat reports.

These constants prevent stringly-typed reasons and ensure
client code matches on the correct codes.
"""

from enum import Enum


class ReasonCode(str, Enum):
    """Why a feature fails a target."""

    # version_added: false
    NOT_SUPPORTED = "NOT_SUPPORTED"
    # version_added is a version later than the target's
    VERSION_TOO_LOW = "VERSION_TOO_LOW"
