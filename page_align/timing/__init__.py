"""Page timestamp derivation and validation."""

from .derive import (
    ContractViolation,
    DerivedTimestamp,
    derive_timestamp,
    derive_timestamps,
    validate_timestamp_sequence,
)
from .formatting import format_duration, format_timestamp

__all__ = [
    "ContractViolation",
    "DerivedTimestamp",
    "derive_timestamp",
    "derive_timestamps",
    "format_duration",
    "format_timestamp",
    "validate_timestamp_sequence",
]
