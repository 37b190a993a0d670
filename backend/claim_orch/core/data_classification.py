"""
Data classification for caller payloads.
Defines sensitivity levels for request fields and masks them before logging.
"""

from enum import Enum
from typing import Any


class DataClassification(Enum):
    """Data sensitivity classification levels."""
    PUBLIC = "public"
    INTERNAL = "internal"
    CONFIDENTIAL = "confidential"
    RESTRICTED = "restricted"


# Field classifications for FNOL and payment request bodies
FIELD_CLASSIFICATIONS: dict[str, DataClassification] = {
    # Identifiers
    "newecofnolid": DataClassification.INTERNAL,
    "currhouseclaimid": DataClassification.INTERNAL,
    "policyno": DataClassification.INTERNAL,

    # People
    "policyholdername": DataClassification.CONFIDENTIAL,
    "name": DataClassification.CONFIDENTIAL,
    "claimowner": DataClassification.INTERNAL,
    "telephone": DataClassification.RESTRICTED,

    # Location
    "addressline1": DataClassification.CONFIDENTIAL,
    "postcode": DataClassification.CONFIDENTIAL,

    # Money
    "estimatedloss": DataClassification.INTERNAL,
    "initlossindemnity": DataClassification.INTERNAL,
    "settleamount": DataClassification.INTERNAL,
}


def get_field_classification(field_name: str) -> DataClassification:
    """Get the classification level for a field."""
    return FIELD_CLASSIFICATIONS.get(
        field_name.lower(),
        DataClassification.INTERNAL
    )


def mask_value(value: str, classification: DataClassification) -> str:
    """Mask a value based on its classification."""
    if classification in (DataClassification.PUBLIC, DataClassification.INTERNAL):
        return value
    elif classification == DataClassification.CONFIDENTIAL:
        # Show first and last characters
        if len(value) <= 4:
            return "*" * len(value)
        return f"{value[0]}{'*' * (len(value) - 2)}{value[-1]}"
    else:  # RESTRICTED
        return "*" * min(len(value), 8)


def sanitize_for_logging(data: dict[str, Any]) -> dict[str, Any]:
    """Sanitize a dictionary for safe logging."""
    sanitized = {}

    for key, value in data.items():
        classification = get_field_classification(key)

        if value is None:
            sanitized[key] = None
        elif isinstance(value, str):
            sanitized[key] = mask_value(value, classification)
        elif isinstance(value, dict):
            sanitized[key] = sanitize_for_logging(value)
        elif isinstance(value, list):
            sanitized[key] = [
                sanitize_for_logging(item) if isinstance(item, dict) else item
                for item in value
            ]
        else:
            sanitized[key] = value

    return sanitized
