"""
Validation helpers shared by the request models
"""

from typing import Optional


def reject_blank(value: Optional[str]) -> Optional[str]:
    """Text fields may be omitted where optional, but never whitespace only"""
    if value is not None and not value.strip():
        raise ValueError("must not be blank")
    return value
