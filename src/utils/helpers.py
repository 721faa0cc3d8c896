"""
Utility functions and helpers
"""

import logging
from typing import Any, Optional
from uuid import UUID

logger = logging.getLogger(__name__)


def normalize_record_id(value: Any) -> Optional[str]:
    """Return the canonical form of a store id, or None when it is malformed"""
    if isinstance(value, UUID):
        return str(value)
    if not isinstance(value, str):
        return None
    try:
        return str(UUID(value.strip()))
    except ValueError:
        logger.debug(f"Rejected malformed record id: {value!r}")
        return None
