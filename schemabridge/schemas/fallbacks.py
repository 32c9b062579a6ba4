"""
Diagnostics for fields that degrade to an opaque type.
"""
import logging
from dataclasses import dataclass
from typing import Any, List, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FieldFallback:
    """A field that was rendered as an opaque (Mixed / Json) type."""
    model: str
    field: str
    annotation: Any
    reason: str


def record_fallback(
    fallbacks: Optional[List[FieldFallback]],
    model: str,
    field: str,
    annotation: Any,
    reason: str
) -> None:
    """Log a fallback and append it to ``fallbacks`` when the caller collects them."""
    logger.warning(f"Field {model}.{field} falls back to an opaque type: {reason}")
    if fallbacks is not None:
        fallbacks.append(FieldFallback(model=model, field=field, annotation=annotation, reason=reason))


__all__ = ["FieldFallback", "record_fallback"]
