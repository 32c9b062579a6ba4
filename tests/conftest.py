"""
Pytest configuration and fixtures for schemabridge tests.
"""
from typing import List

import pytest

from schemabridge import DocumentModelRegistry, FieldFallback


@pytest.fixture
def fallbacks() -> List[FieldFallback]:
    """Collects fields that degraded to an opaque type."""
    return []


@pytest.fixture
def registry() -> DocumentModelRegistry:
    """A fresh document model registry."""
    return DocumentModelRegistry()
