"""
Prisma schema generation.
"""
from .generator import (
    PrismaConfig, ModelEntry, PrismaSchemaGenerator, generate_prisma_schema,
    UNSUPPORTED_SCHEMA_MESSAGE,
)

__all__ = [
    'PrismaConfig', 'ModelEntry', 'PrismaSchemaGenerator', 'generate_prisma_schema',
    'UNSUPPORTED_SCHEMA_MESSAGE',
]
