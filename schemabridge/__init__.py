"""
schemabridge - drive document and relational schemas from one pydantic model.

    from schemabridge import document_schema, generate_prisma_schema, to_object

    definition = document_schema(User, {"posts": "Post"})
    prisma_text = generate_prisma_schema([("User", User)], {User: "User"}, {"User": User})
    payload = to_object(User, raw, partial=True)
"""
import logging
from typing import Optional

from .core.config import settings, get_settings, Settings
from .exceptions import SchemaBridgeError, SchemaValidationError, UnsupportedSchemaError
from .schemas import (
    FieldFallback, UnwrappedField, model_ref, reference_target, unwrap,
    describe_annotation, describe_field, model_shape,
)
from .document import (
    DocumentType, DocumentField, DocumentModelRegistry, build_document_model,
    create_document_model, document_schema,
)
from .prisma import PrismaConfig, ModelEntry, PrismaSchemaGenerator, generate_prisma_schema
from .validation import to_object, partial_model

__version__ = "0.1.0"


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging for scripts using schemabridge."""
    level_name = (level or settings.LOG_LEVEL).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


__all__ = [
    'settings', 'get_settings', 'Settings', 'configure_logging',
    'SchemaBridgeError', 'SchemaValidationError', 'UnsupportedSchemaError',
    'FieldFallback', 'UnwrappedField', 'model_ref', 'reference_target', 'unwrap',
    'describe_annotation', 'describe_field', 'model_shape',
    'DocumentType', 'DocumentField', 'DocumentModelRegistry', 'build_document_model',
    'create_document_model', 'document_schema',
    'PrismaConfig', 'ModelEntry', 'PrismaSchemaGenerator', 'generate_prisma_schema',
    'to_object', 'partial_model',
]
