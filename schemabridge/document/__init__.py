"""
Document-mapper output: schema definitions and the model registry.
"""
from .types import DocumentType, DocumentField, DocumentDefinition, FieldValidator, EMAIL_PATTERN
from .converter import document_schema, classify_field
from .registry import DocumentModelRegistry, build_document_model, create_document_model

__all__ = [
    'DocumentType', 'DocumentField', 'DocumentDefinition', 'FieldValidator', 'EMAIL_PATTERN',
    'document_schema', 'classify_field',
    'DocumentModelRegistry', 'build_document_model', 'create_document_model',
]
