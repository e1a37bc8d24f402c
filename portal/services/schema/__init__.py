from portal.services.schema.registry import EntitySchema, SchemaRegistry
from portal.services.schema.validator import SchemaValidator, ValidationResult, format_validation_result

__all__ = [
    "EntitySchema",
    "SchemaRegistry",
    "SchemaValidator",
    "ValidationResult",
    "format_validation_result",
]
