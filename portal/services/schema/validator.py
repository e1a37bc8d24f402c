"""Validation of discovered Notion databases against expected entity schemas.

Structural drift (missing properties, wrong types, missing select options)
is reported as data in a ``ValidationResult`` rather than raised: callers may
decide to use a partially matching database anyway.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Type

from portal.models.notion_models import DiscoveredCollection, LogicalEntityType, PropertySpec, RemoteType
from portal.services.schema.registry import EntitySchema, SchemaRegistry
from portal.utils.logging import get_logger

LOGGER = get_logger(__name__)


@dataclass
class ValidationResult:
    """Result of validating one database against one entity type.

    Attributes:
        is_valid: True when no errors were recorded
        errors: Error messages, in the order checks ran
        warnings: Informational messages; never affect validity
        present_properties: Expected properties found (logical names)
        missing_properties: Required properties not found (logical names)
        incorrect_type_properties: Properties found with the wrong type
    """
    is_valid: bool = False
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    present_properties: List[str] = field(default_factory=list)
    missing_properties: List[str] = field(default_factory=list)
    incorrect_type_properties: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "is_valid": self.is_valid,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "properties": {
                "present": list(self.present_properties),
                "missing": list(self.missing_properties),
                "incorrect": list(self.incorrect_type_properties),
            },
        }


def _append_unique(values: List[str], value: str) -> None:
    if value not in values:
        values.append(value)


class SchemaValidator:
    """Checks a database's properties against the registry's expectations.

    Required properties are grouped by Notion type first: a database with no
    property of a required type at all gets one error for the whole type.
    Names are then resolved strictly (verbatim keys) or, for lenient schemas,
    through synonym substrings so that e.g. a title property called "Title"
    satisfies the FAQ "Question" requirement.
    """

    def __init__(self, registry: Type[SchemaRegistry] = SchemaRegistry):
        self.registry = registry

    def validate(self, collection: DiscoveredCollection, entity_type: str) -> ValidationResult:
        """Validate a database against an entity type's expected schema.

        Args:
            collection: Discovered database
            entity_type: LogicalEntityType (or its string value)

        Returns:
            ValidationResult with errors, warnings and property breakdown
        """
        result = ValidationResult()

        schema = self.registry.get_schema(entity_type)
        if schema is None:
            type_name = entity_type.value if isinstance(entity_type, LogicalEntityType) else entity_type
            result.errors.append(f"No schema defined for database type: {type_name}")
            return result

        # Logical property name -> actual property name, for synonym matches
        matched: Dict[str, str] = {}

        self._check_required(schema, collection, result, matched)
        self._check_declared(schema, collection, result, matched)
        self._check_extra(schema, collection, result, matched)

        result.is_valid = not result.errors

        if result.is_valid:
            LOGGER.info(
                f"{schema.entity_type.value} database '{collection.title}' is valid "
                f"({len(result.warnings)} warning(s))"
            )
        else:
            LOGGER.warning(
                f"{schema.entity_type.value} database '{collection.title}' is invalid",
                extra={"database_id": collection.id, "errors": result.errors},
            )

        return result

    def _check_required(
        self,
        schema: EntitySchema,
        collection: DiscoveredCollection,
        result: ValidationResult,
        matched: Dict[str, str],
    ) -> None:
        """Check that every required property (or its synonym) exists."""
        required_by_type: Dict[str, List[PropertySpec]] = {}
        for spec in schema.required_properties:
            required_by_type.setdefault(spec.remote_type.value, []).append(spec)

        actual_by_type: Dict[str, List[str]] = {}
        for name, prop_type in collection.properties.items():
            actual_by_type.setdefault(prop_type, []).append(name)

        for remote_type, specs in required_by_type.items():
            candidates = actual_by_type.get(remote_type, [])

            if not candidates:
                names = ", ".join(spec.name for spec in specs)
                result.errors.append(
                    f'Missing required property type: "{remote_type}" (expected {names})'
                )
                for spec in specs:
                    _append_unique(result.missing_properties, spec.name)
                continue

            for spec in specs:
                if schema.lenient and spec.synonyms:
                    actual_name = self._match_synonym(spec, candidates, matched)
                    if actual_name is None:
                        result.errors.append(
                            f'Missing required property: "{spec.name}" '
                            f'(no {remote_type} property containing {", ".join(spec.synonyms)})'
                        )
                        _append_unique(result.missing_properties, spec.name)
                    else:
                        matched[spec.name] = actual_name
                        _append_unique(result.present_properties, spec.name)
                elif spec.name not in collection.properties:
                    result.errors.append(f'Missing required property: "{spec.name}"')
                    _append_unique(result.missing_properties, spec.name)

    @staticmethod
    def _match_synonym(
        spec: PropertySpec, candidates: List[str], matched: Dict[str, str]
    ) -> Optional[str]:
        """Find the actual property satisfying a lenient requirement.

        The verbatim name wins; otherwise the first unclaimed candidate whose
        lowercased name contains a synonym.
        """
        if spec.name in candidates:
            return spec.name

        claimed = set(matched.values())
        for name in candidates:
            if name in claimed:
                continue
            lowered = name.lower()
            if any(synonym in lowered for synonym in spec.synonyms):
                return name
        return None

    def _check_declared(
        self,
        schema: EntitySchema,
        collection: DiscoveredCollection,
        result: ValidationResult,
        matched: Dict[str, str],
    ) -> None:
        """Check types and select options of declared properties that exist."""
        for spec in schema.properties:
            actual_type = collection.properties.get(spec.name)

            if actual_type is None:
                if not spec.required and spec.name not in matched:
                    result.warnings.append(
                        f'Optional property "{spec.name}" is not present in the database'
                    )
                continue

            _append_unique(result.present_properties, spec.name)

            if actual_type != spec.remote_type.value:
                result.errors.append(
                    f'Property "{spec.name}" has wrong type. '
                    f'Expected "{spec.remote_type.value}", got "{actual_type}"'
                )
                _append_unique(result.incorrect_type_properties, spec.name)
                continue

            if spec.remote_type == RemoteType.SELECT and spec.expected_options:
                self._check_options(schema, spec, collection, result)

    def _check_options(
        self,
        schema: EntitySchema,
        spec: PropertySpec,
        collection: DiscoveredCollection,
        result: ValidationResult,
    ) -> None:
        existing = set(collection.select_options.get(spec.name, []))
        missing_options = [option for option in spec.expected_options if option not in existing]
        if not missing_options:
            return

        if self.registry.has_customizable_options(schema.entity_type, spec.name):
            result.warnings.append(
                f'Property "{spec.name}" uses custom select options '
                f'(default options not present: {", ".join(missing_options)})'
            )
        else:
            result.warnings.append(
                f'Property "{spec.name}" is missing select options: {", ".join(missing_options)}'
            )

    @staticmethod
    def _check_extra(
        schema: EntitySchema,
        collection: DiscoveredCollection,
        result: ValidationResult,
        matched: Dict[str, str],
    ) -> None:
        """Report properties the schema does not know about."""
        known = set(schema.property_names) | set(matched.values())
        extra = [name for name in collection.properties if name not in known]
        if extra:
            result.warnings.append(
                f"Database contains additional properties not in schema: {', '.join(extra)}"
            )


def format_validation_result(result: ValidationResult, entity_type: str) -> str:
    """Render a validation result as a readable multi-line report."""
    type_name = entity_type.value if isinstance(entity_type, LogicalEntityType) else entity_type
    lines: List[str] = []

    if result.is_valid:
        lines.append(f"{type_name} database schema is valid")
    else:
        lines.append(f"{type_name} database schema is invalid")
        if result.errors:
            lines.append("Errors:")
            lines.extend(f"  - {error}" for error in result.errors)
        if result.missing_properties:
            lines.append("Missing properties:")
            lines.extend(f"  - {name}" for name in result.missing_properties)
        if result.incorrect_type_properties:
            lines.append("Incorrect property types:")
            lines.extend(f"  - {name}" for name in result.incorrect_type_properties)

    if result.warnings:
        lines.append("Warnings:")
        lines.extend(f"  - {warning}" for warning in result.warnings)

    return "\n".join(lines)
