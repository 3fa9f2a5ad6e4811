"""JSON Schema validation of outgoing messages (development builds only)."""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from jsonschema import Draft6Validator
from jsonschema.exceptions import ValidationError
from jsonschema.validators import validator_for

from typewriter_runtime.models import Message, SchemaViolation


def check_schema(schema: Mapping[str, Any] | bool) -> None:
    """Raise ``jsonschema.exceptions.SchemaError`` when ``schema`` is malformed."""
    validator_for(schema, default=Draft6Validator).check_schema(schema)


def is_message_schema(schema: Mapping[str, Any] | bool) -> bool:
    """True when ``schema`` describes the whole message rather than its properties."""
    if not isinstance(schema, Mapping):
        return False
    declared = schema.get("properties")
    return isinstance(declared, Mapping) and "properties" in declared


def _pointer(parts: Iterable[Any]) -> str:
    return "".join(f"/{part}" for part in parts)


class SchemaValidator:
    """Validates messages against draft-04/06 JSON Schemas, collecting every error."""

    def __init__(self) -> None:
        self._validators: dict[int, tuple[Mapping[str, Any] | bool, Any]] = {}

    def validate(self, message: Message, schema: Mapping[str, Any] | bool | None = None) -> list[SchemaViolation]:
        """Return all violations by ``message``; empty when it conforms.

        The identity rule is always checked. ``schema`` is applied when given.
        """
        violations = self._identity_violations(message)
        if schema is not None:
            payload = message.to_payload()
            if is_message_schema(schema):
                instance: Any = payload
                prefix: tuple[str, ...] = ()
            else:
                instance = payload["properties"]
                prefix = ("properties",)
            errors = self._validator(schema).iter_errors(instance)
            violations.extend(self._to_violation(error, prefix) for error in errors)

        return sorted(violations, key=lambda violation: (violation.path, violation.keyword))

    def _validator(self, schema: Mapping[str, Any] | bool):
        cached = self._validators.get(id(schema))
        if cached is not None and cached[0] is schema:
            return cached[1]

        validator = validator_for(schema, default=Draft6Validator)(schema)
        self._validators[id(schema)] = (schema, validator)
        return validator

    @staticmethod
    def _to_violation(error: ValidationError, prefix: tuple[str, ...]) -> SchemaViolation:
        return SchemaViolation(
            path=_pointer([*prefix, *error.absolute_path]),
            keyword="false" if error.validator is None else str(error.validator),
            message=error.message,
            expected=error.validator_value,
            value=error.instance,
        )

    @staticmethod
    def _identity_violations(message: Message) -> list[SchemaViolation]:
        identity = message.identity
        if identity is None:
            return []

        present = [key for key, value in identity.as_payload().items() if value]
        if len(present) == 1:
            return []
        return [
            SchemaViolation(
                path="/userId",
                keyword="oneOf",
                message="Exactly one of userId or anonymousId must be set",
                expected=["userId", "anonymousId"],
                value=identity.as_payload(),
            )
        ]
