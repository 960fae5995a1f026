"""JSON Schema checks for compiled schemas and tool call arguments.

Compiled documents use the 2020-12 vocabulary (`$defs`, `const`), so both
the meta-schema check and argument validation use the 2020-12 validator.
"""

from typing import Any

import jsonschema

from protomcp.utils.errors import (
    ArgumentValidationError,
    SchemaCompilationError,
)


def check_schema(schema: dict[str, Any]) -> None:
    """Checks a compiled document against the 2020-12 meta-schema.

    Raises:
        SchemaCompilationError: If the document is not a valid schema.
    """
    try:
        jsonschema.Draft202012Validator.check_schema(schema)
    except jsonschema.SchemaError as e:
        raise SchemaCompilationError(
            f'Compiled schema is invalid: {e.message}'
        ) from e


def build_validator(schema: dict[str, Any]) -> jsonschema.Draft202012Validator:
    """Returns a reusable validator for a compiled document."""
    return jsonschema.Draft202012Validator(schema)


def validate_arguments(
    arguments: Any,
    validator: jsonschema.Draft202012Validator,
) -> None:
    """Validates tool call arguments before they are decoded.

    Args:
        arguments: Decoded JSON arguments of a tool call.
        validator: Validator built from the tool's input schema.

    Raises:
        ArgumentValidationError: If the arguments violate the schema. All
            violations are reported in `errors`, the most relevant one in
            the message.
    """
    errors = list(validator.iter_errors(arguments))
    if not errors:
        return
    best = jsonschema.exceptions.best_match(errors)
    raise ArgumentValidationError(
        f'Arguments do not match the input schema: {best.message}',
        errors=[
            {'path': list(error.absolute_path), 'message': error.message}
            for error in errors
        ],
    )
