"""Configuration for schema compilation and tool generation."""

import logging

from dataclasses import dataclass, field

from protomcp.types import ExtraProperty
from protomcp.utils.constants import DEFAULT_MAX_TOOL_NAME_LENGTH
from protomcp.utils.errors import ConfigError


logger = logging.getLogger(__name__)

_TRUE_VALUES = frozenset({'1', 'true', 'yes', 'on'})
_FALSE_VALUES = frozenset({'0', 'false', 'no', 'off'})
_BOOL_OPTIONS = (
    'optional_keyword_support',
    'validate_arguments',
    'toon_responses',
)


def _parse_bool(key: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigError(f'Invalid boolean value for {key}: {value!r}')


@dataclass
class GeneratorConfig:
    """Options controlling how descriptors become tools.

    Attributes:
        optional_keyword_support: When enabled, every singular field that is
            not declared with the proto3 `optional` keyword is required in
            the generated schema. When disabled, only fields annotated with
            `google.api.field_behavior = REQUIRED` are required.
        max_tool_name_length: Upper bound for generated tool names. Longer
            names are mangled deterministically.
        extra_properties: Caller declared tool arguments that are merged into
            every tool's input schema.
        validate_arguments: Whether tool call arguments are checked against
            the tool's input schema before decoding.
        toon_responses: Whether tool results are rendered in TOON instead
            of JSON.
    """

    optional_keyword_support: bool = False
    max_tool_name_length: int = DEFAULT_MAX_TOOL_NAME_LENGTH
    extra_properties: list[ExtraProperty] = field(default_factory=list)
    validate_arguments: bool = False
    toon_responses: bool = False

    def __post_init__(self) -> None:
        if self.max_tool_name_length <= 0:
            raise ConfigError('max_tool_name_length must be positive')
        names = [prop.name for prop in self.extra_properties]
        if len(names) != len(set(names)):
            raise ConfigError('extra property names must be unique')

    @classmethod
    def from_parameter(cls, parameter: str) -> 'GeneratorConfig':
        """Builds a configuration from a protoc plugin parameter string.

        The parameter is a comma separated list of `key=value` pairs, for
        example `optional_keyword_support=true,max_tool_name_length=48`.

        Args:
            parameter: The raw parameter string. Empty means defaults.

        Returns:
            The parsed configuration.

        Raises:
            ConfigError: If a key is unknown or a value cannot be parsed.
        """
        kwargs: dict[str, bool | int] = {}
        for item in parameter.split(','):
            item = item.strip()
            if not item:
                continue
            key, sep, value = item.partition('=')
            key = key.strip()
            if not sep:
                raise ConfigError(f'Expected key=value, got {item!r}')
            if key in _BOOL_OPTIONS:
                kwargs[key] = _parse_bool(key, value)
            elif key == 'max_tool_name_length':
                try:
                    kwargs[key] = int(value)
                except ValueError as e:
                    raise ConfigError(
                        f'Invalid integer value for {key}: {value!r}'
                    ) from e
            else:
                raise ConfigError(f'Unknown generator option: {key}')
        logger.debug('Parsed generator options: %s', kwargs)
        return cls(**kwargs)  # type: ignore[arg-type]
