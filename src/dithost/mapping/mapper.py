"""Schema-validated configuration mappers.

A mapper turns an untyped JSON tree into a typed output value in three
steps: validate against ``input_model``, parse into the typed input, apply
the pure ``map`` transform. Mappers compose with :meth:`ConfigMapper.then`,
which hands the first mapper's output to the second one *through JSON*, so
each stage re-validates what it receives.

Manifesto:
    - **Validate at the edge:** ``map`` only ever sees a parsed, typed input
    - **Pure transforms:** ``map`` has no side effects and no I/O
    - **Fail whole:** any stage failure aborts a chain; there are no partial results
    - **Typed errors:** schema problems raise ``ValidationError``, rule
      violations ``TransformError``

Architecture:
    ::

        raw JSON ──► SchemaValidator(input_model) ──► I ──► map(I) ──► O
                          │                                  │
                   ValidationError                    TransformError

        a.then(b):
        raw ──► a.validate ──► a.map ──► to_json_value ──► b.validate_and_map ──► Z

Examples:
    >>> class Upper(ConfigMapper[Greeting, Greeting]):
    ...     input_model = Greeting
    ...     output_model = Greeting
    ...     def map(self, config):
    ...         return Greeting(text=config.text.upper())
    >>> Upper().validate_and_map({"text": "hi"})
    Greeting(text='HI')
    >>> chain(Upper(), Upper()).validate_and_map({"text": "hi"}).text
    'HI'

Tags:
    mapping, validation, pydantic, composition, dithost

Doc-Types:
    api-reference
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from functools import reduce
from typing import Any, Generic, TypeVar

from dithost.core.errors import ConfigError, DitHostError, TransformError
from dithost.core.logging import get_logger
from dithost.mapping.schema import SchemaValidator, to_json_value
from dithost.models.app import JSONValue

logger = get_logger(__name__)

I = TypeVar("I")  # noqa: E741
O = TypeVar("O")  # noqa: E741
Z = TypeVar("Z")


class ConfigMapper(ABC, Generic[I, O]):
    """Validate raw JSON into ``input_model`` and transform it to ``output_model``.

    Subclasses declare ``input_model`` / ``output_model`` as class attributes
    and implement :meth:`map`.
    """

    input_model: type[I]
    output_model: type[O]

    @property
    def name(self) -> str:
        return self.__class__.__name__

    @property
    def validator(self) -> SchemaValidator:
        return SchemaValidator(self.input_model)

    @abstractmethod
    def map(self, config: I) -> O:
        """Transform a validated input into the output config.

        Raise ``TransformError`` for business-rule violations.
        """

    def validate(self, raw: JSONValue) -> I:
        """Validate and parse ``raw`` without transforming it."""
        return self.validator.validate(raw)

    def transform(self, config: I) -> O:
        """Run :meth:`map`, wrapping unexpected exceptions in ``TransformError``."""
        try:
            return self.map(config)
        except DitHostError:
            raise
        except Exception as e:
            logger.warning("mapper_transform_failed", mapper=self.name, error=str(e))
            raise TransformError(f"{self.name} failed: {e}", cause=e) from e

    def validate_and_map(self, raw: JSONValue) -> O:
        """Validate ``raw`` against ``input_model`` and transform it.

        Raises:
            ValidationError: ``raw`` does not conform to ``input_model``.
            TransformError: The transform rejected the validated config.
        """
        return self.transform(self.validate(raw))

    def validate_and_map_config(self, config: Any) -> O:
        """Re-enter :meth:`validate_and_map` with an already-typed value."""
        return self.validate_and_map(to_json_value(config))

    def then(self, other: ConfigMapper[Any, Z]) -> ChainedConfigMapper[I, Z]:
        """Compose ``self`` (I -> O) with ``other`` (O -> Z) into I -> Z."""
        return ChainedConfigMapper(self, other)

    def __repr__(self) -> str:
        return (
            f"{self.name}({getattr(self.input_model, '__name__', '?')} -> "
            f"{getattr(self.output_model, '__name__', '?')})"
        )


class ChainedConfigMapper(ConfigMapper[I, Z]):
    """Two mappers run back to back, joined through JSON."""

    def __init__(self, first: ConfigMapper[I, Any], second: ConfigMapper[Any, Z]):
        self.first = first
        self.second = second
        self.input_model = first.input_model
        self.output_model = second.output_model

    @property
    def name(self) -> str:
        return f"{self.first.name}>{self.second.name}"

    def map(self, config: I) -> Z:
        intermediate = self.first.transform(config)
        return self.second.validate_and_map(to_json_value(intermediate))


class FunctionMapper(ConfigMapper[I, O]):
    """Lift a plain callable into a mapper.

    Example:
        >>> to_user_data = FunctionMapper(
        ...     CloudConfig,
        ...     lambda c: InstanceConfig(user_data=c.generate_cloud_config()),
        ...     output_model=InstanceConfig,
        ... )
    """

    def __init__(
        self,
        input_model: type[I],
        fn: Callable[[I], O],
        *,
        output_model: type[O] | type[Any] = object,
        name: str | None = None,
    ):
        self.input_model = input_model
        self.output_model = output_model
        self._fn = fn
        self._name = name or getattr(fn, "__name__", "function")

    @property
    def name(self) -> str:
        return self._name

    def map(self, config: I) -> O:
        return self._fn(config)


def chain(*mappers: ConfigMapper) -> ConfigMapper:
    """Fold ``mappers`` left to right with :meth:`ConfigMapper.then`."""
    if not mappers:
        raise ConfigError("chain() needs at least one mapper")
    return reduce(lambda left, right: left.then(right), mappers)


__all__ = ["ConfigMapper", "ChainedConfigMapper", "FunctionMapper", "chain"]
