"""Tests for ConfigMapper, chaining, and FunctionMapper.

Tests:
    - validate_and_map happy path and error types
    - validate_and_map_config re-enters the JSON path
    - then() equivalence and associativity
    - chain() folding
    - FunctionMapper
"""

import pytest
from pydantic import BaseModel, Field

from dithost.core.errors import ConfigError, TransformError, ValidationError
from dithost.mapping.mapper import ChainedConfigMapper, ConfigMapper, FunctionMapper, chain
from dithost.mapping.schema import to_json_value


class Celsius(BaseModel):
    degrees: float


class Fahrenheit(BaseModel):
    degrees: float


class Kelvin(BaseModel):
    degrees: float = Field(ge=0)


class Label(BaseModel):
    text: str


class CelsiusToFahrenheit(ConfigMapper[Celsius, Fahrenheit]):
    input_model = Celsius
    output_model = Fahrenheit

    def map(self, config):
        return Fahrenheit(degrees=config.degrees * 9 / 5 + 32)


class FahrenheitToKelvin(ConfigMapper[Fahrenheit, Kelvin]):
    input_model = Fahrenheit
    output_model = Kelvin

    def map(self, config):
        # Plain JSON out; Kelvin bounds are checked by the next stage
        return {"degrees": (config.degrees - 32) * 5 / 9 + 273.15}


class KelvinToLabel(ConfigMapper[Kelvin, Label]):
    input_model = Kelvin
    output_model = Label

    def map(self, config):
        if config.degrees > 10_000:
            raise TransformError("Too hot")
        return Label(text=f"{config.degrees:.2f}K")


class Page(BaseModel):
    limit: int | None = 5


class PassPage(ConfigMapper[Page, Page]):
    input_model = Page
    output_model = Page

    def map(self, config):
        return config


class Exploding(ConfigMapper[Celsius, Celsius]):
    input_model = Celsius
    output_model = Celsius

    def map(self, config):
        raise ZeroDivisionError("division by zero")


@pytest.fixture
def c_to_f():
    return CelsiusToFahrenheit()


@pytest.fixture
def f_to_k():
    return FahrenheitToKelvin()


@pytest.fixture
def k_to_label():
    return KelvinToLabel()


class TestValidateAndMap:
    """Validate, parse, transform."""

    def test_happy_path(self, c_to_f):
        assert c_to_f.validate_and_map({"degrees": 100}) == Fahrenheit(degrees=212)

    def test_schema_violation_raises_validation_error(self, c_to_f):
        with pytest.raises(ValidationError) as exc_info:
            c_to_f.validate_and_map({"degrees": "hot"})
        assert exc_info.value.path == "degrees"

    def test_missing_field_path(self, c_to_f):
        with pytest.raises(ValidationError) as exc_info:
            c_to_f.validate_and_map({})
        assert exc_info.value.path == "degrees"

    def test_transform_error_propagates_unchanged(self, k_to_label):
        with pytest.raises(TransformError, match="Too hot"):
            k_to_label.validate_and_map({"degrees": 20_000})

    def test_unexpected_exception_wrapped(self):
        with pytest.raises(TransformError) as exc_info:
            Exploding().validate_and_map({"degrees": 1})
        assert isinstance(exc_info.value.cause, ZeroDivisionError)

    def test_validate_and_map_config(self, c_to_f):
        assert c_to_f.validate_and_map_config(Celsius(degrees=0)) == Fahrenheit(degrees=32)

    def test_validate_and_map_config_accepts_other_compatible_model(self, c_to_f):
        # Fahrenheit has the same shape as Celsius, so it re-validates
        assert c_to_f.validate_and_map_config(Fahrenheit(degrees=100)).degrees == 212

    def test_explicit_none_kept_by_validate_and_map_config(self):
        assert PassPage().validate_and_map_config(Page(limit=None)) == Page(limit=None)

    def test_explicit_none_kept_through_then(self):
        mapper = PassPage().then(PassPage())
        assert mapper.validate_and_map({"limit": None}) == Page(limit=None)
        assert mapper.validate_and_map({}) == Page(limit=5)


class TestThen:
    """Chaining through JSON."""

    def test_then_builds_chained_mapper(self, c_to_f, f_to_k):
        chained = c_to_f.then(f_to_k)
        assert isinstance(chained, ChainedConfigMapper)
        assert chained.input_model is Celsius
        assert chained.output_model is Kelvin

    @pytest.mark.parametrize("raw", [{"degrees": 0}, {"degrees": 100}, {"degrees": -40}])
    def test_then_equals_sequential_application(self, c_to_f, f_to_k, raw):
        chained = c_to_f.then(f_to_k).validate_and_map(raw)
        sequential = f_to_k.validate_and_map(to_json_value(c_to_f.validate_and_map(raw)))
        assert chained == sequential

    @pytest.mark.parametrize("raw", [{"degrees": 0}, {"degrees": 36.6}])
    def test_associative(self, c_to_f, f_to_k, k_to_label, raw):
        left = c_to_f.then(f_to_k).then(k_to_label).validate_and_map(raw)
        right = c_to_f.then(f_to_k.then(k_to_label)).validate_and_map(raw)
        assert left == right

    def test_later_stage_validation_aborts_chain(self, c_to_f, f_to_k, k_to_label):
        # -300C is below absolute zero: Kelvin(ge=0) rejects it in the last stage
        with pytest.raises(ValidationError) as exc_info:
            c_to_f.then(f_to_k).then(k_to_label).validate_and_map({"degrees": -300})
        assert exc_info.value.path == "degrees"

    def test_first_stage_validation_aborts_chain(self, c_to_f, f_to_k, k_to_label):
        with pytest.raises(ValidationError):
            c_to_f.then(f_to_k).then(k_to_label).validate_and_map({"degrees": None})

    def test_name(self, c_to_f, f_to_k):
        assert c_to_f.then(f_to_k).name == "CelsiusToFahrenheit>FahrenheitToKelvin"


class TestChain:
    def test_chain_folds_left(self, c_to_f, f_to_k, k_to_label):
        mapper = chain(c_to_f, f_to_k, k_to_label)
        assert mapper.validate_and_map({"degrees": 0}) == Label(text="273.15K")

    def test_single_mapper_is_returned_as_is(self, c_to_f):
        assert chain(c_to_f) is c_to_f

    def test_empty_chain_rejected(self):
        with pytest.raises(ConfigError):
            chain()


class TestFunctionMapper:
    def test_lifts_callable(self):
        mapper = FunctionMapper(
            Celsius, lambda c: Label(text=str(c.degrees)), output_model=Label, name="label"
        )
        assert mapper.validate_and_map({"degrees": 1.5}) == Label(text="1.5")
        assert mapper.name == "label"
        assert mapper.output_model is Label

    def test_composes_with_class_mappers(self, c_to_f):
        double = FunctionMapper(Fahrenheit, lambda f: Fahrenheit(degrees=f.degrees * 2), output_model=Fahrenheit)
        assert c_to_f.then(double).validate_and_map({"degrees": 0}).degrees == 64
