"""Property-based tests for validators using hypothesis."""

import math

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st
from pydantic import ValidationError

from src.config_service.core.validators import (
    validate_document,
    validate_hex_color,
    validate_semver,
    validate_slug_format,
)
from src.config_service.schemas import EnvironmentCreate, TagCreate

pytestmark = pytest.mark.unit

numeric = st.from_regex(r"^(0|[1-9][0-9]{0,5})$", fullmatch=True)
identifier = st.from_regex(r"^[0-9A-Za-z-]{1,8}$", fullmatch=True)
valid_semver = st.builds(
    lambda major, minor, patch, build: f"{major}.{minor}.{patch}" + (f"+{build}" if build else ""),
    numeric,
    numeric,
    numeric,
    st.one_of(st.none(), identifier),
)

valid_slug = st.from_regex(r"^[a-zA-Z0-9]{1,100}$", fullmatch=True)
hex_digits = "0123456789abcdefABCDEF"
valid_color = st.one_of(
    st.text(alphabet=hex_digits, min_size=3, max_size=3),
    st.text(alphabet=hex_digits, min_size=6, max_size=6),
).map(lambda digits: f"#{digits}")

json_scalars = st.one_of(
    st.none(),
    st.booleans(),
    st.integers(),
    st.floats(allow_nan=False, allow_infinity=False),
    st.text(),
)
json_values = st.recursive(
    json_scalars,
    lambda children: st.one_of(
        st.lists(children, max_size=4),
        st.dictionaries(st.text(), children, max_size=4),
    ),
    max_leaves=12,
)


@given(version=valid_semver)
@settings(max_examples=100)
def test_valid_semver_accepted(version: str):
    assert validate_semver(version) == version


@pytest.mark.parametrize(
    "version",
    ["1.0.0-rc.1", "2.1.0-alpha.beta+exp.sha.5114f85", "0.0.0", "10.20.30-1.2.3"],
)
def test_semver_prerelease_and_build_accepted(version: str):
    assert validate_semver(version) == version


@pytest.mark.parametrize(
    "version",
    ["1", "1.0", "v1.0.0", "01.0.0", "1.0.0-", "1.0.0-01", "1.0.0+", "1.0.0\n", " 1.0.0"],
)
def test_invalid_semver_rejected(version: str):
    with pytest.raises(ValueError):
        validate_semver(version)


@given(slug=valid_slug)
@settings(max_examples=100)
def test_valid_slugs_accepted(slug: str):
    """ASCII letters and digits, 1-100 chars, are valid slugs."""
    env = EnvironmentCreate(name="Test", slug=slug)
    assert env.slug == slug


@given(slug=st.text(min_size=1, max_size=50).filter(lambda s: not s.isascii() or not s.isalnum()))
def test_non_alphanumeric_slugs_rejected(slug: str):
    with pytest.raises(ValidationError) as exc_info:
        EnvironmentCreate(name="Test", slug=slug)
    errors = exc_info.value.errors()
    assert any(error["loc"] == ("slug",) for error in errors)


def test_unicode_digit_slug_rejected():
    """Only ASCII counts: full-width digits are alphanumeric but not allowed."""
    with pytest.raises(ValueError):
        validate_slug_format("dev１")


@given(slug=st.from_regex(r"^[a-z]{101,120}$", fullmatch=True))
def test_long_slugs_rejected(slug: str):
    with pytest.raises(ValidationError) as exc_info:
        EnvironmentCreate(name="Test", slug=slug)
    errors = exc_info.value.errors()
    assert any(error["loc"] == ("slug",) for error in errors)


@given(color=valid_color)
def test_valid_colors_accepted(color: str):
    assert TagCreate(name="t", color=color).color == color


@pytest.mark.parametrize("color", ["6b7280", "#6b728", "#ggg", "#6b7280ff", "#", "red"])
def test_invalid_colors_rejected(color: str):
    with pytest.raises(ValueError):
        validate_hex_color(color)


@given(document=st.dictionaries(st.text(), json_values, max_size=6))
@settings(max_examples=100)
def test_json_documents_accepted(document: dict):
    assert validate_document(document) == document


@pytest.mark.parametrize("bad", [math.nan, math.inf, -math.inf])
def test_non_finite_numbers_rejected(bad: float):
    with pytest.raises(ValueError):
        validate_document({"nested": {"values": [1, bad]}})


def test_non_json_values_rejected():
    with pytest.raises(ValueError):
        validate_document({"when": object()})
    with pytest.raises(ValueError):
        validate_document({"pair": (1, 2)})  # tuples come back as lists
