from __future__ import annotations

import datetime
from decimal import Decimal

import pytest
from faker import Faker

from sqlmock.engine.matching import args_match, values_match


@pytest.mark.unit
@pytest.mark.parametrize(
    ("expected", "actual"),
    [
        ("orders", "orders"),
        (b"\x00\x01", b"\x00\x01"),
        (1, 1),
        (0.1, 0.1),
        (True, True),
        (None, None),
    ],
)
def test_scalars_match_by_value(expected: object, actual: object) -> None:
    assert values_match(expected, actual) is True


@pytest.mark.unit
@pytest.mark.parametrize(
    ("expected", "actual"),
    [
        (1, 2),
        (1, "1"),
        (1, 1.0),
        (1, True),
        (0.1, 0.1 + 1e-12),
        ("a", "A"),
        (None, 0),
        (0, None),
    ],
)
def test_scalars_reject_different_values_or_types(expected: object, actual: object) -> None:
    assert values_match(expected, actual) is False


@pytest.mark.unit
def test_generated_text_and_integers_match_themselves(faker: Faker) -> None:
    text = faker.pystr()
    number = faker.pyint()
    assert values_match(text, text) is True
    assert values_match(number, number) is True
    assert values_match(number, number + 1) is False


@pytest.mark.unit
def test_timestamps_match_by_type_only(faker: Faker) -> None:
    first = faker.date_time()
    second = first + datetime.timedelta(days=faker.pyint(min_value=1, max_value=1000))
    assert values_match(first, second) is True
    assert values_match(faker.date_object(), faker.date_object()) is True
    assert values_match(datetime.time(1, 2), datetime.time(23, 59)) is True


@pytest.mark.unit
def test_timestamp_relaxation_does_not_cross_types() -> None:
    now = datetime.datetime(2024, 1, 1, 12, 0)
    assert values_match(now, now.date()) is False
    assert values_match(now.date(), now) is False
    assert values_match(now, "2024-01-01 12:00:00") is False


@pytest.mark.unit
def test_unsupported_types_never_match() -> None:
    assert values_match(Decimal("1.5"), Decimal("1.5")) is False
    assert values_match([1], [1]) is False
    assert values_match({"id": 1}, {"id": 1}) is False


@pytest.mark.unit
def test_args_match_unchecked_when_expected_is_none() -> None:
    assert args_match(None, (1, "x", object())) is True
    assert args_match(None, ()) is True


@pytest.mark.unit
def test_args_match_requires_same_length_and_every_slot() -> None:
    assert args_match((1,), (1,)) is True
    assert args_match((1,), (2,)) is False
    assert args_match((1,), ("1",)) is False
    assert args_match((1,), (1, 2)) is False
    assert args_match((), ()) is True
    assert args_match((), (1,)) is False
