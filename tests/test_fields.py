"""
Field Extraction & Ordering Tests
=================================
Null-first comparison, orderability checks, default extractor.
"""

from decimal import Decimal

import pytest

from store.fields import (
    MissingFieldError, check_orderable, compare_values, field_extractor, sort_key,
)


class _Obj:
    def __init__(self, **kw):
        self.__dict__.update(kw)


class TestCompareValues:

    def test_null_ordering(self):
        assert compare_values(None, None) == 0
        assert compare_values(None, -10**9) == -1
        assert compare_values("", None) == 1

    def test_plain_values(self):
        assert compare_values(1, 2) == -1
        assert compare_values("b", "a") == 1
        assert compare_values(3, 3.0) == 0

    def test_incompatible_types(self):
        with pytest.raises(TypeError):
            compare_values(1, "1")

    def test_sort_key_matches_compare(self):
        vals = [3, None, -1, None, 0]
        assert sorted(vals, key=sort_key) == [None, None, -1, 0, 3]


class TestCheckOrderable:

    @pytest.mark.parametrize("value", [None, 0, -2.5, "", "abc", (1, 2), b"x"])
    def test_orderable(self, value):
        check_orderable(value)

    def test_nan(self):
        with pytest.raises(ValueError, match="NaN"):
            check_orderable(float("nan"))

    def test_decimal_nan(self):
        with pytest.raises(ValueError, match="NaN"):
            check_orderable(Decimal("NaN"))
        check_orderable(Decimal("2.5"))

    @pytest.mark.parametrize("value", [(1, float("nan")), [0, (2, float("nan"))]])
    def test_nan_nested(self, value):
        with pytest.raises(ValueError):
            check_orderable(value)

    @pytest.mark.parametrize("value", [
        {}, {"a": 1}, object(), 1 + 2j, {1}, frozenset({1}), frozenset(),
        (1, {}), (1, frozenset({2})),
    ])
    def test_not_orderable(self, value):
        with pytest.raises(TypeError):
            check_orderable(value)


class TestFieldExtractor:

    def test_attribute(self):
        assert field_extractor("age")(_Obj(age=30)) == 30

    def test_attribute_none(self):
        assert field_extractor("age")(_Obj(age=None)) is None

    def test_mapping(self):
        assert field_extractor("age")({"age": 5}) == 5

    def test_missing_attribute(self):
        with pytest.raises(MissingFieldError) as exc:
            field_extractor("age")(_Obj(name="x"))
        assert exc.value.field_name == "age"

    def test_missing_key(self):
        with pytest.raises(MissingFieldError):
            field_extractor("age")({"name": "x"})
