#!/usr/bin/env python3
"""
Tests for expressions.py - restricted global value evaluation.
"""

import json
import math

import pytest

from missionxml.errors import ExpressionError, XMLParseError
from missionxml.expressions import evaluate_expression


class TestLiterals:
    @pytest.mark.parametrize("source, expected", [
        ("2+2", 4),
        ("10 - 3 * 2", 4),
        ("7 % 3", 1),
        ("2 ** 10", 1024),
        ("-5", -5),
        ("1.5", 1.5),
        ("'abc'", "abc"),
        ('"abc"', "abc"),
        ("true", True),
        ("false", False),
        ("null", None),
        ("undefined", None),
    ])
    def test_scalar_values(self, source, expected):
        assert evaluate_expression(source) == expected

    def test_array(self):
        assert evaluate_expression("[1, 'a', true]") == [1, "a", True]

    def test_nested_array(self):
        assert evaluate_expression("[[1, 2], []]") == [[1, 2], []]

    def test_object_with_bare_keys(self):
        assert evaluate_expression("{x: 1, 'y': [2]}") == {"x": 1, "y": [2]}

    def test_surrounding_whitespace_ignored(self):
        assert evaluate_expression("\n  3  \n") == 3

    def test_comma_operator_returns_last(self):
        assert evaluate_expression("1, 2") == 2

    def test_special_numbers(self):
        assert math.isnan(evaluate_expression("NaN"))
        assert evaluate_expression("Infinity") == math.inf


class TestJavaScriptOperators:
    def test_string_concatenation(self):
        assert evaluate_expression("'n=' + 2") == "n=2"

    def test_boolean_concatenation(self):
        assert evaluate_expression("'' + true") == "true"

    def test_not(self):
        assert evaluate_expression("!true") is False

    def test_strict_equality(self):
        assert evaluate_expression("1 === 1") is True
        assert evaluate_expression("1 !== 1") is False

    def test_logical_operators_return_operand(self):
        assert evaluate_expression("0 || 'x'") == "x"
        assert evaluate_expression("1 && 2") == 2

    def test_operators_inside_strings_untouched(self):
        assert evaluate_expression("'a && !b'") == "a && !b"

    def test_not_binds_tighter_than_arithmetic(self):
        assert evaluate_expression("!0 + 1") == 2
        assert evaluate_expression("!1 + 1") == 1

    def test_double_not(self):
        assert evaluate_expression("!!0") is False
        assert evaluate_expression("!(1 === 2)") is True

    @pytest.mark.parametrize("source, expected", [
        ("-7 % 3", -1),
        ("7 % -3", 1),
        ("-6 % 3", 0),
        ("7.5 % 2", 1.5),
        ("-7.5 % 2", -1.5),
        ("3 % Infinity", 3),
    ])
    def test_remainder_takes_sign_of_dividend(self, source, expected):
        assert evaluate_expression(source) == expected

    def test_remainder_of_integers_stays_integer(self):
        assert isinstance(evaluate_expression("-7 % 3"), int)

    def test_remainder_nan_cases(self):
        assert math.isnan(evaluate_expression("5 % 0"))
        assert math.isnan(evaluate_expression("Infinity % 2"))

    def test_integral_division_stays_integer(self):
        assert evaluate_expression("6 / 3") == 2
        assert isinstance(evaluate_expression("6 / 3"), int)

    def test_fractional_division(self):
        assert evaluate_expression("1 / 4") == 0.25

    def test_division_by_zero(self):
        assert evaluate_expression("1 / 0") == math.inf
        assert evaluate_expression("-1 / 0") == -math.inf
        assert math.isnan(evaluate_expression("0 / 0"))


class TestRejected:
    @pytest.mark.parametrize("source", [
        "__import__('os')",
        "open('x')",
        "foo",
        "(1).real",
        "[1][0]",
        "[x for x in []]",
        "lambda: 1",
        "2 ** 100000",
        "'a' - 1",
        "",
        "1 +",
        "()",
        "   ",
        "~1",
        "not true",
    ])
    def test_rejected(self, source):
        with pytest.raises(ExpressionError):
            evaluate_expression(source)

    def test_error_is_a_parse_error_with_path(self):
        with pytest.raises(XMLParseError) as exc_info:
            evaluate_expression("foo", "DEPLOYMENT/GLOBAL[0]/VALUE")
        assert exc_info.value.path == "DEPLOYMENT/GLOBAL[0]/VALUE"


class TestArithmeticLimits:
    def test_zero_to_negative_power(self):
        assert evaluate_expression("0 ** -1") == math.inf
        assert evaluate_expression("0.0 ** -2") == math.inf

    def test_negative_base_fractional_power(self):
        assert math.isnan(evaluate_expression("(-8) ** 0.5"))

    def test_negative_exponent(self):
        assert evaluate_expression("2 ** -1") == 0.5

    def test_large_but_bounded_integer(self):
        assert evaluate_expression("10 ** 1000") == 10 ** 1000

    @pytest.mark.parametrize("source", [
        "10.0 ** 400",
        "(10 ** 1000) ** 5",
        "(2 ** 1000) ** 5",
        "(10 ** 1000) * (10 ** 1000) * (10 ** 1000) * (10 ** 1000) * (10 ** 1000)",
        "(10 ** 400) / 3",
        "(10 ** 400) + 0.5",
    ])
    def test_out_of_range_rejected(self, source):
        with pytest.raises(ExpressionError):
            evaluate_expression(source)

    def test_out_of_range_names_node(self):
        with pytest.raises(XMLParseError) as exc_info:
            evaluate_expression("10.0 ** 400", "DEPLOYMENT/GLOBAL[0]/VALUE")
        assert exc_info.value.path == "DEPLOYMENT/GLOBAL[0]/VALUE"

    @pytest.mark.parametrize("source", ["0 ** -1", "(-8) ** 0.5", "10 ** 1000", "-7 % 3"])
    def test_results_are_json_serializable(self, source):
        json.dumps(evaluate_expression(source))
