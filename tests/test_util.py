'''
Numeral conversion tests
'''

import math

from pocketcalc.util import ERROR, DomainError, domain_errors, parse, to_text

from pytest import mark


@mark.parametrize('value, text', [
    (20.0, '20'),
    (-0.0, '0'),
    (0.5, '0.5'),
    (-2.5, '-2.5'),
    (123.456, '123.456'),
    (0.000001, '0.000001'),
    (1.5e-7, '1.5e-7'),
    (1e-7, '1e-7'),
    (1e20, '100000000000000000000'),
    (1e21, '1e+21'),
    (-1.25e22, '-1.25e+22'),
    (math.pi, '3.141592653589793'),
])
def test_to_text(value, text):
    assert to_text(value) == text


def test_to_text_error():
    assert to_text(ERROR) == 'Error'
    assert to_text(math.inf) == 'Error'
    assert to_text(math.nan) == 'Error'


def test_parse():
    assert parse('3.') == 3
    assert parse('0.') == 0
    assert parse('-1e-7') == -1e-7
    assert parse('Error') is ERROR
    assert parse('Infinity') is ERROR
    assert parse('1e999') is ERROR


def test_single_error():
    assert DomainError() is ERROR
    assert str(ERROR) == 'Error'


def test_domain_errors():
    @domain_errors
    def reciprocal(value):
        return 1 / value

    assert reciprocal(4) == 0.25
    assert reciprocal(0) is ERROR
    assert reciprocal(ERROR) is ERROR
    assert domain_errors(math.sqrt)(-1) is ERROR
    assert domain_errors(lambda value: value * value)(1e200) is ERROR


def test_parse_reads_leading_numeral():
    assert parse('1e-8.') == 1e-8
    assert parse('1e+215') == 1e215
    assert parse('.5') == 0.5
    assert parse('2e') == 2
    assert parse('') is ERROR
    assert parse(None) is ERROR
