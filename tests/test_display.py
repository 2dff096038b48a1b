'''
Display formatting tests
'''

from pocketcalc.display import (NARROW_DIGITS, WIDE_DIGITS, format_display,
                                to_exponential)


def test_short_numerals_unchanged():
    assert format_display('0') == '0'
    assert format_display('123456789') == '123456789'
    assert format_display('1234.56789') == '1234.56789'
    assert format_display('0.') == '0.'


def test_long_numerals_exponential():
    assert format_display('1234567890') == '1.2346e+9'
    assert format_display('0.1234567891') == '1.2346e-1'
    # Minus signs take up room too.
    assert format_display('-123456789') == '-1.2346e+8'


def test_wide_display():
    assert format_display('1234567890', WIDE_DIGITS) == '1234567890'
    assert format_display('1234567890123', WIDE_DIGITS) == '1.2345679e+12'
    assert NARROW_DIGITS < WIDE_DIGITS


def test_error_unchanged():
    assert format_display('Error') == 'Error'


def test_to_exponential():
    assert to_exponential(1e-10, 2) == '1.00e-10'
    assert to_exponential(12345, 1) == '1.2e+4'
