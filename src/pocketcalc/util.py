from decimal import Decimal
from functools import wraps
import math

import regex


ERROR_TEXT = 'Error'

# Longest numeral prefix: 12, 12., .5, 1.5e-7, but not the e of 1e.
NUMERAL = regex.compile(r'''
                        \s*
                        [+-]?
                        (?:
                            \d+ \.? \d*
                            |
                            \. \d+
                        )
                        (?:
                            [eE] [+-]? \d+
                        )?
                        ''', regex.VERBOSE)


class CalcError(Exception):
    pass


class DomainError:
    '''
    Result of an arithmetic operation outside its domain.

    There is only ever one of these, ERROR. It stands in for a number until
    written to the display, where it becomes ERROR_TEXT.
    '''
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return 'ERROR'

    def __str__(self):
        return ERROR_TEXT


ERROR = DomainError()


def domain_errors(f):
    '''
    Decorator that converts math exceptions and non-finite results to ERROR.

    Any ERROR argument short-circuits to ERROR without calling f.
    '''
    @wraps(f)
    def wrapper(*args, **kwargs):
        if any(arg is ERROR for arg in args):
            return ERROR
        try:
            result = f(*args, **kwargs)
        except (ValueError, OverflowError, ZeroDivisionError):
            return ERROR
        if result is not ERROR and not math.isfinite(result):
            return ERROR
        return result
    return wrapper


def parse(text):
    '''
    Read the numeral at the start of display text, or ERROR if there isn't
    one.

    Anything after the numeral is ignored, so a partially typed '3.', or a
    decimal point typed after an exponent, '1e-8.', still reads as a number.
    '''
    if not isinstance(text, str):
        return ERROR
    match = NUMERAL.match(text)
    if match is None:
        return ERROR
    value = float(match.group(0))
    if not math.isfinite(value):
        return ERROR
    return value


def to_text(value):
    '''
    Shortest text that reads back as value.

    Integral values have no fractional part ('20', not '20.0'), magnitudes
    from 1e-7 up to 1e21 are written out in full, everything else in
    exponential notation ('1e+21', '1.5e-7'). Negative zero is '0'.
    '''
    if value is ERROR or not math.isfinite(value):
        return ERROR_TEXT
    if value == 0:
        return '0'
    sign, digits, exponent = Decimal(repr(float(value))).as_tuple()
    digits = list(digits)
    while len(digits) > 1 and digits[-1] == 0:
        digits.pop()
        exponent += 1
    digits = ''.join(map(str, digits))
    k = len(digits)
    # Position of the decimal point relative to the first digit.
    n = k + exponent
    if k <= n <= 21:
        text = digits + '0' * (n - k)
    elif 0 < n <= 21:
        text = digits[:n] + '.' + digits[n:]
    elif -6 < n <= 0:
        text = '0.' + '0' * -n + digits
    else:
        power = n - 1
        mantissa = digits[0] if k == 1 else digits[0] + '.' + digits[1:]
        text = '{}e{}{}'.format(mantissa, '+' if power >= 0 else '-',
                                abs(power))
    return '-' + text if sign else text
