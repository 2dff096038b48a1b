from .util import ERROR, ERROR_TEXT, parse


NARROW_DIGITS = 9
WIDE_DIGITS = 12


def to_exponential(value, fraction_digits):
    '''
    Exponential notation with a fixed number of fraction digits.

    The exponent has no padding: 1.2346e+9, not 1.2346e+09.
    '''
    mantissa, exponent = '{:.{}e}'.format(value, fraction_digits).split('e')
    return '{}e{}{}'.format(mantissa, exponent[0], int(exponent[1:]))


def format_display(text, max_digits=NARROW_DIGITS):
    '''
    Fit display text onto a screen max_digits characters wide.

    Decimal points don't count; minus signs do. Too long numerals switch to
    exponential notation.
    '''
    if text == ERROR_TEXT or len(text.replace('.', '')) <= max_digits:
        return text
    value = parse(text)
    if value is ERROR:
        return text
    return to_exponential(value, max_digits - 5)
