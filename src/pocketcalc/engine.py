'''
Pocket calculator state machine.

One key press in, one new state out. Evaluation is strictly left to right,
one operator at a time, the way a physical pocket calculator works: 2 + 3 × 4
is 20, not 14.

States are immutable; every transition returns a new EngineState, so the
functions here can be driven by any event loop, or none at all.
'''

from collections import deque, namedtuple
import logging
import math
import operator
import time

from .util import CalcError, ERROR, ERROR_TEXT, domain_errors, parse, to_text


log = logging.getLogger(__name__)

HISTORY_SIZE = 10

HistoryEntry = namedtuple('HistoryEntry', 'expression result timestamp')

EngineState = namedtuple('EngineState', [
    'display',
    # float, ERROR, or None when no binary operation is pending.
    'first_operand',
    'operator',
    'waiting_for_second_operand',
    'pending_clear',
    # Most recent first, never more than HISTORY_SIZE.
    'history',
    'is_scientific',
    'is_degrees',
    'show_history',
], defaults=('0', None, None, False, False, (), False, True, False))

INITIAL = EngineState()

DIGITS = '0123456789'
DECIMAL_POINT = '.'
DEGREE_SIGN = '\N{DEGREE SIGN}'


def _timestamp():
    '''
    Milliseconds since the epoch.
    '''
    return int(time.time() * 1000)


def _record(state, expression, result):
    '''
    Return state's history with a new entry in front, oldest dropped if full.
    '''
    history = deque(state.history, maxlen=HISTORY_SIZE)
    history.appendleft(HistoryEntry(expression, to_text(result),
                                    _timestamp()))
    return tuple(history)


# Binary operators, by key.
BINARY = {
    '+': domain_errors(operator.__add__),
    '-': domain_errors(operator.__sub__),
    '\N{MULTIPLICATION SIGN}': domain_errors(operator.__mul__),
    '\N{DIVISION SIGN}': domain_errors(operator.__truediv__),
}


def evaluate(left, right, op):
    '''
    Apply binary operator op to left and right.

    Returns a float, or ERROR when either operand is ERROR, on division by
    zero, or when the result overflows.
    '''
    return BINARY[op](left, right)


def _radians(value, degrees):
    if degrees:
        return value * math.pi / 180
    return value


@domain_errors
def _sin(value, degrees):
    return math.sin(_radians(value, degrees))


@domain_errors
def _cos(value, degrees):
    return math.cos(_radians(value, degrees))


@domain_errors
def _tan(value, degrees):
    return math.tan(_radians(value, degrees))


# math.log and math.log10 refuse anything <= 0, math.sqrt anything < 0.
_ln = domain_errors(math.log)
_log10 = domain_errors(math.log10)
_sqrt = domain_errors(math.sqrt)


@domain_errors
def _square(value):
    # Not value ** 2, which raises on overflow instead of giving inf.
    return value * value


_negate = domain_errors(lambda value: -1 * value)
_percent = domain_errors(lambda value: value / 100)

# Unary functions, by key: (function, history expression, takes angle mode).
UNARY = {
    'sin': (_sin, '{key}({value}{unit})', True),
    'cos': (_cos, '{key}({value}{unit})', True),
    'tan': (_tan, '{key}({value}{unit})', True),
    'ln': (_ln, '{key}({value})', False),
    'log': (_log10, '{key}({value})', False),
    'x\N{SUPERSCRIPT TWO}': (_square, '({value})\N{SUPERSCRIPT TWO}', False),
    '\N{SQUARE ROOT}': (_sqrt, '\N{SQUARE ROOT}({value})', False),
}

CONSTANTS = {
    '\N{GREEK SMALL LETTER PI}': math.pi,
    'e': math.e,
}


def input_digit(state, key):
    '''
    Type a digit or the decimal point.
    '''
    display = state.display
    if (state.waiting_for_second_operand or state.pending_clear or
            display == ERROR_TEXT):
        return state._replace(display='0.' if key == DECIMAL_POINT else key,
                              waiting_for_second_operand=False,
                              pending_clear=False)
    if display == '0' and key != DECIMAL_POINT:
        return state._replace(display=key)
    if key == DECIMAL_POINT and DECIMAL_POINT in display:
        return state
    return state._replace(display=display + key)


def clear(state, key=None):
    '''
    Forget the display and any pending operation. Keeps history and modes.
    '''
    return state._replace(display='0',
                          first_operand=None,
                          operator=None,
                          waiting_for_second_operand=False,
                          pending_clear=False)


def toggle_sign(state, key=None):
    return state._replace(display=to_text(_negate(parse(state.display))))


def percent(state, key=None):
    return state._replace(display=to_text(_percent(parse(state.display))))


def press_operator(state, key):
    '''
    Press a binary operator.

    With an operation already pending, evaluate it first against the display,
    and carry its result forward as the new first operand.
    '''
    if state.first_operand is None:
        return state._replace(first_operand=parse(state.display),
                              operator=key,
                              waiting_for_second_operand=True)
    if state.operator is None:
        return state
    left, right = state.first_operand, parse(state.display)
    result = evaluate(left, right, state.operator)
    changes = dict(display=to_text(result),
                   first_operand=result,
                   operator=key,
                   waiting_for_second_operand=True)
    if result is not ERROR:
        changes['history'] = _record(state, _expression(left, right,
                                                        state.operator),
                                     result)
    return state._replace(**changes)


def equals(state, key=None):
    '''
    Evaluate the pending operation against the display.

    Nothing happens without a pending operation. The operator is used up, so
    pressing = again straight away does nothing either.
    '''
    if state.first_operand is None or state.operator is None:
        return state
    left, right = state.first_operand, parse(state.display)
    result = evaluate(left, right, state.operator)
    changes = dict(display=to_text(result),
                   first_operand=result,
                   operator=None,
                   waiting_for_second_operand=True,
                   pending_clear=True)
    if result is not ERROR:
        changes['history'] = _record(state, _expression(left, right,
                                                        state.operator),
                                     result)
    return state._replace(**changes)


def _expression(left, right, op):
    return '{} {} {}'.format(to_text(left), op, to_text(right))


def press_function(state, key):
    '''
    Apply a unary scientific function to the display.

    Out of domain, only the display changes, to Error.
    '''
    function, template, angular = UNARY[key]
    value = parse(state.display)
    if angular:
        result = function(value, state.is_degrees)
    else:
        result = function(value)
    if result is ERROR:
        return state._replace(display=ERROR_TEXT)
    expression = template.format(key=key,
                                 value=to_text(value),
                                 unit=DEGREE_SIGN if state.is_degrees else '')
    return state._replace(display=to_text(result),
                          waiting_for_second_operand=True,
                          history=_record(state, expression, result))


def press_constant(state, key):
    return state._replace(display=to_text(CONSTANTS[key]),
                          waiting_for_second_operand=True)


def toggle_degrees(state, key=None):
    return state._replace(is_degrees=not state.is_degrees)


def ignore(state, key=None):
    '''
    Parentheses are on the keypad, but there are no expressions to group.
    '''
    return state


_HANDLERS = dict.fromkeys(DIGITS + DECIMAL_POINT, input_digit)
_HANDLERS.update(dict.fromkeys(BINARY, press_operator))
_HANDLERS.update(dict.fromkeys(UNARY, press_function))
_HANDLERS.update(dict.fromkeys(CONSTANTS, press_constant))
_HANDLERS.update({
    'C': clear,
    '\N{PLUS-MINUS SIGN}': toggle_sign,
    '%': percent,
    '=': equals,
    'DEG': toggle_degrees,
    '(': ignore,
    ')': ignore,
})

KEYS = frozenset(_HANDLERS)


def apply(state, key):
    '''
    Return the state after pressing key.

    :param key: Key identifier, e.g. '7', '+', 'sin'. Digits may also be
                given as ints.
    :raises CalcError: Unknown key.
    '''
    if isinstance(key, int) and not isinstance(key, bool):
        key = str(key)
    try:
        handler = _HANDLERS[key]
    except (KeyError, TypeError):
        raise CalcError('Unknown key {!r}'.format(key)) from None
    return handler(state, key)


def select_history(state, value):
    '''
    Put a past result back on the display, closing the history panel.

    The next digit starts a new number rather than appending to it.

    :raises CalcError: value isn't a finite number.
    '''
    if isinstance(value, (int, float)):
        value = to_text(value)
    if parse(value) is ERROR:
        raise CalcError('Not a number {!r}'.format(value))
    return state._replace(display=value,
                          show_history=False,
                          waiting_for_second_operand=True)


def toggle_scientific(state):
    return state._replace(is_scientific=not state.is_scientific)


def toggle_history(state):
    return state._replace(show_history=not state.show_history)


def close_history(state):
    return state._replace(show_history=False)


# Keypad layout, top to bottom.
SCIENTIFIC_ROWS = (
    ('sin', 'cos', 'tan', 'DEG'),
    ('ln', 'log', '\N{GREEK SMALL LETTER PI}', 'e'),
    ('x\N{SUPERSCRIPT TWO}', '\N{SQUARE ROOT}', '(', ')'),
)
BASIC_ROWS = (
    ('C', '\N{PLUS-MINUS SIGN}', '%', '\N{DIVISION SIGN}'),
    ('7', '8', '9', '\N{MULTIPLICATION SIGN}'),
    ('4', '5', '6', '-'),
    ('1', '2', '3', '+'),
    ('0', DECIMAL_POINT, '='),
)


def keypad(state):
    '''
    Rows of keys currently on offer, scientific ones only in scientific mode.
    '''
    if state.is_scientific:
        return SCIENTIFIC_ROWS + BASIC_ROWS
    return BASIC_ROWS


def available_keys(state):
    return frozenset(key for row in keypad(state) for key in row)


class Calculator:
    '''
    Calculator session, holding the current state between key presses.
    '''

    def __init__(self, state=INITIAL):
        self.state = state

    def feed(self, key):
        '''
        Press key, and return the new state.
        '''
        self.state = apply(self.state, key)
        log.debug('%s -> %s', key, self.state.display)
        return self.state

    def select(self, index):
        '''
        Reuse the result of history entry index, 1 being the most recent.
        '''
        history = self.state.history
        if not 1 <= index <= len(history):
            raise CalcError('No history entry {}'.format(index))
        self.state = select_history(self.state, history[index - 1].result)
        log.debug('@%d -> %s', index, self.state.display)
        return self.state

    def toggle_scientific(self):
        self.state = toggle_scientific(self.state)
        return self.state

    def toggle_history(self):
        self.state = toggle_history(self.state)
        return self.state

    def close_history(self):
        self.state = close_history(self.state)
        return self.state
