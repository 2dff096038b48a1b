'''
Key lexer tests
'''

import regex

from pocketcalc.util import CalcError
from pocketcalc.lexer import Lexer

from pytest import raises


def keys(line):
    l = Lexer()
    return [l.key(m) for m in l.lex(line) if l.isfeedable(m)]


def test_digits_are_single_keys():
    assert keys('12.5') == ['1', '2', '.', '5']


def test_keypad_symbols():
    assert keys('2+3×4÷1-5=±%') == \
        ['2', '+', '3', '×', '4', '÷', '1', '-', '5', '=', '±', '%']


def test_aliases():
    assert keys('2*3/4') == ['2', '×', '3', '÷', '4']
    assert keys('9 sqrt _ ~') == ['9', '√', '±', '±']
    assert keys('pi ^2 x2 x²') == ['π', 'x²', 'x²', 'x²']
    assert keys('c C deg DEG') == ['C', 'C', 'DEG', 'DEG']


def test_longest_match():
    # Not c (clear) followed by os.
    assert keys('cos') == ['cos']
    assert keys('ln log e') == ['ln', 'log', 'e']


def test_whitespace_not_feedable():
    l = Lexer()
    matches = list(l.lex('1 \t 2\n'))
    assert [l.isfeedable(m) for m in matches] == [True, False, True, False]


def test_commands():
    l = Lexer()
    groups = [l.matchedgroups(m) for m in l.lex('SH')]
    assert groups == [{'command': 'S'}, {'command': 'H'}]


def test_history_selection():
    l = Lexer()
    (match,) = l.lex('@12')
    assert l.matchedgroups(match) == {'select': '@12', 'index': '12'}


def test_unknown_input():
    l = Lexer()
    with raises(CalcError, match=regex.escape("Couldn't lex q")):
        list(l.lex('q'))


def test_good_lexemes_before_bad():
    l = Lexer()
    lexemes = l.lex('12 + q3')
    assert [m.group(0) for m in [next(lexemes) for _ in range(4)]] == \
        ['1', '2', ' ', '+']
    next(lexemes)
    with raises(CalcError, match=regex.escape("Couldn't lex q3")):
        next(lexemes)
