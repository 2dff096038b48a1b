from functools import reduce
import operator

import regex

from .util import CalcError
from .engine import KEYS as ENGINE_KEYS


class Lexer:
    '''
    Lexer for lines of typed key presses.

    For consistency, for now, needs to be instantiated, despite holding no
    internal state.
    '''
    # Easier to type than what's printed on the keys.
    ALIASES = {
        '*': '\N{MULTIPLICATION SIGN}',
        '/': '\N{DIVISION SIGN}',
        # _ for negation, like in UNIX dc.
        '_': '\N{PLUS-MINUS SIGN}',
        '~': '\N{PLUS-MINUS SIGN}',
        'pi': '\N{GREEK SMALL LETTER PI}',
        'sqrt': '\N{SQUARE ROOT}',
        '^2': 'x\N{SUPERSCRIPT TWO}',
        'x2': 'x\N{SUPERSCRIPT TWO}',
        'c': 'C',
        'deg': 'DEG',
    }
    # Whatever can be typed, to the key it presses.
    KEYS = dict(zip(ENGINE_KEYS, ENGINE_KEYS))
    KEYS.update(ALIASES)
    # Panel commands: S for the scientific keypad, H for the history panel.
    COMMANDS = 'SH'

    assert not KEYS.keys() & set(COMMANDS)
    KEY = r'(?:' + r'|'.join(map(regex.escape,
                                 sorted(KEYS, key=len, reverse=True))) + r')'
    COMMAND = r'[' + COMMANDS + r']'
    # @1 reuses the most recent result, @2 the one before, etc.
    SELECT = r'@(?<index>\d+)'
    SPACE = r'\s+'

    # All possible lexemes.
    LEXEME = r'(?<key>' + KEY + r')|' \
             r'(?<command>' + COMMAND + r')|' \
             r'(?<select>' + SELECT + r')|' \
             r'(?<space>' + SPACE + r')'
    # Default regex flags for matching lexemes
    FLAGS = reduce(operator.__or__,
                   {regex.POSIX,
                    regex.DOTALL,
                    regex.VERSION1,
                    regex.VERBOSE},
                   0)

    def lex(self, line):
        '''
        Take a line and return all lexemes.

        Raises on the first bad lexeme, after yielding all the good ones
        before it.
        '''
        while line:
            match = regex.match(type(self).LEXEME, line,
                                flags=type(self).FLAGS)
            if match is None:
                break
            yield match
            line = line[len(match.group(0)):]
        if line:
            raise CalcError("Couldn't lex {0}".format(line.strip()))

    def isfeedable(self, match):
        '''
        Return True if lexeme does something, i.e., isn't just whitespace.
        '''
        return 'space' not in self.matchedgroups(match).keys()

    def key(self, match):
        '''
        Return the key pressed by a key lexeme, aliases resolved.
        '''
        return type(self).KEYS[match.group('key')]

    def matchedgroups(self, match):
        '''
        Return the lexeme's matched groups.
        '''
        return {key: value
                for key, value
                in match.groupdict().items()
                if value}
