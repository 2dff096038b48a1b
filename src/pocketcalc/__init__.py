'''
Pocket calculator.

Plain old arithmetic, plus a handful of scientific functions, one key press
at a time. No precedence: operators are evaluated left to right, as they are
pressed, like on the calculator in your desk drawer.

The engine is a set of pure functions from state and key to state, so any
front end can drive it. The command line one takes lines of keys:

    $ pocketcalc -e '2+3*4='
    20
'''

from .cli import CLI
from .engine import Calculator, EngineState, HistoryEntry, apply
from .lexer import Lexer


__all__ = 'Calculator', 'EngineState', 'HistoryEntry', 'apply', 'Lexer', 'CLI'
