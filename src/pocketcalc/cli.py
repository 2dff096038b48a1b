from os import isatty
import sys
from sys import stdin, stdout, exit
from argparse import ArgumentParser, REMAINDER, OPTIONAL
import logging

from prompt_toolkit import PromptSession

from .util import CalcError
from .engine import Calculator, INITIAL, available_keys, keypad
from .display import NARROW_DIGITS, WIDE_DIGITS, format_display
from .lexer import Lexer


log = logging.getLogger(__name__)


class InteractiveInput:
    '''
    Key lines typed at a prompt_toolkit prompt, until end of file.
    '''

    def __init__(self, prompt, toolbar=None):
        self.prompt = prompt
        self.toolbar = toolbar

    def __iter__(self):
        try:
            session = PromptSession(message=self.prompt,
                                    enable_suspend=True,
                                    enable_open_in_editor=True,
                                    # Angle mode, keypad, active operator
                                    bottom_toolbar=self.toolbar,
                                    prompt_continuation=' ' * len(self.prompt),
                                    erase_when_done=False)
            while True:
                yield session.prompt()
        except EOFError:
            return


class CLI:
    '''
    Command line interface to the pocket calculator.

    Each line of input is a sequence of key presses. The display is printed
    after every line.
    '''

    DEFAULT_PROMPT = '> '
    EMPTY_HISTORY = 'No calculations yet'

    def toolbar(self):
        '''
        Status line: angle mode, keypad, and the operator awaiting its operand.
        '''
        if self.calculator is None:
            return ''
        state = self.calculator.state
        return ' '.join(filter(None, ['DEG' if state.is_degrees else 'RAD',
                                      'SCI' if state.is_scientific else '',
                                      state.operator]))

    def initial_state(self):
        return INITIAL._replace(is_scientific=self.args.scientific,
                                is_degrees=not self.args.radians)

    def dumper(self):
        '''
        Dump all lexemes matches, and the keys they press.
        '''
        lexer = Lexer()
        print('[groups]\t<repr(lexeme)>\t<key>')
        for line in self.args.expressions:
            for match in lexer.lex(line):
                matched = match.group(0)  # the lexeme text itself
                groups = lexer.matchedgroups(match)
                print(*groups.keys(),
                      repr(matched),
                      lexer.key(match) if 'key' in groups else '',
                      sep='\t')

    def print_keypad(self):
        '''
        Print the keypad, as laid out for the starting mode.
        '''
        for row in keypad(self.initial_state()):
            print(*row, sep='\t')

    def feed(self, lexer, match):
        '''
        Run one lexeme: press a key, toggle a panel, or reuse a result.
        '''
        groups = lexer.matchedgroups(match)
        calculator = self.calculator
        if 'key' in groups:
            key = lexer.key(match)
            if key not in available_keys(calculator.state):
                raise CalcError('{} is only on the scientific keypad '
                                '(toggle with S)'.format(key))
            calculator.feed(key)
        elif 'command' in groups:
            if groups['command'] == 'S':
                calculator.toggle_scientific()
            else:
                calculator.toggle_history()
        elif 'select' in groups:
            calculator.select(int(groups['index']))

    def show(self):
        '''
        Print the display, and the history panel if open.
        '''
        state = self.calculator.state
        print(format_display(state.display, self.digits))
        if state.show_history:
            if not state.history:
                print(self.EMPTY_HISTORY)
            for index, entry in enumerate(state.history, start=1):
                print('@{}\t{} = {}'.format(index,
                                            entry.expression,
                                            entry.result))

    def executor(self):
        '''
        Run calculator.
        '''
        self.calculator = Calculator(self.initial_state())
        lexer = Lexer()
        for line in self.args.expressions:
            try:
                for match in lexer.lex(line):
                    if lexer.isfeedable(match):
                        self.feed(lexer, match)
            # Abort entire rest of line
            except CalcError as e:
                log.debug('Rejected %r', line, exc_info=True)
                print(e.args[0], file=sys.stderr)
            self.show()

    def _prompting_input(self):
        '''
        Source of key lines: a prompt_toolkit session when asked for a
        prompt, or when talking to a terminal; plain stdin otherwise.
        '''
        if self.args.prompt or \
           isatty(stdin.fileno()) and isatty(stdout.fileno()):
            return InteractiveInput(prompt=self.args.prompt or
                                    self.DEFAULT_PROMPT,
                                    toolbar=self.toolbar)
        else:
            return stdin

    def __init__(self):
        '''
        Set up the argument parser. Nothing is parsed or run until run().
        '''
        self.calculator = None
        self.argument_parser = ArgumentParser(description='Pocket calculator')
        self.argument_parser.add_argument('-v', '--verbose',
                                          action='store_true')
        self.argument_parser.add_argument('-s', '--scientific',
                                          action='store_true',
                                          help='start with the scientific '
                                               'keypad')
        self.argument_parser.add_argument('-r', '--radians',
                                          action='store_true',
                                          help='start in radians')
        self.argument_parser.add_argument('-w', '--wide',
                                          action='store_true',
                                          help='display {} digits instead '
                                               'of {}'.format(WIDE_DIGITS,
                                                              NARROW_DIGITS))
        input_sources = self.argument_parser.add_mutually_exclusive_group()
        input_sources.add_argument('-e', '--expression',
                                   nargs=REMAINDER,
                                   dest='expressions',
                                   help='lines of keys to press')
        input_sources.add_argument('-p', '--prompt',
                                   nargs=OPTIONAL,
                                   const=self.DEFAULT_PROMPT,
                                   help='prompt for keys even when not '
                                        'on a terminal')
        actions = self.argument_parser.add_mutually_exclusive_group()
        for short_, long_, action in [('-k', '--keypad', self.print_keypad),
                                      ('-D', '--dump', self.dumper)]:
            actions.add_argument(short_, long_,
                                 action='store_const',
                                 const=action,
                                 dest='action')
        self.argument_parser.set_defaults(action=self.executor,
                                          expressions=stdin)

    @property
    def digits(self):
        return WIDE_DIGITS if self.args.wide else NARROW_DIGITS

    def run(self, *, args=None):
        '''
        Parse args (sys.argv when None), configure logging, and run the
        chosen action: the calculator, the keypad listing, or the lexeme dump.
        '''
        self.args = self.argument_parser.parse_args(args)
        logging.basicConfig(level=logging.DEBUG if self.args.verbose
                            else logging.WARNING,
                            format='%(name)s: %(message)s')
        if self.args.expressions is stdin:
            self.args.expressions = self._prompting_input()
        try:
            self.args.action()
        except CalcError as e:
            print(e.args[0], file=sys.stderr)
            exit(1)
        except KeyboardInterrupt:
            exit(1)
