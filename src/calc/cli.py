from os import isatty, path
from sys import stdin, stdout, stderr, exit
from argparse import ArgumentParser, REMAINDER, OPTIONAL
import logging

from prompt_toolkit import PromptSession
from prompt_toolkit.history import FileHistory

from .lexer import Lexer
from .machine import Machine
from .number import to_base
from .settings import Settings
from .tokens import stringify
from .util import CalcError, CalcSyntaxError, LexicalError, SuggestedFix


log = logging.getLogger(__name__)


class InteractiveInput:
    def __init__(self, prompt, history=None):
        self.prompt = prompt
        self.history = history

    def __iter__(self):
        try:
            session = PromptSession(message=self.prompt,
                                    enable_suspend=True,
                                    enable_open_in_editor=True,
                                    # Persistent
                                    history=self.history,
                                    prompt_continuation=' ' * len(self.prompt),
                                    # Certainly not! But be explicit.
                                    erase_when_done=False)
            while True:
                yield session.prompt()
        except EOFError:
            return


class CLI:
    '''
    Command line interface to the calculator.
    '''

    DEFAULT_PROMPT = '> '
    HISTORY_FILE = '~/.calc_history'
    BASES = (2, 8, 10, 16)

    def _machine(self):
        return Machine(Settings(caret_is_exponent=not self.args.bitwise_xor,
                                unsafe_cast=self.args.unsafe_cast,
                                strict=self.args.strict))

    def _format(self, number):
        if self.args.precision is not None:
            number = number.rounded(self.args.precision)
        return to_base(number, self.args.base)

    def _report(self, error):
        self.failed = True
        if self.split_words \
           and isinstance(error, (LexicalError, CalcSyntaxError)):
            # Unquoted, the shell may have mangled brackets or operators.
            error.fixes |= SuggestedFix.ENCLOSE_IN_QUOTES
        print(error, file=stderr)

    def dumper(self):
        '''
        Dump primitive tokens and RPN of every statement.
        '''
        machine = self._machine()
        for line in self.args.expressions:
            for lexemes in machine.statements(line):
                try:
                    primitives = machine.tokenize(lexemes, line)
                    _, expression = machine.split_assignment(primitives, line)
                    rpn = machine.compile(expression, line)
                except CalcError as e:
                    self._report(e)
                    continue
                print('[statement]', stringify(primitives), sep='\t')
                for title, sequence in (('[primitives]', primitives),
                                        ('[rpn]', rpn)):
                    print(title, '<index>\t<type>\t<text>', sep='\t')
                    for index, primitive in enumerate(sequence):
                        print(index, primitive.type.value,
                              repr(primitive.text), sep='\t')

    def executor(self):
        '''
        Evaluate every statement, printing results and errors.
        '''
        machine = self._machine()
        for line in self.args.expressions:
            for outcome in machine.run(line):
                if outcome.error is None:
                    if outcome.result is not None:
                        try:
                            print(self._format(outcome.result))
                        except CalcError as e:
                            self._report(e)
                    continue
                if self.args.verbose:
                    log.error('%s failed', outcome.expression,
                              exc_info=outcome.error)
                self._report(outcome.error)

    def functions(self):
        '''
        Print the table of built-in functions.
        '''
        print(self._machine().function_map.table())

    def raw_grammar(self):
        '''
        Print current internally defined grammar.
        '''
        for name, pattern in Lexer.grammar():
            print('[{}]'.format(name), pattern, sep='\n')

    def _prompting_input(self):
        '''
        Return prompting stdin.__iter__ decorator...

        If either:
        - prompt explicitly specified.
        - both stdin/out are a tty
        '''
        if self.args.prompt or \
           isatty(stdin.fileno()) and isatty(stdout.fileno()):
            return InteractiveInput(prompt=self.args.prompt or
                                    self.DEFAULT_PROMPT,
                                    history=FileHistory(
                                        path.expanduser(self.HISTORY_FILE)))
        else:
            return stdin

    def __init__(self):
        '''
        Create ready to run CLI.

        Does not run or parse command line arguments.
        '''
        self.argument_parser = ArgumentParser(
            description='Arithmetic expression calculator')
        self.argument_parser.add_argument('-v', '--verbose',
                                          action='store_true')
        int_nonint_groups = self.argument_parser.add_mutually_exclusive_group()
        int_nonint_groups.add_argument('-e', '--expression',
                                       nargs=REMAINDER,
                                       dest='expressions')
        int_nonint_groups.add_argument('-p', '--prompt',
                                       nargs=OPTIONAL,
                                       const=self.DEFAULT_PROMPT)
        main_groups = self.argument_parser.add_mutually_exclusive_group()
        for short_, long_, action in [('-G', '--raw-grammar',
                                       self.raw_grammar),
                                      ('-D', '--dump', self.dumper),
                                      ('-F', '--functions', self.functions)]:
            main_groups.add_argument(short_, long_,
                                     action='store_const',
                                     const=action,
                                     dest='action')
        self.argument_parser.add_argument('-b', '--base',
                                          type=int,
                                          choices=self.BASES,
                                          default=10,
                                          help='output base')
        self.argument_parser.add_argument('-k', '--precision',
                                          type=int,
                                          help='round reals to this many '
                                               'decimal places')
        self.argument_parser.add_argument('-X', '--bitwise-xor',
                                          action='store_true',
                                          help='^ is bitwise XOR rather '
                                               'than exponent')
        self.argument_parser.add_argument('-E', '--unsafe-cast',
                                          action='store_true',
                                          help='wrap or saturate narrowing '
                                               'casts instead of failing')
        self.argument_parser.add_argument('-S', '--strict',
                                          action='store_true',
                                          help='reject unrecognized '
                                               'characters')
        self.argument_parser.set_defaults(action=self.executor,
                                          expressions=stdin)
        self.failed = False
        self.split_words = False

    def _interactive(self):
        return isinstance(self.args.expressions, InteractiveInput)

    def run(self, *, args=None):
        '''
        Run CLI, given these args, or previously passed CLI args.

        Exits with status 1 if any statement failed.
        '''
        self.args = self.argument_parser.parse_args(args)
        logging.basicConfig(stream=stderr,
                            level=logging.DEBUG if self.args.verbose
                            else logging.WARNING)
        if self.args.action in (self.executor, self.dumper):
            if self.args.expressions is stdin:
                self.args.expressions = self._prompting_input()
            elif not self._interactive():
                # -e 2 + 3 is one expression, not three.
                self.split_words = len(self.args.expressions) > 1
                self.args.expressions = [' '.join(self.args.expressions)]
        try:
            self.args.action()
        except KeyboardInterrupt:
            exit(1)
        if self.failed and not self._interactive():
            exit(1)
