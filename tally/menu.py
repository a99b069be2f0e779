# Tally Copyright (c) 2023-present NAVER Corporation
# Please refer to the license file provided in the project.

import sys
import logging
import regex
from typing import Optional, TextIO
from tally.counts import FrequencyTable
from tally.utils import defined, WHITESPACE, WHITESPACE_REGEX


logger = logging.getLogger('menu')


MENU = (
    "-----------------------------\n"
    "| 1. Search for an item     |\n"
    "| 2. Print frequency of all |\n"
    "| 3. Print histogram        |\n"
    "| 4. Exit                   |\n"
    "-----------------------------"
)

# Menu states
AWAITING_CHOICE = 'awaiting_choice'
LOOKUP = 'lookup'
LIST = 'list'
HISTOGRAM = 'histogram'
EXPORT = 'export'
INVALID_INPUT = 'invalid_input'
INVALID_CHOICE = 'invalid_choice'
TERMINATED = 'terminated'

CHOICES = {1: LOOKUP, 2: LIST, 3: HISTOGRAM, 4: EXPORT}

INT_MIN, INT_MAX = -2**31, 2**31 - 1


class InvalidInput(ValueError):
    pass


class ConsoleReader:
    """
    Reads whitespace-delimited words and integers from a text stream, several values possibly being on the same line
    (e.g., typing "1 Apple" at the menu prompt searches for "Apple" directly).

    A failed `read_int()` does not consume the offending word: the caller can drop the rest of the line with
    `discard_line()`. `EOFError` is raised when the stream is exhausted.
    """
    def __init__(self, stream: TextIO):
        self._stream = stream
        self._buffer = ''   # rest of the current line

    def _skip_whitespace(self) -> None:
        while True:
            self._buffer = self._buffer.lstrip(WHITESPACE)
            if self._buffer:
                return
            line = self._stream.readline()
            if not line:
                raise EOFError('end of input')
            self._buffer = line

    def read_word(self) -> str:
        self._skip_whitespace()
        word, self._buffer = regex.match(r'([^ \t\n\v\f\r]+)(.*)', self._buffer, regex.DOTALL).groups()
        return word

    def read_int(self) -> int:
        self._skip_whitespace()
        match = regex.match(r'[+-]?[0-9]+', self._buffer)
        if match is None:
            raise InvalidInput(f'not a number: {WHITESPACE_REGEX.split(self._buffer, 1)[0]}')
        self._buffer = self._buffer[match.end():]
        value = int(match.group())
        if not INT_MIN <= value <= INT_MAX:
            raise InvalidInput(f'number out of range: {value}')
        return value

    def discard_line(self) -> None:
        self._buffer = ''


class Session:
    """
    Everything the menu operations work with: the item counts, the console streams and the options. There is one
    session per run.
    """
    def __init__(
        self,
        table: FrequencyTable,
        stdin: Optional[TextIO] = None,
        stdout: Optional[TextIO] = None,
        output_path: str = 'frequency.dat',
        marker: str = '*',
        strict_lookup: bool = False,
    ):
        self.table = table
        self.reader = ConsoleReader(defined(stdin, sys.stdin))
        self.stdout = defined(stdout, sys.stdout)
        self.output_path = output_path
        self.marker = marker
        self.strict_lookup = strict_lookup

    @classmethod
    def from_config(cls, cfg, table: FrequencyTable, **kwargs) -> 'Session':
        return cls(
            table,
            output_path=cfg.output,
            marker=cfg.marker,
            strict_lookup=cfg.strict_lookup,
            **kwargs,
        )

    def print(self, *args, end='\n'):
        print(*args, end=end, file=self.stdout, flush=True)


class Menu:
    """
    Interactive loop over a `Session`, modeled as a state machine. Each state is handled by a method that returns the
    next state:

    awaiting_choice -> lookup | list | histogram | invalid_choice -> awaiting_choice
    awaiting_choice -> invalid_input -> awaiting_choice
    awaiting_choice -> export -> terminated

    `run()` only returns once the "exit" choice has saved the counts. `EOFError` and `KeyboardInterrupt` are
    propagated.
    """
    def __init__(self, session: Session):
        self.session = session
        self.state = AWAITING_CHOICE
        self._handlers = {
            AWAITING_CHOICE: self.await_choice,
            LOOKUP: self.lookup,
            LIST: self.list_all,
            HISTOGRAM: self.histogram,
            EXPORT: self.export,
            INVALID_INPUT: self.invalid_input,
            INVALID_CHOICE: self.invalid_choice,
        }

    def step(self) -> str:
        self.state = self._handlers[self.state]()
        return self.state

    def run(self) -> None:
        while self.state != TERMINATED:
            self.step()

    def await_choice(self) -> str:
        session = self.session
        session.print(MENU)
        session.print('Enter your choice: ', end='')
        try:
            choice = session.reader.read_int()
        except InvalidInput as e:
            logger.debug(str(e))
            session.reader.discard_line()
            session.print()
            return INVALID_INPUT
        session.print()
        return CHOICES.get(choice, INVALID_CHOICE)

    def lookup(self) -> str:
        session = self.session
        session.print('Enter the item you wish to search for: ', end='')
        item = session.reader.read_word()
        count = session.table.lookup(item, strict=session.strict_lookup)
        session.print(f'The frequency of {item} is {count}')
        session.print()
        return AWAITING_CHOICE

    def list_all(self) -> str:
        for line in self.session.table.listing():
            self.session.print(line)
        self.session.print()
        return AWAITING_CHOICE

    def histogram(self) -> str:
        for line in self.session.table.histogram(self.session.marker):
            self.session.print(line)
        self.session.print()
        return AWAITING_CHOICE

    def export(self) -> str:
        self.session.table.save(self.session.output_path)
        return TERMINATED

    def invalid_input(self) -> str:
        self.session.print('Invalid input. Please enter a number.')
        return AWAITING_CHOICE

    def invalid_choice(self) -> str:
        self.session.print('Invalid choice. Please try again.')
        self.session.print()
        return AWAITING_CHOICE
