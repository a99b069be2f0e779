# Tally Copyright (c) 2023-present NAVER Corporation
# Please refer to the license file provided in the project.

import os
import sys
import logging
import regex
from typing import Any, Optional, TextIO, Iterator


logger = logging.getLogger('utils')


# whitespace as understood by C stream extraction: no Unicode separators
WHITESPACE = ' \t\n\v\f\r'
WHITESPACE_REGEX = regex.compile(r'[ \t\n\v\f\r]+')


def defined(*args) -> Any:
    """
    Return first non-None value from args, or None if args is empty or all its elements are None.

    Unlike `value = value or default`, this does not overwrite values like 0, '' or False:
    `marker = defined(marker, '*')`
    """
    return next((arg for arg in args if arg is not None), None)


class LoggingFormatter(logging.Formatter):
    """ Logging formatter that uses colors for errors and warnings """
    YELLOW = "\x1b[33;20m"
    RED = "\x1b[31;20m"
    GREEN = "\x1b[32;20m"
    END = "\x1b[0m"

    def format(self, record):
        fmt = '%(asctime)s | %(name)s | %(message)s'
        if record.levelno >= logging.ERROR:
            fmt = self.RED + fmt + self.END
        elif record.levelno >= logging.WARNING:
            fmt = self.YELLOW + fmt + self.END
        elif record.levelno == logging.DEBUG:
            fmt = self.GREEN + fmt + self.END
        return logging.Formatter(fmt, datefmt='%Y-%m-%d %H:%M:%S').format(record)


def init_logging(log_file: Optional[str] = None, level=logging.INFO, stream=sys.stderr, append: bool = False):
    """
    Log to `stream` (standard error by default, since standard output is reserved for the menu) and optionally to
    `log_file`. Calling this again replaces the previous handlers.
    """
    root_logger = logging.getLogger()
    root_logger.handlers = []
    root_logger.setLevel(level)

    formatter = logging.Formatter('%(asctime)s | %(name)s | %(message)s', datefmt='%Y-%m-%d %H:%M:%S')

    if stream is not None:
        handler = logging.StreamHandler(stream)
        # colors only make sense in a terminal
        handler.setFormatter(LoggingFormatter() if stream.isatty() else formatter)
        root_logger.addHandler(handler)

    if log_file:
        dirname = os.path.dirname(log_file)
        if dirname:
            os.makedirs(dirname, exist_ok=True)
        handler = logging.FileHandler(log_file, mode='a' if append else 'w')
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)


def read_tokens(file: TextIO) -> Iterator[str]:
    """ Whitespace-delimited tokens of a text stream, in order. Tokens never span lines. """
    for line in file:
        yield from (token for token in WHITESPACE_REGEX.split(line) if token)
