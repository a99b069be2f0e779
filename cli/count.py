#!/usr/bin/env python3
# Tally Copyright (c) 2023-present NAVER Corporation
# Please refer to the license file provided in the project.

import sys
import logging

from tally import utils
from tally.config import TallyConfig
from tally.counts import FrequencyTable, ENCODING, ERRORS
from tally.menu import Menu, Session

logger = logging.getLogger('tally')


def setup(args: list[str]) -> TallyConfig:
    cfg = TallyConfig(*args)
    level = logging.DEBUG if cfg.verbose else logging.INFO
    utils.init_logging(cfg.log_file, level=level, stream=sys.stderr)
    logger.debug(' '.join(sys.argv))
    return cfg


def load(cfg: TallyConfig) -> FrequencyTable:
    try:
        return FrequencyTable.load(cfg.input)
    except OSError as e:
        logger.error(f'Unable to open file {cfg.input}: {e.strerror or e}')
        sys.exit(1)


def save(table: FrequencyTable, path: str) -> None:
    try:
        table.save(path)
    except OSError as e:
        logger.error(f'Unable to save counts to {path}: {e.strerror or e}')
        sys.exit(1)


def main(args=None):
    cfg = setup(sys.argv[1:] if args is None else args)
    table = load(cfg)
    for stream in sys.stdin, sys.stdout:
        if hasattr(stream, 'reconfigure'):  # same decoding as the input file
            stream.reconfigure(encoding=ENCODING, errors=ERRORS)
    session = Session.from_config(cfg, table)
    menu = Menu(session)
    try:
        menu.run()
    except (EOFError, KeyboardInterrupt):
        session.print()
        logger.warning('interrupted: counts were not saved')
        sys.exit(1)
    except OSError as e:   # the export failed
        logger.error(f'Unable to save counts to {cfg.output}: {e.strerror or e}')
        sys.exit(1)


def main_dump(args=None):
    cfg = setup(sys.argv[1:] if args is None else args)
    table = load(cfg)
    save(table, cfg.output)


if __name__ == '__main__':
    main()
