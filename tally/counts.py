# Tally Copyright (c) 2023-present NAVER Corporation
# Please refer to the license file provided in the project.

import os
import logging
import regex
from collections import defaultdict
from collections.abc import Mapping
from typing import Iterable, Iterator, Optional
from tally.utils import read_tokens


logger = logging.getLogger('counts')

# undecodable bytes are kept as lone surrogates and written back unchanged
ENCODING, ERRORS = 'utf-8', 'surrogateescape'


class FrequencyTable(Mapping):
    """
    Maps each item name to the number of times it was seen. Iteration (and thus `items()`, `listing()`,
    `histogram()` and `save()`) always follows the lexicographic order of the names, so that all the reports list the
    items in the same order.

    The table is filled once with `load()` or `from_tokens()`. Afterwards, the only change that can happen is the
    insertion of a zero count by `lookup()` of an unknown name (unless `strict=True`).

    ```
    table = FrequencyTable.from_tokens('Apple Banana Apple'.split())
    table.lookup('Apple')    # 2
    table.lookup('Pear')     # 0, 'Pear' is now listed with a count of 0
    list(table.histogram())  # ['Apple: **', 'Banana: *', 'Pear: ']
    ```
    """
    def __init__(self, counts: Optional[dict[str, int]] = None):
        self._counts = defaultdict(int)
        for name, count in (counts or {}).items():
            if count < 0:
                raise ValueError(f"negative count for '{name}'")
            self._counts[name] = count

    @classmethod
    def from_tokens(cls, tokens: Iterable[str]) -> 'FrequencyTable':
        table = cls()
        for token in tokens:
            table._counts[token] += 1
        return table

    @classmethod
    def load(cls, path: str) -> 'FrequencyTable':
        """
        Count the whitespace-delimited tokens of given text file. Raises `OSError` if the file cannot be read: there
        is no partial loading. Any byte sequence is accepted: bytes that are not valid UTF-8 become part of the item
        names as they are.
        """
        with open(path, encoding=ENCODING, errors=ERRORS) as file:
            table = cls.from_tokens(read_tokens(file))
        logger.info(f'read {table.total()} items ({len(table)} unique) from {path}')
        return table

    def __getitem__(self, name: str) -> int:
        if name not in self._counts:  # don't rely on defaultdict here: indexing should not insert anything
            raise KeyError(name)
        return self._counts[name]

    def __len__(self) -> int:
        return len(self._counts)

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._counts))

    def __contains__(self, name) -> bool:
        return name in self._counts

    def __repr__(self):
        return f'{self.__class__.__name__}({dict(self.items())})'

    def total(self) -> int:
        return sum(self._counts.values())

    def lookup(self, name: str, strict: bool = False) -> int:
        """
        Return the count of given item, or 0 if it was never seen. Unless `strict` is True, an unknown name is
        added to the table with a count of 0 and will show up in the following reports.
        """
        if strict:
            return self._counts.get(name, 0)
        return self._counts[name]

    def listing(self) -> Iterator[str]:
        for name, count in self.items():
            yield f'{name}: {count}'

    def histogram(self, marker: str = '*') -> Iterator[str]:
        for name, count in self.items():
            yield f'{name}: {marker * count}'

    def save(self, path: str) -> None:
        """
        Write one "name count" line per item to given file, overwriting it. Write errors are not caught.
        """
        dirname = os.path.dirname(path)
        if dirname:  # create parent directory if needed
            os.makedirs(dirname, exist_ok=True)
        with open(path, 'w', encoding=ENCODING, errors=ERRORS) as file:
            file.writelines(f'{name} {count}\n' for name, count in self.items())
        logger.info(f'saved {len(self)} item counts to {path}')


def read_counts(path: str) -> dict[str, int]:
    """
    Read a file created by `FrequencyTable.save()`: one item per line, followed by its count. A line without
    a count gives a count of 0. The items are returned in the same order as in the file.
    """
    counts = {}
    with open(path, newline='\n', encoding=ENCODING, errors=ERRORS) as file:
        for line in file:
            line = line.rstrip('\r\n')
            if not line.strip():
                continue
            name, count = regex.match(r'(.+?)(?:[ \t]([0-9]+))?$', line).groups()
            counts[name] = int(count) if count else 0
    return counts
