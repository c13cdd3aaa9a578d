"""
Identifier generation for sections and items.

Editing operations take an IdGenerator so tests can supply deterministic ids.
"""

import itertools
import uuid
from abc import ABC, abstractmethod


class IdGenerator(ABC):
    """Source of short ids, unique for the lifetime of the generator."""

    @abstractmethod
    def new_id(self) -> str:
        pass

    def __call__(self) -> str:
        return self.new_id()


class RandomIdGenerator(IdGenerator):
    """Short random ids (9 hex characters of a uuid4)."""

    def __init__(self, length: int = 9):
        self.length = length

    def new_id(self) -> str:
        return uuid.uuid4().hex[: self.length]


class SequentialIdGenerator(IdGenerator):
    """
    Deterministic ids: prefix followed by a running counter.

    Example:
        >>> ids = SequentialIdGenerator("s")
        >>> ids(), ids()
        ('s1', 's2')
    """

    def __init__(self, prefix: str = "id", start: int = 1):
        self.prefix = prefix
        self._counter = itertools.count(start)

    def new_id(self) -> str:
        return f"{self.prefix}{next(self._counter)}"


default_id_generator = RandomIdGenerator()
