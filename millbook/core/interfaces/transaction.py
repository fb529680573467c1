"""Abstract interface for unit-of-work transactions."""

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager
from typing import Any


class ITransactionManager(ABC):
    """
    Opens a write transaction that every store call made inside it joins.

    Transactions nest: an inner block that raises is rolled back on its own,
    and an exception leaving the outermost block rolls back everything.
    """

    @abstractmethod
    def transaction(self) -> AbstractAsyncContextManager[Any]:
        """Return an async context manager spanning one atomic unit."""
        pass
