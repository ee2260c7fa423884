from abc import ABC, abstractmethod
from typing import Any, Sequence


class TabularStorePort(ABC):
    """Row-oriented tables addressed by name.

    Row numbers are 1-based and include the header, so the first data row is 2.
    """

    @abstractmethod
    def read_all(self, table: str) -> list[list[Any]]:
        """All rows, header first, in append order."""
        raise NotImplementedError

    @abstractmethod
    def append(self, table: str, row: Sequence[Any]) -> None:
        raise NotImplementedError

    @abstractmethod
    def update_row(self, table: str, row_number: int, row: Sequence[Any]) -> None:
        raise NotImplementedError

    @abstractmethod
    def delete_row(self, table: str, row_number: int) -> None:
        raise NotImplementedError

    @abstractmethod
    def ping(self) -> None:
        """Raise StoreUnavailableError when the store cannot be reached."""
        raise NotImplementedError
