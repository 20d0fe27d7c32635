from enum import Enum
from typing import Callable, Generic, Iterable, NamedTuple, TypeVar

T = TypeVar("T")
E = TypeVar("E")


class Side(Enum):
    LEFT = -1
    RIGHT = 1


class Ok(NamedTuple, Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


class Err(NamedTuple, Generic[E]):
    error: E

    @property
    def ok(self) -> bool:
        return False


def partition(classify: Callable[[T], Side], items: Iterable[T]) -> tuple[list[T], list[T]]:
    """
    Split items in a single pass into (left, right) according to ``classify``.
    Relative order is kept inside each side.

    >>> partition(lambda n: Side.LEFT if n % 2 == 0 else Side.RIGHT, [2, 3, 4])
    ([2, 4], [3])
    """
    left: list[T] = []
    right: list[T] = []
    for item in items:
        if classify(item) is Side.LEFT:
            left.append(item)
        else:
            right.append(item)
    return left, right


def by_result(result: Ok | Err) -> Side:
    """Classifier sending ``Ok`` results left and ``Err`` results right."""
    return Side.LEFT if result.ok else Side.RIGHT
