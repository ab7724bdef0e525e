"""The shared "no value" sentinel and null-tolerant ordering.

``ABSENT`` stands in for a missing date, instant or week. It is a real object
taking part in comparisons, so sorting a list that mixes values and
``ABSENT`` never raises: the sentinel sorts before every concrete value and
equals only itself. ``None`` is accepted wherever an operand is taken and is
treated exactly like ``ABSENT``.
"""

from typing import Any, Final

__all__ = ["ABSENT", "Absent", "NullOrdered", "compare", "is_absent"]


class Absent:
    """Singleton type of :data:`ABSENT`."""

    _instance: "Absent | None" = None

    def __new__(cls) -> "Absent":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False

    def __hash__(self) -> int:
        # Equal to None, so it must hash like None.
        return hash(None)

    def __reduce__(self) -> str:
        return "ABSENT"

    def _relate(self, other: object) -> int | None:
        if is_absent(other):
            return 0
        if isinstance(other, NullOrdered):
            return -1
        return None

    def __eq__(self, other: object) -> bool:
        return is_absent(other)

    def __ne__(self, other: object) -> bool:
        return not is_absent(other)

    def __lt__(self, other: object) -> bool:
        rel = self._relate(other)
        return NotImplemented if rel is None else rel < 0

    def __le__(self, other: object) -> bool:
        rel = self._relate(other)
        return NotImplemented if rel is None else rel <= 0

    def __gt__(self, other: object) -> bool:
        rel = self._relate(other)
        return NotImplemented if rel is None else rel > 0

    def __ge__(self, other: object) -> bool:
        rel = self._relate(other)
        return NotImplemented if rel is None else rel >= 0


ABSENT: Final = Absent()


def is_absent(value: object) -> bool:
    return value is None or value is ABSENT


class NullOrdered:
    """Mixin giving the six rich comparisons from ``compare_to``.

    Subclasses implement ``_sort_key()`` returning a value comparable among
    instances of the same type. Comparing against ``None``/``ABSENT`` follows
    the null-as-minimum rule; comparing against an unrelated type returns
    ``NotImplemented``.
    """

    __slots__ = ()

    def _sort_key(self) -> Any:
        raise NotImplementedError

    def _comparable(self, other: object) -> bool:
        return isinstance(other, type(self)) or isinstance(self, type(other))

    def compare_to(self, other: object) -> int:
        """Return -1, 0 or 1. ``None``/``ABSENT`` is less than any value."""
        if is_absent(other):
            return 1
        if not self._comparable(other):
            raise TypeError(
                f"Cannot compare {type(self).__name__} with {type(other).__name__}"
            )
        mine, theirs = self._sort_key(), other._sort_key()  # type: ignore[attr-defined]
        return (mine > theirs) - (mine < theirs)

    def _relate(self, other: object) -> int | None:
        if is_absent(other) or self._comparable(other):
            return self.compare_to(other)
        return None

    def __eq__(self, other: object) -> bool:
        rel = self._relate(other)
        return NotImplemented if rel is None else rel == 0

    def __ne__(self, other: object) -> bool:
        rel = self._relate(other)
        return NotImplemented if rel is None else rel != 0

    def __lt__(self, other: object) -> bool:
        rel = self._relate(other)
        return NotImplemented if rel is None else rel < 0

    def __le__(self, other: object) -> bool:
        rel = self._relate(other)
        return NotImplemented if rel is None else rel <= 0

    def __gt__(self, other: object) -> bool:
        rel = self._relate(other)
        return NotImplemented if rel is None else rel > 0

    def __ge__(self, other: object) -> bool:
        rel = self._relate(other)
        return NotImplemented if rel is None else rel >= 0

    def __hash__(self) -> int:
        return hash((type(self).__name__, self._sort_key()))


def compare(left: object, right: object) -> int:
    """Three-way compare that also accepts ``None``/``ABSENT`` on the left.

    >>> compare(None, None)
    0
    """
    if is_absent(left):
        return 0 if is_absent(right) else -1
    if not isinstance(left, NullOrdered):
        raise TypeError(f"Unsupported operand type: {type(left).__name__}")
    return left.compare_to(right)
