from typing import Any, List


from .enums import FirestoreOperators


class FirestoreField:
    """
    Lightweight *descriptor* that allows class-level attribute access
    to build Firestore filters.

    Examples
    --------
    >>> Product.rating >= 4
    ('rating', FirestoreOperators.GTE, 4)
    >>> Product.count_in_stock > 0
    ('countInStock', FirestoreOperators.GT, 0)

    The tuple carries the *stored* name of the field (its alias), so
    filters keep working for fields whose Python name differs from the
    document key.  When accessed on an **instance** the real value is
    returned, while a class-level access yields the descriptor.
    """

    def __init__(self, field_name: str):
        self.field_name = field_name

    # ------------------------------------------------------------------ #
    # Descriptor protocol                                                #
    # ------------------------------------------------------------------ #

    def __get__(self, instance, owner):
        if instance is None:
            return self
        return getattr(instance, self.field_name, None)

    # ------------------------------------------------------------------ #
    # Convenience dunder methods                                         #
    # ------------------------------------------------------------------ #

    def __str__(self) -> str:          # noqa: DunderStr
        return self.field_name

    __repr__ = __str__

    def __hash__(self) -> int:         # noqa: DunderHash
        return hash(self.field_name)

    # ------------------------------------------------------------------ #
    # Comparison operators build (field, operator, value) tuples         #
    # ------------------------------------------------------------------ #

    def __eq__(self, other):           # type: ignore[override]
        return (self.field_name, FirestoreOperators.EQ, other)

    def __ne__(self, other):           # type: ignore[override]
        return (self.field_name, FirestoreOperators.NE, other)

    def __lt__(self, other):
        return (self.field_name, FirestoreOperators.LT, other)

    def __le__(self, other):
        return (self.field_name, FirestoreOperators.LTE, other)

    def __gt__(self, other):
        return (self.field_name, FirestoreOperators.GT, other)

    def __ge__(self, other):
        return (self.field_name, FirestoreOperators.GTE, other)

    # ------------------------------------------------------------------ #
    # Firestore-specific helpers                                         #
    # ------------------------------------------------------------------ #

    def in_(self, values: List[Any]) -> tuple:
        """Return an ``IN`` filter tuple."""
        return (self.field_name, FirestoreOperators.IN, values)

    def not_in_(self, values: List[Any]) -> tuple:
        """Return a ``NOT_IN`` filter tuple."""
        return (self.field_name, FirestoreOperators.NOT_IN, values)

    def icontains(self, text: str) -> tuple:
        """
        Return a case-insensitive substring filter tuple.

        Firestore has no native operator for this; the query layer applies
        it to the streamed documents after the native filters.
        """
        return (self.field_name, FirestoreOperators.ICONTAINS, text)
