from enum import Enum


class FirestoreOperators(str,Enum):
    LT = "<"
    LTE = "<="
    EQ = "=="
    NE = "!="
    GT = ">"
    GTE = ">="
    IN = "in"
    NOT_IN = "not-in"
    # Not a Firestore operator: evaluated client side
    ICONTAINS = "icontains"

class OrderByDirection(str,Enum):
    DESCENDING="DESCENDING"
    ASCENDING="ASCENDING"
    def __str__(self):
        return self.value


CLIENT_SIDE_OPERATORS = frozenset({FirestoreOperators.ICONTAINS})
