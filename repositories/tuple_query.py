# ============================================================================
# TUPLE PROJECTION
# ============================================================================
# STATUS: Repository - Positional cursor rows to fixed-arity tuples
# PURPOSE: select_one / select_all with arity and cardinality checks
# CREATED: 10 OCT 2026
# EXPORTS: select_one, select_all, bind_row
# ============================================================================
"""
Tuple Projection

Maps the rows of an executed DB-API cursor onto Tuple2 .. Tuple7. The
witness types only drive static typing; values are bound positionally
with typing.cast and never coerced.

Checks, in order:
- len(cursor.description) must equal the number of witness types
  (ArityMismatchError, raised before any row is read)
- select_one: zero rows -> None, more than one -> TooManyRowsError
- select_all: zero rows -> []

Rows may be sequences (sqlite3, psycopg tuple_row) or mappings (psycopg
dict_row); mapping values are taken in column order.

Usage:
    with repo.execute_query("SELECT id, name FROM address") as cursor:
        rows = select_all(cursor, int, str)
    rows[0].value2
"""

from collections.abc import Mapping
from typing import Any, List, Optional, Sequence, Type, TypeVar, cast, overload

from core.errors import ArityMismatchError, TooManyRowsError
from core.models.tuples import TUPLE_TYPES, Tuple2, Tuple3, Tuple4, Tuple5, Tuple6, Tuple7

T1 = TypeVar("T1")
T2 = TypeVar("T2")
T3 = TypeVar("T3")
T4 = TypeVar("T4")
T5 = TypeVar("T5")
T6 = TypeVar("T6")
T7 = TypeVar("T7")


def _check_arity(cursor: Any, types: Sequence[type]) -> type:
    tuple_type = TUPLE_TYPES.get(len(types))
    if tuple_type is None:
        raise ValueError(f"Tuple projection supports 2 to 7 columns, got {len(types)} types")
    actual = len(cursor.description or ())
    if actual != len(types):
        raise ArityMismatchError(len(types), actual)
    return tuple_type


def bind_row(tuple_type: type, types: Sequence[type], row: Any) -> Any:
    """Bind one row into tuple_type, casting each value to its witness type."""
    values = list(row.values()) if isinstance(row, Mapping) else list(row)
    return tuple_type(*(cast(t, v) for t, v in zip(types, values)))


# ============================================================================
# SELECT ONE
# ============================================================================

@overload
def select_one(cursor: Any, t1: Type[T1], t2: Type[T2]) -> Optional[Tuple2[T1, T2]]: ...
@overload
def select_one(cursor: Any, t1: Type[T1], t2: Type[T2], t3: Type[T3]) -> Optional[Tuple3[T1, T2, T3]]: ...
@overload
def select_one(
    cursor: Any, t1: Type[T1], t2: Type[T2], t3: Type[T3], t4: Type[T4]
) -> Optional[Tuple4[T1, T2, T3, T4]]: ...
@overload
def select_one(
    cursor: Any, t1: Type[T1], t2: Type[T2], t3: Type[T3], t4: Type[T4], t5: Type[T5]
) -> Optional[Tuple5[T1, T2, T3, T4, T5]]: ...
@overload
def select_one(
    cursor: Any, t1: Type[T1], t2: Type[T2], t3: Type[T3], t4: Type[T4], t5: Type[T5], t6: Type[T6]
) -> Optional[Tuple6[T1, T2, T3, T4, T5, T6]]: ...
@overload
def select_one(
    cursor: Any, t1: Type[T1], t2: Type[T2], t3: Type[T3], t4: Type[T4], t5: Type[T5], t6: Type[T6], t7: Type[T7]
) -> Optional[Tuple7[T1, T2, T3, T4, T5, T6, T7]]: ...


def select_one(cursor: Any, *types: type) -> Optional[Any]:
    """
    Bind the only row of an executed cursor.

    Raises:
        ArityMismatchError: Column count differs from len(types)
        TooManyRowsError: The cursor produced more than one row
    """
    tuple_type = _check_arity(cursor, types)
    row = cursor.fetchone()
    if row is None:
        return None
    if cursor.fetchone() is not None:
        raise TooManyRowsError()
    return bind_row(tuple_type, types, row)


# ============================================================================
# SELECT ALL
# ============================================================================

@overload
def select_all(cursor: Any, t1: Type[T1], t2: Type[T2]) -> List[Tuple2[T1, T2]]: ...
@overload
def select_all(cursor: Any, t1: Type[T1], t2: Type[T2], t3: Type[T3]) -> List[Tuple3[T1, T2, T3]]: ...
@overload
def select_all(
    cursor: Any, t1: Type[T1], t2: Type[T2], t3: Type[T3], t4: Type[T4]
) -> List[Tuple4[T1, T2, T3, T4]]: ...
@overload
def select_all(
    cursor: Any, t1: Type[T1], t2: Type[T2], t3: Type[T3], t4: Type[T4], t5: Type[T5]
) -> List[Tuple5[T1, T2, T3, T4, T5]]: ...
@overload
def select_all(
    cursor: Any, t1: Type[T1], t2: Type[T2], t3: Type[T3], t4: Type[T4], t5: Type[T5], t6: Type[T6]
) -> List[Tuple6[T1, T2, T3, T4, T5, T6]]: ...
@overload
def select_all(
    cursor: Any, t1: Type[T1], t2: Type[T2], t3: Type[T3], t4: Type[T4], t5: Type[T5], t6: Type[T6], t7: Type[T7]
) -> List[Tuple7[T1, T2, T3, T4, T5, T6, T7]]: ...


def select_all(cursor: Any, *types: type) -> List[Any]:
    """
    Bind every row of an executed cursor, in cursor order.

    Raises:
        ArityMismatchError: Column count differs from len(types)
    """
    tuple_type = _check_arity(cursor, types)
    return [bind_row(tuple_type, types, row) for row in cursor.fetchall()]


__all__ = ["select_one", "select_all", "bind_row"]
