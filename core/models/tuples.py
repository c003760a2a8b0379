# ============================================================================
# FIXED-ARITY TUPLES
# ============================================================================
# STATUS: Core model - Typed row holders for tuple projection
# PURPOSE: Tuple2 .. Tuple7 with value1 .. valueN slots
# CREATED: 06 OCT 2026
# EXPORTS: Tuple2, Tuple3, Tuple4, Tuple5, Tuple6, Tuple7, TUPLE_TYPES
# ============================================================================
"""
Fixed-arity tuples.

Generic NamedTuples, so `Tuple3[int, str, date]` type-checks while the
runtime value is an ordinary tuple with value1 .. value3 attributes.
"""

from typing import Dict, Generic, NamedTuple, Type, TypeVar

T1 = TypeVar("T1")
T2 = TypeVar("T2")
T3 = TypeVar("T3")
T4 = TypeVar("T4")
T5 = TypeVar("T5")
T6 = TypeVar("T6")
T7 = TypeVar("T7")


class Tuple2(NamedTuple, Generic[T1, T2]):
    value1: T1
    value2: T2


class Tuple3(NamedTuple, Generic[T1, T2, T3]):
    value1: T1
    value2: T2
    value3: T3


class Tuple4(NamedTuple, Generic[T1, T2, T3, T4]):
    value1: T1
    value2: T2
    value3: T3
    value4: T4


class Tuple5(NamedTuple, Generic[T1, T2, T3, T4, T5]):
    value1: T1
    value2: T2
    value3: T3
    value4: T4
    value5: T5


class Tuple6(NamedTuple, Generic[T1, T2, T3, T4, T5, T6]):
    value1: T1
    value2: T2
    value3: T3
    value4: T4
    value5: T5
    value6: T6


class Tuple7(NamedTuple, Generic[T1, T2, T3, T4, T5, T6, T7]):
    value1: T1
    value2: T2
    value3: T3
    value4: T4
    value5: T5
    value6: T6
    value7: T7


# Arity -> tuple class
TUPLE_TYPES: Dict[int, Type[tuple]] = {
    2: Tuple2,
    3: Tuple3,
    4: Tuple4,
    5: Tuple5,
    6: Tuple6,
    7: Tuple7,
}


__all__ = [
    "Tuple2",
    "Tuple3",
    "Tuple4",
    "Tuple5",
    "Tuple6",
    "Tuple7",
    "TUPLE_TYPES",
]
