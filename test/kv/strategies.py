from string import ascii_letters
from hypothesis.strategies import (
    SearchStrategy,
    builds,
    floats,
    integers,
    none,
    one_of,
    text,
)
from stablefetch.kv.entry import KVEntry


def entry() -> SearchStrategy[KVEntry]:
    return builds(
        KVEntry,
        text(ascii_letters + "-0123456789", min_size=1),
        text(ascii_letters, min_size=1),
        integers(0, 10**30).map(str),
        one_of(none(), floats(0, 2**40)),
    )
