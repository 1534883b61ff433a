r"""
  __ _ _  _ ___ _ _ _  _ _ __  _ _ __  ___
 / _` | || / -_) '_| || | '_ \| | '_ \/ -_)
 \__, |\_,_\___|_|  \_, | .__/|_| .__/\___|
    |_|             |__/|_|     |_|
"""

# expose the main classes
from .enumerable import Enumerable, OrderedEnumerable

# expose the factory functions
from .factories import (
    from_iterable,
    from_range,
    repeat,
    empty,
    pinq,
    P,
)

# expose supporting data classes
from .types import Grouping
from .extensions.grouping import Lookup

# expose the error taxonomy
from .errors import (
    QueryError,
    InvalidKeyError,
    EmptySequenceError,
    TypeMismatchError,
)

# define what `import *` does
__all__ = [
    "Enumerable",
    "OrderedEnumerable",
    "from_iterable",
    "from_range",
    "repeat",
    "empty",
    "pinq",
    "P",
    "Grouping",
    "Lookup",
    "QueryError",
    "InvalidKeyError",
    "EmptySequenceError",
    "TypeMismatchError",
]
