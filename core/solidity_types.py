"""
Solidity value types recognised when reading function return lists.
"""

from typing import FrozenSet

CONTRACT_TYPES: FrozenSet[str] = frozenset({'contract'})

BYTES_TYPES: FrozenSet[str] = frozenset(
    [f'bytes{size}' for size in range(1, 33)] + ['bytes', 'bytes memory']
)

UINT_TYPES: FrozenSet[str] = frozenset({
    'uint8', 'uint16', 'uint24', 'uint32', 'uint64',
    'uint112', 'uint128', 'uint160', 'uint256',
})

INT_TYPES: FrozenSet[str] = frozenset({
    'int8', 'int16', 'int24', 'int32', 'int64', 'int128', 'int256',
})

ADDRESS_TYPES: FrozenSet[str] = frozenset({'address'})

BOOL_TYPES: FrozenSet[str] = frozenset({'bool'})

STRING_TYPES: FrozenSet[str] = frozenset({'string', 'string memory'})

SOLIDITY_VALUE_TYPES: FrozenSet[str] = (
    CONTRACT_TYPES | BYTES_TYPES | UINT_TYPES | INT_TYPES
    | ADDRESS_TYPES | BOOL_TYPES | STRING_TYPES
)

# Shorthands the compiler accepts and expands.
TYPE_ALIASES = {
    'uint': 'uint256',
    'int': 'int256',
    'string calldata': 'string memory',
    'bytes calldata': 'bytes memory',
}

# Reference types whose local variables need an explicit data location.
DYNAMIC_TYPES: FrozenSet[str] = frozenset({'string', 'bytes'})

DATA_LOCATIONS: FrozenSet[str] = frozenset({'memory', 'calldata', 'storage'})


def normalize_type(type_name: str) -> str:
    """Expand bare ``uint``/``int``; calldata ``string``/``bytes`` read as memory."""
    return TYPE_ALIASES.get(type_name, type_name)


def is_known_type(type_name: str) -> bool:
    return type_name in SOLIDITY_VALUE_TYPES


def local_variable_type(type_name: str) -> str:
    """Type as written in a local declaration: ``string`` becomes ``string memory``."""
    if type_name in DYNAMIC_TYPES:
        return f"{type_name} memory"
    return type_name
