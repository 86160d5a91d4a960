#!/usr/bin/env python3
"""
Function Signature Parser for step2code

Reads the human-written, ABI-like function strings found in a call sequence
(e.g. ``function balanceOf(address) external view returns (uint)``) and
extracts the parts the code generator needs: the callable name, its raw
parameters, its modifiers and the return types it declares.

This is deliberately a whitespace tokenizer and not a Solidity grammar. Only
two structural checks are enforced; unknown return types are dropped rather
than rejected.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from core.exceptions import MalformedSignature
from core.solidity_types import DATA_LOCATIONS, is_known_type, normalize_type

logger = logging.getLogger(__name__)

FUNCTION_KEYWORD = 'function'
RETURNS_KEYWORD = 'returns'
PAYABLE_MODIFIER = 'payable'


@dataclass(frozen=True)
class FunctionFragment:
    """Structured view of one function signature string."""
    raw: str
    name: str
    parameters: Tuple[str, ...] = ()
    modifiers: Tuple[str, ...] = ()
    return_types: Tuple[str, ...] = ()
    is_payable: bool = False

    @property
    def return_arity(self) -> int:
        return len(self.return_types)


class FunctionSignatureParser:
    """Tokenizes function signature strings into :class:`FunctionFragment`."""

    def parse(self, signature: str) -> FunctionFragment:
        tokens = self.tokenize(signature)

        name_index = 1 if tokens[0] == FUNCTION_KEYWORD else 0
        name_and_args = tokens[name_index]
        if '(' not in name_and_args:
            raise MalformedSignature(signature, "missing '(' after function name")

        name = name_and_args.split('(', 1)[0]

        body = ' '.join(tokens[name_index:])
        params_text, tail = self._split_parameter_list(body)
        tail_tokens = tail.split()

        returns_at = self._find_returns_token(tail_tokens)
        modifier_tokens = tail_tokens if returns_at is None else tail_tokens[:returns_at]
        return_types = [] if returns_at is None else self._read_return_types(tail_tokens[returns_at:])

        fragment = FunctionFragment(
            raw=signature,
            name=name,
            parameters=tuple(self._split_parameters(params_text)),
            modifiers=tuple(modifier_tokens),
            return_types=tuple(return_types),
            is_payable=PAYABLE_MODIFIER in tokens,
        )
        logger.debug("Parsed %r -> %s%s returns %s", signature, fragment.name,
                     ' (payable)' if fragment.is_payable else '', list(fragment.return_types))
        return fragment

    def tokenize(self, signature: str) -> List[str]:
        """Split on whitespace, rejecting strings with fewer than two tokens."""
        tokens = (signature or '').split()
        if len(tokens) < 2:
            raise MalformedSignature(signature, "expected at least a name with arguments and one more token")
        return tokens

    # -----------------------------------------------------------------------
    # Helpers
    # -----------------------------------------------------------------------

    @staticmethod
    def _split_parameter_list(body: str) -> Tuple[str, str]:
        """Return (parameter text, everything after the closing parenthesis)."""
        open_at = body.index('(')
        depth = 0
        for position in range(open_at, len(body)):
            char = body[position]
            if char == '(':
                depth += 1
            elif char == ')':
                depth -= 1
                if depth == 0:
                    return body[open_at + 1:position], body[position + 1:]
        # Unbalanced: treat the rest of the string as the parameter list.
        return body[open_at + 1:], ''

    @staticmethod
    def _split_parameters(params_text: str) -> List[str]:
        params: List[str] = []
        depth = 0
        current = ''
        for char in params_text:
            if char == ',' and depth == 0:
                params.append(current.strip())
                current = ''
                continue
            if char in '([':
                depth += 1
            elif char in ')]':
                depth -= 1
            current += char
        if current.strip():
            params.append(current.strip())
        return [p for p in params if p]

    @staticmethod
    def _find_returns_token(tokens: List[str]) -> Optional[int]:
        for index, token in enumerate(tokens):
            if RETURNS_KEYWORD in token:
                return index
        return None

    @staticmethod
    def _read_return_types(clause: List[str]) -> List[str]:
        """Read the type list following ``returns``, dropping unknown types."""
        glued = clause[0].split(RETURNS_KEYWORD, 1)[1]
        type_tokens = ([glued] if glued else []) + list(clause[1:])
        if not type_tokens:
            return []

        type_tokens[0] = type_tokens[0].split('(', 1)[-1]
        type_tokens[-1] = type_tokens[-1].split(')', 1)[0]

        pieces = [piece.strip() for token in type_tokens for piece in token.split(',')]
        pieces = [piece for piece in pieces if piece]

        return_types: List[str] = []
        position = 0
        while position < len(pieces):
            candidate = pieces[position]
            position += 1
            if position < len(pieces) and pieces[position] in DATA_LOCATIONS:
                candidate = f"{candidate} {pieces[position]}"
                position += 1
            candidate = normalize_type(candidate)
            if not is_known_type(candidate):
                logger.debug("Dropping unrecognised return token %r", candidate)
                continue
            return_types.append(candidate)
        return return_types


_default_parser = FunctionSignatureParser()


def parse_function_signature(signature: str) -> FunctionFragment:
    """Parse ``signature`` with a shared stateless parser."""
    return _default_parser.parse(signature)
