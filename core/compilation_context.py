#!/usr/bin/env python3
"""
Compilation Context for step2code

Per-compilation state shared by the fragment builder and the sequence
compiler: the variables declared so far and the current indentation depth.
A new context is created for every compile so that two compilations never
share a counter.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional

from core.exceptions import UnknownVariable

logger = logging.getLogger(__name__)

INDENTATION_LAYER = ' ' * 4


@dataclass(frozen=True)
class VariableBinding:
    """A named value declared in the generated test."""
    name: str
    value: str
    type: str


class VariableRegistry:
    """Records every named value declared during one compilation."""

    def __init__(self):
        self._bindings: Dict[str, VariableBinding] = {}

    def define(self, name: str, value: str, type: str) -> VariableBinding:
        """Insert or overwrite the binding for ``name``."""
        if name in self._bindings:
            logger.debug("Redefining variable %s (was %r)", name, self._bindings[name].value)
        binding = VariableBinding(name=name, value=value, type=type)
        self._bindings[name] = binding
        return binding

    def get(self, name: str) -> VariableBinding:
        try:
            return self._bindings[name]
        except KeyError:
            raise UnknownVariable(name) from None

    def reverse_lookup(self, value: str) -> Optional[VariableBinding]:
        """Find the variable holding ``value``.

        An ``address`` binding wins as soon as it is found; otherwise the last
        matching binding in declaration order is returned.
        """
        last_match: Optional[VariableBinding] = None
        for binding in self._bindings.values():
            if binding.value != value:
                continue
            if binding.type == 'address':
                return binding
            last_match = binding
        return last_match

    def names(self) -> List[str]:
        return list(self._bindings)

    def __contains__(self, name: str) -> bool:
        return name in self._bindings

    def __len__(self) -> int:
        return len(self._bindings)


class IndentationContext:
    """Tracks the nesting depth of the code being generated."""

    def __init__(self, depth: int = 0, layer: str = INDENTATION_LAYER):
        self.depth = max(depth, 0)
        self.layer = layer

    def render(self) -> str:
        return self.layer * self.depth

    def increase(self, levels: int = 1) -> None:
        self.depth += levels

    def decrease(self, levels: int = 1) -> None:
        # Never below zero.
        self.depth = max(self.depth - levels, 0)

    @contextmanager
    def indented(self, levels: int = 1) -> Iterator['IndentationContext']:
        """Increase the depth for the duration of a block."""
        previous = self.depth
        self.increase(levels)
        try:
            yield self
        finally:
            self.depth = previous


@dataclass
class CompilationContext:
    """Everything one compilation run mutates while rendering."""
    variables: VariableRegistry = field(default_factory=VariableRegistry)
    indentation: IndentationContext = field(default_factory=IndentationContext)

    def indent(self) -> str:
        return self.indentation.render()

    def indented(self, levels: int = 1):
        return self.indentation.indented(levels)
