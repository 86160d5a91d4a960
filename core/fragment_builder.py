#!/usr/bin/env python3
"""
Fragment Builder for step2code

Rendering functions for every Solidity construct the generated test uses:
interfaces, state variables, pranks, deals, calls with captured outputs,
function definitions and the test contract wrapper. Each function renders at
the depth held by the :class:`CompilationContext` it was given; block-level
helpers take a callback for their body so that the deeper depth is always
restored when the body finishes, even on error.
"""

import logging
from typing import Callable, List, Optional, Sequence

from core.compilation_context import CompilationContext
from core.exceptions import InvalidOutputMapping
from core.sequence_models import InputMapping, SequenceStep
from core.signature_parser import FunctionFragment, FunctionSignatureParser
from core.solidity_types import local_variable_type

logger = logging.getLogger(__name__)

STATEMENT_SEPARATOR = '\n\n'
ITEM_SEPARATOR = '\n'

CONTRACT_INTERFACE_PREFIX = 'Contract'
CONTRACT_VARIABLE_PREFIX = 'contract'
ACCOUNT_VARIABLE_PREFIX = 'account'

# Rendered in place of an output the caller does not capture, e.g. ``(a,  ) = ...``.
DISCARDED_OUTPUT = ' '


def join_group(fragments: Sequence[str]) -> str:
    """Join items of one logical group, one per line."""
    return ITEM_SEPARATOR.join(f for f in fragments if f)


def join_sections(sections: Sequence[str]) -> str:
    """Join logical groups with a blank line between them, skipping empty ones."""
    return STATEMENT_SEPARATOR.join(s for s in sections if s)


def interface_name(index: int) -> str:
    return f"{CONTRACT_INTERFACE_PREFIX}{index}"


def contract_variable_name(index: int) -> str:
    return f"{CONTRACT_VARIABLE_PREFIX}{index}"


def account_variable_name(index: int) -> str:
    return f"{ACCOUNT_VARIABLE_PREFIX}{index}"


class FragmentBuilder:
    """Turns structured call data into Solidity text fragments."""

    def __init__(self, context: CompilationContext, parser: Optional[FunctionSignatureParser] = None):
        self.context = context
        self.parser = parser or FunctionSignatureParser()

    @property
    def indent(self) -> str:
        return self.context.indent()

    # -----------------------------------------------------------------------
    # File header
    # -----------------------------------------------------------------------

    def build_license(self, license_id: str) -> str:
        return f"// SPDX-License-Identifier: {license_id}"

    def build_pragma(self, version: str) -> str:
        return f"pragma solidity {version};"

    def build_import(self, symbol: str, path: str) -> str:
        return f'import {{ {symbol} }} from "{path}";'

    # -----------------------------------------------------------------------
    # Declarations
    # -----------------------------------------------------------------------

    def build_interface(self, index: int, signatures: Sequence[str]) -> str:
        """``interface Contract<i> {`` with one ``<sig>;`` line per signature."""
        header = f"{self.indent}interface {interface_name(index)} {{"
        with self.context.indented():
            body = [f"{self.indent}{signature};" for signature in signatures]
        footer = f"{self.indent}}}"
        return join_group([header, *body, footer])

    def build_variable_declaration(self, name: str, type_name: str, value: str = '') -> str:
        """``<type> <name>[ = <value>];`` and registers the variable."""
        self.context.variables.define(name, value, type_name)
        assignment = f" = {value}" if value != '' else ''
        return f"{self.indent}{type_name} {name}{assignment};"

    def build_contract_variable(self, address: str, index: int) -> str:
        name = contract_variable_name(index)
        self.context.variables.define(name, address, 'contract')
        iface = interface_name(index)
        return f"{self.indent}{iface} {name} = {iface}({address});"

    def build_account_variable(self, address: str, index: int) -> str:
        return self.build_variable_declaration(account_variable_name(index), 'address', address)

    # -----------------------------------------------------------------------
    # Cheatcodes
    # -----------------------------------------------------------------------

    def reference_for(self, address: str) -> str:
        """Variable name holding ``address`` if one was declared, else the address itself."""
        binding = self.context.variables.reverse_lookup(address)
        return binding.name if binding else address

    def build_prank(self, caller: str) -> str:
        return f"{self.indent}vm.prank({self.reference_for(caller)});"

    def build_vm_deal(self, account: str, amount: str) -> str:
        return f"{self.indent}vm.deal({self.reference_for(account)}, {amount});"

    # -----------------------------------------------------------------------
    # Calls
    # -----------------------------------------------------------------------

    def build_execution_options(self, value: Optional[str], gas_limit: Optional[str], is_payable: bool) -> str:
        """``{value: ..., gasLimit: ...}`` or an empty string."""
        options: List[str] = []
        if value:
            if is_payable:
                options.append(f"value: {value}")
            else:
                logger.warning("Ignoring value %s sent to a non-payable function", value)
        if gas_limit:
            options.append(f"gasLimit: {gas_limit}")
        return f"{{{', '.join(options)}}}" if options else ''

    def build_arguments(self, input_mappings: Sequence[InputMapping]) -> str:
        arguments: List[str] = []
        for mapping in input_mappings:
            if mapping.is_state_mapping:
                # Raises UnknownVariable for names never captured or declared.
                arguments.append(self.context.variables.get(mapping.value).name)
            else:
                arguments.append(mapping.value)
        return ', '.join(arguments)

    def build_call(self, step: SequenceStep, target: str) -> str:
        """Render one call statement, capturing outputs as requested.

        ``target`` is the variable the call is made on (``contract1``).
        """
        call = step.call
        fragment = self.parser.parse(call.signature)
        slots = self._output_slots(fragment, step.output_mappings)

        arguments = self.build_arguments(step.input_mappings)
        options = self.build_execution_options(call.value, call.gas_limit, fragment.is_payable)
        invocation = f"{target}.{fragment.name}{options}({arguments});"

        prank = self.build_prank(call.caller_address) if call.caller_address else ''
        captured = [
            (name, local_variable_type(type_name))
            for name, type_name in zip(slots, fragment.return_types) if name
        ]

        if not captured:
            return join_group([prank, f"{self.indent}{invocation}"])

        if len(slots) == 1:
            name, type_name = captured[0]
            self.context.variables.define(name, '', type_name)
            return join_group([prank, f"{self.indent}{type_name} {name} = {invocation}"])

        declarations = [self.build_variable_declaration(name, type_name) for name, type_name in captured]
        outputs = ', '.join(name or DISCARDED_OUTPUT for name in slots)
        return join_group([*declarations, prank, f"{self.indent}({outputs}) = {invocation}"])

    def _output_slots(self, fragment: FunctionFragment, output_mappings: Sequence[str]) -> List[str]:
        """One entry per declared return value; blank where nothing is captured."""
        if len(output_mappings) > fragment.return_arity:
            raise InvalidOutputMapping(fragment.raw, len(output_mappings), fragment.return_arity)
        if not output_mappings:
            return []
        slots = [name.strip() for name in output_mappings]
        return slots + [''] * (fragment.return_arity - len(slots))

    # -----------------------------------------------------------------------
    # Blocks
    # -----------------------------------------------------------------------

    def build_function_definition(
        self,
        name: str,
        render_body: Callable[[], Sequence[str]],
        modifiers: Sequence[str] = ('public',),
        separator: str = ITEM_SEPARATOR,
    ) -> str:
        """``function <name>() <modifiers> { ... }`` with the body one level deeper."""
        header = f"{self.indent}function {name}() {' '.join(modifiers)} {{"
        with self.context.indented():
            body = separator.join(f for f in render_body() if f)
        footer = f"{self.indent}}}"
        return join_group([header, body, footer])

    def build_contract(self, name: str, render_sections: Callable[[], Sequence[str]], base: Optional[str] = 'Test') -> str:
        """``contract <name> is <base> { ... }`` with sections separated by blank lines."""
        inheritance = f" is {base}" if base else ''
        header = f"{self.indent}contract {name}{inheritance} {{"
        with self.context.indented():
            body = join_sections(render_sections())
        footer = f"{self.indent}}}"
        return join_group([header, body, footer])
