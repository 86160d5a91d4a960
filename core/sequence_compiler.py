#!/usr/bin/env python3
"""
Sequence Compiler for step2code

Generates a Foundry test contract from a call sequence and its settings.

The document always has the same skeleton: license and pragma, the
forge-std import, one interface per called contract, then a ``TestContract``
holding the contract and account variables, a ``setUp()`` that funds the
accounts and a ``testExploit()`` replaying the calls in order.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from core.address_registry import AddressRegistry
from core.compilation_context import CompilationContext
from core.fragment_builder import (
    STATEMENT_SEPARATOR,
    FragmentBuilder,
    contract_variable_name,
    join_group,
    join_sections,
)
from core.sequence_models import Sequence, Settings
from core.signature_parser import FunctionSignatureParser

logger = logging.getLogger(__name__)


@dataclass
class CompilerOptions:
    """Literals written into every generated document."""
    license: str = 'UNLICENSED'
    solidity_version: str = '0.8.19'
    test_import_symbol: str = 'Test'
    forge_std_import: str = 'forge-std/Test.sol'
    test_contract_name: str = 'TestContract'
    setup_function_name: str = 'setUp'
    exploit_function_name: str = 'testExploit'
    # Used when settings ask to always fund callers but give no amount.
    default_funds: str = '100 ether'


class SequenceCompiler:
    """Compiles a sequence of calls into Solidity test source."""

    def __init__(self, options: Optional[CompilerOptions] = None, parser: Optional[FunctionSignatureParser] = None):
        self.options = options or CompilerOptions()
        self.parser = parser or FunctionSignatureParser()

    def compile(self, sequence: Sequence, settings: Optional[Settings] = None,
                context: Optional[CompilationContext] = None) -> str:
        """Return the full test contract for ``sequence``.

        A fresh :class:`CompilationContext` is used unless one is passed in.
        Any error aborts the whole compilation.
        """
        settings = settings or Settings()
        context = context or CompilationContext()
        builder = FragmentBuilder(context, self.parser)

        registry = AddressRegistry.from_sequence(sequence)
        logger.info("Compiling sequence of %d call(s) against %d contract(s)",
                    len(sequence), len(registry.contracts()))

        header = join_group([
            builder.build_license(self.options.license),
            builder.build_pragma(self.options.solidity_version),
        ])
        test_import = builder.build_import(self.options.test_import_symbol, self.options.forge_std_import)
        interfaces = [builder.build_interface(entry.index, entry.signatures) for _, entry in registry.contracts()]
        test_contract = builder.build_contract(
            self.options.test_contract_name,
            lambda: self._contract_sections(builder, registry, sequence, settings),
        )

        if context.indentation.depth != 0:
            logger.warning("Indentation depth %d left after compilation", context.indentation.depth)

        return join_sections([header, test_import, *interfaces, test_contract]) + '\n'

    def resolve_funds(self, settings: Settings) -> Optional[str]:
        """Amount each account receives in ``setUp()``, or None for no deals."""
        if settings.funds_to_caller:
            return settings.funds_to_caller
        if settings.always_fund_caller:
            return self.options.default_funds
        return None

    def _contract_sections(self, builder: FragmentBuilder, registry: AddressRegistry,
                           sequence: Sequence, settings: Settings) -> List[str]:
        # Order matters: variables must be registered before calls refer to them.
        contract_variables = join_group([
            builder.build_contract_variable(address, entry.index) for address, entry in registry.contracts()
        ])
        account_variables = join_group([
            builder.build_account_variable(address, entry.index) for address, entry in registry.accounts()
        ])

        funds = self.resolve_funds(settings)
        set_up = builder.build_function_definition(
            self.options.setup_function_name,
            lambda: [builder.build_vm_deal(address, funds) for address, _ in registry.accounts()] if funds else [],
        )

        exploit = builder.build_function_definition(
            self.options.exploit_function_name,
            lambda: [
                builder.build_call(step, contract_variable_name(registry.contract_index(step.call.target_address)))
                for step in sequence
            ],
            separator=STATEMENT_SEPARATOR,
        )
        return [contract_variables, account_variables, set_up, exploit]


def compile_sequence(sequence: Sequence, settings: Optional[Settings] = None,
                     options: Optional[CompilerOptions] = None) -> str:
    """Compile ``sequence`` with default collaborators."""
    return SequenceCompiler(options).compile(sequence, settings)
