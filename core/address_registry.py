#!/usr/bin/env python3
"""
Address Registry for step2code

Derived once from the whole call sequence before anything is rendered:
every target address becomes ``Contract<i>`` with the list of functions the
sequence calls on it, and every caller becomes ``account<i>``. Indices are
1-based and follow first appearance.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Tuple

from core.sequence_models import SequenceStep

logger = logging.getLogger(__name__)


@dataclass
class ContractEntry:
    """A called contract and the signatures its interface must declare."""
    index: int
    signatures: List[str] = field(default_factory=list)

    def add_signature(self, signature: str) -> bool:
        if signature in self.signatures:
            return False
        self.signatures.append(signature)
        return True


@dataclass(frozen=True)
class AccountEntry:
    """A caller address."""
    index: int


class AddressRegistry:
    """Maps target and caller addresses to their generated indices."""

    def __init__(self):
        self._contracts: Dict[str, ContractEntry] = {}
        self._accounts: Dict[str, AccountEntry] = {}

    @classmethod
    def from_sequence(cls, sequence: Iterable[SequenceStep]) -> 'AddressRegistry':
        registry = cls()
        for step in sequence:
            registry.register_call(step.call.caller_address, step.call.target_address, step.call.signature)
        logger.debug("Registered %d contract(s) and %d account(s)",
                     len(registry._contracts), len(registry._accounts))
        return registry

    def register_call(self, caller: str, target: str, signature: str) -> None:
        if caller and caller not in self._accounts:
            self._accounts[caller] = AccountEntry(index=len(self._accounts) + 1)

        entry = self._contracts.get(target)
        if entry is None:
            entry = ContractEntry(index=len(self._contracts) + 1)
            self._contracts[target] = entry
        if not entry.add_signature(signature):
            logger.debug("Skipping duplicate signature %r for %s", signature, target)

    def contracts(self) -> List[Tuple[str, ContractEntry]]:
        """(address, entry) pairs in ascending index order."""
        return sorted(self._contracts.items(), key=lambda item: item[1].index)

    def accounts(self) -> List[Tuple[str, AccountEntry]]:
        return sorted(self._accounts.items(), key=lambda item: item[1].index)

    def contract_index(self, address: str) -> int:
        return self._contracts[address].index

    def account_index(self, address: str) -> int:
        return self._accounts[address].index

    def signatures_for(self, address: str) -> List[str]:
        return list(self._contracts[address].signatures)
