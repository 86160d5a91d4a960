#!/usr/bin/env python3
"""
Sequence Models for step2code

Typed representation of an exploit reproduction: the ordered calls, how their
arguments are filled and which return values are captured, plus the global
generation settings. ``load_sequence_document`` turns the JSON produced by the
sequence editor into these objects.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from core.exceptions import SequenceFormatError

logger = logging.getLogger(__name__)

CONCRETE = 'concrete'
STATE_MAPPING = 'stateMapping'
INPUT_KINDS = (CONCRETE, STATE_MAPPING)


@dataclass(frozen=True)
class CallDescriptor:
    """One on-chain call."""
    caller_address: str
    target_address: str
    signature: str
    value: Optional[str] = None
    gas_limit: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any], path: str = 'call') -> 'CallDescriptor':
        if not isinstance(data, dict):
            raise SequenceFormatError("call must be an object", path)

        # Shape emitted by the sequence editor UI.
        if 'contract' in data or 'callInfo' in data:
            call_info = data.get('callInfo') or {}
            contract = data.get('contract') or {}
            caller = call_info.get('from', '')
            target = contract.get('address')
            signature = contract.get('functionString')
            value = call_info.get('value')
            gas_limit = call_info.get('gasLimit')
        else:
            caller = data.get('caller_address', '')
            target = data.get('target_address')
            signature = data.get('signature')
            value = data.get('value')
            gas_limit = data.get('gas_limit')

        if not target:
            raise SequenceFormatError("missing target address", path)
        if not signature:
            raise SequenceFormatError("missing function signature", path)

        return cls(
            caller_address=str(caller or ''),
            target_address=str(target),
            signature=str(signature),
            value=_optional_literal(value),
            gas_limit=_optional_literal(gas_limit),
        )


@dataclass(frozen=True)
class InputMapping:
    """How one call argument is filled: a literal or a previously captured variable."""
    kind: str
    value: str

    @property
    def is_state_mapping(self) -> bool:
        return self.kind == STATE_MAPPING

    @classmethod
    def concrete(cls, value: str) -> 'InputMapping':
        return cls(CONCRETE, value)

    @classmethod
    def state(cls, name: str) -> 'InputMapping':
        return cls(STATE_MAPPING, name)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], path: str = 'inputMapping') -> 'InputMapping':
        if not isinstance(data, dict):
            raise SequenceFormatError("input mapping must be an object", path)
        kind = data.get('type', data.get('kind'))
        if kind not in INPUT_KINDS:
            raise SequenceFormatError(f"unknown input mapping kind {kind!r}", path)
        return cls(kind, str(data.get('value', '')))


@dataclass
class SequenceStep:
    """A call together with its argument sources and captured outputs."""
    call: CallDescriptor
    input_mappings: List[InputMapping] = field(default_factory=list)
    output_mappings: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], path: str = 'step') -> 'SequenceStep':
        if not isinstance(data, dict):
            raise SequenceFormatError("step must be an object", path)
        if 'call' not in data:
            raise SequenceFormatError("missing call", path)

        raw_inputs = data.get('inputMappings', data.get('input_mappings')) or []
        raw_outputs = data.get('outputMappings', data.get('output_mappings')) or []
        if not isinstance(raw_inputs, list) or not isinstance(raw_outputs, list):
            raise SequenceFormatError("input and output mappings must be lists", path)

        return cls(
            call=CallDescriptor.from_dict(data['call'], f"{path}.call"),
            input_mappings=[
                InputMapping.from_dict(item, f"{path}.inputMappings[{i}]")
                for i, item in enumerate(raw_inputs)
            ],
            output_mappings=['' if name is None else str(name) for name in raw_outputs],
        )


@dataclass(frozen=True)
class TokenGrant:
    """ERC20 balance to hand to an account before the exploit (not rendered yet)."""
    account: str
    address: str
    amount: str


@dataclass
class Settings:
    """Cross-cutting generation options."""
    funds_to_caller: Optional[str] = None
    tokens_to_caller: List[TokenGrant] = field(default_factory=list)
    always_fund_caller: bool = False

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'Settings':
        if not data:
            return cls()
        if not isinstance(data, dict):
            raise SequenceFormatError("settings must be an object", 'settings')

        grants = []
        for i, grant in enumerate(data.get('tokensToCaller', data.get('tokens_to_caller')) or []):
            try:
                grants.append(TokenGrant(str(grant['account']), str(grant['address']), str(grant['amount'])))
            except (KeyError, TypeError):
                raise SequenceFormatError("token grant needs account, address and amount",
                                          f"settings.tokensToCaller[{i}]") from None

        return cls(
            funds_to_caller=_optional_literal(data.get('fundsToCaller', data.get('funds_to_caller'))),
            tokens_to_caller=grants,
            always_fund_caller=bool(data.get('alwaysFundCaller', data.get('always_fund_caller', False))),
        )


Sequence = List[SequenceStep]


def load_sequence_document(data: Any) -> Tuple[Sequence, Settings]:
    """Build ``(sequence, settings)`` from a decoded JSON document.

    Accepts either ``{"sequence": [...], "settings": {...}}`` or a bare list of
    steps.
    """
    if isinstance(data, list):
        raw_steps, raw_settings = data, None
    elif isinstance(data, dict):
        if 'sequence' not in data:
            raise SequenceFormatError("document has no 'sequence' key")
        raw_steps, raw_settings = data['sequence'], data.get('settings')
    else:
        raise SequenceFormatError("document must be an object or a list of steps")

    if not isinstance(raw_steps, list):
        raise SequenceFormatError("sequence must be a list", 'sequence')

    sequence = [SequenceStep.from_dict(step, f"sequence[{i}]") for i, step in enumerate(raw_steps)]
    settings = Settings.from_dict(raw_settings)
    if settings.tokens_to_caller:
        logger.warning("tokensToCaller is not supported yet; %d grant(s) ignored", len(settings.tokens_to_caller))
    logger.debug("Loaded sequence with %d step(s)", len(sequence))
    return sequence, settings


def _optional_literal(value: Any) -> Optional[str]:
    if value is None or value == '':
        return None
    return str(value)
