"""
Shared test fixtures for the step2code test suite.

Provides sample addresses and signatures, step factories, a fresh
compilation context and temporary config/sequence files.
"""

import json
from pathlib import Path
from typing import List, Optional

import pytest

from core.compilation_context import CompilationContext
from core.fragment_builder import FragmentBuilder
from core.sequence_models import CallDescriptor, InputMapping, SequenceStep


# ── Sample data ─────────────────────────────────────────────────

CALLER = "0x00000000000000000000000000000000000000A1"
OTHER_CALLER = "0x00000000000000000000000000000000000000A2"
TOKEN = "0x00000000000000000000000000000000000000B2"
VAULT = "0x00000000000000000000000000000000000000C3"

BALANCE_OF = "function balanceOf(address) external view returns (uint)"
TOTAL_SUPPLY = "function totalSupply() external view returns (uint256)"
TRANSFER = "function transfer(address to, uint256 amount) external returns (bool)"
DEPOSIT = "function deposit() external payable"
GET_RESERVES = "function getReserves() external view returns (uint256, address)"


def make_step(
    signature: str,
    target: str = TOKEN,
    caller: str = CALLER,
    inputs: Optional[List[InputMapping]] = None,
    outputs: Optional[List[str]] = None,
    value: Optional[str] = None,
    gas_limit: Optional[str] = None,
) -> SequenceStep:
    """Build a SequenceStep with sensible defaults."""
    return SequenceStep(
        call=CallDescriptor(
            caller_address=caller,
            target_address=target,
            signature=signature,
            value=value,
            gas_limit=gas_limit,
        ),
        input_mappings=list(inputs or []),
        output_mappings=list(outputs or []),
    )


SAMPLE_DOCUMENT = {
    "sequence": [
        {
            "call": {
                "callInfo": {"from": CALLER},
                "contract": {"address": TOKEN, "functionString": TOTAL_SUPPLY},
                "inputs": [],
            },
            "inputMappings": [],
            "outputMappings": ["supply"],
        },
        {
            "call": {
                "callInfo": {"from": CALLER, "gasLimit": "100000"},
                "contract": {"address": TOKEN, "functionString": TRANSFER},
                "inputs": [],
            },
            "inputMappings": [
                {"type": "concrete", "value": VAULT},
                {"type": "stateMapping", "value": "supply"},
            ],
            "outputMappings": [],
        },
    ],
    "settings": {"fundsToCaller": "10 ether"},
}


# ── Fixtures ────────────────────────────────────────────────────


@pytest.fixture
def context():
    """Fresh per-test compilation context."""
    return CompilationContext()


@pytest.fixture
def builder(context):
    """FragmentBuilder rendering inside a function body (depth 2)."""
    context.indentation.increase(2)
    return FragmentBuilder(context)


@pytest.fixture
def sequence_file(tmp_path):
    """A sequence JSON file on disk."""
    path = tmp_path / "sequence.json"
    path.write_text(json.dumps(SAMPLE_DOCUMENT))
    return path


@pytest.fixture
def config_file(tmp_path) -> Path:
    """Config path inside a temp dir so the real ~/.step2code is never touched."""
    return tmp_path / "step2code" / "config.yaml"
