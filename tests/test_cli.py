import json

import pytest

from conftest import CALLER, SAMPLE_DOCUMENT, TOKEN, TOTAL_SUPPLY
from core.exceptions import SequenceFormatError
from main import main
from utils.file_handler import FileHandler


def test_compile_prints_to_stdout(sequence_file, config_file, capsys):
    rc = main(['--config-file', str(config_file), 'compile', str(sequence_file)])

    out = capsys.readouterr().out
    assert rc == 0
    assert out.startswith("// SPDX-License-Identifier: UNLICENSED\n")
    assert "        uint256 supply = contract1.totalSupply();" in out
    assert "vm.deal(account1, 10 ether);" in out


def test_compile_writes_output_file(sequence_file, config_file, tmp_path):
    out_path = tmp_path / "out" / "Replay.t.sol"
    rc = main([
        '--config-file', str(config_file),
        'compile', str(sequence_file),
        '-o', str(out_path),
        '--solidity-version', '0.8.24',
        '--contract-name', 'ReplayTest',
        '--funds', '1 ether',
    ])

    assert rc == 0
    source = out_path.read_text()
    assert "pragma solidity 0.8.24;" in source
    assert "contract ReplayTest is Test {" in source
    assert "vm.deal(account1, 1 ether);" in source


def test_compile_save_uses_configured_output_dir(sequence_file, config_file, tmp_path):
    out_dir = tmp_path / "generated"
    assert main(['--config-file', str(config_file), 'config', '--set', 'output_dir', str(out_dir)]) == 0

    rc = main(['--config-file', str(config_file), 'compile', str(sequence_file), '--save'])

    assert rc == 0
    assert (out_dir / "sequence.t.sol").exists()


def test_compile_error_returns_nonzero(tmp_path, config_file, capsys):
    bad = tmp_path / "bad.json"
    bad.write_text(json.dumps([{
        "call": {"callInfo": {"from": CALLER}, "contract": {"address": TOKEN, "functionString": TOTAL_SUPPLY}},
        "outputMappings": ["a", "b"],
    }]))

    rc = main(['--config-file', str(config_file), 'compile', str(bad)])

    assert rc == 1
    assert "Compilation failed" in capsys.readouterr().out


def test_missing_sequence_file(tmp_path, config_file, capsys):
    rc = main(['--config-file', str(config_file), 'compile', str(tmp_path / "nope.json")])
    assert rc == 1
    assert "Could not read" in capsys.readouterr().out


def test_config_show(config_file, capsys):
    assert main(['--config-file', str(config_file), 'config', '--show']) == 0
    assert "default_funds" in capsys.readouterr().out


def test_config_unknown_key(config_file):
    assert main(['--config-file', str(config_file), 'config', '--set', 'colour', 'blue']) == 1


def test_no_command_prints_help(capsys):
    assert main([]) == 1
    assert "usage" in capsys.readouterr().out.lower()


class TestFileHandler:

    def test_read_sequence_file(self, sequence_file):
        sequence, settings = FileHandler().read_sequence_file(sequence_file)
        assert len(sequence) == len(SAMPLE_DOCUMENT["sequence"])
        assert settings.funds_to_caller == "10 ether"

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(SequenceFormatError):
            FileHandler().read_sequence_file(path)

    def test_directory_is_rejected(self, tmp_path):
        with pytest.raises(ValueError):
            FileHandler().read_sequence_file(tmp_path)

    def test_write_into_directory(self, tmp_path):
        written = FileHandler().write_test_file("// test\n", tmp_path)
        assert written == tmp_path / "Exploit.t.sol"
        assert written.read_text() == "// test\n"
