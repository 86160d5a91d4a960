#!/usr/bin/env python3
"""
Tests for ConfigManager persistence and compiler option bridging.
"""

import yaml

from core.config_manager import ConfigManager, Step2CodeConfig
from core.sequence_compiler import CompilerOptions


class TestConfigManager:

    def test_defaults_when_file_missing(self, config_file):
        manager = ConfigManager(str(config_file))

        assert manager.config == Step2CodeConfig()
        assert config_file.parent.exists()
        assert not config_file.exists()

    def test_save_and_reload(self, config_file):
        manager = ConfigManager(str(config_file))
        assert manager.set_value("solidity_version", "0.8.20")
        manager.save_config()

        reloaded = ConfigManager(str(config_file))
        assert reloaded.config.solidity_version == "0.8.20"
        assert yaml.safe_load(config_file.read_text())["solidity_version"] == "0.8.20"

    def test_unknown_keys_ignored_on_load(self, config_file):
        config_file.parent.mkdir(parents=True, exist_ok=True)
        config_file.write_text(yaml.dump({"license": "MIT", "not_a_setting": 1}))

        manager = ConfigManager(str(config_file))
        assert manager.config.license == "MIT"
        assert not hasattr(manager.config, "not_a_setting")

    def test_invalid_yaml_keeps_defaults(self, config_file, capsys):
        config_file.parent.mkdir(parents=True, exist_ok=True)
        config_file.write_text("license: [unclosed")

        manager = ConfigManager(str(config_file))
        assert manager.config.license == "UNLICENSED"
        assert "Could not load config file" in capsys.readouterr().out

    def test_set_unknown_key_rejected(self, config_file):
        manager = ConfigManager(str(config_file))
        assert manager.set_value("colour", "blue") is False

    def test_to_compiler_options(self, config_file):
        manager = ConfigManager(str(config_file))
        manager.set_value("test_contract_name", "ReplayTest")
        manager.set_value("default_funds", "3 ether")

        options = manager.to_compiler_options()
        assert isinstance(options, CompilerOptions)
        assert options.test_contract_name == "ReplayTest"
        assert options.default_funds == "3 ether"
        assert options.solidity_version == "0.8.19"

    def test_show_config_lists_settings(self, config_file, capsys):
        ConfigManager(str(config_file)).show_config()
        out = capsys.readouterr().out
        assert "solidity_version" in out
        assert "0.8.19" in out
