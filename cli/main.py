"""
Main CLI implementation for step2code.
"""

import logging
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from rich.console import Console

from core.config_manager import ConfigManager
from core.exceptions import Step2CodeError
from core.sequence_compiler import SequenceCompiler
from utils.file_handler import FileHandler

logger = logging.getLogger(__name__)


class Step2CodeCLI:
    """Main CLI class for step2code."""

    def __init__(self, config_file: Optional[str] = None):
        self.version = "1.0.0"
        self.console = Console()
        self.file_handler = FileHandler()
        self.config_manager = ConfigManager(config_file) if config_file else ConfigManager()

    def show_version(self):
        """Display version information."""
        print(f"step2code v{self.version}")

    def run_compile(
        self,
        sequence_path: str,
        output: Optional[str] = None,
        solidity_version: Optional[str] = None,
        contract_name: Optional[str] = None,
        funds: Optional[str] = None,
    ) -> int:
        """Compile a sequence file and print or save the generated test."""
        try:
            sequence, settings = self.file_handler.read_sequence_file(sequence_path)
        except (FileNotFoundError, ValueError) as e:
            self.console.print(f"[red]✗ Could not read {sequence_path}: {e}[/red]")
            return 1
        except Step2CodeError as e:
            self.console.print(f"[red]✗ {e}[/red]")
            return 1

        logger.debug("Loaded %d step(s) from %s", len(sequence), sequence_path)
        options = self.config_manager.to_compiler_options()
        if solidity_version:
            options = replace(options, solidity_version=solidity_version)
        if contract_name:
            options = replace(options, test_contract_name=contract_name)
        if funds:
            settings = replace(settings, funds_to_caller=funds)

        try:
            source = SequenceCompiler(options).compile(sequence, settings)
        except Step2CodeError as e:
            self.console.print(f"[red]✗ Compilation failed: {e}[/red]")
            return 1

        if output is None:
            print(source, end='')
            return 0

        written = self.file_handler.write_test_file(source, output)
        self.console.print(f"[green]✓ Test written to {written}[/green]")
        return 0

    def run_config(self, show: bool = False, set_pairs: Optional[List[List[str]]] = None) -> int:
        """Show or update configuration."""
        if set_pairs:
            for key, value in set_pairs:
                if not self.config_manager.set_value(key, value):
                    return 1
            self.config_manager.save_config()
            return 0
        if show:
            self.config_manager.show_config()
            return 0
        return 1

    def default_output_path(self, sequence_path: str) -> Path:
        """``<output_dir>/<SequenceName>.t.sol`` for a sequence file."""
        stem = Path(sequence_path).stem
        return self.config_manager.get_output_path() / f"{stem}{FileHandler.TEST_SUFFIX}"
