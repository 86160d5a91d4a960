#!/usr/bin/env python3
"""
Configuration Manager for step2code

Manages the defaults written into generated tests and where they are saved.
"""

from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, List

import yaml
from rich.console import Console

from core.sequence_compiler import CompilerOptions


@dataclass
class Step2CodeConfig:
    """Main configuration for step2code."""

    # Generated document
    license: str = "UNLICENSED"
    solidity_version: str = "0.8.19"
    forge_std_import: str = "forge-std/Test.sol"
    test_contract_name: str = "TestContract"
    exploit_function_name: str = "testExploit"

    # Funding used when a sequence sets alwaysFundCaller without an amount
    default_funds: str = "100 ether"

    # Output settings
    output_dir: str = "./test"


class ConfigManager:
    """Manages step2code configuration."""

    def __init__(self, config_file: str = "~/.step2code/config.yaml"):
        self.config_file = Path(config_file).expanduser()
        self.console = Console()
        self.config = Step2CodeConfig()

        # Ensure config directory exists
        self.config_file.parent.mkdir(parents=True, exist_ok=True)

        self.load_config()

    def load_config(self) -> None:
        """Load configuration from file."""
        if not self.config_file.exists():
            return
        try:
            with open(self.config_file, 'r') as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            self.console.print(f"[yellow]Warning: Could not load config file: {e}[/yellow]")
            return

        if not isinstance(data, dict):
            return
        for key, value in data.items():
            if hasattr(self.config, key) and value is not None:
                setattr(self.config, key, str(value))

    def save_config(self) -> None:
        """Save current configuration to file."""
        try:
            with open(self.config_file, 'w') as f:
                yaml.dump(asdict(self.config), f, default_flow_style=False, indent=2)
            self.console.print(f"[green]✓ Configuration saved to {self.config_file}[/green]")
        except OSError as e:
            self.console.print(f"[red]✗ Failed to save config: {e}[/red]")

    def set_value(self, key: str, value: Any) -> bool:
        """Update a single setting; unknown keys are rejected."""
        if key not in self.keys():
            self.console.print(f"[red]✗ Unknown setting: {key}[/red]")
            return False
        setattr(self.config, key, str(value))
        return True

    @staticmethod
    def keys() -> List[str]:
        return [f.name for f in fields(Step2CodeConfig)]

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self.config)

    def show_config(self) -> None:
        """Display current configuration."""
        from rich.table import Table

        table = Table(title="step2code Configuration")
        table.add_column("Setting", style="cyan")
        table.add_column("Value", style="green")
        for key, value in self.as_dict().items():
            table.add_row(key, str(value))

        self.console.print(table)
        self.console.print(f"\n[bold cyan]Config File:[/bold cyan] {self.config_file}")

    def to_compiler_options(self) -> CompilerOptions:
        return CompilerOptions(
            license=self.config.license,
            solidity_version=self.config.solidity_version,
            forge_std_import=self.config.forge_std_import,
            test_contract_name=self.config.test_contract_name,
            exploit_function_name=self.config.exploit_function_name,
            default_funds=self.config.default_funds,
        )

    def get_output_path(self) -> Path:
        """Get output path as Path object."""
        return Path(self.config.output_dir).expanduser().resolve()
