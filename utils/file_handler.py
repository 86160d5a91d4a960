"""
File handling utilities for sequence documents and generated tests.
"""

import json
from pathlib import Path
from typing import Tuple, Union

from core.exceptions import SequenceFormatError
from core.sequence_models import Sequence, Settings, load_sequence_document


class FileHandler:
    """Read sequence documents and write generated Foundry tests."""

    SEQUENCE_EXTENSIONS = {'.json'}
    TEST_SUFFIX = '.t.sol'

    def read_sequence_file(self, path: Union[str, Path]) -> Tuple[Sequence, Settings]:
        """
        Load a sequence document from disk.

        Args:
            path: JSON file holding ``{"sequence": [...], "settings": {...}}``

        Returns:
            Tuple of (sequence, settings)
        """
        target_path = Path(path)

        if not target_path.exists():
            raise FileNotFoundError(f"Path does not exist: {path}")
        if not target_path.is_file():
            raise ValueError(f"Not a file: {path}")
        if target_path.suffix.lower() not in self.SEQUENCE_EXTENSIONS:
            print(f"⚠️  Warning: {target_path} does not have a .json extension")

        content = self._read_file_with_encoding(target_path)
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise SequenceFormatError(f"invalid JSON: {e}", str(target_path)) from e

        return load_sequence_document(data)

    def write_test_file(self, source: str, output: Union[str, Path]) -> Path:
        """Write generated source; a directory target gets ``Exploit.t.sol``."""
        output_path = Path(output)
        if output_path.is_dir() or not output_path.suffix:
            output_path = output_path / f"Exploit{self.TEST_SUFFIX}"

        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, 'w', encoding='utf-8') as f:
            f.write(source)

        return output_path

    def _read_file_with_encoding(self, file_path: Path) -> str:
        """Read file with multiple encoding attempts."""
        encodings = ['utf-8-sig', 'latin-1']

        for encoding in encodings:
            try:
                with open(file_path, 'r', encoding=encoding) as f:
                    return f.read()
            except UnicodeDecodeError:
                continue

        raise UnicodeDecodeError("utf-8", b"", 0, 0, "Unable to decode file with any supported encoding")
