"""
Root pytest configuration.

Loaded before collection so the engine packages under src/ (calculator,
models, validation, config, tax_references) import by their bare names
without an editable install.
"""

import sys
from pathlib import Path

SRC_DIR = str((Path(__file__).parent / "src").absolute())

if SRC_DIR in sys.path:
    sys.path.remove(SRC_DIR)
sys.path.insert(0, SRC_DIR)


def pytest_configure(config):
    """Keep src/ importable after plugins have adjusted sys.path."""
    if SRC_DIR not in sys.path:
        sys.path.insert(0, SRC_DIR)
