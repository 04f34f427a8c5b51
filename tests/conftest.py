"""
Shared fixtures for the graph analysis tests.
"""

import sys
from pathlib import Path
from typing import Dict

import pytest

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from graph_analysis.config import GraphAnalysisSettings
from graph_analysis.graph.note_graph import NoteGraph


def write_vault(root: Path, files: Dict[str, str]) -> Path:
    """Create a vault under ``root`` from a ``{relative path: text}`` mapping."""
    for name, text in files.items():
        path = root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    return root


def make_graph(*edges, resolved: bool = True) -> NoteGraph:
    graph = NoteGraph()
    for source, dest in edges:
        graph.add_link(source, dest, resolved=resolved)
    return graph


@pytest.fixture
def settings(tmp_path):
    return GraphAnalysisSettings(vault_path=tmp_path)


@pytest.fixture
def xyz_graph():
    """X -> Y, X -> Z, Y -> Z"""
    return make_graph(("X.md", "Y.md"), ("X.md", "Z.md"), ("Y.md", "Z.md"))


@pytest.fixture
def sample_graph():
    return make_graph(
        ("A.md", "B.md"),
        ("A.md", "C.md"),
        ("B.md", "C.md"),
        ("C.md", "D.md"),
        ("D.md", "E.md"),
        ("E.md", "F.md"),
        ("F.md", "D.md"),
    )
