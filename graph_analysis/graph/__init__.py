"""
Note graph container and builder.
"""

from .builder import GraphBuilder, build_graph
from .note_graph import NoteGraph

__all__ = ["GraphBuilder", "NoteGraph", "build_graph"]
