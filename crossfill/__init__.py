"""Crossword slot extraction and pattern-constrained dictionary lookup.

This package exposes the public API surface via:

- ``crossfill.data.dictionary.WordDictionary``: loads words and answers pattern queries.
- ``crossfill.engine.grid.Board``: parses grids and extracts fillable slots.
- ``crossfill.utils.distance.edit_distance``: fuzzy matching helper.
"""

from .data.dictionary import DictionaryConfig, WordDictionary
from .data.index import MatchView
from .engine.grid import Board, GridConfig
from .utils.distance import edit_distance

__all__ = [
    "Board",
    "DictionaryConfig",
    "GridConfig",
    "MatchView",
    "WordDictionary",
    "edit_distance",
]

__version__ = "0.1.0"
