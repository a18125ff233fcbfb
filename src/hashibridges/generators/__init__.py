"""
Puzzle generators for Hashiwokakero.
"""

from .puzzle_generator import PuzzleGenerator, PuzzleGeneratorConfig

__all__ = ['PuzzleGenerator', 'PuzzleGeneratorConfig']
