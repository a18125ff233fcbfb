"""
Exceptions raised by the Hashiwokakero model, generator and file format.
"""


class HashiError(Exception):
    """Base class for all errors raised by hashibridges"""


class AmbiguousDirection(HashiError, ValueError):
    """Two coordinates are not on a common row or column"""


class PositionInvalid(HashiError, ValueError):
    """Coordinates lie outside the grid"""


class IslandTooClose(HashiError, ValueError):
    """An island would be placed on or right next to an existing island"""


class CellOccupiedByBridge(HashiError, ValueError):
    """An island would be placed on a cell spanned by a bridge"""


class IslandNotFound(HashiError, LookupError):
    """No island exists at the given coordinates"""


class NotNeighbors(HashiError, ValueError):
    """Two islands are not directly connectable (other island or bridge in between)"""


class BridgeAlreadyExists(HashiError, ValueError):
    """A bridge between the two islands is already present"""


class ConfigurationInvalid(HashiError, ValueError):
    """Grid dimensions or island count out of the allowed range"""


class GenerationFailed(HashiError, RuntimeError):
    """The generator ran out of attempts"""


class PuzzleFormatError(HashiError, ValueError):
    """A puzzle file could not be read"""


class PuzzleSyntaxError(PuzzleFormatError):
    """A puzzle file does not follow the FIELD / ISLANDS / BRIDGES syntax"""


class PuzzleSemanticError(PuzzleFormatError):
    """A puzzle file is well formed but describes an invalid puzzle"""
