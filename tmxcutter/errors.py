"""
Exceptions raised while reading a map and cutting its tiles.

Every failure is fatal for the run; the CLI is the only place they are caught.
"""

from typing import Optional


class TmxCutterError(Exception):
    """Base class for all tmxcutter errors."""


class MalformedMapError(TmxCutterError, ValueError):
    """The map document is structurally invalid or misses required attributes."""


class ConfigurationError(TmxCutterError):
    """The atlas list or the supplied assets cannot be used as given."""


class MissingTextureAssetError(ConfigurationError):
    """No image was supplied for an atlas display name."""
    
    def __init__(self, name: str, available: Optional[list] = None):
        self.name = name
        self.available = sorted(available) if available else []
        message = f"No texture supplied for tileset '{name}'"
        if self.available:
            message += f" (available: {', '.join(self.available)})"
        super().__init__(message)


class UnresolvedIdentifierError(TmxCutterError):
    """A gid is not owned by any atlas."""
    
    def __init__(self, gid: int, row: Optional[int] = None, column: Optional[int] = None,
                 first_gid: Optional[int] = None):
        self.gid = gid
        self.row = row
        self.column = column
        self.first_gid = first_gid
        message = f"gid {gid} is not covered by any tileset"
        if first_gid is not None:
            message += f" (smallest firstgid is {first_gid})"
        if row is not None and column is not None:
            message += f" at cell (row={row}, column={column})"
        super().__init__(message)


class RegionOutOfBoundsError(TmxCutterError):
    """The source rectangle computed for a gid falls outside its atlas image."""
    
    def __init__(self, atlas_name: str, gid: int, rect):
        self.atlas_name = atlas_name
        self.gid = gid
        self.rect = rect
        if rect is None:
            message = f"gid {gid} precedes the first tile of tileset '{atlas_name}'"
        else:
            message = f"gid {gid} maps to {rect} outside tileset '{atlas_name}'"
        super().__init__(message)
