"""Errors raised while compiling a display asset.

Every failure aborts the asset being built. Collaborator boundaries
(FreeType, Pillow, the filesystem) convert their own exceptions into one of
these classes and chain the original with ``raise ... from err``.
"""

from __future__ import annotations

from dataclasses import dataclass


class AssetError(Exception):
    """Base exception for asset compilation failures."""


class AssetIOError(AssetError):
    """The asset file is missing or unreadable."""


class DecodeError(AssetError):
    """The font or image data could not be parsed."""


class EmptyAlphabetError(AssetError):
    """A font build was requested with no characters."""

    def __init__(self, message: str = "no characters requested") -> None:
        super().__init__(message)


@dataclass
class RasterizationError(AssetError):
    code_point: int
    reason: str

    def __str__(self) -> str:
        return f"cannot rasterize U+{self.code_point:04X} ({_printable(self.code_point)}): {self.reason}"


@dataclass
class NegativeBearingError(AssetError):
    code_point: int
    top: int

    def __str__(self) -> str:
        return (
            f"glyph U+{self.code_point:04X} ({_printable(self.code_point)}) has negative "
            f"vertical bearing {self.top}; the font is not supported"
        )


def _printable(code_point: int) -> str:
    char = chr(code_point)
    return repr(char) if char.isprintable() else "non-printable"
