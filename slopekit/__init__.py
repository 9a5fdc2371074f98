"""Building blocks for a downhill sledding game: vectors, states, tagged-line files, translations, screen modes and characters."""

__version__ = "0.1.0"
__all__ = ["vectors", "states", "spx", "translation", "winsys", "character", "charfile"]