"""First-person dungeon room with line-of-sight and frustum-culled props."""

__version__ = "0.1.0"
__all__ = ["__version__"]