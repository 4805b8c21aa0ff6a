"""anvilcompact: shrink Minecraft worlds by dropping empty chunks."""

__version__ = "0.3.0"
