from .api import register_tile_tools

__all__ = ["register_tile_tools"]
