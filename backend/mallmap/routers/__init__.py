from . import admin, auth, mall, map, upload

__all__ = ["admin", "auth", "mall", "map", "upload"]
