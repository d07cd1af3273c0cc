"""
=============================================================================
HANDLERS MODULE
=============================================================================

The route handlers, and the function that wires them into a Router.

    ┌─────────────────────────────────────────────────────────────────────┐
    │ Route             │ Handler        │ Kind                           │
    ├─────────────────────────────────────────────────────────────────────┤
    │ /                 │ index          │ exact                          │
    │ /echo/{value}     │ echo           │ prefix                         │
    │ /user-agent       │ user_agent     │ prefix                         │
    │ /files/{name}     │ FilesHandler   │ prefix (GET, POST)             │
    │ anything else     │ 404            │ router default                 │
    └─────────────────────────────────────────────────────────────────────┘

Function handlers are stateless. FilesHandler is a class because it holds
the FileStore it reads from and writes to.

=============================================================================
"""

from ..http.router import Router
from ..store import FileStore
from .base import index, path_segment
from .echo import echo
from .files import FilesHandler
from .user_agent import user_agent


def build_router(store: FileStore) -> Router:
    """
    Router with every built-in route registered, in priority order.

    Args:
        store: Backing store for /files/.
    """
    router = Router()
    router.exact("/", index)
    router.prefix("/echo/", echo)
    router.prefix("/user-agent", user_agent)
    router.prefix("/files/", FilesHandler(store), name="files")
    return router


__all__ = [
    "build_router",
    "index",
    "echo",
    "user_agent",
    "FilesHandler",
    "path_segment",
]
