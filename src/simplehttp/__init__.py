"""
=============================================================================
SIMPLEHTTP - A Minimal HTTP/1.0 File Server Built From Scratch
=============================================================================

Raw sockets, one thread per connection, one request per connection.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                      SIMPLEHTTP ARCHITECTURE                         │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   __main__.py     CLI: --port, --root, --host, --log-level          │
    │        │                                                             │
    │        ▼                                                             │
    │   config.py       ServerConfig (frozen, shared by all workers)      │
    │        │                                                             │
    │        ▼                                                             │
    │   server.py       HTTPServer: accept → worker thread → respond      │
    │        │                                                             │
    │        ├──► core/          SocketServer, Connection                  │
    │        ├──► http/          RequestParser, HTTPResponse,              │
    │        │                   HTTPStatus, HTTPError                     │
    │        └──► handlers/      StaticFileHandler (GET, HEAD; POST=501)   │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

QUICK START

    python -m simplehttp --port 8080 --root ./public

    from simplehttp import HTTPServer, ServerConfig

    server = HTTPServer(ServerConfig(port=8080, root=Path("public")))
    server.run()

=============================================================================
"""

__version__ = "0.1.0"

from .server import HTTPServer, create_app
from .config import ServerConfig

__all__ = ["HTTPServer", "ServerConfig", "create_app", "__version__"]
