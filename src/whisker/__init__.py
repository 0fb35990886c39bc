"""Whisker — a network diagnostic test double for the Bengal ecosystem.

Serves synthetic payloads of controllable size, echoes WebSocket traffic,
reports host identity, and exposes a health status that can be flipped at
runtime.  Point a load balancer, proxy, or orchestrator at it and watch how
it behaves.

Quick start::

    import whisker

    whisker.serve(port=8080, metrics=True)

Embedding::

    from whisker import WhiskerConfig, create_app

    app = create_app(WhiskerConfig(metrics=True))
    # ``app`` is a plain ASGI callable (HTTP + WebSocket)

Endpoints:

    /           whoami: host info and a dump of the request
    /api        the same as JSON
    /data       synthetic payload (?size=&unit=&attachment=)
    /bench      minimal "1" response
    /echo       WebSocket echo
    /health     GET reads, POST writes the advertised status code

"""

# PEP 703: Declare this module as free-threading safe
_Py_mod_gil = 0

__version__ = "0.1.0-dev"
__all__ = [
    "Services",
    "WhiskerConfig",
    "__version__",
    "create_app",
    "serve",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import whisker`` fast; Chirp and Pounce are only imported when
    an app is actually built.
    """
    if name == "WhiskerConfig":
        from whisker.config import WhiskerConfig

        return WhiskerConfig

    if name == "Services":
        from whisker.app import Services

        return Services

    if name == "create_app":
        from whisker.app import create_app

        return create_app

    if name == "serve":
        from whisker.app import serve

        return serve

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
