"""vimeokit -- a small client for the Vimeo Simple API.

Requests are described by chaining namespace segments onto a builder and
finishing with a method call::

    from vimeokit import Vimeo

    api = Vimeo()
    response = api.access_namespace("videos").invoke("search", {"query": "cats"})

:class:`VimeoCache` requests JSON and can keep successful responses on disk
for a configurable TTL.

Modules:
    client: Path builders, the caching variant, transport and parsing.
    cache: File-per-URL response cache with TTL expiry.
    models: Pydantic configuration models.
    config: XDG-aware configuration loading and precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    output: stdout/stderr formatting system with Rich support.
    app: Typer CLI entry point.
"""

__version__ = "1.0.0"

from vimeokit.client import ApiResponse, Vimeo, VimeoCache  # noqa: E402

__all__ = ["ApiResponse", "Vimeo", "VimeoCache", "__version__"]
