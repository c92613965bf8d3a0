"""Response parsing and the bridge to the output system.

:func:`parse_response` decodes a body in the requested
:class:`~vimeokit.models.ResponseFormat`, :func:`decorate_with_header`
implements header mode, and :func:`format_api_response` renders whatever a
client returned (a test-mode URL, an :class:`ApiResponse`, or a decoded JSON
value) through :mod:`vimeokit.output`.
"""

from __future__ import annotations

import json
import xml.etree.ElementTree as ET
from typing import Any

from pydantic import BaseModel, ConfigDict

from vimeokit.exceptions import ParseError
from vimeokit.models import ResponseFormat
from vimeokit.output import get_output

HEADER_KEY = "_header"


class ApiResponse(BaseModel):
    """Result of a live request made by :class:`~vimeokit.client.builder.Vimeo`.

    ``body`` is an :class:`xml.etree.ElementTree.Element` for XML requests
    and the decoded JSON value for JSON requests. Non-2xx responses are
    returned as well; check :attr:`ok` or ``status``.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    header: str
    body: Any
    status: int

    @property
    def ok(self) -> bool:
        """True when the status code starts with ``2``."""
        return str(self.status).startswith("2")


def parse_response(data: str, fmt: ResponseFormat) -> Any:
    """Decode *data* as *fmt*.

    XML is parsed into an element tree; CDATA sections come back as plain
    element text.

    Raises:
        ParseError: If *data* is not well-formed in the given format. No
            other format is tried.
    """
    if fmt == ResponseFormat.JSON:
        try:
            return json.loads(data)
        except json.JSONDecodeError as exc:
            raise ParseError(f"Response is not valid JSON: {exc}") from exc
    try:
        return ET.fromstring(data)
    except ET.ParseError as exc:
        raise ParseError(f"Response is not valid XML: {exc}") from exc


def decorate_with_header(value: Any, header: str) -> Any:
    """Attach the raw response *header* under ``_header`` when *value* is a dict.

    Lists and scalars have no keyed structure and are returned untouched.
    """
    if isinstance(value, dict):
        value[HEADER_KEY] = header
    return value


def format_api_response(result: Any) -> None:
    """Print a client result using the global output system.

    * ``str`` -- a test-mode URL, printed verbatim to stdout.
    * :class:`ApiResponse` -- status line to stderr, body to stdout.
    * anything else -- a decoded JSON value from the caching client.
    """
    output = get_output()

    if isinstance(result, str):
        output.print_data(result)
        return

    if isinstance(result, ApiResponse):
        output.info(f"HTTP {result.status}")
        body = result.body
        if isinstance(body, ET.Element):
            output.format_response(ET.tostring(body, encoding="unicode"), "application/xml")
        elif body is not None:
            output.format_response(body)
        return

    output.format_response(result)
