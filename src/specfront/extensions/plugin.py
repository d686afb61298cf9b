"""Helpers for writing extension handler executables in Python.

A handler executable reads one request from stdin and writes one response
to stdout. :func:`run_plugin` does the framing so a handler is a single
function::

    #!/usr/bin/env python3
    from specfront.extensions.plugin import run_plugin
    from specfront.models import ExtensionResponse

    def handle(request):
        if request.extension_name != "x-book":
            return ExtensionResponse(handled=False)
        return ExtensionResponse(handled=True, value=request.wrapper.yaml.encode())

    if __name__ == "__main__":
        run_plugin(handle)
"""

from __future__ import annotations

import sys
from typing import BinaryIO, Callable, Optional

from specfront.extensions.wire import decode_request, encode_response
from specfront.models import ExtensionRequest, ExtensionResponse

HandleFunc = Callable[[ExtensionRequest], ExtensionResponse]


def run_plugin(
    handle: HandleFunc,
    stdin: Optional[BinaryIO] = None,
    stdout: Optional[BinaryIO] = None,
) -> int:
    """Serve a single request with *handle*.

    Exceptions raised by *handle* are reported back as response errors
    rather than crashing the process, so the compiler can name the failing
    field.

    Returns:
        The process exit status: 0 when a response was written, 2 when the
        request could not be decoded.
    """
    stdin = stdin or sys.stdin.buffer
    stdout = stdout or sys.stdout.buffer

    try:
        request = decode_request(stdin.read())
    except ValueError as exc:
        sys.stderr.write(f"invalid extension request: {exc}\n")
        return 2

    try:
        response = handle(request)
    except Exception as exc:
        response = ExtensionResponse(handled=False, errors=[f"{type(exc).__name__}: {exc}"])

    stdout.write(encode_response(response))
    stdout.flush()
    return 0
