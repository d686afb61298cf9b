"""Extension handlers that run as external processes.

:class:`ProcessExtensionHandler` spawns its executable once per request,
writes the encoded :class:`~specfront.models.ExtensionRequest` to the
child's standard input, closes it, and reads standard output until the
child exits.

There is no timeout: a handler that never exits blocks the compilation.
One process instance is never shared between callers.
"""

from __future__ import annotations

import logging
import os
import subprocess
from typing import Optional, Sequence

from specfront.exceptions import ExtensionProtocolError
from specfront.extensions.base import ExtensionHandler
from specfront.extensions.wire import decode_response, encode_request
from specfront.models import ExtensionRequest, ExtensionResponse

logger = logging.getLogger(__name__)

_STDERR_TAIL_LINES = 10


class ProcessExtensionHandler(ExtensionHandler):
    """Delegates vendor extensions to an external executable.

    Args:
        executable: Program name (looked up on ``$PATH``) or path.
        args: Extra command-line arguments passed after the executable.
        name: Handler name for diagnostics. Defaults to the executable's
            base name.
    """

    def __init__(
        self,
        executable: str,
        args: Sequence[str] = (),
        name: Optional[str] = None,
    ) -> None:
        self._executable = executable
        self._args = list(args)
        self._name = name or os.path.basename(executable)

    @property
    def name(self) -> str:
        return self._name

    @property
    def description(self) -> str:
        return f"external process {self._executable}"

    @property
    def command(self) -> list[str]:
        return [self._executable, *self._args]

    def handle(self, request: ExtensionRequest) -> ExtensionResponse:
        """Run the executable with *request* on stdin and decode its stdout.

        Raises:
            ExtensionProtocolError: If the executable cannot be started,
                exits non-zero, or writes an undecodable response.
        """
        logger.debug("running %s for %s", self.command, request.extension_name)
        try:
            result = subprocess.run(
                self.command,
                input=encode_request(request),
                capture_output=True,
            )
        except OSError as exc:
            raise ExtensionProtocolError(
                f"Cannot run extension handler {self._name}: {exc}",
                handler=self._name,
            ) from exc

        if result.returncode != 0:
            stderr = result.stderr.decode("utf-8", errors="replace").strip()
            tail = "\n".join(stderr.splitlines()[-_STDERR_TAIL_LINES:])
            detail = f": {tail}" if tail else ""
            raise ExtensionProtocolError(
                f"Extension handler {self._name} exited with status "
                f"{result.returncode}{detail}",
                handler=self._name,
                returncode=result.returncode,
            )

        try:
            return decode_response(result.stdout)
        except ValueError as exc:
            raise ExtensionProtocolError(
                f"Extension handler {self._name} wrote an invalid response: {exc}",
                handler=self._name,
                returncode=result.returncode,
            ) from exc
