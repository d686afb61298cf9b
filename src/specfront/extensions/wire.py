"""Binary encoding of extension wire messages.

Requests and responses are msgpack maps whose keys are the field names of
:class:`~specfront.models.ExtensionRequest` and
:class:`~specfront.models.ExtensionResponse`; the opaque ``value`` is a
msgpack binary. A message is the whole of a stream: the compiler writes one
request to the handler's stdin and closes it, the handler writes one
response to stdout and exits.
"""

from __future__ import annotations

from typing import Any

import msgpack
from msgpack.exceptions import UnpackException
from pydantic import BaseModel

from specfront.models import ExtensionRequest, ExtensionResponse


def encode_request(request: ExtensionRequest) -> bytes:
    return _pack(request)


def decode_request(data: bytes) -> ExtensionRequest:
    """Decode a request.

    Raises:
        ValueError: If *data* is not a well-formed request.
    """
    return ExtensionRequest.model_validate(_unpack(data))


def encode_response(response: ExtensionResponse) -> bytes:
    return _pack(response)


def decode_response(data: bytes) -> ExtensionResponse:
    """Decode a response.

    Raises:
        ValueError: If *data* is not a well-formed response.
    """
    return ExtensionResponse.model_validate(_unpack(data))


def _pack(message: BaseModel) -> bytes:
    return msgpack.packb(message.model_dump(), use_bin_type=True)


def _unpack(data: bytes) -> Any:
    try:
        payload = msgpack.unpackb(data, raw=False)
    except (UnpackException, ValueError, TypeError) as exc:
        raise ValueError(f"undecodable message ({len(data)} bytes): {exc}") from exc
    if not isinstance(payload, dict):
        raise ValueError(f"expected a map, got {type(payload).__name__}")
    return payload
