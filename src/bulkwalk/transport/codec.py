"""Engine codec for protocol data units."""

from __future__ import annotations

from .. import json
from ..protocol.message import Pdu


def encode_pdu(pdu: Pdu) -> bytes:
    """Return the JSON bytes for *pdu*."""

    return json.dumps(pdu.to_dict())


def decode_pdu(payload_bytes: bytes) -> Pdu:
    """Return the :class:`Pdu` encoded in *payload_bytes*.

    Anything that is not a well-formed PDU raises :class:`ValueError`.
    """

    if payload_bytes in (b"", None):
        raise ValueError("empty payload")

    try:
        d = json.loads(payload_bytes)
    except json.DecodeError as exc:
        raise ValueError(f"payload is not valid JSON: {exc}") from exc

    if not isinstance(d, dict):
        raise ValueError("payload is not a JSON object")

    try:
        return Pdu.from_dict(d)
    except (KeyError, TypeError) as exc:
        raise ValueError(f"malformed PDU payload: {exc}") from exc
