"""ZMQ multipart framing for protocol data units.

Request/Response (DEALER<->ROUTER)
    (optional routing prefix...), version, id, payload_json
"""

from __future__ import annotations

from typing import Sequence, Tuple

from ...protocol.message import Pdu
from ..codec import decode_pdu, encode_pdu


# This is the version of the on-the-wire framing implemented here,
# identified by a single byte.

PROTOCOL_VERSION = b"a"


class VersionMismatch(ValueError):
    """A frame sequence used a different framing version.

    The request id is still recoverable, so the sender of the request can
    be told.
    """

    def __init__(self, msg_id: int, theirs: bytes):
        self.id = msg_id
        ValueError.__init__(
            self, f"message is protocol version {theirs!r}, recipient expects {PROTOCOL_VERSION!r}"
        )


def _id_bytes(msg_id: int) -> bytes:
    return b"%08x" % (msg_id,)


def to_frames(pdu: Pdu, prefix: Tuple[bytes, ...] = ()) -> Tuple[bytes, ...]:
    """Encode a :class:`Pdu` to multipart frames, after any routing *prefix*."""

    return tuple(prefix) + (PROTOCOL_VERSION, _id_bytes(pdu.id), encode_pdu(pdu))


def from_frames(parts: Sequence[bytes]) -> Tuple[Tuple[bytes, ...], Pdu]:
    """Decode ROUTER/DEALER parts into (routing prefix, :class:`Pdu`).

    ROUTER sockets prepend an identity frame. We expect either:
        [version, id, payload]
    or
        [ident, version, id, payload]
    """

    if not parts:
        raise ValueError("empty message")

    if len(parts) == 3:
        prefix: Tuple[bytes, ...] = ()
        start = 0
    elif len(parts) == 4:
        prefix = (parts[0],)
        start = 1
    else:
        raise ValueError(f"unexpected frame count: {len(parts)}")

    try:
        msg_id = int(parts[start + 1], 16)
    except ValueError as exc:
        raise ValueError(f"invalid request id: {parts[start + 1]!r}") from exc

    their_version = parts[start]
    if their_version != PROTOCOL_VERSION:
        raise VersionMismatch(msg_id, their_version)

    pdu = decode_pdu(parts[start + 2])
    if pdu.id != msg_id:
        raise ValueError(f"frame id {msg_id} does not match payload id {pdu.id}")

    return prefix, pdu
