from .codec import (
    encode_varint as encode_varint,
    read_string as read_string,
    read_uint16 as read_uint16,
    read_varint as read_varint,
    write_string as write_string,
    write_uint16 as write_uint16,
    write_varint as write_varint,
    INT32_MAX,
    UINT16_MAX,
    VARINT_MAX_BYTES,
)
from .handshake import (
    HandshakeRecord as HandshakeRecord,
    NextState as NextState,
    encode_handshake as encode_handshake,
    read_handshake as read_handshake,
    HANDSHAKE_PACKET_ID,
    LEGACY_PING_FRAME_LENGTH,
)
