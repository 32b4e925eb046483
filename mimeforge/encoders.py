from mimeforge._internal._encoders import (
    ENCODER_TYPES,
    Encoder,
    EncoderProtocol,
    json_encode,
    json_encode_default,
    register_encoder,
)

__all__ = [
    "ENCODER_TYPES",
    "register_encoder",
    "Encoder",
    "EncoderProtocol",
    "json_encode",
    "json_encode_default",
]
