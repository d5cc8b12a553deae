"""fsd-messages: encode and decode FSD flight simulation network lines."""

from fsd_messages.codec import DecodeResult, decode_line, decode_lines, encode

__version__ = "0.1.0"

__all__ = [
    "DecodeResult",
    "__version__",
    "decode_line",
    "decode_lines",
    "encode",
]
