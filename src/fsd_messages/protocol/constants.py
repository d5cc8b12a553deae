"""Fixed protocol values shared across message kinds."""

from __future__ import annotations

from typing import Final

from fsd_messages.protocol.primitives import RadioFrequency

# Callsign the server uses as sender or recipient of its own traffic
SERVER_CALLSIGN: Final = "SERVER"

# Recipient of client queries addressed to every aircraft handler
AIRCRAFT_HANDLER_RECIPIENT: Final = "@94835"

# Non-voice channel used for controller-to-controller data (149.999 MHz)
ATC_TEXT_CHANNEL_FREQUENCY: Final = RadioFrequency(149, 999)

# Marker that turns a #TM recipient into a frequency list
FREQUENCY_MARKER: Final = "@"

# Literal that opens every #PC shared state payload
SHARED_STATE_MARKER: Final = "CCP"
