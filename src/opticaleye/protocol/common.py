"""Common types and constants shared across protocol components.

This module contains the frame tokens and fixed field values used by both
request and response frames.
"""

from enum import IntEnum

# =============================================================================
# Frame Tokens
# =============================================================================

FRAME_END = 0x0D  # End of frame token (carriage return), requests and responses

ESCAPE = 0x1B  # Escape marker, followed by the complemented reserved byte

METER_ADDRESS = 0x3F  # Address of the receiver unit in the meter

READ_VARIABLE_COMMAND = (0x10, 0x01)  # Command bytes of a read variable request

READ_VARIABLE_RESPONSE = 0x10  # Response type of a read variable response


class CommunicationDirection(IntEnum):
    """Represents the direction of a frame, valued by its start token.

    - MASTER_TO_SLAVE: Request frames sent to the meter
    - SLAVE_TO_MASTER: Response frames sent by the meter
    """

    MASTER_TO_SLAVE = 0x80
    SLAVE_TO_MASTER = 0x40

    @property
    def start_token(self) -> int:
        """Start of frame token for this direction."""
        return int(self.value)
