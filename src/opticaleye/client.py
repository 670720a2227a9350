"""High-level client for reading meter variables through an optical eye.

One exchange is strictly sequential: build and stuff the request, write it,
read the stuffed response under a deadline, de-stuff it and decode it.

Usage:
    async with OpticalEyeTransport("/dev/ttyUSB0") as transport:
        client = OpticalEyeClient(transport)
        response = await client.read_variable(client.resolve("Serial number"))
        print(response.value)
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator

from .exceptions import OpticalEyeProtocolError, OpticalEyeTimeoutError, UnknownVariableError
from .log import get_logger
from .protocol.reader import DEFAULT_RESPONSE_TIMEOUT, read_response
from .protocol.request import encode_request
from .protocol.response import Response
from .protocol.stuffing import destuff
from .registry import DEFAULT_REGISTRY, VariableRegistry
from .transport import OpticalEyeTransport

logger = get_logger(__name__)

# IEC 1107 sign-on request: start, request command, end, CR LF
IEC1107_SIGN_ON = b"/?!\r\n"

LINE_END = 0x0A  # Identification lines end with CR LF


class OpticalEyeClient:
    """Reads variables from a meter over an open transport.

    Attributes:
        transport: The byte channel, opened by the caller
        registry: Variable registry used to resolve names
        timeout: Deadline in seconds for each response phase
    """

    transport: OpticalEyeTransport
    registry: VariableRegistry
    timeout: float

    def __init__(
        self,
        transport: OpticalEyeTransport,
        registry: VariableRegistry = DEFAULT_REGISTRY,
        timeout: float = DEFAULT_RESPONSE_TIMEOUT,
    ) -> None:
        self.transport = transport
        self.registry = registry
        self.timeout = timeout

    def resolve(self, variable: str | int) -> int:
        """Turn a variable id or a partial variable name into an id.

        Numeric strings are taken as ids. Other strings are looked up with
        VariableRegistry.id_of_partial, so the last matching entry wins.

        Raises:
            UnknownVariableError: If no registry entry matches the name
        """
        if isinstance(variable, int):
            return variable

        text = variable.strip()
        if text.isdecimal():
            return int(text)

        variable_id = self.registry.id_of_partial(text)
        if variable_id is None:
            raise UnknownVariableError(variable)

        return variable_id

    async def read_variable(self, variable_id: int) -> Response:
        """Run one read variable exchange.

        Raises:
            ValueError: If variable_id does not fit in 16 bits
            OpticalEyeConnectionError: If the transport fails
            OpticalEyeTimeoutError: If the meter does not answer
            FrameStructureError: If the response does not match the request
            UnknownUnitError: If the response carries an unknown unit code
        """
        request = encode_request(variable_id)

        logger.debug("request_sent", variable_id=variable_id, frame=request.hex(" "))

        await self.transport.write(request)

        stuffed = await read_response(self.transport, self.timeout)
        frame = destuff(stuffed)

        logger.debug("response_received", variable_id=variable_id, frame=frame.hex(" "))

        return Response(frame, variable_id)

    async def poll(self, variable_id: int, interval: float, count: int | None = None) -> AsyncIterator[Response]:
        """Read a variable repeatedly, pausing interval seconds between reads.

        Reads that time out or return a malformed frame are logged and
        skipped. Runs forever unless count limits the number of reads.
        """
        iteration = 0

        while count is None or iteration < count:
            if iteration:
                await asyncio.sleep(interval)
            iteration += 1

            try:
                response = await self.read_variable(variable_id)
            except OpticalEyeTimeoutError:
                logger.info("poll_no_response", variable_id=variable_id, iteration=iteration)
                continue
            except OpticalEyeProtocolError as e:
                logger.warning(
                    "poll_protocol_error",
                    variable_id=variable_id,
                    iteration=iteration,
                    error=str(e),
                    frame=e.frame.hex(" "),
                )
                continue

            yield response

    async def identify(self, lines: int = 10) -> list[bytes]:
        """Send the IEC 1107 sign-on and collect identification lines.

        The transport must be open in SerialMode.MODE_7E1. Lines end with LF
        and are returned as received. Reading stops after lines lines, or once
        the meter stays silent for the timeout; an unfinished line is included.

        Raises:
            OpticalEyeTimeoutError: If the meter does not answer at all
        """
        await self.transport.write(IEC1107_SIGN_ON)

        received: list[bytes] = []
        line = bytearray()

        while len(received) < lines:
            data = await self.transport.read(1, self.timeout)

            if not data:
                break

            line += data
            if data[0] == LINE_END:
                received.append(bytes(line))
                line.clear()

        if line:
            received.append(bytes(line))

        if not received:
            raise OpticalEyeTimeoutError(f"No identification within {self.timeout:.1f} s")

        logger.debug("identification_received", lines=len(received))

        return received
