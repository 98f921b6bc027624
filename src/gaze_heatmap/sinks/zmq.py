import logging
import struct
from typing import Final, Optional

import zmq
import zmq.asyncio

from .base import RenderSurface
from ..models import RenderFrame

logger = logging.getLogger(__name__)

# ! = Network (Big Endian)
# d = float64 (max)
# I = uint32  (point count)
_HEADER: Final[struct.Struct] = struct.Struct("!dI")
# f = float32 (x, y, value)
_POINT: Final[struct.Struct] = struct.Struct("!fff")


def encode_frame(frame: RenderFrame) -> bytes:
    """
    Packs a frame as header + points.

    Wire Format (12 + 12 * n bytes):
    - Max: float64 (8 bytes)
    - Count: uint32 (4 bytes)
    - n x [X: float32, Y: float32, Value: float32]
    """
    parts = [_HEADER.pack(frame.max, len(frame.data))]
    parts.extend(_POINT.pack(p.x, p.y, p.value) for p in frame.data)
    return b"".join(parts)


def decode_frame(payload: bytes) -> tuple[float, list[tuple[float, float, float]]]:
    """Inverse of `encode_frame`, for subscribers written in Python."""
    max_value, count = _HEADER.unpack_from(payload, 0)
    points = [
        _POINT.unpack_from(payload, _HEADER.size + i * _POINT.size)
        for i in range(count)
    ]
    return max_value, points


class ZMQRenderSurface(RenderSurface):
    """
    Publishes heatmap frames over ZMQ PUB/SUB for an external painter.

    Every repaint sends the latest frame as one message: topic `heat`
    (4 bytes) followed by the `encode_frame` payload.
    """

    _TOPIC: Final[bytes] = b"heat"

    def __init__(self, host: str = "tcp://*:5556", send_hwm: int = 200):
        """
        Args:
            host: The ZMQ binding address.
            send_hwm: Frames buffered for slow subscribers before dropping.
        """
        self.host = host
        self._frame: Optional[RenderFrame] = None
        self.frames_sent = 0

        # Async ZMQ setup
        self._ctx = zmq.asyncio.Context()
        self._sock = self._ctx.socket(zmq.PUB)

        # Set High Water Mark to prevent memory bloating if subscribers are slow
        self._sock.setsockopt(zmq.SNDHWM, send_hwm)

    async def start(self) -> None:
        """Bind the publisher socket."""
        try:
            self._sock.bind(self.host)
            logger.info(f"ZMQRenderSurface bound to {self.host}")
        except Exception as e:
            logger.error(f"Failed to bind ZMQRenderSurface to {self.host}: {e}")
            raise e

    async def set_data(self, frame: RenderFrame) -> None:
        self._frame = frame

    async def repaint(self) -> None:
        """
        Broadcasts the current frame.
        This is a non-blocking operation (ZMQ hands off to internal buffer).
        """
        if self._frame is None:
            return
        try:
            await self._sock.send(self._TOPIC + encode_frame(self._frame))
            self.frames_sent += 1
        except Exception as e:
            # Network errors must never stall the render loop.
            logger.error(f"ZMQ frame broadcast failed: {e}")

    async def close(self) -> None:
        """Shut down the ZMQ context."""
        logger.info("Closing ZMQRenderSurface after %d frames...", self.frames_sent)
        # Close immediately, don't wait for unsent messages
        self._sock.close(linger=0)
        self._ctx.term()
