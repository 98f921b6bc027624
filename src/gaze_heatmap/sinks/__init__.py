from .base import RenderSurface
from .zmq import ZMQRenderSurface, encode_frame, decode_frame
from .parquet import SnapshotWriter

__all__ = ["RenderSurface", "ZMQRenderSurface", "encode_frame", "decode_frame", "SnapshotWriter"]
