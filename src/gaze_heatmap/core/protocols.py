from typing import Protocol, runtime_checkable

@runtime_checkable
class ViewportProvider(Protocol):
    """
    Supplies the viewport size in pixels at analysis time.
    Whether it comes from config, a monitor query, or a browser, it must support this call.
    """
    def size(self) -> tuple[int, int]: ...
