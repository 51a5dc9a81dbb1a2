from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .sequencer import RenderPass


class LinenError(Exception):
    """Base class for errors raised by the layout and render layer."""


class ConfigurationError(LinenError, ValueError):
    """Unknown drawable variant or invalid configuration value."""


class MalformedDimensionError(LinenError, ValueError):
    """A dimension value could not be parsed into a pixel magnitude."""

    def __init__(self, value: object, axis: str = "") -> None:
        self.value = value
        self.axis = axis
        where = f" for axis `{axis}`" if axis else ""
        super().__init__(f"malformed dimension value{where}: {value!r}")


class StalledSequenceError(LinenError, TimeoutError):
    """Asynchronous content did not arrive before the configured timeout."""


class ImageLoadError(LinenError):
    """The image loader reported a failure."""


class RenderSequenceError(LinenError):
    """One or more drawables failed during a render pass."""

    def __init__(self, render_pass: "RenderPass") -> None:
        self.render_pass = render_pass
        self.failures = tuple(render_pass.failures)
        summary = "; ".join(f"#{f.index} {type(f.drawable).__name__}: {f.error}" for f in self.failures)
        super().__init__(f"{len(self.failures)} drawable(s) failed to render: {summary}")
