from __future__ import annotations

from concurrent.futures import Future
from dataclasses import dataclass, field
import logging
import threading
from typing import TYPE_CHECKING, Any, Callable, Iterable, Literal, Protocol

from .box_model import ResolvedBox
from .errors import ImageLoadError, LinenError, RenderSequenceError, StalledSequenceError
from .style import DEFAULT_Z_INDEX, StyleState

if TYPE_CHECKING:
    from linen_core.render.surface import Surface


LOGGER = logging.getLogger(__name__)

PassStatus = Literal["running", "suspended", "completed", "cancelled"]


@dataclass(frozen=True)
class PendingContent:
    """Returned by a draw step whose content is still loading.

    `finish` receives the future's result and paints it once it arrives.
    """

    future: Future
    finish: Callable[[Any], None]


class SequencedDrawable(Protocol):
    style: StyleState

    def apply_style(self, surface: "Surface") -> None:
        ...

    def resolve_geometry(self, surface: "Surface") -> ResolvedBox:
        ...

    def draw(self, surface: "Surface", geometry: ResolvedBox) -> PendingContent | None:
        ...

    def on_complete(self) -> None:
        ...


@dataclass(frozen=True)
class DrawableFailure:
    index: int
    drawable: Any
    error: BaseException


@dataclass
class _Suspension:
    index: int
    drawable: Any
    pending: PendingContent
    timer: threading.Timer | None = None
    settled: bool = False


@dataclass(eq=False)
class RenderPass:
    """Progress of one `RenderSequencer.render` call.

    The pass doubles as the cancellation token: `cancel()` stops sequencing and
    any late load completion is ignored.
    """

    order: tuple[Any, ...]
    status: PassStatus = "running"
    rendered: list[Any] = field(default_factory=list)
    failures: list[DrawableFailure] = field(default_factory=list)
    _cursor: int = field(default=0, repr=False)
    _suspension: _Suspension | None = field(default=None, repr=False)
    _resumed: bool = field(default=False, repr=False)
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False)
    _done: threading.Event = field(default_factory=threading.Event, repr=False)
    _done_callbacks: list[Callable[["RenderPass"], None]] = field(default_factory=list, repr=False)

    @property
    def done(self) -> bool:
        return self._done.is_set()

    @property
    def remaining(self) -> tuple[Any, ...]:
        with self._lock:
            return self.order[self._cursor :]

    @property
    def waiting_on(self) -> Any:
        with self._lock:
            return None if self._suspension is None else self._suspension.drawable

    def wait(self, timeout: float | None = None) -> bool:
        return self._done.wait(timeout)

    def add_done_callback(self, fn: Callable[["RenderPass"], None]) -> None:
        with self._lock:
            if not self._done.is_set():
                self._done_callbacks.append(fn)
                return
        fn(self)

    def cancel(self) -> bool:
        with self._lock:
            if self._done.is_set():
                return False
            if self._suspension is not None:
                self._suspension.settled = True
                if self._suspension.timer is not None:
                    self._suspension.timer.cancel()
                self._suspension = None
        LOGGER.debug("render pass cancelled with %d drawable(s) unrendered", len(self.remaining))
        self._finish("cancelled")
        return True

    def raise_for_failures(self) -> None:
        if self.failures:
            raise RenderSequenceError(self)

    def _finish(self, status: PassStatus) -> None:
        with self._lock:
            if self._done.is_set():
                return
            self.status = status
            self._done.set()
            callbacks = list(self._done_callbacks)
            self._done_callbacks.clear()
        for fn in callbacks:
            fn(self)


class RenderSequencer:
    """Draws drawables one at a time in stable z-order against one surface.

    A draw step either completes synchronously or returns `PendingContent`; in
    that case the pass suspends until the future settles, then resumes with
    the next drawable on the thread that settled it.
    """

    def __init__(self, *, image_load_timeout_s: float | None = None) -> None:
        if image_load_timeout_s is not None and image_load_timeout_s <= 0:
            raise ValueError("image_load_timeout_s must be > 0 when provided")
        self._timeout_s = image_load_timeout_s

    @property
    def image_load_timeout_s(self) -> float | None:
        return self._timeout_s

    def render(self, surface: "Surface", drawables: Iterable[SequencedDrawable]) -> RenderPass:
        order = tuple(sorted(drawables, key=_z_index))
        render_pass = RenderPass(order=order)
        LOGGER.debug("render pass started with %d drawable(s)", len(order))
        self._run(render_pass, surface)
        return render_pass

    def _run(self, render_pass: RenderPass, surface: "Surface") -> None:
        while True:
            with render_pass._lock:
                if render_pass.done:
                    return
                if render_pass._cursor >= len(render_pass.order):
                    break
                index = render_pass._cursor
                drawable = render_pass.order[index]
            pending = self._start_step(render_pass, surface, index, drawable)
            if pending is None:
                continue
            if pending.future.done():
                self._settle(render_pass, index, drawable, pending)
                continue
            self._suspend(render_pass, surface, index, drawable, pending)
            return
        LOGGER.debug(
            "render pass completed: %d rendered, %d failed",
            len(render_pass.rendered),
            len(render_pass.failures),
        )
        render_pass._finish("completed")

    def _start_step(
        self,
        render_pass: RenderPass,
        surface: "Surface",
        index: int,
        drawable: SequencedDrawable,
    ) -> PendingContent | None:
        try:
            drawable.apply_style(surface)
            geometry = drawable.resolve_geometry(surface)
            pending = drawable.draw(surface, geometry)
        except _isolated(render_pass) as exc:
            self._fail(render_pass, index, drawable, exc)
            return None
        if pending is None:
            self._complete(render_pass, index, drawable)
        return pending

    def _suspend(
        self,
        render_pass: RenderPass,
        surface: "Surface",
        index: int,
        drawable: SequencedDrawable,
        pending: PendingContent,
    ) -> None:
        suspension = _Suspension(index=index, drawable=drawable, pending=pending)
        with render_pass._lock:
            render_pass._suspension = suspension
            render_pass.status = "suspended"
            if self._timeout_s is not None:
                suspension.timer = threading.Timer(
                    self._timeout_s,
                    self._on_timeout,
                    args=(render_pass, surface, suspension),
                )
                suspension.timer.daemon = True
                suspension.timer.start()
        LOGGER.debug("render pass suspended on drawable #%d (%s)", index, type(drawable).__name__)
        pending.future.add_done_callback(lambda _future: self._on_loaded(render_pass, surface, suspension))

    def _claim(self, render_pass: RenderPass, suspension: _Suspension) -> bool:
        with render_pass._lock:
            if suspension.settled or render_pass.done:
                return False
            suspension.settled = True
            if suspension.timer is not None:
                suspension.timer.cancel()
            render_pass._suspension = None
            render_pass._resumed = True
            render_pass.status = "running"
            return True

    def _on_loaded(self, render_pass: RenderPass, surface: "Surface", suspension: _Suspension) -> None:
        if not self._claim(render_pass, suspension):
            return
        self._settle(render_pass, suspension.index, suspension.drawable, suspension.pending)
        self._run(render_pass, surface)

    def _on_timeout(self, render_pass: RenderPass, surface: "Surface", suspension: _Suspension) -> None:
        if not self._claim(render_pass, suspension):
            return
        error = StalledSequenceError(
            f"drawable #{suspension.index} did not finish loading within {self._timeout_s}s"
        )
        self._fail(render_pass, suspension.index, suspension.drawable, error)
        self._run(render_pass, surface)

    def _settle(
        self,
        render_pass: RenderPass,
        index: int,
        drawable: SequencedDrawable,
        pending: PendingContent,
    ) -> None:
        future = pending.future
        if future.cancelled():
            self._fail(render_pass, index, drawable, ImageLoadError("content load was cancelled"))
            return
        exc = future.exception()
        if exc is not None:
            if not isinstance(exc, ImageLoadError):
                wrapped = ImageLoadError(f"content load failed: {exc}")
                wrapped.__cause__ = exc
                exc = wrapped
            self._fail(render_pass, index, drawable, exc)
            return
        try:
            pending.finish(future.result())
        except _isolated(render_pass) as err:
            self._fail(render_pass, index, drawable, err)
            return
        self._complete(render_pass, index, drawable)

    def _complete(self, render_pass: RenderPass, index: int, drawable: SequencedDrawable) -> None:
        try:
            drawable.on_complete()
        except _isolated(render_pass) as exc:
            self._fail(render_pass, index, drawable, exc)
            return
        with render_pass._lock:
            render_pass.rendered.append(drawable)
            render_pass._cursor = index + 1

    def _fail(self, render_pass: RenderPass, index: int, drawable: Any, error: BaseException) -> None:
        LOGGER.warning(
            "drawable #%d (%s) failed to render: %s",
            index,
            type(drawable).__name__,
            error,
            exc_info=error,
        )
        with render_pass._lock:
            render_pass.failures.append(DrawableFailure(index=index, drawable=drawable, error=error))
            render_pass._cursor = index + 1


def _isolated(render_pass: RenderPass) -> tuple[type[Exception], ...]:
    # After a resume there is no caller to raise into, so every error is recorded.
    if render_pass._resumed:
        return (Exception,)
    return (LinenError, ValueError)


def _z_index(drawable: SequencedDrawable) -> float:
    style = getattr(drawable, "style", None)
    return getattr(style, "z_index", DEFAULT_Z_INDEX)
