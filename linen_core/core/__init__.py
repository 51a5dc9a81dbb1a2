from .box_model import Anchor, BoxModel, HorizontalAnchor, ResolvedBox, VerticalAnchor
from .config import LinenConfig, config_from_mapping, load_config
from .errors import (
    ConfigurationError,
    ImageLoadError,
    LinenError,
    MalformedDimensionError,
    RenderSequenceError,
    StalledSequenceError,
)
from .loader import ImageLoader, ImageSource, ManualImageLoader, ThreadedImageLoader
from .sequencer import (
    DrawableFailure,
    PassStatus,
    PendingContent,
    RenderPass,
    RenderSequencer,
    SequencedDrawable,
)
from .style import DEFAULT_Z_INDEX, FontDescriptor, StyleState
from .units import DimensionValue, UnitResolver, resolve_dimension, round_half_up

__all__ = [
    "Anchor",
    "BoxModel",
    "ConfigurationError",
    "DEFAULT_Z_INDEX",
    "DimensionValue",
    "DrawableFailure",
    "FontDescriptor",
    "HorizontalAnchor",
    "ImageLoadError",
    "ImageLoader",
    "ImageSource",
    "LinenConfig",
    "LinenError",
    "MalformedDimensionError",
    "ManualImageLoader",
    "PassStatus",
    "PendingContent",
    "RenderPass",
    "RenderSequenceError",
    "RenderSequencer",
    "ResolvedBox",
    "SequencedDrawable",
    "StalledSequenceError",
    "StyleState",
    "ThreadedImageLoader",
    "UnitResolver",
    "VerticalAnchor",
    "config_from_mapping",
    "load_config",
    "resolve_dimension",
    "round_half_up",
]
