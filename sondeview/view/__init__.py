"""View state and per-diagram plot contexts."""

from sondeview.view.contexts import (
    CloudContext,
    CurvePath,
    HodographContext,
    PlotContext,
    RHOmegaContext,
    SkewTContext,
)
from sondeview.view.state import ViewState

__all__ = [
    "CloudContext",
    "CurvePath",
    "HodographContext",
    "PlotContext",
    "RHOmegaContext",
    "SkewTContext",
    "ViewState",
]
