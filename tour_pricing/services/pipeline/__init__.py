"""Pipeline infrastructure for pricing computations."""

from .base_step import PipelineStep
from .context import PricingContext
from .pipeline import Pipeline

__all__ = [
    "PipelineStep",
    "PricingContext",
    "Pipeline",
]
