"""Pipeline context for sharing data between pricing steps."""

import uuid
from datetime import datetime, timezone
from typing import Any, Optional

from tour_pricing.errors import PricingError
from tour_pricing.models.catalog import PriceCatalogEntry
from tour_pricing.models.result import (
    DaySummary,
    PeriodSummary,
    PricedLineItem,
    PricingResult,
    RateFailure,
)


class PricingContext:
    """Context object for passing data between pricing steps.

    A fresh context is created for every computation and accumulates
    intermediate results as the pipeline progresses.
    """

    def __init__(self, markup_percent: Any = None, computation_id: Optional[str] = None):
        """Initialize pricing context.

        Args:
            markup_percent: Optional markup percentage for the final total
            computation_id: Id bound to log events, generated when omitted
        """
        self.computation_id = computation_id or uuid.uuid4().hex[:12]
        self.start_time = datetime.now(timezone.utc)
        self.markup_percent = markup_percent

        # Template mode inputs
        self.entries: list[Any] = []
        self.criteria: Any = None
        self.selection: Any = None
        self.matched_entry: Optional[PriceCatalogEntry] = None

        # Raw mode inputs
        self.days: list[Any] = []
        self.rate_lookup: Any = None

        # Intermediate results
        self.line_items: list[PricedLineItem] = []
        self.failures: list[RateFailure] = []
        self.day_summaries: list[DaySummary] = []
        self.template_items: list[PricedLineItem] = []
        self.period_breakdown: list[PeriodSummary] = []

        # Final result
        self.result: Optional[PricingResult] = None

        # Errors that stopped the computation
        self.errors: list[dict[str, Any]] = []
        self.step_timings: dict[str, float] = {}

        self.success: bool = False

    def add_error(self, step_name: str, error: PricingError) -> None:
        """Record an error raised by a step.

        Args:
            step_name: Name of the step where the error occurred
            error: The exception raised
        """
        self.errors.append({
            "step": step_name,
            "error": error,
            "message": str(error),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        })

    def has_errors(self) -> bool:
        """Check if any errors were encountered."""
        return len(self.errors) > 0

    def raise_for_errors(self) -> None:
        """Re-raise the first recorded error.

        Raises:
            PricingError: The error that stopped the pipeline
        """
        if self.errors:
            raise self.errors[0]["error"]

    def get_stats(self) -> dict[str, Any]:
        """Summarize the computation for logging."""
        duration = (datetime.now(timezone.utc) - self.start_time).total_seconds()
        return {
            "computation_id": self.computation_id,
            "success": self.success,
            "duration_seconds": duration,
            "line_items": len(self.line_items),
            "failures": len(self.failures),
            "errors": [error["message"] for error in self.errors],
            "steps": list(self.step_timings),
        }
