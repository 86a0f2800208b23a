"""Base class for pricing pipeline steps."""

import inspect
import time
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Awaitable, Union

from structlog import get_logger

from tour_pricing.errors import PricingError

if TYPE_CHECKING:
    from .context import PricingContext

logger = get_logger(__name__)


class PipelineStep(ABC):
    """One stage of a pricing computation.

    A step reads its inputs from the PricingContext, writes its output back
    and returns True when the pipeline may continue. Steps that do no I/O
    implement ``execute`` as a plain method so they can also run without an
    event loop; steps that await a collaborator implement it as a coroutine.
    """

    def __init__(self, name: str | None = None):
        """Initialize the pipeline step.

        Args:
            name: Step name used in logs and error records. Defaults to class name.
        """
        self.name = name or self.__class__.__name__
        self.logger = logger.bind(step=self.name)

    @abstractmethod
    def execute(self, context: "PricingContext") -> Union[bool, Awaitable[bool]]:
        """Do the step's work.

        Raises:
            PricingError: When the computation cannot continue
        """

    async def run(self, context: "PricingContext") -> bool:
        """Execute the step, recording pricing errors on the context.

        Exceptions that are not PricingError propagate unchanged.

        Returns:
            True if step succeeded, False if failed
        """
        started = time.perf_counter()
        try:
            success = self.execute(context)
            if inspect.isawaitable(success):
                success = await success
        except PricingError as e:
            return self._record_error(context, e)
        finally:
            context.step_timings[self.name] = time.perf_counter() - started

        return self._finished(context, success)

    def run_sync(self, context: "PricingContext") -> bool:
        """Execute a synchronous step outside any event loop.

        Raises:
            TypeError: If the step's execute is a coroutine
        """
        started = time.perf_counter()
        try:
            success = self.execute(context)
            if inspect.isawaitable(success):
                success.close()
                raise TypeError(f"Step {self.name} is asynchronous and cannot run synchronously")
        except PricingError as e:
            return self._record_error(context, e)
        finally:
            context.step_timings[self.name] = time.perf_counter() - started

        return self._finished(context, success)

    def _record_error(self, context: "PricingContext", error: PricingError) -> bool:
        self.logger.warning(
            "Step failed with pricing error",
            computation_id=context.computation_id,
            kind=error.kind.value,
            error=str(error),
        )
        context.add_error(self.name, error)
        return False

    def _finished(self, context: "PricingContext", success: bool) -> bool:
        self.logger.debug(
            "Step finished",
            computation_id=context.computation_id,
            success=success,
            duration_ms=round(context.step_timings[self.name] * 1000, 3),
        )
        return success

    def is_required(self) -> bool:
        """Whether a failure of this step stops the pipeline."""
        return True

    def get_name(self) -> str:
        return self.name
