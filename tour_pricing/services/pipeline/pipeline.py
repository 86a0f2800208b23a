"""Pipeline executor for pricing steps."""

from structlog import get_logger

from .base_step import PipelineStep
from .context import PricingContext

logger = get_logger(__name__)


class Pipeline:
    """Pipeline for executing a sequence of pricing steps.

    The pipeline:
    1. Executes steps in order
    2. Passes context between steps
    3. Stops at the first failed required step
    4. Marks the context successful when no step recorded an error
    """

    def __init__(self, name: str, steps: list[PipelineStep]):
        """Initialize the pipeline.

        Args:
            name: Pipeline name for logging
            steps: List of pipeline steps to execute in order
        """
        self.name = name
        self.steps = steps
        self.logger = logger.bind(pipeline=name)

    async def execute(self, context: PricingContext) -> PricingContext:
        """Execute the pipeline, awaiting asynchronous steps.

        Args:
            context: Pricing context

        Returns:
            Updated context with results
        """
        self._starting(context)

        for step in self.steps:
            success = await step.run(context)
            if self._should_stop(context, step, success):
                break

        return self._completed(context)

    def execute_sync(self, context: PricingContext) -> PricingContext:
        """Execute a pipeline made only of synchronous steps.

        Usable from inside a running event loop since no loop is needed.

        Raises:
            TypeError: If a step is asynchronous
        """
        self._starting(context)

        for step in self.steps:
            success = step.run_sync(context)
            if self._should_stop(context, step, success):
                break

        return self._completed(context)

    def _starting(self, context: PricingContext) -> None:
        self.logger.debug(
            "Pipeline starting",
            computation_id=context.computation_id,
            step_count=len(self.steps),
        )

    def _should_stop(self, context: PricingContext, step: PipelineStep, success: bool) -> bool:
        if success:
            return False
        if step.is_required():
            self.logger.warning(
                "Required step failed, stopping pipeline",
                computation_id=context.computation_id,
                step=step.get_name(),
            )
            return True
        self.logger.warning(
            "Optional step failed, continuing pipeline",
            computation_id=context.computation_id,
            step=step.get_name(),
        )
        return False

    def _completed(self, context: PricingContext) -> PricingContext:
        context.success = not context.has_errors()

        self.logger.info(
            "Pipeline completed",
            **context.get_stats(),
        )

        return context

    def get_step_names(self) -> list[str]:
        """Get list of all step names in the pipeline."""
        return [step.get_name() for step in self.steps]
