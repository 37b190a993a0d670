"""
Step sequencer for the claim workflows.

A workflow is a fixed list of named steps run one after another. The
sequencer threads nothing itself: each step's inputs are passed explicitly by
the workflow. What it does is log each step, keep the list of completed
steps, and on the first failure stamp the error with the failing step and the
steps already done before letting it propagate. Nothing is retried and
nothing already done upstream is undone.
"""
import inspect
from typing import Any, Callable, List

from claim_orch.core.logging import get_logger
from claim_orch.services.upstream.errors import OrchestrationError

logger = get_logger(__name__)


class WorkflowRun:
    """One invocation of a workflow."""

    def __init__(self, workflow: str, correlation_id: str):
        self.workflow = workflow
        self.correlation_id = correlation_id
        self.completed_steps: List[str] = []

    @property
    def tag(self) -> str:
        return f"[{self.workflow}:{self.correlation_id}]"

    async def step(self, name: str, action: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        """
        Run one step.

        Args:
            name: Step name used in logs and errors
            action: Coroutine function or plain function implementing the step
            *args, **kwargs: Passed to ``action``

        Returns:
            Whatever the step returns

        Raises:
            OrchestrationError: The step's error, with ``step`` and
                ``completed_steps`` filled in
        """
        index = len(self.completed_steps) + 1
        logger.info(f"{self.tag} step {index}: {name}")

        try:
            result = action(*args, **kwargs)
            if inspect.isawaitable(result):
                result = await result
        except OrchestrationError as exc:
            if exc.step is None:
                exc.step = name
            exc.completed_steps = list(self.completed_steps)
            logger.error(
                f"{self.tag} step {index} {name} failed ({exc.code}): {exc.message}. "
                f"Completed steps: {self.completed_steps or 'none'}"
            )
            raise
        except Exception:
            logger.exception(
                f"{self.tag} step {index} {name} failed unexpectedly. "
                f"Completed steps: {self.completed_steps or 'none'}"
            )
            raise

        self.completed_steps.append(name)
        return result

    def finish(self) -> None:
        logger.info(f"{self.tag} completed {len(self.completed_steps)} steps")
