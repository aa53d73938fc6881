"""
Codec pipelines seeded by a definition's create().

A pipeline is an ordered list of steps. execute() feeds the input through
each step in turn; the first step that raises stops the run and the failure
is reported as a value instead of an exception.

Invariants:
    - Pipelines are immutable; pipe() returns a new pipeline
    - Step 0 is always the seeding definition's create()
    - Step indices in failures are zero-based

Example:
    >>> codec = create_codec(User).pipe(lambda user: user["name"].upper())
    >>> codec.execute({"name": "Alice"}).unwrap()
    'ALICE'
    >>> result = codec.execute({"name": 42})
    >>> result.success, result.step
    (False, 0)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Tuple, Union

from .errors import CodecStepFailedError
from .types import Definition

logger = logging.getLogger(__name__)

CodecStep = Callable[[Any], Any]


@dataclass(frozen=True)
class CodecSuccess:
    """Output of a pipeline run where every step succeeded."""

    value: Any
    success: bool = True

    def unwrap(self) -> Any:
        return self.value


@dataclass(frozen=True)
class CodecFailure:
    """Output of a pipeline run that stopped at a failing step.

    Attributes:
        message: Message of the exception the step raised
        step: Zero-based index of the failing step
        input: The original pipeline input
    """

    message: str
    step: int
    input: Any
    success: bool = False

    def unwrap(self) -> Any:
        """Raise the failure as an exception.

        Raises:
            CodecStepFailedError: Always
        """
        raise CodecStepFailedError(self.message, self.step)


CodecResult = Union[CodecSuccess, CodecFailure]


@dataclass(frozen=True)
class CodecPipeline:
    """Immutable chain of codec steps."""

    steps: Tuple[CodecStep, ...]

    def pipe(self, transform: CodecStep) -> CodecPipeline:
        """Return a new pipeline with transform appended."""
        return CodecPipeline(steps=self.steps + (transform,))

    def execute(self, input: Any) -> CodecResult:
        """Run every step in order, stopping at the first that raises."""
        value = input
        for index, step in enumerate(self.steps):
            try:
                value = step(value)
            except Exception as e:
                logger.debug(f"Codec step {index} failed: {e}")
                return CodecFailure(message=str(e), step=index, input=input)
        return CodecSuccess(value=value)

    def __len__(self) -> int:
        return len(self.steps)


def create_codec(definition: Definition) -> CodecPipeline:
    """Start a pipeline whose first step is definition.create."""
    return CodecPipeline(steps=(definition.create,))
