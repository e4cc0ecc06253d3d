"""Exception hierarchy for case, judge, dataset, and run failures.

Every failure that can end a case carries enough context to be recorded
on a CaseResult. The Case Executor and Runner convert these into
``status = error`` results; they never abort sibling cases.
"""

from __future__ import annotations


class EvalError(Exception):
    """Base class for all evalcourt errors."""


class ResponseGenerationError(EvalError):
    """Raised when the response generator fails before judging.

    Attributes:
        cause: The exception raised by the response function.
    """

    def __init__(self, cause: BaseException) -> None:
        self.cause = cause
        super().__init__(f"Response generation failed: {type(cause).__name__}: {cause}")


class JudgeError(EvalError):
    """Base class for failures while rendering a verdict."""


class MalformedResponseError(JudgeError):
    """Raised when a judge provider returns text without a YES/NO token.

    Attributes:
        raw_text: The unparseable provider output.
    """

    def __init__(self, raw_text: str) -> None:
        self.raw_text = raw_text
        preview = raw_text if len(raw_text) <= 80 else raw_text[:77] + "..."
        super().__init__(
            f"Judge response must start with YES or NO, got: {preview!r}"
        )


class DelegateFailedError(JudgeError):
    """Raised when one delegate of a composite judge fails.

    Attributes:
        index: Position of the failing delegate in the composite's list.
        cause: The delegate's own error.
    """

    def __init__(self, index: int, cause: BaseException) -> None:
        self.index = index
        self.cause = cause
        super().__init__(
            f"Delegate judge #{index} failed: {type(cause).__name__}: {cause}"
        )


class UnclassifiableVerdictError(JudgeError):
    """Raised when a category verdict has no configured pass rule or weight.

    Attributes:
        label: The category label that could not be classified.
    """

    def __init__(self, label: str, reason: str | None = None) -> None:
        self.label = label
        super().__init__(
            reason
            or (
                f"Category verdict {label!r} has no configured weight or pass rule. "
                "Set 'category_weights', 'pass_categories' or 'pass_predicate' in the judge config."
            )
        )


class ProviderTransportError(JudgeError):
    """Raised when the underlying judge provider call fails.

    Wraps network, timeout, and SDK errors opaquely.

    Attributes:
        cause: The original provider exception.
    """

    def __init__(self, cause: BaseException) -> None:
        self.cause = cause
        super().__init__(f"Judge provider call failed: {type(cause).__name__}: {cause}")


class SetupError(EvalError):
    """Raised when a dataset's setup function fails.

    Attributes:
        dataset: Name of the dataset whose setup failed.
        cause: The exception raised by the setup function.
    """

    def __init__(self, dataset: str, cause: BaseException) -> None:
        self.dataset = dataset
        self.cause = cause
        super().__init__(
            f"Setup for dataset '{dataset}' failed: {type(cause).__name__}: {cause}"
        )


class CaseTimeoutError(EvalError):
    """Raised when a single case exceeds the configured timeout."""

    def __init__(self, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(f"Evaluation timed out after {timeout:g}s")


class JudgeConfigError(EvalError, ValueError):
    """Raised when a judge is constructed with invalid configuration."""


class DatasetLoadError(EvalError):
    """Raised when a dataset file cannot be loaded.

    Attributes:
        filename: Path of the offending file.
        reason: Human-readable description of the problem.
    """

    def __init__(self, filename: str, reason: str) -> None:
        self.filename = filename
        self.reason = reason
        super().__init__(f"{filename}: {reason}")
