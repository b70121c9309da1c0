"""
Tool outcomes and pre-flight checks for MCP4Git.

Tool functions report success or failure as a ``ToolOutcome`` so the error
taxonomy stays inspectable; the registry flattens outcomes into MCP content
blocks only at the dispatcher boundary.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, Optional

import requests

logger = logging.getLogger(__name__)


class ErrorKind(Enum):
    """Categories of tool failures."""

    NOT_FOUND = "not_found"
    PRECONDITION_FAILED = "precondition_failed"
    RATE_LIMITED = "rate_limited"
    FORBIDDEN = "forbidden"
    VALIDATION_REJECTED = "validation_rejected"
    INVALID_ARGUMENTS = "invalid_arguments"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class ToolOutcome:
    """Result of a tool function: either ok text or an error kind with text."""

    ok: bool
    text: str
    kind: Optional[ErrorKind] = None

    @classmethod
    def success(cls, text: str) -> "ToolOutcome":
        return cls(ok=True, text=text)

    @classmethod
    def failure(cls, kind: ErrorKind, text: str) -> "ToolOutcome":
        return cls(ok=False, text=text, kind=kind)

    @classmethod
    def from_request_error(
        cls, action: str, error: requests.exceptions.RequestException, hint: str = ""
    ) -> "ToolOutcome":
        """
        Convert a GitHub API error into a failure outcome.

        Args:
            action: What was being done, e.g. 'creating branch'
            error: The exception raised by the GitHub API client
            hint: Optional extra text appended to the message

        Returns:
            A failure outcome whose kind reflects the HTTP status
        """
        kind = classify_request_error(error)
        detail = _error_detail(error)

        if kind is ErrorKind.RATE_LIMITED:
            text = (
                f"⚠️ Rate limit exceeded while {action}. "
                f"Please wait a few minutes before trying again.\n\nError details: {detail}"
            )
        elif kind is ErrorKind.FORBIDDEN:
            text = (
                f"❌ Permission denied while {action}: {detail}\n\n"
                f"Please check that your GitHub token has the required scopes."
            )
        elif kind is ErrorKind.VALIDATION_REJECTED:
            text = f"❌ GitHub rejected the request while {action}: {detail}"
        elif kind is ErrorKind.NOT_FOUND:
            text = f"❌ Error {action}: resource not found ({detail})"
        elif kind is ErrorKind.PRECONDITION_FAILED:
            text = f"❌ Error {action}: conflict with the current state ({detail})"
        else:
            text = f"❌ Error {action}: {detail}"

        if hint:
            text += f"\n\n{hint}"
        return cls.failure(kind, text)


def classify_request_error(error: requests.exceptions.RequestException) -> ErrorKind:
    """Map a requests exception onto an ErrorKind using its HTTP status."""
    response = getattr(error, "response", None)
    if response is None:
        return ErrorKind.UNKNOWN

    status = response.status_code
    if status == 404:
        return ErrorKind.NOT_FOUND
    if status == 409:
        return ErrorKind.PRECONDITION_FAILED
    if status == 429:
        return ErrorKind.RATE_LIMITED
    if status == 403:
        if (
            response.headers.get("x-ratelimit-remaining") == "0"
            or "rate limit" in (response.text or "").lower()
        ):
            return ErrorKind.RATE_LIMITED
        return ErrorKind.FORBIDDEN
    if status == 422:
        return ErrorKind.VALIDATION_REJECTED
    return ErrorKind.UNKNOWN


def _error_detail(error: requests.exceptions.RequestException) -> str:
    """Prefer GitHub's JSON 'message' over the generic exception text."""
    response = getattr(error, "response", None)
    if response is not None:
        try:
            message = response.json().get("message")
        except ValueError:
            message = None
        if message:
            return f"{message} (HTTP {response.status_code})"
    return str(error) or "Unknown error"


@dataclass(frozen=True)
class PreflightCheck:
    """
    A read-only verification performed before a mutating call.

    Attributes:
        name: Short label used in logs
        predicate: Returns True when the check passes
        on_failure: Outcome returned when the check fails
        required: Optional checks that error out are logged and skipped
    """

    name: str
    predicate: Callable[[], bool]
    on_failure: ToolOutcome
    required: bool = True


def run_preflight(checks: Iterable[PreflightCheck]) -> Optional[ToolOutcome]:
    """
    Evaluate checks in order, stopping at the first failure.

    A predicate raising a 404 counts as a failed check. Any other request
    error propagates from required checks and is skipped for optional ones.

    Returns:
        The failing check's outcome, or None when every check passed
    """
    for check in checks:
        try:
            passed = check.predicate()
        except requests.exceptions.RequestException as e:
            if not check.required:
                logger.warning(f"Pre-flight check '{check.name}' errored, continuing: {e}")
                continue
            if classify_request_error(e) is not ErrorKind.NOT_FOUND:
                raise
            passed = False

        if not passed:
            logger.info(f"Pre-flight check '{check.name}' failed")
            return check.on_failure

        logger.debug(f"Pre-flight check '{check.name}' passed")
    return None
