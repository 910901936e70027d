from dataclasses import dataclass
from typing import Dict, Optional, Sequence, Tuple

from .template import CompiledTemplate, compile_template, materialize


@dataclass(frozen=True)
class HeaderTemplate:
    key: CompiledTemplate
    value: CompiledTemplate

    def render(self, word: str) -> Tuple[str, str]:
        return materialize(self.key, word), materialize(self.value, word)


@dataclass(frozen=True)
class SubstitutionPlan:
    """
    Every compiled template needed for one run. Built once before dispatch
    and shared read-only by all workers.
    """
    method: str
    url: CompiledTemplate
    headers: Tuple[HeaderTemplate, ...] = ()
    body: Optional[CompiledTemplate] = None

    @classmethod
    def build(cls, method: str, url: str, headers: Sequence[Tuple[str, str]],
              body: Optional[str], delimiter: str) -> "SubstitutionPlan":
        """Compiles all parts, raising MalformedTemplate on the first bad one."""
        compiled_headers = tuple(
            HeaderTemplate(
                key=compile_template(key, delimiter, label="header key"),
                value=compile_template(value, delimiter, label="header value"),
            )
            for key, value in headers
        )
        return cls(
            method=method,
            url=compile_template(url, delimiter, label="url"),
            headers=compiled_headers,
            body=compile_template(body, delimiter, label="body") if body is not None else None,
        )

    @property
    def spans(self) -> int:
        """Total substitution points across the whole request."""
        total = self.url.spans
        for h in self.headers:
            total += h.key.spans + h.value.spans
        if self.body is not None:
            total += self.body.spans
        return total


@dataclass(frozen=True)
class DispatchPolicy:
    concurrency: int = 10
    delay_ms: Optional[int] = None
    verbose: bool = False
    follow_redirects: bool = False
    # Reference behavior: a transport failure ends the worker that hit it.
    stop_worker_on_error: bool = False

    def __post_init__(self):
        if self.concurrency < 1:
            raise ValueError(f"concurrency must be >= 1, got {self.concurrency}")
        if self.delay_ms is not None and self.delay_ms < 0:
            raise ValueError(f"delay must be >= 0 ms, got {self.delay_ms}")

    @property
    def effective_delay(self) -> float:
        """Per-worker pause in seconds: configured delay scaled by worker count."""
        if not self.delay_ms:
            return 0.0
        return self.delay_ms * self.concurrency / 1000.0


@dataclass
class RequestOutcome:
    word: str
    status: Optional[int] = None
    body_length: int = 0
    headers: Optional[Dict[str, str]] = None
    body: Optional[str] = None
    error: Optional[str] = None
    elapsed_ms: float = 0.0

    @property
    def failed(self) -> bool:
        return self.error is not None


@dataclass
class DispatchSummary:
    sent: int = 0
    failed: int = 0
    workers: int = 0
    cancelled: bool = False

    @property
    def succeeded(self) -> int:
        return self.sent - self.failed
