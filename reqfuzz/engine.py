import time
import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Optional, Tuple

from .errors import TransportError
from .models import SubstitutionPlan, DispatchPolicy, RequestOutcome, DispatchSummary
from .template import materialize
from .work_queue import WorkQueue

logger = logging.getLogger("reqfuzz.engine")

OutcomeCallback = Callable[[RequestOutcome], None]


class Dispatcher:
    """
    Worker pool draining a WorkQueue.

    Each worker takes one word, materializes the request from the shared
    plan, sends it and hands the outcome straight to `on_outcome`. Outcomes
    are never collected here; `on_outcome` is called from worker threads and
    must be safe for concurrent use.
    """

    def __init__(self, plan: SubstitutionPlan, transport, policy: DispatchPolicy,
                 on_outcome: OutcomeCallback):
        self.plan = plan
        self.transport = transport
        self.policy = policy
        self.on_outcome = on_outcome
        self._cancel = threading.Event()

    def cancel(self):
        """Workers finish their in-flight request and stop before the next take."""
        self._cancel.set()

    @property
    def cancelled(self) -> bool:
        return self._cancel.is_set()

    def build_request(self, word: str) -> Tuple[str, List[Tuple[str, str]], Optional[bytes]]:
        """Materializes url, headers and body for one word."""
        plan = self.plan
        url = materialize(plan.url, word)
        headers = [h.render(word) for h in plan.headers]
        body = None
        if plan.body is not None:
            body = materialize(plan.body, word).encode("utf-8")
        return url, headers, body

    def _send(self, word: str) -> RequestOutcome:
        url, headers, body = self.build_request(word)
        try:
            resp = self.transport.send(self.plan.method, url, headers, body)
        except TransportError as e:
            return RequestOutcome(word=word, error=str(e))

        outcome = RequestOutcome(
            word=word,
            status=resp.status_code,
            body_length=resp.body_length,
            elapsed_ms=resp.elapsed_ms,
        )
        if self.policy.verbose:
            outcome.headers = resp.headers
            outcome.body = resp.text
        return outcome

    def _worker(self, worker_id: int, queue: WorkQueue) -> Tuple[int, int]:
        """Returns this worker's own (sent, failed) tally."""
        sent = failed = 0
        pause = self.policy.effective_delay
        logger.debug("worker %d started", worker_id)

        while not self._cancel.is_set():
            word = queue.try_take()
            if word is None:
                break

            outcome = self._send(word)
            sent += 1
            self.on_outcome(outcome)

            if outcome.failed:
                failed += 1
                if self.policy.stop_worker_on_error:
                    logger.debug("worker %d stopping after transport error on %r", worker_id, word)
                    break

            if pause:
                time.sleep(pause)

        logger.debug("worker %d finished (%d sent, %d failed)", worker_id, sent, failed)
        return sent, failed

    def run(self, queue: WorkQueue) -> DispatchSummary:
        """Blocks until every worker has stopped."""
        workers = self.policy.concurrency
        summary = DispatchSummary(workers=workers)

        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="reqfuzz") as executor:
            futures = [executor.submit(self._worker, i, queue) for i in range(workers)]
            try:
                for future in futures:
                    sent, failed = future.result()
                    summary.sent += sent
                    summary.failed += failed
            except Exception:
                # Anything besides a transport error is a bug; stop the other workers
                self.cancel()
                raise

        summary.cancelled = self.cancelled
        return summary
