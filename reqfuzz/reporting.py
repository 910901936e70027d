import sys
import threading
from typing import TextIO, Optional
from colorama import Fore, Style

from .models import RequestOutcome, DispatchSummary


def status_color(status: int) -> str:
    if status < 300:
        return Fore.GREEN
    if status < 400:
        return Fore.CYAN
    if status < 500:
        return Fore.YELLOW
    return Fore.RED


class ConsoleReporter:
    """
    Prints one self-contained line per outcome. Safe to call from any worker
    thread; verbose blocks are written under a lock so they never interleave.
    """

    def __init__(self, verbose: bool = False, stream: Optional[TextIO] = None):
        self.verbose = verbose
        self.stream = stream or sys.stdout
        self._lock = threading.Lock()

    def format_line(self, outcome: RequestOutcome) -> str:
        if outcome.failed:
            return f"{Fore.RED}ERR{Style.RESET_ALL} {'-':>8} {outcome.word} ({outcome.error})"
        color = status_color(outcome.status)
        return f"{color}{outcome.status}{Style.RESET_ALL} {outcome.body_length:>8} {outcome.word}"

    def report(self, outcome: RequestOutcome):
        lines = [self.format_line(outcome)]

        if self.verbose and not outcome.failed:
            for key, value in (outcome.headers or {}).items():
                lines.append(f"    {Style.DIM}{key}: {value}{Style.RESET_ALL}")
            if outcome.body:
                lines.append("")
                lines.append(outcome.body)
                lines.append("")

        with self._lock:
            self.stream.write("\n".join(lines) + "\n")
            self.stream.flush()

    __call__ = report

    def print_summary(self, summary: DispatchSummary):
        with self._lock:
            print(f"\n{Style.BRIGHT}=== FUZZ RUN COMPLETE ==={Style.RESET_ALL}", file=self.stream)
            print(f"Requests: {summary.sent} | Succeeded: {summary.succeeded} | "
                  f"Failed: {summary.failed} | Workers: {summary.workers}", file=self.stream)
            if summary.cancelled:
                print(f"{Fore.YELLOW}[!] Run interrupted before the wordlist was exhausted.{Style.RESET_ALL}",
                      file=self.stream)
