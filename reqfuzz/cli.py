from reqfuzz import __version__
from reqfuzz.config import RunConfig, load_profile, resolve_config, parse_header_flags
from reqfuzz.engine import Dispatcher
from reqfuzz.errors import FuzzError
from reqfuzz.http_client import HttpClient
from reqfuzz.models import SubstitutionPlan, DispatchPolicy
from reqfuzz.reporting import ConsoleReporter
from reqfuzz.wordlist import load_wordlist
from reqfuzz.work_queue import WorkQueue
import argparse
import logging
import signal
import sys
from colorama import Fore, Style, init


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="reqfuzz",
        description="Send one templated HTTP request per wordlist entry and report status and size.",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"reqfuzz v{__version__}")

    req_group = parser.add_argument_group("Request")
    req_group.add_argument("-m", "--method", default=None, help="HTTP method (default: GET)\nExample: -m POST")
    req_group.add_argument("-H", "--header", dest="headers", action="append", default=None,
                           help="Header to include, repeatable\nExample: -H \"Accept: application/json\"")
    req_group.add_argument("-d", "--data", default=None,
                           help="Request body\nExample: -d '{\"username\":\"##u##\",\"password\":\"123456\"}'")
    req_group.add_argument("-u", "--url", default=None, help="URL to make the request to\nExample: -u http://example.com/##p##")

    fuzz_group = parser.add_argument_group("Fuzzing")
    fuzz_group.add_argument("-w", "--wordlist", default=None, help="Path to the wordlist, one entry per line")
    fuzz_group.add_argument("-D", "--delimiter", default=None,
                            help="Marker wrapping each substitution point (default: ##)")
    fuzz_group.add_argument("-t", "--threads", type=int, default=None, help="Concurrent workers (default: 10)")
    fuzz_group.add_argument("--delay", type=int, default=None,
                            help="Delay in ms; each worker sleeps delay * threads between requests")

    conf_group = parser.add_argument_group("Configuration")
    conf_group.add_argument("--profile", default=None, help="YAML file with default values for any option")
    conf_group.add_argument("-v", "--verbose", action=argparse.BooleanOptionalAction, default=None,
                            help="Print response headers and body")
    conf_group.add_argument("-r", "--allow-redirects", action=argparse.BooleanOptionalAction, default=None,
                            help="Follow 3xx responses")
    conf_group.add_argument("--timeout", type=float, default=None, help="Per-request timeout in seconds (default: 30)")
    conf_group.add_argument("-k", "--insecure", action=argparse.BooleanOptionalAction, default=None,
                            help="Skip TLS verification")
    conf_group.add_argument("--debug", action="store_true", help="Diagnostic logging to stderr")
    return parser


def load_config(args: argparse.Namespace) -> RunConfig:
    profile = load_profile(args.profile) if args.profile else None
    config = resolve_config(vars(args), profile)
    config.validate()
    return config


def fatal(message: str):
    print(f"{Fore.RED}[!!!] FATAL: {message}{Style.RESET_ALL}", file=sys.stderr)
    sys.exit(1)


def run(config: RunConfig) -> int:
    # Everything that can fail is checked before the first request goes out
    plan = SubstitutionPlan.build(
        method=config.method,
        url=config.url,
        headers=parse_header_flags(config.headers),
        body=config.data,
        delimiter=config.delimiter,
    )
    words = load_wordlist(config.wordlist)

    policy = DispatchPolicy(
        concurrency=config.threads,
        delay_ms=config.delay,
        verbose=config.verbose,
        follow_redirects=config.allow_redirects,
    )
    reporter = ConsoleReporter(verbose=config.verbose)

    print(f"[*] TARGET: {config.method} {config.url}")
    print(f"[*] WORDS: {len(words)} | THREADS: {policy.concurrency} | SUBSTITUTION POINTS: {plan.spans}")
    if plan.spans == 0:
        print(f"{Fore.YELLOW}[!] No '{config.delimiter}' pairs found; every request will be identical.{Style.RESET_ALL}")

    with HttpClient(timeout=config.timeout, follow_redirects=config.allow_redirects,
                    verify_tls=not config.insecure, pool_size=policy.concurrency) as client:
        dispatcher = Dispatcher(plan, client, policy, reporter.report)

        def signal_handler(sig, frame):
            print(f"\n{Fore.RED}[!] Interrupted (Ctrl+C). Finishing in-flight requests...{Style.RESET_ALL}")
            dispatcher.cancel()

        signal.signal(signal.SIGINT, signal_handler)
        summary = dispatcher.run(WorkQueue(words))

    reporter.print_summary(summary)
    return 0


def main(argv=None):
    init()
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(args)
        code = run(config)
    except FuzzError as e:
        fatal(str(e))
    sys.exit(code)


if __name__ == "__main__":
    main()
