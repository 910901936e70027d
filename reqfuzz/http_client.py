import time
import logging
import requests
import urllib3
from typing import Optional, Dict, Sequence, Tuple
from dataclasses import dataclass

from .errors import TransportError

logger = logging.getLogger("reqfuzz.http")


@dataclass
class ResponseWrapper:
    status_code: int
    headers: Dict[str, str]
    content: bytes
    elapsed_ms: float
    encoding: Optional[str] = None

    @property
    def body_length(self) -> int:
        return len(self.content)

    @property
    def text(self) -> str:
        """Decoded on demand with the declared charset, UTF-8 otherwise. No charset sniffing."""
        try:
            return self.content.decode(self.encoding or "utf-8", errors="replace")
        except LookupError:
            return self.content.decode("utf-8", errors="replace")


class HttpClient:
    """
    Transport used by the workers. Built once per run and shared; the
    underlying Session pools connections for all threads.
    """
    def __init__(self, timeout: float = 30.0, follow_redirects: bool = False,
                 verify_tls: bool = True, pool_size: int = 10):
        self.timeout = timeout
        self.follow_redirects = follow_redirects
        self.verify_tls = verify_tls
        self.session = requests.Session()

        # Pool at least as large as the worker count so threads don't queue on sockets
        adapter = requests.adapters.HTTPAdapter(pool_connections=pool_size, pool_maxsize=pool_size)
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)

        if not verify_tls:
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

    def send(self, method: str, url: str,
             headers: Optional[Sequence[Tuple[str, str]]] = None,
             body: Optional[bytes] = None) -> ResponseWrapper:
        """
        Sends one request. Headers are applied in order, so a repeated key
        keeps its last value. Any requests-level failure, or a header or URL
        that cannot be encoded for the wire, becomes TransportError.
        """
        request_headers = {}
        for key, value in headers or ():
            request_headers[key] = value

        start_time = time.time()
        try:
            resp = self.session.request(
                method=method,
                url=url,
                headers=request_headers,
                data=body,
                timeout=self.timeout,
                allow_redirects=self.follow_redirects,
                verify=self.verify_tls,
            )
            # Force the body read inside the try so streaming errors are caught too
            content = resp.content
        except (requests.RequestException, ValueError) as e:
            logger.debug("%s %s failed: %s", method, url, e)
            raise TransportError(f"{method} {url}: {e}") from e
        elapsed = (time.time() - start_time) * 1000.0

        return ResponseWrapper(
            status_code=resp.status_code,
            headers=dict(resp.headers),
            content=content,
            elapsed_ms=elapsed,
            encoding=resp.encoding,
        )

    def close(self):
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
