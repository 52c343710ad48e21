"""HTTP health check probe for container orchestration.

Query the running shellprobe service and translate its plain-text report
into an exit code for container runtime health probes (Docker HEALTHCHECK).

Exit Codes:
    0: Healthy - HTTP 200 and the first body line is exactly ``healthy:true``.
    1: Unhealthy - Connection failed, non-200 response, timeout reply, or any
       other first line.

Environment Variables:
    HEALTHCHECK_HOST: Target host address (default: 127.0.0.1).
    HEALTHCHECK_PORT: Target port number (default: 8080).
"""

import os
import sys
import urllib.error
import urllib.request

TIMEOUT = 2  # seconds


def target_url() -> str:
    host = os.environ.get("HEALTHCHECK_HOST", "127.0.0.1")
    port = os.environ.get("HEALTHCHECK_PORT", "8080")
    return f"http://{host}:{port}/"


def is_healthy_body(body: str) -> bool:
    """Return True only when the first line is exactly ``healthy:true``."""
    first_line = body.split("\n", 1)[0]
    return first_line == "healthy:true"


def probe(url: str, timeout: float = TIMEOUT) -> int:
    """Fetch `url` and map the response to a process exit code."""
    try:
        with urllib.request.urlopen(url, timeout=timeout) as response:
            if response.status != 200:
                return 1  # UNHEALTHY
            body = response.read().decode("utf-8", errors="replace")
    except (urllib.error.URLError, urllib.error.HTTPError, TimeoutError):
        # Network errors and non-success HTTP responses (4xx, 5xx).
        return 1

    return 0 if is_healthy_body(body) else 1


if __name__ == "__main__":
    sys.exit(probe(target_url()))
