"""tapelabel backend entry point.

Starts a PatternServer on random localhost ports and writes the handshake
lines (ZMQ_PORT, ZMQ_PING_PORT, ZMQ_TOKEN) to stdout for the parent process.
Cache size and eviction policy come from TAPELABEL_CACHE_SIZE /
TAPELABEL_CACHE_POLICY; a bad value stops startup with exit code 2.
"""

import logging
import os
import platform
import sys
from pathlib import Path

import sentry_sdk

from _version import __version__
from diagnostics import init_diagnostics
from engine.generator import PatternGenerator, cache_from_env
from security import strip_pii
from zmq_server import PatternServer

logger = logging.getLogger(__name__)

CONSENT_FILE = Path.home() / ".tapelabel" / "telemetry_consent"

# Pattern generation is small; anything near this is a runaway
MAX_MEMORY_BYTES = 4 * 1024 * 1024 * 1024


def telemetry_dsn() -> str:
    """Return SENTRY_DSN if the user opted in, else "" (Sentry disabled)."""
    try:
        consented = CONSENT_FILE.read_text().strip() == "yes"
    except OSError:
        return ""
    return os.environ.get("SENTRY_DSN", "") if consented else ""


def init_sentry() -> None:
    sentry_sdk.init(
        dsn=telemetry_dsn(),
        release=f"tapelabel@{__version__}",
        environment=os.environ.get("SENTRY_ENV", "development"),
        traces_sample_rate=0.1,
        before_send=strip_pii,
        max_breadcrumbs=50,
    )


def limit_memory() -> bool:
    """Cap the address space on POSIX. Returns False if the cap was not applied."""
    if platform.system() == "Windows":
        return False
    try:
        import resource

        _, hard = resource.getrlimit(resource.RLIMIT_AS)
        resource.setrlimit(resource.RLIMIT_AS, (MAX_MEMORY_BYTES, hard))
    except (ImportError, ValueError, OSError) as e:
        logger.warning("Could not cap address space: %s", e)
        return False
    return True


def build_generator() -> PatternGenerator:
    """Generator with an env-configured cache.

    Raises:
        ValueError: If TAPELABEL_CACHE_SIZE or TAPELABEL_CACHE_POLICY is unusable.
    """
    cache = cache_from_env()
    logger.info(
        "Pattern cache: capacity=%d policy=%s", cache.capacity, cache.policy.value
    )
    return PatternGenerator(cache)


def main() -> int:
    init_sentry()
    init_diagnostics()
    limit_memory()

    try:
        generator = build_generator()
    except ValueError as e:
        logger.error("Invalid cache configuration: %s", e)
        print(f"ERROR: invalid cache configuration: {e}", file=sys.stderr)
        return 2

    server = PatternServer(generator=generator)
    logger.info(
        "tapelabel %s serving on 127.0.0.1:%d (ping %d)",
        __version__,
        server.port,
        server.ping_port,
    )
    # Handshake, parsed line by line by the parent process
    print(f"ZMQ_PORT={server.port}", flush=True)
    print(f"ZMQ_PING_PORT={server.ping_port}", flush=True)
    print(f"ZMQ_TOKEN={server.token}", flush=True)
    server.run()
    logger.info("Pattern server stopped")
    return 0


if __name__ == "__main__":
    sys.exit(main())
