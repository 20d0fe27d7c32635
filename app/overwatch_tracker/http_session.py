import os

import aiohttp

HTTP_TIMEOUT = float(os.getenv("HTTP_TIMEOUT", "30"))
# the stats service rate limits bursts, a team fan-out stays under this per host
MAX_CONNECTIONS_PER_HOST = int(os.getenv("HTTP_MAX_CONNECTIONS_PER_HOST", "20"))
USER_AGENT = "TespaBot"

_session: aiohttp.ClientSession | None = None


def _new_session() -> aiohttp.ClientSession:
    return aiohttp.ClientSession(
        timeout=aiohttp.ClientTimeout(total=HTTP_TIMEOUT, connect=HTTP_TIMEOUT / 3),
        connector=aiohttp.TCPConnector(limit_per_host=MAX_CONNECTIONS_PER_HOST, ttl_dns_cache=300),
        headers={"User-Agent": USER_AGENT},
        raise_for_status=False,
    )


def get_session() -> aiohttp.ClientSession:
    """Session shared by the roster page fetch and the stats service, created on first use."""
    global _session
    if _session is None or _session.closed:
        _session = _new_session()
    return _session


async def close_session():
    global _session
    if _session is not None and not _session.closed:
        await _session.close()
    _session = None
