import asyncio
import os
import re
from typing import Any, Optional
from urllib.parse import quote

import aiohttp

from app.logger import logger
from app.overwatch_tracker.errors import StatLookupError, ValidationError
from app.overwatch_tracker.http_session import get_session
from app.overwatch_tracker.structures import (
    HeroPlaytime,
    LookupConfig,
    PlayerSummary,
    ProfileResponse,
    StatsResponse,
)

OW_API_URL = os.getenv("OW_API_URL", "https://owapi.io").rstrip("/")
PROFILE_PATH = "/profile/{platform}/{region}/{player_id}"
STATS_PATH = "/stats/{platform}/{region}/{player_id}"

DEFAULT_CONFIG = LookupConfig(
    platform=os.getenv("OW_PLATFORM", "pc"),
    region=os.getenv("OW_REGION", "us"),
)

BATTLETAG_RE = re.compile(r"(?P<name>[^#]+)#(?P<discriminator>\d+)")


async def _get_json(url: str) -> Any:
    session = get_session()
    logger.debug("GET %s", url)
    async with session.get(url) as response:
        response.raise_for_status()
        return await response.json(content_type=None)


def _service_url(path: str, platform: str, region: str, player_id: str) -> str:
    # names may contain characters that are meaningful in a url path
    return OW_API_URL + path.format(platform=quote(platform, safe=""), region=quote(region, safe=""),
                                    player_id=quote(player_id, safe=""))


async def get_profile(platform: str, region: str, player_id: str) -> ProfileResponse:
    return await _get_json(_service_url(PROFILE_PATH, platform, region, player_id))


async def get_stats(platform: str, region: str, player_id: str) -> StatsResponse:
    return await _get_json(_service_url(STATS_PATH, platform, region, player_id))


def parse_battletag(battletag: str) -> tuple[str, str]:
    """
    Split a ``name#1234`` battletag into name and discriminator.
    :raises ValidationError: when the battletag is malformed
    """
    match = BATTLETAG_RE.fullmatch(battletag or "")
    if not match:
        raise ValidationError(f"Bad battletag: {battletag}")
    return match["name"], match["discriminator"]


def _competitive_rank(profile: ProfileResponse) -> Optional[int]:
    rank = (profile.get("competitive") or {}).get("rank")
    # the service reports missing placements as null or 0
    rank = int(rank) if rank else 0
    return rank if rank >= 1 else None


def _top_heroes(stats: StatsResponse) -> tuple[HeroPlaytime, ...]:
    top_heroes = (stats.get("stats") or {}).get("top_heroes") or {}
    played = (top_heroes.get("competitive") or {}).get("played") or []
    return tuple(HeroPlaytime(hero=h["hero"], played=str(h["played"])) for h in played)


async def _query_service(config: LookupConfig, player_id: str) -> tuple[ProfileResponse, StatsResponse]:
    """
    Run the profile and stats queries together. The first failure cancels the other
    query and is raised as is.
    """
    try:
        async with asyncio.TaskGroup() as group:
            profile = group.create_task(get_profile(config.platform, config.region, player_id))
            stats = group.create_task(get_stats(config.platform, config.region, player_id))
    except ExceptionGroup as failures:
        raise failures.exceptions[0]
    return profile.result(), stats.result()


def merge_player(battletag: str, name: str, discriminator: str, config: LookupConfig,
                 profile: ProfileResponse, stats: StatsResponse) -> PlayerSummary:
    is_private = bool(profile.get("private") or stats.get("private"))
    rank = _competitive_rank(profile)
    heroes = () if is_private or rank is None else _top_heroes(stats)
    return PlayerSummary(
        handle=battletag,
        name=name,
        discriminator=discriminator,
        platform=config.platform,
        region=config.region,
        is_private=is_private,
        competitive_rank=rank,
        top_heroes=heroes,
    )


async def resolve_player(battletag: str, config: Optional[LookupConfig] = None) -> PlayerSummary:
    """
    Look up the profile and stats of a battletag and merge them into a PlayerSummary.

    :param battletag: player battletag, ``name#1234``
    :param config: platform/region to query, defaults to DEFAULT_CONFIG
    :raises ValidationError: the battletag is malformed, nothing is queried
    :raises StatLookupError: the profile or the stats query failed
    """
    config = config or DEFAULT_CONFIG
    name, discriminator = parse_battletag(battletag)
    # owapi wants name-1234
    player_id = f"{name}-{discriminator}"

    try:
        profile, stats = await _query_service(config, player_id)
        summary = merge_player(battletag, name, discriminator, config, profile, stats)
    except aiohttp.ClientResponseError as e:
        logger.warning("Lookup of %s failed with status %s", battletag, e.status)
        raise StatLookupError(battletag, f"stats service answered {e.status}") from e
    except aiohttp.ClientError as e:
        logger.warning(f"HTTP error looking up {battletag}: {e}")
        raise StatLookupError(battletag, e) from e
    except asyncio.TimeoutError as e:
        logger.warning(f"Timeout looking up {battletag}")
        raise StatLookupError(battletag, "stats service timed out") from e
    except (ValueError, TypeError, KeyError, AttributeError) as e:
        logger.error(f"Unexpected stats payload for {battletag}: {e}", exc_info=True)
        raise StatLookupError(battletag, "unexpected stats payload") from e

    logger.debug("Resolved %s: private=%s rank=%s", battletag, summary.is_private, summary.competitive_rank)
    return summary
