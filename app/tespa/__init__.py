import asyncio
import math
import re
from functools import cmp_to_key
from typing import Optional

import aiohttp
from bs4 import BeautifulSoup

from app.lib.partition import Err, Ok, by_result, partition
from app.logger import logger
from app.overwatch_tracker import resolve_player
from app.overwatch_tracker.errors import FetchError, ParseError, TrackerError, ValidationError
from app.overwatch_tracker.ranks import compare_by_skill_rating, skill_rating_to_tier
from app.overwatch_tracker.http_session import get_session
from app.overwatch_tracker.structures import LookupConfig, PlayerSummary, ResolutionError, TeamSummary

TEAM_PAGE_RE = re.compile(r"https://compete\.tespa\.org/tournament/\d+/team/\d+/?")
BATTLETAG_SELECTOR = ".compete-table td:nth-child(3)"


def validate_team_page(team_page: str) -> str:
    if not TEAM_PAGE_RE.fullmatch((team_page or "").strip()):
        raise ValidationError(f"Bad team url: {team_page}")
    return team_page.strip()


async def fetch_roster_page(team_page: str) -> str:
    """
    Download the roster page.
    :raises FetchError: on DNS/connection errors, timeouts and non 2xx statuses
    """
    session = get_session()
    logger.debug("Fetching roster page %s", team_page)
    try:
        async with session.get(team_page) as response:
            response.raise_for_status()
            # undecodable bytes become U+FFFD, parsing still finds the roster
            return await response.text(errors="replace")
    except aiohttp.ClientResponseError as e:
        logger.warning("Roster page %s answered %s", team_page, e.status)
        raise FetchError(f"Team page answered {e.status} {e.message}") from e
    except aiohttp.ClientError as e:
        logger.error(f"HTTP error fetching {team_page}: {e}", exc_info=True)
        raise FetchError(f"Could not reach team page: {e}") from e
    except asyncio.TimeoutError as e:
        logger.warning(f"Timeout fetching {team_page}")
        raise FetchError("Team page timed out") from e


def extract_handles(page_html: str) -> list[str]:
    """Battletags from the roster table, in page order."""
    soup = BeautifulSoup(page_html, "html.parser")
    return [cell.get_text(strip=True) for cell in soup.select(BATTLETAG_SELECTOR)]


async def _settle(battletag: str, config: LookupConfig) -> Ok | Err:
    try:
        return Ok(await resolve_player(battletag, config))
    except TrackerError as e:
        logger.warning("Could not summarize %s: %s", battletag, e)
        return Err(ResolutionError(handle=battletag, message=str(e)))


def average_skill_rating(players: list[PlayerSummary]) -> Optional[int]:
    """Mean rating rounded half up, None when nobody is ranked."""
    if not players:
        return None
    mean = sum(p.competitive_rank for p in players) / len(players)
    return math.floor(mean + 0.5)


async def summarize_team(team_page: str, config: Optional[LookupConfig] = None) -> TeamSummary:
    """
    Summarize an entire TESPA team page.

    Every battletag on the roster is resolved concurrently. Players that fail
    to resolve are reported in ``TeamSummary.errors`` instead of failing the call.

    :param team_page: url of the TESPA Compete team page
    :param config: platform/region used for every lookup
    :raises ValidationError: the url is not a TESPA team page
    :raises FetchError: the page could not be downloaded
    :raises ParseError: no battletag was found on the page
    """
    team_page = validate_team_page(team_page)
    page_html = await fetch_roster_page(team_page)

    battletags = extract_handles(page_html)
    if not battletags:
        logger.error("No battletags found on %s", team_page)
        raise ParseError("Unexpected page structure")
    logger.info(f"Summarizing {len(battletags)} players from {team_page}")

    # every lookup is scheduled before any is awaited
    results = await asyncio.gather(*(_settle(tag, config) for tag in battletags))
    resolved, failed = partition(by_result, results)
    players = [r.value for r in resolved]
    errors = tuple(r.error for r in failed)

    public_players = [p for p in players if not p.is_private]
    ranked_players = [p for p in public_players if p.competitive_rank is not None]
    average = average_skill_rating(ranked_players)

    summary = TeamSummary(
        total_players=len(battletags),
        public_players=len(public_players),
        ranked_players=len(ranked_players),
        average_skill_rating=average,
        average_skill_rating_tier=skill_rating_to_tier(average) if average is not None else None,
        player_summaries=tuple(sorted(players, key=cmp_to_key(compare_by_skill_rating))),
        errors=errors,
    )
    logger.info("Team %s: %d/%d resolved, %d ranked, average %s",
                team_page, len(players), summary.total_players, summary.ranked_players, average)
    return summary
