from typing import NamedTuple, Optional, TypedDict


class CompetitiveRank(TypedDict, total=False):
    rank: Optional[int]


class ProfileResponse(TypedDict, total=False):
    """
    Subset of the OWAPI ``/profile`` payload that is consumed.
    """
    username: str
    private: bool
    competitive: CompetitiveRank


class HeroPlayed(TypedDict):
    hero: str
    played: str


class TopHeroes(TypedDict, total=False):
    competitive: dict[str, list[HeroPlayed]]


class StatsBody(TypedDict, total=False):
    top_heroes: TopHeroes


class StatsResponse(TypedDict, total=False):
    """
    Subset of the OWAPI ``/stats`` payload that is consumed.
    """
    private: bool
    stats: StatsBody


class LookupConfig(NamedTuple):
    platform: str = "pc"
    region: str = "us"


class HeroPlaytime(NamedTuple):
    hero: str
    played: str


class PlayerSummary(NamedTuple):
    """
    One resolved roster member.

    ``competitive_rank`` is None for players without a ranked standing this season.
    ``top_heroes`` is empty for private or unranked players.
    """
    handle: str
    name: str
    discriminator: str
    platform: str
    region: str
    is_private: bool
    competitive_rank: Optional[int]
    top_heroes: tuple[HeroPlaytime, ...] = ()


class ResolutionError(NamedTuple):
    handle: str
    message: str


class TeamSummary(NamedTuple):
    """
    Aggregate over one roster page.

    ``average_skill_rating`` and ``average_skill_rating_tier`` are None when no
    public player is ranked.
    """
    total_players: int
    public_players: int
    ranked_players: int
    average_skill_rating: Optional[int]
    average_skill_rating_tier: Optional[str]
    player_summaries: tuple[PlayerSummary, ...]
    errors: tuple[ResolutionError, ...]
