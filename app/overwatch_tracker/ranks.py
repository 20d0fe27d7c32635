from app.overwatch_tracker.structures import PlayerSummary

# (upper bound inclusive, tier name), ascending
SKILL_RATING_TIERS = (
    (1499, "Bronze"),
    (1999, "Silver"),
    (2499, "Gold"),
    (2999, "Platinum"),
    (3499, "Diamond"),
    (3999, "Master"),
)
TOP_TIER = "Grandmaster"


def skill_rating_to_tier(sr: int) -> str:
    """
    Convert a skill rating (>= 1) to its tier name.
    :param sr: competitive skill rating
    :return: one of Bronze, Silver, Gold, Platinum, Diamond, Master, Grandmaster
    """
    for upper, name in SKILL_RATING_TIERS:
        if sr <= upper:
            return name
    return TOP_TIER


def compare_by_skill_rating(a: PlayerSummary, b: PlayerSummary) -> int:
    """
    Comparator for ``functools.cmp_to_key``: ranked players first, highest rating first.
    Unranked players compare equal so a stable sort keeps their roster order.
    """
    if a.competitive_rank is None and b.competitive_rank is None:
        return 0
    if b.competitive_rank is None:
        return -1
    if a.competitive_rank is None:
        return 1
    return b.competitive_rank - a.competitive_rank
