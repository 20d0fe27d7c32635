from app.overwatch_tracker.ranks import skill_rating_to_tier
from app.overwatch_tracker.structures import PlayerSummary, TeamSummary

CAREER_URL = "https://playoverwatch.com/en-us/career/{platform}/{name}-{discriminator}"
UNRANKED = "Unranked"
NO_AVERAGE = "N/A"


def career_link(summary: PlayerSummary) -> str:
    return CAREER_URL.format(platform=summary.platform, name=summary.name,
                             discriminator=summary.discriminator)


def format_player(summary: PlayerSummary, hero_limit: int = 5) -> str:
    """
    Render one player as a header line, a career link and up to ``hero_limit`` heroes.
    """
    if summary.competitive_rank is None:
        tier, rating = UNRANKED, UNRANKED
    else:
        tier, rating = skill_rating_to_tier(summary.competitive_rank), summary.competitive_rank

    # <> keeps discord from embedding a preview of every link
    lines = [
        f"**{summary.handle}** - {tier} ({rating})",
        f"<{career_link(summary)}>",
    ]
    heroes = summary.top_heroes[:hero_limit]
    if heroes:
        lines.extend(f"\t{hero.hero} ({hero.played})" for hero in heroes)
    elif summary.is_private:
        lines.append("\tPrivate profile")
    else:
        lines.append("\tNo competitive heroes played")
    return "\n".join(lines)


def format_team(summary: TeamSummary) -> str:
    if summary.average_skill_rating is None:
        average = NO_AVERAGE
    else:
        average = f"{summary.average_skill_rating_tier} ({summary.average_skill_rating})"

    blocks = [
        "\n".join([
            f"**Average Team SR**: {average}",
            f"**Team Members**: {summary.total_players} ({summary.ranked_players} are ranked, "
            f"{summary.public_players} are public)",
            "**Player Summaries** (current competitive season):",
        ])
    ]
    blocks.extend(format_player(player, hero_limit=3) for player in summary.player_summaries)
    if summary.errors:
        blocks.append("\n".join(["**Errors**:"] + [f"\t{error.message}" for error in summary.errors]))
    return "\n\n".join(blocks)
