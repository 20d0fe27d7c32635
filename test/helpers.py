from app.overwatch_tracker.structures import HeroPlaytime, PlayerSummary


def make_player(battletag: str, rank: int | None = None, private: bool = False,
                heroes: tuple[HeroPlaytime, ...] = ()) -> PlayerSummary:
    name, discriminator = battletag.split("#")
    return PlayerSummary(
        handle=battletag,
        name=name,
        discriminator=discriminator,
        platform="pc",
        region="us",
        is_private=private,
        competitive_rank=rank,
        top_heroes=heroes,
    )


def roster_page(*battletags: str) -> str:
    rows = "".join(
        f"<tr><td>{i}</td><td>Player {i}</td><td> {tag} </td><td>Captain</td></tr>"
        for i, tag in enumerate(battletags, start=1)
    )
    return (
        "<html><body><table class=\"compete-table\">"
        "<thead><tr><th>#</th><th>Name</th><th>BattleTag</th><th>Role</th></tr></thead>"
        f"<tbody>{rows}</tbody></table></body></html>"
    )
