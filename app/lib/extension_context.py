from discord.ext.commands import Context

MESSAGE_LIMIT = 2000


def split_message(content: str, limit: int = MESSAGE_LIMIT) -> list[str]:
    """
    Split ``content`` into chunks of at most ``limit`` characters, breaking on newlines.
    Lines longer than ``limit`` are hard-wrapped.
    """
    chunks: list[str] = []
    current = ""
    for line in content.split("\n"):
        while len(line) > limit:
            if current:
                chunks.append(current)
                current = ""
            chunks.append(line[:limit])
            line = line[limit:]
        candidate = f"{current}\n{line}" if current else line
        if len(candidate) > limit:
            chunks.append(current)
            current = line
        else:
            current = candidate
    if current.strip():
        chunks.append(current)
    return chunks


class TespaContext(Context):

    async def reply_chunks(self, content: str):
        """Reply to the invoking message, continuing in follow-up messages past the limit."""
        chunks = split_message(content)
        if not chunks:
            return
        await self.reply(chunks[0])
        for chunk in chunks[1:]:
            await self.send(chunk)
