class TrackerError(Exception):
    """Base class for every error raised while summarizing players or teams."""


class ValidationError(TrackerError):
    """A battletag or roster url supplied by the user is malformed."""


class FetchError(TrackerError):
    """The roster page could not be downloaded."""


class ParseError(TrackerError):
    """The roster page was downloaded but no player could be found in it."""


class StatLookupError(TrackerError):
    """The stats service failed for a single battletag."""

    def __init__(self, handle: str, cause: object):
        self.handle = handle
        self.cause = cause
        super().__init__(f"Could not look up {handle}: {cause}")
