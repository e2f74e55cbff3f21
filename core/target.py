"""Target resolution - rebuilds the destination URL from the wildcard path."""

from urllib.parse import unquote

from core.exceptions import InvalidTarget


class TargetResolver:
    """Join wildcard path segments into a target URL, decoding at most once."""

    def __init__(self, segments_predecoded: bool = False):
        self.segments_predecoded = segments_predecoded

    def join(self, segments: list[str]) -> str:
        """Return the segments joined with "/" in their original order."""
        return "/".join(segments)

    def resolve(self, segments: list[str]) -> str:
        """Return the validated target URL for the given segments.

        Raises:
            InvalidTarget: if the result does not start with "http"
        """
        raw = self.join(segments)
        target = raw if self.segments_predecoded else unquote(raw)
        if not target.startswith("http"):
            raise InvalidTarget(target)
        return target
