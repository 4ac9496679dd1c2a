"""Origin / Referer allow-list policy."""

from dataclasses import dataclass


@dataclass(frozen=True)
class OriginDecision:
    """Outcome of an origin check."""

    allowed: bool
    reason: str


class OriginPolicy:
    """Decide whether a browser caller may use the relay."""

    def __init__(self, allowed_origins: list[str] | None = None):
        self.allowed_origins = list(allowed_origins or [])

    def decide(self, origin: str, referer: str) -> OriginDecision:
        """Origin must match exactly; without Origin, Referer must have an allowed prefix."""
        if origin:
            if origin in self.allowed_origins:
                return OriginDecision(True, "origin")
            return OriginDecision(False, f"origin {origin!r} not allowed")
        if referer:
            if any(referer.startswith(allowed) for allowed in self.allowed_origins):
                return OriginDecision(True, "referer")
            return OriginDecision(False, f"referer {referer!r} not allowed")
        # Neither header: non-browser or same-origin navigation
        return OriginDecision(True, "no origin headers")
