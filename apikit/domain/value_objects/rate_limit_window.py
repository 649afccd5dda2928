"""Rate limit window value object."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True, kw_only=True)
class RateLimitWindow:
    """State of a fixed-window counter.

    Attributes:
        attempts: Requests recorded in the current window.
        reset_at: Unix timestamp (seconds) when the window expires;
            0 when no window is open.
    """

    attempts: int
    reset_at: int

    def __post_init__(self) -> None:
        """Validate counter values.

        Raises:
            ValueError: If attempts or reset_at are negative.
        """
        if self.attempts < 0:
            raise ValueError("attempts must not be negative")
        if self.reset_at < 0:
            raise ValueError("reset_at must not be negative")

    @classmethod
    def empty(cls) -> "RateLimitWindow":
        """Window with no recorded requests (fail-open default)."""
        return cls(attempts=0, reset_at=0)
