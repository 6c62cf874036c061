"""Decoder configuration."""

from dataclasses import dataclass
from enum import Enum


class SummaryPolicy(Enum):
    """What to do when a report's summary block disagrees with its contents."""
    WARN = "warn"
    FAIL = "fail"


# Shortest snippet that still shows something useful next to the ellipsis
MIN_SNIPPET_LIMIT = 8


@dataclass(frozen=True)
class DecodeOptions:
    """Configuration shared by the outdated and audit decoders."""

    summary_mismatch: SummaryPolicy = SummaryPolicy.WARN
    snippet_limit: int = 80

    def __post_init__(self) -> None:
        """Validate configuration."""
        if not isinstance(self.summary_mismatch, SummaryPolicy):
            raise ValueError(f"Unknown summary policy: {self.summary_mismatch!r}")
        if self.snippet_limit <= MIN_SNIPPET_LIMIT:
            raise ValueError(
                f"snippet_limit must be greater than {MIN_SNIPPET_LIMIT}, got {self.snippet_limit}"
            )


DEFAULT_OPTIONS = DecodeOptions()
