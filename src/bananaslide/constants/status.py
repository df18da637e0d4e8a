"""Status enums for bananaslide.

Slide jobs move through a small state machine while the batch sequencer
drives them:

    IDLE -> GENERATING -> SUCCESS
                |
                v
              ERROR  (eligible for the next batch run)
"""

from enum import Enum


class SlideStatus(str, Enum):
    """Generation status of a single slide."""

    IDLE = "idle"
    """Slide has not been generated yet."""

    GENERATING = "generating"
    """Variants are being requested from the provider."""

    SUCCESS = "success"
    """At least one variant was generated."""

    ERROR = "error"
    """Every variant failed; see the slide's error message."""

    @property
    def is_pending(self) -> bool:
        """Whether a batch run should (re)generate a slide in this state."""
        return self in (SlideStatus.IDLE, SlideStatus.ERROR)


STATUS_ICONS: dict[SlideStatus, str] = {
    SlideStatus.IDLE: "[ ]",
    SlideStatus.GENERATING: "[~]",
    SlideStatus.SUCCESS: "[OK]",
    SlideStatus.ERROR: "[X]",
}
"""ASCII status markers used by the CLI summary table."""
