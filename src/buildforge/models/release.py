"""Release candidate model for upstream stable releases."""

from pydantic import BaseModel, ConfigDict, Field

Version = tuple[int, int, int]


class ReleaseCandidate(BaseModel):
    """A stable upstream release that can be cloned.

    Attributes:
        tag: Raw release tag (e.g. ``4.2.1-stable``).
        version: Parsed ``(major, minor, patch)``; patch defaults to 0.
    """

    model_config = ConfigDict(frozen=True)

    tag: str = Field(description="Raw release tag")
    version: Version = Field(description="Parsed (major, minor, patch)")

    @property
    def version_string(self) -> str:
        """Dotted version as written in the tag."""
        return self.tag.removesuffix("-stable")
