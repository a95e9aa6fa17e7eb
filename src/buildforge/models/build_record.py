"""Build record model.

A build record ties a build folder on disk to the release tag and
variant name that produced it, so later runs can reuse the folder
without asking for that information again.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class BuildRecord(BaseModel):
    """Metadata for one registered build folder.

    Records are created when a new build starts or when an untracked
    folder is adopted, and are never mutated afterwards.

    Attributes:
        identity: Build folder name, unique within the registry.
        version_tag: Upstream release tag the sources were cloned from.
        variant_name: Human-readable name of the customized variant.
        created_at: When the record was created.
    """

    model_config = ConfigDict(frozen=True)

    identity: str = Field(description="Build folder name")
    version_tag: str = Field(description="Release tag, e.g. 4.2.1-stable")
    variant_name: str = Field(description="Variant name chosen by the operator")
    created_at: datetime = Field(
        default_factory=lambda: datetime.now().replace(microsecond=0),
        description="Record creation time",
    )
