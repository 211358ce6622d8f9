# artifact_catalog/domain/versioning.py
from __future__ import annotations

from typing import List, Optional

from ..models.artifact import ArtifactVersion, SoftwareDevArtifact
from .errors import InvalidArgument


def add_version(artifact: SoftwareDevArtifact, version: Optional[ArtifactVersion]) -> ArtifactVersion:
    """
    Append `version` to the artifact's history and make it current.

    The last added version always wins: no semantic-version comparison is
    made, so adding "0.9" after "1.0" moves the current version back to "0.9".
    """
    if version is None:
        raise InvalidArgument("version is required")
    version.artifact_id = artifact.id
    artifact.versions.append(version)
    artifact.current_version = version.version_number
    return version


def version_history(artifact: SoftwareDevArtifact) -> List[ArtifactVersion]:
    """Versions newest first; among equal timestamps the later-added one comes first."""
    ranked = sorted(
        enumerate(artifact.versions),
        key=lambda pair: (pair[1].update_date, pair[0]),
        reverse=True,
    )
    return [v for _, v in ranked]
