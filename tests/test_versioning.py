from datetime import datetime, timedelta

import pytest

from artifact_catalog.domain import InvalidArgument, add_version, version_history
from artifact_catalog.models import ArtifactVersion, SoftwareDevArtifact

T0 = datetime(2024, 3, 1, 12, 0, 0)


def _artifact() -> SoftwareDevArtifact:
    return SoftwareDevArtifact(
        id=11,
        title="Pydantic Handbook",
        description="Models and validation",
        url="https://docs.example.org/pydantic",
        documentation_type="Reference Manual",
        author="Guido",
        current_version="1.0",
        category_id=3,
    )


def _version(number, at=T0) -> ArtifactVersion:
    return ArtifactVersion(version_number=number, download_url=f"https://dl.example.org/{number}", update_date=at)


def test_add_version_sets_current_and_back_reference() -> None:
    artifact = _artifact()

    version = add_version(artifact, _version("1.1"))

    assert artifact.current_version == "1.1"
    assert version.artifact_id == 11
    assert artifact.versions == [version]


def test_last_added_version_wins_even_if_lower() -> None:
    artifact = _artifact()
    add_version(artifact, _version("1.0"))

    add_version(artifact, _version("0.9", T0 + timedelta(minutes=1)))

    assert artifact.current_version == "0.9"
    assert [v.version_number for v in artifact.versions] == ["1.0", "0.9"]


def test_add_missing_version_is_rejected() -> None:
    artifact = _artifact()

    with pytest.raises(InvalidArgument):
        add_version(artifact, None)
    assert artifact.current_version == "1.0"
    assert artifact.versions == []


def test_history_is_newest_first() -> None:
    artifact = _artifact()
    add_version(artifact, _version("1.0", T0))
    add_version(artifact, _version("2.0", T0 + timedelta(days=2)))
    add_version(artifact, _version("1.5", T0 + timedelta(days=1)))

    history = version_history(artifact)

    assert [v.version_number for v in history] == ["2.0", "1.5", "1.0"]
    assert [v.version_number for v in artifact.versions] == ["1.0", "2.0", "1.5"]


def test_history_ties_put_later_added_first() -> None:
    artifact = _artifact()
    add_version(artifact, _version("1.0", T0))
    add_version(artifact, _version("1.0.1", T0))

    assert [v.version_number for v in version_history(artifact)] == ["1.0.1", "1.0"]


def test_default_timestamps_are_utc_aware() -> None:
    version = ArtifactVersion(version_number="1.0", download_url="https://dl.example.org/1.0")

    assert version.update_date.utcoffset() == timedelta(0)
    assert _artifact().created.utcoffset() == timedelta(0)
