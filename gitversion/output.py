"""
Rendering of calculated versions.

Formats a VersionResolution as plain text, as a JSON document of version
variables, as assembly versions, or as a PEP 440 version for Python packaging.
"""

import json
import re
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from packaging.version import InvalidVersion, Version

from gitversion.versioning.calculator import VersionResolution
from gitversion.versioning.exceptions import VersionFormatError
from gitversion.versioning.version import SemanticVersion, sanitize_branch_name


class OutputFormat(str, Enum):
    """Supported output formats."""

    text = "text"
    json = "json"
    assembly_sem_ver = "AssemblySemVer"
    assembly_sem_file_ver = "AssemblySemFileVer"
    pep440 = "pep440"

    @classmethod
    def from_name(cls, name: Union[str, "OutputFormat"]) -> "OutputFormat":
        """Look up a format by value, ignoring case."""
        if isinstance(name, OutputFormat):
            return name
        for member in cls:
            if member.value.lower() == str(name).lower():
                return member
        raise ValueError(
            f"Unknown output format '{name}'. "
            f"Choose from: {', '.join(member.value for member in cls)}"
        )


_PEP440_PRE_RELEASE = {
    "alpha": "a",
    "a": "a",
    "beta": "b",
    "b": "b",
    "rc": "rc",
    "c": "rc",
    "pre": "rc",
    "preview": "rc",
}

_LOCAL_SEPARATORS = re.compile(r"[^a-z0-9]+")


def _local_segment(text: str) -> str:
    return _LOCAL_SEPARATORS.sub(".", text.lower()).strip(".")


def _trailing_number(parts: List[str]) -> int:
    for part in reversed(parts):
        if part.isdigit():
            return int(part)
    return 0


def to_pep440(version: SemanticVersion) -> str:
    """
    Render a semantic version as a PEP 440 version.

    alpha/beta/rc labels become pre-release segments (1.2.0-beta.3 -> 1.2.0b3),
    any other label becomes a dev release with the label in the local segment.
    Build metadata is appended to the local segment.

    Raises:
        VersionFormatError: If the result is not a valid PEP 440 version
    """
    text = version.major_minor_patch()
    local: List[str] = []

    if version.pre_release:
        parts = version.pre_release.split(".")
        pre_tag = _PEP440_PRE_RELEASE.get(parts[0].lower())
        if pre_tag is not None:
            text += f"{pre_tag}{_trailing_number(parts[1:])}"
        else:
            text += f".dev{_trailing_number(parts)}"
            local.append(_local_segment(version.pre_release))

    if version.build:
        local.append(_local_segment(version.build))

    local = [segment for segment in local if segment]
    if local:
        text += "+" + ".".join(local)

    try:
        return str(Version(text))
    except InvalidVersion as e:
        raise VersionFormatError(text, "PEP 440") from e


def version_variables(resolution: VersionResolution) -> Dict[str, Any]:
    """The version variables exposed by the json format."""
    version = resolution.version
    pre_release = version.pre_release or ""
    build = version.build or ""
    semver = version.major_minor_patch() + (f"-{pre_release}" if pre_release else "")

    return {
        "Major": version.major,
        "Minor": version.minor,
        "Patch": version.patch,
        "PreReleaseTag": pre_release,
        "PreReleaseTagWithDash": f"-{pre_release}" if pre_release else "",
        "BuildMetaData": build,
        "BuildMetaDataPadded": f"+{build}" if build else "",
        "MajorMinorPatch": version.major_minor_patch(),
        "SemVer": semver,
        "FullSemVer": str(version),
        "InformationalVersion": str(version),
        "AssemblySemVer": version.assembly_sem_ver(),
        "AssemblySemFileVer": version.assembly_sem_ver(),
        "BranchName": resolution.branch,
        "EscapedBranchName": sanitize_branch_name(resolution.branch),
        "Sha": resolution.sha,
        "ShortSha": resolution.short_sha,
        "VersionSourceSha": resolution.base.source_commit or resolution.sha,
        "CommitsSinceVersionSource": resolution.commit_count,
        "CommitDate": resolution.commit_date,
    }


def format_version(
    resolution: VersionResolution,
    output_format: Union[OutputFormat, str] = OutputFormat.text,
    indent: Optional[int] = 2,
) -> str:
    """
    Render a resolution in the requested format.

    Args:
        resolution: Result of VersionCalculator.calculate
        output_format: One of OutputFormat (case-insensitive name accepted)
        indent: JSON indentation

    Returns:
        The rendered version
    """
    output_format = OutputFormat.from_name(output_format)
    version = resolution.version

    if output_format == OutputFormat.json:
        return json.dumps(version_variables(resolution), indent=indent)
    if output_format in (OutputFormat.assembly_sem_ver, OutputFormat.assembly_sem_file_ver):
        return version.assembly_sem_ver()
    if output_format == OutputFormat.pep440:
        return to_pep440(version)
    return str(version)
