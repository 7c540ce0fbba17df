"""PARA classification — Projects, Areas, Resources, and task status.

Pure tag rules. The pipeline uses :func:`para_folder_for` to choose the
output subfolder for a document when PARA folders are enabled.
"""

from __future__ import annotations

from enum import StrEnum


class ParaFolderType(StrEnum):
    """PARA bucket for a document."""

    NONE = "none"
    PROJECT = "project"
    AREA = "area"
    RESOURCE = "resource"


class TaskStatus(StrEnum):
    """Task lifecycle derived from tags."""

    NONE = "none"
    TASK = "task"
    DONE = "done"
    PARKED = "parked"


PROJECT_TAGS = frozenset({"project"})
AREA_TAGS = frozenset({"area"})
RESOURCE_TAGS = frozenset({"resourcetopic", "resource", "topic"})

TASK_TAGS = frozenset({"task"})
DONE_TAGS = frozenset({"done", "completed"})
PARKED_TAGS = frozenset({"parked", "someday"})

PARA_FOLDERS: dict[ParaFolderType, str] = {
    ParaFolderType.PROJECT: "Notes/1 Projects",
    ParaFolderType.AREA: "Notes/2 Areas",
    ParaFolderType.RESOURCE: "Notes/3 Resources",
    ParaFolderType.NONE: "Notes/Orphans",
}


def _tag_set(tags: list[str]) -> set[str]:
    return {tag.strip().casefold() for tag in tags}


def classify_para_folder(tags: list[str]) -> ParaFolderType:
    """Classify by tag, in priority order project > area > resource."""
    tag_set = _tag_set(tags)
    if tag_set & PROJECT_TAGS:
        return ParaFolderType.PROJECT
    if tag_set & AREA_TAGS:
        return ParaFolderType.AREA
    if tag_set & RESOURCE_TAGS:
        return ParaFolderType.RESOURCE
    return ParaFolderType.NONE


def task_status(tags: list[str]) -> TaskStatus:
    """Derive task status. Done beats parked beats an open task."""
    tag_set = _tag_set(tags)
    if tag_set & DONE_TAGS:
        return TaskStatus.DONE
    if tag_set & PARKED_TAGS:
        return TaskStatus.PARKED
    if tag_set & TASK_TAGS:
        return TaskStatus.TASK
    return TaskStatus.NONE


def para_folder_for(tags: list[str]) -> str:
    """Return the vault-relative folder for a document with *tags*."""
    return PARA_FOLDERS[classify_para_folder(tags)]
