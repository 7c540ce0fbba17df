"""Tests for PARA folder classification and task status."""

from __future__ import annotations

import pytest

from wikimigrate.domain.para import (
    PARA_FOLDERS,
    ParaFolderType,
    TaskStatus,
    classify_para_folder,
    para_folder_for,
    task_status,
)


class TestClassifyParaFolder:
    @pytest.mark.parametrize(
        ("tags", "expected"),
        [
            (["project"], ParaFolderType.PROJECT),
            (["Area"], ParaFolderType.AREA),
            (["ResourceTopic"], ParaFolderType.RESOURCE),
            (["topic"], ParaFolderType.RESOURCE),
            (["misc"], ParaFolderType.NONE),
            ([], ParaFolderType.NONE),
        ],
    )
    def test_classification(self, tags: list[str], expected: ParaFolderType) -> None:
        assert classify_para_folder(tags) is expected

    def test_project_beats_area_and_resource(self) -> None:
        assert classify_para_folder(["resource", "area", "project"]) is ParaFolderType.PROJECT

    def test_area_beats_resource(self) -> None:
        assert classify_para_folder(["resource", "area"]) is ParaFolderType.AREA


class TestTaskStatus:
    def test_open_task(self) -> None:
        assert task_status(["task"]) is TaskStatus.TASK

    def test_done_beats_everything(self) -> None:
        assert task_status(["task", "someday", "Completed"]) is TaskStatus.DONE

    def test_parked(self) -> None:
        assert task_status(["task", "parked"]) is TaskStatus.PARKED

    def test_not_a_task(self) -> None:
        assert task_status(["project"]) is TaskStatus.NONE


class TestParaFolderFor:
    def test_folder_paths(self) -> None:
        assert para_folder_for(["project"]) == "Notes/1 Projects"
        assert para_folder_for(["area"]) == "Notes/2 Areas"
        assert para_folder_for(["resource"]) == "Notes/3 Resources"
        assert para_folder_for([]) == "Notes/Orphans"

    def test_every_bucket_has_a_folder(self) -> None:
        assert set(PARA_FOLDERS) == set(ParaFolderType)
