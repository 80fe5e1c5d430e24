"""Tests for GvtController."""

import json
import os
import sys

import pytest

from gvt.config.types import GvtConfig
from gvt.core.controller import IO_FAILURE_MESSAGE, NOT_INITIALIZED_MESSAGE, GvtController
from gvt.core.types import ErrorKind


@pytest.fixture
def temp_project(tmp_path):
    """Create a temporary working directory."""
    project = tmp_path / "project"
    project.mkdir()
    (project / "foo.txt").write_text("A")
    return project


@pytest.fixture
def controller(temp_project):
    return GvtController(project_root=temp_project)


class TestScenario:
    def test_full_walkthrough(self, controller, temp_project):
        """init, add, commit, detach, checkout, re-add."""
        store = controller.store

        result = controller.init()
        assert result.success
        assert result.message == "Current directory initialized successfully."
        assert store.current_version() == 0
        assert controller.history().message == "0: GVT initialized."

        result = controller.add("foo.txt")
        assert result.success and result.version == 1
        assert result.message == "File added successfully. File: foo.txt"
        assert len(controller.history_log.entries()) == 2
        assert (store.version_dir(1) / "foo.txt").read_text() == "A"

        (temp_project / "foo.txt").write_text("B")
        result = controller.commit("foo.txt")
        assert result.success and result.version == 2
        assert (store.version_dir(2) / "foo.txt").read_text() == "B"
        assert (temp_project / "foo.txt").read_text() == "B"

        result = controller.detach("foo.txt")
        assert result.success and result.version == 3
        assert not (store.version_dir(3) / "foo.txt").exists()

        result = controller.checkout("1")
        assert result.success
        assert result.message == "Checkout successful for version: 1"
        assert (temp_project / "foo.txt").read_text() == "A"
        assert store.current_version() == 1

        result = controller.add("foo.txt")
        assert not result.success
        assert result.kind is ErrorKind.ALREADY_TRACKED
        assert store.versions() == [0, 1, 2, 3]

        assert controller.validate_system() == {"valid": True, "issues": []}


class TestResults:
    def test_uninitialized_operations(self, controller):
        for result in (
            controller.add("foo.txt"),
            controller.detach("foo.txt"),
            controller.commit("foo.txt"),
            controller.checkout("0"),
            controller.version_info(),
            controller.history(),
            controller.status(),
        ):
            assert not result.success
            assert result.kind is ErrorKind.NOT_INITIALIZED
            assert result.message == NOT_INITIALIZED_MESSAGE
            assert result.exit_code == -2

    def test_init_twice(self, controller):
        controller.init()
        result = controller.init()

        assert result.kind is ErrorKind.ALREADY_INITIALIZED
        assert result.exit_code == 10

    def test_exit_codes_follow_kind(self, controller):
        controller.init()

        assert controller.add("nope.txt").exit_code == 21
        assert controller.commit("nope.txt").exit_code == 51
        assert controller.detach("foo.txt").exit_code == 0
        assert controller.checkout("9").exit_code == 60

    def test_version_info_defaults_to_current(self, controller):
        controller.init()
        controller.add("foo.txt", "Added foo\nwith a longer body")

        result = controller.version_info()

        assert result.success
        assert result.message == "Version: 1\nAdded foo\nwith a longer body"

    def test_version_info_specific_and_invalid(self, controller):
        controller.init()
        controller.add("foo.txt")

        assert controller.version_info("0").message == "Version: 0\nGVT initialized."
        invalid = controller.version_info("abc")
        assert invalid.kind is ErrorKind.INVALID_VERSION
        assert invalid.message == "Invalid version number: abc"

    def test_history_limit(self, controller, temp_project):
        controller.init()
        controller.add("foo.txt", "one\ntwo")
        controller.detach("foo.txt")

        assert controller.history(2).message == (
            "2: File detached successfully. File: foo.txt\n1: one"
        )
        assert controller.history().message.count("\n") == 2

    def test_history_default_limit_from_config(self, temp_project):
        config = GvtConfig.from_dict({"history": {"defaultLimit": 1}})
        controller = GvtController(project_root=temp_project, config=config)
        controller.init()
        controller.add("foo.txt")

        assert controller.history().message == "1: File added successfully. File: foo.txt"
        assert controller.history(5).message.count("\n") == 1

    def test_io_failure_is_reported_generically(self, controller):
        controller.init()
        controller.store.current_file.write_text("not a number")

        result = controller.add("foo.txt")

        assert result.kind is ErrorKind.IO_FAILURE
        assert result.message == IO_FAILURE_MESSAGE
        assert result.exit_code == -3
        assert "not a number" in result.detail

    def test_os_error_is_reported_as_io_failure(self, controller, monkeypatch):
        controller.init()

        def boom(*args, **kwargs):
            raise PermissionError("denied")

        monkeypatch.setattr("gvt.core.snapshot_store.shutil.copytree", boom)
        result = controller.add("foo.txt")

        assert result.kind is ErrorKind.IO_FAILURE
        assert result.detail == "denied"
        assert controller.store.current_version() == 0
        assert controller.store.versions() == [0]

    def test_unencodable_message_is_reported_as_io_failure(self, controller):
        controller.init()

        result = controller.add("foo.txt", "bad \ud800")

        assert result.kind is ErrorKind.IO_FAILURE
        assert result.message == IO_FAILURE_MESSAGE
        assert controller.store.versions() == [0]
        assert controller.validate_system()["valid"]

    @pytest.mark.skipif(sys.platform != "linux", reason="needs a byte-transparent file system")
    def test_undecodable_file_name_gets_one_history_entry(self, controller, temp_project):
        name = os.fsdecode(b"caf\xe9.txt")
        (temp_project / name).write_text("B")
        controller.init()

        result = controller.add(name)

        assert result.success
        assert controller.version_info(1).message == f"Version: 1\nFile added successfully. File: {name}"
        assert controller.validate_system() == {"valid": True, "issues": []}


class TestStatus:
    def test_status_not_initialized(self, controller):
        status = controller.get_status()

        assert not status.initialized
        assert status.current_version is None

    def test_status_after_checkout(self, controller):
        controller.init()
        controller.add("foo.txt")
        controller.detach("foo.txt")
        controller.checkout(1)

        status = controller.get_status()

        assert status.current_version == 1
        assert status.latest_version == 2
        assert status.tracked_files == ["foo.txt"]

    def test_status_message(self, controller):
        controller.init()
        controller.add("foo.txt")

        result = controller.status()

        assert result.success
        assert result.message.splitlines() == [
            "Current version: 1",
            "Latest version: 1",
            "Tracked files: foo.txt",
        ]

    def test_validate_detects_missing_history(self, controller):
        controller.init()
        controller.add("foo.txt")
        controller.history_log.path.write_text("0: GVT initialized.\n")

        result = controller.validate_system()

        assert not result["valid"]
        assert "Versions without history entry: 1" in result["issues"]

    def test_validate_not_initialized(self, controller):
        assert controller.validate_system()["valid"] is False


class TestConfiguration:
    def test_project_config_changes_control_dir(self, temp_project):
        (temp_project / ".gvt.json").write_text(json.dumps({"controlDir": ".history"}))
        controller = GvtController(project_root=temp_project)

        controller.init()

        assert (temp_project / ".history" / "current").read_text() == "0"
        assert not (temp_project / ".gvt").exists()
