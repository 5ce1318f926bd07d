"""
Tests for spawning child processes: program lookup, environment,
working directory and the '+ command' invocation log.
"""

import errno
import os
from unittest.mock import patch

import pytest

from cradle import (
    ChildIoError,
    Context,
    CurrentDir,
    LogCommand,
    MemorySink,
    NoArgumentsGiven,
    Output,
    ProcessSpawnFailed,
    SetVar,
    Sink,
    Split,
    cmd,
    cmd_result,
    cmd_unit,
)


def find_unused_environment_variable() -> str:
    i = 0
    while True:
        key = f"CRADLE_TEST_VARIABLE_{i}"
        if key not in os.environ:
            return key
        i += 1


class TestSpawn:
    """Starting the OS process."""

    def test_executes_a_command(self, tmp_path, context):
        cmd_unit("touch", str(tmp_path / "foo"), context=context)
        assert (tmp_path / "foo").exists()

    def test_arguments_are_not_split(self, tmp_path, context):
        cmd_unit("touch", str(tmp_path / "foo bar"), context=context)
        assert (tmp_path / "foo bar").exists()

    def test_executable_cannot_be_found(self, context):
        _, error = cmd_result("does-not-exist", context=context)
        assert isinstance(error, ProcessSpawnFailed)
        assert error.program == "does-not-exist"
        assert str(error) == "does-not-exist:\n  No such file or directory (os error 2)"
        assert isinstance(error.os_error, FileNotFoundError)

    def test_includes_full_command_on_missing_executables(self, context):
        _, error = cmd_result(Split("does-not-exist foo bar"), context=context)
        assert str(error) == "does-not-exist foo bar:\n  No such file or directory (os error 2)"

    def test_permission_denied(self, tmp_path, context):
        script = tmp_path / "script"
        script.write_text("#!/bin/sh\necho hi\n")
        script.chmod(0o644)
        with pytest.raises(ProcessSpawnFailed, match="Permission denied"):
            cmd(str(script), context=context)

    def test_path_as_executable(self, tmp_path, context):
        script = tmp_path / "test-script"
        script.write_text("#!/bin/sh\necho test-output\n")
        script.chmod(0o755)
        assert cmd(script, output=Output.STDOUT_TRIMMED, context=context) == "test-output"

    def test_no_arguments_given(self, context):
        with patch("cradle.exec.launcher.subprocess.Popen") as mock_popen, \
                patch("cradle.exec.relay.threading.Thread") as mock_thread:
            with pytest.raises(NoArgumentsGiven) as exc_info:
                cmd([], LogCommand, context=context)

        assert str(exc_info.value) == "no arguments given"
        mock_popen.assert_not_called()
        mock_thread.assert_not_called()
        assert context.stderr.text() == ""


class TestEnvironment:
    """Environment inheritance and overrides."""

    def test_adds_variables(self, helper, context):
        assert cmd(helper, "print env", "FOO", SetVar("FOO", "bar"),
                   output=Output.STDOUT_TRIMMED, context=context) == "bar"

    def test_multiple_variables(self, context):
        output = cmd("sh", "-c", "echo $FOO-$BAR", SetVar("FOO", "a"), SetVar("BAR", "b"),
                     output=Output.STDOUT_TRIMMED, context=context)
        assert output == "a-b"

    def test_inherits_the_environment(self, helper, context, monkeypatch):
        key = find_unused_environment_variable()
        monkeypatch.setenv(key, "foo")
        assert cmd(helper, "print env", key, output=Output.STDOUT_TRIMMED, context=context) == "foo"

    def test_overrides_parent_variables(self, helper, context, monkeypatch):
        key = find_unused_environment_variable()
        monkeypatch.setenv(key, "foo")
        assert cmd(helper, "print env", key, SetVar(key, "bar"),
                   output=Output.STDOUT_TRIMMED, context=context) == "bar"

    def test_later_overrides_win(self, helper, context):
        assert cmd(helper, "print env", "FOO", SetVar("FOO", "a"), SetVar("FOO", "b"),
                   output=Output.STDOUT_TRIMMED, context=context) == "b"

    def test_empty_values(self, helper, context):
        assert cmd(helper, "is set", "FOO", SetVar("FOO", ""),
                   output=Output.STDOUT_TRIMMED, context=context) == "x"

    def test_context_environment_is_the_base(self, helper, context):
        base = dict(os.environ)
        base.pop("HOME", None)
        base["BASE"] = "from-context"
        context.environment = base
        assert cmd(helper, "print env", "BASE", output=Output.STDOUT_TRIMMED, context=context) == "from-context"
        assert cmd(helper, "print env", "HOME", output=Output.STDOUT_TRIMMED, context=context) == "<unset>"


class TestWorkingDirectory:
    """CurrentDir sets the child's working directory."""

    def test_sets_the_working_directory(self, tmp_path, context):
        (tmp_path / "dir").mkdir()
        (tmp_path / "dir" / "file").write_text("foo")
        (tmp_path / "file").write_text("wrong file")
        output = cmd(Split("cat file"), CurrentDir(tmp_path / "dir"),
                     output=Output.STDOUT_UNTRIMMED, context=context)
        assert output == "foo"

    @pytest.mark.parametrize("as_type", [str, os.fspath, lambda p: p])
    def test_accepts_strings_and_paths(self, tmp_path, context, as_type):
        cmd_unit("true", CurrentDir(as_type(tmp_path)), context=context)

    def test_context_working_directory(self, tmp_path, context):
        (tmp_path / "file").write_text("from context")
        context.working_directory = str(tmp_path)
        assert cmd("cat", "file", output=Output.STDOUT_UNTRIMMED, context=context) == "from context"


class TestLogCommand:
    """The '+ command' line written before spawning."""

    def test_logs_simple_commands(self, context):
        cmd_unit(LogCommand, "true", context=context)
        assert context.stderr.text() == "+ true\n"

    def test_logs_commands_with_arguments(self, context):
        cmd_unit(LogCommand(), Split("echo foo"), context=context)
        assert context.stderr.text() == "+ echo foo\n"
        assert context.stdout.text() == "foo\n"

    def test_quotes_arguments_with_spaces(self, context):
        cmd_unit(LogCommand, "echo", "foo bar", context=context)
        assert context.stderr.text() == "+ echo 'foo bar'\n"

    def test_quotes_empty_arguments(self, context):
        cmd_unit(LogCommand, "echo", "", context=context)
        assert context.stderr.text() == "+ echo ''\n"

    def test_invalid_utf8_is_logged_lossily(self, context):
        cmd_unit(LogCommand, "echo", b"foo\x80bar", context=context)
        assert context.stderr.text() == "+ echo foo�bar\n"

    def test_logged_even_when_spawn_fails(self, context):
        _, error = cmd_result(LogCommand, "does-not-exist", context=context)
        assert isinstance(error, ProcessSpawnFailed)
        assert context.stderr.text() == "+ does-not-exist\n"

    def test_failed_log_write_is_a_child_io_error(self):
        class BrokenPipeSink(Sink):
            def _write(self, data: bytes) -> None:
                raise BrokenPipeError(errno.EPIPE, "Broken pipe")

        context = Context(stdout=MemorySink(), stderr=BrokenPipeSink())
        with patch("cradle.exec.launcher.subprocess.Popen") as mock_popen:
            _, error = cmd_result(LogCommand, "true", context=context)

        assert isinstance(error, ChildIoError)
        assert str(error) == "true:\n  Broken pipe (os error 32)"
        assert isinstance(error.os_error, BrokenPipeError)
        mock_popen.assert_not_called()
