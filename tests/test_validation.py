import pytest

from perfetto_build.errors import EXIT_ENVIRONMENT, PathFormatError, PathNotFoundError, UsageError
from perfetto_build.validation import canonicalize, ensure_absolute, validate_arguments


@pytest.mark.parametrize("args", [[], ["/a", "/b"], ["/a", "/b", "/c"]])
def test_wrong_argument_count_is_a_usage_error(args):
    with pytest.raises(UsageError) as excinfo:
        validate_arguments(args, windows=False)
    assert excinfo.value.exit_code == EXIT_ENVIRONMENT
    assert "exactly 1 argument" in str(excinfo.value)


@pytest.mark.parametrize("path", ["relative/perfetto", "./perfetto", "~/perfetto", "C:\\work\\perfetto"])
def test_posix_paths_must_start_with_slash(path):
    with pytest.raises(PathFormatError):
        ensure_absolute(path, windows=False)


@pytest.mark.parametrize("path", ["/c/work/perfetto", "work\\perfetto", "C:perfetto", "\\\\server\\share"])
def test_windows_paths_need_a_drive_letter(path):
    with pytest.raises(PathFormatError) as excinfo:
        ensure_absolute(path, windows=True)
    assert "C:\\path\\to\\perfetto" in str(excinfo.value)


@pytest.mark.parametrize("path", ["C:\\work\\perfetto", "d:/work/perfetto", "Z:\\"])
def test_windows_drive_paths_are_absolute(path):
    ensure_absolute(path, windows=True)


def test_windows_path_that_does_not_exist(tmp_path):
    with pytest.raises(PathNotFoundError):
        validate_arguments(["C:\\definitely\\not\\here"], windows=True)


def test_missing_directory_is_rejected(tmp_path):
    with pytest.raises(PathNotFoundError) as excinfo:
        validate_arguments([str(tmp_path / "nope")], windows=False)
    assert excinfo.value.exit_code == EXIT_ENVIRONMENT
    assert "Path does not exist" in str(excinfo.value)


def test_regular_file_is_not_a_source_directory(tmp_path):
    target = tmp_path / "file.txt"
    target.write_text("x")
    with pytest.raises(PathNotFoundError):
        validate_arguments([str(target)], windows=False)


def test_valid_directory_is_canonicalized(tmp_path):
    real = tmp_path / "real"
    real.mkdir()
    link = tmp_path / "link"
    link.symlink_to(real)

    result = validate_arguments([str(link / ".." / "real")], windows=False)

    assert result == real.resolve()


def test_canonicalize_keeps_path_when_resolution_fails(monkeypatch, tmp_path):
    def broken_resolve(self, strict=False):
        raise OSError("no resolution here")

    with monkeypatch.context() as m:
        m.setattr("pathlib.Path.resolve", broken_resolve)
        result = canonicalize(str(tmp_path))
    assert str(result) == str(tmp_path)
