"""Tests for allowed-root construction and segment-bounded containment."""

from pathlib import Path

import pytest

from fsgate.core.errors import ConfigError
from fsgate.core.roots import (
    AllowedRoots,
    build_allowed_roots,
    canonicalize,
    expand_home,
    is_within,
    load_allowed_roots,
)


class TestExpandHome:
    """Tests for leading-tilde expansion."""

    def test_bare_tilde(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("HOME", str(tmp_path))
        assert expand_home("~") == str(tmp_path)

    def test_tilde_slash(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("HOME", str(tmp_path))
        assert expand_home("~/notes/a.txt") == f"{tmp_path}/notes/a.txt"

    def test_tilde_user_untouched(self):
        assert expand_home("~someone/file") == "~someone/file"

    def test_plain_path_untouched(self):
        assert expand_home("/srv/data") == "/srv/data"


class TestCanonicalize:
    """Tests for canonical path construction."""

    def test_relative_resolves_against_cwd(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.chdir(tmp_path)
        assert canonicalize("sub/file.txt") == Path.cwd() / "sub" / "file.txt"

    def test_dot_segments_collapsed(self):
        assert canonicalize("/srv/./data/../data/file.txt") == Path("/srv/data/file.txt")

    def test_trailing_separator_removed(self):
        assert canonicalize("/srv/data/") == Path("/srv/data")

    def test_symlinks_not_followed(self, tmp_path: Path):
        target = tmp_path / "target"
        target.mkdir()
        link = tmp_path / "link"
        link.symlink_to(target)
        assert canonicalize(str(link)) == link


class TestIsWithin:
    """Containment compares path segments, not string prefixes."""

    def test_equal_paths(self):
        assert is_within(Path("/data"), Path("/data"))

    def test_descendant(self):
        assert is_within(Path("/data/a/b.txt"), Path("/data"))

    def test_sibling_with_shared_prefix(self):
        assert not is_within(Path("/data-other/file.txt"), Path("/data"))

    def test_parent_not_within_child(self):
        assert not is_within(Path("/"), Path("/data"))

    def test_filesystem_root_contains_everything(self):
        assert is_within(Path("/etc/passwd"), Path("/"))


class TestBuildAllowedRoots:
    """Tests for startup validation of allowed directories."""

    @pytest.mark.asyncio
    async def test_valid_directories(self, tmp_path: Path):
        a = tmp_path / "a"
        b = tmp_path / "b"
        a.mkdir()
        b.mkdir()

        roots = await build_allowed_roots([str(a), str(b)])

        assert isinstance(roots, AllowedRoots)
        assert roots.paths == (a, b)
        assert len(roots) == 2

    @pytest.mark.asyncio
    async def test_regular_file_rejected(self, tmp_path: Path):
        f = tmp_path / "file.txt"
        f.write_text("x")
        with pytest.raises(ConfigError, match="is not a directory"):
            await build_allowed_roots([str(f)])

    @pytest.mark.asyncio
    async def test_missing_directory_rejected(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="does not exist"):
            await build_allowed_roots([str(tmp_path / "missing")])

    @pytest.mark.asyncio
    async def test_all_failures_reported(self, tmp_path: Path):
        f = tmp_path / "file.txt"
        f.write_text("x")
        missing = tmp_path / "missing"

        with pytest.raises(ConfigError) as exc_info:
            await build_allowed_roots([str(tmp_path), str(f), str(missing)])

        assert str(f) in str(exc_info.value)
        assert str(missing) in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_empty_list_rejected(self):
        with pytest.raises(ConfigError, match="At least one"):
            await build_allowed_roots([])

    @pytest.mark.asyncio
    async def test_duplicates_collapsed_in_order(self, tmp_path: Path):
        a = tmp_path / "a"
        b = tmp_path / "b"
        a.mkdir()
        b.mkdir()

        roots = await build_allowed_roots([str(b), f"{a}/", str(b / ".." / "b"), str(a)])

        assert roots.paths == (b, a)

    @pytest.mark.asyncio
    async def test_home_relative_root(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("HOME", str(tmp_path))
        (tmp_path / "notes").mkdir()

        roots = await build_allowed_roots(["~/notes"])

        assert roots.paths == (tmp_path / "notes",)

    @pytest.mark.asyncio
    async def test_symlinked_root_keeps_real_path(self, tmp_path: Path):
        real = tmp_path / "real"
        real.mkdir()
        link = tmp_path / "link"
        link.symlink_to(real)

        roots = await build_allowed_roots([str(link)])

        assert roots.paths == (link,)
        assert roots.contains(real.resolve() / "file.txt")
        assert roots.contains(link / "file.txt")

    def test_sync_wrapper(self, tmp_path: Path):
        roots = load_allowed_roots([str(tmp_path)])
        assert roots.paths == (tmp_path,)

    def test_roots_are_immutable(self, tmp_path: Path):
        roots = load_allowed_roots([str(tmp_path)])
        with pytest.raises(AttributeError):
            roots.roots = ()  # type: ignore[misc]
