"""Directory walker tests"""

import gc
import logging
import os
import tempfile
import warnings

import pytest

from fsexplorer import (
    DirectoryUnreadable,
    DirectoryWalker,
    NotADirectory,
    PathNotFound,
    list_children,
    search_tree,
    visit,
    walk,
)


def _touch(path, content=b""):
    with open(path, "wb") as f:
        f.write(content)


def _make_sample_tree(root):
    """root/a.txt, root/b.txt, root/sub/a.txt"""
    _touch(os.path.join(root, "a.txt"))
    _touch(os.path.join(root, "b.txt"))
    os.mkdir(os.path.join(root, "sub"))
    _touch(os.path.join(root, "sub", "a.txt"))


class TestListChildren:
    """Listing direct children"""

    def test_list_files_and_directories(self):
        """Should list direct children classified as file or directory"""
        with tempfile.TemporaryDirectory() as tmpdir:
            _make_sample_tree(tmpdir)

            entries = {e.name: e for e in list_children(tmpdir)}
            assert set(entries) == {"a.txt", "b.txt", "sub"}
            assert entries["sub"].is_directory
            assert not entries["a.txt"].is_directory
            assert entries["a.txt"].full_path == os.path.join(tmpdir, "a.txt")

    def test_never_yields_dot_entries(self):
        """Should never yield '.' or '..'"""
        with tempfile.TemporaryDirectory() as tmpdir:
            _make_sample_tree(tmpdir)

            names = [e.name for e in list_children(tmpdir)]
            assert "." not in names
            assert ".." not in names

    def test_is_not_recursive(self):
        """Should not descend into subdirectories"""
        with tempfile.TemporaryDirectory() as tmpdir:
            _make_sample_tree(tmpdir)

            paths = [e.full_path for e in list_children(tmpdir)]
            assert os.path.join(tmpdir, "sub", "a.txt") not in paths
            assert len(paths) == 3

    def test_created_file_listed_as_file(self):
        """Should list a newly created file as a non-directory"""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, "new.txt")
            _touch(path)
            assert os.path.exists(path)

            matches = [e for e in list_children(tmpdir) if e.name == "new.txt"]
            assert len(matches) == 1
            assert matches[0].is_directory is False

    def test_empty_directory(self):
        """Should yield nothing for an empty directory"""
        with tempfile.TemporaryDirectory() as tmpdir:
            assert list(list_children(tmpdir)) == []

    def test_relative_path_yields_absolute_paths(self, monkeypatch):
        """Should report absolute full paths for a relative input"""
        with tempfile.TemporaryDirectory() as tmpdir:
            _make_sample_tree(tmpdir)
            monkeypatch.chdir(tmpdir)

            entries = list(list_children("sub"))
            assert [e.full_path for e in entries] == [os.path.join(tmpdir, "sub", "a.txt")]

    def test_nonexistent_path(self):
        """Should fail with PathNotFound before yielding anything"""
        with tempfile.TemporaryDirectory() as tmpdir:
            missing = os.path.join(tmpdir, "missing")

            with pytest.raises(PathNotFound) as excinfo:
                list_children(missing)
            assert isinstance(excinfo.value, DirectoryUnreadable)
            assert isinstance(excinfo.value, FileNotFoundError)
            assert excinfo.value.code == "ENOENT"
            assert excinfo.value.syscall == "scandir"
            assert excinfo.value.path == missing

    def test_path_is_a_file(self):
        """Should fail with NotADirectory when given a file"""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, "file.txt")
            _touch(path)

            with pytest.raises(NotADirectory) as excinfo:
                list_children(path)
            assert isinstance(excinfo.value, DirectoryUnreadable)

    def test_dangling_symlink_skipped_with_warning(self, caplog):
        """Should skip an entry whose metadata cannot be read and keep going"""
        with tempfile.TemporaryDirectory() as tmpdir:
            _touch(os.path.join(tmpdir, "ok.txt"))
            os.symlink(os.path.join(tmpdir, "gone"), os.path.join(tmpdir, "dangling"))

            with caplog.at_level(logging.WARNING, logger="fsexplorer.walker"):
                names = [e.name for e in list_children(tmpdir)]

            assert names == ["ok.txt"]
            assert "dangling" in caplog.text

    def test_symlink_to_directory_classified_as_directory(self):
        """Should follow symlinks when classifying"""
        with tempfile.TemporaryDirectory() as tmpdir:
            os.mkdir(os.path.join(tmpdir, "real"))
            os.symlink(os.path.join(tmpdir, "real"), os.path.join(tmpdir, "link"))

            entries = {e.name: e for e in list_children(tmpdir)}
            assert entries["link"].is_directory

    def test_early_close_releases_handle(self):
        """Should allow closing the iterator before exhaustion"""
        with tempfile.TemporaryDirectory() as tmpdir:
            _make_sample_tree(tmpdir)

            entries = list_children(tmpdir)
            next(entries)
            entries.close()
            with pytest.raises(StopIteration):
                next(entries)

    def test_close_before_first_item_releases_handle(self):
        """Should release the directory handle of an iterator never started"""
        with tempfile.TemporaryDirectory() as tmpdir:
            _make_sample_tree(tmpdir)

            with warnings.catch_warnings(record=True) as caught:
                warnings.simplefilter("always")
                entries = list_children(tmpdir)
                entries.close()
                with pytest.raises(StopIteration):
                    next(entries)
                del entries

                # Dropped without close
                list_children(tmpdir)
                gc.collect()

            assert not [w for w in caught if issubclass(w.category, ResourceWarning)]

    def test_usable_as_context_manager(self):
        """Should close the handle on leaving a with block"""
        with tempfile.TemporaryDirectory() as tmpdir:
            _make_sample_tree(tmpdir)

            with list_children(tmpdir) as entries:
                first = next(entries)
            assert first.name in {"a.txt", "b.txt", "sub"}
            assert list(entries) == []


class TestSearchTree:
    """Recursive search by file name"""

    def test_finds_matches_at_every_level(self):
        """Should find a.txt in the root and in sub/"""
        with tempfile.TemporaryDirectory() as tmpdir:
            _make_sample_tree(tmpdir)

            found = set(search_tree(tmpdir, "a.txt"))
            assert found == {
                os.path.join(tmpdir, "a.txt"),
                os.path.join(tmpdir, "sub", "a.txt"),
            }

    def test_exact_match_only(self):
        """Should match names exactly, case-sensitive, without globbing"""
        with tempfile.TemporaryDirectory() as tmpdir:
            _make_sample_tree(tmpdir)
            _touch(os.path.join(tmpdir, "A.TXT"))

            assert list(search_tree(tmpdir, "A.txt")) == []
            assert list(search_tree(tmpdir, "*.txt")) == []
            assert list(search_tree(tmpdir, "a.tx")) == []
            assert list(search_tree(tmpdir, "A.TXT")) == [os.path.join(tmpdir, "A.TXT")]

    def test_directories_never_match(self):
        """Should not report a directory whose name matches"""
        with tempfile.TemporaryDirectory() as tmpdir:
            _make_sample_tree(tmpdir)

            assert list(search_tree(tmpdir, "sub")) == []

    def test_no_match(self):
        """Should yield nothing when no file matches"""
        with tempfile.TemporaryDirectory() as tmpdir:
            _make_sample_tree(tmpdir)

            assert list(search_tree(tmpdir, "nothing.txt")) == []

    def test_deeply_nested_match(self):
        """Should find files many levels down"""
        with tempfile.TemporaryDirectory() as tmpdir:
            deep = os.path.join(tmpdir, "a", "b", "c", "d")
            os.makedirs(deep)
            _touch(os.path.join(deep, "target"))

            assert list(search_tree(tmpdir, "target")) == [os.path.join(deep, "target")]

    def test_nonexistent_root(self):
        """Should fail with PathNotFound when the root is missing"""
        with tempfile.TemporaryDirectory() as tmpdir:
            with pytest.raises(PathNotFound):
                search_tree(os.path.join(tmpdir, "missing"), "a.txt")

    def test_unstarted_search_releases_handle(self):
        """Should release the root handle of a search closed or dropped unstarted"""
        with tempfile.TemporaryDirectory() as tmpdir:
            _make_sample_tree(tmpdir)

            with warnings.catch_warnings(record=True) as caught:
                warnings.simplefilter("always")
                found = search_tree(tmpdir, "a.txt")
                found.close()
                assert list(found) == []
                del found

                search_tree(tmpdir, "a.txt")
                walk(tmpdir)
                gc.collect()

            assert not [w for w in caught if issubclass(w.category, ResourceWarning)]

    def test_search_closed_mid_walk(self):
        """Should stop yielding once closed part way through"""
        with tempfile.TemporaryDirectory() as tmpdir:
            _make_sample_tree(tmpdir)

            found = search_tree(tmpdir, "a.txt")
            assert next(found).endswith("a.txt")
            found.close()
            assert list(found) == []

    def test_symlink_cycle_terminates(self):
        """Should not loop forever on a symlink pointing back up the tree"""
        with tempfile.TemporaryDirectory() as tmpdir:
            _make_sample_tree(tmpdir)
            os.symlink(tmpdir, os.path.join(tmpdir, "sub", "loop"))

            found = sorted(search_tree(tmpdir, "a.txt"))
            assert found == sorted([
                os.path.join(tmpdir, "a.txt"),
                os.path.join(tmpdir, "sub", "a.txt"),
            ])

    def test_max_depth_limits_descent(self):
        """Should stop descending past max_depth"""
        with tempfile.TemporaryDirectory() as tmpdir:
            _make_sample_tree(tmpdir)
            os.makedirs(os.path.join(tmpdir, "sub", "deeper"))
            _touch(os.path.join(tmpdir, "sub", "deeper", "a.txt"))

            shallow = DirectoryWalker(max_depth=0)
            assert list(shallow.search_tree(tmpdir, "a.txt")) == [os.path.join(tmpdir, "a.txt")]

            one_level = DirectoryWalker(max_depth=1)
            assert sorted(one_level.search_tree(tmpdir, "a.txt")) == sorted([
                os.path.join(tmpdir, "a.txt"),
                os.path.join(tmpdir, "sub", "a.txt"),
            ])

    def test_negative_max_depth_rejected(self):
        """Should reject a negative depth limit"""
        with pytest.raises(ValueError):
            DirectoryWalker(max_depth=-1)

    @pytest.mark.skipif(os.geteuid() == 0, reason="root ignores directory permissions")
    def test_unreadable_subdirectory_skipped(self):
        """Should skip a subtree it cannot read and keep searching"""
        with tempfile.TemporaryDirectory() as tmpdir:
            _make_sample_tree(tmpdir)
            locked = os.path.join(tmpdir, "locked")
            os.mkdir(locked)
            _touch(os.path.join(locked, "a.txt"))
            os.chmod(locked, 0)
            try:
                found = set(search_tree(tmpdir, "a.txt"))
            finally:
                os.chmod(locked, 0o755)

            assert found == {
                os.path.join(tmpdir, "a.txt"),
                os.path.join(tmpdir, "sub", "a.txt"),
            }


class TestWalk:
    """Pre-order traversal and per-entry callbacks"""

    def test_directory_before_its_contents(self):
        """Should yield each directory before the entries inside it"""
        with tempfile.TemporaryDirectory() as tmpdir:
            _make_sample_tree(tmpdir)

            paths = [e.full_path for e in walk(tmpdir)]
            sub = os.path.join(tmpdir, "sub")
            assert paths.index(sub) < paths.index(os.path.join(sub, "a.txt"))
            assert len(paths) == 4

    def test_subtree_finished_before_next_sibling(self):
        """Should visit a whole subtree before moving to the next sibling"""
        with tempfile.TemporaryDirectory() as tmpdir:
            for name in ("one", "two"):
                os.makedirs(os.path.join(tmpdir, name, "inner"))
                _touch(os.path.join(tmpdir, name, "inner", "f"))

            paths = [e.full_path for e in walk(tmpdir)]
            top = [p for p in paths if os.path.dirname(p) == tmpdir]
            first, second = top
            first_subtree = [p for p in paths if p.startswith(first + os.sep)]
            assert paths.index(second) > max(paths.index(p) for p in first_subtree)

    def test_visit_calls_action_per_entry(self):
        """Should call the action once per entry and return the count"""
        with tempfile.TemporaryDirectory() as tmpdir:
            _make_sample_tree(tmpdir)

            seen = []
            count = visit(tmpdir, seen.append)
            assert count == 4
            assert {e.name for e in seen} == {"a.txt", "b.txt", "sub"}
            assert sum(1 for e in seen if e.is_directory) == 1
