"""Tests for repository discovery, staging, diff and commit in gitscribe.git."""

import subprocess
import sys

import pytest

from gitscribe.git import (
    GitError,
    NotInRepositoryError,
    _run_git_command,
    create_commit,
    filter_diff_lines,
    get_head_commit,
    get_staged_diff,
    get_status,
    has_commits,
    is_usable,
    open_repository,
    stage_all,
    stage_modified,
    stage_untracked,
)

needs_raw_byte_names = pytest.mark.skipif(
    sys.platform != "linux", reason="needs a file system that accepts non-UTF-8 names"
)


class TestRunGitCommand:
    """Tests for _run_git_command function."""

    def test_raises_on_failure(self, mocker):
        """Test that a failing command raises GitError with stderr."""
        mocker.patch(
            "subprocess.run",
            side_effect=subprocess.CalledProcessError(128, ["git"], stderr=b"fatal: bad thing"),
        )

        with pytest.raises(GitError) as exc_info:
            _run_git_command(["status"])
        assert "fatal: bad thing" in str(exc_info.value)

    def test_raises_when_git_missing(self, mocker):
        """Test that a missing git executable raises GitError."""
        mocker.patch("subprocess.run", side_effect=FileNotFoundError())

        with pytest.raises(GitError) as exc_info:
            _run_git_command(["status"])
        assert "not installed" in str(exc_info.value)

    def test_strip_flag(self, mocker):
        """Test that output is stripped only when asked."""
        mock_result = mocker.MagicMock(stdout=b" M file\n")
        mocker.patch("subprocess.run", return_value=mock_result)

        assert _run_git_command(["status"]) == "M file"
        assert _run_git_command(["status"], strip=False) == " M file\n"

    def test_undecodable_output_is_replaced(self, mocker):
        """Test that bytes that are not UTF-8 never raise while decoding."""
        mocker.patch("subprocess.run", return_value=mocker.MagicMock(stdout=b"caf\xe9\r\n"))

        assert _run_git_command(["diff"], strip=False) == "caf\ufffd\r\n"
        assert _run_git_command(["status"], strip=False, errors="surrogateescape") == "caf\udce9\r\n"

    def test_input_round_trips_escaped_bytes(self, mocker):
        """Test that surrogate escapes in input are written as the original bytes."""
        run = mocker.patch("subprocess.run", return_value=mocker.MagicMock(stdout=b""))

        _run_git_command(["add", "--pathspec-from-file=-"], input_text="caf\udce9.txt")

        assert run.call_args.kwargs["input"] == b"caf\xe9.txt"


class TestOpenRepository:
    """Tests for open_repository and is_usable."""

    def test_opens_from_root(self, git_repo):
        """Test opening a repository at its root."""
        handle = open_repository(git_repo)

        assert handle.root == git_repo
        assert handle.git_dir == git_repo / ".git"
        assert not handle.is_bare
        assert is_usable(handle)

    def test_discovers_from_subdirectory(self, git_repo):
        """Test discovery walks up from a nested directory."""
        nested = git_repo / "a" / "b"
        nested.mkdir(parents=True)

        assert open_repository(nested).root == git_repo

    def test_not_in_repository(self, git_repo, temp_dir):
        """Test that a directory outside any repository raises."""
        outside = temp_dir / "outside"
        outside.mkdir()

        with pytest.raises(NotInRepositoryError):
            open_repository(outside)

    def test_missing_path(self, temp_dir):
        """Test that a path that is not a directory raises."""
        with pytest.raises(NotInRepositoryError):
            open_repository(temp_dir / "does-not-exist")

    def test_not_in_repository_is_git_error(self):
        """Test the exception hierarchy."""
        assert issubclass(NotInRepositoryError, GitError)

    def test_bare_repository_is_not_usable(self, git_repo, temp_dir, run_git):
        """Test that bare repositories are opened but not usable."""
        bare = temp_dir / "bare.git"
        run_git(temp_dir, "init", "-q", "--bare", str(bare))

        handle = open_repository(bare)

        assert handle.is_bare
        assert handle.root is None
        assert not is_usable(handle)


class TestHeadCommit:
    """Tests for get_head_commit and has_commits."""

    def test_unborn_branch(self, git_repo):
        """Test that an unborn branch has no head commit."""
        handle = open_repository(git_repo)

        assert get_head_commit(handle) is None
        assert not has_commits(handle)

    def test_existing_commit(self, committed_repo, run_git):
        """Test that HEAD resolves after a commit."""
        handle = open_repository(committed_repo)

        assert get_head_commit(handle) == run_git(committed_repo, "rev-parse", "HEAD").strip()
        assert has_commits(handle)


class TestStaging:
    """Tests for stage_all, stage_modified and stage_untracked."""

    def _prepare(self, repo):
        (repo / "tracked.txt").write_text("changed\n")
        (repo / "new.txt").write_text("new\n")
        return open_repository(repo)

    def test_stage_all(self, committed_repo):
        """Test that stage_all stages new and modified files."""
        handle = self._prepare(committed_repo)

        stage_all(handle)

        snapshot = get_status(handle)
        assert sorted(snapshot.staged) == ["new.txt", "tracked.txt"]
        assert snapshot.untracked == []

    def test_stage_modified_skips_new_paths(self, committed_repo):
        """Test that stage_modified only updates tracked files."""
        handle = self._prepare(committed_repo)

        stage_modified(handle)

        snapshot = get_status(handle)
        assert snapshot.staged == ["tracked.txt"]
        assert snapshot.untracked == ["new.txt"]

    def test_stage_modified_stages_deletions(self, committed_repo):
        """Test that deleting a tracked file is staged."""
        (committed_repo / "tracked.txt").unlink()
        handle = open_repository(committed_repo)

        stage_modified(handle)

        assert get_status(handle).staged == ["tracked.txt"]

    def test_stage_untracked_skips_modified(self, committed_repo):
        """Test that stage_untracked leaves modified tracked files alone."""
        handle = self._prepare(committed_repo)

        staged = stage_untracked(handle)

        snapshot = get_status(handle)
        assert staged == ["new.txt"]
        assert snapshot.staged == ["new.txt"]
        assert snapshot.modified == ["tracked.txt"]

    def test_stage_untracked_with_special_names(self, git_repo):
        """Test that untracked names with spaces and glob characters are staged literally."""
        (git_repo / "with space.txt").write_text("a\n")
        (git_repo / "star*.txt").write_text("b\n")
        handle = open_repository(git_repo)

        stage_untracked(handle)

        assert sorted(get_status(handle).staged) == ["star*.txt", "with space.txt"]

    def test_stage_untracked_nothing_to_do(self, committed_repo):
        """Test that no untracked files is a no-op."""
        assert stage_untracked(open_repository(committed_repo)) == []

    @needs_raw_byte_names
    def test_stage_untracked_non_utf8_name(self, git_repo):
        """Test that a file name that is not valid UTF-8 is staged under its real name."""
        (git_repo / "caf\udce9.txt").write_bytes(b"x\n")
        handle = open_repository(git_repo)

        staged = stage_untracked(handle)

        assert staged == ["caf\udce9.txt"]
        assert get_status(handle).staged == ["caf\udce9.txt"]


class TestFilterDiffLines:
    """Tests for filter_diff_lines function."""

    def test_drops_metadata(self):
        """Test that headers, hunk markers and newline notices are dropped."""
        patch = (
            "diff --git a/f.txt b/f.txt\n"
            "index 1234567..89abcde 100644\n"
            "--- a/f.txt\n"
            "+++ b/f.txt\n"
            "@@ -1,2 +1,2 @@\n"
            " keep\n"
            "-old\n"
            "+new\n"
            "\\ No newline at end of file\n"
            "diff --git a/g.txt b/g.txt\n"
            "new file mode 100644\n"
            "--- /dev/null\n"
            "+++ b/g.txt\n"
            "@@ -0,0 +1 @@\n"
            "+added\n"
        )

        assert filter_diff_lines(patch) == " keep\n-old\n+new\n+added\n"

    def test_empty(self):
        """Test that an empty patch stays empty."""
        assert filter_diff_lines("") == ""

    def test_only_newline_ends_a_line(self):
        """Test that form feeds and carriage returns stay inside their line."""
        patch = "@@ -0,0 +1,2 @@\n+int a;\x0cint b;\n+int c;\r\n"

        assert filter_diff_lines(patch) == "+int a;\x0cint b;\n+int c;\r\n"


class TestStagedDiff:
    """Tests for get_staged_diff function."""

    def test_unborn_branch_diffs_against_empty_tree(self, git_repo, run_git):
        """Test the diff of a first commit shows the whole file as added."""
        (git_repo / "a.txt").write_text("hello\nworld\n")
        run_git(git_repo, "add", "a.txt")

        diff = get_staged_diff(open_repository(git_repo))

        assert diff == "+hello\n+world\n"

    def test_diff_against_head(self, committed_repo, run_git):
        """Test that only staged changes against HEAD appear, with context."""
        (committed_repo / "tracked.txt").write_text("line one\nline 2\n")
        run_git(committed_repo, "add", "tracked.txt")
        (committed_repo / "unstaged.txt").write_text("not staged\n")

        diff = get_staged_diff(open_repository(committed_repo))

        assert diff == " line one\n-line two\n+line 2\n"

    def test_nothing_staged(self, committed_repo):
        """Test that the diff is empty when nothing is staged."""
        assert get_staged_diff(open_repository(committed_repo)) == ""

    def test_context_lines(self, committed_repo, run_git):
        """Test that context_lines controls the context around changes."""
        (committed_repo / "tracked.txt").write_text("line one\nline 2\n")
        run_git(committed_repo, "add", "tracked.txt")

        diff = get_staged_diff(open_repository(committed_repo), context_lines=0)

        assert diff == "-line two\n+line 2\n"

    def test_non_utf8_content(self, git_repo, run_git):
        """Test that a staged Latin-1 file yields a diff instead of an error."""
        (git_repo / "legacy.txt").write_bytes(b"caf\xe9\n")
        run_git(git_repo, "add", "legacy.txt")

        diff = get_staged_diff(open_repository(git_repo))

        assert diff == "+caf\ufffd\n"

    def test_control_characters_keep_lines_intact(self, git_repo, run_git):
        """Test that form feeds and carriage returns do not split or drop lines."""
        (git_repo / "a.c").write_bytes(b"int a;\x0cint b;\nint c;\r\n")
        run_git(git_repo, "add", "a.c")

        diff = get_staged_diff(open_repository(git_repo))

        assert diff == "+int a;\x0cint b;\n+int c;\r\n"


class TestCreateCommit:
    """Tests for create_commit function."""

    def test_root_commit_has_no_parents(self, git_repo, run_git):
        """Test that committing on an unborn branch creates a root commit."""
        (git_repo / "a.txt").write_text("a\n")
        run_git(git_repo, "add", "a.txt")
        expected_tree = run_git(git_repo, "write-tree").strip()

        commit_id = create_commit(open_repository(git_repo), "feat: add a.txt")

        assert run_git(git_repo, "rev-parse", "HEAD").strip() == commit_id
        assert run_git(git_repo, "rev-list", "--parents", "-n", "1", commit_id).split() == [commit_id]
        assert run_git(git_repo, "log", "-1", "--format=%T").strip() == expected_tree
        assert run_git(git_repo, "log", "-1", "--format=%s").strip() == "feat: add a.txt"
        assert run_git(git_repo, "symbolic-ref", "HEAD").strip() == "refs/heads/main"

    def test_commit_parent_is_previous_head(self, committed_repo, run_git):
        """Test that a commit's single parent is the prior HEAD and its tree the index tree."""
        previous = run_git(committed_repo, "rev-parse", "HEAD").strip()
        (committed_repo / "b.txt").write_text("b\n")
        run_git(committed_repo, "add", "b.txt")
        expected_tree = run_git(committed_repo, "write-tree").strip()

        commit_id = create_commit(open_repository(committed_repo), "feat: add b.txt\n\nWith a body.")

        parents = run_git(committed_repo, "rev-list", "--parents", "-n", "1", commit_id).split()
        assert parents == [commit_id, previous]
        assert run_git(committed_repo, "log", "-1", "--format=%T").strip() == expected_tree
        assert run_git(committed_repo, "log", "-1", "--format=%b").strip() == "With a body."
        assert run_git(committed_repo, "log", "-1", "--format=%an <%ae>").strip() == (
            "Test User <test@example.com>"
        )

    def test_commit_clears_staged_state(self, committed_repo, run_git):
        """Test that status is clean after committing the staged change."""
        (committed_repo / "b.txt").write_text("b\n")
        run_git(committed_repo, "add", "b.txt")
        handle = open_repository(committed_repo)

        create_commit(handle, "feat: add b.txt")

        assert get_status(handle).is_empty

    def test_reflog_entry(self, git_repo, run_git):
        """Test that the branch reflog records the commit subject."""
        (git_repo / "a.txt").write_text("a\n")
        run_git(git_repo, "add", "a.txt")

        create_commit(open_repository(git_repo), "feat: add a.txt")

        assert "commit (initial): feat: add a.txt" in run_git(git_repo, "reflog", "-1")
