"""
Unit tests for the file scanner module.

These tests cover:
- Recursive directory walking
- Default and user ignore patterns, .gitignore and .dockerignore files
- Kind filters
- Explicit file and missing path handling
"""

import pytest
from pathlib import Path

from shell_formatter.core.dispatch import FormatKind
from shell_formatter.core.scanner import FileJob, FileScanner, load_ignore_patterns


@pytest.fixture
def project(tmp_path):
    """Create a small project tree."""
    (tmp_path / "a.sh").write_text("echo a\n")
    (tmp_path / "README.md").write_text("# readme\n")
    (tmp_path / "notes.txt").write_text("notes\n")
    (tmp_path / "Dockerfile").write_text("FROM alpine\n")
    (tmp_path / "node_modules").mkdir()
    (tmp_path / "node_modules" / "b.sh").write_text("echo b\n")
    (tmp_path / "scripts").mkdir()
    (tmp_path / "scripts" / "deploy.bash").write_text("echo deploy\n")
    return tmp_path


def names(jobs):
    return sorted(job.relative_path.as_posix() for job in jobs)


class TestFileJob:
    """Test the FileJob class."""

    def test_relative_path(self):
        job = FileJob(path=Path("/src/a/b.sh"), root=Path("/src"))
        assert job.relative_path == Path("a/b.sh")

    def test_relative_path_outside_root(self):
        job = FileJob(path=Path("/elsewhere/b.sh"), root=Path("/src"))
        assert job.relative_path == Path("b.sh")


class TestFileScanner:
    """Test the FileScanner class."""

    def test_scan_directory_skips_default_ignores(self, project):
        jobs = FileScanner().scan_directory(project)

        assert names(jobs) == ["Dockerfile", "README.md", "a.sh", "notes.txt", "scripts/deploy.bash"]

    def test_jobs_are_rooted_at_the_directory(self, project):
        jobs = FileScanner().scan_directory(project)

        assert all(job.root == project.resolve() for job in jobs)

    def test_only_filter_keeps_unsupported_files(self, project):
        scanner = FileScanner(only={FormatKind.SHELL})
        jobs = scanner.scan_directory(project)

        assert names(jobs) == ["a.sh", "notes.txt", "scripts/deploy.bash"]

    def test_skip_filter(self, project):
        scanner = FileScanner(skip={FormatKind.MARKDOWN, FormatKind.DOCKERFILE})
        jobs = scanner.scan_directory(project)

        assert names(jobs) == ["a.sh", "notes.txt", "scripts/deploy.bash"]

    def test_ignore_patterns(self, project):
        scanner = FileScanner(ignore_patterns=["*.md", "scripts"])
        jobs = scanner.scan_directory(project)

        assert names(jobs) == ["Dockerfile", "a.sh", "notes.txt"]

    def test_ignore_pattern_on_relative_path(self, project):
        scanner = FileScanner(ignore_patterns=["scripts/*.bash"])
        jobs = scanner.scan_directory(project)

        assert "scripts/deploy.bash" not in names(jobs)

    def test_should_take(self):
        scanner = FileScanner(only={FormatKind.DOCKERFILE})

        assert scanner.should_take(Path("Dockerfile")) is True
        assert scanner.should_take(Path("a.sh")) is False
        assert scanner.should_take(Path("a.txt")) is True

    def test_collect_explicit_file(self, project):
        jobs = FileScanner().collect([str(project / "scripts" / "deploy.bash")])

        assert len(jobs) == 1
        assert jobs[0].root == (project / "scripts").resolve()
        assert jobs[0].relative_path == Path("deploy.bash")

    def test_collect_explicit_file_respects_filters(self, project):
        jobs = FileScanner(skip={FormatKind.SHELL}).collect([str(project / "a.sh")])
        assert jobs == []

    def test_collect_mixed_paths(self, project):
        jobs = FileScanner().collect([str(project / "scripts"), str(project / "a.sh")])

        assert [job.path.name for job in jobs] == ["deploy.bash", "a.sh"]

    def test_collect_missing_path_is_skipped(self, project):
        jobs = FileScanner().collect([str(project / "missing.sh"), str(project / "a.sh")])

        assert [job.path.name for job in jobs] == ["a.sh"]


class TestIgnoreFiles:
    """Test .gitignore / .dockerignore handling and pattern syntax."""

    def test_gitignore_in_root(self, project):
        (project / ".gitignore").write_text("# build output\nbuild/\ngenerated.sh\n")
        (project / "build").mkdir()
        (project / "build" / "out.sh").write_text("echo out\n")
        (project / "generated.sh").write_text("echo gen\n")
        (project / "scripts" / "generated.sh").write_text("echo gen\n")

        jobs = FileScanner(only={FormatKind.SHELL}).scan_directory(project)

        assert [n for n in names(jobs) if n.endswith(('.sh', '.bash'))] == \
            ["a.sh", "scripts/deploy.bash"]

    def test_dockerignore_in_subdirectory(self, project):
        (project / "scripts" / ".dockerignore").write_text("deploy.bash\n")
        (project / "deploy.bash").write_text("echo root\n")

        jobs = FileScanner().scan_directory(project)

        assert "scripts/deploy.bash" not in names(jobs)
        assert "deploy.bash" in names(jobs)

    def test_negated_pattern(self, project):
        (project / ".gitignore").write_text("*.sh\n!a.sh\n")
        (project / "b.sh").write_text("echo b\n")

        jobs = FileScanner().scan_directory(project)

        assert "a.sh" in names(jobs)
        assert "b.sh" not in names(jobs)

    def test_star_does_not_cross_directories(self, tmp_path):
        (tmp_path / "a" / "b").mkdir(parents=True)
        (tmp_path / "a" / "x.sh").write_text("echo x\n")
        (tmp_path / "a" / "b" / "y.sh").write_text("echo y\n")

        jobs = FileScanner(ignore_patterns=["a/*.sh"]).scan_directory(tmp_path)

        assert names(jobs) == ["a/b/y.sh"]

    def test_load_ignore_patterns(self, tmp_path):
        (tmp_path / ".gitignore").write_text("# comment\n\nbuild/\n")
        (tmp_path / ".dockerignore").write_text("*.log\n")

        assert load_ignore_patterns(tmp_path) == ["build/", "*.log"]
        assert load_ignore_patterns(tmp_path / "missing") == []
