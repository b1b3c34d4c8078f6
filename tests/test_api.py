"""
Tests for the AliasLint facade: files, projects and fixes.
"""

import shutil
from pathlib import Path

import pytest

from aliaslint.analysis.models import ErrorCategory
from aliaslint.api import AliasLint, iter_python_files
from aliaslint.config import AliasLintConfig

FIXTURE_PROJECT = Path(__file__).parent / "fixtures" / "sample_project"

FIXED_SAMPLE = '''"""
Sample module for testing alias analysis.

Uses a non-preferred alias for numpy and no alias for matplotlib.pyplot.
"""

import numpy as np
import matplotlib.pyplot as plt


def build(values):
    """Stack values and plot them."""
    data = np.asarray(values)
    plt.plot(data)
    return np.mean(data)
'''


@pytest.fixture
def project(tmp_path):
    """A writable copy of the sample project."""
    target = tmp_path / "sample_project"
    shutil.copytree(FIXTURE_PROJECT, target)
    return target


@pytest.fixture
def config():
    return AliasLintConfig.from_file(str(FIXTURE_PROJECT / "aliaslint.yaml"))


@pytest.fixture
def linter(config):
    return AliasLint(config)


class TestIterPythonFiles:
    def test_skips_cache_dirs_and_non_python(self, tmp_path):
        (tmp_path / "pkg").mkdir()
        (tmp_path / "pkg" / "a.py").write_text("")
        (tmp_path / "__pycache__").mkdir()
        (tmp_path / "__pycache__" / "b.py").write_text("")
        (tmp_path / "notes.txt").write_text("")

        files = [p.relative_to(tmp_path.resolve()).as_posix() for p in iter_python_files(tmp_path)]
        assert files == ["pkg/a.py"]

    def test_exclude_patterns(self, tmp_path):
        (tmp_path / "build").mkdir()
        (tmp_path / "build" / "gen.py").write_text("")
        (tmp_path / "main.py").write_text("")

        files = [p.name for p in iter_python_files(tmp_path, exclude=["build/*"])]
        assert files == ["main.py"]

    def test_single_file_root(self, tmp_path):
        path = tmp_path / "one.py"
        path.write_text("")
        assert list(iter_python_files(path)) == [path.resolve()]


class TestCheck:
    def test_check_source_without_policy(self):
        assert AliasLint().check_source("import numpy as whatever\n") == []

    def test_explicit_policy_overrides_config(self, config):
        from aliaslint.analysis.policy import AliasPolicy

        linter = AliasLint(config, policy=AliasPolicy.from_mapping({"sys": "system"}))
        diagnostics = linter.check_source("import numpy as npy\nimport sys as s\n")
        assert [d.target_alias for d in diagnostics] == ["system"]

    def test_check_project(self, linter, project):
        result = linter.check_project(project)

        assert result.success
        assert result.metadata["files_checked"] == 2
        assert result.metadata["diagnostics"] == 2
        assert result.metadata["fixable"] == 2

        diagnostics = result.diagnostics
        assert {Path(d.file_path).name for d in diagnostics} == {"sample_module.py"}
        assert [d.category for d in diagnostics] == [
            ErrorCategory.INCORRECT_ALIAS,
            ErrorCategory.MISSING_ALIAS,
        ]
        assert [d.target_alias for d in diagnostics] == ["np", "plt"]

    def test_check_project_in_parallel(self, config, project):
        config.analysis_settings.jobs = 2
        result = AliasLint(config).check_project(project)

        assert len(result.reports) == 2
        assert result.metadata["diagnostics"] == 2

    def test_syntax_errors_are_reported_per_file(self, linter, project):
        (project / "broken.py").write_text("def broken(:\n    pass\n")
        result = linter.check_project(project)

        assert not result.success
        assert len(result.errors) == 1
        assert "broken.py" in result.errors[0]
        assert "Syntax error" in result.errors[0]
        assert result.metadata["diagnostics"] == 2

    def test_exclude_argument(self, linter, project):
        result = linter.check_project(project, exclude=["sample_*.py"])

        assert result.metadata["files_checked"] == 1
        assert result.diagnostics == []

    def test_oversized_files_are_skipped(self, config, project):
        config.analysis_settings.max_file_size = 10
        result = AliasLint(config).check_project(project)

        assert result.success
        assert result.diagnostics == []

    def test_missing_project_path(self, linter, tmp_path):
        result = linter.check_project(tmp_path / "nowhere")

        assert not result.success
        assert "does not exist" in result.errors[0]

    def test_result_to_dict_only_lists_interesting_reports(self, linter, project):
        data = linter.check_project(project).to_dict()

        assert len(data["reports"]) == 1
        assert data["reports"][0]["diagnostics"][0]["category"] == "IncorrectAlias"


class TestFix:
    def test_fix_source(self, linter):
        assert linter.fix_source("import numpy\nnumpy.ones(1)\n") == "import numpy as np\nnp.ones(1)\n"

    def test_dry_run_leaves_files_untouched(self, linter, project):
        before = (project / "sample_module.py").read_text()
        result = linter.fix_project(project)

        assert result.success
        assert result.files_changed == 1
        assert result.fixes_applied == 2
        assert (project / "sample_module.py").read_text() == before

        change = result.changes_made[0]
        assert "+import numpy as np\n" in change["diff"]
        assert change["diff"].startswith("--- a/sample_module.py")

    def test_write_applies_fixes(self, linter, project):
        result = linter.fix_project(project, write=True)

        assert result.fixes_applied == 2
        assert (project / "sample_module.py").read_text() == FIXED_SAMPLE
        assert linter.check_project(project).diagnostics == []

    def test_fix_file_without_diagnostics(self, linter, project):
        change = linter.fix_file(project / "another_module.py", write=True)

        assert change["applied"] == 0
        assert not change["changed"]
        assert change["error"] is None

    def test_write_keeps_crlf_line_endings(self, linter, tmp_path):
        path = tmp_path / "windows.py"
        path.write_bytes(b"import numpy\r\nnumpy.ones(1)\r\n")

        change = linter.fix_file(path, write=True)

        assert change["applied"] == 1
        assert path.read_bytes() == b"import numpy as np\r\nnp.ones(1)\r\n"
