"""
Tests for the hmum command line
"""
import pytest
from typer.testing import CliRunner

from helm_update_manager.cli import runner as cli_runner
from helm_update_manager.cli.app import app
from helm_update_manager.config.settings import Settings

from conftest import REPO_URL

DSF = f"""\
helmRepos:
  stable: "{REPO_URL}"
apps:
  web:
    chart: stable/nginx
    version: "1.0.0"
    valuesFile: web-values.yaml
"""


@pytest.fixture
def cli(fetcher, monkeypatch):
    monkeypatch.setattr(cli_runner, "HttpFetcher", lambda timeout=None: fetcher)
    return CliRunner()


@pytest.fixture
def dsf(write_dsf, chart_repo):
    chart_repo.add_version("nginx", "2.0.0", "replicas: 1\nimage: nginx:2.0\n")
    chart_repo.add_version("nginx", "1.0.0", "replicas: 1\nimage: nginx:1.0\n")
    path = write_dsf(DSF)
    (path.parent / "web-values.yaml").write_text("ingress: true\nreplicas: 1\nimage: nginx:1.0\n")
    return path


class TestCheckCommand:
    def test_reports_without_changing(self, cli, dsf):
        before = dsf.read_bytes()
        result = cli.invoke(app, ["check", "-f", str(dsf)])
        assert result.exit_code == 0, result.output
        assert "2.0.0" in result.output
        assert dsf.read_bytes() == before

    def test_json_output(self, cli, dsf):
        result = cli.invoke(app, ["check", "-f", str(dsf), "-o", "json"])
        assert result.exit_code == 0, result.output
        assert '"update-available"' in result.output
        assert '"major"' in result.output


class TestUpdateCommand:
    def test_updates_pin_and_values(self, cli, dsf):
        result = cli.invoke(app, ["update", "-f", str(dsf), "--merge-tool", "builtin"])
        assert result.exit_code == 0, result.output
        assert 'version: "2.0.0"' in dsf.read_text()
        assert "nginx:2.0" in (dsf.parent / "web-values.yaml").read_text()

    def test_default_backend_needs_no_git(self, cli, dsf, monkeypatch, tmp_path):
        """Without --merge-tool the in-process merge is used"""
        monkeypatch.delenv("HMUM_MERGE_TOOL", raising=False)
        monkeypatch.setattr(cli_runner, "settings", Settings(git_binary=str(tmp_path / "no-such-git")))
        result = cli.invoke(app, ["update", "-f", str(dsf)])
        assert result.exit_code == 0, result.output
        assert "nginx:2.0" in (dsf.parent / "web-values.yaml").read_text()

    def test_error_exits_non_zero(self, cli, write_dsf, chart_repo):
        chart_repo.add_version("nginx", "2.0.0")
        path = write_dsf(DSF.replace("stable/nginx", "stable/missing"))
        result = cli.invoke(app, ["update", "-f", str(path), "--merge-tool", "builtin"])
        assert result.exit_code == 1
        assert "missing" in result.output

    def test_unknown_merge_tool(self, cli, dsf):
        result = cli.invoke(app, ["update", "-f", str(dsf), "--merge-tool", "meld"])
        assert result.exit_code == 2

    def test_requires_a_file(self, cli):
        result = cli.invoke(app, ["update"])
        assert result.exit_code != 0
