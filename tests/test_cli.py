"""
Tests for the command-line interface.
"""

import json
import shutil

import pytest

from uiauto_objrepo.cli import main


class TestCli:
    """Tests for uiauto-objrepo commands."""

    def test_resolve(self, repo_dir, capsys):
        rc = main(["resolve", "--repo", str(repo_dir), "navigation_menu"])
        assert rc == 0
        assert capsys.readouterr().out.strip() == "CSS nav.navbar"

    def test_resolve_chain_json(self, repo_dir, capsys):
        rc = main(["resolve", "--repo", str(repo_dir), "--chain", "--json", "Page_Home/search_box"])
        assert rc == 0
        chain = json.loads(capsys.readouterr().out)
        assert [item["kind"] for item in chain] == ["BASIC", "CSS", "XPATH"]

    def test_list(self, repo_dir, capsys):
        assert main(["list", "--repo", str(repo_dir)]) == 0
        assert capsys.readouterr().out.split() == ["Page_Home/navigation_menu", "Page_Home/search_box"]

    def test_show_json(self, repo_dir, capsys):
        assert main(["show", "--repo", str(repo_dir), "--json", "search_box"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["selected_strategy"] == "BASIC"
        assert data["scope"] == "Page_Home"

    def test_match(self, repo_dir, capsys):
        rc = main(["match", "--repo", str(repo_dir), "search_box", "-a", "tag=input", "-a", "type=search"])
        assert rc == 0
        assert "MATCH" in capsys.readouterr().out

    def test_no_match_exit_code(self, repo_dir):
        assert main(["match", "--repo", str(repo_dir), "search_box", "-a", "tag=div"]) == 2

    def test_unknown_element(self, repo_dir, capsys):
        assert main(["resolve", "--repo", str(repo_dir), "footer"]) == 1
        assert "footer" in capsys.readouterr().err

    def test_validate_ok(self, repo_dir, capsys):
        assert main(["validate", "--repo", str(repo_dir), "--json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data == {"status": "valid", "elements": 2, "issues": []}

    def test_validate_reports_bad_records(self, repo_dir, tmp_path, capsys):
        root = tmp_path / "Object Repository"
        shutil.copytree(repo_dir, root)
        text = (root / "Page_Home" / "search_box.rs").read_text(encoding="utf-8")
        (root / "Page_Home" / "search_copy.rs").write_text(text.replace("34567890-3456", "99999999-3456"), encoding="utf-8")

        assert main(["validate", "--repo", str(root)]) == 1

        assert main(["validate", "--repo", str(root), "--skip-invalid", "--json"]) == 2
        data = json.loads(capsys.readouterr().out)
        assert data["elements"] == 2
        assert "duplicate name" in data["issues"][0]["violation"]

    def test_bad_repo_path(self, tmp_path):
        assert main(["list", "--repo", str(tmp_path / "objects.txt")]) == 1


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
