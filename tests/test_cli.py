import json
from unittest.mock import patch

import yaml
from click.testing import CliRunner

from petstore_openapi.cli import _parse_query, main
from petstore_openapi.registry.errors import IncompleteDocumentError


class TestCliSpec:
    def test_spec_json_to_file(self, tmp_path):
        output_file = tmp_path / "out" / "openapi.json"
        runner = CliRunner()
        result = runner.invoke(main, ["spec", "-o", str(output_file)])

        assert result.exit_code == 0
        data = json.loads(output_file.read_text(encoding="utf-8"))
        assert data["openapi"] == "3.0.1"
        assert "/pet/findByStatus" in data["paths"]

    def test_spec_yaml_uses_environment_title(self, tmp_path, monkeypatch):
        monkeypatch.setenv("OpenApi__DocTitle", "Home Lab Pets")
        output_file = tmp_path / "openapi.yaml"
        runner = CliRunner()
        result = runner.invoke(main, ["spec", "--format", "yaml", "-o", str(output_file)])

        assert result.exit_code == 0
        data = yaml.safe_load(output_file.read_text(encoding="utf-8"))
        assert data["info"]["title"] == "Home Lab Pets"

    def test_spec_is_stable_across_runs(self, tmp_path):
        runner = CliRunner()
        first, second = tmp_path / "a.json", tmp_path / "b.json"
        runner.invoke(main, ["spec", "-o", str(first)])
        runner.invoke(main, ["spec", "-o", str(second)])
        assert first.read_bytes() == second.read_bytes()

    def test_spec_reports_registry_errors(self, tmp_path):
        runner = CliRunner()
        with patch("petstore_openapi.cli.build_document", side_effect=IncompleteDocumentError(["title"])):
            result = runner.invoke(main, ["spec", "-o", str(tmp_path / "x.json")])

        assert result.exit_code != 0
        assert "missing: title" in result.output


class TestCliRoutes:
    def test_lists_routes_in_registration_order(self):
        runner = CliRunner()
        result = runner.invoke(main, ["routes"])

        assert result.exit_code == 0
        lines = [line for line in result.output.splitlines() if line.startswith(("GET", "PUT", "POST", "DELETE"))]
        assert len(lines) == 18
        assert lines[0].split()[:3] == ["PUT", "pet", "updatePet"]
        assert "deprecated" in next(line for line in lines if "findPetsByTags" in line)


class TestCliCall:
    def test_call_get_pet(self):
        runner = CliRunner()
        result = runner.invoke(main, ["call", "GET", "/pet/7", "--seed", "1"])

        assert result.exit_code == 0
        assert "HTTP 200 application/json" in result.output
        assert '"id": 7' in result.output

    def test_call_with_query(self):
        runner = CliRunner()
        result = runner.invoke(main, ["call", "GET", "/user/login", "-q", "username=alice", "-q", "password=x"])

        assert result.exit_code == 0
        assert "X-Rate-Limit:" in result.output

    def test_unknown_route_fails(self):
        runner = CliRunner()
        result = runner.invoke(main, ["call", "PATCH", "/nowhere"])

        assert result.exit_code != 0
        assert "No route matches PATCH /nowhere" in result.output


class TestParseQuery:
    def test_repeated_keys_collect(self):
        assert _parse_query(("status=available", "status=sold", "x=")) == {
            "status": ["available", "sold"],
            "x": [""],
        }
