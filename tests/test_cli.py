"""CLI tests: every ``erd`` sub-command run in-process."""

import io
import json
import os
import sys
from pathlib import Path

import pytest
import yaml

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT / "packages" / "core_engine" / "src"))
sys.path.insert(0, str(ROOT / "packages" / "cli" / "src"))

from erd_cli.main import build_parser, main
from erd_core import DEFAULT_SQL, Settings, load_settings


@pytest.fixture
def blog_sql(tmp_path):
    path = tmp_path / "blog.sql"
    path.write_text(DEFAULT_SQL, encoding="utf-8")
    return str(path)


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
    # keep a developer's erd.yaml from leaking into the tests
    monkeypatch.chdir(tmp_path)


class TestParseCommand:
    def test_json_output(self, blog_sql, capsys):
        assert main(["parse", blog_sql]) == 0
        data = json.loads(capsys.readouterr().out)
        assert [t["name"] for t in data["tables"]] == ["users", "posts", "comments"]
        assert len(data["relationships"]) == 3
        assert data["tables"][1]["columns"][1]["isForeignKey"] is True

    def test_yaml_output(self, blog_sql, capsys):
        assert main(["parse", blog_sql, "--format", "yaml"]) == 0
        data = yaml.safe_load(capsys.readouterr().out)
        assert data["relationships"][0] == {"source": "posts", "target": "users", "label": "user_id"}

    def test_writes_file(self, blog_sql, tmp_path, capsys):
        out = tmp_path / "out" / "schema.json"
        assert main(["parse", blog_sql, "--out", str(out)]) == 0
        assert "Wrote schema graph" in capsys.readouterr().out
        assert json.loads(out.read_text(encoding="utf-8"))["tables"]

    def test_blank_input(self, tmp_path, capsys):
        path = tmp_path / "blank.sql"
        path.write_text("   \n", encoding="utf-8")
        assert main(["parse", str(path)]) == 1
        captured = capsys.readouterr()
        assert "EMPTY_INPUT" in captured.err
        assert "Please enter some SQL to parse." in captured.err
        assert captured.out == ""

    def test_no_tables(self, tmp_path, capsys):
        path = tmp_path / "select.sql"
        path.write_text("SELECT 1;", encoding="utf-8")
        assert main(["parse", str(path)]) == 1
        assert "No tables found. Check your SQL syntax." in capsys.readouterr().err

    def test_missing_file(self, capsys):
        assert main(["parse", "does-not-exist.sql"]) == 1
        assert "SQL file not found" in capsys.readouterr().err

    def test_stdin(self, monkeypatch, capsys):
        monkeypatch.setattr(sys, "stdin", io.StringIO(DEFAULT_SQL))
        assert main(["parse", "-"]) == 0
        assert json.loads(capsys.readouterr().out)["tables"]


class TestOtherCommands:
    def test_graph_json(self, blog_sql, capsys):
        assert main(["graph", blog_sql]) == 0
        graph = json.loads(capsys.readouterr().out)
        assert len(graph["nodes"]) == 3
        assert len(graph["links"]) == 3

    def test_graph_mermaid(self, blog_sql, capsys):
        assert main(["graph", blog_sql, "--format", "mermaid"]) == 0
        assert capsys.readouterr().out.startswith("erDiagram")

    def test_summary(self, blog_sql, capsys):
        assert main(["summary", blog_sql]) == 0
        out = capsys.readouterr().out
        assert out.startswith("Table: users\nColumns: id(int)")

    def test_summary_prompt(self, blog_sql, capsys):
        assert main(["summary", blog_sql, "--prompt"]) == 0
        assert "Current Schema Context:" in capsys.readouterr().out

    def test_docs(self, blog_sql, capsys):
        assert main(["docs", blog_sql, "--title", "Blog"]) == 0
        assert capsys.readouterr().out.startswith("# Blog — Data Dictionary")

    def test_docs_to_file(self, blog_sql, tmp_path, capsys):
        out = tmp_path / "dict.md"
        assert main(["docs", blog_sql, "--out", str(out)]) == 0
        assert out.exists()

    def test_table(self, blog_sql, capsys):
        assert main(["table", blog_sql, "comments"]) == 0
        details = json.loads(capsys.readouterr().out)
        assert details["foreignKeys"] == ["post_id", "user_id"]

    def test_table_not_found(self, blog_sql, capsys):
        assert main(["table", blog_sql, "ghosts"]) == 1
        err = capsys.readouterr().err
        assert "Table not found: ghosts" in err
        assert "users, posts, comments" in err

    def test_validate_round_trip(self, blog_sql, tmp_path, capsys):
        out = tmp_path / "schema.json"
        assert main(["parse", blog_sql, "--out", str(out)]) == 0
        assert main(["validate", str(out)]) == 0
        assert "No issues found." in capsys.readouterr().out

    def test_validate_yaml_with_bad_reference(self, tmp_path, capsys):
        doc = tmp_path / "broken.yaml"
        doc.write_text(
            yaml.safe_dump(
                {
                    "tables": [{"id": "a", "name": "a", "columns": []}],
                    "relationships": [{"source": "a", "target": "b", "label": "b_id"}],
                }
            ),
            encoding="utf-8",
        )
        assert main(["validate", str(doc)]) == 1
        assert "UNKNOWN_TABLE_REFERENCE" in capsys.readouterr().out

    def test_validate_graph_export(self, blog_sql, tmp_path, capsys):
        out = tmp_path / "graph.json"
        assert main(["graph", blog_sql, "--out", str(out)]) == 0
        assert main(["validate", str(out)]) == 0
        assert "No issues found." in capsys.readouterr().out

        graph = json.loads(out.read_text(encoding="utf-8"))
        graph["links"][0]["target"] = "ghosts"
        out.write_text(json.dumps(graph), encoding="utf-8")
        assert main(["validate", str(out)]) == 1
        assert "/links/0/target" in capsys.readouterr().out

    def test_validate_output_json(self, tmp_path, capsys):
        doc = tmp_path / "dupes.json"
        doc.write_text(
            json.dumps(
                {
                    "tables": [
                        {"id": "a", "name": "a", "columns": []},
                        {"id": "a", "name": "a", "columns": []},
                    ],
                    "relationships": [],
                }
            ),
            encoding="utf-8",
        )
        assert main(["validate", str(doc), "--output-json"]) == 0
        issues = json.loads(capsys.readouterr().out)
        assert [i["code"] for i in issues] == ["DUPLICATE_TABLE_ID"]
        assert issues[0]["severity"] == "warn"

    def test_validate_invalid_json(self, tmp_path, capsys):
        doc = tmp_path / "bad.json"
        doc.write_text("{not json", encoding="utf-8")
        assert main(["validate", str(doc)]) == 1
        assert "Invalid JSON" in capsys.readouterr().err

    def test_schema(self, capsys):
        assert main(["schema"]) == 0
        assert json.loads(capsys.readouterr().out)["title"] == "Schema graph"

    def test_sample_parses(self, tmp_path, capsys):
        assert main(["sample"]) == 0
        sample = tmp_path / "sample.sql"
        sample.write_text(capsys.readouterr().out, encoding="utf-8")
        assert main(["parse", str(sample)]) == 0


class TestSettings:
    def test_defaults_without_file(self):
        assert load_settings() == Settings()

    def test_cwd_config_sets_defaults(self, blog_sql, tmp_path, capsys):
        (tmp_path / "erd.yaml").write_text("output_format: yaml\ntitle: Shop\n", encoding="utf-8")
        assert main(["parse", blog_sql]) == 0
        out = capsys.readouterr().out
        assert not out.startswith("{")
        assert yaml.safe_load(out)["tables"]
        args = build_parser(load_settings()).parse_args(["docs", blog_sql])
        assert args.title == "Shop"

    def test_explicit_config(self, blog_sql, tmp_path, capsys):
        config = tmp_path / "custom.yaml"
        config.write_text("graph_format: mermaid\n", encoding="utf-8")
        assert main(["--config", str(config), "graph", blog_sql]) == 0
        assert capsys.readouterr().out.startswith("erDiagram")

    def test_unknown_key(self, tmp_path, capsys):
        config = tmp_path / "bad.yaml"
        config.write_text("colour: blue\n", encoding="utf-8")
        assert main(["--config", str(config), "sample"]) == 1
        assert "Unknown config keys" in capsys.readouterr().err

    def test_missing_config(self, capsys):
        assert main(["--config", os.path.join("nope", "erd.yaml"), "sample"]) == 1
        assert "Config file not found" in capsys.readouterr().err

    def test_non_mapping_config(self, tmp_path):
        config = tmp_path / "list.yaml"
        config.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ValueError):
            load_settings(str(config))
