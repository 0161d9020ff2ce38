import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional, Tuple

import yaml

from erd_core import (
    DEFAULT_SQL,
    SchemaData,
    Settings,
    build_assistant_prompt,
    default_schema_path,
    generate_markdown_docs,
    graph_issues,
    load_schema,
    load_schema_document,
    load_settings,
    load_sql_text,
    parse_with_issues,
    reference_issues,
    schema_issues,
    schema_summary,
    table_details,
    to_graph,
    to_mermaid,
    write_markdown_docs,
)
from erd_core.issues import Issue, has_errors, issues_as_json, to_lines


def _print_issues(issues: List[Issue]) -> None:
    if not issues:
        print("No issues found.")
        return
    for line in to_lines(issues):
        print(line)


def _print_issue_block(prefix: str, issues: List[Issue]) -> None:
    """Report parse problems on stderr so stdout stays machine-readable."""
    if not issues:
        return
    print(f"{prefix}:", file=sys.stderr)
    for line in to_lines(issues):
        print(f"  {line}", file=sys.stderr)


def _emit(output: str, out_path: Optional[str], label: str) -> None:
    if out_path:
        path = Path(out_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(output if output.endswith("\n") else output + "\n", encoding="utf-8")
        print(f"Wrote {label}: {out_path}")
    else:
        print(output)


def _parse_input(args: argparse.Namespace) -> Tuple[SchemaData, List[Issue]]:
    sql_text = load_sql_text(args.input)
    schema, issues = parse_with_issues(sql_text)
    _print_issue_block("Parse checks", issues)
    return schema, issues


def cmd_parse(args: argparse.Namespace) -> int:
    schema, issues = _parse_input(args)
    if has_errors(issues):
        return 1

    payload = schema.to_dict()
    if args.format == "yaml":
        output = yaml.safe_dump(payload, sort_keys=False, allow_unicode=True)
    else:
        output = json.dumps(payload, indent=2, ensure_ascii=False)

    _emit(output, args.out, "schema graph")
    return 0


def cmd_graph(args: argparse.Namespace) -> int:
    schema, issues = _parse_input(args)
    if has_errors(issues):
        return 1

    if args.format == "mermaid":
        output = to_mermaid(schema)
    else:
        output = json.dumps(to_graph(schema), indent=2, ensure_ascii=False)

    _emit(output, args.out, "graph")
    return 0


def cmd_summary(args: argparse.Namespace) -> int:
    schema, issues = _parse_input(args)
    if has_errors(issues):
        return 1

    if args.prompt:
        print(build_assistant_prompt(schema))
    else:
        print(schema_summary(schema))
    return 0


def cmd_docs(args: argparse.Namespace) -> int:
    schema, issues = _parse_input(args)
    if has_errors(issues):
        return 1

    if args.out:
        write_markdown_docs(schema, args.out, title=args.title)
        print(f"Wrote Markdown docs: {args.out}")
    else:
        print(generate_markdown_docs(schema, title=args.title))
    return 0


def cmd_table(args: argparse.Namespace) -> int:
    schema, issues = _parse_input(args)
    if has_errors(issues):
        return 1

    table = schema.get_table(args.table)
    if table is None:
        print(f"Table not found: {args.table}", file=sys.stderr)
        print(f"Available tables: {', '.join(schema.table_names())}", file=sys.stderr)
        return 1

    print(json.dumps(table_details(table, schema), indent=2, ensure_ascii=False))
    return 0


def cmd_validate(args: argparse.Namespace) -> int:
    document = load_schema_document(args.document)
    schema = load_schema(args.schema)
    if "nodes" in document:
        issues = graph_issues(document, schema)
    else:
        issues = schema_issues(document, schema)
        if not has_errors(issues):
            issues.extend(reference_issues(document))

    if args.output_json:
        print(json.dumps(issues_as_json(issues), indent=2))
    else:
        _print_issues(issues)
    return 1 if has_errors(issues) else 0


def cmd_schema(args: argparse.Namespace) -> int:
    schema = load_schema(args.schema)
    print(json.dumps(schema, indent=2))
    return 0


def cmd_sample(args: argparse.Namespace) -> int:
    print(DEFAULT_SQL.strip())
    return 0


def build_parser(settings: Optional[Settings] = None) -> argparse.ArgumentParser:
    settings = settings or Settings()
    schema_default = settings.schema or default_schema_path()

    parser = argparse.ArgumentParser(prog="erd", description="ERD mapper CLI")
    parser.add_argument("--config", help="Path to erd.yaml settings file")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=settings.verbose,
        help="Log parser decisions to stderr",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    parse_parser = sub.add_parser("parse", help="Parse CREATE TABLE statements into a schema graph")
    parse_parser.add_argument("input", help="Path to SQL file ('-' for stdin)")
    parse_parser.add_argument("--format", default=settings.output_format, choices=["json", "yaml"])
    parse_parser.add_argument("--out", help="Output file path")
    parse_parser.set_defaults(func=cmd_parse)

    graph_parser = sub.add_parser("graph", help="Export nodes/links for a diagram renderer")
    graph_parser.add_argument("input", help="Path to SQL file ('-' for stdin)")
    graph_parser.add_argument("--format", default=settings.graph_format, choices=["json", "mermaid"])
    graph_parser.add_argument("--out", help="Output file path")
    graph_parser.set_defaults(func=cmd_graph)

    summary_parser = sub.add_parser("summary", help="Print the condensed schema text used by the assistant")
    summary_parser.add_argument("input", help="Path to SQL file ('-' for stdin)")
    summary_parser.add_argument("--prompt", action="store_true", help="Wrap the summary in the assistant system prompt")
    summary_parser.set_defaults(func=cmd_summary)

    docs_parser = sub.add_parser("docs", help="Generate a Markdown data dictionary")
    docs_parser.add_argument("input", help="Path to SQL file ('-' for stdin)")
    docs_parser.add_argument("--title", default=settings.title, help="Document title")
    docs_parser.add_argument("--out", help="Output file path")
    docs_parser.set_defaults(func=cmd_docs)

    table_parser = sub.add_parser("table", help="Show columns and relationships of one table")
    table_parser.add_argument("input", help="Path to SQL file ('-' for stdin)")
    table_parser.add_argument("table", help="Table name")
    table_parser.set_defaults(func=cmd_table)

    validate_parser = sub.add_parser("validate", help="Validate an exported schema graph or node/link graph JSON/YAML file")
    validate_parser.add_argument("document", help="Path to schema graph document")
    validate_parser.add_argument("--schema", default=schema_default, help="Path to JSON schema")
    validate_parser.add_argument("--output-json", action="store_true", help="Print issues as JSON")
    validate_parser.set_defaults(func=cmd_validate)

    schema_parser = sub.add_parser("schema", help="Print the schema graph JSON schema")
    schema_parser.add_argument("--schema", default=schema_default, help="Path to JSON schema")
    schema_parser.set_defaults(func=cmd_schema)

    sample_parser = sub.add_parser("sample", help="Print sample DDL")
    sample_parser.set_defaults(func=cmd_sample)

    return parser


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def main(argv: Optional[List[str]] = None) -> int:
    pre = argparse.ArgumentParser(add_help=False)
    pre.add_argument("--config")
    known, _ = pre.parse_known_args(argv)

    try:
        settings = load_settings(known.config)
    except (FileNotFoundError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    parser = build_parser(settings)
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    try:
        return args.func(args)
    except (FileNotFoundError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
