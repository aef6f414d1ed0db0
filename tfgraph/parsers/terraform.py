"""
Terraform file discovery and parsing.

Produces one retained tree per file in the shape the extractor expects::

    {"resource": {kind: {name: [body]}}, "output": {name: {"value": ..., "description": ...}}}
"""
import json
import os
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

import hcl2
from rich.console import Console

from tfgraph.detect import detect_format

console = Console(stderr=True)


@dataclass
class ParsedFile:
    path: str
    tree: Dict[str, Any]


def _label(key: str) -> str:
    # some python-hcl2 releases keep the quotes around block labels
    if len(key) >= 2 and key.startswith('"') and key.endswith('"'):
        return key[1:-1]
    return key


def _blocks(section: Any) -> Iterable[Dict[str, Any]]:
    """python-hcl2 gives each block as its own one-key mapping inside a list."""
    if isinstance(section, dict):
        return [section]
    return [b for b in section if isinstance(b, dict)]


def _fold_resources(section: Any) -> Dict[str, Dict[str, Any]]:
    folded: Dict[str, Dict[str, Any]] = {}
    for block in _blocks(section):
        for kind, instances in block.items():
            target = folded.setdefault(_label(kind), {})
            for instance_map in _blocks(instances):
                for name, body in instance_map.items():
                    target[_label(name)] = body if isinstance(body, list) else [body]
    return folded


def _fold_outputs(section: Any) -> Dict[str, Any]:
    folded: Dict[str, Any] = {}
    for block in _blocks(section):
        for name, body in block.items():
            if isinstance(body, list) and len(body) == 1:
                body = body[0]
            folded[_label(name)] = body
    return folded


def normalize(raw: Dict[str, Any]) -> Dict[str, Any]:
    """
    Fold the list-of-blocks layout into name-keyed mappings.
    Sections of an unexpected type are passed through untouched so the
    extractor can report them.
    """
    tree = dict(raw)
    resources = raw.get("resource")
    if isinstance(resources, (list, dict)):
        tree["resource"] = _fold_resources(resources)
    outputs = raw.get("output")
    if isinstance(outputs, (list, dict)):
        tree["output"] = _fold_outputs(outputs)
    return tree


def parse_file(filepath: str) -> Optional[ParsedFile]:
    fmt = detect_format(filepath)
    try:
        with open(filepath) as fh:
            if fmt == "terraform-json":
                data = json.load(fh)
            else:
                data = hcl2.load(fh)
    except Exception as exc:
        console.print(f"[yellow]Warning:[/yellow] failed to parse {filepath}: {exc}")
        return None

    if not isinstance(data, dict):
        console.print(f"[yellow]Warning:[/yellow] {filepath} has no top-level blocks, skipping.")
        return None

    return ParsedFile(path=filepath, tree=normalize(data))


def collect_files(paths: Iterable[str]) -> List[str]:
    """Expand directories into Terraform file paths, in a stable order."""
    files: List[str] = []
    for p in paths:
        if os.path.isfile(p):
            if detect_format(p) != "unknown":
                files.append(p)
            else:
                console.print(f"[dim]Skipping unsupported file:[/dim] {p}")
        elif os.path.isdir(p):
            for root, dirs, fnames in os.walk(p):
                dirs[:] = sorted(d for d in dirs if not d.startswith("."))
                for fname in sorted(fnames):
                    fpath = os.path.join(root, fname)
                    if detect_format(fpath) != "unknown":
                        files.append(fpath)
        else:
            console.print(f"[yellow]Warning:[/yellow] '{p}' does not exist, skipping.")
    return files


def parse_paths(paths: Iterable[str]) -> List[ParsedFile]:
    parsed: List[ParsedFile] = []
    for fp in collect_files(paths):
        pf = parse_file(fp)
        if pf is not None:
            parsed.append(pf)
    return parsed
