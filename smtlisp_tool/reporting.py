import base64
import hashlib
import json as _json
import os

from rich.console import Console
from rich.table import Table
from tabulate import tabulate

TABLE_STYLES = ("rich", "grid")
NO_STEPS = "(no steps recorded)"


# ------------------- pretty helpers -------------------
def render_table(rows, headers, title: str, style: str = "rich", console: Console = None):
    if style == "grid":
        text = tabulate(rows, headers=headers, tablefmt="grid")
        if console is None:
            print(text)
        else:
            console.print(text, markup=False, highlight=False)
        return

    console = console or Console()
    table = Table(title=title)
    table.add_column(headers[0], style="cyan", no_wrap=True)
    for h in headers[1:]:
        table.add_column(h, style="magenta")
    for r in rows:
        table.add_row(*(str(v) for v in r))
    console.print(table)


def print_trace(expr: str, steps, outcome: str, style: str = "rich", console: Console = None):
    header = f"\n[SMT Trace] {outcome}\n  EXPR: {expr!r}\n"
    if console is None:
        console = Console()
    console.print(header, markup=False, highlight=False)
    rows = [[i, s] for i, s in enumerate(steps or [], 1)] or [["-", NO_STEPS]]
    render_table(rows, ["#", "Operation / Result"], "Steps", style=style, console=console)


def render_summary(stats_rows, style: str = "rich", console: Console = None, title="Run Summary"):
    render_table(stats_rows, ["Metric", "Value"], title, style=style, console=console)


# ------------------- artifacts -------------------
def b64(b: bytes) -> str:
    return base64.b64encode(b).decode("ascii")


def write_json(path: str, obj: dict):
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        _json.dump(obj, f, indent=2, sort_keys=True)


def write_artifact(artifacts_dir: str, prefix: str, data_bytes: bytes, meta: dict) -> str:
    """Store ``data_bytes`` as <prefix>_<sha1>.input next to a .json with ``meta``."""
    os.makedirs(artifacts_dir, exist_ok=True)
    base = os.path.join(artifacts_dir, f"{prefix}_{hashlib.sha1(data_bytes).hexdigest()}")
    with open(base + ".input", "wb") as f:
        f.write(data_bytes)
    write_json(base + ".json", meta)
    return base
