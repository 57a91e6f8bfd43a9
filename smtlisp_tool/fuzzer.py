import sys, os, argparse, traceback, time, random, logging
import atheris

from rich.console import Console
from rich.logging import RichHandler

from smtlisp_tool.reporting import TABLE_STYLES, b64, print_trace, render_summary, write_artifact, write_json

# Instrument imports for coverage
with atheris.instrument_imports():
    from smtlisp_tool.generator import ExpressionGenerator
    from smtlisp_tool.targets import smt_calc
    from smtlisp_tool.targets.errors import SmtLispError

logger = logging.getLogger(__name__)


def _check_generated(data: bytes):
    """Generated formulas must always evaluate; any exception here is a crash."""
    fdp = atheris.FuzzedDataProvider(data)
    seed = fdp.ConsumeIntInRange(0, 2**32 - 1)
    count = fdp.ConsumeIntInRange(1, 8)
    text = ExpressionGenerator(seed=seed).fuzz_many(count)
    for line in text.splitlines():
        smt_calc.solve_line(line)
    return text


# Expected (non-crash) exceptions per target
EXPECTED_EXCEPTIONS = {
    "smt": (SmtLispError,),       # malformed formulas are rejected, not crashes
    "generated": tuple(),         # generator output must always evaluate
}

TARGET_FUNCS = {
    "smt": smt_calc.solve_line,
    "generated": _check_generated,
}

ARGS = None
STATS = {}

SUMMARY_FIELDS = [
    ("Target", "target"),
    ("Total Inputs", "total_inputs"),
    ("Handled Exceptions", "handled_exceptions"),
    ("Unexpected (Crashes)", "unexpected_exceptions"),
    ("Duration (s)", "duration_sec"),
    ("Artifacts dir", "artifacts_dir"),
]

# periodic summary control
LAST_SUMMARY_TS = 0.0
DEFAULT_SUMMARY_INTERVAL = 5.0

# Demo formulas to guarantee visible operations when requested
SMT_EXPR_SEEDS = [
    "(simplify (+ 1 (* 2 3)))",
    "(simplify (- (* 2 3) 10))",
    "(simplify -5)",
    "((+ 1 2))",
    "(simplify (* (- 4 9) (+ -3 7)))",
]


def new_stats(args) -> dict:
    """Fresh counters for one run; serialised as run_summary.json."""
    return {
        "target": args.target,
        "seed": args.seed,
        "artifacts_dir": args.artifacts_dir,
        "start_time": time.time(),
        "duration_sec": 0.0,
        "total_inputs": 0,
        "handled_exceptions": 0,
        "unexpected_exceptions": 0,
        "crashes": [],
    }


def _console() -> Console:
    return Console(stderr=True)


def _render_summary():
    rows = [[label, STATS.get(key)] for label, key in SUMMARY_FIELDS]
    render_summary(rows, style=ARGS.table_style, console=_console(), title="Fuzzing Run Summary")


def _flush_summary():
    STATS["duration_sec"] = round(time.time() - STATS["start_time"], 3)
    write_json(os.path.join(ARGS.artifacts_dir, "run_summary.json"), STATS)
    _render_summary()


def _periodic_summary(force: bool = False):
    """Write JSON + print table every summary_interval seconds while fuzzing."""
    global LAST_SUMMARY_TS
    now = time.time()
    if not force and (now - LAST_SUMMARY_TS) < max(0.5, ARGS.summary_interval):
        return
    LAST_SUMMARY_TS = now
    _flush_summary()


# ------------------- fuzz logic -------------------
def _show_trace(expr: str, steps, outcome: str):
    """Print a step table while the --trace_smt budget lasts."""
    if ARGS.target != "smt" or ARGS.trace_smt <= 0:
        return
    print_trace(expr, steps or [], outcome, style=ARGS.table_style, console=_console())
    ARGS.trace_smt -= 1


def _record_crash(e: Exception, data_str: str, data_bytes: bytes, steps) -> str:
    crash_meta = {
        "target": ARGS.target,
        "exception_type": type(e).__name__,
        "exception_message": str(e),
        "traceback": traceback.format_exc(),
        "input_b64": b64(data_bytes),
        "input_preview": data_str[:200],
        "seed": ARGS.seed,
        "ts": time.time(),
        "trace_steps": steps or [],
    }
    path = write_artifact(ARGS.artifacts_dir, "crash", data_bytes, crash_meta)
    STATS["crashes"].append(path)
    logger.error("unexpected %s on %r, recorded at %s", type(e).__name__, data_str[:80], path)
    return path


def _classify_and_handle_exception(e: Exception, data_str: str, data_bytes: bytes, steps_if_any=None):
    if ARGS.no_fail:
        return

    if isinstance(e, EXPECTED_EXCEPTIONS[ARGS.target]):
        STATS["handled_exceptions"] += 1
        if ARGS.trace_errors:
            _show_trace(data_str, steps_if_any, f"EXPECTED FAILURE: {type(e).__name__}")
        return

    STATS["unexpected_exceptions"] += 1
    _record_crash(e, data_str, data_bytes, steps_if_any)
    if not ARGS.continue_on_crash:
        raise
    _show_trace(data_str, steps_if_any, f"UNEXPECTED CRASH: {type(e).__name__}")


def _maybe_demo_smt_ops():
    """Print a demo evaluation so you always see actual operations."""
    expr = random.choice(SMT_EXPR_SEEDS)
    try:
        result, steps = smt_calc.evaluate_with_trace(expr)
        outcome = f"DEMO OK (result {smt_calc.format_result(result)})"
    except SmtLispError as e:
        steps, outcome = e.trace_steps, f"DEMO ERROR: {type(e).__name__}"
    _show_trace(expr, steps, outcome)


def test_one_input(data: bytes):
    STATS["total_inputs"] += 1
    s = data.decode("utf-8", errors="ignore")
    try:
        if ARGS.target == "smt" and ARGS.trace_smt > 0:
            result, steps = smt_calc.evaluate_with_trace(s)
            if result is not None:
                _show_trace(s, steps, f"OK (result {smt_calc.format_result(result)})")
        else:
            TARGET_FUNCS[ARGS.target](data if ARGS.target == "generated" else s)
    except Exception as e:
        _classify_and_handle_exception(e, s, data, steps_if_any=getattr(e, "trace_steps", []))
        if ARGS.demo_ops:
            _maybe_demo_smt_ops()
    finally:
        _periodic_summary()


def build_parser():
    parser = argparse.ArgumentParser(
        prog="smtlisp-fuzz",
        description="Coverage-guided fuzzing of the SMT-Lisp solver (atheris/libFuzzer).",
        epilog="'smt' feeds raw bytes to the line solver; only SmtLispError is an expected failure. "
               "'generated' seeds the formula generator from the input; every formula must evaluate.",
    )
    parser.add_argument("--target", choices=list(TARGET_FUNCS.keys()), default="smt")
    parser.add_argument("--artifacts-dir", default="reports",
                        help="Where crash_<sha1>.input/.json and run_summary.json go.")
    parser.add_argument("--time_budget", type=int, default=60, help="libFuzzer -max_total_time (seconds).")
    parser.add_argument("--max_len", type=int, default=4096, help="libFuzzer -max_len (bytes).")
    parser.add_argument("--seed", type=int, default=None, help="libFuzzer -seed.")
    parser.add_argument("--continue_on_crash", action="store_true",
                        help="Record crashes but keep fuzzing.")
    parser.add_argument("--trace_smt", type=int, default=0,
                        help="Print up to N traced formula evaluations.")
    parser.add_argument("--trace_errors", action="store_true",
                        help="Also print traces for rejected formulas.")
    parser.add_argument("--demo_ops", action="store_true",
                        help="After a failure, also trace one of the demo formulas.")
    parser.add_argument("--summary_interval", type=float, default=DEFAULT_SUMMARY_INTERVAL,
                        help="Seconds between summary writes during fuzzing.")
    parser.add_argument("--table-style", choices=TABLE_STYLES, default="rich")
    parser.add_argument("--no_fail", action="store_true",
                        help="Swallow every exception, expected or not.")
    parser.add_argument("corpus", nargs="*", help="Corpus directories handed to libFuzzer.")
    return parser


def libfuzzer_flags(args, argv0: str):
    flags = [argv0, f"-max_total_time={args.time_budget}", f"-max_len={args.max_len}"]
    if args.seed is not None:
        flags.append(f"-seed={args.seed}")
    return flags + list(args.corpus)


def main(argv=None):
    global ARGS, STATS
    ARGS, _ = build_parser().parse_known_args(argv)
    STATS = new_stats(ARGS)

    logging.basicConfig(level=logging.INFO, format="%(message)s", datefmt="[%X]",
                        handlers=[RichHandler(console=_console(), show_path=False)], force=True)
    os.makedirs(ARGS.artifacts_dir, exist_ok=True)
    _periodic_summary(force=True)

    atheris.Setup(libfuzzer_flags(ARGS, sys.argv[0]), test_one_input)
    try:
        atheris.Fuzz()
    finally:
        _flush_summary()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
