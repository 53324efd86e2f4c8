"""
Orbit Count Runner

Stateless pipeline: (Config) -> (count, canonical set, diagnostics, receipts).

Sections:
  1) config:      validate ranges, record the request
  2) orbits:      Burnside count from the class table (no enumeration)
  3) enumerate:   if result_count <= threshold, backtrack + keep canonical leaves
  4) consistency: compare enumeration with the closed-form count

Status machine per call:
  IDLE -> COUNTING -> ENUMERATING -> DONE
                   -> TOO_LARGE            (result_count > threshold)

Nothing is cached between calls; every call recomputes from scratch and the
caller replaces its previous Result wholesale.
"""

import sys
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple

from .config import Config, validate_config
from .consistency import ConsistencyReport, check_consistency
from .core import (
    DeterminismError,
    Receipts,
    assert_digests_equal,
    blake3_hash,
    param_registry,
    serialize_result_set,
    stable_json_bytes
)
from .enumerator import enumerate_canonical
from .kernel.coloring import Coloring
from .kernel.shapes import Ring
from .kernel.symmetry import SymmetryFamily, SymmetryGroup
from .orbits import OrbitCount, count_orbits

# Names used in export filenames
_FAMILY_EXPORT_NAMES = {
    SymmetryFamily.NONE: "NoTransforms",
    SymmetryFamily.ROTATE: "Rotate",
    SymmetryFamily.ROTATE_AND_FLIP: "RotateAndFlip",
}


class Status(Enum):
    IDLE = "idle"
    COUNTING = "counting"
    ENUMERATING = "enumerating"
    DONE = "done"
    TOO_LARGE = "too_large"


@dataclass(frozen=True)
class Result:
    config: Config
    status: Status
    count: OrbitCount
    colorings: Tuple[Coloring, ...] = ()
    report: Optional[ConsistencyReport] = None
    receipts: Dict[str, dict] = field(default_factory=dict)

    @property
    def result_count(self) -> int:
        return self.count.result_count

    @property
    def too_large(self) -> bool:
        return self.status is Status.TOO_LARGE


def compute(
    config: Config,
    strict: bool = False,
    debug: bool = False
) -> Result:
    """
    Run the full pipeline for one configuration.

    Args:
        config: Requested configuration (validated here).
        strict: Raise InternalConsistencyError on a non-exact Burnside division.
        debug: Print per-section traces to stderr.

    Returns:
        Result with status DONE (canonical set materialized) or TOO_LARGE.

    Raises:
        ConfigError: If config is out of range.
        InternalConsistencyError: Only in strict mode, from the orbit counter.
    """
    status = Status.IDLE
    receipts = {}

    # 1) config
    validate_config(config)
    r_config = Receipts("config")
    r_config.put("shape", config.shape.kind)
    r_config.put("dims", list(config.shape.dims))
    r_config.put("positions", config.positions)
    r_config.put("n_colours", config.n_colours)
    r_config.put("family", config.family.value)
    r_config.put("quota", config.quota)
    receipts["config"] = r_config.digest()

    # 2) orbits
    status = Status.COUNTING
    group = SymmetryGroup(config.shape, config.family)
    count = count_orbits(config, group=group, strict=strict)

    r_orbits = Receipts("orbits")
    r_orbits.put("classes", [
        {
            "name": c.name,
            "orbits": c.orbits,
            "free_positions": c.free_positions,
            "fixed": c.fixed
        }
        for c in count.classes
    ])
    r_orbits.put("total_orbits", count.total_orbits)
    r_orbits.put("total_fixed", count.total_fixed)
    r_orbits.put("result_count", count.result_count)
    r_orbits.put("exact_division", count.exact)
    receipts["orbits"] = r_orbits.digest()

    if debug:
        print(f"\n=== [{status.value}] ORBITS {config.shape!r} {config.family.value} ===", file=sys.stderr)
        for c in count.classes:
            print(f"  {c.name}: orbits={c.orbits} free={c.free_positions} fixed={c.fixed}",
                  file=sys.stderr)
        print(f"  {count.total_fixed} / {count.total_orbits} = {count.result_count}",
              file=sys.stderr)

    threshold = param_registry()["enumeration_threshold"]
    if count.result_count > threshold:
        status = Status.TOO_LARGE
        r_enum = Receipts("enumerate")
        r_enum.put("status", status.value)
        r_enum.put("threshold", threshold)
        receipts["enumerate"] = r_enum.digest()
        return Result(
            config=config,
            status=status,
            count=count,
            receipts=receipts
        )

    # 3) enumerate
    status = Status.ENUMERATING
    if debug:
        print(f"\n=== [{status.value}] threshold={threshold} ===", file=sys.stderr)
    enumeration = enumerate_canonical(config, group=group, debug=debug)

    r_enum = Receipts("enumerate")
    r_enum.put("status", Status.DONE.value)
    r_enum.put("threshold", threshold)
    r_enum.put("walked", enumeration.walked)
    r_enum.put("canonical_count", len(enumeration.colorings))
    r_enum.put("result_hash", blake3_hash(serialize_result_set(enumeration.colorings)))
    receipts["enumerate"] = r_enum.digest()

    # 4) consistency
    report = check_consistency(
        config,
        count,
        enumeration.colorings,
        enumeration.walked,
        group=group,
        stabilizers=enumeration.stabilizers
    )

    r_cons = Receipts("consistency")
    r_cons.put("ok", report.ok)
    r_cons.put("expected", report.expected)
    r_cons.put("actual", report.actual)
    r_cons.put("orbit_cover", report.orbit_cover)
    r_cons.put("walked", report.walked)
    r_cons.put("rotation_diagnostics", [
        {"shift": d.shift, "step": d.step, "estimate": d.expected, "actual": d.actual}
        for d in report.rotation_diagnostics
    ])
    receipts["consistency"] = r_cons.digest()

    if debug and not report.ok:
        print(report.message, file=sys.stderr)

    status = Status.DONE
    return Result(
        config=config,
        status=status,
        count=count,
        colorings=enumeration.colorings,
        report=report,
        receipts=receipts
    )


def compute_with_determinism_check(config: Config, strict: bool = False) -> Result:
    """
    Run compute() twice and verify every section hash matches.

    The enumerate section commits to the canonical set through its
    result_hash, so equal hashes also mean equal canonical sets.

    Raises:
        DeterminismError: If a section is missing from one run or any
            section hash differs.
    """
    result1 = compute(config, strict=strict)
    result2 = compute(config, strict=strict)

    for key in sorted(set(result1.receipts) | set(result2.receipts)):
        if key not in result1.receipts or key not in result2.receipts:
            raise DeterminismError(
                section=key,
                first_differing_key=None,
                value_a=None if key not in result1.receipts else "<present>",
                value_b=None if key not in result2.receipts else "<present>",
                hash_a=result1.receipts.get(key, {}).get("section_hash", "<MISSING>"),
                hash_b=result2.receipts.get(key, {}).get("section_hash", "<MISSING>")
            )
        assert_digests_equal(result1.receipts[key], result2.receipts[key])

    return result1


def export_filename(config: Config) -> str:
    """Export file name, e.g. '5 beads 3 col Rotate.json' or '3x2 4 col RotateAndFlip.json'."""
    family = _FAMILY_EXPORT_NAMES[config.family]
    if isinstance(config.shape, Ring):
        return f"{config.shape.n_beads} beads {config.n_colours} col {family}.json"
    W, H = config.shape.dims
    return f"{W}x{H} {config.n_colours} col {family}.json"


def export_json(result: Result) -> Tuple[str, bytes]:
    """
    Serialize the canonical set for an external writer.

    Returns:
        (filename, bytes): JSON list of nested colour-index structures.

    Raises:
        ValueError: If the result was too large to enumerate.
    """
    if result.too_large:
        raise ValueError(
            f"Too many (> {param_registry()['enumeration_threshold']:,}) variants to export"
        )
    payload = [c.to_nested() for c in result.colorings]
    return (export_filename(result.config), stable_json_bytes(payload))


def summarize(result: Result) -> dict:
    """JSON-ready summary of a Result for the CLI."""
    summary = {
        "status": result.status.value,
        "result_count": result.result_count,
        "total_orbits": result.count.total_orbits,
        "total_fixed": result.count.total_fixed,
        "exact_division": result.count.exact,
    }
    if result.too_large:
        threshold = param_registry()["enumeration_threshold"]
        summary["message"] = f"Too many (> {threshold:,}) variants to display"
    else:
        summary["colorings"] = [c.to_nested() for c in result.colorings]
    if result.count.error is not None:
        summary["orbit_error"] = str(result.count.error)
    if result.report is not None and not result.report.ok:
        summary["consistency_error"] = result.report.message
    summary["receipts"] = result.receipts
    return summary


# ============================================================================
# CLI Entry Point
# ============================================================================

def main(argv=None) -> int:
    import argparse
    import json

    from .config import ConfigError, parse_family
    from .orbits import InternalConsistencyError
    from .kernel.shapes import Grid

    parser = argparse.ArgumentParser(
        prog="orbitcount",
        description="Count colorings of a ring or grid up to rotation/reflection",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # 5 beads, 3 colours, rotations only
  python -m orbitcount.runner ring 5 --colours 3 --family rotate

  # 3x3 tile, 2 colours, full dihedral group, export the canonical set
  python -m orbitcount.runner grid 3 3 --colours 2 --family rotate+flip --export

  # At most 2 beads of any colour
  python -m orbitcount.runner ring 6 --colours 3 --quota 2
"""
    )

    subparsers = parser.add_subparsers(dest="shape", required=True)

    ring_parser = subparsers.add_parser("ring", help="Cyclic arrangement of beads")
    ring_parser.add_argument("n_beads", type=int, help="Number of beads (2..10)")

    grid_parser = subparsers.add_parser("grid", help="Rectangular tile")
    grid_parser.add_argument("width", type=int, help="Width (1..8)")
    grid_parser.add_argument("height", type=int, help="Height (1..8)")

    for sub in (ring_parser, grid_parser):
        sub.add_argument(
            "--colours", "--colors",
            dest="n_colours",
            type=int,
            default=3,
            help="Number of colours (2..8). Default: 3."
        )
        sub.add_argument(
            "--family",
            type=str,
            default="rotate",
            help="Symmetry family: none, rotate, rotate+flip. Default: rotate."
        )
        sub.add_argument(
            "--quota",
            type=int,
            default=None,
            help="Maximum positions per colour. Default: unlimited."
        )
        sub.add_argument(
            "--export",
            nargs="?",
            const="",
            default=None,
            help="Write the canonical set as JSON (default file name if no path given)."
        )
        sub.add_argument(
            "--output",
            type=str,
            default=None,
            help="Output file for the summary + receipts JSON. Default: stdout."
        )
        sub.add_argument(
            "--determinism-check",
            action="store_true",
            help="Run the pipeline twice and compare section hashes."
        )
        sub.add_argument(
            "--strict",
            action="store_true",
            help="Abort on a non-exact Burnside division."
        )
        sub.add_argument(
            "--debug",
            action="store_true",
            help="Print per-section traces to stderr."
        )

    args = parser.parse_args(argv)

    try:
        family = parse_family(args.family)
    except ValueError as e:
        print(f"Error: Invalid family parameter: {e}", file=sys.stderr)
        return 1

    if args.shape == "ring":
        shape = Ring(args.n_beads)
    else:
        shape = Grid(args.width, args.height)

    config = Config(shape=shape, n_colours=args.n_colours, family=family, quota=args.quota)

    try:
        if args.determinism_check:
            result = compute_with_determinism_check(config, strict=args.strict)
        else:
            result = compute(config, strict=args.strict, debug=args.debug)
    except (ConfigError, InternalConsistencyError, DeterminismError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if result.report is not None and not result.report.ok:
        print(result.report.message, file=sys.stderr)

    if args.export is not None:
        if result.too_large:
            print("Error: Too many variants to export", file=sys.stderr)
            return 1
        name, data = export_json(result)
        path = args.export or name
        with open(path, 'wb') as f:
            f.write(data)
        print(f"Canonical set written to: {path}", file=sys.stderr)

    summary = summarize(result)
    if args.output:
        with open(args.output, 'w') as f:
            json.dump(summary, f, indent=2)
        print(f"Results written to: {args.output}", file=sys.stderr)
    else:
        print(json.dumps(summary, indent=2))

    return 0


if __name__ == "__main__":
    sys.exit(main())
