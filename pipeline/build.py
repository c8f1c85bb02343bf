"""Orchestrator: ingest → load → aggregate → summary (and optional JSON export)."""

from __future__ import annotations

import argparse
import time
from pathlib import Path

from pipeline.aggregate import aggregate, headline_metrics
from pipeline.ingest import ingest
from pipeline.models import AggregateBundle
from pipeline.transform import load_records


def export_bundle(bundle: AggregateBundle, dest: Path) -> Path:
    """Write the bundle as JSON using the dashboard's field names."""
    dest.parent.mkdir(parents=True, exist_ok=True)
    dest.write_text(bundle.model_dump_json(by_alias=True, indent=2))
    return dest


def run(*, force: bool = False, json_path: Path | None = None) -> AggregateBundle:
    """Run every step and return the bundle."""
    t0 = time.time()

    print("=" * 60)
    print("California ADU Permits Pipeline")
    print("=" * 60)

    print("\n── Step 1: Ingest ──")
    path = ingest(force=force)
    print(f"  {'1 file' if path else 'no file'} ready\n")

    print("── Step 2: Load ──")
    result = load_records(path)
    print(f"  {len(result.records):,} records ({result.source}), {result.rejected:,} quarantined")
    if result.notice:
        print(f"  [warn] {result.notice}")

    print("\n── Step 3: Aggregate ──")
    bundle = aggregate(result.records)
    for name in AggregateBundle.model_fields:
        print(f"    {name}: {len(getattr(bundle, name))} rows")

    m = headline_metrics(bundle)
    print(f"  Latest ADU share: {m.latest_adu_percentage}% ({m.adu_percentage_trend:+d} pts)")
    print(f"  Latest avg ADU value: ${m.latest_avg_adu_value}K ({m.avg_adu_value_trend:+d}K)")
    print(f"  Top county by ADUs: {m.top_county}")

    if json_path:
        print(f"\n  Exporting {json_path} ...")
        export_bundle(bundle, json_path)

    elapsed = time.time() - t0
    print(f"\nPipeline complete in {elapsed:.1f}s")
    return bundle


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="California ADU permits pipeline")
    parser.add_argument("--force", action="store_true", help="Re-download the CSV")
    parser.add_argument("--json", type=Path, default=None, help="Write the aggregate bundle to this path")
    args = parser.parse_args(argv)
    run(force=args.force, json_path=args.json)


if __name__ == "__main__":
    main()
