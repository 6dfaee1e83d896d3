#!/usr/bin/env python
"""Write a markdown report and summary snapshot for every log file in a directory."""

import asyncio
import sys
from pathlib import Path

from llm_log_inspector.core.config import InspectorConfig
from llm_log_inspector.core.errors import InspectorInputError
from llm_log_inspector.pipeline import InspectionSession
from llm_log_inspector.services.acquisition import read_input
from llm_log_inspector.services.reporting import generate_markdown_report
from llm_log_inspector.services.storage import SummaryStore

LOG_SUFFIXES = {".tsv", ".txt", ".log"}
OUTPUT_DIR = Path("./runs/reports")


async def main(log_dir: Path) -> None:
    """Inspect each log file and write its report next to a snapshot."""
    config = InspectorConfig()
    OUTPUT_DIR.mkdir(parents=True, exist_ok=True)

    for path in sorted(p for p in log_dir.iterdir() if p.suffix in LOG_SUFFIXES):
        session = InspectionSession(config)
        try:
            session.load_text(await read_input(path))
        except InspectorInputError as e:
            print(f"Skipping {path.name}: {e}")
            continue

        inspection = session.inspection
        report_path = OUTPUT_DIR / f"{path.stem}.md"
        report_path.write_text(
            generate_markdown_report(inspection, config.usd_to_inr_rate), encoding="utf-8"
        )
        await SummaryStore(OUTPUT_DIR / f"{path.stem}.json").save(inspection.summary)
        print(
            f"{path.name}: {len(inspection.summary.records)} records, "
            f"${inspection.summary.total_cost_usd:.3f}, "
            f"{len(inspection.bottleneck_ids)} bottlenecks"
        )


if __name__ == "__main__":
    if len(sys.argv) != 2:
        raise SystemExit("usage: report_log_dir.py <log-directory>")
    asyncio.run(main(Path(sys.argv[1])))
