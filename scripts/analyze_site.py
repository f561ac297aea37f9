"""Run one website analysis in-process and print the resulting job as JSON.

Usage: python scripts/analyze_site.py https://example.com
"""

import asyncio
import logging
import sys

from company_analyzer.services.analyzer import get_orchestrator


async def analyze(url: str) -> int:
    orchestrator = await get_orchestrator()
    try:
        job = await orchestrator.submit(url)
        await orchestrator.wait_idle()
        job = await orchestrator.get(job.id)
    finally:
        await orchestrator.aclose()

    print(job.model_dump_json(indent=2))
    return 0 if job.status.value == "completed" else 1


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print("Usage: python scripts/analyze_site.py <url>")
        sys.exit(2)
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    sys.exit(asyncio.run(analyze(sys.argv[1])))
