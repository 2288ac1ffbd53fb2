"""
Quick sanity run: 50 GETs against example.com, 5 at a time.
Run: uv run examples/load_example_com.py
"""
import asyncio
import os

from rubber import Target, render_summary, run


async def main():
    target = Target("https://example.com/", total_count=50, concurrency=5)
    stats = await run(
        target,
        request_timeout_s=float(os.getenv("RUBBER_TIMEOUT_S", "10")),
        progress_callback=lambda done, total, _: print(f"\r{done}/{total}", end=""),
    )
    print()
    print(render_summary(stats))

if __name__ == "__main__":
    asyncio.run(main())
