"""
Sample usage of imgpool.

Demonstrates:
- Loading images under a concurrency limit
- Depositing several copies into a named pool
- Batch loads with an aggregate callback
- Binding a display slot to a pool
- Flushing pools on a lifecycle transition
"""

import asyncio
import sys

from imgpool import ImageSlot, LoaderConfig, PoolConfig, create_context


async def main():
    sources = sys.argv[1:] or [
        "https://httpbin.org/image/png",
        "https://httpbin.org/image/jpeg",
    ]

    async with create_context(
        PoolConfig(default_pool_name="default"),
        LoaderConfig(request_limit=2),
    ) as images:
        # Two copies of the first image into "gallery"
        first = await images.load(sources[0], "gallery", 2)
        if first is False:
            print(f"Could not load {sources[0]}")
            return
        print(f"Loaded {first!r}")
        print(f"Gallery: {images.pool('gallery').info()}")

        # Everything at once; failures come back as False
        _, done = images.load_many(
            sources,
            lambda results: print(f"Batch done: {sum(1 for r in results if r)}/{len(results)}"),
            "gallery",
        )
        await done

        # A slot that prints instead of touching a real display
        slot = ImageSlot(
            images.image_pool,
            pool_name="gallery",
            attach=lambda img: print(f"attach {img!r}"),
            detach=lambda img: print(f"detach {img!r}"),
        )
        slot.show(sources[0])
        slot.release()

        print(f"Flushed {images.transition()} pools on transition")


if __name__ == "__main__":
    asyncio.run(main())
