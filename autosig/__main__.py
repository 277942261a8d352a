"""Entry point: ``python -m autosig``."""

import asyncio

from autosig.app import main

if __name__ == "__main__":
    asyncio.run(main())
