"""Wall clock implementation of the Clock protocol."""

import time


class SystemClock:
    """Clock backed by ``time.time()``."""

    def now(self) -> float:
        return time.time()
