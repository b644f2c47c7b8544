import time
from typing import Optional


def generate_filename(suffix: str = ".txt", now: Optional[float] = None) -> str:
    """Name a new file after the current time in epoch milliseconds, e.g. `1718000000000.txt`.

    No collision check is made; two files created in the same millisecond share a name.
    """
    timestamp = time.time() if now is None else now
    return f"{int(timestamp * 1000)}{suffix}"
