import os
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

_GLOBAL_EXECUTOR: Optional[ThreadPoolExecutor] = None


def get_global_executor() -> ThreadPoolExecutor:
    """
    Returns the executor shared by the scan, icon decoding and any other
    blocking work, creating it on first use.
    """
    global _GLOBAL_EXECUTOR
    if _GLOBAL_EXECUTOR is None:
        max_workers = (os.cpu_count() or 1) + 4
        _GLOBAL_EXECUTOR = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="LauncherWorker"
        )
    return _GLOBAL_EXECUTOR
