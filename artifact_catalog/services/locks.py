from __future__ import annotations

import asyncio
import weakref

# One lock per event loop; asyncio locks cannot be shared across loops.
_locks: "weakref.WeakKeyDictionary[asyncio.AbstractEventLoop, asyncio.Lock]" = weakref.WeakKeyDictionary()


def structure_lock() -> asyncio.Lock:
    """
    Serializes writes that depend on a read of the category structure:
    sibling positions, subtree paths, the delete guard and artifact
    placement into a category. Hold it from the read to the last write.
    """
    loop = asyncio.get_running_loop()
    lock = _locks.get(loop)
    if lock is None:
        lock = _locks[loop] = asyncio.Lock()
    return lock
