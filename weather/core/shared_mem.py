# shared_mem.py — Safe wrapper for a named SharedMemory record block
import multiprocessing.shared_memory
import numpy as np
from dataclasses import dataclass
from typing import Optional
from weather.core.logger import APP_LOGGER

@dataclass
class SharedBlockLayout:
    """Metadata a reader needs to attach to the block."""
    name: str
    dtype: np.dtype
    count: int
    size_bytes: int

class SharedMemoryManager:
    """
    Manages a shared memory block holding ``count`` structured records.

    Architecture:
    - ONE block, wrapped as a 1-D NumPy structured array.
    - The creator (scheduler process) writes, attached readers poll.
    - Fresh blocks are zeroed byte-wise, so readers that attach
      before the first write see an all-zero record.

    Safety:
    - SharedMemory persists until explicitly unlinked.
    - Only the creator unlinks; readers just close their mapping.
    """
    def __init__(self, name: str, dtype, count: int = 1, create: bool = False):
        self.name = name
        self.dtype = np.dtype(dtype)
        self.count = int(count)
        self.size_bytes = int(self.count * self.dtype.itemsize)
        self.shm: Optional[multiprocessing.shared_memory.SharedMemory] = None
        self.array: Optional[np.ndarray] = None
        self._is_creator = create

        try:
            if create:
                # Cleanup potentially stale block left by a crashed run
                try:
                    stale = multiprocessing.shared_memory.SharedMemory(name=self.name, create=False)
                    stale.close()
                    stale.unlink()
                except FileNotFoundError:
                    pass

                self.shm = multiprocessing.shared_memory.SharedMemory(name=self.name, create=True, size=self.size_bytes)
                # Raw zero bytes; fill(0) would store b"0" in string fields
                self.shm.buf[:self.size_bytes] = bytes(self.size_bytes)
            else:
                self.shm = multiprocessing.shared_memory.SharedMemory(name=self.name, create=False)

            self.array = np.ndarray((self.count,), dtype=self.dtype, buffer=self.shm.buf)

        except Exception as e:
            APP_LOGGER.error(f"SharedMemory Init Error ({name}): {e}")
            self.cleanup()
            raise

    @property
    def is_creator(self) -> bool:
        return self._is_creator

    def layout(self) -> SharedBlockLayout:
        return SharedBlockLayout(self.name, self.dtype, self.count, self.size_bytes)

    def cleanup(self):
        """Release resources. Creator also unlinks (deletes) the memory."""
        if self.array is not None:
            del self.array
            self.array = None

        if self.shm is not None:
            try:
                self.shm.close()
                if self._is_creator:
                    self.shm.unlink()
            except Exception as e:
                APP_LOGGER.warning(f"SharedMemory cleanup ({self.name}): {e}")
            self.shm = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.cleanup()
