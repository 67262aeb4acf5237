"""
Encounter portrait providers.

A portrait is an opaque handle owned by whatever renders the map. The
generator only asks for one and attaches it to a node whenever it arrives,
which may be after the request returns.
"""

from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence

import structlog

from ..utils.random import get_prng
from .alea_prng import AleaPRNG

logger = structlog.get_logger()

PortraitCallback = Callable[[Any], None]


class PortraitProvider(Protocol):
    """Anything that can hand out encounter portraits."""

    def request_portrait(self, on_ready: PortraitCallback) -> None:
        """Pick a portrait and pass its handle to ``on_ready`` once available."""
        ...


class PortraitCatalog:
    """
    Picks portraits uniformly from a fixed catalog.

    Handles are produced by ``loader(entry)`` the first time an index is
    picked and cached, so later picks of the same index reuse the handle.
    """

    def __init__(self, entries: Sequence, loader: Optional[Callable[[Any], Any]] = None,
                 prng: Optional[AleaPRNG] = None):
        """
        Args:
            entries: Catalog entries, such as portrait file paths
            loader: Turns an entry into a handle; the entry itself if omitted
            prng: Random source for picks (shared PRNG if omitted)
        """
        if not entries:
            raise ValueError("Portrait catalog is empty")
        self.entries: List = list(entries)
        self._loader = loader
        self._prng = prng or get_prng()
        self._cache: Dict[int, Any] = {}

    @classmethod
    def from_directory(cls, directory, pattern: str = "*.png",
                       loader: Optional[Callable[[Any], Any]] = None,
                       prng: Optional[AleaPRNG] = None) -> "PortraitCatalog":
        """Catalog every file in ``directory`` matching ``pattern``, sorted by name."""
        paths = sorted(Path(directory).glob(pattern))
        logger.info("Loaded portrait catalog", directory=str(directory), portraits=len(paths))
        return cls(paths, loader=loader, prng=prng)

    def __len__(self) -> int:
        return len(self.entries)

    def cached(self) -> int:
        """Number of handles loaded so far."""
        return len(self._cache)

    def get_portrait(self) -> Any:
        """Pick a portrait and return its handle."""
        index = self._prng.randint_below(len(self.entries))
        if index not in self._cache:
            entry = self.entries[index]
            self._cache[index] = self._loader(entry) if self._loader else entry
        return self._cache[index]

    def request_portrait(self, on_ready: PortraitCallback) -> None:
        on_ready(self.get_portrait())
