"""
One-time readiness gate for the numerical stack.

The first ``await gate.ready()`` starts initialization; every caller,
concurrent or later, awaits the same task. Once it has succeeded it is never
run again. A failed initialization is forgotten so the next call retries.
"""

import asyncio
import importlib
import logging
from typing import Callable, Optional, Sequence

logger = logging.getLogger(__name__)

DEFAULT_MODULES = ("pandas", "numpy", "scipy.stats", "sklearn", "xgboost")


def _import_modules(modules: Sequence[str]) -> None:
    for name in modules:
        importlib.import_module(name)


class EngineGate:
    def __init__(self, initializer: Optional[Callable[[], None]] = None, modules: Sequence[str] = DEFAULT_MODULES):
        self._initializer = initializer or (lambda: _import_modules(modules))
        self._task: Optional[asyncio.Task] = None
        self._ready = False
        self.init_count = 0

    @property
    def is_ready(self) -> bool:
        return self._ready

    async def _initialize(self) -> None:
        self.init_count += 1
        logger.info("Initializing execution engine")
        await asyncio.to_thread(self._initializer)
        self._ready = True
        logger.info("Execution engine ready")

    async def ready(self) -> None:
        if self._ready:
            return
        if self._task is None:
            self._task = asyncio.ensure_future(self._initialize())
        task = self._task
        try:
            await asyncio.shield(task)
        except Exception:
            if self._task is task:
                self._task = None
            raise


_default_gate: Optional[EngineGate] = None


def get_engine_gate() -> EngineGate:
    """Process-wide gate, created on first use."""
    global _default_gate
    if _default_gate is None:
        _default_gate = EngineGate()
    return _default_gate
