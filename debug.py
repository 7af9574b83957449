# debug.py
from __future__ import annotations
import logging
from typing import Dict

COMPONENTS = ("plugboard", "stepping", "encipher", "cracker")
_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s]: %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"


class Debug:
    _root_configured: bool = False          # class-level guard

    # switches are shared by every instance, so one toggle reaches all modules
    _components: Dict[str, bool] = {c: False for c in COMPONENTS}
    _enabled: bool = True

    def __init__(self, *, level: int = logging.INFO) -> None:
        """
        Multiple Debug() instances share the same root logger config.
        Use `add_file` to also stream to a file.
        """
        if not Debug._root_configured:
            logging.basicConfig(
                level=level,
                format=_FORMAT,
                datefmt=_DATEFMT,
                handlers=[logging.StreamHandler()],
            )
            Debug._root_configured = True

        self.logger = logging.getLogger("ENIGMA")
        self.components: Dict[str, bool] = Debug._components

    @property
    def enabled(self) -> bool:
        return Debug._enabled

    # ── logging API ──────────────────────────────────────────────
    def log(self, component: str, message: str, *args: object) -> None:
        """`%`-style args are only formatted when the record is emitted."""
        if Debug._enabled and self.components.get(component, False):
            self.logger.debug("[%s] " + message, component.upper(), *args)

    def info(self, component: str, message: str) -> None:
        """Progress line at INFO; muted only by the global switch."""
        if Debug._enabled:
            self.logger.info("[%s] %s", component.upper(), message)

    # ── component toggles ────────────────────────────────────────
    def enable(self, *components: str) -> None:
        for c in components:
            self._require(c)
            self.components[c] = True

    def disable(self, *components: str) -> None:
        for c in components:
            self._require(c)
            self.components[c] = False

    def toggle(self, component: str) -> None:
        self._require(component)
        self.components[component] = not self.components[component]

    def toggle_global(self, state: bool) -> None:
        """Switch every component on/off at once."""
        Debug._enabled = state

    def status(self) -> Dict[str, bool]:
        """Return a *copy* of the current component map."""
        return self.components.copy()

    # ── handler helpers ──────────────────────────────────────────
    def set_level(self, level: int) -> None:
        self.logger.setLevel(level)

    def add_file(self, path: str) -> None:
        handler = logging.FileHandler(path, encoding="utf-8")
        handler.setFormatter(logging.Formatter(_FORMAT, datefmt=_DATEFMT))
        self.logger.addHandler(handler)

    # ── helpers ──────────────────────────────────────────────────
    def _require(self, component: str) -> None:
        if component not in self.components:
            raise ValueError(f"No such component: {component!r}")

    # nicety for `print(dbg)`
    def __repr__(self) -> str:
        active = [k for k, v in self.components.items() if v]
        return f"<Debug enabled={Debug._enabled} active={active}>"
