from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np


@dataclass
class LayerCache:
    base_key: tuple[Any, ...] | None = None
    base_template: np.ndarray | None = None

    def lookup(self, key: tuple[Any, ...]) -> np.ndarray | None:
        if self.base_key != key:
            return None
        return self.base_template

    def store(self, key: tuple[Any, ...], template: np.ndarray) -> None:
        self.base_key = key
        self.base_template = template

    def invalidate(self) -> None:
        self.base_key = None
        self.base_template = None
