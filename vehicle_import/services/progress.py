from __future__ import annotations

import sys
from collections.abc import Iterable, Iterator
from typing import Any, TypeVar

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

"""tqdm progress for per-plate registry lookups (TTY only).

Plate-list imports wait on the network once per plate, so they are the one
place a bar is worth showing. Without a TTY (CI, pipes, tests) no bar is
created and every method is a no-op apart from counting.
"""

__all__ = [
    "ProgressTracker",
    "is_tty_enabled",
]

T = TypeVar("T")


def is_tty_enabled() -> bool:
    return sys.stdout.isatty()


class ProgressTracker:
    """Bar over `total` items; `enabled=None` means "only on a TTY"."""

    def __init__(
        self,
        total: int,
        *,
        description: str = "Looking up plates",
        unit: str = "plate",
        enabled: bool | None = None,
    ) -> None:
        self.total = total
        self.description = description
        self.current = 0
        self.enabled = is_tty_enabled() if enabled is None else enabled
        self.pbar: TqdmType[Any] | None = None
        if self.enabled:
            self.pbar = tqdm(
                total=total,
                desc=description,
                unit=unit,
                disable=False,
                leave=True,
                position=0,
                ncols=80,
                ascii=True,
            )

    def start_item(self, label: str) -> None:
        """Count `label` as started and show it next to the description."""
        self.current += 1
        if self.pbar is not None:
            self.pbar.set_description(f"{self.description} ({label})")

    def finish_item(self) -> None:
        if self.pbar is not None:
            self.pbar.update(1)
            self.pbar.set_description(self.description)

    def set_postfix(self, **stats: Any) -> None:
        if self.pbar is not None:
            self.pbar.set_postfix(**stats)

    def iterate(self, items: Iterable[T], label=str) -> Iterator[T]:
        """Yield each item between start_item() and finish_item()."""
        for item in items:
            self.start_item(label(item))
            yield item
            self.finish_item()

    def close(self) -> None:
        if self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> ProgressTracker:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
