"""Tabular progress output for iterative solvers."""

from __future__ import annotations

import sys
from typing import Any, List, Optional, Union

import numpy as np

from optimjax.options import OutputterOptions


class Outputter:
    """Print named numeric columns, one row per call to ``output_state``.

    Columns are declared with ``add_entry``/``add_entries``, then values are
    queued with ``add_value``/``add_values`` and flushed as one row. Nothing is
    printed unless ``options.active`` is set.

    Example:
        >>> out = Outputter(OutputterOptions(active=True))
        >>> out.add_entry("iter")
        >>> out.add_entries("x", 2)
        >>> out.output_header()
        >>> out.add_value(0)
        >>> out.add_values(jnp.array([1.0, 2.0]))
        >>> out.output_state()
    """

    def __init__(self, options: Optional[OutputterOptions] = None) -> None:
        self.options = options or OutputterOptions()
        self.entries: List[str] = []
        self.values: List[str] = []
        self.num_rows = 0

    def set_options(self, options: OutputterOptions) -> None:
        """Replace the options and clear any declared columns."""
        self.options = options
        self.entries = []
        self.values = []
        self.num_rows = 0

    def add_entry(self, name: str) -> None:
        self.entries.append(name)

    def add_entries(self, prefix: str, size: int) -> None:
        """Declare ``size`` columns named prefix[0], prefix[1], ..."""
        self.entries.extend(f"{prefix}[{i}]" for i in range(size))

    def add_value(self, value: Union[str, int, float, Any]) -> None:
        self.values.append(self._format(value))

    def add_values(self, values: Any) -> None:
        for value in np.asarray(values).ravel():
            self.values.append(self._format(value))

    def output_header(self) -> None:
        if not self.options.active:
            return
        header = self._join(self.entries)
        self._print(header)
        self._print("-" * len(header))

    def output_state(self) -> None:
        if not self.options.active:
            self.values = []
            return
        self._print(self._join(self.values))
        self.values = []
        self.num_rows += 1

    def _format(self, value: Any) -> str:
        if isinstance(value, str):
            return value
        if isinstance(value, (int, np.integer)) and not isinstance(value, bool):
            return str(int(value))
        number = float(value)
        precision = self.options.precision
        return f"{number:.{precision}f}" if self.options.fixed else f"{number:.{precision}e}"

    def _join(self, cells: List[str]) -> str:
        width = self.options.width
        separator = self.options.separator
        return separator.join(cell.rjust(width) for cell in cells)

    def _print(self, line: str) -> None:
        stream = self.options.stream if self.options.stream is not None else sys.stdout
        print(line, file=stream)
