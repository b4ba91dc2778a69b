"""
CLI reporter for detection results.

Renders a boxed terminal report of the opportunities found by a
single detection run.
"""

import sys
from collections.abc import Sequence
from typing import TextIO

from cyclearb import __version__
from cyclearb.core.types import ArbitrageOpportunity
from cyclearb.utils.math import format_profit


class OpportunityReporter:
    """
    Terminal report for one detection run.

    Displays:
    - Run parameters
    - Graph summary
    - One row per opportunity, in discovery order
    """

    # Box drawing characters
    BOX_TL = "\u2554"  # ╔
    BOX_TR = "\u2557"  # ╗
    BOX_BL = "\u255a"  # ╚
    BOX_BR = "\u255d"  # ╝
    BOX_H = "\u2550"  # ═
    BOX_V = "\u2551"  # ║
    BOX_LT = "\u2560"  # ╠
    BOX_RT = "\u2563"  # ╣
    ARROW = " \u2192 "  # →

    def __init__(
        self,
        width: int = 72,
        output: TextIO | None = None,
    ) -> None:
        """
        Initialize reporter.

        Args:
            width: Report width in characters.
            output: Output stream (default: stdout).
        """
        self._width = width
        self._output = output or sys.stdout

    def _pad(self, text: str, width: int) -> str:
        """Pad text to width."""
        return text.ljust(width)[:width]

    def _line(self, content: str) -> str:
        """Create a line with borders."""
        inner_width = self._width - 2
        return f"{self.BOX_V}{self._pad(content, inner_width)}{self.BOX_V}"

    def _divider(self) -> str:
        """Create a horizontal divider."""
        return f"{self.BOX_LT}{self.BOX_H * (self._width - 2)}{self.BOX_RT}"

    def format_path(self, opportunity: ArbitrageOpportunity) -> str:
        """Render a path as `USDT → ETH → BTC → USDT`."""
        return self.ARROW.join(asset.upper() for asset in opportunity.path)

    def render(
        self,
        base_asset: str,
        max_path_length: int,
        opportunities: Sequence[ArbitrageOpportunity],
        graph_summary: dict[str, int] | None = None,
    ) -> str:
        """
        Render the report.

        Returns:
            Formatted report string.
        """
        lines = []

        lines.append(f"{self.BOX_TL}{self.BOX_H * (self._width - 2)}{self.BOX_TR}")
        lines.append(self._line(f"  CYCLE ARBITRAGE SCAN v{__version__}"))
        lines.append(self._divider())

        params = f"  Base: {base_asset.upper()}  |  Max path: {max_path_length}"
        if graph_summary:
            params += (
                f"  |  Assets: {graph_summary.get('nodes', 0)}"
                f"  |  Edges: {graph_summary.get('edges', 0)}"
            )
        lines.append(self._line(params))
        lines.append(self._divider())

        if not opportunities:
            lines.append(self._line("  No profitable cycles found"))
        else:
            for i, opportunity in enumerate(opportunities, 1):
                profit = format_profit(opportunity.profit_percentage)
                lines.append(
                    self._line(f"  {i:3}. {profit:>12}  {self.format_path(opportunity)}")
                )

        lines.append(self._divider())
        lines.append(self._line(f"  Total opportunities: {len(opportunities)}"))
        lines.append(f"{self.BOX_BL}{self.BOX_H * (self._width - 2)}{self.BOX_BR}")

        return "\n".join(lines)

    def display(
        self,
        base_asset: str,
        max_path_length: int,
        opportunities: Sequence[ArbitrageOpportunity],
        graph_summary: dict[str, int] | None = None,
    ) -> None:
        """Write the report to the output stream."""
        self._output.write(
            self.render(base_asset, max_path_length, opportunities, graph_summary)
        )
        self._output.write("\n")
        self._output.flush()
