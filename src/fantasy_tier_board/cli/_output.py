from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table

if TYPE_CHECKING:
    from collections.abc import Sequence

    from fantasy_tier_board.board import TierBoard
    from fantasy_tier_board.domain.candidate import Candidate
    from fantasy_tier_board.domain.tier import TierView

console = Console(highlight=False)
err_console = Console(stderr=True, highlight=False)

_CATEGORY_STYLES = {"QB": "red", "RB": "green", "WR": "blue", "TE": "yellow"}


def print_error(message: str) -> None:
    err_console.print(f"[red bold]Error:[/red bold] {message}")


def print_warning(message: str) -> None:
    err_console.print(f"[yellow bold]Warning:[/yellow bold] {message}")


def _category_cell(candidate: Candidate) -> str:
    style = _CATEGORY_STYLES.get(candidate.category.value, "white")
    return f"[{style}]{candidate.category.value}[/{style}]"


def _candidate_table(show_rank: bool) -> Table:
    table = Table(show_edge=False, pad_edge=False)
    if show_rank:
        table.add_column("Rank", justify="right")
    table.add_column("ID", justify="right")
    table.add_column("Pos")
    table.add_column("Player")
    return table


def print_tier(board: TierBoard, tier: TierView, visibility: dict[str, bool] | None = None) -> None:
    """Print one tier; candidates hidden by the active filter are omitted."""
    rows = [cid for cid in tier.candidate_ids if visibility is None or visibility.get(cid, True)]
    console.print(f"[bold]{tier.title}[/bold] [dim]({tier.tier_key}, {len(tier.candidate_ids)} players)[/dim]")
    if not rows:
        console.print("  [dim]empty[/dim]")
        return
    table = _candidate_table(show_rank=tier.ranked)
    for cid in rows:
        candidate = board.candidates[cid]
        row: list[str] = []
        if tier.ranked:
            rank = board.rank_of(cid)
            row.append(str(rank) if rank is not None else "")
        row.extend([cid, _category_cell(candidate), candidate.label])
        table.add_row(*row)
    console.print(table)


def print_board(board: TierBoard, tiers: Sequence[TierView], visibility: dict[str, bool] | None = None) -> None:
    for tier in tiers:
        print_tier(board, tier, visibility)
        console.print()
    materializer = board.materializer
    if not materializer.exhausted:
        console.print(f"[dim]Showing {materializer.revealed_count} of {materializer.total} pool players.[/dim]")


def print_pool(candidates: Sequence[Candidate], revealed: int, total: int) -> None:
    if not candidates:
        console.print("No matching players.")
    else:
        table = _candidate_table(show_rank=False)
        for candidate in candidates:
            table.add_row(candidate.id, _category_cell(candidate), candidate.label)
        console.print(table)
    console.print(f"[dim]Searched {revealed} of {total} pool players.[/dim]")
