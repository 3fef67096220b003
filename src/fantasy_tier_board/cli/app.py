from pathlib import Path
from typing import Annotated

import typer

from fantasy_tier_board.cli._logging import configure_logging
from fantasy_tier_board.cli._output import console, print_board, print_error, print_pool, print_warning
from fantasy_tier_board.cli.factory import build_board_context
from fantasy_tier_board.config import BoardSettings, create_config, load_board_settings
from fantasy_tier_board.domain.candidate import Category
from fantasy_tier_board.domain.tier import UNASSIGNED_TIER_KEY, MoveEvent, tier_key_for
from fantasy_tier_board.exceptions import TierBoardException
from fantasy_tier_board.view.filters import parse_category

app = typer.Typer(help="Fantasy tier board: rank NFL players into tiers.")

_NameOpt = Annotated[str, typer.Option("--name", "-n", help="Only show players whose name contains this text")]
_PositionOpt = Annotated[str | None, typer.Option("--position", "-p", help="Only show one position (QB, RB, WR, TE)")]


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable DEBUG logging")] = False,
    db: Annotated[Path | None, typer.Option("--db", help="Path to the board database")] = None,
    config_file: Annotated[str, typer.Option("--config", help="YAML config file")] = "tierboard.yaml",
) -> None:
    """Fantasy tier board: rank NFL players into tiers."""
    configure_logging(verbose=verbose)
    cfg = create_config(config_file, db_path=str(db) if db is not None else None)
    ctx.obj = load_board_settings(cfg)
    if ctx.invoked_subcommand is None:
        raise typer.Exit()


def _settings(ctx: typer.Context) -> BoardSettings:
    settings = ctx.obj
    if not isinstance(settings, BoardSettings):
        settings = load_board_settings()
    return settings


def _resolve_tier_key(raw: str) -> str:
    value = raw.strip().lower()
    if value in ("unranked", "unassigned", UNASSIGNED_TIER_KEY):
        return UNASSIGNED_TIER_KEY
    if value.isdigit():
        return tier_key_for(int(value))
    return value


def _category_or_exit(position: str | None) -> Category | None:
    try:
        return parse_category(position)
    except ValueError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e


@app.command()
def show(
    ctx: typer.Context,
    name: _NameOpt = "",
    position: _PositionOpt = None,
    show_all: Annotated[bool, typer.Option("--all", help="Reveal the whole unranked pool")] = False,
) -> None:
    """Show every tier with current ranks."""
    category = _category_or_exit(position)
    with build_board_context(_settings(ctx)) as bctx:
        board = bctx.board
        if show_all:
            while not board.materializer.exhausted:
                board.reveal_more()
        board.set_name_filter(name)
        visibility = board.set_category_filter(category)
        print_board(board, board.tiers(), visibility)


@app.command()
def pool(
    ctx: typer.Context,
    name: _NameOpt = "",
    position: _PositionOpt = None,
    limit: Annotated[int, typer.Option("--limit", help="Maximum number of players to list")] = 25,
) -> None:
    """Search the unranked pool, revealing it chunk by chunk."""
    category = _category_or_exit(position)
    with build_board_context(_settings(ctx)) as bctx:
        board = bctx.board
        board.set_name_filter(name)
        board.set_category_filter(category)
        while True:
            visibility = board.visibility()
            matches = [c for c in board.unassigned_view() if visibility.get(c.id, False)]
            if len(matches) >= limit or board.materializer.exhausted:
                break
            board.reveal_more()
        print_pool(matches[:limit], board.materializer.revealed_count, board.materializer.total)


@app.command("add-tier")
def add_tier(ctx: typer.Context) -> None:
    """Append a new tier after the last ranked tier."""
    with build_board_context(_settings(ctx)) as bctx:
        try:
            tier_key = bctx.board.add_tier()
        except TierBoardException as e:
            print_error(str(e))
            raise typer.Exit(code=1) from e
        console.print(f"[bold green]Created[/bold green] {tier_key}")


@app.command()
def move(
    ctx: typer.Context,
    candidate_id: Annotated[str, typer.Argument(help="Player id")],
    tier: Annotated[str, typer.Argument(help="Destination tier number, key, or 'unranked'")],
    index: Annotated[int | None, typer.Option("--index", "-i", help="0-based position in the tier (default: end)")] = None,
) -> None:
    """Move a player into a tier."""
    with build_board_context(_settings(ctx)) as bctx:
        board = bctx.board
        source_key = board.registry.tier_of(candidate_id)
        if source_key is None:
            print_error(f"Unknown player {candidate_id!r}")
            raise typer.Exit(code=1)
        destination_key = _resolve_tier_key(tier)
        try:
            if index is None:
                index = len(board.registry.order(destination_key))
            changed = board.handle_move(MoveEvent(candidate_id, source_key, destination_key, index))
        except TierBoardException as e:
            print_error(str(e))
            raise typer.Exit(code=1) from e
        label = board.candidates[candidate_id].label
        if not changed:
            console.print(f"{label} is already there.")
            return
        rank = board.rank_of(candidate_id)
        suffix = f" at rank {rank}" if rank is not None else ""
        console.print(f"[bold green]Moved[/bold green] {label} to {destination_key}{suffix}")


@app.command()
def rank(
    ctx: typer.Context,
    candidate_id: Annotated[str, typer.Argument(help="Player id")],
    new_rank: Annotated[str, typer.Argument(help="Target rank within the player's tier")],
) -> None:
    """Set a player's rank within their tier."""
    with build_board_context(_settings(ctx)) as bctx:
        board = bctx.board
        if candidate_id not in board.candidates:
            print_error(f"Unknown player {candidate_id!r}")
            raise typer.Exit(code=1)
        if not board.registry.is_ranked(candidate_id):
            print_warning(f"{board.candidates[candidate_id].label} is unranked; move it into a tier first.")
            return
        board.edit_rank(candidate_id, new_rank)
        console.print(f"{board.candidates[candidate_id].label} is now rank {board.rank_of(candidate_id)}")


@app.command()
def save(ctx: typer.Context) -> None:
    """Write the current tiers to storage now."""
    with build_board_context(_settings(ctx)) as bctx:
        if bctx.board.save_now():
            console.print("[bold green]Saved[/bold green] rankings")
        else:
            print_warning("Rankings could not be saved")


@app.command()
def reset(
    ctx: typer.Context,
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip confirmation")] = False,
) -> None:
    """Clear all saved tiers and start over."""
    if not yes and not typer.confirm("Clear all saved tiers?"):
        raise typer.Exit()
    with build_board_context(_settings(ctx)) as bctx:
        bctx.board.reset_all()
        console.print("[bold green]Reset[/bold green] all tiers")


@app.command()
def refresh(ctx: typer.Context) -> None:
    """Drop the cached player pool so the next command fetches it again."""
    with build_board_context(_settings(ctx), start=False) as bctx:
        bctx.source.invalidate()
        purged = bctx.cache.purge_expired()
        console.print(f"Cleared cached player pool ({purged} expired cache entries removed)")
