"""Poster board CLI commands."""

from __future__ import annotations

import click

from seminar.cli.common import open_repository


@click.group("board")
def board_group() -> None:
    """Allocate poster boards."""
    pass


@board_group.command("assign")
@click.argument("board_id")
@click.argument("presenter_id")
@click.argument("session_id")
@click.pass_context
def board_assign(ctx: click.Context, board_id: str, presenter_id: str, session_id: str) -> None:
    """Give BOARD_ID to PRESENTER_ID for SESSION_ID."""
    from seminar.engine.boards import BoardService

    with open_repository(ctx) as (config, repo):
        BoardService(repo, config.boards).assign_board(board_id, presenter_id, session_id)
        click.echo(f"Board {board_id} -> {presenter_id}")


@board_group.command("unassign")
@click.argument("board_id")
@click.pass_context
def board_unassign(ctx: click.Context, board_id: str) -> None:
    """Release BOARD_ID."""
    from seminar.engine.boards import BoardService

    with open_repository(ctx) as (config, repo):
        if BoardService(repo, config.boards).unassign_board(board_id):
            click.echo(f"Released {board_id}")
        else:
            click.echo(f"{board_id} was not assigned")


@board_group.command("available")
@click.option("--limit", type=int, default=None, help="Show at most N boards")
@click.pass_context
def board_available(ctx: click.Context, limit: int | None) -> None:
    """List free boards in ascending order."""
    from seminar.engine.boards import BoardService

    with open_repository(ctx) as (config, repo):
        free = BoardService(repo, config.boards).get_available_boards()
        click.echo(f"{len(free)} board(s) available")
        shown = free[:limit] if limit is not None else free
        if shown:
            click.echo("  " + " ".join(shown))


@board_group.command("list")
@click.option("--session", "session_id", default=None, help="Only boards for this session")
@click.pass_context
def board_list(ctx: click.Context, session_id: str | None) -> None:
    """List current board assignments."""
    from seminar.engine.boards import BoardService

    with open_repository(ctx) as (config, repo):
        service = BoardService(repo, config.boards)
        boards = service.boards_for_session(session_id) if session_id else service.list_assignments()
        if not boards:
            click.echo("No boards assigned.")
            return
        for b in sorted(boards, key=lambda b: b.board_id):
            click.echo(f"  {b.board_id}  {b.presenter_id}  ({b.session_id})")
