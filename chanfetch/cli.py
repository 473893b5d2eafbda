"""CLI entry-point for the chanfetch client."""

from __future__ import annotations

import asyncio
import logging
import sys
from dataclasses import replace
from typing import Any, Awaitable, Callable

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .client import ChanClient
from .config import ClientConfig
from .errors import ChanError, ThreadArchived
from .models import Post

console = Console()


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, console=console)],
    )
    # Suppress noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def _run(ctx: click.Context, action: Callable[[ChanClient], Awaitable[Any]]) -> Any:
    """Run ``action`` against a fresh client, turning API errors into exit code 1."""

    async def runner() -> Any:
        async with ChanClient(ctx.obj["cfg"]) as client:
            return await action(client)

    try:
        return asyncio.run(runner())
    except ChanError as exc:
        console.print(f"[red]✗[/red] {exc}")
        sys.exit(1)


def _clean(com: str | None, width: int = 60) -> str:
    text = (com or "").replace("<br>", " ")
    return text[:width]


def _print_posts(posts: list[Post], board: str, image_base: str) -> None:
    for post in posts:
        name = post.name or "Anonymous"
        console.print(f"[bold cyan]{post.no}[/bold cyan] [green]{name}[/green] {post.now}")
        if post.sub:
            console.print(f"  [bold]{post.sub}[/bold]")
        if post.com:
            console.print("  " + post.com.replace("<br>", "\n  "))
        image = post.image_url(image_base, board)
        if image:
            console.print(f"  [dim]{image}[/dim]")


@click.group()
@click.option("--api-base", default=None, help="API base URL [env: CHAN_API_BASE]")
@click.option("--interval", default=None, type=float, help="Seconds between requests [env: CHAN_REQUEST_INTERVAL]")
@click.option("--timeout", default=None, type=float, help="HTTP timeout in seconds [env: CHAN_TIMEOUT]")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, api_base: str | None, interval: float | None, timeout: float | None, verbose: bool) -> None:
    """Read boards, catalogs and threads from the 4chan API.

    All requests share one 1-per-second rate limit and refreshes use
    If-Modified-Since, so unchanged resources are not downloaded twice.
    """
    _setup_logging(verbose)
    ctx.ensure_object(dict)
    cfg = ClientConfig.from_env()
    # Command-line flags win over CHAN_* variables.
    overrides = {
        k: v
        for k, v in (("api_base", api_base), ("request_interval", interval), ("timeout", timeout))
        if v is not None
    }
    if overrides:
        cfg = replace(cfg, api=replace(cfg.api, **overrides))
    ctx.obj["cfg"] = cfg


# ─── Commands ────────────────────────────────────────────────────


@cli.command()
@click.pass_context
def boards(ctx: click.Context) -> None:
    """List all available boards."""
    board_list = _run(ctx, lambda c: c.boards())
    table = Table(title="4chan Boards", show_header=True, header_style="bold cyan")
    table.add_column("Board", style="bold")
    table.add_column("Title")
    table.add_column("SFW", justify="center")
    for b in sorted(board_list, key=lambda x: x.board):
        table.add_row(f"/{b.board}/", b.title, "✓" if b.ws_board else "✗")
    console.print(table)


@cli.command()
@click.argument("board")
@click.option("--limit", default=10, type=int, help="Number of threads to show")
@click.pass_context
def catalog(ctx: click.Context, board: str, limit: int) -> None:
    """Show a board's catalog.

    Example: chanfetch catalog g --limit 5
    """
    cat = _run(ctx, lambda c: c.catalog(board))
    table = Table(title=f"/{board}/ Catalog", show_header=True, header_style="bold cyan")
    table.add_column("No", style="bold", justify="right")
    table.add_column("Subject", max_width=40)
    table.add_column("Replies", justify="right")
    table.add_column("Images", justify="right")
    for count, t in enumerate(cat.threads()):
        if count >= limit:
            break
        table.add_row(str(t.no), t.sub or _clean(t.com, 40), str(t.replies or 0), str(t.images or 0))
    console.print(table)


@cli.command()
@click.argument("board")
@click.pass_context
def threads(ctx: click.Context, board: str) -> None:
    """Show every thread of a board with its reply count.

    Example: chanfetch threads po
    """
    thread_list = _run(ctx, lambda c: c.thread_list(board))
    table = Table(title=f"/{board}/ Threads", show_header=True, header_style="bold cyan")
    table.add_column("Page", justify="right")
    table.add_column("No", style="bold", justify="right")
    table.add_column("Replies", justify="right")
    table.add_column("Last Modified", justify="right")
    for page in thread_list:
        for t in page.threads:
            table.add_row(str(page.page), str(t.no), str(t.replies), str(t.last_modified))
    console.print(table)


@cli.command()
@click.argument("board")
@click.pass_context
def archive(ctx: click.Context, board: str) -> None:
    """Show how many threads a board has archived and the oldest one.

    Example: chanfetch archive po
    """
    arch = _run(ctx, lambda c: c.archive(board))
    if not len(arch):
        console.print(f"No archived threads on /{board}/")
        return
    console.print(f"/{board}/ has {len(arch)} archived threads, oldest: [bold]{min(arch)}[/bold]")


@cli.command()
@click.argument("board")
@click.argument("thread_no", type=int)
@click.pass_context
def thread(ctx: click.Context, board: str, thread_no: int) -> None:
    """Print a single thread.

    Example: chanfetch thread po 570368
    """
    t = _run(ctx, lambda c: c.thread(board, thread_no))
    _print_posts(t.payload.posts, board, ctx.obj["cfg"].api.image_base)
    if t.archived:
        console.print(f"[yellow]Thread /{board}/{thread_no} is archived[/yellow]")


@cli.command()
@click.argument("board")
@click.argument("thread_no", type=int)
@click.option("--count", default=0, type=int, help="Number of refreshes (0 = until archived)")
@click.pass_context
def watch(ctx: click.Context, board: str, thread_no: int, count: int) -> None:
    """Follow a thread, printing replies as they arrive.

    Refreshes respect the per-thread cooldown, so this polls at most
    once every 10 seconds.

    Example: chanfetch watch po 570368 --count 6
    """

    async def follow(client: ChanClient) -> None:
        t = await client.thread(board, thread_no)
        _print_posts(t.payload.posts, board, ctx.obj["cfg"].api.image_base)
        seen = {p.no for p in t}
        done = 0
        while count == 0 or done < count:
            done += 1
            try:
                changed = await t.refresh()
            except ThreadArchived as exc:
                console.print(f"[yellow]{exc}[/yellow]")
                return
            if changed:
                _print_posts([p for p in t if p.no not in seen], board, ctx.obj["cfg"].api.image_base)
                seen = {p.no for p in t}

    _run(ctx, follow)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
