import asyncio
import json

import typer
from rich.console import Console
from rich.table import Table

from feedstream.config import settings
from feedstream.core.exceptions import ConfigurationError, FeedStreamError, RemoteAPIError
from feedstream.core.log_setup import configure_logging
from feedstream.schemas.identity import FeedIdentity

console = Console()
cli_app = typer.Typer(name="feedstream", help="Command line access to feedstream feeds")


def _run_async(coro):
    """Run async code from sync CLI context."""
    return asyncio.run(coro)


def _make_client():
    from feedstream.client import FeedStreamClient

    return FeedStreamClient()


def _call_feed(slug: str, user_id: str, token: str | None, method: str, *args, **kwargs) -> dict:
    """Build the feed, run one request against it and close the client."""
    async def _call():
        async with _make_client() as client:
            feed = client.feed(slug, user_id, token=token)
            return await getattr(feed, method)(*args, **kwargs)

    try:
        return _run_async(_call())
    except RemoteAPIError as e:
        console.print(f"[bold red]API error {e.status}:[/bold red] {e.message}")
        raise typer.Exit(code=1)
    except FeedStreamError as e:
        console.print(f"[bold red]{e.message}[/bold red]")
        raise typer.Exit(code=1)


@cli_app.callback()
def main_callback(
    log_level: str = typer.Option(settings.feedstream_log_level, "--log-level", help="Log level"),
):
    configure_logging(log_level)


@cli_app.command("token")
def token(
    slug: str = typer.Option(None, "--slug", help="Feed slug, to create a feed token"),
    user_id: str = typer.Option(..., "--user-id", help="User id of the feed or the user token"),
):
    """Print a feed token (with --slug) or a user token. Needs the API secret."""
    try:
        client = _make_client()
        if slug:
            if client.tokens is None:
                raise ConfigurationError("Missing API secret, set FEEDSTREAM_API_SECRET")
            value = client.feed(slug, user_id).credential.token
        else:
            value = client.create_user_token(user_id)
    except FeedStreamError as e:
        console.print(f"[bold red]{e.message}[/bold red]")
        raise typer.Exit(code=1)

    console.print(value)


@cli_app.command("read")
def read(
    slug: str = typer.Argument(help="Feed slug"),
    user_id: str = typer.Argument(help="Feed user id"),
    limit: int = typer.Option(25, "--limit", help="Number of activities"),
    token: str = typer.Option(None, "--token", help="Feed token, defaults to one signed with the API secret"),
):
    """Show the latest activities of a feed."""
    data = _call_feed(slug, user_id, token, "get", limit=limit)
    activities = data.get("results", [])

    if not activities:
        console.print("[dim]No activities.[/dim]")
        return

    table = Table(title=f"{slug}:{user_id}")
    table.add_column("Id", style="cyan")
    table.add_column("Actor")
    table.add_column("Verb", style="green")
    table.add_column("Object")
    table.add_column("Time")

    for activity in activities:
        table.add_row(
            str(activity.get("id", "—")),
            str(activity.get("actor", "—")),
            str(activity.get("verb", "—")),
            str(activity.get("object", "—")),
            str(activity.get("time", "—")),
        )

    console.print(table)


@cli_app.command("add-activity")
def add_activity(
    slug: str = typer.Argument(help="Feed slug"),
    user_id: str = typer.Argument(help="Feed user id"),
    actor: str = typer.Option(..., "--actor"),
    verb: str = typer.Option(..., "--verb"),
    object_: str = typer.Option(..., "--object"),
    foreign_id: str = typer.Option(None, "--foreign-id"),
    extra: str = typer.Option(None, "--extra", help="Additional fields as a JSON object"),
    token: str = typer.Option(None, "--token"),
):
    """Add an activity to a feed."""
    activity = {"actor": actor, "verb": verb, "object": object_}
    if foreign_id:
        activity["foreign_id"] = foreign_id
    if extra:
        activity.update(json.loads(extra))

    data = _call_feed(slug, user_id, token, "add_activity", activity)
    console.print(f"[bold green]Activity added:[/bold green] {data.get('id', '—')}")


@cli_app.command("follow")
def follow(
    slug: str = typer.Argument(help="Feed slug"),
    user_id: str = typer.Argument(help="Feed user id"),
    target: str = typer.Argument(help="Target feed id, e.g. user:42"),
    limit: int = typer.Option(None, "--limit", help="Activities copied from the target"),
    token: str = typer.Option(None, "--token"),
):
    """Make a feed follow another one."""
    target_id = _parse_target(target)
    _call_feed(slug, user_id, token, "follow", target_id, limit=limit)
    console.print(f"[bold green]{slug}:{user_id} now follows {target_id.id}[/bold green]")


@cli_app.command("unfollow")
def unfollow(
    slug: str = typer.Argument(help="Feed slug"),
    user_id: str = typer.Argument(help="Feed user id"),
    target: str = typer.Argument(help="Target feed id, e.g. user:42"),
    keep_history: bool = typer.Option(False, "--keep-history", help="Keep the target's activities in the feed"),
    token: str = typer.Option(None, "--token"),
):
    """Remove a follow relation."""
    target_id = _parse_target(target)
    _call_feed(slug, user_id, token, "unfollow", target_id, keep_history=keep_history)
    console.print(f"[bold red]{slug}:{user_id} unfollowed {target_id.id}[/bold red]")


@cli_app.command("followers")
def followers(
    slug: str = typer.Argument(help="Feed slug"),
    user_id: str = typer.Argument(help="Feed user id"),
    limit: int = typer.Option(25, "--limit"),
    token: str = typer.Option(None, "--token"),
):
    """List the feeds following a feed."""
    data = _call_feed(slug, user_id, token, "followers", limit=limit)
    _print_relations(f"Followers of {slug}:{user_id}", data.get("results", []))


@cli_app.command("following")
def following(
    slug: str = typer.Argument(help="Feed slug"),
    user_id: str = typer.Argument(help="Feed user id"),
    limit: int = typer.Option(25, "--limit"),
    token: str = typer.Option(None, "--token"),
):
    """List the feeds a feed follows."""
    data = _call_feed(slug, user_id, token, "following", limit=limit)
    _print_relations(f"{slug}:{user_id} follows", data.get("results", []))


def _parse_target(target: str) -> FeedIdentity:
    try:
        return FeedIdentity.parse(target)
    except FeedStreamError as e:
        console.print(f"[bold red]{e.message}[/bold red]")
        raise typer.Exit(code=1)


def _print_relations(title: str, relations: list[dict]) -> None:
    if not relations:
        console.print("[dim]No follow relations.[/dim]")
        return

    table = Table(title=title)
    table.add_column("Feed", style="cyan")
    table.add_column("Target", style="green")
    table.add_column("Since")
    for relation in relations:
        table.add_row(
            str(relation.get("feed_id", "—")),
            str(relation.get("target_id", "—")),
            str(relation.get("created_at", "—")),
        )
    console.print(table)


def main():
    cli_app()


if __name__ == "__main__":
    main()
