from __future__ import annotations

import json
from typing import Optional

import typer

from locus_app.auth.database import init_db, session_scope
from locus_app.auth.service import UserService
from locus_app.config import get_settings
from locus_app.locations.schemas import LocationCreate
from locus_app.locations.service import DuplicateLocationName, LocationService
from locus_app.slugs import ResolutionExhausted, SlugResolver, StoreUnavailable
from locus_app.utils.logging import configure_logging, get_logger
from locus_app.utils.text import slugify as slugify_text

app = typer.Typer(help="Locus CLI utilities")
logger = get_logger(__name__)


@app.command("init-db")
def init_database() -> None:
    """Create the users and locations tables if they are missing."""

    configure_logging()
    init_db(get_settings())
    typer.echo("Database ready")


@app.command()
def slugify(name: str = typer.Argument(..., help="Display name to normalise")) -> None:
    """Print the base slug derived from NAME."""

    typer.echo(slugify_text(name, max_length=get_settings().slug_max_length))


@app.command()
def resolve(
    name: str = typer.Argument(..., help="Display name to resolve"),
    max_attempts: Optional[int] = typer.Option(
        None,
        "--max-attempts",
        min=1,
        help="Override SLUG_MAX_ATTEMPTS for this run",
    ),
) -> None:
    """Show the slug a new location called NAME would get.

    Missing tables are created first; no location is inserted.
    """

    configure_logging()
    settings = get_settings()
    init_db(settings)
    with session_scope(settings) as session:
        service = LocationService(session, settings)
        if max_attempts is not None:
            service.resolver = SlugResolver(
                service.store,
                max_attempts=max_attempts,
                suffix_length=settings.slug_suffix_length,
                alphabet=settings.slug_suffix_alphabet,
            )
        try:
            slug = service.resolve_slug(name)
        except (ResolutionExhausted, StoreUnavailable) as exc:
            typer.secho(str(exc), err=True, fg=typer.colors.RED)
            raise typer.Exit(code=2) from exc
    typer.echo(slug)


@app.command("create-location")
def create_location(
    name: str = typer.Argument(..., help="Display name of the location"),
    email: str = typer.Option(..., "--email", help="Email of the owning user"),
    lat: float = typer.Option(..., "--lat", help="Latitude (-90..90)"),
    long: float = typer.Option(..., "--long", help="Longitude (-180..180)"),
    description: Optional[str] = typer.Option(None, "--description", help="Optional description"),
    json_output: bool = typer.Option(False, "--json", help="Print the created record as JSON"),
) -> None:
    """Create a location for an existing user."""

    configure_logging()
    settings = get_settings()
    init_db(settings)
    payload = LocationCreate(name=name, description=description, lat=lat, long=long)
    with session_scope(settings) as session:
        user = UserService(session).get_by_email(email)
        if user is None:
            typer.secho(f"No user registered with email {email}", err=True, fg=typer.colors.RED)
            raise typer.Exit(code=1)
        try:
            result = LocationService(session, settings).create_location(payload, user_id=user.id)
        except DuplicateLocationName as exc:
            typer.secho(str(exc), err=True, fg=typer.colors.RED)
            raise typer.Exit(code=1) from exc
        except (ResolutionExhausted, StoreUnavailable) as exc:
            typer.secho(f"{exc}. Please try again.", err=True, fg=typer.colors.RED)
            raise typer.Exit(code=2) from exc

        if not result.created:
            typer.secho(
                f"Slug '{result.slug}' was taken by a concurrent request. Please try again.",
                err=True,
                fg=typer.colors.YELLOW,
            )
            raise typer.Exit(code=2)

        location = result.location
        if json_output:
            typer.echo(json.dumps(location.model_dump(mode="json"), indent=2))
            return
        typer.echo(f"Created '{location.name}' as {location.slug}")


if __name__ == "__main__":
    app()
