"""Typer CLI entrypoint and command definitions for phishsafe."""

import json
import logging
from pathlib import Path

import typer

app = typer.Typer()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Behavioral-telemetry pipeline: replay sessions and extract features."""
    from phishsafe.core.logging import attach_redaction

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    attach_redaction(on_handlers=True)


# -- features ----------------------------------------------------------------
features_app = typer.Typer()
app.add_typer(features_app, name="features")


@features_app.command("extract")
def features_extract_cmd(
    sessions: list[Path] = typer.Option(..., "--session", help="Path to an exported session JSON (repeatable)"),
    out: str = typer.Option("", "--out", help="Optional parquet path for the feature table"),
) -> None:
    """Extract the 19-value feature vector from exported session documents."""
    from phishsafe.core.schema import FeatureSchemaV1
    from phishsafe.core.store import read_session_json, write_parquet
    from phishsafe.features.extract import extract_features, features_frame

    missing = [p for p in sessions if not p.exists()]
    if missing:
        typer.echo(f"Session file not found: {missing[0]}", err=True)
        raise typer.Exit(code=1)

    documents = []
    for path in sessions:
        try:
            documents.append(read_session_json(path))
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            typer.echo(f"Invalid JSON in {path}: {exc}", err=True)
            raise typer.Exit(code=1) from exc

    for path, doc in zip(sessions, documents):
        vector = extract_features(doc)
        typer.echo(f"{path}: {json.dumps(vector)}")

    if out:
        df = features_frame(documents)
        FeatureSchemaV1.validate_dataframe(df)
        out_path = write_parquet(df, Path(out))
        typer.echo(f"Wrote {len(df)} feature rows to {out_path}")


@features_app.command("schema")
def features_schema_cmd() -> None:
    """Print the ordered feature names and the schema hash."""
    from phishsafe.core.schema import FeatureSchemaV1

    typer.echo(f"schema {FeatureSchemaV1.VERSION} hash={FeatureSchemaV1.SCHEMA_HASH}")
    for idx, name in enumerate(FeatureSchemaV1.NAMES):
        typer.echo(f"{idx:2d} {name}")


# -- session ------------------------------------------------------------------
session_app = typer.Typer()
app.add_typer(session_app, name="session")


@session_app.command("replay")
def session_replay_cmd(
    events: str = typer.Option(..., "--events", help="Path to a JSON-lines raw event log"),
    out_dir: str = typer.Option("", "--out-dir", help="Directory for the exported session (defaults to config export_dir)"),
    config: str = typer.Option("", "--config", help="Optional tracker config YAML"),
    name: str = typer.Option("", "--name", help="Logical export name (defaults to config export_name)"),
) -> None:
    """Replay a raw event log through a session and export the document."""
    from phishsafe.core.config import TrackerConfig, load_tracker_config
    from phishsafe.core.store import JsonFileSink
    from phishsafe.session.replay import read_event_log, replay_events

    events_path = Path(events)
    if not events_path.exists():
        typer.echo(f"Event log not found: {events_path}", err=True)
        raise typer.Exit(code=1)

    cfg = TrackerConfig()
    if config:
        config_path = Path(config)
        if not config_path.exists():
            typer.echo(f"Config not found: {config_path}", err=True)
            raise typer.Exit(code=1)
        cfg = load_tracker_config(config_path)

    document = replay_events(read_event_log(events_path), cfg)
    typer.echo(
        f"Replayed session: {document.session.duration_seconds}s, "
        f"{len(document.tap_events)}/{len(document.raw_tap_events)} taps kept, "
        f"{len(document.swipe_events)} swipes, {len(document.screens_visited)} visits"
    )

    path = JsonFileSink(out_dir or cfg.export_dir).write(document, name or cfg.export_name)
    typer.echo(f"Session written to {path}")


if __name__ == "__main__":
    app()
