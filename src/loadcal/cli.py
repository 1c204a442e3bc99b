"""loadcal CLI - cognitive load for your calendar."""

import base64
import json
import logging
import sys
from datetime import date, datetime
from pathlib import Path

import click

from .adapters.google_calendar import AuthenticationError
from .config import load_config
from .core.meetings import InvalidTimestamp
from .core.summary import DayReport, UnsortedMeetings
from .core.weights import DEFAULT_WEIGHTS
from .workflows import (
    ask,
    build_report,
    fetch_day_report,
    get_calendar,
    get_llm,
    get_speech,
    load_events_file,
)


@click.group()
@click.version_option()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool):
    """loadcal - cognitive load for your calendar."""
    if debug:
        logging.basicConfig(
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            level=logging.DEBUG,
        )


def _show_report(report: DayReport, as_json: bool, empty_msg: str = "No meetings.") -> None:
    """Shared report display logic."""
    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
        return

    if not report.events:
        click.echo(empty_msg)
    for event in report.events:
        meeting = event.meeting
        click.echo(
            f"  {meeting.start.strftime('%H:%M'):6} {meeting.title[:40]:40} "
            f"load {event.total_load:.3f}  switch {event.context_switch_cost:.3f}  "
            f"recover {event.recovery_minutes:4.1f}m  capacity {event.capacity_remaining:5.1f}"
        )

    summary = report.summary
    risk = "HIGH RISK" if summary.high_risk else "ok"
    click.echo()
    click.echo(
        f"Day load {summary.total_load:.3f}, capacity left {summary.capacity_remaining:.1f} ({risk})"
    )


@main.command()
@click.argument("source", default="-", type=click.Path(allow_dash=True))
@click.option("--table", "as_table", is_flag=True, help="Human-readable output instead of JSON")
def score(source: str, as_table: bool):
    """Score meetings from a JSON file (or stdin)."""
    config = load_config()
    try:
        events = load_events_file(source)
        report = build_report(events, config, get_llm(config))
    except (OSError, ValueError) as e:
        # InvalidTimestamp and UnsortedMeetings are ValueErrors
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    _show_report(report, not as_table)


@main.command()
@click.option("--date", "-d", "target_date", default=None, type=click.DateTime(formats=["%Y-%m-%d"]),
              help="Date to score (YYYY-MM-DD), defaults to today")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def day(target_date: datetime | None, as_json: bool):
    """Score a day from Google Calendar."""
    config = load_config()
    target = target_date.date() if target_date else date.today()
    try:
        report = fetch_day_report(config, target, llm=get_llm(config))
    except (AuthenticationError, InvalidTimestamp, UnsortedMeetings) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if not as_json:
        click.echo(f"### {target.strftime('%A, %B %d')}")
    _show_report(report, as_json, "No meetings today.")


@main.command("ask")
@click.argument("query")
@click.option("--file", "-f", "report_file", default=None, type=click.Path(exists=True),
              help="Scored report JSON (from 'loadcal score'); defaults to today's calendar")
@click.option("--speak", "speak_to", default=None, type=click.Path(dir_okay=False),
              help="Write the spoken answer as MP3 to this path")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def ask_cmd(query: str, report_file: str | None, speak_to: str | None, as_json: bool):
    """Ask a question about a day's load."""
    config = load_config()
    if speak_to and not config.speech_configured:
        click.echo("ELEVENLABS_API_KEY and ELEVENLABS_VOICE_ID must be set for --speak", err=True)
        sys.exit(1)
    llm = get_llm(config)

    try:
        if report_file:
            report = json.loads(Path(report_file).read_text())
        else:
            report = fetch_day_report(config, llm=llm).to_dict()
        answer = ask(query, report, llm, get_speech(config) if speak_to else None)
    except (AuthenticationError, OSError, ValueError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(answer.to_dict(), indent=2))
        return

    click.echo(answer.text)
    if answer.warning:
        click.echo(f"Warning: {answer.warning}", err=True)
    if answer.audio is not None:
        if answer.audio.status == "ok":
            Path(speak_to).write_bytes(base64.b64decode(answer.audio.audio_base64))
            click.echo(f"✓ Audio saved to {speak_to}")
        else:
            click.echo(f"Audio {answer.audio.status}: {answer.audio.reason}", err=True)


@main.command()
def weights():
    """Show the weight table as JSON."""
    click.echo(json.dumps(DEFAULT_WEIGHTS.to_dict(), indent=2))


@main.command("cal-auth")
def cal_auth():
    """Authenticate with Google Calendar."""
    config = load_config()

    if not config.google_client_secret_file:
        click.echo("GOOGLE_CLIENT_SECRET_FILE not set in loadcal.conf", err=True)
        sys.exit(1)

    adapter = get_calendar(config)
    if adapter.authenticate():
        click.echo(f"✓ Token saved to {config.google_token_file}")
    else:
        click.echo("✗ Authentication failed", err=True)
        sys.exit(1)


@main.command()
def calendars():
    """List calendars available to the authenticated account."""
    config = load_config()
    try:
        entries = get_calendar(config).list_calendars()
    except AuthenticationError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if not entries:
        click.echo("No calendars.")
        return
    for entry in entries:
        marker = "*" if entry["primary"] else " "
        click.echo(f"{marker} {entry['summary']:30} {entry['id']}")


if __name__ == "__main__":
    main()
