"""Web interface routes implementation."""

import os
import re
from datetime import datetime, timezone
from typing import Dict, List, Optional, Union
from urllib.parse import urlencode

from fastapi import APIRouter, Request, HTTPException, Query, status
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from starlette.datastructures import FormData

from url_shortener_client.lib.entries import EntryForm, UnknownEntryError
from url_shortener_client.lib.models import ENTRY_FIELDS
from url_shortener_client.lib.statistics import StatisticsPage
from url_shortener_client.lib.submission import SubmissionOutcome

router = APIRouter()

template_dir = os.path.join(os.path.dirname(__file__), "..", "templates")
templates = Jinja2Templates(directory=template_dir)


_EPOCH_PATTERN = re.compile(r"^-?\d+(\.\d+)?$")


def format_time(value: Union[str, int, float, None]) -> str:
    """Render an API timestamp for display; unknown formats pass through.

    Accepts ISO 8601 strings and epoch milliseconds, as a number or digits.
    """
    if value is None or value == "":
        return "N/A"

    text = str(value).strip()
    try:
        is_number = isinstance(value, (int, float)) and not isinstance(value, bool)
        if is_number or _EPOCH_PATTERN.match(text):
            parsed = datetime.fromtimestamp(float(text) / 1000, tz=timezone.utc)
        else:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except (ValueError, OverflowError, OSError):
        return text
    return parsed.strftime("%Y-%m-%d %H:%M:%S %Z").strip()


def toggle_query(page: StatisticsPage, shortcode: str) -> str:
    """Query string of the statistics page with one row's details toggled."""
    return urlencode([("expanded", code) for code in page.expanded_after_toggle(shortcode)])


templates.env.filters["format_time"] = format_time
templates.env.globals["toggle_query"] = toggle_query


def _new_form(request: Request) -> EntryForm:
    config = request.app.state.config
    return EntryForm(
        max_entries=config.max_entries,
        default_validity=config.default_validity_minutes,
        logger=request.app.state.logger,
    )


def _form_from_post(request: Request, data: FormData) -> EntryForm:
    """Rebuild the EntryForm from the posted fields.

    Rows are listed by the repeated "entry_id" field in display order; each
    row's values are posted as "<field>-<id>".
    """
    config = request.app.state.config
    try:
        next_id = int(data.get("next_id") or 0)
        rows: List[Dict[str, str]] = []
        for raw_id in data.getlist("entry_id"):
            entry_id = int(raw_id)
            row = {"id": str(entry_id)}
            for field in ENTRY_FIELDS:
                row[field] = str(data.get(f"{field}-{entry_id}", ""))
            rows.append(row)

        return EntryForm.from_rows(
            rows,
            next_id=next_id,
            max_entries=config.max_entries,
            default_validity=config.default_validity_minutes,
            logger=request.app.state.logger,
        )
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Malformed form submission",
        )


def _render_form(
    request: Request,
    form: EntryForm,
    outcome: Optional[SubmissionOutcome] = None,
) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "form": form,
            "results": outcome.results if outcome else [],
        },
    )


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
async def shorten_page(request: Request):
    """Serve the shorten form with a single blank entry."""
    return _render_form(request, _new_form(request))


@router.post("/", response_class=HTMLResponse, include_in_schema=False)
async def shorten_page_action(request: Request):
    """Handle the form buttons: add an entry, remove an entry, or submit."""
    data = await request.form()
    form = _form_from_post(request, data)
    action = str(data.get("action") or "submit")

    if action == "add":
        form.add_entry()
        return _render_form(request, form)

    if action.startswith("remove:"):
        try:
            form.remove_entry(int(action.split(":", 1)[1]))
        except (ValueError, UnknownEntryError):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Unknown entry in action '{action}'",
            )
        return _render_form(request, form)

    if action != "submit":
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown action '{action}'",
        )

    submission = request.app.state.submission
    outcome = await submission.submit(form)
    return _render_form(request, form, outcome)


@router.get("/statistics", response_class=HTMLResponse, include_in_schema=False)
async def statistics_page(
    request: Request,
    expanded: List[str] = Query(default=[]),
):
    """Show click statistics for every persisted short link.

    Each repeated "expanded" query parameter opens the click details of one
    shortcode.
    """
    viewer = request.app.state.statistics
    page = await viewer.load(expanded=expanded)

    return templates.TemplateResponse(
        request,
        "statistics.html",
        {"page": page},
    )
