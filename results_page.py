"""Render the job search results page from the static results payload."""

import html
import json
import logging
import os
from dataclasses import replace
from datetime import date

from bs4 import BeautifulSoup, Tag

import config as config
from binding import BindingManager
from models import JobRecord
from timeago import Settings

logger = logging.getLogger(__name__)

_FAVORITE_CELL = """<div class="favorite-toggle reveal-on-hover">
        <i class="fa fa-star-o pull-right" style="font-size:1.5em;margin-right: 10px;margin-top: 7px;opacity:0.4"></i>
        <i class="fa fa-star pull-right" style="font-size:1.5em;margin-right: 10px;margin-top: 7px;display: none;color: #337ab7"></i>
      </div>"""


def load_results(path: str) -> list[JobRecord]:
    """Read the results payload (a JSON array of job objects)."""
    with open(path) as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a JSON array of jobs, got {type(data).__name__}")
    return [JobRecord.from_dict(item) for item in data]


def format_count(n: int) -> str:
    """Group thousands the way the en locale does: 1234 -> '1,234'."""
    return f"{n:,}"


def _cells(job: JobRecord) -> str:
    """The logo, header and location cells shared by every row."""
    thumb = html.escape(config.THUMBNAIL_PATH.format(member_id=job.member_id))
    header = html.escape(job.job_header)
    specialty = html.escape(job.specialty_name)
    facility = html.escape(job.facility_name)
    city = html.escape(job.city)
    state = html.escape(job.state_name)

    return f"""    <th>
      <div class="logo-wrapper" style="height:55px;width:80px;position:relative;background-color:white;">
        <img src="{thumb}" style="max-height:44px;max-width:64px;position: absolute;top: 50%;left:50%;transform: translate(-50%,-50%);">
      </div>
    </th>
    <td><h4 style="margin-top: 0;margin-bottom:0;font-size: 16px;line-height: 20px;"> {header} </h4> {specialty}, {facility} </td>
    <td><div class="pull-left" style="margin-top: 8px;"><i class="fa fa-map-marker" style="font-size:1.5em;margin-right: 10px;"></i></div><div class="pull-left"><h4 style="margin-top: 0;margin-bottom: 0;font-size: 16px;line-height: 20px;"> {city},  {state} </h4> {config.COUNTRY}</div></td>"""


def render_featured_row(job: JobRecord) -> str:
    """Render a featured listing. Featured rows show a label instead of an age."""
    return f"""  <tr class="featured">
{_cells(job)}
    <td class="text-right" width="170">
      <time class="hide-on-hover" style="white-space: nowrap;">Featured</time>
      <a class="btn btn-primary pull-right reveal-on-hover" role="button" href="...">&nbsp; Apply Now &nbsp;</a>
      {_FAVORITE_CELL}
    </td>
  </tr>"""


def render_row(job: JobRecord) -> str:
    """Render a regular listing with a <time class="timeago"> cell."""
    row_class = "highlight" if job.highlighted else ""
    verified = html.escape(job.verified_date)

    return f"""  <tr class="{row_class}">
{_cells(job)}
    <td class="text-right" width="170">
      <time class="timeago hide-on-hover" datetime="{verified}" style="white-space: nowrap;"></time>
      <a class="btn btn-primary pull-right reveal-on-hover" role="button" href="...">&nbsp; Apply Now &nbsp;</a>
      {_FAVORITE_CELL}
    </td>
  </tr>"""


def render_table(jobs: list[JobRecord], featured_stop: int | None = None, rows_stop: int | None = None) -> str:
    """Featured rows first, then every listing in payload order.

    Each pass walks the payload by index and stops after rendering a row at
    or past its stop index. The featured pass only checks on featured rows.
    """
    if featured_stop is None:
        featured_stop = config.FEATURED_STOP_INDEX
    if rows_stop is None:
        rows_stop = config.ROWS_STOP_INDEX

    rows = []
    for index, job in enumerate(jobs):
        if job.featured:
            rows.append(render_featured_row(job))
            if index >= featured_stop:
                break
    for index, job in enumerate(jobs):
        rows.append(render_row(job))
        if index >= rows_stop:
            break
    return "\n".join(rows)


def generate_results_page(
    jobs: list[JobRecord],
    output_dir: str | None = None,
    settings: Settings | None = None,
    filename: str | None = None,
) -> str:
    """Write the results page with every age already rendered. Returns the filepath."""
    output_dir = output_dir or config.OUTPUT_DIR
    settings = settings or config.TIMEAGO
    os.makedirs(output_dir, exist_ok=True)
    today = date.today().strftime("%Y-%m-%d")
    filepath = os.path.join(output_dir, filename or f"results-{today}.html")

    content = f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<title>Job Search Results — {today}</title>
</head>
<body>
<div id="resultCount">{format_count(len(jobs))} jobs found</div>
<table class="table" id="jobSearchResults">
{render_table(jobs)}
</table>
</body>
</html>"""

    soup = BeautifulSoup(content, "html.parser")
    # A static file can't be refreshed, so render once and skip the timers.
    static = replace(settings, refresh_millis=0)
    manager = BindingManager(soup, static)
    bound = manager.bind_all("time.timeago")
    manager.close()
    logger.info(f"Rendered {len(jobs)} jobs, {len(bound)} relative timestamps")

    with open(filepath, "w", encoding="utf-8") as f:
        f.write(str(soup))

    return filepath


def toggle_favorite(toggle: Tag) -> None:
    """Flip a row's favorite star and its selected/reveal classes."""
    for icon in toggle.find_all("i", recursive=False):
        _toggle_display(icon)
    cell = toggle.parent
    row = cell.parent if cell is not None else None
    if row is not None:
        _toggle_class(row, "selected")
    _toggle_class(toggle, "reveal-on-hover")
    if cell is not None:
        _toggle_class(cell, "reveal-while-active")


def show_only(document: BeautifulSoup, css_class: str, element_id: str) -> None:
    """Show the element of a group whose id matches, hide the rest."""
    for tag in document.select(f".{css_class}"):
        _set_display(tag, tag.get("id") == element_id)


def _toggle_class(tag: Tag, name: str) -> None:
    classes = list(tag.get("class", []))
    if name in classes:
        classes.remove(name)
    else:
        classes.append(name)
    tag["class"] = classes


def _style_without_display(tag: Tag) -> list[str]:
    rules = [r.strip() for r in tag.get("style", "").split(";") if r.strip()]
    return [r for r in rules if not r.replace(" ", "").startswith("display:")]


def _is_hidden(tag: Tag) -> bool:
    return "display:none" in tag.get("style", "").replace(" ", "")


def _set_display(tag: Tag, visible: bool) -> None:
    rules = _style_without_display(tag)
    if not visible:
        rules.append("display: none")
    if rules:
        tag["style"] = ";".join(rules)
    elif tag.has_attr("style"):
        del tag["style"]


def _toggle_display(tag: Tag) -> None:
    _set_display(tag, _is_hidden(tag))
