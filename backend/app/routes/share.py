"""
Grievance Portal Backend — Public Share Page
=============================================

What:  GET /share/{slug}, the page a share link opens.
How:   Renders a small Jinja2 template. The form posts to /api/message, which
       redirects back here with `submitted=true` to show the confirmation.
Who:   Anonymous visitors; no session is read.

    known slug                → 200 form
    known slug, submitted=true → 200 confirmation
    unknown slug              → 404 "invalid link"
"""

import logging

from fastapi import APIRouter, Depends, Query
from fastapi.responses import HTMLResponse
from jinja2 import DictLoader, Environment, select_autoescape
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.services.person_service import person_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Share"])

_TEMPLATES = {
    "base.html": """<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>{% block title %}grievance portal{% endblock %}</title>
</head>
<body>
{% block body %}{% endblock %}
</body>
</html>
""",
    "share.html": """{% extends "base.html" %}
{% block title %}complaints for {{ name }}{% endblock %}
{% block body %}
<h1>File a complaint about {{ name }}</h1>
{% if submitted %}
<p class="submitted">Your complaint was delivered. Thank you!</p>
<p><a href="/share/{{ slug }}">Send another one</a></p>
{% else %}
<form method="post" action="/api/message">
  <input type="hidden" name="slug" value="{{ slug }}">
  <label>What happened?
    <textarea name="content" required></textarea>
  </label>
  <label>How does it make you feel?
    <input type="text" name="emoji" required>
  </label>
  <label>What would you like to happen? (optional)
    <textarea name="expectedResponse"></textarea>
  </label>
  <button type="submit">Submit</button>
</form>
{% endif %}
{% endblock %}
""",
    "invalid_link.html": """{% extends "base.html" %}
{% block title %}invalid link{% endblock %}
{% block body %}
<h1>Invalid link</h1>
<p>This complaint link does not exist or has been removed.</p>
{% endblock %}
""",
}

templates = Environment(
    loader=DictLoader(_TEMPLATES),
    autoescape=select_autoescape(["html"]),
)


@router.get(
    "/share/{slug}",
    response_class=HTMLResponse,
    summary="Public complaint form for a share link",
)
async def share_page(
    slug: str,
    submitted: bool = Query(default=False),
    db: AsyncSession = Depends(get_db_session),
) -> HTMLResponse:
    person = await person_service.get_by_slug(db, slug)
    if person is None:
        html = templates.get_template("invalid_link.html").render()
        return HTMLResponse(content=html, status_code=404)

    html = templates.get_template("share.html").render(
        name=person.name,
        slug=person.slug,
        submitted=submitted,
    )
    return HTMLResponse(content=html)
