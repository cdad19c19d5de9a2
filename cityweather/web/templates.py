from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

from fastapi.templating import Jinja2Templates

from cityweather.services.icons import glyph_for, icon_for

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent / "templates"))


def _utc_time(timestamp: int, fmt: str = "%a %d %b %H:%M") -> str:
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).strftime(fmt)


templates.env.filters["glyph"] = glyph_for
templates.env.filters["icon_label"] = lambda code: icon_for(code).label
templates.env.filters["utc_time"] = _utc_time
