"""Allow ``python -m cnc_daily``."""

from .cli import app

app(prog_name="cnc-daily")
