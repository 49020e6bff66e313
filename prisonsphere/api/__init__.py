"""PrisonSphere HTTP routes, mounted under /prisonsphere."""

from .. import errors  # noqa: F401  pylint: disable=unused-import
from ..base import app
from . import (
    activity_logs,
    auth,
    behavior_logs,
    dashboard,
    inmates,
    paroles,
    reports,
    visitors,
    work_programs,
)

API_PREFIX = "/prisonsphere"

for module in (
    auth,
    inmates,
    visitors,
    paroles,
    work_programs,
    behavior_logs,
    activity_logs,
    dashboard,
    reports,
):
    app.include_router(module.router, prefix=API_PREFIX)

__all__ = ["app"]
