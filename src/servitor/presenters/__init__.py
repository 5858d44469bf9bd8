"""Presenter layer — stateless record-to-dict transforms for HTTP and API output."""

from servitor.presenters.application import ApplicationPresenter, normalize_includes
from servitor.presenters.record import RecordPresenter

__all__ = ["ApplicationPresenter", "RecordPresenter", "normalize_includes"]
