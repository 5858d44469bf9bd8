"""ApplicationService — base class for every unit of business logic.

A concrete service takes its invocation arguments in ``__init__`` and does
its work in :meth:`ApplicationService.run`, which must return a
ServiceResult. Callers never instantiate services themselves; they invoke
the class.

Safe mode, for callers that branch on the outcome (HTTP handlers)::

    result = CreateOrder.call(params)
    if result.is_success:
        return redirect(result.data)
    return render_form(errors=result.error, status=result.http_status)

Strict mode, for callers that must abort on failure (jobs, transactions)::

    with session.begin():
        user = CreateUser.call_strict(params).data
        SendWelcomeEmail.call_strict(user=user)
"""

from __future__ import annotations

from collections.abc import Hashable, Mapping
from typing import Any, ClassVar

from servitor.services.invoker import current_invoker
from servitor.services.result import OK, UNPROCESSABLE, ServiceResult


class ApplicationService:
    """Abstract base for service classes.

    Usage::

        class CreateWidget(ApplicationService):
            def __init__(self, *, name: str) -> None:
                self.name = name

            def run(self) -> ServiceResult:
                if len(self.name) < 2:
                    return self.failure("name too short")
                return self.success(Widget(name=self.name))
    """

    # Overrides the class name in logs and error reports.
    service_name: ClassVar[str | None] = None

    @classmethod
    def call(cls, *args: Any, **kwargs: Any) -> ServiceResult:
        """Run the service in safe mode and return its result."""
        return current_invoker().call(cls, *args, **kwargs)

    @classmethod
    def call_strict(cls, *args: Any, **kwargs: Any) -> ServiceResult:
        """Run the service in strict mode: a failed result raises ServiceFailedError."""
        return current_invoker().call_strict(cls, *args, **kwargs)

    def run(self) -> ServiceResult:
        raise NotImplementedError(f"{type(self).__name__} must implement run()")

    def success(
        self,
        data: Any = None,
        *,
        code: Hashable = OK,
        meta: Mapping[str, Any] | None = None,
    ) -> ServiceResult:
        return ServiceResult.success(data, code=code, meta=meta)

    def failure(
        self,
        error: Any,
        *,
        code: Hashable = UNPROCESSABLE,
        meta: Mapping[str, Any] | None = None,
    ) -> ServiceResult:
        return ServiceResult.failure(error, code=code, meta=meta)
