"""
Request pipeline composition.

A Pipeline applies an ordered list of interceptors to a request context and
stops at the first interceptor that terminates. Interceptors that ran get a
completion callback in reverse order once a response exists, including when
a later stage terminated or failed. Unexpected exceptions are handed to the
ErrorInterceptor, which always wraps the whole chain.
"""

import logging
from typing import Awaitable, Callable, List, Sequence

from starlette.responses import Response

from ..models import Continue, Outcome, RequestContext, Terminate
from .exceptions import ErrorInterceptor

logger = logging.getLogger("catalog.pipeline")

Handler = Callable[[RequestContext], Awaitable[Response]]


class Interceptor:
    """
    Base pipeline stage.

    process() either forwards a (possibly augmented) context or terminates
    the chain with a response. complete() runs on the way out and may
    decorate the response.
    """

    name = "interceptor"

    async def process(self, context: RequestContext) -> Outcome:
        return Continue(context)

    async def complete(self, context: RequestContext, response: Response) -> Response:
        return response


class Pipeline:
    def __init__(
        self,
        interceptors: Sequence[Interceptor],
        error_interceptor: ErrorInterceptor,
    ):
        self.interceptors = tuple(interceptors)
        self.error_interceptor = error_interceptor

    def extend(self, *interceptors: Interceptor) -> "Pipeline":
        """Return a new pipeline with extra stages appended."""
        return Pipeline(self.interceptors + tuple(interceptors), self.error_interceptor)

    async def run(self, context: RequestContext, handler: Handler) -> Response:
        entered: List[Interceptor] = []
        response = None
        try:
            for interceptor in self.interceptors:
                entered.append(interceptor)
                outcome = await interceptor.process(context)
                if isinstance(outcome, Terminate):
                    logger.debug(
                        "Chain terminated by %s with %s",
                        interceptor.name,
                        outcome.response.status_code,
                    )
                    response = outcome.response
                    break
                context = outcome.context

            if response is None:
                response = await handler(context)
        except Exception as exc:
            context = context.attach(error=str(exc))
            response = self.error_interceptor.handle(context, exc)

        for interceptor in reversed(entered):
            try:
                response = await interceptor.complete(context, response)
            except Exception as exc:
                context = context.attach(error=str(exc))
                response = self.error_interceptor.handle(context, exc)
        return response
