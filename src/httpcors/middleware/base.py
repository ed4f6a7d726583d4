"""
=============================================================================
BASE MIDDLEWARE INTERFACE
=============================================================================

Defines the async middleware protocol and a pipeline for chaining it.
Implements the Chain of Responsibility design pattern.

=============================================================================
CHAIN OF RESPONSIBILITY
=============================================================================

Each middleware either answers the request itself (short-circuit) or
awaits the next handler and post-processes its response:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                       REQUEST / RESPONSE FLOW                        │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Request ───────────────────────────────────────────────►          │
    │                                                                      │
    │   ┌──────────┐      ┌──────────┐      ┌──────────┐                  │
    │   │Preflight │─────►│   CORS   │─────►│ Handler  │                  │
    │   │    MW    │      │    MW    │      │          │                  │
    │   └────┬─────┘      └────┬─────┘      └────┬─────┘                  │
    │        │                 │                 │                         │
    │   OPTIONS + ACRM    await next()       build response               │
    │   + ACRH? answer    then add ACAO,                                   │
    │   directly          ACAC, ACEH, Vary                                 │
    │                                                                      │
    │   ◄─────────────────────────────────────────────── Response         │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
CONCURRENCY
=============================================================================

Middleware only suspends while awaiting `next`. It holds no per-request
state on `self`, so one instance can serve any number of interleaved
requests on the event loop without locking.

=============================================================================
"""

from abc import ABC, abstractmethod
from typing import Awaitable, Callable, List, Optional
import logging

from ..http.request import HTTPRequest
from ..http.response import HTTPResponse


logger = logging.getLogger(__name__)


# NextHandler is the signature for the next middleware or final handler.
# It takes a request and returns an awaitable response.
NextHandler = Callable[[HTTPRequest], Awaitable[HTTPResponse]]


class Middleware(ABC):
    """
    Abstract base class for async middleware.

    =========================================================================
    THE MIDDLEWARE CONTRACT
    =========================================================================

        class MyMiddleware(Middleware):
            async def __call__(self, request, next):
                # Pre-processing, or short-circuit:
                if should_answer_directly(request):
                    return ResponseBuilder().status(HTTPStatus.NO_CONTENT).build()

                response = await next(request)

                # Post-processing: build a NEW response, never edit this one
                return copy_response(response, headers=...)

    Exceptions raised by `next` are not caught here; they propagate to
    whoever awaited the middleware.
    =========================================================================
    """

    @abstractmethod
    async def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        """
        Process the request.

        Args:
            request: The incoming HTTP request
            next: The next handler in the chain

        Returns:
            HTTP response (either derived from next() or short-circuited)
        """

    @property
    def name(self) -> str:
        """Get the middleware name for logging."""
        return self.__class__.__name__


class MiddlewarePipeline:
    """
    Chains middleware around a final async handler.

    Middleware is executed in the order added (first added = outermost):

        pipeline = MiddlewarePipeline()
        pipeline.add(preflight())
        pipeline.add(cors())

        handler = pipeline.wrap(app)
        response = await handler(request)
    """

    def __init__(self):
        self._middleware: List[Middleware] = []

    def add(self, middleware: Middleware) -> "MiddlewarePipeline":
        """Add middleware to the pipeline. Returns self for chaining."""
        self._middleware.append(middleware)
        logger.debug(f"Added middleware: {middleware.name}")
        return self

    def use(self, *middleware: Middleware) -> "MiddlewarePipeline":
        """Add several middleware at once."""
        for mw in middleware:
            self.add(mw)
        return self

    def wrap(self, handler: NextHandler) -> NextHandler:
        """
        Wrap a handler with all middleware in the pipeline.

        Given [MW1, MW2, MW3] and handler, wrapping in reverse order
        yields MW1 → MW2 → MW3 → handler.
        """
        current = handler
        for middleware in reversed(self._middleware):
            current = self._create_wrapped_handler(middleware, current)
        return current

    def _create_wrapped_handler(
        self,
        middleware: Middleware,
        next_handler: NextHandler
    ) -> NextHandler:
        # Closure over middleware and next_handler
        async def wrapped(request: HTTPRequest) -> HTTPResponse:
            return await middleware(request, next_handler)

        return wrapped

    def __len__(self) -> int:
        return len(self._middleware)

    def __iter__(self):
        return iter(self._middleware)


class FunctionMiddleware(Middleware):
    """
    Wraps an async function as middleware.

        async def add_header(request, next):
            response = await next(request)
            return copy_response(
                response,
                headers=merge_headers(response.headers, {"X-Custom": "1"}),
            )

        pipeline.add(FunctionMiddleware(add_header))
    """

    def __init__(
        self,
        func: Callable[[HTTPRequest, NextHandler], Awaitable[HTTPResponse]],
        name: Optional[str] = None
    ):
        self._func = func
        self._name = name or func.__name__

    async def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        return await self._func(request, next)

    @property
    def name(self) -> str:
        return self._name


def function_middleware(
    func: Callable[[HTTPRequest, NextHandler], Awaitable[HTTPResponse]]
) -> FunctionMiddleware:
    """Decorator form of FunctionMiddleware."""
    return FunctionMiddleware(func)
