"""
Unit tests for the CORS middleware.
"""

import re
import pytest

from httpcors.errors import FormatError
from httpcors.http.headers import CORSHeader
from httpcors.http.request import HTTPRequest
from httpcors.http.response import HTTPResponse
from httpcors.middleware.cors import CORSContext, CORSMiddleware, apply_cors, cors


ORIGIN = "http://test.example"


def cors_get(origin: str = ORIGIN) -> HTTPRequest:
    return HTTPRequest(method="GET", headers={"Origin": origin})


class TestApplyCORS:
    """Tests for apply_cors() with hand-built contexts."""

    def test_non_cors_request_only_vary(self):
        """Test that non-CORS requests only get Origin appended to Vary."""
        response = HTTPResponse(headers={"Vary": "User-Agent", "X-Test": "1"})

        result = apply_cors(CORSContext(), HTTPRequest(method="GET"), response)

        assert result.headers == {"vary": "User-Agent, Origin", "x-test": "1"}

    def test_non_cors_request_without_vary(self):
        """Test Vary is created when absent."""
        result = apply_cors(CORSContext(), HTTPRequest(method="GET"), HTTPResponse())
        assert result.headers == {"vary": "Origin"}

    def test_wildcard_origin(self):
        """Test Allow-Origin is * without a matcher."""
        result = apply_cors(CORSContext(), cors_get(), HTTPResponse())

        assert result.headers == {
            CORSHeader.ACCESS_CONTROL_ALLOW_ORIGIN: "*",
            CORSHeader.VARY: "Origin",
        }

    def test_keeps_downstream_allow_origin(self):
        """Test that an existing Allow-Origin wins over *."""
        response = HTTPResponse(headers={CORSHeader.ACCESS_CONTROL_ALLOW_ORIGIN: ""})

        result = apply_cors(CORSContext(), cors_get(), response)

        assert result.headers == {
            CORSHeader.ACCESS_CONTROL_ALLOW_ORIGIN: "",
            CORSHeader.VARY: "Origin",
        }

    def test_matcher_true_echoes_origin(self):
        """Test the origin is echoed when allowed."""
        result = apply_cors(CORSContext(match_origin=lambda origin: True), cors_get(), HTTPResponse())
        assert result.headers[CORSHeader.ACCESS_CONTROL_ALLOW_ORIGIN] == ORIGIN

    def test_matcher_false_empty_origin(self):
        """Test an empty Allow-Origin when denied."""
        result = apply_cors(CORSContext(match_origin=lambda origin: False), cors_get(), HTTPResponse())

        assert CORSHeader.ACCESS_CONTROL_ALLOW_ORIGIN in result.headers
        assert result.headers[CORSHeader.ACCESS_CONTROL_ALLOW_ORIGIN] == ""

    def test_allow_credentials(self):
        """Test Allow-Credentials is added."""
        result = apply_cors(CORSContext(allow_credentials="true"), cors_get(), HTTPResponse())

        assert result.headers == {
            CORSHeader.ACCESS_CONTROL_ALLOW_ORIGIN: "*",
            CORSHeader.ACCESS_CONTROL_ALLOW_CREDENTIALS: "true",
            CORSHeader.VARY: "Origin",
        }

    def test_respects_existing_credentials(self):
        """Test that downstream Allow-Credentials wins."""
        response = HTTPResponse(headers={CORSHeader.ACCESS_CONTROL_ALLOW_CREDENTIALS: "test"})

        result = apply_cors(CORSContext(allow_credentials="true"), cors_get(), response)

        assert result.headers[CORSHeader.ACCESS_CONTROL_ALLOW_CREDENTIALS] == "test"

    def test_expose_headers(self):
        """Test Expose-Headers is added to actual requests."""
        result = apply_cors(CORSContext(expose_headers="x-test"), cors_get(), HTTPResponse())

        assert result.headers == {
            CORSHeader.ACCESS_CONTROL_ALLOW_ORIGIN: "*",
            CORSHeader.ACCESS_CONTROL_EXPOSE_HEADERS: "x-test",
            CORSHeader.VARY: "Origin",
        }

    def test_no_expose_headers_on_preflight(self):
        """Test Expose-Headers is skipped for preflight requests."""
        request = HTTPRequest(method="OPTIONS", headers={
            "Origin": ORIGIN,
            "Access-Control-Request-Headers": "",
            "Access-Control-Request-Method": "",
        })

        result = apply_cors(CORSContext(expose_headers="x-test"), request, HTTPResponse())

        assert result.headers == {
            CORSHeader.ACCESS_CONTROL_ALLOW_ORIGIN: "*",
            CORSHeader.VARY: "Origin",
        }

    def test_respects_existing_expose_headers(self):
        """Test that downstream Expose-Headers wins."""
        response = HTTPResponse(headers={CORSHeader.ACCESS_CONTROL_EXPOSE_HEADERS: "x-exist"})

        result = apply_cors(CORSContext(expose_headers="x-test"), cors_get(), response)

        assert result.headers[CORSHeader.ACCESS_CONTROL_EXPOSE_HEADERS] == "x-exist"

    def test_complex_case(self):
        """Test every option together."""
        context = CORSContext(
            expose_headers="x-test",
            allow_credentials="true",
            match_origin=lambda origin: origin == ORIGIN,
        )
        response = HTTPResponse(headers={CORSHeader.ACCESS_CONTROL_EXPOSE_HEADERS: "x-exist"})

        result = apply_cors(context, cors_get(), response)

        assert result.headers == {
            CORSHeader.ACCESS_CONTROL_ALLOW_ORIGIN: ORIGIN,
            CORSHeader.ACCESS_CONTROL_ALLOW_CREDENTIALS: "true",
            CORSHeader.ACCESS_CONTROL_EXPOSE_HEADERS: "x-exist",
            CORSHeader.VARY: "Origin",
        }

    def test_response_not_mutated(self):
        """Test the downstream response is left untouched."""
        response = HTTPResponse(status=201, headers={"Vary": "Accept"}, body=b"data")

        result = apply_cors(CORSContext(allow_credentials="true"), cors_get(), response)

        assert response.headers == {"vary": "Accept"}
        assert result is not response
        assert result.status == 201
        assert result.status_text == "Created"
        assert result.body == b"data"
        assert result.headers[CORSHeader.VARY] == "Accept, Origin"


class TestCORSMiddleware:
    """Tests for the cors() factory and CORSMiddleware."""

    @pytest.mark.asyncio
    async def test_default_wildcard(self, downstream):
        """Test cors() with no options."""
        response = await cors()(cors_get(), downstream)

        assert response.headers == {
            CORSHeader.ACCESS_CONTROL_ALLOW_ORIGIN: "*",
            CORSHeader.VARY: "Origin",
        }
        assert downstream.call_count == 1

    @pytest.mark.asyncio
    async def test_denied_origin(self, downstream):
        """Test an allow-list that matches nothing."""
        response = await cors(allow_origins=[""])(cors_get(), downstream)

        assert response.headers == {
            CORSHeader.ACCESS_CONTROL_ALLOW_ORIGIN: "",
            CORSHeader.VARY: "Origin",
        }

    @pytest.mark.asyncio
    async def test_pattern_origin(self, downstream):
        """Test a compiled pattern in the allow-list."""
        middleware = cors(allow_origins=["http://other.example", re.compile(r"^http://test\.")])

        response = await middleware(cors_get(), downstream)

        assert response.headers[CORSHeader.ACCESS_CONTROL_ALLOW_ORIGIN] == ORIGIN

    @pytest.mark.asyncio
    async def test_all_options(self, downstream):
        """Test credentials and expose headers from the factory."""
        middleware = cors(
            allow_origins=[ORIGIN],
            allow_credentials=True,
            expose_headers=["x-test", "x-request-id"],
        )

        response = await middleware(cors_get(), downstream)

        assert response.headers == {
            CORSHeader.ACCESS_CONTROL_ALLOW_ORIGIN: ORIGIN,
            CORSHeader.ACCESS_CONTROL_ALLOW_CREDENTIALS: "true",
            CORSHeader.ACCESS_CONTROL_EXPOSE_HEADERS: "x-test, x-request-id",
            CORSHeader.VARY: "Origin",
        }

    @pytest.mark.asyncio
    async def test_non_cors_passthrough(self, handler_factory):
        """Test non-CORS requests only touch Vary."""
        handler = handler_factory(headers={"Vary": "User-Agent", "Content-Type": "text/plain"})

        response = await cors(allow_credentials=True)(HTTPRequest(method="GET"), handler)

        assert response.headers == {"vary": "User-Agent, Origin", "content-type": "text/plain"}

    @pytest.mark.asyncio
    async def test_downstream_error_propagates(self):
        """Test exceptions from next are not caught."""
        async def failing(request):
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            await cors()(cors_get(), failing)

    @pytest.mark.asyncio
    async def test_none_origins_mean_wildcard(self, downstream):
        """Test allow_origins=None behaves like the "*" default."""
        middleware = cors(allow_origins=None)

        response = await middleware(cors_get(), downstream)

        assert middleware.config.allow_origins == "*"
        assert middleware.context.match_origin is None
        assert response.headers[CORSHeader.ACCESS_CONTROL_ALLOW_ORIGIN] == "*"

    def test_invalid_expose_headers(self):
        """Test construction fails on a bad expose_headers entry."""
        with pytest.raises(FormatError) as exc_info:
            cors(expose_headers=[""])

        assert "expose_headers[0]" in str(exc_info.value)
        assert '""' in str(exc_info.value)

    def test_context_precomputed(self):
        """Test the frozen context built at construction."""
        middleware = CORSMiddleware()
        assert middleware.context == CORSContext()

        middleware = cors(allow_credentials="true", expose_headers=["a", "b"])
        assert middleware.context.allow_credentials == "true"
        assert middleware.context.expose_headers == "a, b"

    def test_empty_expose_headers_not_sent(self):
        """Test that an empty list counts as unset."""
        assert cors(expose_headers=[]).context.expose_headers is None
