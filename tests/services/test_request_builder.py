from typing import Callable
from urllib.parse import parse_qs

import httpx
import pytest
from pydantic import BaseModel, ConfigDict, Field

from requestkit import (
    ClientIdentity,
    ContentType,
    HttpMethod,
    PinnedCertificates,
    RequestBuilder,
    RequestBuilderConfiguration,
    SerialDeliveryQueue,
    SessionConfiguration,
    StaticIdentity,
)
from requestkit._services import DataTask, MockedDataTask
from requestkit.models import NoContent, Typed


class Query(BaseModel):
    model_config = ConfigDict(validate_by_name=True, validate_by_alias=True)

    int_value: int = Field(alias="intValue")
    string_value: str = Field(alias="stringValue")
    bool_value: bool = Field(alias="boolValue")


QUERY = Query(int_value=8, string_value="hi", bool_value=True)


class Payload(BaseModel):
    id: int


def spec_of(builder: RequestBuilder, **kwargs):
    request = builder.build(**kwargs)
    assert isinstance(request.data_task, DataTask)
    return request.data_task.request


class TestRequestBuilder:
    @pytest.mark.parametrize("method", list(HttpMethod))
    def test_http_methods(self, builder: RequestBuilder, method: HttpMethod):
        assert spec_of(builder.method(method)).method == method

    def test_method_accepts_lowercase_string(self, builder: RequestBuilder):
        assert spec_of(builder.method("patch")).method == HttpMethod.PATCH

    def test_default_method_is_get(self, builder: RequestBuilder):
        assert spec_of(builder).method == HttpMethod.GET

    class TestUrl:
        def test_path_gets_trailing_slash(self, builder: RequestBuilder):
            spec = spec_of(builder.method(HttpMethod.GET).path("somePath"))
            assert str(spec.url) == "https://example.test/somePath/"

        def test_no_path(self, builder: RequestBuilder):
            assert str(spec_of(builder).url) == "https://example.test/"

        def test_paths_accumulate(self, builder: RequestBuilder):
            spec = spec_of(builder.path("users").path("42"))
            assert str(spec.url) == "https://example.test/users/42/"

        def test_base_url_path_is_kept(self, delivery: SerialDeliveryQueue):
            builder = RequestBuilder(
                RequestBuilderConfiguration(
                    base_url="https://example.test/api/v1", delivery_context=delivery
                )
            )
            spec = spec_of(builder.path("items"))
            assert str(spec.url) == "https://example.test/api/v1/items/"

        def test_url_encoding(self, builder: RequestBuilder):
            url = str(spec_of(builder.url_encode(QUERY)).url)

            assert url.startswith("https://example.test/?")
            assert "intValue=8" in url
            assert "stringValue=hi" in url
            assert "boolValue=true" in url
            assert "&" in url

        def test_url_encoding_drops_unsupported_values(self, builder: RequestBuilder):
            spec = spec_of(
                builder.url_encode(
                    {"ratio": 1.5, "name": "x", "missing": None, "items": [1, 2]}
                )
            )
            assert spec.url.params.multi_items() == [("name", "x")]

        def test_url_encoding_replaces_previous_query(self, builder: RequestBuilder):
            spec = spec_of(builder.url_encode({"a": 1}).url_encode({"b": 2}))
            assert spec.url.params.multi_items() == [("b", "2")]

        def test_url_encoding_ignores_non_objects(self, builder: RequestBuilder):
            spec = spec_of(builder.url_encode([1, 2, 3]))
            assert str(spec.url) == "https://example.test/"

    class TestBody:
        def test_form_encoding(self, builder: RequestBuilder):
            spec = spec_of(builder.form_encode(QUERY))

            assert spec.headers["Content-Type"] == ContentType.FORM.value
            assert spec.content is not None
            fields = parse_qs(spec.content.decode("utf-8"))
            assert fields == {
                "intValue": ["8"],
                "stringValue": ["hi"],
                "boolValue": ["true"],
            }

        def test_json_encoding_is_deferred(self, builder: RequestBuilder):
            spec = spec_of(builder.encode(QUERY))

            assert spec.content is None
            assert spec.encode_body is not None
            assert spec.headers["Content-Type"] == ContentType.JSON.value
            assert (
                spec.encode_body()
                == b'{"intValue":8,"stringValue":"hi","boolValue":true}'
            )

        def test_json_encoding_keeps_explicit_content_type(
            self, builder: RequestBuilder
        ):
            spec = spec_of(builder.content_type(ContentType.TXT).encode({"a": 1}))
            assert spec.headers["Content-Type"] == "text/plain"

    class TestHeaders:
        def test_basic_auth(self, builder: RequestBuilder):
            spec = spec_of(builder.basic_auth(login="v@d.ru", password="1"))
            assert spec.headers["Authorization"] == "Basic dkBkLnJ1OjE="

        def test_bearer_auth(self, builder: RequestBuilder):
            token = "faospdfopjsdfpoaisjf"
            spec = spec_of(builder.bearer_auth(token))
            assert spec.headers["Authorization"] == f"Bearer {token}"

        def test_oauth(self, builder: RequestBuilder):
            token = "faospdfopjsdfpoaisjf"
            spec = spec_of(builder.oauth(token))
            assert spec.headers["Authorization"] == f"OAuth {token}"

        def test_headers_merging(self, builder: RequestBuilder):
            spec = spec_of(
                builder.headers(
                    {"header1": "1", "header2": "2", "header3": "false"}
                ).headers({"header3": "3", "header4": "4", "header5": "5"})
            )

            assert dict(spec.headers) == {
                "header1": "1",
                "header2": "2",
                "header3": "3",
                "header4": "4",
                "header5": "5",
            }

        @pytest.mark.parametrize(
            "content_type, expected",
            [
                (ContentType.JSON, "application/json"),
                (ContentType.XML, "application/xml"),
                (ContentType.FORM, "application/x-www-form-urlencoded"),
                (ContentType.RAR, "application/vnd.rar"),
                ("application/vnd.api+json", "application/vnd.api+json"),
            ],
        )
        def test_content_type(
            self, builder: RequestBuilder, content_type, expected: str
        ):
            spec = spec_of(builder.content_type(content_type))
            assert spec.headers["Content-Type"] == expected

    class TestBuild:
        def test_state_resets_after_build(self, builder: RequestBuilder):
            spec_of(builder.method(HttpMethod.POST).path("a").bearer_auth("t"))

            spec = spec_of(builder)
            assert spec.method == HttpMethod.GET
            assert str(spec.url) == "https://example.test/"
            assert dict(spec.headers) == {}

        def test_built_request_is_detached_from_builder(
            self, builder: RequestBuilder
        ):
            first = spec_of(builder.headers({"a": "1"}))
            builder.headers({"b": "2"})

            assert dict(first.headers) == {"a": "1"}
            with pytest.raises(TypeError):
                first.headers["c"] = "3"  # type: ignore[index]

        def test_applications_survive_reset(
            self, make_builder: Callable[..., RequestBuilder]
        ):
            headers = {"X-Client-Name": "requestkit-tests"}
            builder = make_builder(
                applications=lambda: [lambda b: b.headers(headers)]
            )

            first = spec_of(builder)
            builder.reset()
            second = spec_of(builder)

            assert first.headers["X-Client-Name"] == "requestkit-tests"
            assert second.headers["X-Client-Name"] == "requestkit-tests"

        def test_applications_as_list(
            self, make_builder: Callable[..., RequestBuilder]
        ):
            builder = make_builder(applications=[lambda b: b.bearer_auth("common")])
            assert spec_of(builder).headers["Authorization"] == "Bearer common"

        def test_expectation_defaults_to_no_content(self, builder: RequestBuilder):
            assert isinstance(builder.build().expectation, NoContent)

        def test_expectation_typed(self, builder: RequestBuilder):
            expectation = builder.build(Payload).expectation
            assert expectation == Typed(Payload)

        def test_mock_response_builds_mocked_task(self, builder: RequestBuilder):
            request = builder.mock_response(data=b"{}", status_code=201).build()

            assert isinstance(request.data_task, MockedDataTask)
            assert request.data_task.status_code == 201

        def test_timeout_defaults_to_configuration(self, builder: RequestBuilder):
            assert spec_of(builder).session.timeout == 30.0

        def test_timeout_override(self, builder: RequestBuilder):
            assert spec_of(builder.timeout(5)).session.timeout == 5

        def test_session_inherits_configuration(
            self, make_builder: Callable[..., RequestBuilder]
        ):
            transport = httpx.MockTransport(lambda request: httpx.Response(200))
            builder = make_builder(transport=transport, timeout=12.0)

            session = spec_of(
                builder.session(SessionConfiguration(proxy="http://proxy.test:8080"))
            ).session

            assert session.transport is transport
            assert session.timeout == 12.0
            assert session.follow_redirects is False
            assert session.proxy == "http://proxy.test:8080"

        def test_session_fields_override_configuration(
            self, make_builder: Callable[..., RequestBuilder]
        ):
            builder = make_builder(timeout=12.0)

            session = spec_of(
                builder.session(
                    SessionConfiguration(timeout=3.0, follow_redirects=True)
                )
            ).session

            assert session.timeout == 3.0
            assert session.follow_redirects is True

        def test_timeout_wins_over_session(self, builder: RequestBuilder):
            session = spec_of(
                builder.session(SessionConfiguration(timeout=3.0)).timeout(7.0)
            ).session

            assert session.timeout == 7.0

        def test_no_trust_policy_by_default(self, builder: RequestBuilder):
            assert spec_of(builder).trust_policy is None

        def test_trust_policy_from_providers(self, builder: RequestBuilder):
            identity = ClientIdentity(certfile="client.pem", keyfile="client.key")
            spec = spec_of(
                builder.ssl_pin(
                    PinnedCertificates(certificates=(b"leaf",), anchors=(b"root",))
                ).auth(StaticIdentity(identity))
            )

            assert spec.trust_policy is not None
            assert spec.trust_policy.pinned_certificates == (b"leaf",)
            assert spec.trust_policy.anchor_certificates == (b"root",)
            assert spec.trust_policy.identity == identity
