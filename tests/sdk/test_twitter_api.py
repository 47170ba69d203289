import base64
import logging

import pytest
from pytest_httpx import HTTPXMock

from twitter_api import (
    ApiResponse,
    ClientSettings,
    CredentialSet,
    InvalidConsumerTokensError,
    ReadOnlyTwitterApi,
    TwitterApi,
    TwitterApiError,
)

TOKEN_URL = "https://api.twitter.com/oauth2/token"


@pytest.fixture
def client(bearer_token: str) -> TwitterApi:
    return TwitterApi(bearer_token=bearer_token)


class TestTwitterApi:
    def test_init_from_fields(self):
        client = TwitterApi(app_key="key", app_secret="secret")

        assert client.credentials.consumer_key == "key"
        assert client.credentials.consumer_secret == "secret"

    def test_init_from_credentials(self):
        credentials = CredentialSet(client_id="id", client_secret="secret")
        client = TwitterApi(credentials=credentials, settings=ClientSettings(timeout=5))

        assert client.credentials is credentials
        assert client.request_maker.settings.timeout == 5

    def test_missing_consumer_secret(self):
        with pytest.raises(InvalidConsumerTokensError):
            TwitterApi(app_key="key", access_token="a", access_secret="b")

    def test_from_env(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("TWITTER_BEARER_TOKEN", "env-token")

        client = TwitterApi.from_env()

        assert client.credentials.bearer_token == "env-token"

    def test_from_env_bearer_with_stray_access_token(
        self, monkeypatch: pytest.MonkeyPatch
    ):
        monkeypatch.setenv("TWITTER_BEARER_TOKEN", "env-token")
        monkeypatch.setenv("TWITTER_ACCESS_TOKEN", "stray")

        client = TwitterApi.from_env()

        assert client.credentials.auth_strategy == "bearer"

    def test_credentials_are_not_logged(self, caplog: pytest.LogCaptureFixture):
        caplog.set_level(logging.DEBUG, logger="twitter_api")

        TwitterApi(
            app_key="public-key",
            app_secret="app-secret",
            access_token="user-token",
            access_secret="user-secret",
        )

        assert "oauth1" in caplog.text
        for value in ("public-key", "app-secret", "user-token", "user-secret"):
            assert value not in caplog.text

    def test_surface_prefixes(self, client: TwitterApi):
        assert client.v1.prefix == "https://api.twitter.com/1.1/"
        assert client.v2.prefix == "https://api.twitter.com/2/"
        assert client.v2.read_only.prefix == client.v2.prefix

    def test_read_only(self, client: TwitterApi):
        read_only = client.read_only

        assert isinstance(read_only, ReadOnlyTwitterApi)
        assert not hasattr(read_only.v2, "post")
        assert not hasattr(read_only.v1, "delete")
        assert read_only.rate_limits is client.rate_limits

    def test_context_manager(self, bearer_token: str):
        with TwitterApi(bearer_token=bearer_token) as client:
            pass

        assert client.request_maker.client.is_closed

    class TestRequests:
        def test_v2_get(self, httpx_mock: HTTPXMock, client: TwitterApi):
            httpx_mock.add_response(
                url="https://api.twitter.com/2/tweets?ids=1%2C2",
                json={"data": [{"id": "1"}, {"id": "2"}]},
                headers={
                    "x-rate-limit-limit": "300",
                    "x-rate-limit-remaining": "298",
                    "x-rate-limit-reset": "1700000000",
                },
            )

            data = client.v2.get("tweets", {"ids": ["1", "2"]})

            assert data == {"data": [{"id": "1"}, {"id": "2"}]}
            assert client.v2.get_last_rate_limit("tweets") is not None
            rate_limit = client.get_last_rate_limit("https://api.twitter.com/2/tweets")
            assert rate_limit is not None and rate_limit.remaining == 298

        def test_v1_get_full_response(self, httpx_mock: HTTPXMock, client: TwitterApi):
            httpx_mock.add_response(
                url="https://api.twitter.com/1.1/statuses/show.json?id=20",
                json={"id_str": "20"},
            )

            response = client.v1.get("statuses/show.json", {"id": 20}, full_response=True)

            assert isinstance(response, ApiResponse)
            assert response.status_code == 200
            assert response.data == {"id_str": "20"}

        def test_path_parameters(self, httpx_mock: HTTPXMock, client: TwitterApi):
            httpx_mock.add_response(
                url="https://api.twitter.com/2/users/12", json={"data": {"id": "12"}}
            )

            client.v2.get("users/:id", params={"id": "12"})

            assert client.v2.get_last_rate_limit("users/:id") is None
            assert client.v2.resolve_url("users/:id") == (
                "https://api.twitter.com/2/users/:id"
            )

        def test_absolute_url_and_prefix_override(
            self, httpx_mock: HTTPXMock, client: TwitterApi
        ):
            httpx_mock.add_response(
                url="https://api.twitter.com/labs/2/tweets/1", json={}
            )
            httpx_mock.add_response(
                url="https://upload.twitter.com/1.1/media/upload.json?command=STATUS",
                json={},
            )

            client.v2.get("https://api.twitter.com/labs/2/tweets/1")
            client.v1.get(
                "media/upload.json",
                {"command": "STATUS"},
                prefix="https://upload.twitter.com/1.1/",
            )

            assert len(httpx_mock.get_requests()) == 2

        def test_v2_post_is_json(self, httpx_mock: HTTPXMock, client: TwitterApi):
            httpx_mock.add_response(
                url="https://api.twitter.com/2/tweets",
                method="POST",
                json={"data": {"id": "1"}},
            )

            client.v2.post("tweets", {"text": "hello", "reply": None})

            sent_request = httpx_mock.get_request()
            assert sent_request is not None
            assert sent_request.content == b'{"text":"hello"}'
            assert sent_request.headers["content-type"] == "application/json;charset=UTF-8"

        def test_v1_delete_and_put(self, httpx_mock: HTTPXMock, client: TwitterApi):
            httpx_mock.add_response(
                url="https://api.twitter.com/2/tweets/1", method="DELETE", json={}
            )
            httpx_mock.add_response(
                url="https://api.twitter.com/2/lists/7", method="PUT", json={}
            )

            client.v2.delete("tweets/:id", params={"id": "1"})
            client.v2.put("lists/7", {"name": "renamed"})

            delete_request, put_request = httpx_mock.get_requests()
            assert delete_request.content == b""
            assert put_request.content == b'{"name":"renamed"}'

        @pytest.mark.anyio
        async def test_get_async(self, httpx_mock: HTTPXMock, client: TwitterApi):
            httpx_mock.add_response(
                url="https://api.twitter.com/2/tweets/1", json={"data": {"id": "1"}}
            )

            data = await client.v2.get_async("tweets/1")

            assert data == {"data": {"id": "1"}}

        @pytest.mark.anyio
        async def test_post_async(self, httpx_mock: HTTPXMock, client: TwitterApi):
            httpx_mock.add_response(
                url="https://api.twitter.com/1.1/statuses/update.json?trim_user=true",
                method="POST",
                json={"id_str": "1"},
            )

            await client.v1.post_async(
                "statuses/update.json", {"status": "hi"}, query={"trim_user": True}
            )

            sent_request = httpx_mock.get_request()
            assert sent_request is not None
            assert sent_request.content == b"status=hi"

    class TestCredentials:
        def test_with_bearer_token(self, client: TwitterApi):
            rotated = client.with_bearer_token("fresh")

            assert rotated.credentials.bearer_token == "fresh"
            assert client.credentials.bearer_token != "fresh"
            assert rotated.rate_limits is client.rate_limits

        def test_app_login(self, httpx_mock: HTTPXMock):
            httpx_mock.add_response(
                url=TOKEN_URL,
                method="POST",
                json={"token_type": "bearer", "access_token": "app-token"},
            )
            httpx_mock.add_response(
                url="https://api.twitter.com/2/tweets/1", json={"data": {"id": "1"}}
            )

            client = TwitterApi(app_key="key", app_secret="secret")
            app_client = client.app_login()
            app_client.v2.get("tweets/1")

            token_request, tweet_request = httpx_mock.get_requests()
            basic = base64.b64encode(b"key:secret").decode()
            assert token_request.headers["Authorization"] == f"Basic {basic}"
            assert token_request.content == b"grant_type=client_credentials"
            assert tweet_request.headers["Authorization"] == "Bearer app-token"
            assert app_client.credentials == CredentialSet(bearer_token="app-token")

        @pytest.mark.anyio
        async def test_app_login_async(self, httpx_mock: HTTPXMock):
            httpx_mock.add_response(
                url=TOKEN_URL,
                method="POST",
                json={"token_type": "bearer", "access_token": "app-token"},
            )

            client = TwitterApi(app_key="key", app_secret="secret")
            app_client = await client.app_login_async()

            assert app_client.credentials.bearer_token == "app-token"

        def test_app_login_requires_consumer_keys(self, client: TwitterApi):
            with pytest.raises(InvalidConsumerTokensError):
                client.app_login()

        def test_app_login_unexpected_token(self, httpx_mock: HTTPXMock):
            httpx_mock.add_response(
                url=TOKEN_URL, method="POST", json={"token_type": "mac"}
            )

            client = TwitterApi(app_key="key", app_secret="secret")
            with pytest.raises(TwitterApiError):
                client.app_login()
