import pytest

from twitter_api._config import ClientSettings, CredentialSet
from twitter_api._services import RequestMaker


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Clean environment variables before each test."""
    for name in (
        "TWITTER_BEARER_TOKEN",
        "TWITTER_API_KEY",
        "TWITTER_API_SECRET",
        "TWITTER_ACCESS_TOKEN",
        "TWITTER_ACCESS_SECRET",
        "TWITTER_CLIENT_ID",
        "TWITTER_CLIENT_SECRET",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def fixed_nonce() -> str:
    return "kYjzVBB8Y0ZFabxSWbWovY3uYSQ2pTgmZeNu2VS4cg"


@pytest.fixture
def fixed_timestamp() -> int:
    return 1318622958


@pytest.fixture
def bearer_token() -> str:
    return "AAAA-test-bearer"


@pytest.fixture
def oauth1_credentials() -> CredentialSet:
    return CredentialSet(
        consumer_key="xvz1evFS4wEEPTGEFPHBog",
        consumer_secret="kAcSOqF21Fu85e7zjz7ZN2U4ZRhfV3WpwPAoE3Z7kBw",
        access_token="370773112-GmHxMAgYyLbNEtIKZeRNFsMKPR9EyMZeS9weJAEb",
        access_secret="LswwdoUaIvS8ltyTt5jkRh4J50vUPVVHtR2YPi5kE",
    )


@pytest.fixture
def settings() -> ClientSettings:
    return ClientSettings()


@pytest.fixture
def bearer_maker(bearer_token: str, settings: ClientSettings) -> RequestMaker:
    return RequestMaker(CredentialSet(bearer_token=bearer_token), settings)


@pytest.fixture
def oauth1_maker(
    oauth1_credentials: CredentialSet,
    settings: ClientSettings,
    fixed_nonce: str,
    fixed_timestamp: int,
) -> RequestMaker:
    return RequestMaker(
        oauth1_credentials,
        settings,
        oauth_nonce_factory=lambda: fixed_nonce,
        oauth_clock=lambda: fixed_timestamp,
    )
