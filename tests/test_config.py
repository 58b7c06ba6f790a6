import pytest

from profile_jutsu.config import DEFAULT_OPENROUTER_MODEL, Settings
from profile_jutsu.errors import MissingConfigurationError

ENV_VARS = [
    "GITHUB_TOKEN",
    "GITHUB_PERSONAL_ACCESS_TOKEN",
    "BADGE_PROVIDER",
    "OPENROUTER_API_KEY",
    "OPENROUTER_MODEL",
    "GOOGLE_API_KEY",
    "GOOGLE_IMAGE_MODEL",
    "IMAGE_PROVIDER",
    "IMAGEROUTER_API_KEY",
    "AVATAR_STRATEGY",
    "REQUEST_TIMEOUT",
]


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for env_var in ENV_VARS:
        monkeypatch.delenv(env_var, raising=False)
    return monkeypatch


def test_from_env_defaults(clean_env: pytest.MonkeyPatch):
    settings = Settings.from_env()

    assert settings.openrouter_model == DEFAULT_OPENROUTER_MODEL
    assert settings.request_timeout == 30
    assert settings.avatar_strategy == "lookup"
    assert settings.github_token is None


def test_from_env_overrides(clean_env: pytest.MonkeyPatch):
    clean_env.setenv("OPENROUTER_MODEL", "openai/gpt-4o-mini")
    clean_env.setenv("REQUEST_TIMEOUT", "12.5")
    clean_env.setenv("AVATAR_STRATEGY", "generate")
    clean_env.setenv("GITHUB_PERSONAL_ACCESS_TOKEN", "ghp_example")

    settings = Settings.from_env()

    assert settings.openrouter_model == "openai/gpt-4o-mini"
    assert settings.request_timeout == 12.5
    assert settings.avatar_strategy == "generate"
    assert settings.github_token == "ghp_example"


def test_missing_keys_do_not_block_construction(clean_env: pytest.MonkeyPatch):
    settings = Settings.from_env()

    with pytest.raises(MissingConfigurationError, match="OPENROUTER_API_KEY must be set"):
        _ = settings.require_openrouter_api_key()

    with pytest.raises(MissingConfigurationError, match="IMAGEROUTER_API_KEY must be set"):
        _ = settings.require_imagerouter_api_key()

    with pytest.raises(MissingConfigurationError, match="GOOGLE_API_KEY must be set"):
        _ = settings.require_google_api_key()


def test_missing_configuration_is_a_value_error():
    assert issubclass(MissingConfigurationError, ValueError)


@pytest.mark.parametrize(
    ("badge_provider", "google_api_key", "expected"),
    [
        (None, None, "openrouter"),
        (None, "google-key", "google"),
        ("openrouter", "google-key", "openrouter"),
        ("google", None, "google"),
    ],
)
def test_resolved_badge_provider(badge_provider: str | None, google_api_key: str | None, expected: str):
    settings = Settings.model_validate({"badge_provider": badge_provider, "google_api_key": google_api_key})

    assert settings.resolved_badge_provider() == expected


@pytest.mark.parametrize(
    ("image_provider", "imagerouter_api_key", "google_api_key", "expected"),
    [
        (None, None, None, "imagerouter"),
        (None, "ir-key", "google-key", "imagerouter"),
        (None, None, "google-key", "google"),
        ("imagerouter", None, "google-key", "imagerouter"),
        ("google", "ir-key", None, "google"),
    ],
)
def test_resolved_image_provider(image_provider: str | None, imagerouter_api_key: str | None, google_api_key: str | None, expected: str):
    settings = Settings.model_validate(
        {"image_provider": image_provider, "imagerouter_api_key": imagerouter_api_key, "google_api_key": google_api_key}
    )

    assert settings.resolved_image_provider() == expected


def test_from_env_image_provider(clean_env: pytest.MonkeyPatch):
    clean_env.setenv("IMAGE_PROVIDER", "google")
    clean_env.setenv("GOOGLE_IMAGE_MODEL", "imagen-4.0-generate-001")

    settings = Settings.from_env()

    assert settings.resolved_image_provider() == "google"
    assert settings.google_image_model == "imagen-4.0-generate-001"
