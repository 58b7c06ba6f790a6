import asyncio
import json
from typing import Any, override

import pytest

from profile_jutsu.badges.providers.base import DEFAULT_TEMPERATURE, BadgeProvider
from profile_jutsu.config import Settings
from profile_jutsu.models.badge import AnimeBadge
from profile_jutsu.models.github import GithubRepo, GithubUser, UserProfile

OPENROUTER_TEST_KEY = "sk-or-v1-test0123456789abcdef"
IMAGEROUTER_TEST_KEY = "ir-test-key-0123456789"

SAMPLE_USER: dict[str, Any] = {
    "login": "testuser",
    "id": 12345,
    "avatar_url": "https://github.com/testuser.png",
    "html_url": "https://github.com/testuser",
    "name": "Test User",
    "bio": "Full-stack developer passionate about TypeScript and React",
    "public_repos": 25,
    "followers": 150,
    "type": "User",
}

SAMPLE_REPOS: list[dict[str, Any]] = [
    {
        "id": 2,
        "name": "node-api-server",
        "full_name": "testuser/node-api-server",
        "description": "RESTful API server built with Node.js and Express",
        "stargazers_count": 23,
        "forks_count": 8,
        "language": "JavaScript",
        "html_url": "https://github.com/testuser/node-api-server",
        "topics": ["nodejs", "express", "api"],
        "private": False,
    },
    {
        "id": 1,
        "name": "awesome-react-app",
        "full_name": "testuser/awesome-react-app",
        "description": "A modern React application with TypeScript",
        "stargazers_count": 45,
        "forks_count": 12,
        "language": "TypeScript",
        "html_url": "https://github.com/testuser/awesome-react-app",
        "topics": ["react", "typescript", "frontend", "vite"],
        "private": False,
    },
]

SAMPLE_BADGE: dict[str, str] = {
    "characterName": "Naruto Uzumaki",
    "anime": "Naruto",
    "reason": "Like Naruto, this developer shows determination and creates impactful projects that bring people together.",
    "badgeColor": "#FF7F00",
}


@pytest.fixture
def settings() -> Settings:
    return Settings(
        openrouter_api_key=OPENROUTER_TEST_KEY,
        imagerouter_api_key=IMAGEROUTER_TEST_KEY,
        request_timeout=5,
    )


@pytest.fixture
def user_profile() -> UserProfile:
    return UserProfile(
        user=GithubUser.model_validate(SAMPLE_USER),
        repos=tuple(GithubRepo.model_validate(repo) for repo in SAMPLE_REPOS),
    )


@pytest.fixture
def anime_badge() -> AnimeBadge:
    return AnimeBadge.model_validate(SAMPLE_BADGE)


class StaticBadgeProvider(BadgeProvider):
    """Answers every prompt with the same text and records the prompts it saw."""

    name: str = "static"
    model: str = "static-model"

    def __init__(self, text: str):
        self.text: str = text
        self.prompts: list[str] = []
        self.temperatures: list[float] = []

    @override
    async def complete(self, prompt: str, temperature: float = DEFAULT_TEMPERATURE) -> str:
        self.prompts.append(prompt)
        self.temperatures.append(temperature)
        return self.text


class HangingBadgeProvider(BadgeProvider):
    """Never answers in time. Records whether the in-flight call was cancelled."""

    name: str = "hanging"
    model: str = "hanging-model"

    def __init__(self, delay: float = 5.0):
        self.delay: float = delay
        self.started: bool = False
        self.cancelled: bool = False
        self.completed: bool = False

    @override
    async def complete(self, prompt: str, temperature: float = DEFAULT_TEMPERATURE) -> str:
        self.started = True
        try:
            await asyncio.sleep(self.delay)
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        self.completed = True
        return json.dumps(SAMPLE_BADGE)


@pytest.fixture
def static_badge_provider() -> StaticBadgeProvider:
    return StaticBadgeProvider(text=json.dumps(SAMPLE_BADGE))
