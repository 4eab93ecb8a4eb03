"""
End-to-end flow: config file and .env on disk → bootstrap → provider → HTTP.
"""

import json

import httpx

from roocode_generator.core.bootstrap import bootstrap
from roocode_generator.providers.exceptions import ErrorCode


class RecordingBackend:
    """Routes requests to canned responses and remembers what it saw."""

    def __init__(self, routes):
        self.routes = routes
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        for (method, suffix), respond in self.routes.items():
            if request.method == method and request.url.path.endswith(suffix):
                return respond(request) if callable(respond) else respond
        return httpx.Response(404, json={"error": {"message": f"no route for {request.url.path}"}})

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))

    def bodies(self):
        return [json.loads(r.content) for r in self.requests if r.content]


def _write_config(path, **values):
    data = {"provider": "openrouter", "apiKey": "file-key", "model": "openai/gpt-4o"}
    data.update(values)
    path.write_text(json.dumps(data))


async def test_completion_with_env_key_and_retry(workspace, backend_factories, monkeypatch):
    _write_config(workspace / "llm.config.json", maxTokens=300)
    (workspace / ".env").write_text("ROOCODE_LLM__API_KEY=dotenv-key\n")
    # registered so the value loaded from .env is removed at teardown
    monkeypatch.setenv("ROOCODE_LLM__API_KEY", "placeholder")
    monkeypatch.delenv("ROOCODE_LLM__API_KEY")

    replies = iter(
        [
            httpx.Response(429, json={"error": {"message": "slow down"}}),
            httpx.Response(200, json={"choices": [{"message": {"content": "generated rules"}}]}),
        ]
    )
    backend = RecordingBackend({("POST", "/chat/completions"): lambda request: next(replies)})

    ctx = bootstrap(factories=backend_factories(backend))
    try:
        provider = (await ctx["llm"].get_provider()).unwrap()
        result = await provider.get_completion("You write rules.", "Describe the repo")
    finally:
        await ctx.aclose()

    assert result.unwrap() == "generated rules"
    assert len(backend.requests) == 2
    assert backend.requests[-1].headers["authorization"] == "Bearer dotenv-key"
    assert backend.bodies()[-1]["max_tokens"] == 300


async def test_provider_is_resolved_once(workspace, backend_factories):
    _write_config(workspace / "llm.config.json")
    backend = RecordingBackend(
        {
            ("POST", "/chat/completions"): httpx.Response(
                200, json={"choices": [{"message": {"content": "ok"}}]}
            )
        }
    )

    ctx = bootstrap(factories=backend_factories(backend))
    registry = ctx["llm"]
    first = (await registry.get_provider()).unwrap()
    second = (await registry.get_provider()).unwrap()
    await ctx.aclose()

    assert first is second


async def test_terminal_error_is_not_retried(workspace, backend_factories, no_backoff_sleep):
    _write_config(workspace / "llm.config.json")
    backend = RecordingBackend(
        {("POST", "/chat/completions"): httpx.Response(401, json={"error": {"message": "bad key"}})}
    )

    ctx = bootstrap(factories=backend_factories(backend))
    provider = (await ctx["llm"].get_provider()).unwrap()
    result = await provider.get_completion("s", "u")
    await ctx.aclose()

    assert result.error.code == ErrorCode.http(401)
    assert len(backend.requests) == 1
    no_backoff_sleep.assert_not_awaited()


async def test_model_listing_without_saved_config(workspace, backend_factories):
    pages = {
        None: {"models": [{"name": "models/gemini-1.5-pro"}], "nextPageToken": "p2"},
        "p2": {"models": [{"name": "models/gemini-1.5-flash", "baseModelId": "gemini-1.5-flash"}]},
    }
    backend = RecordingBackend(
        {("GET", "/models"): lambda request: httpx.Response(
            200, json=pages[request.url.params.get("pageToken")]
        )}
    )

    ctx = bootstrap(factories=backend_factories(backend))
    result = await ctx["models"].list_models_for_provider("Google-GenAI", "g-key")

    assert result.unwrap() == ["models/gemini-1.5-pro", "gemini-1.5-flash"]
    assert all(r.headers["x-goog-api-key"] == "g-key" for r in backend.requests)
    assert not (workspace / "llm.config.json").exists()
