"""Shared fixtures for evaluation pipeline tests."""

import json

import httpx
import pytest

from internship_evaluate.grading.backends.base import Backend
from internship_evaluate.grading.engine import GradingEngine
from internship_evaluate.models import ImageFile, RepositorySnapshot, TextFile

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16


class ScriptedBackend(Backend):
    """In-memory backend returning queued responses; exceptions in the queue are raised."""

    name = "scripted"

    def __init__(self, responses=(), supports_vision=True, **kwargs):
        self._responses = list(responses)
        self.supports_vision = supports_vision
        self.calls = []

    def complete(self, messages, *, model=None, temperature=0.0, max_tokens=2048):
        self.calls.append(messages)
        if not self._responses:
            raise AssertionError("ScriptedBackend ran out of responses")
        response = self._responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def code_answer(overall=82, functionality=8, code_quality=8, best_practices=7, **extra):
    payload = {
        "functionality": functionality,
        "code_quality": code_quality,
        "best_practices": best_practices,
        "overall_score": overall,
        "feedback": "Solid submission.",
        "strengths": ["Clean layout"],
        "improvements": ["Add tests"],
    }
    payload.update(extra)
    return json.dumps(payload)


def image_answer(visual_design, user_experience, design_quality, technical_execution, feedback="Nice design"):
    return json.dumps(
        {
            "visual_design": visual_design,
            "user_experience": user_experience,
            "design_quality": design_quality,
            "technical_execution": technical_execution,
            "overall_feedback": feedback,
            "strengths": ["Clear hierarchy"],
            "improvements": ["Improve contrast"],
        }
    )


def make_engine(responses=(), supports_vision=True):
    backend = ScriptedBackend(responses, supports_vision=supports_vision)
    return GradingEngine(backend=backend, default_model="scripted-model"), backend


def make_snapshot(files=None, images=None, owner="octo", repo="site"):
    text_files = {
        path: TextFile(path=path, content=content, extension=path.rsplit(".", 1)[-1].lower(), size=len(content))
        for path, content in (files or {}).items()
    }
    image_files = {
        path: ImageFile(path=path, content=PNG_BYTES, extension=path.rsplit(".", 1)[-1].lower())
        for path in (images or [])
    }
    return RepositorySnapshot(owner=owner, repo=repo, files=text_files, images=image_files)


class FakeGitHub:
    """Serve the contents API and raw endpoint for one repository through a mock transport."""

    def __init__(self, owner="octo", repo="site"):
        self.owner = owner
        self.repo = repo
        self.dirs = {"": []}
        self.blobs = {}
        self.failing_dirs = {}
        self.failing_blobs = set()
        self.requests = []

    def add_file(self, path, content=b"", size=None):
        if isinstance(content, str):
            content = content.encode("utf-8")
        parent, _, name = path.rpartition("/")
        self._ensure_dir(parent)
        self.dirs[parent].append(
            {
                "type": "file",
                "name": name,
                "path": path,
                "size": len(content) if size is None else size,
                "download_url": f"https://raw.githubusercontent.com/{self.owner}/{self.repo}/main/{path}",
            }
        )
        self.blobs[path] = content

    def _ensure_dir(self, path):
        if path in self.dirs:
            return
        parent, _, name = path.rpartition("/")
        self._ensure_dir(parent)
        self.dirs[parent].append({"type": "dir", "name": name, "path": path})
        self.dirs[path] = []

    def handler(self, request):
        self.requests.append(request)
        prefix = f"/repos/{self.owner}/{self.repo}/contents"
        if request.url.host == "api.github.com" and request.url.path.startswith(prefix):
            path = request.url.path[len(prefix) :].strip("/")
            if path in self.failing_dirs:
                return httpx.Response(self.failing_dirs[path], json={"message": "API rate limit exceeded"})
            if path not in self.dirs:
                return httpx.Response(404, json={"message": "Not Found"})
            return httpx.Response(200, json=self.dirs[path])
        if request.url.host == "raw.githubusercontent.com":
            path = request.url.path.split("/", 4)[4]
            if path in self.failing_blobs or path not in self.blobs:
                return httpx.Response(404, text="404: Not Found")
            return httpx.Response(200, content=self.blobs[path])
        return httpx.Response(404)

    def client(self):
        return httpx.Client(transport=httpx.MockTransport(self.handler))

    @property
    def blob_requests(self):
        return [r for r in self.requests if r.url.host == "raw.githubusercontent.com"]


@pytest.fixture()
def github():
    return FakeGitHub()


@pytest.fixture()
def web_repo(github):
    """A small web development repository."""
    github.add_file("README.md", "# Landing page\nA responsive landing page.")
    github.add_file("index.html", "<html><body><h1>Hello</h1></body></html>")
    github.add_file("css/style.css", "body { margin: 0; }")
    github.add_file("js/main.js", "console.log('hi');")
    return github


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for var in (
        "EVALUATOR_BACKEND_TYPE",
        "EVALUATOR_BACKEND_MODEL",
        "EVALUATOR_BACKEND_TEMPERATURE",
        "EVALUATOR_BACKEND_MAX_TOKENS",
        "EVALUATOR_SOURCE_TIMEOUT",
        "GITHUB_TOKEN",
    ):
        monkeypatch.delenv(var, raising=False)
