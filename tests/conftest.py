import sys
from pathlib import Path


def _add_src_to_path() -> None:
    root = Path(__file__).resolve().parents[1]
    src_path = root / "src"
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))


_add_src_to_path()

import pytest  # noqa: E402

from ltb.errors import TransportError  # noqa: E402


class ScriptedGateway:
    """Return canned replies in order; exceptions in the script are raised."""

    def __init__(self, replies: list[str | Exception]) -> None:
        self._replies = list(replies)
        self.prompts: list[str] = []
        self.calls: list[tuple[int, str]] = []

    def complete(self, prompt_text: str, max_tokens: int, model_id: str) -> str:
        self.prompts.append(prompt_text)
        self.calls.append((max_tokens, model_id))
        if not self._replies:
            raise TransportError("no scripted reply left")
        reply = self._replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture
def scripted_gateway():
    return ScriptedGateway


@pytest.fixture
def batch_dirs(tmp_path: Path) -> tuple[Path, Path, Path]:
    source = tmp_path / "source"
    output = tmp_path / "output"
    archive = tmp_path / "archive"
    for path in (source, output, archive):
        path.mkdir()
    return source, output, archive
