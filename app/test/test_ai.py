import json
import random

import httpx
import pytest

from app.core.errors import ReadingGenerationError
from app.services.ai import (
    ExternalReadingGenerator,
    FATE_LINE,
    HEART_LINE,
    StubReadingGenerator,
    clamp_confidence,
)


def test_clamp_confidence():
    assert clamp_confidence(0.5) == 0.6
    assert clamp_confidence(0.99) == 0.95
    assert clamp_confidence(0.8) == 0.8


def test_stub_generator_substitutes_words_in_all_languages():
    analysis = StubReadingGenerator(random.Random(3)).analyze_palm("img", "english")

    assert any(word in analysis.text_english for word in HEART_LINE)
    assert any(word in analysis.text_english for word in FATE_LINE)
    assert any(bn in analysis.text_bengali for bn, _ in HEART_LINE.values())
    assert any(hi in analysis.text_hindi for _, hi in HEART_LINE.values())
    assert "{" not in analysis.text_english + analysis.text_bengali + analysis.text_hindi


def test_stub_generator_ignores_requested_language():
    a = StubReadingGenerator(random.Random(11)).analyze_palm("img", "bengali")
    b = StubReadingGenerator(random.Random(11)).analyze_palm("img", "hindi")

    assert a == b


def test_stub_generator_confidence_range():
    gen = StubReadingGenerator(random.Random(0))
    scores = [gen.analyze_palm("img", "english").confidence_score for _ in range(200)]

    assert all(0.6 <= s <= 0.95 for s in scores)
    assert min(scores) < 0.7 < max(scores)


def _client(handler):
    return httpx.Client(transport=httpx.MockTransport(handler))


def test_external_generator_posts_and_parses():
    seen = {}

    def handler(request):
        seen["auth"] = request.headers.get("Authorization")
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={
            "reading_text_bengali": "bn",
            "reading_text_hindi": "hi",
            "reading_text_english": "en",
            "confidence_score": 0.82,
        })

    gen = ExternalReadingGenerator("https://ai.example.com/palm", api_key="secret", client=_client(handler))
    analysis = gen.analyze_palm("aGk=", "hindi")

    assert seen["auth"] == "Bearer secret"
    assert seen["body"] == {"image_data": "aGk=", "language": "hindi"}
    assert analysis.text_english == "en"
    assert analysis.confidence_score == 0.82


def test_external_generator_http_error():
    gen = ExternalReadingGenerator(
        "https://ai.example.com/palm", client=_client(lambda request: httpx.Response(503)),
    )

    with pytest.raises(ReadingGenerationError):
        gen.analyze_palm("x", "english")


@pytest.mark.parametrize("body", [
    {"reading_text_english": "en"},
    {"reading_text_bengali": "bn", "reading_text_hindi": "hi", "reading_text_english": "en",
     "confidence_score": 1.5},
])
def test_external_generator_rejects_bad_payload(body):
    gen = ExternalReadingGenerator(
        "https://ai.example.com/palm", client=_client(lambda request: httpx.Response(200, json=body)),
    )

    with pytest.raises(ReadingGenerationError):
        gen.analyze_palm("x", "english")
