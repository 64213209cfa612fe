import json

import pytest

from trendhaven.core.result import Err, Ok
from trendhaven.services.analysis import normalize_analysis, strip_code_fences

from fixtures import analysis_json


def test_strip_fences_with_language_tag():
    raw = '```json\n{"overallRating":8}\n```'
    assert strip_code_fences(raw) == '{"overallRating":8}'


def test_strip_fences_without_language_tag_and_unterminated():
    assert strip_code_fences("```\n{}\n```") == "{}"
    assert strip_code_fences("```json\n{}") == "{}"
    assert strip_code_fences("  {}  ") == "{}"


def test_fenced_json_is_parsed():
    res = normalize_analysis("```json\n" + analysis_json() + "\n```")
    assert isinstance(res, Ok)
    a = res.value
    assert a.overall_rating == 8
    assert a.style_score == 7
    assert a.color_coordination == 9
    assert a.trend_alignment == 6
    assert a.category == "casual"
    assert a.tags == ["minimalist", "clean", "denim"]


def test_prose_around_json_is_tolerated():
    raw = "Here is my analysis:\n" + analysis_json(category="Street") + "\nHope this helps!"
    res = normalize_analysis(raw)
    assert isinstance(res, Ok)
    assert res.value.category == "street"


def test_numeric_strings_and_floats_are_coerced():
    res = normalize_analysis(analysis_json(overallRating="7", styleScore=6.5, trendAlignment=" 9 "))
    assert isinstance(res, Ok)
    assert res.value.overall_rating == 7
    assert res.value.style_score == 7
    assert res.value.trend_alignment == 9


@pytest.mark.parametrize(
    "overrides",
    [
        {"overallRating": 11},
        {"overallRating": 0},
        {"styleScore": "great"},
        {"colorCoordination": None},
        {"trendAlignment": True},
        {"category": "evening"},
        {"category": ""},
        {"tags": "minimalist"},
        {"tags": ["ok", 3]},
        {"feedback": "   "},
        {"feedback": 42},
    ],
)
def test_invalid_fields_fail(overrides):
    res = normalize_analysis(analysis_json(**overrides))
    assert isinstance(res, Err)


def test_missing_required_field_fails():
    data = json.loads(analysis_json())
    del data["feedback"]
    res = normalize_analysis(json.dumps(data))
    assert isinstance(res, Err)
    assert "feedback" in res.reason


def test_tags_truncated_to_five_and_blank_dropped():
    res = normalize_analysis(analysis_json(tags=["a", " ", "b", "c", "d", "e", "f", "g"]))
    assert isinstance(res, Ok)
    assert res.value.tags == ["a", "b", "c", "d", "e"]


def test_empty_tags_allowed():
    res = normalize_analysis(analysis_json(tags=[]))
    assert isinstance(res, Ok)
    assert res.value.tags == []


@pytest.mark.parametrize("raw", [None, "", "   ", "not json at all", "[1, 2, 3]", "```json\n{broken\n```"])
def test_unparseable_output_fails(raw):
    assert isinstance(normalize_analysis(raw), Err)


def test_style_analysis_shape():
    res = normalize_analysis(analysis_json())
    assert isinstance(res, Ok)
    assert res.value.style_analysis() == {
        "style_score": 7,
        "color_coordination": 9,
        "trend_alignment": 6,
        "tags": ["minimalist", "clean", "denim"],
        "feedback": "Well balanced palette. The jacket fits nicely.",
    }
