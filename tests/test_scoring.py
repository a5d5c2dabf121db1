"""
简历匹配：本地回退、外部结果解析、后端失败回退、备选职位排序。

外部打分服务全部用假后端或 patch 替代，无需 API key 即可运行。
"""
from unittest.mock import MagicMock, patch

import pytest

from jobhub.core.errors import ExternalServiceFailure
from jobhub.core.llm import ask_ai
from jobhub.core.tokens import count_tokens
from jobhub.matching.backends import ScoringBackend, get_scoring_backend
from jobhub.matching.backends.litellm_backend import LiteLLMScoringBackend
from jobhub.matching.parsing import parse_analysis
from jobhub.matching.prompt import build_prompt
from jobhub.matching.ranking import rank_alternatives
from jobhub.matching.schemas import CompatibilityAnalysis, ImprovementPair
from jobhub.matching.scoring import analyze, fallback_analysis

JOB = {
    "jobId": "j1",
    "role": "Full Stack Developer",
    "companyName": "Acme",
    "location": "Remote",
    "jobDescription": "Build web apps",
    "tags": ["Python", "React", "AWS"],
}
CV = "Experienced developer. Skills: python, react, docker."

GOOD_JSON = (
    '{"compatibilityScore": 82, "strengths": ["a", "b", "c"], "weaknesses": ["d", "e"], '
    '"improvements": ["f", {"before": "g", "after": "h"}], '
    '"matchingSkills": ["Python"], "missingSkills": ["AWS"]}'
)


class FixedBackend(ScoringBackend):
    name = "fixed"

    def __init__(self, result):
        self.result = result
        self.prompts = []

    def score(self, prompt):
        self.prompts.append(prompt)
        return self.result


class RaisingBackend(ScoringBackend):
    name = "raising"

    def __init__(self, exc):
        self.exc = exc

    def score(self, prompt):
        raise self.exc


class TestFallback:
    def test_partial_match(self):
        analysis = fallback_analysis(JOB, CV)
        assert analysis.matching_skills == ["Python", "React"]
        assert analysis.missing_skills == ["AWS"]
        # 40 + round(55 * 2 / 3)
        assert analysis.compatibility_score == 77
        assert len(analysis.strengths) >= 3
        assert len(analysis.weaknesses) >= 2
        pair = analysis.improvements[-1]
        assert isinstance(pair, ImprovementPair)
        assert pair.before == "Skills: Python, React"
        assert pair.after.startswith("Skills: Python, React, AWS")

    def test_full_match(self):
        analysis = fallback_analysis(JOB, "python react aws")
        assert analysis.compatibility_score == 95
        assert analysis.missing_skills == []
        assert not any(isinstance(i, ImprovementPair) for i in analysis.improvements)

    def test_no_tags(self):
        analysis = fallback_analysis({**JOB, "tags": []}, CV)
        assert analysis.compatibility_score == 50
        assert analysis.matching_skills == []

    def test_no_match(self):
        analysis = fallback_analysis(JOB, "")
        assert analysis.compatibility_score == 40
        assert analysis.improvements[-1].before == "Skills: (none listed)"


class TestAnalyze:
    def test_no_backend_uses_fallback_without_error(self):
        outcome = analyze(JOB, CV, None)
        assert outcome.source == "fallback"
        assert outcome.error is None
        assert outcome.analysis == fallback_analysis(JOB, CV)

    def test_backend_result_is_used(self):
        backend = FixedBackend(parse_analysis(GOOD_JSON))
        outcome = analyze(JOB, CV, backend)
        assert outcome.source == "llm"
        assert outcome.analysis.compatibility_score == 82
        assert "Full Stack Developer" in backend.prompts[0]

    def test_backend_dict_result_is_validated(self):
        outcome = analyze(JOB, CV, FixedBackend({"compatibilityScore": 120}))
        assert outcome.source == "llm"
        assert outcome.analysis.compatibility_score == 100

    def test_unavailable_service_falls_back(self):
        """外部服务不可用：返回完整的回退结构，不抛出。"""
        outcome = analyze(JOB, CV, RaisingBackend(ConnectionError("connection refused")))
        assert outcome.source == "fallback"
        assert outcome.error == "connection refused"
        payload = outcome.analysis.to_payload()
        for key in ("compatibilityScore", "strengths", "weaknesses", "improvements", "matchingSkills", "missingSkills"):
            assert key in payload

    def test_invalid_structure_falls_back(self):
        outcome = analyze(JOB, CV, FixedBackend(["not", "an", "object"]))
        assert outcome.source == "fallback"
        assert outcome.error

    def test_error_message_hides_credentials(self):
        outcome = analyze(JOB, CV, RaisingBackend(RuntimeError("Invalid API key sk-123")))
        assert "sk-123" not in outcome.error
        assert outcome.error.startswith("RuntimeError")


class TestParseAnalysis:
    def test_plain_json(self):
        assert parse_analysis(GOOD_JSON).missing_skills == ["AWS"]

    def test_fenced_json(self):
        analysis = parse_analysis(f"```json\n{GOOD_JSON}\n```")
        assert analysis.compatibility_score == 82
        assert analysis.improvements[1] == ImprovementPair(before="g", after="h")

    def test_json_with_surrounding_prose(self):
        assert parse_analysis(f"Here you go:\n{GOOD_JSON}\nThanks").compatibility_score == 82

    def test_score_coerced_and_clamped(self):
        assert parse_analysis('{"compatibilityScore": "85.4"}').compatibility_score == 85
        assert parse_analysis('{"compatibilityScore": -3}').compatibility_score == 0

    @pytest.mark.parametrize("raw", [
        "not json at all",
        "[1, 2]",
        '{"strengths": []}',
        '{"compatibilityScore": "high"}',
        '{"compatibilityScore": 1e999}',
        '{"compatibilityScore": NaN}',
    ])
    def test_bad_responses_raise(self, raw):
        with pytest.raises(ExternalServiceFailure):
            parse_analysis(raw)

    def test_model_passthrough(self):
        analysis = CompatibilityAnalysis(compatibility_score=10)
        assert parse_analysis(analysis) is analysis


class TestPrompt:
    def test_prompt_is_deterministic(self):
        assert build_prompt(JOB, CV) == build_prompt(dict(JOB), CV)

    def test_missing_tags(self):
        assert "Required Skills/Tags: Not specified" in build_prompt({**JOB, "tags": []}, CV)

    def test_long_cv_is_truncated(self, monkeypatch):
        monkeypatch.setenv("JOBHUB_PROMPT_CV_TOKENS", "10")
        prompt = build_prompt(JOB, "python " * 2000)
        assert "[...truncated]" in prompt
        assert prompt.count("python") < 100

    def test_count_tokens(self):
        assert count_tokens("") == 0
        assert count_tokens("python developer") > 0


class TestRanking:
    def test_overlap_count_orders_candidates(self):
        pool = [
            {"jobId": "a", "role": "A", "tags": ["React", "Python"]},
            {"jobId": "b", "role": "B", "tags": ["react", "nodejs", "aws"]},
        ]
        ranked = rank_alternatives(["react", "node"], None, pool)
        assert [s.job_id for s in ranked] == ["b", "a"]
        assert [s.match_score for s in ranked] == [2, 1]

    def test_excludes_current_and_limits(self):
        pool = [{"jobId": str(i), "tags": ["Go"]} for i in range(8)]
        ranked = rank_alternatives(["go"], "0", pool)
        assert len(ranked) == 5
        assert "0" not in [s.job_id for s in ranked]
        # 同分保持候选池顺序
        assert [s.job_id for s in ranked] == ["1", "2", "3", "4", "5"]

    def test_blank_tokens_ignored(self):
        ranked = rank_alternatives(["", "  "], None, [{"jobId": "a", "tags": ["x"]}])
        assert ranked[0].match_score == 0

    def test_each_tag_counts_once(self):
        ranked = rank_alternatives(["java", "javascript"], None, [{"jobId": "a", "tags": ["JavaScript"]}])
        assert ranked[0].match_score == 1

    def test_serialized_with_camel_case(self):
        ranked = rank_alternatives(["go"], None, [{"jobId": "a", "companyName": "Acme", "tags": ["Go"]}])
        assert ranked[0].model_dump(by_alias=True) == {
            "jobId": "a",
            "role": None,
            "companyName": "Acme",
            "location": None,
            "matchScore": 1,
        }


class TestBackendRegistry:
    @pytest.fixture(autouse=True)
    def _no_keys(self, monkeypatch):
        for name in ("GEMINI_API_KEY", "OPENAI_API_KEY", "ANTHROPIC_API_KEY", "DEEPSEEK_API_KEY"):
            monkeypatch.delenv(name, raising=False)

    def test_no_key_means_no_backend(self):
        assert get_scoring_backend() is None

    def test_heuristic_means_no_backend(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "test")
        assert get_scoring_backend("heuristic") is None

    def test_litellm_backend_selected(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "test")
        backend = get_scoring_backend("litellm")
        assert backend.name == "litellm"
        assert get_scoring_backend("litellm") is backend
        assert get_scoring_backend("unknown").name == "pydantic_ai"

    def test_litellm_backend_parses_reply(self):
        with patch("jobhub.matching.backends.litellm_backend.ask_ai", return_value=f"```json\n{GOOD_JSON}\n```") as ask:
            analysis = LiteLLMScoringBackend().score("prompt")
        assert analysis.compatibility_score == 82
        assert ask.call_args.kwargs["temperature"] == 0


def test_ask_ai_sends_system_then_user(monkeypatch):
    monkeypatch.setenv("JOBHUB_DEFAULT_MODEL", "deepseek/deepseek-chat")
    resp = MagicMock()
    resp.choices = [MagicMock()]
    resp.choices[0].message.content = "  {\"compatibilityScore\": 60}\n"
    with patch("litellm.completion", return_value=resp) as completion:
        text = ask_ai("score this", system="be strict", temperature=0)
    assert text == '{"compatibilityScore": 60}'
    kwargs = completion.call_args.kwargs
    assert kwargs["model"] == "deepseek/deepseek-chat"
    assert [m["role"] for m in kwargs["messages"]] == ["system", "user"]
    assert kwargs["temperature"] == 0
