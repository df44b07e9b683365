import re
from datetime import datetime, timezone

from pagescript.models import DiffResult, EvaluationResult, RunConfiguration, RunOutcome, join_results


def test_rendering():
    assert EvaluationResult(source="a").render() == ""
    assert EvaluationResult(source="a", value="text").render() == "text"
    assert EvaluationResult(source="a", value=[1, {"k": "é"}]).render() == '[1, {"k": "é"}]'
    assert EvaluationResult(source="a", value=3).render() == "3"
    assert EvaluationResult(source="a", error="boom").render() == "Error: boom"


def test_join_results_is_newline_separated():
    results = [EvaluationResult(source="a", value="1"), EvaluationResult(source="b", value="2")]

    assert join_results(results) == "1\n2"


def test_run_configuration_requires_work():
    assert not RunConfiguration(url="https://example.com", cleanup=True).has_work
    assert RunConfiguration(url="https://example.com", internal_script="host.py").has_work


def test_diff_ratio_on_empty_image():
    assert DiffResult(width=0, height=0, mismatched_pixels=0).mismatch_ratio == 0.0


def test_rendering_values_json_cannot_encode():
    stamp = datetime(2024, 1, 1, tzinfo=timezone.utc)

    assert EvaluationResult(source="a", value=stamp).render() == '"2024-01-01T00:00:00+00:00"'
    assert EvaluationResult(source="a", value=re.compile("ab+c")).render() == '"ab+c"'
    assert EvaluationResult(source="a", value={"d": stamp}).render() == '{"d": "2024-01-01T00:00:00+00:00"}'


def test_run_outcome_output():
    outcome = RunOutcome(results=[EvaluationResult(source="a", value="1"), EvaluationResult(source="b")])

    assert outcome.has_output
    assert outcome.output == "1\n"
    assert not RunOutcome().has_output
