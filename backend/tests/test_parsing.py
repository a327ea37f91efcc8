import json

import pytest

from exceptions import MalformedJudgeOutput
from models import JudgeOpinion, SourceCandidate
from utils.parsing import (
    REPAIR_PIPELINE,
    extract_structured,
    parse_judge_list,
    parse_judge_payload,
    repair_characters,
    strip_code_fences,
)


class TestExtractStructured:
    """Tests for the repair pipeline."""

    def test_plain_object(self):
        assert extract_structured('{"verdict": "mixed", "confidence": 0.4}') == {
            "verdict": "mixed", "confidence": 0.4
        }

    def test_markdown_fenced_object(self):
        text = 'Here is my answer:\n```json\n{"verdict": "likely_true"}\n```\nHope that helps.'
        assert extract_structured(text) == {"verdict": "likely_true"}

    def test_object_embedded_in_prose(self):
        text = 'After reviewing the sources {"bias": 0.2, "sensationalism": 0.1} is my reading.'
        assert extract_structured(text) == {"bias": 0.2, "sensationalism": 0.1}

    def test_array_embedded_in_prose(self):
        text = 'Claims found: ["The Eiffel Tower is in Paris.", "Water boils at 100C."] done'
        assert extract_structured(text, "array") == ["The Eiffel Tower is in Paris.", "Water boils at 100C."]

    def test_trailing_commas(self):
        assert extract_structured('{"a": [1, 2,], "b": 3,}') == {"a": [1, 2], "b": 3}

    def test_escaped_quotes(self):
        text = '"{\\"verdict\\": \\"mixed\\", \\"reasoning\\": \\"thin evidence\\"}"'
        assert extract_structured(text) == {"verdict": "mixed", "reasoning": "thin evidence"}

    def test_single_quoted_keys(self):
        assert extract_structured("{'verdict': 'likely_true'}") == {"verdict": "likely_true"}

    def test_literal_newline_escapes(self):
        text = '{\\n  "verdict": "mixed"\\n}'
        assert extract_structured(text) == {"verdict": "mixed"}

    @pytest.mark.parametrize("text,expected", [
        (r"""{"reasoning": "it\'s thin", "verdict": "mixed"}""",
         {"reasoning": "it's thin", "verdict": "mixed"}),
        (r"""'{"reasoning": "it\'s thin", "verdict": "mixed"}'""",
         {"reasoning": "it's thin", "verdict": "mixed"}),
        (r"""'{\'verdict\': \'likely_true\', \'confidence\': 0.7}'""",
         {"verdict": "likely_true", "confidence": 0.7}),
    ])
    def test_python_repr_quote_escapes(self, text, expected):
        assert extract_structured(text) == expected

    def test_wrong_shape_is_failure(self):
        with pytest.raises(MalformedJudgeOutput) as exc_info:
            extract_structured("[1, 2, 3]", "object")
        assert "expected a JSON object" in exc_info.value.last_error

    @pytest.mark.parametrize("text", [
        "I cannot answer that.",
        "{verdict: likely_true",
        "```\nnot json\n```",
        '{"verdict": }',
        "]",
    ])
    def test_unrecoverable_inputs_raise(self, text):
        with pytest.raises(MalformedJudgeOutput):
            extract_structured(text)

    @pytest.mark.parametrize("text", ["", "   ", None])
    def test_empty_input(self, text):
        with pytest.raises(MalformedJudgeOutput) as exc_info:
            extract_structured(text)
        assert exc_info.value.last_error == "empty response"

    def test_diagnostic_text_is_truncated(self):
        text = "x" * 1200
        with pytest.raises(MalformedJudgeOutput) as exc_info:
            extract_structured(text)
        assert exc_info.value.raw_text == "x" * 500 + "..."
        assert exc_info.value.details["last_error"]

    def test_reserialised_output_parses_on_first_stage(self):
        messy = '```json\n{"verdict": "likely_true", "confidence": 0.8, "reasoning": "ok",}\n```'
        value = extract_structured(messy)
        clean = json.dumps(value)
        first_stage = REPAIR_PIPELINE[0](clean, "object")
        assert json.loads(first_stage) == value
        assert extract_structured(clean) == value


class TestTransforms:
    def test_code_fences_absent(self):
        assert strip_code_fences('{"a": 1}', "object") is None

    def test_unterminated_fence_markers_removed(self):
        assert strip_code_fences('```json\n{"a": 1}', "object") == '{"a": 1}'

    def test_repair_strips_wrapping_quotes(self):
        assert repair_characters("'[\"a\"]'", "array") == '["a"]'


class TestPayloadParsing:
    def test_parse_judge_payload(self):
        opinion = parse_judge_payload(
            'Sure! {"verdict": "Supported", "confidence": 85, "reasoning": "Reuters confirms."}',
            JudgeOpinion,
        )
        assert opinion.verdict == "likely_true"
        assert opinion.confidence == pytest.approx(0.85)
        assert opinion.reasoning == "Reuters confirms."

    def test_unrecognised_verdict_is_malformed(self):
        with pytest.raises(MalformedJudgeOutput) as exc_info:
            parse_judge_payload('{"verdict": "banana"}', JudgeOpinion)
        assert "verdict" in exc_info.value.last_error

    def test_parse_judge_list_drops_invalid_items(self):
        text = json.dumps([
            {"title": "Rates rise", "url": "https://www.reuters.com/rates", "date": "2025-03-01"},
            {"title": "", "url": "https://example.com/empty-title"},
            {"title": "Not a link", "url": "ftp://example.com/file"},
            "just a string",
        ])
        sources = parse_judge_list(text, SourceCandidate)
        assert [s.url for s in sources] == ["https://www.reuters.com/rates"]

    def test_fenced_bias_reply(self):
        assert extract_structured('```json\n{"bias": 0.2}\n```') == {"bias": 0.2}
