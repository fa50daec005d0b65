"""Tests for the composed pipeline and its host-facing wrappers."""

import random

import pytest

import dicemode.pipeline as pipeline_module
from dicemode.config import settings
from dicemode.errors import MalformedLine, MalformedToken, UnknownProcessor
from dicemode.pipeline import Pipeline, build_pipeline

EXAMPLE_REPORT = (
    "Rolls:\n"
    "- 2d6  :: [ 5, 3 ]\n"
    "- 1d4+ :: [ 2 ]\n"
    "  Σ    :: 2\n"
)


class TestParseAndFormat:
    def test_example(self, pipeline, rolls) -> None:
        rolls.extend([5, 3, 2])
        assert pipeline.parse_and_format("2d6, 1d4+") == EXAMPLE_REPORT
        assert rolls.calls == [(1, 6), (1, 6), (1, 4)]

    def test_implicit_count_named_explicitly(self, pipeline, rolls) -> None:
        rolls.extend([11])
        assert pipeline.parse_and_format("d20") == "Roll:\n- 1d20 :: [ 11 ]\n"

    def test_sorting_processors(self, pipeline, rolls) -> None:
        rolls.extend([3, 1, 2, 3, 1, 2])
        report = pipeline.parse_and_format("3d6< 3d6>")
        assert report == "Rolls:\n- 3d6< :: [ 1, 2, 3 ]\n- 3d6> :: [ 3, 2, 1 ]\n"

    def test_order_preserved(self, pipeline, rolls) -> None:
        rolls.extend([1, 2, 3])
        names = [line.split()[1] for line in pipeline.parse_and_format("d4 d6 d8").splitlines()[1:]]
        assert names == ["1d4", "1d6", "1d8"]

    def test_unknown_processor_rolls_nothing(self, pipeline, rolls) -> None:
        with pytest.raises(UnknownProcessor):
            pipeline.parse_and_format("2d6, 1d4!")
        assert rolls.calls == []

    def test_malformed_token_rolls_nothing(self, pipeline, rolls) -> None:
        with pytest.raises(MalformedToken):
            pipeline.parse_and_format("2d6 1d0")
        assert rolls.calls == []

    def test_oversized_tokens_rejected_before_rolling(self, pipeline, rolls) -> None:
        with pytest.raises(MalformedToken):
            pipeline.parse_and_format("d6 d" + "9" * 5000)
        with pytest.raises(MalformedToken):
            pipeline.parse_and_format("100000000d6")
        assert rolls.calls == []

    def test_no_tokens(self, pipeline) -> None:
        with pytest.raises(MalformedLine):
            pipeline.parse_and_format("  ,  ")

    def test_custom_processor(self, registry, rolls) -> None:
        registry.register("^", lambda r: (r, max(r)))
        rolls.extend([2, 6])
        report = Pipeline(registry, rolls).parse_and_format("2d6^")
        assert report == "Rolls:\n- 2d6^ :: [ 2, 6 ]\n  Σ    :: 6\n"

    def test_name_width_floor(self, rolls) -> None:
        rolls.extend([4])
        report = Pipeline(rng=rolls, name_width_floor=6).parse_and_format("d6")
        assert report == "Roll:\n- 1d6    :: [ 4 ]\n"

    def test_real_random_source(self) -> None:
        pipe = Pipeline(rng=random.Random(99))
        for count, faces in [(1, 1), (3, 6), (7, 20), (2, 100)]:
            line = pipe.parse_and_format(f"{count}d{faces}").splitlines()[1]
            values = [int(v) for v in line.split("[ ")[1].rstrip(" ]").split(", ")]
            assert len(values) == count
            assert all(1 <= v <= faces for v in values)


class TestRecognizeAndTransform:
    def test_match(self, pipeline, rolls) -> None:
        rolls.extend([5, 3, 2])
        assert pipeline.recognize_and_transform("  2d6, 1d4+ ") == EXAMPLE_REPORT

    def test_no_match(self, pipeline, rolls) -> None:
        assert pipeline.recognize_and_transform("roll 2d6 please") is None
        assert rolls.calls == []

    def test_report_not_reprocessed(self, pipeline, rolls) -> None:
        rolls.extend([5, 3, 2])
        report = pipeline.recognize_and_transform("2d6, 1d4+")
        for line in report.splitlines():
            assert pipeline.recognize_and_transform(line) is None


class TestReplaceLine:
    def test_replaces_dice_line(self, pipeline, rolls) -> None:
        rolls.extend([5, 3, 2])
        replaced = []
        assert pipeline.replace_line_if_recognized("2d6, 1d4+", replaced.append) is True
        assert replaced == [EXAMPLE_REPORT]

    def test_skips_prose(self, pipeline) -> None:
        replaced = []
        assert pipeline.replace_line_if_recognized("just talking", replaced.append) is False
        assert replaced == []

    def test_strict_miss(self, pipeline) -> None:
        replaced = []
        with pytest.raises(MalformedLine) as excinfo:
            pipeline.replace_line_if_recognized("just talking", replaced.append, strict=True)
        assert excinfo.value.line == "just talking"
        assert replaced == []

    def test_parse_error_leaves_line(self, pipeline) -> None:
        replaced = []
        with pytest.raises(UnknownProcessor):
            pipeline.replace_line_if_recognized("2d6!", replaced.append)
        assert replaced == []


class TestExpandText:
    def test_mixed_document(self, pipeline, rolls) -> None:
        rolls.extend([5, 3, 2, 4])
        text = "Attack!\n2d6, 1d4+\nthen\nd8\n"
        expanded, replaced = pipeline.expand_text(text)
        assert replaced == 2
        assert expanded == "Attack!\n" + EXAMPLE_REPORT + "then\nRoll:\n- 1d8 :: [ 4 ]\n"

    def test_unterminated_last_line(self, pipeline, rolls) -> None:
        rolls.extend([6])
        assert pipeline.expand_text("x\nd6") == ("x\nRoll:\n- 1d6 :: [ 6 ]", 1)

    def test_crlf_kept(self, pipeline, rolls) -> None:
        rolls.extend([6])
        expanded, _ = pipeline.expand_text("d6\r\nok\r\n")
        assert expanded == "Roll:\n- 1d6 :: [ 6 ]\r\nok\r\n"

    def test_vertical_tab_does_not_end_a_line(self, pipeline, rolls) -> None:
        assert pipeline.expand_text("d6\x0bafter") == ("d6\x0bafter", 0)
        assert rolls.calls == []

    def test_form_feed_separates_tokens(self, pipeline, rolls) -> None:
        rolls.extend([3, 1, 4])
        expanded, replaced = pipeline.expand_text("d6\x0c2d4\nnext\n")
        assert replaced == 1
        assert expanded == "Rolls:\n- 1d6 :: [ 3 ]\n- 2d4 :: [ 1, 4 ]\nnext\n"

    def test_unicode_line_separator_kept(self, pipeline, rolls) -> None:
        text = "d6\u2028end"
        assert pipeline.expand_text(text) == (text, 0)

    def test_second_pass_is_a_no_op(self, pipeline, rolls) -> None:
        rolls.extend([5, 3, 2])
        once, _ = pipeline.expand_text("2d6, 1d4+\n")
        twice, replaced = pipeline.expand_text(once)
        assert replaced == 0
        assert twice == once

    def test_all_or_nothing(self, pipeline, rolls) -> None:
        rolls.extend([1, 1, 1])
        with pytest.raises(MalformedToken):
            pipeline.expand_text("2d6\n3d0\n")

    def test_strict_allows_blank_lines(self, pipeline, rolls) -> None:
        rolls.extend([2])
        assert pipeline.expand_text("\nd4\n\n", strict=True) == ("\nRoll:\n- 1d4 :: [ 2 ]\n\n", 1)

    def test_strict_rejects_prose(self, pipeline, rolls) -> None:
        rolls.extend([2])
        with pytest.raises(MalformedLine):
            pipeline.expand_text("d4\nhello\n", strict=True)

    def test_empty(self, pipeline) -> None:
        assert pipeline.expand_text("") == ("", 0)


class TestDefaultPipeline:
    def test_build_from_settings(self, monkeypatch) -> None:
        monkeypatch.setattr(settings, "name_width_floor", 5)
        monkeypatch.setattr(settings, "aggregate_label", "sum")
        pipe = build_pipeline(seed=1)
        assert pipe.name_width_floor == 5
        assert pipe.aggregate_label == "sum"

    def test_seeded_builds_repeat(self) -> None:
        a = build_pipeline(seed=8).parse_and_format("10d20")
        b = build_pipeline(seed=8).parse_and_format("10d20")
        assert a == b

    def test_module_functions_use_default(self, monkeypatch, pipeline, rolls) -> None:
        monkeypatch.setattr(pipeline_module, "_default", pipeline)
        rolls.extend([5, 3, 2, 5, 3, 2, 1])
        assert pipeline_module.recognize("2d6, 1d4+") == "2d6, 1d4+"
        assert pipeline_module.parse_and_format("2d6, 1d4+") == EXAMPLE_REPORT
        assert pipeline_module.recognize_and_transform("2d6, 1d4+") == EXAMPLE_REPORT
        seen = []
        assert pipeline_module.replace_line_if_recognized("d2", seen.append) is True
        assert seen == ["Roll:\n- 1d2 :: [ 1 ]\n"]
        assert pipeline_module.expand_text("nothing here") == ("nothing here", 0)

    def test_default_is_shared(self, monkeypatch) -> None:
        monkeypatch.setattr(pipeline_module, "_default", None)
        assert pipeline_module.default_pipeline() is pipeline_module.default_pipeline()
