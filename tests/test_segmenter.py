import pytest

from segboost.boosting import StopReason
from segboost.model import Model
from segboost.segmenter import Segmenter


def test_segment_with_fixture_model(toy_model):
    segmenter = Segmenter(toy_model)
    assert segmenter.segment("これはテストです。") == ["これ", "は", "テスト", "です", "。"]


def test_segment_empty_sentence():
    assert Segmenter().segment("") == []


def test_segment_single_character(toy_model):
    assert Segmenter(toy_model).segment("は") == ["は"]


def test_segment_feeds_predicted_tags_forward(alternating_model):
    # A boundary is predicted only when the previous position was not one.
    assert Segmenter(alternating_model).segment("abcde") == ["a", "bc", "de"]


def test_segment_is_deterministic(toy_model):
    segmenter = Segmenter(toy_model)
    text = "テストはこれです。テスト"
    assert segmenter.segment(text) == segmenter.segment(text)
    assert "".join(segmenter.segment(text)) == text


def test_fresh_model_splits_every_character():
    # Score 0 on an all-zero model counts as a boundary.
    assert Segmenter().segment("あいう") == ["あ", "い", "う"]


def test_segment_lines(toy_model):
    segmenter = Segmenter(toy_model)
    assert list(segmenter.segment_lines(["これはテストです。\n", "", "  "])) == [
        ["これ", "は", "テスト", "です", "。"],
        [],
        [],
    ]


def test_instances_one_per_classified_character():
    segmenter = Segmenter()
    sentence = "テスト です"

    collected = list(segmenter.instances(sentence))

    # Every character except the first, which always starts a word.
    assert len(collected) == len(sentence.replace(" ", "")) - 1
    assert [label for _, label in collected] == [-1, -1, 1, -1]
    for attrs, label in collected:
        assert label in (1, -1)
        assert any(a.startswith("UW") for a in attrs)
        assert any(a.startswith("UC") for a in attrs)


def test_instances_use_gold_tags():
    collected = list(Segmenter().instances("テスト です"))

    first_attrs, _ = collected[0]
    assert "UW4:ス" in first_attrs
    assert "UP3:U" in first_attrs

    last_attrs, _ = collected[-1]
    assert "UW4:す" in last_attrs
    assert "UP3:B" in last_attrs
    assert "BP2:OB" in last_attrs


def test_instances_are_restartable():
    segmenter = Segmenter()
    assert list(segmenter.instances("これ は テスト")) == list(segmenter.instances("これ は テスト"))


@pytest.mark.parametrize("sentence", ["", " ", "   ", "a"])
def test_degenerate_sentences_emit_nothing(sentence):
    segmenter = Segmenter()
    assert list(segmenter.instances(sentence)) == []
    assert segmenter.add_sentence(sentence) == 0
    assert len(segmenter.store) == 0


def test_repeated_spaces_are_ignored():
    segmenter = Segmenter()
    assert list(segmenter.instances("これ  は")) == list(segmenter.instances("これ は"))


def test_add_sentence_populates_store():
    segmenter = Segmenter()
    added = segmenter.add_sentence("これ は テスト です 。")

    assert added == 8
    assert len(segmenter.store) == 8
    assert segmenter.store.labels == [-1, 1, 1, -1, -1, 1, -1, 1]
    assert len(segmenter.model) == len(segmenter.model.vocabulary) > 1


def test_train_then_segment_round_trip(corpus_lines):
    segmenter = Segmenter()
    assert segmenter.add_corpus(corpus_lines) > 0

    result = segmenter.trainer(threshold=0.01, num_iterations=50).train()

    assert result.stop_reason in (StopReason.CONVERGED, StopReason.EXHAUSTED)
    text = "これはテストです。"
    words = segmenter.segment(text)
    assert words
    assert "".join(words) == text


def test_segmenter_shares_model_with_store():
    model = Model()
    segmenter = Segmenter(model)
    segmenter.add_sentence("これ は")
    assert segmenter.store.model is model
    assert segmenter.trainer().model is model
