from functools import partial

import pytest

from segboost.boosting import AdaBoostTrainer
from segboost.exceptions import ModelFormatError, SegBoostIOError
from segboost.io import (
    format_instance,
    iter_file_lines,
    load_model,
    read_lines,
    save_model,
    segment_file,
    split_lines,
    write_feature_file,
)
from segboost.model import Model
from segboost.segmenter import Segmenter


def test_format_instance_sorts_features():
    assert format_instance({"b", "a"}, -1) == "-1\ta\tb"
    assert format_instance({"x"}, 1) == "1\tx"


def test_write_feature_file(tmp_path, corpus_lines):
    features_path = tmp_path / "out" / "features.txt"

    count = write_feature_file(Segmenter(), corpus_lines, features_path)

    lines = read_lines(features_path)
    assert count == len(lines) > 0
    for line in lines:
        fields = line.split("\t")
        assert fields[0] in ("1", "-1")
        assert len(fields) == 43
        assert fields[1:] == sorted(fields[1:])


def test_feature_file_trains(tmp_path, corpus_lines):
    features_path = tmp_path / "features.txt"
    write_feature_file(Segmenter(), corpus_lines, features_path)

    trainer = AdaBoostTrainer(threshold=0.0, num_iterations=5)
    count = trainer.load_feature_lines(read_lines(features_path), source=str(features_path))
    result = trainer.train()

    assert count == len(read_lines(features_path))
    assert result.iterations == 5


def test_model_file_round_trip(tmp_path, toy_model):
    path = tmp_path / "model.txt"

    save_model(toy_model, path)
    loaded = load_model(path)

    assert loaded.vocabulary.names == toy_model.vocabulary.names
    assert loaded.bias == pytest.approx(toy_model.bias)
    assert Segmenter(loaded).segment("これはテストです。") == ["これ", "は", "テスト", "です", "。"]


def test_saved_model_format(tmp_path, toy_model):
    path = tmp_path / "model.txt"
    save_model(toy_model, path)

    lines = read_lines(path)
    assert all("\t" in line for line in lines[:-1])
    assert float(lines[-1]) == pytest.approx(-1.0)


def test_load_missing_model_names_path(tmp_path):
    missing = tmp_path / "missing.model"
    with pytest.raises(SegBoostIOError, match="missing.model"):
        load_model(missing)


def test_load_malformed_model(tmp_path):
    path = tmp_path / "bad.model"
    path.write_text("UW4:は\tabc\n0.0\n", encoding="utf-8")
    with pytest.raises(ModelFormatError, match="bad.model"):
        load_model(path)


def test_segment_file(tmp_path, toy_model):
    src = tmp_path / "input.txt"
    dst = tmp_path / "output.txt"
    src.write_text("これはテストです。\n\nテスト\n", encoding="utf-8")

    count = segment_file(Segmenter(toy_model), src, dst)

    assert count == 3
    assert read_lines(dst) == ["これ は テスト です 。", "", "テスト"]


def test_split_lines_only_breaks_on_newline():
    text = "a\u2028b\x0cc\r\nd\x85e\n\nf"
    assert split_lines(text) == ["a\u2028b\x0cc", "d\x85e", "", "f"]
    assert split_lines("") == []
    assert split_lines("x\n") == ["x"]


def test_model_round_trip_with_line_separator_characters(tmp_path):
    model = Model()
    model.set_weight(model.intern("UW4:a\u2028b"), 1.0)
    model.set_weight(model.intern("BW2:\x0cは"), -0.5)
    path = tmp_path / "m.model"

    save_model(model, path)
    loaded = load_model(path)

    assert loaded.weight("UW4:a\u2028b") == 1.0
    assert loaded.weight("BW2:\x0cは") == -0.5
    assert loaded.bias == pytest.approx(model.bias)


def test_feature_file_with_form_feed_trains(tmp_path):
    path = tmp_path / "features.txt"
    written = write_feature_file(Segmenter(), ["これ \x0cは"], path)

    trainer = AdaBoostTrainer(threshold=0.0, num_iterations=1)
    loaded = trainer.load_feature_lines(partial(iter_file_lines, path), source=str(path))

    assert loaded == written == len(read_lines(path))


def test_segment_file_keeps_one_line_per_line(tmp_path, toy_model):
    src = tmp_path / "input.txt"
    dst = tmp_path / "output.txt"
    src.write_text("これ\u2028は\nテスト\n", encoding="utf-8")

    count = segment_file(Segmenter(toy_model), src, dst)

    assert count == 2
    assert len(read_lines(dst)) == 2


def test_iter_file_lines_matches_read_lines(tmp_path):
    path = tmp_path / "lines.txt"
    path.write_bytes("one\r\ntwo three\n\nfour".encode("utf-8"))

    assert list(iter_file_lines(path)) == read_lines(path) == ["one", "two three", "", "four"]


def test_iter_file_lines_missing_file(tmp_path):
    with pytest.raises(SegBoostIOError, match="nope.txt"):
        list(iter_file_lines(tmp_path / "nope.txt"))
