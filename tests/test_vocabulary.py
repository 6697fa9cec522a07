from segboost.vocabulary import BIAS_FEATURE, FeatureVocabulary


def test_bias_feature_is_index_zero():
    vocab = FeatureVocabulary()
    assert len(vocab) == 1
    assert vocab.name(0) == BIAS_FEATURE == ""
    assert vocab.get("") == 0


def test_intern_is_stable_and_deduplicated():
    vocab = FeatureVocabulary()
    a = vocab.intern("UW4:あ")
    b = vocab.intern("UC4:I")
    assert (a, b) == (1, 2)
    assert vocab.intern("UW4:あ") == a
    assert len(vocab) == 3
    assert list(vocab) == ["", "UW4:あ", "UC4:I"]


def test_get_does_not_extend():
    vocab = FeatureVocabulary(["x"])
    assert vocab.get("y") is None
    assert "y" not in vocab
    assert "x" in vocab
    assert len(vocab) == 2


def test_sorted_names_keep_bias_first():
    vocab = FeatureVocabulary(sorted(["b", "", "a"]))
    assert vocab.names == ["", "a", "b"]
