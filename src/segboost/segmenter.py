"""Greedy left-to-right word segmentation driven by a boundary model."""

from __future__ import annotations

import logging
from typing import FrozenSet, Iterable, Iterator, List, Optional, Tuple

from .boosting import AdaBoostTrainer
from .chartypes import CharClassifier
from .features import (
    FIRST_POSITION,
    TAG_BEGIN,
    TAG_INSIDE,
    TAG_UNKNOWN,
    extract_features,
    pad_characters,
)
from .instances import InstanceStore
from .model import NEGATIVE_LABEL, POSITIVE_LABEL, Model

logger = logging.getLogger(__name__)

Instance = Tuple[FrozenSet[str], int]


class Segmenter:
    """Splits unspaced text into words, and turns gold corpora into training instances.

    Training and inference build features the same way except for the tag
    history: ingestion uses the gold tags of the corpus, while ``segment``
    feeds its own earlier decisions forward.

    Example:
        >>> segmenter = Segmenter(Model.load(open('model.txt', encoding='utf-8')))
        >>> segmenter.segment('これはテストです。')
        ['これ', 'は', 'テスト', 'です', '。']
    """

    def __init__(self, model: Optional[Model] = None, classifier: Optional[CharClassifier] = None) -> None:
        self.model = model if model is not None else Model()
        self.classifier = classifier if classifier is not None else CharClassifier()
        self.store = InstanceStore(self.model)

    def instances(self, sentence: str) -> Iterator[Instance]:
        """Yield ``(features, label)`` for each classified position of a gold sentence.

        ``sentence`` holds words separated by single spaces. The first
        character always starts a word and yields no instance. Empty or
        blank sentences yield nothing.
        """
        tags = [TAG_UNKNOWN] * FIRST_POSITION
        chars: List[str] = []
        for word in sentence.split(" "):
            if not word:
                continue
            tags.append(TAG_BEGIN)
            tags.extend([TAG_INSIDE] * (len(word) - 1))
            chars.extend(word)
        if len(tags) <= FIRST_POSITION:
            return
        # The first character is a boundary by construction, not by decision.
        tags[FIRST_POSITION] = TAG_UNKNOWN

        padded_chars, types = pad_characters(chars, self.classifier)
        for i in range(FIRST_POSITION + 1, len(padded_chars) - 3):
            label = POSITIVE_LABEL if tags[i] == TAG_BEGIN else NEGATIVE_LABEL
            yield extract_features(i, tags, padded_chars, types), label

    def add_sentence(self, sentence: str) -> int:
        """Add the instances of a gold sentence to ``self.store``; returns how many."""
        count = 0
        for features, label in self.instances(sentence):
            self.store.add(features, label)
            count += 1
        return count

    def add_corpus(self, lines: Iterable[str]) -> int:
        total = 0
        for line in lines:
            total += self.add_sentence(line.strip())
        logger.info("Added %d instances from corpus", total)
        return total

    def trainer(self, threshold: float = 0.01, num_iterations: int = 100, num_workers: int = 1) -> AdaBoostTrainer:
        """Trainer over the instances collected by ``add_sentence``."""
        return AdaBoostTrainer(
            threshold=threshold,
            num_iterations=num_iterations,
            num_workers=num_workers,
            store=self.store,
        )

    def segment(self, sentence: str) -> List[str]:
        """Split ``sentence`` into words."""
        if not sentence:
            return []

        chars, types = pad_characters(list(sentence), self.classifier)
        tags = [TAG_UNKNOWN] * (FIRST_POSITION + 1)
        model = self.model

        words: List[str] = []
        word = chars[FIRST_POSITION]
        for i in range(FIRST_POSITION + 1, len(chars) - 3):
            if model.predict(extract_features(i, tags, chars, types)) >= 0:
                words.append(word)
                word = ""
                tags.append(TAG_BEGIN)
            else:
                tags.append(TAG_INSIDE)
            word += chars[i]
        words.append(word)
        return words

    def segment_lines(self, lines: Iterable[str]) -> Iterator[List[str]]:
        for line in lines:
            yield self.segment(line.strip())
