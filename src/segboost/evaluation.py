"""Evaluation metrics for boundary classification and segmentation."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Sequence, Set, Tuple

import numpy as np
from sklearn.metrics import confusion_matrix

if TYPE_CHECKING:  # pragma: no cover
    from .segmenter import Segmenter

logger = logging.getLogger(__name__)


@dataclass
class Metrics:
    """Binary boundary classification metrics.

    Attributes:
        accuracy: Percentage of correctly classified instances
        precision: Percentage of predicted boundaries that are true boundaries
        recall: Percentage of true boundaries that were predicted
        true_positives: Boundaries predicted as boundaries
        false_positives: Non-boundaries predicted as boundaries
        false_negatives: Boundaries predicted as non-boundaries
        true_negatives: Non-boundaries predicted as non-boundaries
        num_instances: Total number of instances evaluated
    """
    accuracy: float
    precision: float
    recall: float
    true_positives: int = 0
    false_positives: int = 0
    false_negatives: int = 0
    true_negatives: int = 0
    num_instances: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class SegmentationMetrics:
    """Word-level and boundary-level quality of a segmenter against a gold corpus."""
    boundary: Metrics
    word_precision: float
    word_recall: float
    word_f1: float
    num_sentences: int = 0
    num_gold_words: int = 0
    num_predicted_words: int = 0
    num_correct_words: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'boundary': self.boundary.to_dict(),
            'word_precision': self.word_precision,
            'word_recall': self.word_recall,
            'word_f1': self.word_f1,
            'num_sentences': self.num_sentences,
            'num_gold_words': self.num_gold_words,
            'num_predicted_words': self.num_predicted_words,
            'num_correct_words': self.num_correct_words,
        }


def _percent(numerator: int, denominator: int) -> float:
    return numerator / max(denominator, 1) * 100.0


def compute_metrics(labels: Sequence[int], predictions: Sequence[int]) -> Metrics:
    """Compare +1/-1 labels with +1/-1 predictions."""
    y_true = np.asarray(labels)
    y_pred = np.asarray(predictions)
    if y_true.size == 0:
        return Metrics(accuracy=0.0, precision=0.0, recall=0.0)

    # Rows are true labels, columns predictions, ordered (-1, +1).
    (tn, fp), (fn, tp) = confusion_matrix(y_true, y_pred, labels=[-1, 1]).tolist()
    total = tp + fp + fn + tn

    return Metrics(
        accuracy=_percent(tp + tn, total),
        precision=_percent(tp, tp + fp),
        recall=_percent(tp, tp + fn),
        true_positives=tp,
        false_positives=fp,
        false_negatives=fn,
        true_negatives=tn,
        num_instances=total,
    )


def word_spans(words: Iterable[str]) -> Set[Tuple[int, int]]:
    """Character ``(start, end)`` spans of consecutive words."""
    spans = set()
    start = 0
    for word in words:
        end = start + len(word)
        spans.add((start, end))
        start = end
    return spans


def _boundary_labels(words: Sequence[str], length: int) -> List[int]:
    """+1/-1 per character after the first: does a word start there?"""
    starts = {start for start, _ in word_spans(words)}
    return [1 if i in starts else -1 for i in range(1, length)]


def evaluate_segmentation(segmenter: "Segmenter", gold_lines: Iterable[str]) -> SegmentationMetrics:
    """Segment the unspaced form of each gold sentence and score the result."""
    labels: List[int] = []
    predictions: List[int] = []
    num_sentences = 0
    num_gold = 0
    num_predicted = 0
    num_correct = 0

    for line in gold_lines:
        gold = [w for w in line.strip().split(" ") if w]
        if not gold:
            continue
        text = "".join(gold)
        predicted = segmenter.segment(text)

        gold_spans = word_spans(gold)
        predicted_spans = word_spans(predicted)
        num_sentences += 1
        num_gold += len(gold_spans)
        num_predicted += len(predicted_spans)
        num_correct += len(gold_spans & predicted_spans)

        labels.extend(_boundary_labels(gold, len(text)))
        predictions.extend(_boundary_labels(predicted, len(text)))

    precision = num_correct / max(num_predicted, 1)
    recall = num_correct / max(num_gold, 1)
    f1 = 2 * precision * recall / (precision + recall) if precision + recall > 0 else 0.0

    logger.info("Evaluated %d sentences: word F1=%.4f", num_sentences, f1)

    return SegmentationMetrics(
        boundary=compute_metrics(labels, predictions),
        word_precision=precision,
        word_recall=recall,
        word_f1=f1,
        num_sentences=num_sentences,
        num_gold_words=num_gold,
        num_predicted_words=num_predicted,
        num_correct_words=num_correct,
    )


def format_metrics_text(metrics: Metrics) -> str:
    lines = [
        "Result:",
        f"Accuracy: {metrics.accuracy:.2f}% ({metrics.true_positives + metrics.true_negatives} / {metrics.num_instances})",
        f"Precision: {metrics.precision:.2f}% ({metrics.true_positives} / {metrics.true_positives + metrics.false_positives})",
        f"Recall: {metrics.recall:.2f}% ({metrics.true_positives} / {metrics.true_positives + metrics.false_negatives})",
        (
            f"Confusion Matrix: TP: {metrics.true_positives}, FP: {metrics.false_positives}, "
            f"FN: {metrics.false_negatives}, TN: {metrics.true_negatives}"
        ),
    ]
    return "\n".join(lines)


def format_segmentation_text(metrics: SegmentationMetrics) -> str:
    """Format segmentation metrics as human-readable text."""
    lines = []
    lines.append("=" * 50)
    lines.append("Segmentation Results")
    lines.append("=" * 50)
    lines.append(f"  Sentences evaluated: {metrics.num_sentences:,}")
    lines.append(f"  Gold words: {metrics.num_gold_words:,}")
    lines.append(f"  Predicted words: {metrics.num_predicted_words:,}")
    lines.append(f"  Correct words: {metrics.num_correct_words:,}")
    lines.append("")
    lines.append("Word Metrics:")
    lines.append(f"  Precision: {metrics.word_precision:.4f}")
    lines.append(f"  Recall: {metrics.word_recall:.4f}")
    lines.append(f"  F1-Score: {metrics.word_f1:.4f}")
    lines.append("")
    lines.append("Boundary Metrics:")
    lines.append(format_metrics_text(metrics.boundary))
    return "\n".join(lines)


def format_results_json(metrics: Metrics | SegmentationMetrics) -> str:
    return json.dumps(metrics.to_dict(), indent=2)
