"""AdaBoost over feature-indicator stumps.

Each round picks the single feature whose presence best separates the
weighted instances, adds its vote weight ``alpha`` to the model and
re-weights the instances it got wrong. Training stops when the best margin
``|0.5 - error|`` falls below ``threshold``, when ``num_iterations`` rounds
have run, or when the caller sets the cancellation event.
"""

from __future__ import annotations

import logging
import math
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from functools import partial
from typing import Callable, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

import numpy as np

from .config import get_settings
from .evaluation import Metrics, compute_metrics
from .exceptions import EmptyTrainingSetError, FeatureFileError
from .instances import InstanceArrays, InstanceStore
from .memory_utils import monitor_memory_usage
from .model import NEGATIVE_LABEL, POSITIVE_LABEL, Model

logger = logging.getLogger(__name__)

# Error rates are clamped away from 0 and 1 before taking the logarithm.
MIN_ERROR_RATE = 1e-10


class StopReason(str, Enum):
    """Why a training run ended."""
    CONVERGED = "converged"
    EXHAUSTED = "exhausted"
    CANCELLED = "cancelled"


@dataclass
class IterationStats:
    """Outcome of one completed boosting round."""
    iteration: int
    feature: int
    feature_name: str
    error_rate: float
    margin: float
    alpha: float
    weight_sum: float


@dataclass
class TrainingResult:
    stop_reason: StopReason
    iterations: int
    last_margin: Optional[float] = None
    history: List[IterationStats] = field(default_factory=list)


def parse_feature_line(line: str, line_num: int = 0, source: str = "<features>") -> Tuple[int, List[str]]:
    """Split a feature-file line into ``(label, feature names)``.

    Tab-separated lines are split on tabs only; other lines on any whitespace.
    """
    line = line.rstrip("\r\n")
    fields = line.split("\t") if "\t" in line else line.split()
    fields = [f for f in fields if f]
    if not fields:
        raise FeatureFileError(f"Missing label at line {line_num} in {source}")
    try:
        label = int(fields[0])
    except ValueError:
        raise FeatureFileError(
            f"Invalid label at line {line_num} in {source}: '{fields[0]}' is not an integer"
        ) from None
    if label not in (POSITIVE_LABEL, NEGATIVE_LABEL):
        raise FeatureFileError(f"Invalid label at line {line_num} in {source}: {label} (expected 1 or -1)")
    return label, fields[1:]


def _iter_instances(lines: Iterable[str], source: str) -> Iterator[Tuple[int, List[str]]]:
    for line_num, line in enumerate(lines, start=1):
        if line.strip():
            yield parse_feature_line(line, line_num, source)


class AdaBoostTrainer:
    """Trains a ``Model`` from the instances collected in an ``InstanceStore``.

    The per-instance accumulation pass may be split across ``num_workers``
    threads, each handling a disjoint range of instances; feature selection
    and re-weighting wait for all of them.
    """

    def __init__(
        self,
        threshold: float = 0.01,
        num_iterations: int = 100,
        num_workers: int = 1,
        model: Optional[Model] = None,
        store: Optional[InstanceStore] = None,
    ) -> None:
        if num_workers < 1:
            raise ValueError(f"num_workers must be at least 1, got {num_workers}")
        self.threshold = threshold
        self.num_iterations = num_iterations
        self.num_workers = num_workers
        if store is not None:
            if model is not None and model is not store.model:
                raise ValueError("model must be the model the instance store interns into")
            model = store.model
        self.model = model if model is not None else Model()
        self.store = store if store is not None else InstanceStore(self.model)
        self.running = False
        self.stop_reason: Optional[StopReason] = None

    # Instance collection

    def add_instance(self, names: Iterable[str], label: int) -> None:
        self.store.add(names, label)

    def predict(self, names: Iterable[str]) -> int:
        return self.model.predict(names)

    def load_feature_lines(
        self,
        lines: Union[Iterable[str], Callable[[], Iterable[str]]],
        source: str = "<features>",
    ) -> int:
        """Add every instance of a feature file to the store.

        The lines are read twice: once to collect the sorted set of feature
        names, which extends the vocabulary first, and once to add the
        instances. ``lines`` may be a zero-argument callable returning a fresh
        iterable (see ``io.iter_file_lines``) so large files are streamed
        rather than held in memory; a one-shot iterator is materialized.

        Instance weights start at ``exp(-2 * label * score)`` under the
        current model, which is 1.0 for a fresh model and a warm start for a
        loaded one. Returns the number of instances added.
        """
        if callable(lines):
            open_lines = lines
        else:
            if iter(lines) is lines:
                lines = list(lines)
            open_lines = partial(iter, lines)
        settings = get_settings()
        start_time = time.time()

        names = set()
        total = 0
        for _, feats in _iter_instances(open_lines(), source):
            names.update(feats)
            total += 1
            if total % settings.progress_every == 0:
                logger.info("Finding instances: %d instances found", total, extra={"instances": total})
                monitor_memory_usage(settings.memory_warn_threshold)
        logger.info("Found %d instances with %d distinct features in %s", total, len(names), source)

        for name in sorted(names):
            self.model.intern(name)
        del names

        model = self.model
        count = 0
        for label, feats in _iter_instances(open_lines(), source):
            score = model.score_indices(model.resolve(feats))
            self.store.add(feats, label, weight=math.exp(-2.0 * label * score))
            count += 1
            if count % settings.progress_every == 0:
                logger.debug("Loading instances: %d/%d", count, total)
                monitor_memory_usage(settings.memory_warn_threshold)

        logger.info("Loaded %d instances in %.2f seconds", count, time.time() - start_time)
        return count

    # Training

    def train(
        self,
        cancel_event: Optional[threading.Event] = None,
        callback: Optional[Callable[[IterationStats], None]] = None,
    ) -> TrainingResult:
        """Run boosting rounds until convergence, budget exhaustion or cancellation.

        Raises:
            EmptyTrainingSetError: If no instances have been added.
        """
        if len(self.store) == 0:
            raise EmptyTrainingSetError("Cannot train without instances")

        arrays = self.store.to_arrays()
        weights = arrays.weights
        num_features = len(self.model)
        ranges = _split_ranges(arrays.num_instances, self.num_workers)

        logger.info(
            "Training on %d instances, %d features (threshold=%g, iterations=%d, workers=%d)",
            arrays.num_instances, num_features, self.threshold, self.num_iterations, len(ranges),
        )

        self.running = True
        self.stop_reason = None
        history: List[IterationStats] = []
        last_margin: Optional[float] = None
        reason = StopReason.EXHAUSTED
        executor = ThreadPoolExecutor(max_workers=len(ranges), thread_name_prefix="segboost-train") \
            if len(ranges) > 1 else None

        try:
            for t in range(self.num_iterations):
                if cancel_event is not None and cancel_event.is_set():
                    reason = StopReason.CANCELLED
                    break

                errors, weight_sum, positive_sum = self._accumulate(arrays, weights, ranges, num_features, executor)

                error_rates = (errors + positive_sum) / weight_sum
                error_rates[0] = positive_sum / weight_sum
                margins = np.abs(0.5 - error_rates)
                best = int(np.argmax(margins))
                last_margin = float(margins[best])

                logger.debug("Iteration %d - margin: %s", t, last_margin, extra={"iteration": t, "margin": last_margin})
                if last_margin < self.threshold:
                    reason = StopReason.CONVERGED
                    break

                error_rate = min(max(float(error_rates[best]), MIN_ERROR_RATE), 1.0 - MIN_ERROR_RATE)
                alpha = 0.5 * math.log((1.0 - error_rate) / error_rate)
                self.model.add_weight(best, alpha)

                votes = np.full(arrays.num_instances, NEGATIVE_LABEL, dtype=np.float64)
                votes[arrays.row_ids[arrays.indices == best]] = POSITIVE_LABEL
                alpha_exp = math.exp(alpha)
                weights = np.where(arrays.labels * votes < 0, weights * alpha_exp, weights / alpha_exp)
                weights /= weights.sum()

                stats = IterationStats(
                    iteration=t,
                    feature=best,
                    feature_name=self.model.vocabulary.name(best),
                    error_rate=float(error_rates[best]),
                    margin=last_margin,
                    alpha=alpha,
                    weight_sum=float(weights.sum()),
                )
                logger.debug(
                    "Iteration %d - selected %s (alpha=%.6f)", t, stats.feature_name, alpha,
                    extra={"iteration": t, "feature": stats.feature_name},
                )
                history.append(stats)
                if callback is not None:
                    callback(stats)
        finally:
            if executor is not None:
                executor.shutdown(wait=True)
            self.store.set_weights(weights)
            self.running = False

        self.stop_reason = reason
        logger.info("Training stopped (%s) after %d iterations, last margin %s", reason.value, len(history), last_margin)
        return TrainingResult(stop_reason=reason, iterations=len(history), last_margin=last_margin, history=history)

    def _accumulate(
        self,
        arrays: InstanceArrays,
        weights: np.ndarray,
        ranges: Sequence[Tuple[int, int]],
        num_features: int,
        executor: Optional[ThreadPoolExecutor],
    ) -> Tuple[np.ndarray, float, float]:
        if executor is None:
            return _accumulate_range(arrays, weights, ranges[0][0], ranges[0][1], num_features)

        futures = [
            executor.submit(_accumulate_range, arrays, weights, start, end, num_features)
            for start, end in ranges
        ]
        errors = np.zeros(num_features, dtype=np.float64)
        weight_sum = 0.0
        positive_sum = 0.0
        for fut in futures:
            part_errors, part_weight, part_positive = fut.result()
            errors += part_errors
            weight_sum += part_weight
            positive_sum += part_positive
        return errors, weight_sum, positive_sum

    # Reporting

    def scores(self) -> np.ndarray:
        """Decision score of every stored instance under the current model."""
        arrays = self.store.to_arrays()
        model_weights = self.model.weights_array()
        sums = np.bincount(
            arrays.row_ids,
            weights=model_weights[arrays.indices],
            minlength=arrays.num_instances,
        )
        return sums + self.model.bias

    def metrics(self) -> Metrics:
        """Accuracy, precision and recall of the model on its training instances."""
        scores = self.scores()
        predictions = np.where(scores >= 0.0, POSITIVE_LABEL, NEGATIVE_LABEL)
        labels = np.asarray(self.store.labels, dtype=np.int64)
        return compute_metrics(labels, predictions)


def _split_ranges(num_instances: int, num_workers: int) -> List[Tuple[int, int]]:
    """Split ``[0, num_instances)`` into at most ``num_workers`` contiguous ranges."""
    num_parts = max(1, min(num_workers, num_instances))
    bounds = np.linspace(0, num_instances, num_parts + 1).astype(np.int64)
    return [(int(bounds[k]), int(bounds[k + 1])) for k in range(num_parts)]


def _accumulate_range(
    arrays: InstanceArrays,
    weights: np.ndarray,
    start: int,
    end: int,
    num_features: int,
) -> Tuple[np.ndarray, float, float]:
    """Weighted error contributions of instances ``start..end``."""
    d = weights[start:end]
    y = arrays.labels[start:end]
    weight_sum = float(d.sum())
    positive_sum = float(d[y > 0].sum())

    lo = arrays.indptr[start]
    hi = arrays.indptr[end]
    delta = (d * y)[arrays.row_ids[lo:hi] - start]
    errors = -np.bincount(arrays.indices[lo:hi], weights=delta, minlength=num_features)
    return errors, weight_sum, positive_sum
