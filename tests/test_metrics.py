import math

import pytest

from src.utils.metrics import (
    brier_score,
    calibration_bins,
    evaluate,
    log_loss,
    make_pairs,
    roc_auc,
    roc_curve,
)


def test_perfect_ranking_has_auc_one():
    ev = evaluate([1, 1, 0, 0], [0.9, 0.8, 0.2, 0.1])
    assert ev.auc == pytest.approx(1.0)
    assert ev.n == 4
    assert ev.base_rate == 0.5


def test_tied_scores_make_a_single_threshold():
    """
    Scenario: one positive and one negative share the score 0.5.
    Verify: the sweep records one point for the tie, not one per pair.
    """
    curve = roc_curve(make_pairs([1, 0], [0.5, 0.5]))

    thresholds = [pt for pt in curve if math.isfinite(pt.threshold)]
    assert len(thresholds) == 1
    assert (curve[0].fpr, curve[0].tpr) == (0.0, 0.0)
    assert (curve[-1].fpr, curve[-1].tpr) == (1.0, 1.0)
    assert roc_auc(make_pairs([1, 0], [0.5, 0.5])) == pytest.approx(0.5)


def test_roc_curve_is_monotone_from_origin_to_corner():
    labels = [1, 0, 1, 1, 0, 0, 1, 0]
    scores = [0.9, 0.7, 0.7, 0.6, 0.4, 0.4, 0.3, 0.1]
    curve = evaluate(labels, scores).roc_curve

    assert (curve[-1].fpr, curve[-1].tpr) == (1.0, 1.0)
    for prev, cur in zip(curve, curve[1:]):
        assert cur.fpr >= prev.fpr
        assert cur.tpr >= prev.tpr
    # one point per distinct score plus the origin
    assert len(curve) == len(set(scores)) + 1


def test_auc_is_invariant_to_monotone_rescaling():
    labels = [1, 0, 1, 0, 0, 1, 1, 0, 1]
    scores = [0.81, 0.42, 0.65, 0.65, 0.12, 0.9, 0.33, 0.5, 0.71]
    base = evaluate(labels, scores).auc

    assert evaluate(labels, [s * 0.5 for s in scores]).auc == pytest.approx(base)
    assert evaluate(labels, [s ** 2 for s in scores]).auc == pytest.approx(base)


def test_auc_matches_pairwise_ranking_probability():
    labels = [1, 0, 1, 0, 1, 0]
    scores = [0.8, 0.6, 0.6, 0.3, 0.2, 0.1]
    pos = [s for s, y in zip(scores, labels) if y == 1]
    neg = [s for s, y in zip(scores, labels) if y == 0]
    wins = sum(1.0 if p > n else 0.5 if p == n else 0.0 for p in pos for n in neg)
    assert evaluate(labels, scores).auc == pytest.approx(wins / (len(pos) * len(neg)))


def test_single_class_is_undefined():
    ev = evaluate([1, 1, 1], [0.2, 0.6, 0.9])
    assert math.isnan(ev.auc)
    assert ev.roc_curve == []
    # the scoring rules are still defined
    assert ev.log_loss > 0
    assert ev.brier > 0


def test_perfect_predictions_score_zero():
    pairs = make_pairs([1, 0, 1], [1.0, 0.0, 1.0])
    assert log_loss(pairs) == 0.0
    assert brier_score(pairs) == 0.0


def test_imperfect_predictions_score_positive():
    pairs = make_pairs([1, 0], [0.9, 0.2])
    assert log_loss(pairs) == pytest.approx(-(math.log(0.9) + math.log(0.8)) / 2)
    assert brier_score(pairs) == pytest.approx((0.01 + 0.04) / 2)


def test_confidently_wrong_prediction_is_finite():
    pairs = make_pairs([1], [0.0])
    assert log_loss(pairs) == pytest.approx(-math.log(1e-15))


def test_missing_pairs_are_dropped_together():
    ev = evaluate([1, None, 0, 1], [0.8, 0.3, float("nan"), 0.6])
    assert ev.n == 2


def test_empty_input_is_undefined():
    ev = evaluate([], [])
    assert ev.n == 0
    assert math.isnan(ev.auc)
    assert math.isnan(ev.log_loss)
    assert math.isnan(ev.brier)
    assert ev.calibration == []


@pytest.mark.parametrize(
    "labels, scores",
    [
        ([1, 0], [0.5]),         # length mismatch
        ([1, 2], [0.5, 0.5]),    # label not binary
        ([1, 0], [0.5, 1.2]),    # probability out of range
        ([1, 0], [-0.1, 0.5]),
    ],
)
def test_contract_violations_raise(labels, scores):
    with pytest.raises(ValueError):
        evaluate(labels, scores)


def test_calibration_omits_empty_buckets():
    pairs = make_pairs([1, 0, 1, 1, 0], [0.05, 0.08, 0.55, 0.58, 0.95])
    bins = calibration_bins(pairs, n_bins=10)

    assert [b["bin_mid"] for b in bins] == pytest.approx([0.05, 0.55, 0.95])
    assert [b["observed"] for b in bins] == pytest.approx([0.5, 1.0, 0.0])
    assert [b["n"] for b in bins] == [2, 2, 1]


def test_probability_one_falls_in_last_bucket():
    bins = calibration_bins(make_pairs([1], [1.0]), n_bins=4)
    assert bins == [{"bin_mid": 0.875, "predicted_avg": 1.0, "observed": 1.0, "n": 1}]


def test_calibration_rejects_bad_bucket_count():
    with pytest.raises(ValueError):
        calibration_bins([], n_bins=0)
