# tests/analysis/test_beta.py
"""
Testes de distâncias beta e ordenação (PCoA / NMDS).
"""

import numpy as np
import pandas as pd
import pytest
from skbio import DistanceMatrix

from mikrob_dataflow.analysis.beta import compute_distance, ordinate
from mikrob_dataflow.core.exceptions import ExternalRoutineError, ValidationError


@pytest.fixture
def two_samples():
    return pd.DataFrame({"A": [4, 0, 2], "B": [0, 3, 2]}, index=["T1", "T2", "T3"])


def test_bray_curtis(two_samples):
    dm = compute_distance(two_samples, "bray")
    assert isinstance(dm, DistanceMatrix)
    assert list(dm.ids) == ["A", "B"]
    # |4-0| + |0-3| + |2-2| = 7 ; soma total = 11
    assert dm["A", "B"] == pytest.approx(7 / 11)


def test_jaccard_uses_presence_absence(two_samples):
    dm = compute_distance(two_samples, "jaccard")
    # presentes: A={T1,T3}, B={T2,T3}; 1 compartilhado de 3
    assert dm["A", "B"] == pytest.approx(2 / 3)


def test_euclidean(two_samples):
    assert compute_distance(two_samples, "euclidean")["A", "B"] == pytest.approx(5.0)


def test_unknown_method(two_samples):
    with pytest.raises(ValidationError):
        compute_distance(two_samples, "unifrac")


def test_empty_sample_pair_is_external_error():
    features = pd.DataFrame({"A": [0, 0], "B": [0, 0]}, index=["T1", "T2"])
    with pytest.raises(ExternalRoutineError):
        compute_distance(features, "bray")


def test_pcoa_reports_proportion_explained(features_table):
    ordination = ordinate(compute_distance(features_table, "bray"), "PCoA", n_axes=2)
    coords = ordination.coordinates
    assert list(coords.columns) == ["PC1", "PC2"]
    assert list(coords.index) == list(features_table.columns)
    assert list(ordination.proportion_explained.index) == ["PC1", "PC2"]
    assert 0 < ordination.proportion_explained["PC1"] <= 1
    assert ordination.stress is None
    assert ordination.axis_labels()[0].startswith("PC1 (")


def test_nmds_reports_stress_and_is_seeded(features_table):
    dm = compute_distance(features_table, "bray")
    first = ordinate(dm, "NMDS", seed=711)
    second = ordinate(dm, "NMDS", seed=711)
    assert list(first.coordinates.columns) == ["NMDS1", "NMDS2"]
    assert first.stress is not None and np.isfinite(first.stress)
    np.testing.assert_allclose(first.coordinates.to_numpy(), second.coordinates.to_numpy())
    assert first.axis_labels() == ["NMDS1", "NMDS2"]


def test_unknown_ordination_method(features_table):
    with pytest.raises(ValidationError):
        ordinate(compute_distance(features_table, "bray"), "tSNE")
