"""Unit tests for classification label to badge mapping."""

import pytest

from doi_labeler.badges import BADGE_IDS, BADGES, map_to_badge


@pytest.mark.parametrize(
    "label, badge",
    [
        ("Paradigm Shift", "paradigm-shift"),
        ("Model Revolution", "model-revolution"),
        ("Normal Science", "normal-science"),
        ("Model Crisis", "model-crisis"),
        ("Model Drift", "model-drift"),
    ],
)
def test_known_labels(label, badge):
    assert map_to_badge(label) == badge


@pytest.mark.parametrize("label", ["Not A Label", "", "model drift", "MODEL DRIFT", " Model Drift", None])
def test_unknown_labels_have_no_badge(label):
    assert map_to_badge(label) is None


def test_five_distinct_badges():
    assert len(BADGES) == 5
    assert len(set(BADGE_IDS)) == 5
