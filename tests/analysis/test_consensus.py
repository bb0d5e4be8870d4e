import pytest

from analysis.consensus import AMBIGUOUS, ConsensusResult, get_consensus, is_close


def test_is_close_symmetric_relative_tolerance():
    assert is_close(100.0, 104.0)
    assert is_close(104.0, 100.0)
    assert not is_close(100.0, 106.0)
    assert is_close(1000.0, 1040.0)


def test_is_close_custom_threshold():
    assert not is_close(100.0, 104.0, close_threshold=0.01)
    assert is_close(100.0, 100.5, close_threshold=0.01)


def test_is_close_rejects_sentinels():
    assert not is_close(-1.0, 150.0)
    assert not is_close(0.0, 0.0)


def test_two_close_one_missing():
    res = get_consensus([100.0, 101.0, -1.0])
    assert res.consensus == pytest.approx(100.5)
    assert res.lone == AMBIGUOUS


def test_exactly_one_estimate():
    res = get_consensus([100.0, 0.0, 0.0])
    assert res.consensus == 0
    assert res.lone == 100.0


def test_lone_from_last_estimator():
    res = get_consensus([-1.0, -1.0, 220.0])
    assert res.consensus == 0
    assert res.lone == 220.0


def test_no_estimates():
    res = get_consensus([0.0, 0.0, 0.0])
    assert res.consensus == 0
    assert res.lone == 0


def test_disagreeing_estimates():
    res = get_consensus([100.0, 205.0, -1.0])
    assert res.consensus == 0
    assert res.lone == AMBIGUOUS


def test_three_way_agreement_averages_pair_means():
    res = get_consensus([100.0, 102.0, 104.0])
    # pairs (100,102), (100,104), (102,104)
    assert res.consensus == pytest.approx((101.0 + 102.0 + 103.0) / 3)


def test_pair_between_yin_and_mpm_counts():
    res = get_consensus([300.0, 150.0, 151.0])
    assert res.consensus == pytest.approx(150.5)


def test_result_views():
    assert ConsensusResult(150.0, -1.0).freq == 150.0
    assert not ConsensusResult(150.0, -1.0).is_lone
    assert ConsensusResult(0.0, 120.0).freq == 120.0
    assert ConsensusResult(0.0, 120.0).is_lone
    assert not ConsensusResult(0.0, -1.0).usable
    assert not ConsensusResult(0.0, 0.0).usable


def test_trace_only_when_something_found():
    lines = []
    get_consensus([-1.0, -1.0, -1.0], trace=lines.append)
    assert lines == []

    get_consensus([150.0, 151.0, -1.0], trace=lines.append)
    assert len(lines) == 1
    assert lines[0].startswith("est[")
    assert "consensus:" in lines[0] and "lone_est:" in lines[0]
