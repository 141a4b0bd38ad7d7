import pytest

from trustscore_agent.badge import CIRCUMFERENCE, render_badge, ring_offset


def test_ring_offset_bounds():
    assert ring_offset(100) == 0
    assert ring_offset(0) == pytest.approx(CIRCUMFERENCE)
    assert ring_offset(50) == pytest.approx(CIRCUMFERENCE / 2)


@pytest.mark.parametrize("score,color", [(92, "#10b981"), (70, "#f59e0b"), (50, "#f97316"), (12, "#ef4444")])
def test_badge_uses_score_color(score, color):
    svg = render_badge("example.com", score)
    assert svg.startswith("<svg")
    assert f'stroke="{color}"' in svg
    assert f">{score}</text>" in svg
    assert "Verified Trust Score" in svg


def test_badge_escapes_domain():
    svg = render_badge("<evil>&co", 80)
    assert "<evil>" not in svg
    assert "&lt;evil&gt;&amp;co" in svg
