import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import pytest

from weather.core.plotter import make_figure, save_figure

def test_make_figure_no_data():
    fig = make_figure([], [], [])
    assert fig is not None
    plt.close(fig)

def test_make_figure_with_data(tmp_path):
    fig = make_figure(
        trigger_seconds=[120, 600, 1500],
        variants=["fog", "clear_skies", "monsoon"],
        intensities=[0.5, 0.75, 1.0],
    )
    assert len(fig.axes) == 2
    # Unknown variants get their own row
    labels = [t.get_text() for t in fig.axes[0].get_yticklabels()]
    assert "monsoon" in labels
    out = tmp_path / "timeline.png"
    save_figure(fig, str(out))
    assert out.exists() and out.stat().st_size > 0
    plt.close(fig)

def test_make_figure_length_mismatch():
    with pytest.raises(ValueError):
        make_figure([1.0], [], [0.5])
