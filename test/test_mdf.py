# test/test_mdf.py
import numpy as np
import pytest

from asammdf import MDF, Signal

from eventseries.core.exceptions import ChannelNotFound
from eventseries.io.mdf import load_mdf

pytestmark = pytest.mark.integration


@pytest.fixture
def mdf_path(tmp_path):
    t = np.arange(40) * 0.25
    mdf = MDF(version="4.10")
    mdf.append(
        [
            Signal(samples=2.0 * t, timestamps=t, name="eng_spd", unit="rpm"),
            Signal(samples=t + 1.0, timestamps=t, name="coolant_temp", unit="degC"),
        ]
    )
    path = tmp_path / "x.mf4"
    mdf.save(path, overwrite=True)
    mdf.close()
    return path


def test_load_all_channels(mdf_path):
    batch = load_mdf(mdf_path)
    names = [s.y_label for s in batch]
    assert "eng_spd" in names and "coolant_temp" in names

    spd = batch[names.index("eng_spd")]
    assert spd.n_samples == 40
    assert spd.time.dt == pytest.approx(0.25)
    assert spd.units == "rpm"
    assert spd.samples[4, 0, 0] == pytest.approx(2.0)


def test_load_named_channels_in_order(mdf_path):
    batch = load_mdf(mdf_path, ["coolant_temp", "eng_spd"])
    assert [s.y_label for s in batch] == ["coolant_temp", "eng_spd"]
    assert batch.units == ["degC", "rpm"]


def test_missing_channel(mdf_path):
    with pytest.raises(ChannelNotFound):
        load_mdf(mdf_path, ["nope"])

    # also behaves like KeyError
    with pytest.raises(KeyError):
        load_mdf(mdf_path, ["nope"])


def test_explicit_dt_resamples(mdf_path):
    batch = load_mdf(mdf_path, ["eng_spd"], dt=0.5)
    assert batch[0].n_samples == 20
    assert batch[0].samples[1, 0, 0] == pytest.approx(1.0)
