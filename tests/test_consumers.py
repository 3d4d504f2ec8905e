import pytest

from weather.consumers import GameplayEffects, UnitDef, VisualEffects
from weather.core.broadcast import BroadcastReader, BroadcastRecord, WeatherBroadcast


def _reader(record=None):
    bc = WeatherBroadcast()
    if record is not None:
        bc.publish(record)
    return bc, BroadcastReader(bc)

# --- GameplayEffects ---
def test_effects_poll_on_cadence():
    bc, reader = _reader()
    fx = GameplayEffects(reader, update_interval=10)
    bc.publish(BroadcastRecord("heavy_rain", 0.8, 300))
    for _ in range(9):
        assert fx.game_frame() is False
    assert fx.current_weather == "clear_skies"
    assert fx.game_frame() is True
    assert fx.current_weather == "heavy_rain"
    assert fx.weather_intensity == 0.8
    assert fx.last_weather_frame == 300

def test_effects_defaults_before_any_event():
    _, reader = _reader()
    fx = GameplayEffects(reader)
    fx.refresh()
    assert fx.current_weather == "clear_skies"
    assert fx.weather_intensity == 0
    assert fx.is_active() is False
    assert fx.modifier("unitSpeedMult", 2.0) == 2.0

def test_effects_modifiers_and_units():
    _, reader = _reader(BroadcastRecord("wind_gust", 0.7, 10))
    fx = GameplayEffects(reader)
    fx.refresh()
    plane = UnitDef("plane", speed=10.0, can_fly=True)
    tank = UnitDef("tank", speed=4.0)
    assert fx.unit_speed(plane) == pytest.approx(11.0)
    assert fx.unit_speed(tank) == 4.0
    assert fx.weather_affects_unit(tank) is True
    assert fx.weather_affects_unit(None) is False
    assert fx.is_active() is True

def test_effects_unknown_variant():
    _, reader = _reader(BroadcastRecord("blizzard", 0.9, 10))
    fx = GameplayEffects(reader)
    fx.refresh()
    assert fx.weather_data is None
    assert fx.weather_affects_unit(UnitDef()) is False

def test_effects_bad_interval():
    _, reader = _reader()
    with pytest.raises(ValueError):
        GameplayEffects(reader, update_interval=0)

# --- VisualEffects ---
def test_visuals_overlay_and_particles():
    _, reader = _reader(BroadcastRecord("heavy_rain", 1.0, 60))
    vfx = VisualEffects(reader)
    for _ in range(5):
        vfx.game_frame()
    assert vfx.particle_count == 4000
    assert vfx.fog_density == 0.3
    r, g, b, a = vfx.color_overlay()
    assert (r, g, b) == (0.7, 0.75, 0.95)
    assert a == pytest.approx(0.15)
    assert vfx.weather_start_frame == 60

def test_visuals_clear_skies():
    _, reader = _reader()
    vfx = VisualEffects(reader, particle_scale=2.0)
    vfx.refresh()
    assert vfx.particle_count == 0
    assert vfx.color_overlay() == (1.0, 1.0, 1.0, 0.0)

def test_visuals_particle_scale():
    _, reader = _reader(BroadcastRecord("light_rain", 0.5, 1))
    vfx = VisualEffects(reader, particle_scale=0.5, max_particles=1000)
    vfx.refresh()
    assert vfx.particle_count == 150
    assert vfx.color_overlay()[3] == pytest.approx(0.075)
