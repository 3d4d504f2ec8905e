import pytest

from weather.core import catalog

def test_catalog_and_tables_agree():
    assert set(catalog.WEATHER_EVENTS) == set(catalog.WEATHER_TYPES)
    assert catalog.NEUTRAL_WEATHER in catalog.WEATHER_EVENTS
    assert sorted(catalog.get_all_weather_types()) == sorted(catalog.WEATHER_EVENTS)

def test_apply_weather_modifier():
    assert catalog.apply_weather_modifier(100.0, "heavy_rain", "unitSpeedMult") == pytest.approx(85.0)
    # Missing key or unknown variant: unchanged
    assert catalog.apply_weather_modifier(100.0, "wind_gust", "visionMult") == 100.0
    assert catalog.apply_weather_modifier(100.0, "blizzard", "unitSpeedMult") == 100.0

def test_severity():
    assert catalog.is_severe_weather("heavy_rain")
    assert catalog.is_severe_weather("fog")
    assert not catalog.is_severe_weather("light_rain")
    assert not catalog.is_severe_weather("unknown")

def test_effect_categories():
    assert catalog.affects_vision("fog")
    assert not catalog.affects_vision("wind_gust")
    assert catalog.affects_movement("wind_gust")
    assert catalog.affects_production("wind_gust")
    assert catalog.affects_production("fog")  # solarEnergyMult
    assert not catalog.affects_movement("unknown")

def test_color_tint_fallback():
    assert catalog.get_weather_color_tint("dust_storm") == (0.95, 0.88, 0.7, 1.0)
    assert catalog.get_weather_color_tint("unknown") == (1.0, 1.0, 1.0, 1.0)

def test_time_conversion():
    assert catalog.seconds_to_frames(120) == 3600
    assert catalog.seconds_to_frames(1.99, 30) == 59
    assert catalog.seconds_to_frames(10, 60) == 600
    assert catalog.frames_to_seconds(3600) == 120.0
    assert catalog.frames_to_seconds(90, 45) == 2.0

def test_tables_are_read_only():
    with pytest.raises(TypeError):
        catalog.WEATHER_TYPES["hail"] = None
    with pytest.raises(TypeError):
        catalog.WEATHER_TYPES["fog"].effects["visionMult"] = 1.0
