"""Tests for data containers and analysis configuration."""

import json
import math
import pytest
from sipattern.pipeline_config import (
    AnalysisConfig, MaskConfig, PatternConfig, SIParameters, TransformMode,
)


class TestTransformMode:

    def test_parse(self):
        assert TransformMode.parse("fft") is TransformMode.FFT
        assert TransformMode.parse("DHT") is TransformMode.DHT
        assert TransformMode.parse(TransformMode.FFT) is TransformMode.FFT

    def test_parse_unknown(self):
        with pytest.raises(ValueError):
            TransformMode.parse("wavelet")


class TestSIParameters:

    def test_frozen(self):
        params = SIParameters(0.0, 0.0, 8.0)
        with pytest.raises(AttributeError):
            params.wavelength = 4.0

    def test_to_dict(self):
        assert SIParameters(0.1, 0.2, 8.0).to_dict() == {
            "angle": 0.1, "phase": 0.2, "wavelength": 8.0}


class TestAnalysisConfig:

    def test_defaults(self):
        cfg = AnalysisConfig()
        assert cfg.pattern.size == 256
        assert cfg.pattern.angle == pytest.approx(math.pi / 4)
        assert cfg.pattern.wavelength == 8.0
        assert cfg.transform.mode == "fft"
        assert cfg.mask.enabled
        assert cfg.mask.radius == 0.0
        assert not cfg.display.logarithmic

    def test_to_dict_json_safe(self):
        d = AnalysisConfig().to_dict()
        assert json.loads(json.dumps(d)) == d

    def test_round_trip(self):
        cfg = AnalysisConfig(pattern=PatternConfig(size=64, wavelength=5.0),
                             mask=MaskConfig(radius=3.0))
        restored = AnalysisConfig.from_dict(cfg.to_dict())
        assert restored == cfg

    def test_from_partial_dict(self):
        cfg = AnalysisConfig.from_dict({
            "pattern": {"size": 32, "unknown_key": 1},
            "display": {"logarithmic": True},
            "ignored_section": {"x": 1},
        })
        assert cfg.pattern.size == 32
        assert cfg.pattern.wavelength == 8.0
        assert not hasattr(cfg.pattern, "unknown_key")
        assert cfg.display.logarithmic
        assert cfg.transform.mode == "fft"
