"""Tests for configuration helpers."""

import logging

from training_adaptation import config, configure_logging


class TestConfig:

    def test_equipment_effectiveness(self):
        assert config.get_equipment_effectiveness("running_track") == 85
        assert config.get_equipment_effectiveness("safety_equipment") == 60
        assert config.get_equipment_effectiveness("unknown_gear") == 75

    def test_response_weights_sum_to_one(self):
        assert abs(sum(config.RESPONSE_WEIGHTS.values()) - 1.0) < 1e-9

    def test_configure_logging(self):
        logger = configure_logging("debug")
        try:
            assert logger.name == "training_adaptation"
            assert logger.level == logging.DEBUG
        finally:
            logger.setLevel(logging.NOTSET)
