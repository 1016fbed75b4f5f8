"""
Tests for AI config files and personalities.
"""

import json
from dataclasses import asdict

import pytest

from ..bots.evaluator import DeploymentZones, EvaluationWeights, UnitWorthWeights
from ..bots.personality import AGGRESSIVE, BALANCED, PERSONALITIES, create_random_personality
from ..bots.search import MinimaxSearch, MoveOrderingWeights
from ..config import (
    CONFIG_ENV_VAR,
    AiConfig,
    ConfigError,
    EvaluationSection,
    OrderingSection,
    WorthSection,
    load_ai_config,
    parse_ai_config,
)


@pytest.fixture
def write_config(tmp_path):
    def _write(data):
        path = tmp_path / "ai.json"
        path.write_text(data if isinstance(data, str) else json.dumps(data), encoding="utf-8")
        return path
    return _write


class TestLoadAiConfig:
    """Tests for reading config files."""

    def test_defaults_without_file(self, monkeypatch):
        """No path and no environment variable gives the balanced defaults."""
        monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
        config = load_ai_config()

        assert config == AiConfig()
        assert config.to_personality().weights == BALANCED.weights

    def test_environment_variable(self, monkeypatch, write_config):
        """The config path can come from the environment."""
        monkeypatch.setenv(CONFIG_ENV_VAR, str(write_config({"personality": "swarm"})))
        assert load_ai_config().personality == "swarm"

    def test_unknown_key_rejected(self, write_config):
        """Typos are errors, not silently ignored."""
        with pytest.raises(ConfigError):
            load_ai_config(write_config({"evaluation": {"dangr": 1.0}}))

    def test_out_of_range_rejected(self):
        """Depths beyond the search tables and negative weights fail."""
        with pytest.raises(ConfigError):
            parse_ai_config({"search": {"move_depth": 99}})
        with pytest.raises(ConfigError):
            parse_ai_config({"ordering": {"history": -1.0}})

    def test_invalid_json(self, write_config):
        """Files must hold JSON."""
        with pytest.raises(ConfigError):
            load_ai_config(write_config("{oops"))

    def test_not_an_object(self, write_config):
        """The top level must be an object."""
        with pytest.raises(ConfigError):
            load_ai_config(write_config([1, 2]))

    def test_missing_file(self, tmp_path):
        """Unreadable files raise ConfigError."""
        with pytest.raises(ConfigError):
            load_ai_config(tmp_path / "nope.json")

    def test_section_defaults_match_weights(self):
        """Empty sections carry the same defaults as the weight records."""
        assert EvaluationSection().model_dump() == asdict(EvaluationWeights())
        assert OrderingSection().model_dump() == asdict(MoveOrderingWeights())
        assert WorthSection().model_dump() == asdict(UnitWorthWeights())
        assert AiConfig().deployment.model_dump() == asdict(DeploymentZones())

    def test_deployment_zones(self):
        """Deployment rows are passed through."""
        zones = parse_ai_config({"deployment": {"boss_rows_from_top": 2}}).deployment_zones()
        assert zones.boss_rows_from_top == 2
        assert zones.player_rows_from_bottom == 1


class TestToPersonality:
    """Tests for turning a config into a personality."""

    def test_preset_from_file(self):
        """The file's personality picks the preset."""
        personality = parse_ai_config({"personality": "Aggressive"}).to_personality()
        assert personality.weights == AGGRESSIVE.weights
        assert personality.metadata == {"preset": "aggressive"}

    def test_name_argument_wins(self):
        """An explicit preset overrides the file's choice."""
        personality = parse_ai_config({"personality": "aggressive"}).to_personality("swarm")
        assert personality.name == "Swarm"
        assert personality.target_depth == 1

    def test_sections_override_preset(self):
        """A section replaces the preset's weights; other sections keep the preset."""
        config = parse_ai_config({"personality": "aggressive", "evaluation": {"danger": 2.0}})
        personality = config.to_personality()

        assert personality.weights.danger == 2.0
        assert personality.weights.player_health == EvaluationWeights().player_health
        assert personality.worth == AGGRESSIVE.worth

    def test_search_section(self):
        """Depths come from the search section when present."""
        personality = parse_ai_config({"search": {"target_depth": 1, "move_depth": 2}}).to_personality()
        assert (personality.target_depth, personality.move_depth) == (1, 2)

    def test_unknown_preset(self):
        """Unknown presets are config errors."""
        with pytest.raises(ConfigError):
            AiConfig(personality="berserk").to_personality()


class TestPersonalities:
    """Tests for the predefined and generated personalities."""

    def test_presets(self):
        """All four presets are registered."""
        assert set(PERSONALITIES) == {"balanced", "aggressive", "defensive", "swarm"}

    def test_build_search(self):
        """A personality wires its weights into a fresh search."""
        search = AGGRESSIVE.build_search()
        assert isinstance(search, MinimaxSearch)
        assert search.evaluator.weights == AGGRESSIVE.weights
        assert search.ordering == AGGRESSIVE.ordering

    def test_random_is_reproducible(self):
        """The same seed gives the same personality."""
        a = create_random_personality(seed=7)
        b = create_random_personality(seed=7)
        assert a.weights == b.weights
        assert a.worth == b.worth

    def test_zero_variance_keeps_base(self):
        """Without variance the base weights are unchanged."""
        personality = create_random_personality(base=AGGRESSIVE, variance=0.0, seed=1)
        assert personality.weights == AGGRESSIVE.weights
        assert personality.metadata["base"] == "Aggressive"
