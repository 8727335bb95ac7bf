import json

import pytest

from bulletin_config import BulletinConfig, load_config_file


def test_defaults_match_steinfeld_template():
    config = BulletinConfig()
    assert config.locations == ["Steinfeld", "Hausen", "Waldzell"]
    assert "Donnerstag" in config.weekdays
    assert config.line_tolerance == 5.0
    assert config.divider_min_length == 20


def test_defaults_are_not_shared():
    a = BulletinConfig()
    a.locations.append("Berlin")
    assert BulletinConfig().locations == ["Steinfeld", "Hausen", "Waldzell"]


def test_from_dict_overrides_and_ignores_unknown():
    config = BulletinConfig.from_dict({
        "locations": ["St. Marien"],
        "line_tolerance": "3.5",
        "event_duration_minutes": 45,
        "secret_key": "ignored",
    })
    assert config.locations == ["St. Marien"]
    assert config.line_tolerance == 3.5
    assert config.event_duration_minutes == 45
    assert config.weekdays == BulletinConfig().weekdays


def test_from_empty_dict():
    assert BulletinConfig.from_dict(None) == BulletinConfig()
    assert BulletinConfig.from_dict({}) == BulletinConfig()


@pytest.mark.parametrize("data", [
    {"locations": "Steinfeld"},
    {"locations": []},
    {"line_tolerance": "wide"},
    {"line_tolerance": 0},
    {"footnote_splitters": ["("]},
    {"placeholder_summary": {"de": "Gottesdienst"}},
])
def test_from_dict_rejects_bad_values(data):
    with pytest.raises(ValueError):
        BulletinConfig.from_dict(data)


def test_to_dict_round_trips():
    config = BulletinConfig(locations=["Hausen"])
    assert BulletinConfig.from_dict(config.to_dict()) == config


def test_load_config_file(tmp_path):
    path = tmp_path / "template.json"
    path.write_text(json.dumps({"cancel_keywords": ["abgesagt"]}), encoding="utf-8")
    assert load_config_file(path).cancel_keywords == ["abgesagt"]


def test_load_config_file_requires_object(tmp_path):
    path = tmp_path / "template.json"
    path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config_file(path)
