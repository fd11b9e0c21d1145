from pathlib import Path

import pytest

from py_geolinmath import (ComplexNumber, PreferredFormat, Vector2, basicConfig, loadBracketFormat,
                           loadDefaultFormat, loadEngineeringFormat)


class TestConfigLoader:

    @pytest.mark.parametrize(
        "test_name, config_func, expected_vector, expected_complex",
        [
            ("env", basicConfig, "(1, 2)", "1 + 2i"),
            ("manual", lambda: basicConfig(preferred_format={'separator': '; '}), "(1; 2)", "1 + 2i"),
            ("default", loadDefaultFormat, "(1, 2)", "1 + 2i"),
            ("bracket", loadBracketFormat, "[1; 2]", "1 + 2i"),
            ("engineering", loadEngineeringFormat, "<1, 2>", "1 + 2j"),
        ],
    )
    def test_preferred_format_load(self, test_name, config_func, expected_vector, expected_complex):
        PreferredFormat.restore_defaults()

        config_func()

        assert str(Vector2(1, 2)) == expected_vector
        assert str(ComplexNumber(1, 2)) == expected_complex
        assert Vector2.parse(expected_vector, int) == Vector2(1, 2)
        assert ComplexNumber.parse(expected_complex, int) == ComplexNumber(1, 2)

    def test_load_default_after_preset(self):
        loadEngineeringFormat()
        loadDefaultFormat()
        assert PreferredFormat.imaginary_unit == "i"
        assert PreferredFormat.opening == "("


def test_basic_config_mutual_exclusion_error():
    with pytest.raises(ValueError):
        basicConfig(filename="dummy.toml", preferred_format={"separator": "; "})


def test_load_config_searches_upwards(monkeypatch, tmp_path: Path):
    nested = tmp_path / "a" / "b"
    nested.mkdir(parents=True)
    (tmp_path / "a" / "geolin.toml").write_text("""
[geolin.preferred_format]
opening = "{"
closing = "}"
""".strip())

    with monkeypatch.context() as m:
        m.chdir(str(nested))
        basicConfig()
        assert str(Vector2(1, 2)) == "{1, 2}"


def test_dotfile_takes_precedence(monkeypatch, tmp_path: Path):
    (tmp_path / ".geolin.toml").write_text('[geolin.preferred_format]\nimaginary_unit = "j"\n')
    (tmp_path / "geolin.toml").write_text('[geolin.preferred_format]\nimaginary_unit = "k"\n')
    with monkeypatch.context() as m:
        m.chdir(str(tmp_path))
        basicConfig()
        assert PreferredFormat.imaginary_unit == "j"


@pytest.mark.parametrize(
    "content, message",
    [
        ("[other]\nkey = 1\n", "no `geolin` section"),
        ("[geolin]\nkey = 1\n", "no `geolin.preferred_format` section"),
    ],
)
def test_missing_sections_warn(tmp_path: Path, caplog, content, message):
    config = tmp_path / "custom.toml"
    config.write_text(content)
    basicConfig(str(config))
    assert message in caplog.text
    caplog.clear()
    basicConfig(str(config), suppress_warnings=True)
    assert message not in caplog.text


def test_invalid_values_are_skipped(tmp_path: Path, caplog):
    config = tmp_path / "custom.toml"
    config.write_text('[geolin.preferred_format]\nseparator = ""\nunknown = "x"\nclosing = "]"\n')
    basicConfig(str(config))
    assert PreferredFormat.separator == ", "
    assert PreferredFormat.closing == "]"
    assert "not found" in caplog.text
