"""Tests for locating, parsing and validating purge configs."""

import json

import pytest

from purge_tools.config_loader import (
    DEFAULT_CONFIG_NAMES,
    PurgeConfig,
    build_config,
    find_config,
    load_config,
)
from purge_tools.errors import ConfigNotFoundError, ConfigParseError
from purge_tools.extractors import CustomExtractor, DefaultExtractor, HtmlExtractor


def write_json(path, data):
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class TestLookup:
    def test_finds_python_config_first(self, tmp_path):
        (tmp_path / "purgecss.config.py").write_text("content = ['a.html']\n")
        write_json(tmp_path / "purgecss.config.json", {"content": ["b.html"]})
        assert find_config(tmp_path).name == DEFAULT_CONFIG_NAMES[0]
        assert load_config(root=tmp_path).content == ("a.html",)

    def test_falls_back_to_json(self, tmp_path):
        write_json(tmp_path / "purgecss.config.json", {"content": ["b.html"]})
        assert load_config(root=tmp_path).content == ("b.html",)

    def test_missing_default_location(self, tmp_path):
        with pytest.raises(ConfigNotFoundError):
            load_config(root=tmp_path)

    def test_missing_explicit_path(self, tmp_path):
        with pytest.raises(ConfigNotFoundError):
            load_config(tmp_path / "nope.py")

    def test_explicit_path_relative_to_root(self, tmp_path):
        (tmp_path / "cfg").mkdir()
        (tmp_path / "cfg" / "purge.py").write_text("content = ['x']\n")
        config = load_config("cfg/purge.py", root=tmp_path)
        assert config.source == tmp_path / "cfg" / "purge.py"


class TestPythonConfig:
    def test_sample_site_config(self, sample_site):
        config = load_config(root=sample_site)
        assert config.content == ("./src/index.html", "./src/**/*.elm")
        assert isinstance(config.default_extractor, CustomExtractor)
        assert config.default_extractor.extract('class="btn-primary" data-x:/y') == [
            "class",
            "btn-primary",
            "data-x:/y",
        ]

    def test_snake_case_aliases(self, tmp_path):
        path = tmp_path / "purgecss.config.py"
        path.write_text(
            "content = ('a.html',)\n"
            "def default_extractor(text):\n"
            "    return text.split()\n"
            "skipped_content_globs = ['vendor/**']\n"
        )
        config = load_config(path)
        assert config.default_extractor.extract("a b") == ["a", "b"]
        assert config.skipped_content_globs == ("vendor/**",)

    def test_missing_extractor_uses_builtin(self, tmp_path):
        path = tmp_path / "purgecss.config.py"
        path.write_text("content = ['a.html']\n")
        assert isinstance(load_config(path).default_extractor, DefaultExtractor)

    def test_broken_module(self, tmp_path):
        path = tmp_path / "purgecss.config.py"
        path.write_text("content = [\n")
        with pytest.raises(ConfigParseError):
            load_config(path)

    def test_module_raising(self, tmp_path):
        path = tmp_path / "purgecss.config.py"
        path.write_text("raise RuntimeError('boom')\n")
        with pytest.raises(ConfigParseError, match="boom"):
            load_config(path)

    def test_per_extension_extractors(self, tmp_path):
        path = tmp_path / "purgecss.config.py"
        path.write_text(
            "content = ['**/*']\n"
            "extractors = [{'extractor': 'html', 'extensions': ['.HTML', 'htm']}]\n"
        )
        config = load_config(path)
        assert isinstance(config.extractor_for(tmp_path / "index.html"), HtmlExtractor)
        assert isinstance(config.extractor_for(tmp_path / "page.htm"), HtmlExtractor)
        assert isinstance(config.extractor_for(tmp_path / "Main.elm"), DefaultExtractor)


class TestJsonConfig:
    def test_pattern_extractor(self, tmp_path):
        path = write_json(tmp_path / "purgecss.config.json", {
            "content": ["src/**/*.html"],
            "defaultExtractor": {"pattern": "[a-z-]+"},
        })
        config = load_config(path)
        assert config.default_extractor.extract("Btn-x y") == ["tn-x", "y"]

    def test_pattern_flags(self, tmp_path):
        path = write_json(tmp_path / "purgecss.config.json", {
            "content": ["a"],
            "defaultExtractor": {"pattern": "[a-z]+", "flags": "i"},
        })
        assert load_config(path).default_extractor.extract("AbC") == ["AbC"]

    def test_builtin_name(self, tmp_path):
        path = write_json(tmp_path / "purgecss.config.json", {"content": ["a"], "defaultExtractor": "html"})
        assert isinstance(load_config(path).default_extractor, HtmlExtractor)

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "purgecss.config.json"
        path.write_text("{content: }")
        with pytest.raises(ConfigParseError):
            load_config(path)

    def test_top_level_must_be_object(self, tmp_path):
        path = write_json(tmp_path / "purgecss.config.json", ["a"])
        with pytest.raises(ConfigParseError):
            load_config(path)

    def test_invalid_regex(self, tmp_path):
        path = write_json(tmp_path / "purgecss.config.json", {"content": ["a"], "defaultExtractor": {"pattern": "[a-"}})
        with pytest.raises(ConfigParseError):
            load_config(path)

    def test_unknown_builtin(self, tmp_path):
        path = write_json(tmp_path / "purgecss.config.json", {"content": ["a"], "defaultExtractor": "pug"})
        with pytest.raises(ConfigParseError):
            load_config(path)

    def test_unsupported_suffix(self, tmp_path):
        path = tmp_path / "purgecss.config.js"
        path.write_text("module.exports = {}")
        with pytest.raises(ConfigParseError):
            load_config(path)


class TestValidation:
    def test_empty_content(self):
        with pytest.raises(ConfigParseError):
            build_config({"content": []})

    def test_missing_content(self):
        with pytest.raises(ConfigParseError):
            build_config({})

    @pytest.mark.parametrize("content", ["src/*.html", [1], [""], ["ok", None], {"a": 1}])
    def test_bad_content(self, content):
        with pytest.raises(ConfigParseError):
            build_config({"content": content})

    @pytest.mark.parametrize("extractor", [42, ["a"], lambda: [], lambda a, b: []])
    def test_bad_extractor(self, extractor):
        with pytest.raises(ConfigParseError):
            build_config({"content": ["a"], "defaultExtractor": extractor})

    @pytest.mark.parametrize("rules", [
        "html",
        [{"extractor": "html"}],
        [{"extractor": "html", "extensions": []}],
        [{"extensions": ["html"]}],
        ["html"],
    ])
    def test_bad_extractor_rules(self, rules):
        with pytest.raises(ConfigParseError):
            build_config({"content": ["a"], "extractors": rules})

    @pytest.mark.parametrize("skipped", ["vendor/**", [""], [3]])
    def test_bad_skipped_globs(self, skipped):
        with pytest.raises(ConfigParseError):
            build_config({"content": ["a"], "skippedContentGlobs": skipped})

    def test_config_is_read_only(self):
        config = build_config({"content": ["a"]})
        assert isinstance(config, PurgeConfig)
        with pytest.raises(AttributeError):
            config.content = ("b",)


class TestRelativeConfigPath:
    def test_prefers_current_directory(self, tmp_path, monkeypatch):
        site = tmp_path / "site"
        site.mkdir()
        (site / "alt.json").write_text(json.dumps({"content": ["cwd.html"]}))
        monkeypatch.chdir(tmp_path)
        config = load_config("site/alt.json", root=site)
        assert config.content == ("cwd.html",)

    def test_falls_back_to_root(self, tmp_path, monkeypatch):
        site = tmp_path / "site"
        site.mkdir()
        (site / "alt.json").write_text(json.dumps({"content": ["root.html"]}))
        monkeypatch.chdir(tmp_path)
        config = load_config("alt.json", root=site)
        assert config.content == ("root.html",)
