"""Tests for create_toolchain.core.resolver -- template identifier resolution."""

from __future__ import annotations

import os
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest

from create_toolchain.core.config import DEFAULT_TEMPLATE
from create_toolchain.core.resolver import (
    TemplateDescriptor,
    TemplateReferenceKind,
    classify_template,
    parse_template_descriptor,
    resolve_template_install_package,
)


def _resolve(template: str | None, base_dir: str = "/work") -> str:
    return resolve_template_install_package(template, base_dir, default_template="default-template")


# ---------------------------------------------------------------------------
# Default template base "default-template"
# ---------------------------------------------------------------------------


class TestDefaultTemplateFamily:
    @pytest.mark.parametrize("template", [None, ""])
    def test_absent_template_gives_default(self, template):
        assert _resolve(template) == "default-template"

    @pytest.mark.parametrize(
        ("template", "expected"),
        [
            ("default-template", "default-template"),
            ("default-template-rollup-library", "default-template-rollup-library"),
            ("default-template@next", "default-template@next"),
            ("@scope/default-template", "@scope/default-template"),
            ("@scope/default-template@next", "@scope/default-template@next"),
            (
                "@scope/default-template-rollup-library@next",
                "@scope/default-template-rollup-library@next",
            ),
        ],
    )
    def test_prefixed_names_pass_through(self, template, expected):
        assert _resolve(template) == expected

    def test_scope_only_gets_default_template(self):
        assert _resolve("@scope") == "@scope/default-template"

    @pytest.mark.parametrize(
        ("template", "expected"),
        [
            ("my-template", "default-template-my-template"),
            ("my-template@next", "default-template-my-template@next"),
            ("@scope/my-template", "@scope/default-template-my-template"),
            ("@scope/my-template@1.0.0", "@scope/default-template-my-template@1.0.0"),
        ],
    )
    def test_plain_names_get_prefix(self, template, expected):
        assert _resolve(template) == expected

    def test_name_that_only_contains_default_is_prefixed(self):
        assert _resolve("default-templates") == "default-template-default-templates"
        assert _resolve("my-default-template") == "default-template-my-default-template"


class TestRemoteArchives:
    @pytest.mark.parametrize(
        "template",
        [
            "http://example.com/x.tar.gz",
            "https://example.com/tjs-template-app-0.1.0.tgz",
            "git+https://github.com/org/repo.git",
            "../local/template-1.0.0.tgz",
            "template.tar.gz",
        ],
    )
    def test_archives_and_urls_unchanged(self, template):
        assert _resolve(template) == template

    def test_bare_extension_is_not_an_archive(self):
        assert classify_template(".tgz") is TemplateReferenceKind.PACKAGE


class TestLocalPaths:
    def test_relative_path_resolved_against_base_dir(self, tmp_path: Path):
        base = tmp_path / "projects" / "caller"
        expected = "file:" + os.path.abspath(os.path.join(base, "../my-template"))
        assert resolve_template_install_package("file:../my-template", base) == expected

    def test_absolute_path_kept(self, tmp_path: Path):
        target = tmp_path / "tpl"
        assert resolve_template_install_package(f"file:{target}", "/elsewhere") == f"file:{target}"

    def test_empty_path_is_base_dir(self, tmp_path: Path):
        assert resolve_template_install_package("file:", tmp_path) == f"file:{tmp_path}"

    def test_defaults_to_cwd(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.chdir(tmp_path)
        resolved = resolve_template_install_package("file:sub")
        assert resolved == "file:" + os.path.join(os.getcwd(), "sub")

    def test_file_prefix_wins_over_archive(self, tmp_path: Path):
        resolved = resolve_template_install_package("file:pkg.tgz", tmp_path)
        assert resolved == f"file:{tmp_path / 'pkg.tgz'}"


class TestIdempotence:
    @pytest.mark.parametrize(
        "template",
        [
            "my-template",
            "@scope",
            "@scope/my-template@1.0.0",
            "default-template@next",
            "x@y@z",
        ],
    )
    def test_resolving_output_again_is_stable(self, template):
        once = _resolve(template)
        assert _resolve(once) == once


# ---------------------------------------------------------------------------
# Shipped default "tjs-template"
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    ("template", "expected"),
    [
        ("tjs-template", "tjs-template"),
        ("tjs-template-rollup-library", "tjs-template-rollup-library"),
        ("tjs-template@next", "tjs-template@next"),
        ("tjs-template-rollup-library@next", "tjs-template-rollup-library@next"),
        ("@toolchain-js", "@toolchain-js/tjs-template"),
        ("@toolchain-js/tjs-template", "@toolchain-js/tjs-template"),
        ("@toolchain-js/tjs-template@next", "@toolchain-js/tjs-template@next"),
        (
            "@toolchain-js/tjs-template-rollup-library@next",
            "@toolchain-js/tjs-template-rollup-library@next",
        ),
        ("http://example.com/tjs-template.tar.gz", "http://example.com/tjs-template.tar.gz"),
    ],
)
def test_shipped_default_template(template, expected):
    assert DEFAULT_TEMPLATE == "tjs-template"
    assert resolve_template_install_package(template, "/work") == expected


# ---------------------------------------------------------------------------
# Edge cases outside the documented table
# ---------------------------------------------------------------------------


class TestEdgeCases:
    def test_scope_with_empty_name_gets_empty_suffix(self):
        assert _resolve("@scope/") == "@scope/default-template-"
        assert _resolve("@scope/@next") == "@scope/default-template-@next"

    def test_lone_at_sign_gets_empty_suffix(self):
        assert _resolve("@") == "default-template-"

    def test_dangling_at_sign_dropped(self):
        assert _resolve("foo@") == "default-template-foo"

    def test_version_keeps_extra_separators(self):
        assert _resolve("foo@npm:bar@1/2") == "default-template-foo@npm:bar@1/2"

    def test_slash_right_after_at_is_not_a_scope(self):
        assert _resolve("@/x") == "@/x/default-template"

    @pytest.mark.parametrize("template", ["@", "@@", "@/", "/", " ", "a b", "\n", "@a/@b/@c", "🙂"])
    def test_never_raises(self, template):
        assert isinstance(_resolve(template), str)

    def test_concurrent_calls_do_not_interfere(self):
        inputs = ["my-template", "@scope", "@scope/x@1", "default-template"] * 50
        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(_resolve, inputs))
        assert results == [_resolve(t) for t in inputs]


class TestParseTemplateDescriptor:
    @pytest.mark.parametrize(
        ("template", "scope", "name", "version"),
        [
            ("name", "", "name", ""),
            ("name@1.0.0", "", "name", "@1.0.0"),
            ("@scope/name", "@scope/", "name", ""),
            ("@scope/name@next", "@scope/", "name", "@next"),
            ("@scope", "", "", "@scope"),
            ("@scope/a/b", "@scope/", "a/b", ""),
            ("a@b@c", "", "a", "@b@c"),
        ],
    )
    def test_parts(self, template, scope, name, version):
        descriptor = parse_template_descriptor(template)
        assert descriptor == TemplateDescriptor(scope=scope, name=name, version=version)

    @pytest.mark.parametrize("template", ["name", "@scope/name@next", "@scope", "a@b@c"])
    def test_reassembles_well_formed_input(self, template):
        assert str(parse_template_descriptor(template)) == template

    def test_to_dict(self):
        assert parse_template_descriptor("@s/n@v").to_dict() == {"scope": "@s/", "name": "n", "version": "@v"}


class TestClassifyTemplate:
    @pytest.mark.parametrize(
        ("template", "kind"),
        [
            ("file:../x", TemplateReferenceKind.LOCAL_PATH),
            ("file:https://x/y.tgz", TemplateReferenceKind.LOCAL_PATH),
            ("https://example.com/x", TemplateReferenceKind.ARCHIVE),
            ("x.tgz", TemplateReferenceKind.ARCHIVE),
            ("x.tar.gz", TemplateReferenceKind.ARCHIVE),
            ("x.zip", TemplateReferenceKind.PACKAGE),
            ("@scope/x", TemplateReferenceKind.PACKAGE),
        ],
    )
    def test_priority_order(self, template, kind):
        assert classify_template(template) is kind
