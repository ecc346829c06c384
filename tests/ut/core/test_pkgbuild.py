"""构建脚本变量提取测试"""

from __future__ import annotations

from aurforge.core.pkgbuild import namespace_value, parse_namespace

SCRIPT = """\
# Maintainer: someone
pkgbase=foo
pkgname=('foo' 'foo-docs')
pkgver=1.2.3 # 上游版本
pkgrel=2
pkgdesc="A tool with spaces"
depends=('glibc'
         'zlib>=1.2'  # 压缩
)
makedepends=()
options=
build() {
  pkgver=9.9
  if true; then
    make
  fi
}

package_foo() {
  install -Dm755 foo "$pkgdir/usr/bin/foo"
}
url="https://example.org"
"""


class TestParseNamespace:

    def test_scalars(self) -> None:
        ns = parse_namespace(SCRIPT)
        assert ns["pkgbase"] == ["foo"]
        assert ns["pkgrel"] == ["2"]
        assert ns["pkgdesc"] == ["A tool with spaces"]

    def test_trailing_comment_dropped(self) -> None:
        assert parse_namespace(SCRIPT)["pkgver"] == ["1.2.3"]

    def test_arrays(self) -> None:
        ns = parse_namespace(SCRIPT)
        assert ns["pkgname"] == ["foo", "foo-docs"]
        assert ns["depends"] == ["glibc", "zlib>=1.2"]
        assert ns["makedepends"] == []

    def test_empty_value(self) -> None:
        assert parse_namespace(SCRIPT)["options"] == [""]

    def test_function_bodies_skipped(self) -> None:
        """函数体内的赋值不覆盖顶层值，函数之后的赋值照常识别"""
        ns = parse_namespace(SCRIPT)
        assert ns["pkgver"] == ["1.2.3"]
        assert ns["url"] == ["https://example.org"]

    def test_unbalanced_quote_skipped(self) -> None:
        ns = parse_namespace('pkgname=ok\npkgdesc="unterminated\n')
        assert ns == {"pkgname": ["ok"]}

    def test_unterminated_array(self) -> None:
        ns = parse_namespace("depends=('a'\n'b'\n")
        assert ns["depends"] == ["a", "b"]

    def test_empty_text(self) -> None:
        assert parse_namespace("") == {}


class TestNamespaceValue:

    def test_first_value(self) -> None:
        assert namespace_value({"pkgname": ["a", "b"]}, "pkgname") == "a"

    def test_default(self) -> None:
        assert namespace_value({}, "pkgver", "0") == "0"
        assert namespace_value({"x": []}, "x", "d") == "d"
