"""数据模型测试 - 依赖解析 / 版本比较 / 切分 / 产物文件名"""

from __future__ import annotations

import pytest

from aurforge.core.models import (
    AllSourced,
    Anything,
    AtLeast,
    Build,
    Buildable,
    Built,
    Dep,
    Failure,
    LessThan,
    MoreThan,
    MustBe,
    Package,
    PackagePath,
    Pacman,
    ParsedVersion,
    SimplePkg,
    built_paths,
    is_devel_pkg,
    package_from_buildable,
    parse_dep,
    parse_version,
    partition_pkgs,
    simple_pkg,
)


class TestParseDep:
    """依赖串解析"""

    @pytest.mark.parametrize("token,expected", [
        ("foo>=1.2", Dep("foo", AtLeast("1.2"))),
        ("bar>2", Dep("bar", MoreThan("2"))),
        ("baz<3.0", Dep("baz", LessThan("3.0"))),
        ("qux=1", Dep("qux", MustBe("1"))),
        ("plain", Dep("plain", Anything())),
    ])
    def test_operators(self, token: str, expected: Dep) -> None:
        assert parse_dep(token) == expected

    def test_le_splits_at_first_operator(self) -> None:
        """<= 在 < 处切分，剩余部分原样保留"""
        assert parse_dep("foo<=2") == Dep("foo", LessThan("=2"))

    def test_empty_string(self) -> None:
        assert parse_dep("") == Dep("", Anything())

    @pytest.mark.parametrize("token", ["foo>=1.2", "bar>2", "baz<3", "qux=1", "plain"])
    def test_str_renders_back(self, token: str) -> None:
        assert str(parse_dep(token)) == token


class TestParsedVersion:

    def test_parse_full(self) -> None:
        v = parse_version("2:1.4.0-3")
        assert v == ParsedVersion(2, "1.4.0", "3")
        assert str(v) == "2:1.4.0-3"

    def test_parse_without_epoch(self) -> None:
        v = parse_version("1.0-1")
        assert v is not None
        assert v.epoch == 0
        assert str(v) == "1.0-1"

    @pytest.mark.parametrize("text", ["", "not a version", "1.0-rel"])
    def test_unparseable_returns_none(self, text: str) -> None:
        assert parse_version(text) is None

    def test_ordering(self) -> None:
        versions = [parse_version(t) for t in ["1.10-1", "1.2-1", "1:0.1-1", "1.2-2"]]
        ordered = sorted(versions)
        assert [str(v) for v in ordered] == ["1.2-1", "1.2-2", "1.10-1", "1:0.1-1"]


class TestPartition:
    """按安装方式切分"""

    def _buildable(self, name: str) -> Buildable:
        return Buildable(name=name, base_name=name, pkgbuild="")

    def test_stable_partition(self) -> None:
        b1, b2 = self._buildable("yay"), self._buildable("paru")
        pkgs = [
            Package("glibc", "2.38", install_type=Pacman("core")),
            package_from_buildable(b1),
            Package("bash", "5.2", install_type=Pacman("core")),
            package_from_buildable(b2),
        ]
        repo, builds = partition_pkgs(pkgs)
        assert repo == ["glibc", "bash"]
        assert builds == [b1, b2]

    def test_empty(self) -> None:
        assert partition_pkgs([]) == ([], [])

    def test_package_from_buildable(self) -> None:
        b = Buildable(
            name="foo", base_name="foo", pkgbuild="",
            deps=[Dep("bar")], version=ParsedVersion(0, "1.0", "1"),
        )
        pkg = package_from_buildable(b)
        assert pkg.name == "foo"
        assert pkg.version == "1.0-1"
        assert pkg.deps == [Dep("bar")]
        assert pkg.install_type == Build(b)


class TestDevelPkg:

    @pytest.mark.parametrize("name,expected", [
        ("neovim-git", True),
        ("foo-hg", True),
        ("bar-svn", True),
        ("baz-darcs", True),
        ("qux-cvs", True),
        ("quux-bzr", True),
        ("neovim", False),
        ("git", False),
        ("gitkraken", False),
    ])
    def test_suffix(self, name: str, expected: bool) -> None:
        assert is_devel_pkg(name) is expected


class TestSimplePkg:
    """产物文件名解析"""

    def test_parse(self) -> None:
        key = simple_pkg(PackagePath("/var/cache/pacman/pkg/python-foo-1.2.3-1-x86_64.pkg.tar.zst"))
        assert key == SimplePkg("python-foo", "1.2.3", "1", "x86_64")

    def test_any_arch_and_xz(self) -> None:
        key = simple_pkg(PackagePath("ttf-font-2:3.0-2-any.pkg.tar.xz"))
        assert key == SimplePkg("ttf-font", "2:3.0", "2", "any")

    @pytest.mark.parametrize("name", [
        "README",
        "foo-1.0-1-x86_64.pkg.tar.zst.sig",
        "foo-1.0-x86_64.pkg.tar.zst",
        "foo-1.0-1-x86_64.src.tar.gz",
    ])
    def test_rejects_other_files(self, name: str) -> None:
        assert simple_pkg(PackagePath(name)) is None

    def test_parsed_version(self) -> None:
        assert SimplePkg("foo", "1.0", "2", "any").parsed_version == ParsedVersion(0, "1.0", "2")


class TestBuildResult:

    def test_built_requires_paths(self) -> None:
        with pytest.raises(ValueError):
            Built(())

    def test_built_paths(self) -> None:
        paths = (PackagePath("a.pkg.tar.zst"),)
        assert built_paths(Built(paths)) == paths
        assert built_paths(AllSourced()) is None

    def test_failure_kinds(self) -> None:
        assert Failure.silent().is_silent
        f = Failure.msg("坏了")
        assert not f.is_silent
        assert f.message == "坏了"
