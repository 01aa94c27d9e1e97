"""Tests for build descriptor discovery"""

from package_deployer.core.project_discovery import discover_projects, strip_extension


def touch(path):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("<Project />")


def test_finds_descriptors_in_subdirectories(tmp_path):
    touch(tmp_path / "src" / "Widget.Core" / "Widget.Core.csproj")
    touch(tmp_path / "src" / "Widget.Cli" / "Widget.Cli.CSPROJ")
    touch(tmp_path / "README.md")

    projects = discover_projects(tmp_path, ".csproj")

    assert projects == {
        "Widget.Core": tmp_path / "src" / "Widget.Core",
        "Widget.Cli": tmp_path / "src" / "Widget.Cli",
    }


def test_descriptor_at_root_is_found(tmp_path):
    touch(tmp_path / "Single.csproj")
    assert discover_projects(tmp_path, ".csproj") == {"Single": tmp_path}


def test_build_output_and_git_are_skipped(tmp_path):
    touch(tmp_path / ".git" / "Hidden.csproj")
    touch(tmp_path / "Core" / "bin" / "Debug" / "Copy.csproj")
    touch(tmp_path / "Core" / "obj" / "Temp.csproj")
    touch(tmp_path / "Core" / "Core.csproj")

    assert list(discover_projects(tmp_path, ".csproj")) == ["Core"]


def test_duplicate_names_keep_first_in_sorted_order(tmp_path):
    touch(tmp_path / "a" / "Core.csproj")
    touch(tmp_path / "b" / "Core.csproj")
    assert discover_projects(tmp_path, ".csproj") == {"Core": tmp_path / "a"}


def test_missing_root_gives_nothing(tmp_path):
    assert discover_projects(tmp_path / "absent", ".csproj") == {}


def test_other_extension(tmp_path):
    touch(tmp_path / "lib" / "Lib.fsproj")
    touch(tmp_path / "app" / "App.csproj")
    assert list(discover_projects(tmp_path, ".fsproj")) == ["Lib"]


def test_strip_extension():
    assert strip_extension("Widget.Core.csproj", ".csproj") == "Widget.Core"
    assert strip_extension("Widget.CSPROJ", ".csproj") == "Widget"
    assert strip_extension("Widget.txt", ".csproj") == "Widget.txt"
