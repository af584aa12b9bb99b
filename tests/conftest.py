import pytest

CSPROJ = """\
<Project Sdk="Microsoft.NET.Sdk">
  <PropertyGroup>
    <TargetFramework>net8.0</TargetFramework>
    <RootNamespace>Acme.Shop</RootNamespace>
  </PropertyGroup>
</Project>
"""


@pytest.fixture
def csharp_project(tmp_path):
    """A .csproj project with a nested Models/Orders directory."""
    root = tmp_path / "Shop"
    (root / "Models" / "Orders").mkdir(parents=True)
    (root / "Shop.csproj").write_text(CSPROJ)
    return root


@pytest.fixture(autouse=True)
def no_editor(monkeypatch):
    monkeypatch.delenv("EDITOR", raising=False)
    monkeypatch.delenv("VISUAL", raising=False)
    monkeypatch.delenv("NEWFILE_DEBUG", raising=False)
